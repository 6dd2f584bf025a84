import random
from collections.abc import Iterable, Sequence

from bookflix.core.constants import (
    LIKED_OFFSET_MULTIPLIER,
    LIKED_PICKS_PER_ITEM,
    PADDING_MAX_ATTEMPTS,
    RANDOM_ATTEMPTS_PER_ITEM,
    RANDOM_POOL_LIMIT,
    RECOMMENDATION_LIST_SIZE,
    TOP_PICKS_COUNT,
)


def walk_pool(
    pool: Sequence[int],
    anchor_id: int,
    steps: int,
    selected: list[int] | None = None,
    multiplier: int = LIKED_OFFSET_MULTIPLIER,
) -> list[int]:
    """
    Collect items from `pool` starting at a deterministic offset derived from `anchor_id`.

    Walks `steps` consecutive positions (wrapping) from `(anchor_id * multiplier) % len(pool)`,
    skipping the anchor itself and anything already in `selected`. Appends to and
    returns `selected`.
    """
    selected = [] if selected is None else selected
    if not pool:
        return selected

    seen = set(selected)
    offset = (anchor_id * multiplier) % len(pool)
    for i in range(steps):
        item = pool[(offset + i) % len(pool)]
        if item != anchor_id and item not in seen:
            selected.append(item)
            seen.add(item)
    return selected


class RecommendationBlending:
    """
    Pure list operations behind one re-derivation of the recommendation list.
    """

    @staticmethod
    def cap_unique(indices: Iterable[int], item_count: int, limit: int = RECOMMENDATION_LIST_SIZE) -> list[int]:
        """Keep the first `limit` distinct ids that are valid catalog positions."""
        capped: list[int] = []
        seen: set[int] = set()
        for idx in indices:
            if len(capped) >= limit:
                break
            if 0 <= idx < item_count and idx not in seen:
                capped.append(idx)
                seen.add(idx)
        return capped

    @staticmethod
    def pad_random(
        indices: list[int],
        item_count: int,
        rng: random.Random,
        size: int = RECOMMENDATION_LIST_SIZE,
        pool_limit: int = RANDOM_POOL_LIMIT,
        max_attempts: int = PADDING_MAX_ATTEMPTS,
    ) -> list[int]:
        """Fill a short list up to `size` with random unseen ids from the catalog head."""
        padded = list(indices)
        pool_size = min(item_count, pool_limit)
        if len(padded) >= size or pool_size <= 0:
            return padded

        existing = set(padded)
        attempts = 0
        while len(padded) < size and attempts < max_attempts:
            candidate = rng.randrange(pool_size)
            if candidate not in existing:
                padded.append(candidate)
                existing.add(candidate)
            attempts += 1
        return padded

    @staticmethod
    def exclude(indices: Iterable[int], excluded: Iterable[int]) -> list[int]:
        excluded_set = set(excluded)
        return [idx for idx in indices if idx not in excluded_set]

    @staticmethod
    def blend_liked(
        filtered: list[int],
        liked: Sequence[int],
        picks_per_item: int = LIKED_PICKS_PER_ITEM,
        size: int = RECOMMENDATION_LIST_SIZE,
        multiplier: int = LIKED_OFFSET_MULTIPLIER,
    ) -> list[int]:
        """
        Put liked-item-driven picks in front of the model-ranked list.

        Every liked item contributes up to `picks_per_item` neighbours from
        `filtered`; the rest of `filtered` follows in its original order.
        """
        liked_based: list[int] = []
        for liked_id in liked:
            walk_pool(filtered, liked_id, picks_per_item, liked_based, multiplier)

        chosen = set(liked_based)
        combined = liked_based + [idx for idx in filtered if idx not in chosen]
        return combined[:size]

    @staticmethod
    def is_stable(current: Sequence[int], candidate: Sequence[int], prefix: int = TOP_PICKS_COUNT) -> bool:
        """True when `candidate` holds the same items and the same top `prefix` order as `current`."""
        if not current:
            return False
        if set(current) != set(candidate):
            return False
        return list(current[:prefix]) == list(candidate[:prefix])

    @staticmethod
    def sample_random(
        item_count: int,
        count: int,
        rng: random.Random,
        pool_limit: int = RANDOM_POOL_LIMIT,
        attempts_per_item: int = RANDOM_ATTEMPTS_PER_ITEM,
        excluded: Iterable[int] = (),
    ) -> list[int]:
        """
        Sample up to `count` distinct ids from `[0, min(item_count, pool_limit))`.

        Bounded to `attempts_per_item * count` draws, so small catalogs return fewer.
        """
        pool_size = min(item_count, pool_limit)
        if pool_size <= 0 or count <= 0:
            return []

        seen = set(excluded)
        sampled: list[int] = []
        attempts = 0
        while len(sampled) < count and attempts < count * attempts_per_item:
            candidate = rng.randrange(pool_size)
            if candidate not in seen:
                sampled.append(candidate)
                seen.add(candidate)
            attempts += 1
        return sampled
