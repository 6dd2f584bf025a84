import asyncio
import random
from typing import Literal

from loguru import logger

from bookflix.core.constants import (
    LIKED_PICKS_PER_ITEM,
    RECOMMENDATION_LIST_SIZE,
    SIMILAR_ROW_SIZE,
    TOP_PICKS_COUNT,
    UNKNOWN_USER_TOKEN,
)
from bookflix.core.errors import EngineNotReady, InferenceError, ItemNotFound, UserNotFound
from bookflix.models.catalog import Catalog
from bookflix.models.results import RankingResult
from bookflix.models.session import UserSession
from bookflix.services.inference.base import InferenceAdapter
from bookflix.services.recommendation.blending import RecommendationBlending, walk_pool


class RecommendationEngine:
    """
    Owns the user session, the liked set and the published recommendation list.

    Selecting a user or toggling a like schedules a re-derivation on the running
    event loop. Each derivation is tagged with a generation number; a result that
    resolves after a newer trigger has fired is dropped instead of published.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        unknown_user_policy: Literal["accept", "reject"] = "accept",
        list_size: int = RECOMMENDATION_LIST_SIZE,
        top_picks: int = TOP_PICKS_COUNT,
        picks_per_liked: int = LIKED_PICKS_PER_ITEM,
    ):
        self.rng = rng or random.Random()
        self.unknown_user_policy = unknown_user_policy
        self.list_size = list_size
        self.top_picks = top_picks
        self.picks_per_liked = picks_per_liked

        self.catalog: Catalog | None = None
        self.adapter: InferenceAdapter | None = None
        self.session = UserSession()

        self._liked: dict[int, None] = {}  # insertion-ordered set
        self._recommendations: tuple[int, ...] = ()
        self._generation = 0
        self._pending: set[asyncio.Task] = set()
        self.publish_count = 0

    @property
    def is_ready(self) -> bool:
        return self.catalog is not None and self.adapter is not None and self.catalog.item_count > 0

    @property
    def generation(self) -> int:
        return self._generation

    def attach(self, catalog: Catalog, adapter: InferenceAdapter) -> asyncio.Task | None:
        """Plug in the loaded catalog and model. Derives at once if a user is already selected."""
        self.catalog = catalog
        self.adapter = adapter
        return self._trigger("resources ready")

    # Session ----------------------------------------------------------------

    def select_user(self, user_id: str) -> asyncio.Task | None:
        """
        Set the session user and schedule a re-derivation.

        Raises UserNotFound (leaving the session unchanged) for ids outside the
        vocabulary, and for "[UNK]" when the policy is "reject".
        """
        if self.catalog is None:
            raise EngineNotReady("Catalog is not loaded yet")

        if user_id == UNKNOWN_USER_TOKEN and self.unknown_user_policy == "reject":
            logger.error(f"Rejected selection of reserved user {user_id}")
            raise UserNotFound(user_id, "is the reserved unknown user")

        index = self.catalog.index_of_user(user_id)
        if index is None:
            logger.error(f"User ID not found in vocab: {user_id}")
            raise UserNotFound(user_id)

        self.session = UserSession(user_id=user_id, user_index=index)
        logger.info(f"Selected user {user_id} at index {index}")
        return self._trigger("user selected")

    def toggle_like(self, item_id: int) -> asyncio.Task | None:
        """Flip an item's membership in the liked set and schedule a re-derivation."""
        if self.catalog is None:
            raise EngineNotReady("Catalog is not loaded yet")
        if not self.catalog.has_item(item_id):
            raise ItemNotFound(item_id)

        if item_id in self._liked:
            del self._liked[item_id]
            logger.info(f"Unliked item {item_id} ({len(self._liked)} liked)")
        else:
            self._liked[item_id] = None
            logger.info(f"Liked item {item_id} ({len(self._liked)} liked)")
        return self._trigger("liked items changed")

    def is_liked(self, item_id: int) -> bool:
        return item_id in self._liked

    def liked_items(self) -> list[int]:
        return list(self._liked)

    # Derivation -------------------------------------------------------------

    def _trigger(self, reason: str) -> asyncio.Task | None:
        if not self.is_ready or not self.session.is_selected:
            return None

        self._generation += 1
        generation = self._generation
        logger.debug(f"Re-deriving recommendations (generation {generation}): {reason}")
        task = asyncio.create_task(self._derive(generation, self.session.user_index, list(self._liked)))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def refresh(self) -> bool:
        """Re-derive now and wait for the outcome. Returns True if a new list was published."""
        task = self._trigger("manual refresh")
        if task is None:
            return False
        return await task

    async def wait_until_settled(self):
        """Wait for every in-flight derivation, including ones scheduled meanwhile."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def _derive(self, generation: int, user_index: int, liked: list[int]) -> bool:
        try:
            result = await self.adapter.rank(user_index)
        except Exception as e:
            logger.exception(f"Inference adapter raised for user index {user_index}: {e}")
            result = RankingResult.failure(InferenceError(str(e)))

        if generation != self._generation:
            logger.debug(f"Discarding stale recommendations (generation {generation}, latest {self._generation})")
            return False

        if not result.ok:
            reason = result.error or "empty ranking"
            logger.warning(f"Inference gave no usable ranking ({reason}); publishing random fallback")
            self._publish(self.fallback_list(liked))
            return True

        candidate = self.derive_list(result.indices, liked)
        if RecommendationBlending.is_stable(self._recommendations, candidate, self.top_picks):
            logger.debug("Same books and order detected, skipping update")
            return False

        self._publish(candidate)
        return True

    def derive_list(self, ranked: list[int], liked: list[int]) -> list[int]:
        """Cap, pad, exclude liked items and blend in liked-item neighbours."""
        item_count = self.catalog.item_count
        top = RecommendationBlending.cap_unique(ranked, item_count, self.list_size)
        if len(top) < self.list_size:
            logger.warning(f"Model only returned {len(top)} items, padding with random books")
            top = RecommendationBlending.pad_random(top, item_count, self.rng, size=self.list_size)

        filtered = RecommendationBlending.exclude(top, liked)
        if not liked:
            return filtered
        return RecommendationBlending.blend_liked(
            filtered, liked, picks_per_item=self.picks_per_liked, size=self.list_size
        )

    def fallback_list(self, liked: list[int]) -> list[int]:
        return RecommendationBlending.sample_random(
            self.catalog.item_count, self.list_size, self.rng, excluded=liked
        )

    def _publish(self, recommendations: list[int]):
        self._recommendations = tuple(recommendations)
        self.publish_count += 1
        logger.info(f"Updated recommendations: {list(self._recommendations[: self.top_picks])}")

    # Reads ------------------------------------------------------------------

    @property
    def recommendations(self) -> tuple[int, ...]:
        """The published list itself; replaced, never mutated."""
        return self._recommendations

    def current_recommendations(self) -> list[int]:
        return list(self._recommendations)

    def top_pick_ids(self) -> list[int]:
        return list(self._recommendations[: self.top_picks])

    def similar_items(self, liked_id: int, count: int = SIMILAR_ROW_SIZE) -> list[int]:
        """Items "because you liked" `liked_id`, drawn from the list past the top picks."""
        pool = self._recommendations[self.top_picks :]
        return walk_pool(pool, liked_id, count)

    def random_items(self, count: int) -> list[int]:
        if self.catalog is None:
            return []
        return RecommendationBlending.sample_random(self.catalog.item_count, count, self.rng)
