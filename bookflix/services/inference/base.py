from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from bookflix.models.results import RankingResult


def sanitize_indices(raw: Any, item_count: int) -> list[int]:
    """
    Turn raw model output into usable item ids.

    Values are flattened, non-finite entries dropped, absolute-valued and
    rounded half-up, then filtered to [0, item_count). Order is kept.
    """
    values = np.asarray(raw, dtype=np.float64).ravel()
    values = values[np.isfinite(values)]
    rounded = np.floor(np.abs(values) + 0.5).astype(np.int64)
    valid = rounded[(rounded >= 0) & (rounded < item_count)]
    return [int(idx) for idx in valid]


class InferenceAdapter(ABC):
    """
    Interface for the ranking model.
    """

    @abstractmethod
    async def rank(self, user_index: int) -> RankingResult:
        """
        Return item ids in descending predicted affinity for a user.

        Implementations never raise: failures come back as an empty result
        carrying an InferenceError.
        """
        pass
