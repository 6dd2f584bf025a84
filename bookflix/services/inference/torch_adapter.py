import asyncio
import io

import torch
from loguru import logger

from bookflix.core.errors import InferenceError, LoadError
from bookflix.models.results import RankingResult
from bookflix.services.inference.base import InferenceAdapter, sanitize_indices


def load_model(blob: bytes) -> torch.jit.ScriptModule:
    """Load a TorchScript ranking model from raw bytes."""
    try:
        model = torch.jit.load(io.BytesIO(blob), map_location="cpu")
    except Exception as e:
        raise LoadError(f"Failed to load ranking model: {e}") from e
    model.eval()
    return model


class TorchRankingAdapter(InferenceAdapter):
    """
    Runs the pre-trained TorchScript ranker.

    The model takes a 1-element int64 tensor of user indices and returns the
    ranked item ids (or a tuple/list whose first element holds them).
    """

    def __init__(self, model: torch.jit.ScriptModule, item_count: int, timeout: float | None = None):
        self.model = model
        self.item_count = item_count
        self.timeout = timeout

    def _predict(self, user_index: int) -> list[int]:
        user_indices = torch.tensor([user_index], dtype=torch.int64)
        with torch.inference_mode():
            output = self.model(user_indices)
        if isinstance(output, (tuple, list)):
            output = output[0]
        raw = output.detach().cpu().numpy()
        logger.debug(f"Raw model output for user {user_index}: {raw.ravel()[:10].tolist()}")
        return sanitize_indices(raw, self.item_count)

    async def rank(self, user_index: int) -> RankingResult:
        try:
            indices = await asyncio.wait_for(asyncio.to_thread(self._predict, user_index), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error(f"Inference timed out after {self.timeout}s for user index {user_index}")
            return RankingResult.failure(InferenceError(f"timed out after {self.timeout}s"))
        except Exception as e:
            logger.exception(f"Inference failed for user index {user_index}: {e}")
            return RankingResult.failure(InferenceError(str(e)))
        return RankingResult(indices=indices)
