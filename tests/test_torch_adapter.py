import io
import time

import pytest

torch = pytest.importorskip("torch")

from bookflix.core.errors import LoadError  # noqa: E402
from bookflix.services.inference.torch_adapter import TorchRankingAdapter, load_model  # noqa: E402


class Ranker(torch.nn.Module):
    def __init__(self, scores: list[float]):
        super().__init__()
        self.register_buffer("scores", torch.tensor(scores))

    def forward(self, user_indices: torch.Tensor) -> torch.Tensor:
        return self.scores + user_indices.to(torch.float32) * 0.0


def scripted_blob(scores: list[float]) -> bytes:
    buffer = io.BytesIO()
    torch.jit.save(torch.jit.script(Ranker(scores)), buffer)
    return buffer.getvalue()


async def test_rank_sanitizes_model_output():
    model = load_model(scripted_blob([3.4, -2.0, 7.6, 99.0, 0.5]))
    adapter = TorchRankingAdapter(model, item_count=10)

    result = await adapter.rank(1)
    assert result.ok
    assert result.indices == [3, 2, 8, 1]


async def test_rank_takes_first_output_of_tuple():
    adapter = TorchRankingAdapter(lambda users: (torch.tensor([5.0, 6.0]), torch.tensor([0.1])), item_count=10)

    result = await adapter.rank(0)
    assert result.indices == [5, 6]


async def test_rank_failure_is_reported_not_raised():
    def broken(users):
        raise RuntimeError("bad graph")

    result = await TorchRankingAdapter(broken, item_count=10).rank(0)
    assert not result.ok
    assert result.indices == []
    assert "bad graph" in str(result.error)


async def test_rank_timeout():
    def slow(users):
        time.sleep(0.3)
        return torch.tensor([1.0])

    result = await TorchRankingAdapter(slow, item_count=10, timeout=0.05).rank(0)
    assert not result.ok
    assert "timed out" in str(result.error)


def test_load_model_rejects_garbage():
    with pytest.raises(LoadError):
        load_model(b"definitely not a model")
