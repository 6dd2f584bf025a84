import asyncio
import json
import random

import httpx
import pytest

from bookflix.core.errors import InferenceError
from bookflix.models.catalog import Catalog
from bookflix.models.results import RankingResult
from bookflix.services.inference.base import InferenceAdapter
from bookflix.services.library import LibraryService
from bookflix.services.recommendation.engine import RecommendationEngine
from bookflix.services.resources import ResourceClient

VOCAB = ["[UNK]", "user_1", "user_2", "user_3"]


class FakeRankingAdapter(InferenceAdapter):
    """
    In-memory ranker.

    `responses` maps a user index to its ranking (falling back to `default`).
    A user index listed in `gates` waits on that event before answering.
    """

    def __init__(
        self,
        default: list[int] | None = None,
        responses: dict[int, list[int]] | None = None,
        error: str | None = None,
        raises: bool = False,
    ):
        self.default = list(default or [])
        self.responses = responses or {}
        self.error = error
        self.raises = raises
        self.gates: dict[int, asyncio.Event] = {}
        self.calls: list[int] = []

    async def rank(self, user_index: int) -> RankingResult:
        self.calls.append(user_index)
        gate = self.gates.get(user_index)
        if gate is not None:
            await gate.wait()
        else:
            await asyncio.sleep(0)
        if self.raises:
            raise RuntimeError("model exploded")
        if self.error:
            return RankingResult.failure(InferenceError(self.error))
        return RankingResult(indices=list(self.responses.get(user_index, self.default)))


def make_catalog(count: int = 5000, vocab: list[str] | None = None) -> Catalog:
    titles = tuple(f"Book {i}" for i in range(count))
    images = tuple(f"https://covers.example/{i}.jpg" for i in range(count))
    return Catalog(titles=titles, images=images, user_vocab=tuple(vocab or VOCAB))


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def catalog():
    return make_catalog()


@pytest.fixture
def adapter():
    return FakeRankingAdapter(default=list(range(100, 160)))


@pytest.fixture
def engine(rng, catalog, adapter):
    engine = RecommendationEngine(rng=rng)
    engine.attach(catalog, adapter)
    return engine


def resource_routes(
    titles: list | None = None,
    images: list | None = None,
    vocab: list | None = None,
) -> dict[str, tuple[int, str | bytes]]:
    titles = titles if titles is not None else ["Dune", "Dune Messiah", "Foundation"] + [
        f"Book {i}" for i in range(3, 200)
    ]
    images = images if images is not None else [f"https://covers.example/{i}.jpg" for i in range(len(titles))]
    vocab = vocab if vocab is not None else VOCAB
    return {
        "/book_titles.json": (200, json.dumps(titles)),
        "/book_images.json": (200, json.dumps(images)),
        "/user_vocab.json": (200, json.dumps(vocab)),
        "/model.pt": (200, b"fake-model"),
    }


def mock_client(routes: dict, max_retries: int = 1) -> ResourceClient:
    """
    ResourceClient backed by httpx.MockTransport.

    Route values are `(status, body)` or a list of them served in order
    (the last one repeats).
    """

    def handler(request: httpx.Request) -> httpx.Response:
        route = routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, text="not found")
        if isinstance(route, list):
            route = route.pop(0) if len(route) > 1 else route[0]
        status, body = route
        if isinstance(body, bytes):
            return httpx.Response(status, content=body)
        return httpx.Response(status, text=body)

    transport = httpx.MockTransport(handler)
    return ResourceClient(base_url="http://resources.test", max_retries=max_retries, transport=transport)


@pytest.fixture
def make_library(rng):
    def factory(routes=None, adapter: InferenceAdapter | None = None, auto_select_user: bool = False, **kwargs):
        ranker = adapter or FakeRankingAdapter(default=list(range(100, 160)))
        library = LibraryService(
            client=mock_client(routes if routes is not None else resource_routes(), **kwargs),
            engine=RecommendationEngine(rng=rng),
            adapter_factory=lambda blob, catalog: ranker,
            auto_select_user=auto_select_user,
        )
        return library

    return factory
