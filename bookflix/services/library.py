import random
from collections.abc import Callable

import httpx
from loguru import logger

from bookflix.core.config import settings
from bookflix.core.constants import PROFILE_SAMPLE_SIZE
from bookflix.core.errors import EngineNotReady, LoadError
from bookflix.models.catalog import BookItem, Catalog
from bookflix.models.results import SearchResult
from bookflix.models.session import LoadState
from bookflix.services.catalog import CatalogStore
from bookflix.services.inference.base import InferenceAdapter
from bookflix.services.recommendation.engine import RecommendationEngine
from bookflix.services.resources import ResourceClient
from bookflix.services.search import SearchIndex

AdapterFactory = Callable[[bytes, Catalog], InferenceAdapter]


def torch_adapter_factory(blob: bytes, catalog: Catalog) -> InferenceAdapter:
    from bookflix.services.inference.torch_adapter import TorchRankingAdapter, load_model

    return TorchRankingAdapter(load_model(blob), catalog.item_count, timeout=settings.INFERENCE_TIMEOUT_SECONDS)


class LibraryService:
    """
    Single coordinator for one reading session.

    Loads the catalog and model, then owns the recommendation engine and the
    search index. The presentation layer talks to this object only.
    """

    def __init__(
        self,
        client: ResourceClient | None = None,
        engine: RecommendationEngine | None = None,
        adapter_factory: AdapterFactory | None = None,
        auto_select_user: bool | None = None,
    ):
        self.client = client or ResourceClient()
        self.engine = engine or RecommendationEngine(
            rng=random.Random(settings.RANDOM_SEED),
            unknown_user_policy=settings.UNKNOWN_USER_POLICY,
        )
        self.adapter_factory = adapter_factory or torch_adapter_factory
        self.auto_select_user = settings.AUTO_SELECT_USER if auto_select_user is None else auto_select_user

        self.state = LoadState.LOADING
        self.error: str | None = None
        self.catalog: Catalog | None = None
        self.search_index: SearchIndex | None = None

    async def load_all(self) -> Catalog:
        """
        Fetch and parse every resource, then hand them to the engine.

        Titles, vocabulary and the model are required; on failure the state
        becomes FAILED and LoadError is raised. Image problems only degrade.
        """
        self.state = LoadState.LOADING
        self.error = None
        try:
            raw = await self.client.fetch_catalog_sources()
            catalog = CatalogStore.load(raw.titles, raw.images, raw.vocab)
            blob = await self.client.fetch_model()
            adapter = self.adapter_factory(blob, catalog)
        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            self._fail(f"Failed to fetch resources: {e}")
            raise LoadError(self.error) from e
        except LoadError as e:
            self._fail(str(e))
            raise

        self.catalog = catalog
        self.search_index = SearchIndex(catalog.titles)
        self.engine.attach(catalog, adapter)
        self.state = LoadState.READY
        logger.info(
            f"Resources loaded. Titles: {catalog.item_count}, Vocab: {len(catalog.user_vocab)}, "
            f"Model: {type(adapter).__name__}"
        )

        if self.auto_select_user and not self.engine.session.is_selected:
            user_id = self.pick_random_user()
            if user_id is None:
                logger.warning("No valid users found in vocab")
            else:
                logger.info(f"Auto-selected user: {user_id}")
                self.engine.select_user(user_id)
        return catalog

    def _fail(self, message: str):
        self.state = LoadState.FAILED
        self.error = message
        logger.error(f"Error loading resources: {message}")

    async def close(self):
        await self.engine.wait_until_settled()
        await self.client.close()

    def require_ready(self) -> Catalog:
        if self.state != LoadState.READY or self.catalog is None:
            detail = self.error if self.state == LoadState.FAILED else "Resources are still loading"
            raise EngineNotReady(detail)
        return self.catalog

    # Profiles ---------------------------------------------------------------

    def selectable_users(self) -> list[str]:
        return self.require_ready().selectable_users()

    def sample_profiles(self, count: int = PROFILE_SAMPLE_SIZE) -> list[str]:
        """A random handful of selectable users for the profile picker."""
        users = self.selectable_users()
        return self.engine.rng.sample(users, min(count, len(users)))

    def pick_random_user(self) -> str | None:
        users = self.selectable_users()
        return self.engine.rng.choice(users) if users else None

    # Engine boundary --------------------------------------------------------

    def select_user(self, user_id: str):
        self.require_ready()
        return self.engine.select_user(user_id)

    def toggle_like(self, item_id: int):
        self.require_ready()
        return self.engine.toggle_like(item_id)

    def get_item(self, item_id: int) -> BookItem | None:
        return self.require_ready().get_item(item_id)

    def random_items(self, count: int) -> list[int]:
        self.require_ready()
        return self.engine.random_items(count)

    def current_recommendations(self) -> list[int]:
        return self.engine.current_recommendations()

    def similar_items(self, liked_id: int, count: int) -> list[int]:
        return self.engine.similar_items(liked_id, count)

    def search(self, query: str) -> list[int]:
        return self.scan(query).item_ids

    def scan(self, query: str) -> SearchResult:
        self.require_ready()
        return self.search_index.scan(query)

    async def wait_until_settled(self):
        await self.engine.wait_until_settled()
