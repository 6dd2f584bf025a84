import asyncio
from dataclasses import dataclass

import httpx
from loguru import logger

from bookflix.core.base_client import BaseClient
from bookflix.core.config import settings
from bookflix.core.version import __version__


@dataclass
class RawResources:
    titles: str
    images: str
    vocab: str


class ResourceClient(BaseClient):
    """
    Client for the static catalog and model files.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"User-Agent": f"BookFlix/{__version__}"}
        super().__init__(
            base_url=base_url if base_url is not None else settings.RESOURCE_BASE_URL,
            timeout=timeout if timeout is not None else settings.RESOURCE_TIMEOUT_SECONDS,
            max_retries=max_retries if max_retries is not None else settings.RESOURCE_MAX_RETRIES,
            headers=headers,
            transport=transport,
        )

    async def fetch_catalog_sources(self) -> RawResources:
        """Fetch titles, images and vocabulary concurrently."""
        titles, images, vocab = await asyncio.gather(
            self.get_text(settings.TITLES_PATH),
            self.fetch_images(),
            self.get_text(settings.VOCAB_PATH),
        )
        return RawResources(titles=titles, images=images, vocab=vocab)

    async def fetch_images(self) -> str:
        # A missing image file degrades to blank covers instead of failing the load
        try:
            return await self.get_text(settings.IMAGES_PATH)
        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            logger.warning(f"Failed to fetch image data, using blank covers: {e}")
            return ""

    async def fetch_model(self) -> bytes:
        return await self.get_bytes(settings.MODEL_PATH)
