import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from bookflix.api.main import api_router
from bookflix.core.errors import LoadError
from bookflix.services.library import LibraryService

from .config import settings
from .version import __version__


async def _load_task(library: LibraryService) -> None:
    """Background load; a failure stays visible through the library's load state."""
    try:
        await library.load_all()
    except LoadError as e:
        logger.error(f"BookFlix resources failed to load: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events (startup/shutdown).
    """
    library = getattr(app.state, "library", None)
    load_task = None
    if library is None:
        library = LibraryService()
        app.state.library = library
        load_task = asyncio.create_task(_load_task(library))
    yield
    if load_task is not None and not load_task.done():
        load_task.cancel()
    try:
        await library.close()
        logger.info("Library service closed")
    except Exception as exc:
        logger.warning(f"Failed to close library service: {exc}")


app = FastAPI(
    title="BookFlix",
    description="Book recommendation engine with model ranking and liked-item blending",
    version=__version__,
    lifespan=lifespan,
    docs_url=None if settings.APP_ENV != "development" else "/docs",
    redoc_url=None if settings.APP_ENV != "development" else "/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)
