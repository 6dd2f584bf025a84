from fastapi import HTTPException, Request

from bookflix.core.errors import EngineNotReady
from bookflix.services.home import HomeFeedBuilder
from bookflix.services.library import LibraryService


def get_library(request: Request) -> LibraryService:
    library = getattr(request.app.state, "library", None)
    if library is None:
        raise HTTPException(status_code=503, detail="Library service is not initialised")
    return library


def get_ready_library(request: Request) -> LibraryService:
    """Library dependency for endpoints that need loaded resources."""
    library = get_library(request)
    try:
        library.require_ready()
    except EngineNotReady as e:
        raise HTTPException(status_code=503, detail=str(e))
    return library


def get_home_builder(request: Request) -> HomeFeedBuilder:
    library = get_ready_library(request)
    builder = getattr(request.app.state, "home", None)
    if builder is None or builder.library is not library:
        builder = HomeFeedBuilder(library)
        request.app.state.home = builder
    return builder
