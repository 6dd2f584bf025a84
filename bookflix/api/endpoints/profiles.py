from fastapi import APIRouter, Depends, HTTPException, Query
from loguru import logger
from pydantic import BaseModel, Field

from bookflix.api.deps import get_ready_library
from bookflix.core.constants import PROFILE_SAMPLE_SIZE
from bookflix.core.errors import UserNotFound
from bookflix.services.library import LibraryService

router = APIRouter(tags=["session"])


class SelectUserRequest(BaseModel):
    user_id: str = Field(description="Identifier from the user vocabulary")


class SessionResponse(BaseModel):
    user_id: str | None = None
    user_index: int | None = None
    liked: list[int] = Field(default_factory=list)


def _session_response(library: LibraryService) -> SessionResponse:
    engine = library.engine
    return SessionResponse(
        user_id=engine.session.user_id,
        user_index=engine.session.user_index,
        liked=engine.liked_items(),
    )


@router.get("/profiles")
async def get_profiles(
    count: int = Query(PROFILE_SAMPLE_SIZE, ge=1, le=50),
    library: LibraryService = Depends(get_ready_library),
) -> dict:
    return {"profiles": library.sample_profiles(count)}


@router.get("/session", response_model=SessionResponse)
async def get_session(library: LibraryService = Depends(get_ready_library)) -> SessionResponse:
    return _session_response(library)


@router.put("/session/user", response_model=SessionResponse)
async def select_user(
    payload: SelectUserRequest, library: LibraryService = Depends(get_ready_library)
) -> SessionResponse:
    try:
        task = library.select_user(payload.user_id)
    except UserNotFound as e:
        logger.warning(f"Profile selection ignored: {e}")
        raise HTTPException(status_code=404, detail=str(e))
    if task is not None:
        await task
    return _session_response(library)
