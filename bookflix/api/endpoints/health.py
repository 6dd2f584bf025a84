from fastapi import APIRouter, Depends

from bookflix.api.deps import get_library
from bookflix.services.library import LibraryService

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness plus resource load state")
async def health_check(library: LibraryService = Depends(get_library)) -> dict:
    payload = {"status": "ok", "load_state": library.state.value}
    if library.error:
        payload["detail"] = library.error
    if library.catalog is not None:
        payload["books"] = library.catalog.item_count
        payload["users"] = len(library.catalog.user_vocab)
    return payload
