from fastapi import APIRouter, Depends, HTTPException

from bookflix.api.deps import get_ready_library
from bookflix.core.errors import ItemNotFound
from bookflix.services.library import LibraryService

router = APIRouter(prefix="/likes", tags=["likes"])


@router.get("")
async def get_likes(library: LibraryService = Depends(get_ready_library)) -> dict:
    return {"liked": library.engine.liked_items()}


@router.post("/{item_id}")
async def toggle_like(item_id: int, library: LibraryService = Depends(get_ready_library)) -> dict:
    """Flip the like on a book and wait for the refreshed recommendations."""
    try:
        task = library.toggle_like(item_id)
    except ItemNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    if task is not None:
        await task
    return {
        "item_id": item_id,
        "liked": library.engine.is_liked(item_id),
        "liked_items": library.engine.liked_items(),
    }
