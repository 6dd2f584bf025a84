from fastapi import APIRouter, Depends, HTTPException, Query

from bookflix.api.deps import get_ready_library
from bookflix.core.constants import TRENDING_ROW_SIZE
from bookflix.models.catalog import BookItem
from bookflix.services.library import LibraryService

router = APIRouter(prefix="/books", tags=["books"])


@router.get("/random", response_model=list[BookItem])
async def get_random_books(
    count: int = Query(TRENDING_ROW_SIZE, ge=1, le=100),
    library: LibraryService = Depends(get_ready_library),
) -> list[BookItem]:
    return [library.get_item(i) for i in library.random_items(count)]


@router.get("/{item_id}", response_model=BookItem)
async def get_book(item_id: int, library: LibraryService = Depends(get_ready_library)) -> BookItem:
    book = library.get_item(item_id)
    if book is None:
        raise HTTPException(status_code=404, detail=f"Book {item_id} not found")
    return book
