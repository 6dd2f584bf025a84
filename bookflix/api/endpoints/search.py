from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from bookflix.api.deps import get_ready_library
from bookflix.models.catalog import BookItem
from bookflix.services.library import LibraryService

router = APIRouter(tags=["search"])


class SearchResponse(BaseModel):
    query: str
    active: bool
    total_matches: int = 0
    truncated: bool = False
    items: list[BookItem] = Field(default_factory=list)


@router.get("/search", response_model=SearchResponse)
async def search_books(q: str = Query(""), library: LibraryService = Depends(get_ready_library)) -> SearchResponse:
    result = library.scan(q)
    return SearchResponse(
        query=result.query,
        active=result.active,
        total_matches=result.total_matches,
        truncated=result.truncated,
        items=[library.get_item(i) for i in result.item_ids],
    )
