from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from bookflix.api.deps import get_ready_library
from bookflix.core.constants import SIMILAR_ROW_SIZE
from bookflix.models.catalog import BookItem
from bookflix.services.home import match_score
from bookflix.services.library import LibraryService

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


class RecommendationsResponse(BaseModel):
    user_id: str | None = None
    item_ids: list[int] = Field(default_factory=list)
    items: list[BookItem] = Field(default_factory=list)
    top_pick_scores: list[int] = Field(default_factory=list)


@router.get("", response_model=RecommendationsResponse)
async def get_recommendations(library: LibraryService = Depends(get_ready_library)) -> RecommendationsResponse:
    ids = library.current_recommendations()
    top_picks = library.engine.top_pick_ids()
    return RecommendationsResponse(
        user_id=library.engine.session.user_id,
        item_ids=ids,
        items=[library.get_item(i) for i in ids],
        top_pick_scores=[match_score(i) for i in range(len(top_picks))],
    )


@router.get("/similar/{item_id}", response_model=list[BookItem])
async def get_similar(
    item_id: int,
    count: int = Query(SIMILAR_ROW_SIZE, ge=1, le=60),
    library: LibraryService = Depends(get_ready_library),
) -> list[BookItem]:
    if library.get_item(item_id) is None:
        raise HTTPException(status_code=404, detail=f"Book {item_id} not found")
    return [library.get_item(i) for i in library.similar_items(item_id, count)]
