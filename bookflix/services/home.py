from pydantic import BaseModel, Field

from bookflix.core.constants import POPULAR_ROW_SIZE, SIMILAR_ROW_SIZE, TRENDING_ROW_SIZE
from bookflix.models.catalog import BookItem
from bookflix.services.library import LibraryService


def match_score(position: int) -> int:
    """Display percentage for the n-th top pick: 98, 96, ... never below 85."""
    return max(98 - position * 2, 85)


class HomeRow(BaseModel):
    id: str
    title: str
    items: list[BookItem] = Field(default_factory=list)
    match_scores: list[int] | None = None


class HomeFeedBuilder:
    """
    Composes the home page rows from engine reads.

    "Popular" and "Trending" are random picks drawn once per builder so they
    stay put while recommendations refresh.
    """

    def __init__(self, library: LibraryService):
        self.library = library
        self._popular: list[int] | None = None
        self._trending: list[int] | None = None

    def _items(self, ids: list[int]) -> list[BookItem]:
        items = (self.library.get_item(i) for i in ids)
        return [item for item in items if item is not None]

    def build(self) -> list[HomeRow]:
        library = self.library
        engine = library.engine
        rows: list[HomeRow] = []

        top_ids = engine.top_pick_ids()
        if top_ids:
            items = self._items(top_ids)
            rows.append(
                HomeRow(
                    id="top_picks",
                    title="Top Picks for You",
                    items=items,
                    match_scores=[match_score(i) for i in range(len(items))],
                )
            )

        liked = engine.liked_items()
        if liked:
            rows.append(HomeRow(id="saved", title="Your Saved Books", items=self._items(liked)))

        for liked_id in liked:
            book = library.get_item(liked_id)
            similar = library.similar_items(liked_id, SIMILAR_ROW_SIZE)
            if book is None or not similar:
                continue
            rows.append(
                HomeRow(id=f"liked-{liked_id}", title=f"Because you liked {book.title}", items=self._items(similar))
            )

        if self._popular is None:
            self._popular = library.random_items(POPULAR_ROW_SIZE)
        if self._trending is None:
            self._trending = library.random_items(TRENDING_ROW_SIZE)

        if self._popular:
            rows.append(HomeRow(id="popular", title="Popular Now", items=self._items(self._popular)))
        if self._trending:
            rows.append(HomeRow(id="trending", title="Trending Now", items=self._items(self._trending)))
        return rows
