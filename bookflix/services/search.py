from collections.abc import Sequence

from loguru import logger

from bookflix.core.constants import SEARCH_RESULT_LIMIT
from bookflix.models.results import SearchResult


class SearchIndex:
    """
    Case-insensitive substring search over catalog titles.

    Scans every title; matches come back in catalog order, capped for display.
    """

    def __init__(self, titles: Sequence[str], limit: int = SEARCH_RESULT_LIMIT):
        self.titles = titles
        self.limit = limit

    def scan(self, query: str) -> SearchResult:
        needle = (query or "").strip().lower()
        if not needle:
            return SearchResult(query=query or "", active=False)

        matches = [i for i, title in enumerate(self.titles) if isinstance(title, str) and needle in title.lower()]
        logger.debug(f"Search for {needle!r}: {len(matches)} matches in {len(self.titles)} books")
        return SearchResult(query=query, active=True, item_ids=matches[: self.limit], total_matches=len(matches))

    def search(self, query: str) -> list[int]:
        return self.scan(query).item_ids
