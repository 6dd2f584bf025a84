from dataclasses import dataclass, field

from bookflix.core.errors import InferenceError


@dataclass
class RankingResult:
    """Outcome of one inference call: ranked item ids, or the error that replaced them."""

    indices: list[int] = field(default_factory=list)
    error: InferenceError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.indices)

    @classmethod
    def failure(cls, error: InferenceError) -> "RankingResult":
        return cls(indices=[], error=error)


@dataclass
class SearchResult:
    query: str
    active: bool
    item_ids: list[int] = field(default_factory=list)
    total_matches: int = 0

    @property
    def truncated(self) -> bool:
        return self.total_matches > len(self.item_ids)
