from pydantic import BaseModel, ConfigDict, PrivateAttr

from bookflix.core.constants import UNKNOWN_BOOK_TITLE, UNKNOWN_USER_TOKEN


class BookItem(BaseModel):
    id: int
    title: str
    image: str = ""  # empty = no cover


class Catalog(BaseModel):
    """
    Immutable catalog of books and the user vocabulary.

    Item ids are positions in `titles`; `images` is kept the same length.
    A user's vocabulary position is the model's user-index input.
    """

    model_config = ConfigDict(frozen=True)

    titles: tuple[str, ...]
    images: tuple[str, ...]
    user_vocab: tuple[str, ...]

    _user_positions: dict[str, int] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context) -> None:
        positions: dict[str, int] = {}
        for position, user_id in enumerate(self.user_vocab):
            # first occurrence wins
            positions.setdefault(user_id, position)
        self._user_positions = positions

    @property
    def item_count(self) -> int:
        return len(self.titles)

    def has_item(self, index) -> bool:
        return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < len(self.titles)

    def get_item(self, index) -> BookItem | None:
        """Return the book at `index`, or None when out of range."""
        if not self.has_item(index):
            return None
        image = self.images[index] if index < len(self.images) else ""
        return BookItem(id=index, title=self.titles[index] or UNKNOWN_BOOK_TITLE, image=image)

    def index_of_user(self, user_id: str) -> int | None:
        return self._user_positions.get(user_id)

    def selectable_users(self) -> list[str]:
        """Vocabulary without the reserved unknown-user entry."""
        return [user_id for user_id in self.user_vocab if user_id != UNKNOWN_USER_TOKEN]
