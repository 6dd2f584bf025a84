class BookflixError(Exception):
    """Base class for engine errors."""


class LoadError(BookflixError):
    """Titles, vocabulary or model could not be fetched or parsed."""


class ImageDataDegraded(BookflixError):
    """Image payload was unusable; blank images are used instead."""


class InferenceError(BookflixError):
    """The ranking model failed or timed out."""


class UserNotFound(BookflixError):
    def __init__(self, user_id: str, reason: str = "not in vocabulary"):
        self.user_id = user_id
        super().__init__(f"User {user_id!r} {reason}")


class ItemNotFound(BookflixError):
    def __init__(self, item_id: int):
        self.item_id = item_id
        super().__init__(f"Item {item_id} is outside the catalog")


class EngineNotReady(BookflixError):
    """Raised when an operation needs resources that are not loaded yet."""
