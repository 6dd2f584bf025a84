from enum import Enum

from pydantic import BaseModel


class LoadState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class UserSession(BaseModel):
    user_id: str | None = None
    user_index: int | None = None

    @property
    def is_selected(self) -> bool:
        return self.user_index is not None
