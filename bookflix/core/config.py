from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    PORT: int = 8000
    APP_ENV: Literal["development", "production"] = "production"

    # Static resources: three JSON arrays plus the TorchScript ranking model
    RESOURCE_BASE_URL: str = "http://localhost:8080"
    TITLES_PATH: str = "/book_titles.json"
    IMAGES_PATH: str = "/book_images.json"
    VOCAB_PATH: str = "/user_vocab.json"
    MODEL_PATH: str = "/model.pt"
    RESOURCE_TIMEOUT_SECONDS: float = 30.0
    RESOURCE_MAX_RETRIES: int = 3

    # None = wait for the model indefinitely
    INFERENCE_TIMEOUT_SECONDS: float | None = 10.0

    # How an explicit selection of the reserved "[UNK]" user is treated
    UNKNOWN_USER_POLICY: Literal["accept", "reject"] = "accept"
    # Pick a random profile as soon as resources are loaded
    AUTO_SELECT_USER: bool = False
    # Seed for padding/fallback sampling; None = nondeterministic
    RANDOM_SEED: int | None = None


settings = Settings()
