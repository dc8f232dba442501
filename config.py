from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PKG_DIR = Path(__file__).resolve().parent
ENV_PATH = PKG_DIR / ".env"


class Settings(BaseSettings):
    # App
    app_env: str = "dev"
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
    allowed_origins: list[str] = Field(
        default_factory=lambda: ["*"], validation_alias="ALLOWED_ORIGINS"
    )

    # Storage
    database_url: str = Field(
        f"sqlite:///{PKG_DIR / 'eventboard.db'}", validation_alias="DATABASE_URL"
    )
    seed_genres: list[str] = Field(
        default_factory=lambda: [
            "Music",
            "Food & Drinks",
            "Arts & Culture",
            "Sports",
            "Comedy",
            "Nightlife",
            "Family",
            "Technology",
        ],
        validation_alias="SEED_GENRES",
    )

    # Auth
    auth_header: str = Field("X-User-UID", validation_alias="AUTH_HEADER")
    owner_uids: list[str] = Field(
        default_factory=list, validation_alias="OWNER_UIDS"
    )

    # Admin audit log
    actions_default_limit: int = 100
    actions_fallback_limit: int = 50
    actions_max_limit: int = 300

    # Client (Streamlit renderer)
    api_base: str = Field(
        "http://127.0.0.1:8000", validation_alias="EVENTBOARD_API"
    )
    placeholder_image: str = "https://placehold.co/400x200/667eea/white?text=Event"
    details_base_url: str = Field(
        "/event", validation_alias="EVENTBOARD_DETAILS_URL"
    )

    # HTTP client
    http_timeout_seconds: float = Field(
        8.0, validation_alias="HTTP_TIMEOUT_SECONDS"
    )
    http_max_retries: int = Field(
        4, validation_alias="HTTP_MAX_RETRIES"
    )

    # Favorites
    favorite_cooldown_seconds: float = Field(
        0.8, validation_alias="FAVORITE_COOLDOWN_SECONDS"
    )

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
