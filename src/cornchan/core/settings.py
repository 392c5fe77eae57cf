"""Application settings and configuration.

This module defines all configuration options for the cornchan backend.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="cornchan", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Redis holds boards, threads, the post counter and the ban table
    redis_url: str = Field(default="redis://localhost:6379", alias="REDIS_URL")

    # Uploaded images are written here, one flat file per identifier
    public_dir: str = Field(default="public", alias="PUBLIC_DIR")

    # Image ingestion tuning
    image_min_bytes: int = Field(default=64, alias="IMAGE_MIN_BYTES")
    image_sniff_bytes: int = Field(default=32, alias="IMAGE_SNIFF_BYTES")
    image_size_threshold: int = Field(default=200 * 1024, alias="IMAGE_SIZE_THRESHOLD")
    image_lossy_quality: int = Field(default=50, ge=0, le=100, alias="IMAGE_LOSSY_QUALITY")

    # Posting
    default_nickname: str = Field(default="Anonymous", alias="DEFAULT_NICKNAME")

    # Board seeded on startup, mirroring the admin CLI
    seed_default_board: bool = Field(default=True, alias="SEED_DEFAULT_BOARD")
    default_board_name: str = Field(default="test board", alias="DEFAULT_BOARD_NAME")
    default_board_description: str = Field(
        default="board for testing",
        alias="DEFAULT_BOARD_DESCRIPTION",
    )

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )


settings = Settings()
