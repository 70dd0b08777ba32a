from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # make it absolute so reload/CWD doesn't break it
        env_file=Path(__file__).resolve().parents[1] / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="ObjectIndex", validation_alias="APP_NAME")
    app_env: Literal["development", "staging", "production"] = Field(
        default="development",
        validation_alias="APP_ENV",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_dir: Path = Field(
        default=Path(__file__).resolve().parents[1] / "logs",
        validation_alias="LOG_DIR",
    )

    # API
    api_host: str = Field(default="127.0.0.1", validation_alias="API_HOST")
    api_port: int = Field(default=8000, validation_alias="API_PORT")
    public_base_url: str = Field(
        default="http://127.0.0.1:8000",
        validation_alias="PUBLIC_BASE_URL",
        description="Externally reachable base URL of this service, used for locally signed URLs.",
    )

    # MongoDB
    mongo_uri: str = Field(
        default="mongodb://localhost:27017",
        validation_alias="MONGO_URI",
    )
    mongo_db: str = Field(default="object_index", validation_alias="MONGO_DB")
    mongo_uploads_collection: str = Field(
        default="uploads",
        validation_alias="MONGO_UPLOADS_COLLECTION",
    )

    # Blob Storage
    blob_base_url: str = Field(
        default="file://" + str(Path(__file__).resolve().parents[1] / "blobs"),
        validation_alias="BLOB_BASE_URL",
    )
    blob_storage_options: dict = {}
    blob_public_base_url: str | None = Field(
        default=None,
        validation_alias="BLOB_PUBLIC_BASE_URL",
        description="e.g. https://storage.googleapis.com/<bucket>. Falls back to the fsspec URL.",
    )
    blob_key_prefix: str = Field(default="images", validation_alias="BLOB_KEY_PREFIX")

    # Signed URLs
    signed_url_ttl_seconds: int = Field(
        default=7 * 24 * 60 * 60,
        validation_alias="SIGNED_URL_TTL_SECONDS",
        description="Seven days is the longest V4 signing horizon on both GCS and S3.",
    )
    url_signing_secret: str | None = Field(
        default=None,
        validation_alias="URL_SIGNING_SECRET",
        description="HMAC secret for backends without native signing. Random per process if unset.",
    )


# Global settings instance
settings = Settings()
