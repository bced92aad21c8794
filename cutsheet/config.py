"""Service configuration using Pydantic Settings."""

from functools import lru_cache
from typing import List, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .rules import DOWNLOAD_FILENAME


class Settings(BaseSettings):
    """Settings loaded from CUTSHEET_* environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="CUTSHEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "cutsheet-reshaper"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["text", "json"] = "text"

    # Uploads
    max_upload_bytes: int = 5 * 1024 * 1024
    # Stored as comma-separated string, accessed via allowed_extensions_list
    allowed_extensions: str = ".csv"

    # Output
    download_filename: str = DOWNLOAD_FILENAME
    output_bom: bool = False

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    @property
    def allowed_extensions_list(self) -> List[str]:
        return [ext.strip().lower() for ext in self.allowed_extensions.split(",") if ext.strip()]

    @property
    def output_encoding(self) -> str:
        return "utf-8-sig" if self.output_bom else "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()
