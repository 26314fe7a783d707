"""Application configuration with Pydantic Settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReaderConfig(BaseSettings):
    """Reader configuration with environment variable support.

    Configuration can be set via:
    1. Environment variables (prefixed with EPUBREADER_)
    2. .env file
    3. Direct instantiation

    Example:
        export EPUBREADER_NUMBER_PARAGRAPHS=true
        export EPUBREADER_LOG_LEVEL=DEBUG

        config = ReaderConfig()
        print(config.number_paragraphs)  # True
    """

    model_config = SettingsConfigDict(
        env_prefix="EPUBREADER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Rendering
    number_paragraphs: bool = Field(
        default=False, description="Number content paragraphs when a chapter is loaded"
    )
    toc_max_depth: int = Field(
        default=32, ge=1, le=256, description="Deepest TOC level kept; deeper entries are dropped"
    )

    # Remote sources
    timeout: int = Field(default=30, ge=1, le=300, description="HTTP request timeout in seconds")
    user_agent: str = Field(default="epubreader/0.1", description="User-Agent for remote fetches")

    # Logging
    log_level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_file: Path | None = Field(default=None, description="Optional log file path")
