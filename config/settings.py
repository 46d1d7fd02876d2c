"""Application settings and configuration."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(
        default="Student Records Service",
        description="Application name"
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version"
    )
    environment: Literal["local", "dev", "stage", "prod"] = Field(
        default="local",
        description="Deployment environment"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # API Configuration
    api_prefix: str = Field(
        default="/api",
        description="API route prefix"
    )
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )
    ui_path: Optional[str] = Field(
        default="/ui",
        description="Mount path of the browser UI (None disables it)"
    )

    # Record storage configuration
    repository_backend: Literal["memory", "database"] = Field(
        default="database",
        description="Storage backend for student records"
    )

    # Database Configuration
    database_url: str = Field(
        default="sqlite:///data/students.sqlite3",
        description="Database connection URL"
    )
    database_echo: bool = Field(
        default=False,
        description="Echo SQL statements (for debugging)"
    )

    # Pagination
    default_page_size: int = Field(
        default=5,
        ge=1,
        description="Page size used when the client does not send one"
    )
    max_page_size: int = Field(
        default=100,
        ge=1,
        description="Largest page size a client may request"
    )

    # Photo pipeline
    photo_max_width: int = Field(
        default=300,
        gt=0,
        description="Maximum width of photos returned by the API (pixels)"
    )
    photo_max_height: int = Field(
        default=300,
        gt=0,
        description="Maximum height of photos returned by the API (pixels)"
    )
    photo_format: str = Field(
        default="JPEG",
        description="Pillow format name used when a photo is re-encoded"
    )
    max_photo_size: int = Field(
        default=10 * 1024 * 1024,  # 10MB
        description="Maximum decoded photo size in bytes"
    )

    @field_validator("photo_format", mode="before")
    @classmethod
    def normalize_photo_format(cls, v: str) -> str:
        """Pillow format names are upper case."""
        if isinstance(v, str):
            return v.upper()
        return v

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format"
    )
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format"
    )
    log_file: Optional[Path] = Field(
        default=None,
        description="Path to log file (if None, logs to stdout only)"
    )

    @property
    def log_level_numeric(self) -> int:
        """Get numeric log level."""
        return getattr(logging, self.log_level)

    def configure_logging(self) -> None:
        """Configure logging based on settings."""
        import sys

        handlers: list[logging.Handler] = []

        console_handler = logging.StreamHandler(sys.stdout)
        handlers.append(console_handler)

        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self.log_file)
            handlers.append(file_handler)

        if self.log_json:
            import json

            class JSONFormatter(logging.Formatter):
                def format(self, record: logging.LogRecord) -> str:
                    log_obj = {
                        "timestamp": self.formatTime(record),
                        "level": record.levelname,
                        "logger": record.name,
                        "message": record.getMessage(),
                        "module": record.module,
                        "function": record.funcName,
                        "line": record.lineno,
                    }
                    if record.exc_info:
                        log_obj["exception"] = self.formatException(record.exc_info)
                    return json.dumps(log_obj)

            formatter = JSONFormatter()
        else:
            formatter = logging.Formatter(self.log_format)

        for handler in handlers:
            handler.setFormatter(formatter)

        logging.basicConfig(
            level=self.log_level_numeric,
            handlers=handlers,
            force=True,
        )

        if self.debug:
            logging.getLogger("student_records").setLevel(logging.DEBUG)
        else:
            # Pillow logs every plugin it probes at DEBUG
            logging.getLogger("PIL").setLevel(logging.WARNING)
            logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    @property
    def photo_bounds(self) -> tuple[int, int]:
        """Bounding box (width, height) applied to photos on read."""
        return self.photo_max_width, self.photo_max_height


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
