"""
Settings for the wabridge event bridge.

Simple, reliable environment variable configuration for the event pipeline:
storage roots, webhook destinations and auto-reply behaviour.
"""

import os
import tomllib
from importlib import metadata
from pathlib import Path

from dotenv import load_dotenv

# Local .env; variables already set in the environment win
load_dotenv(".env")


def _get_version() -> str:
    """
    Installed distribution version, or the one declared in a nearby pyproject.toml.

    Returns:
        Version string, ``0.1.0`` if neither is available
    """
    try:
        return metadata.version("wabridge")
    except metadata.PackageNotFoundError:
        pass

    for directory in Path(__file__).resolve().parents:
        candidate = directory / "pyproject.toml"
        if not candidate.is_file():
            continue
        try:
            project = tomllib.loads(candidate.read_text(encoding="utf-8")).get("project", {})
        except (OSError, tomllib.TOMLDecodeError):
            continue
        if project.get("name") == "wabridge" and project.get("version"):
            return project["version"]

    return "0.1.0"


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
ENVIRONMENTS = ("DEV", "PROD")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_list(value: str) -> list[str]:
    """Split a comma separated env value, dropping blanks."""
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    """Application settings with environment-based configuration."""

    USER_SERVER_SUFFIX = "@s.whatsapp.net"
    GROUP_SERVER_SUFFIX = "@g.us"

    def __init__(self):
        # ================================================================
        # Version & Environment
        # ================================================================
        self.version: str = _get_version()
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")
        self.log_dir: str = os.getenv("LOG_DIR", "./logs")
        self.environment: str = os.getenv("ENVIRONMENT", "DEV")

        # ================================================================
        # Storage Roots
        # ================================================================
        self.path_media: str = os.getenv("PATH_MEDIA", "statics/media")
        self.path_storages: str = os.getenv("PATH_STORAGES", "storages")

        # ================================================================
        # WhatsApp Behaviour
        # ================================================================
        self.auto_reply_message: str = os.getenv("WHATSAPP_AUTO_REPLY", "")
        self.account_validation: bool = _parse_bool(
            os.getenv("WHATSAPP_ACCOUNT_VALIDATION", "true")
        )
        self.max_download_size: int = int(
            os.getenv("WHATSAPP_SETTING_MAX_DOWNLOAD_SIZE", "500000000")
        )

        # ================================================================
        # Webhook Delivery
        # ================================================================
        # Always a list; a single URL is a singleton list
        self.webhook_urls: list[str] = _parse_list(os.getenv("WHATSAPP_WEBHOOK", ""))
        self.webhook_secret: str = os.getenv("WHATSAPP_WEBHOOK_SECRET", "secret")
        self.webhook_timeout: float = float(os.getenv("WHATSAPP_WEBHOOK_TIMEOUT", "10"))

        self._validate_settings()

    def _validate_settings(self):
        """Normalize enumerated values and reject unusable limits."""
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {list(LOG_LEVELS)}")

        self.environment = self.environment.upper()
        if self.environment not in ENVIRONMENTS:
            self.environment = "DEV"

        for env_name, value in (
            ("WHATSAPP_WEBHOOK_TIMEOUT", self.webhook_timeout),
            ("WHATSAPP_SETTING_MAX_DOWNLOAD_SIZE", self.max_download_size),
        ):
            if value <= 0:
                raise ValueError(f"{env_name} must be positive")

    @property
    def has_webhook(self) -> bool:
        """Check if at least one webhook destination is configured."""
        return bool(self.webhook_urls)

    @property
    def has_auto_reply(self) -> bool:
        """Check if an auto-reply text is configured."""
        return bool(self.auto_reply_message)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "DEV"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "PROD"


# Global settings instance
settings = Settings()
