"""Configuration module for wabridge."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
