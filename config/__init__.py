"""Configuration package for the Student Records service."""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
