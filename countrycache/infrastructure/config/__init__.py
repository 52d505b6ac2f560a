"""Configuration loading from YAML files, .env files and the environment."""

from countrycache.infrastructure.config.settings import Settings

__all__ = ["Settings"]
