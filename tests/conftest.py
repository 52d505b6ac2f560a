import logging

import pytest
from typer.testing import CliRunner

from countrycache.domain.models.common import CacheConfig
from countrycache.infrastructure.cache.disk_manager import DiskCacheManager

CONFIG_ENV_VARS = (
    "COUNTRIES_CACHE_ENABLED",
    "CACHE_DURATION",
    "CACHE_DIRECTORY",
    "LOGGING_LEVEL",
    "LOGGING_FILE",
    "LOGGING_FORMAT",
)


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_config_env(monkeypatch):
    """Keeps configuration environment variables from leaking into tests."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Restores root logger handlers replaced by setup_logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "cache"


@pytest.fixture
def cache_config(cache_dir):
    return CacheConfig(enabled=True, duration=60, directory=cache_dir)


@pytest.fixture
def disk_manager(cache_config):
    """A DiskCacheManager on a temporary directory."""
    manager = DiskCacheManager(cache_config)
    yield manager
    manager.close()
