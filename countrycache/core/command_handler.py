"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), delegates the work
to the CacheService and reports results and errors through the
UserInterface. Each handler returns True on success so the entry point can
set the process exit code.
"""

import logging
from typing import List, Optional

from countrycache.core.cache_service import CacheService
from countrycache.domain.exceptions import CacheError
from countrycache.domain.interfaces.user_interface import UserInterface
from countrycache.domain.models.common import CacheKey

logger = logging.getLogger(__name__)


class CommandHandler:
    """Handles incoming commands and delegates to the cache service."""

    def __init__(self, cache_service: CacheService, ui: UserInterface):
        self.cache_service = cache_service
        self.ui = ui

    def handle_get(self, key: str, default: Optional[str] = None) -> bool:
        """Handles the 'get' command."""
        logger.info(f"Handling 'get' command for key: {key}")
        try:
            value = self.cache_service.get(CacheKey(key), default)
        except Exception as e:
            logger.error(f"Get command failed: {e}", exc_info=True)
            self.ui.display_error(f"Failed to read key '{key}': {e}")
            return False

        if value is None:
            self.ui.display_warning(f"Key '{key}' not found.")
            return False
        self.ui.display_output(value)
        return True

    def handle_set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        """Handles the 'set' command."""
        logger.info(f"Handling 'set' command for key: {key} (ttl={ttl})")
        try:
            stored = self.cache_service.set(CacheKey(key), value, ttl)
        except Exception as e:
            logger.error(f"Set command failed: {e}", exc_info=True)
            self.ui.display_error(f"Failed to store key '{key}': {e}")
            return False

        if not stored:
            self.ui.display_error(f"Key '{key}' was not stored (is the cache disabled?).")
            return False
        self.ui.display_info(f"Stored key '{key}'.")
        return True

    def handle_delete(self, key: str) -> bool:
        """Handles the 'delete' command."""
        logger.info(f"Handling 'delete' command for key: {key}")
        try:
            deleted = self.cache_service.delete(CacheKey(key))
        except Exception as e:
            logger.error(f"Delete command failed: {e}", exc_info=True)
            self.ui.display_error(f"Failed to delete key '{key}': {e}")
            return False

        if not deleted:
            self.ui.display_error(f"Failed to delete key '{key}'.")
            return False
        self.ui.display_info(f"Deleted key '{key}'.")
        return True

    def handle_has(self, key: str) -> bool:
        """Handles the 'has' command. Returns whether the key is present."""
        logger.info(f"Handling 'has' command for key: {key}")
        try:
            present = self.cache_service.has(CacheKey(key))
        except Exception as e:
            logger.error(f"Has command failed: {e}", exc_info=True)
            self.ui.display_error(f"Failed to check key '{key}': {e}")
            return False

        self.ui.display_output("yes" if present else "no")
        return present

    def handle_clear(self) -> bool:
        """Handles the 'clear' command."""
        logger.info("Handling 'clear' command")
        try:
            cleared = self.cache_service.clear()
        except Exception as e:
            logger.error(f"Failed to clear cache: {e}", exc_info=True)
            self.ui.display_error(f"Failed to clear cache: {e}")
            return False

        if not cleared:
            self.ui.display_error("Failed to clear cache.")
            return False
        self.ui.display_info("Cache cleared successfully.")
        return True

    def handle_make_key(self, arguments: List[str]) -> bool:
        """Handles the 'make-key' command."""
        logger.info(f"Handling 'make-key' command with {len(arguments)} argument(s)")
        try:
            key = self.cache_service.make_key(*arguments)
        except CacheError as e:
            self.ui.display_error(str(e))
            return False

        self.ui.display_output(key)
        return True
