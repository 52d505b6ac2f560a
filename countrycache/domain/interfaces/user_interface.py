"""Interface for interacting with the user.

Defines the contract for displaying results, errors, warnings and
informational messages, allowing different UI implementations.
"""

import abc
from typing import Any


class UserInterface(abc.ABC):
    """Abstract Base Class for user output."""

    @abc.abstractmethod
    def display_output(self, output: Any, **kwargs: Any) -> None:
        """Displays a command result to the user.

        Args:
            output: The value to display.
            **kwargs: Additional arguments for formatting (e.g., title).
        """
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user."""
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message to the user."""
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user."""
        pass
