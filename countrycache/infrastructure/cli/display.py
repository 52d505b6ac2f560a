"""Rich-based console implementation of the UserInterface."""

import logging
from typing import Any, Mapping, Optional

from rich.console import Console
from rich.panel import Panel
from rich.pretty import Pretty
from rich.table import Table
from rich.box import ROUNDED

from countrycache.domain.interfaces.user_interface import UserInterface

logger = logging.getLogger(__name__)


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Optional[Console] = None, error_console: Optional[Console] = None):
        self.console = console or Console()
        self.error_console = error_console or Console(stderr=True)

    def display_output(self, output: Any, **kwargs: Any) -> None:
        """Displays a command result.

        Strings are printed as-is so they can be piped; mappings render as a
        two-column table and anything else is pretty-printed.

        Args:
            output: The value to display.
            **kwargs: ``title`` sets the table or panel title.
        """
        title = kwargs.get("title")
        logger.debug(f"display_output called: title={title}, type={type(output).__name__}")

        if isinstance(output, str):
            self.console.print(output, markup=False, highlight=False, soft_wrap=True)
        elif isinstance(output, Mapping):
            table = Table(title=title, box=ROUNDED)
            table.add_column("Key", style="cyan", overflow="fold")
            table.add_column("Value", overflow="fold")
            for key, value in output.items():
                table.add_row(str(key), repr(value))
            self.console.print(table)
        elif title:
            self.console.print(Panel(Pretty(output), title=title, box=ROUNDED))
        else:
            self.console.print(Pretty(output))

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        self.error_console.print(f"[bold red]Error:[/bold red] {error_message}")

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        self.error_console.print(f"[bold yellow]Warning:[/bold yellow] {warning_message}")

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        self.console.print(f"[blue]{info_message}[/blue]")
