import logging
import sys
from typing import Any

from loguru import logger
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from sciter_typings.environment import TypingsSettings, get_settings


# Singleton Console instance
def get_console() -> Console:
    if not hasattr(get_console, "_console"):
        get_console._console = Console()
    return get_console._console


def print_panel(content: str, title: str | None = None, style: str = "bold blue", border_style: str | None = None):
    """Show a message in a bordered panel; the border follows the text style unless given."""
    console = get_console()
    border_style = border_style or style
    panel = Panel(content, title=title, style=style, border_style=border_style)
    console.print(panel)


def print_table(headers: list[str], rows: list[list[Any]], title: str | None = None):
    """Show rows under the given headers; cells are stringified."""
    console = get_console()
    table = Table(title=title)
    for header in headers:
        table.add_column(header)
    for row in rows:
        table.add_row(*[str(cell) for cell in row])
    console.print(table)


def configure_logging(settings: TypingsSettings | None = None) -> None:
    """Route loguru output through a RichHandler, plus a log file in debug mode.

    Environment variables:
        SCITER_TYPINGS_LOG_LEVEL: Set the log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        SCITER_TYPINGS_DEBUG: Enable debug mode with file logging (true, 1, yes)
        SCITER_TYPINGS_LOG_FILE: Specify the log file path (default: sciter_typings.log)
    """
    settings = settings or get_settings()
    logger.remove()

    handler = RichHandler(console=Console(file=sys.stderr), rich_tracebacks=True, show_path=False)
    logger.add(handler, level=settings.log_level, format="{message}")

    if settings.debug:
        try:
            logger.add(
                str(settings.log_file),
                level=settings.log_level,
                format="{time:YYYY-MM-DD HH:mm:ss} - {name} - {level} - {message}",
            )
        except OSError as error:
            logger.error(f"Failed to set up file logging: {error}")

    # Quiet urllib3 connection chatter unless we are debugging
    logging.getLogger("urllib3").setLevel(logging.DEBUG if settings.log_level == "DEBUG" else logging.WARNING)
