"""
Central Logging and Console Utilities.

Routes tinypack's user-facing output through the standard `logging` library,
formatted by `rich`.

1.  **Logging Integration**: a `RichHandler` on the root logger plus helper
    functions (`log_info`, `log_success`, `log_warning`, `log_error`).
    Engine modules simply use `logging.getLogger(__name__)`.
2.  **Swappable Console**: `console` is a proxy whose backend can be replaced
    with `set_console` (e.g. a recording console in tests); the logging handler
    follows the backend.

Attributes:
    console (_ConsoleProxy): A stable reference to the active Rich Console.
"""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

_THEME = Theme(
  {
    "logging.level.success": "green",
    "info": "dim cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "green",
    "path": "bold blue",
    "chunk": "bold magenta",
  }
)


class _ConsoleProxy:
  """
  Forwards printing to a replaceable `rich.console.Console` backend.

  Attributes:
      _backend (Console): The active Rich Console instance.
  """

  def __init__(self) -> None:
    self._backend: Console = Console(theme=_THEME)
    self._configure_logging()

  def set_backend(self, new_console: Console) -> None:
    """
    Injects a new Console backend and updates logging handlers.

    Args:
        new_console (Console): The new Rich Console instance to use.
    """
    self._backend = new_console
    self._configure_logging()

  def reset(self) -> None:
    """Resets the proxy to a fresh standard output console."""
    self._backend = Console(theme=_THEME)
    self._configure_logging()

  @property
  def backend(self) -> Console:
    return self._backend

  def _configure_logging(self) -> None:
    # Replace any handler bound to a previous backend
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
      if isinstance(handler, RichHandler):
        root_logger.removeHandler(handler)

    rich_handler = RichHandler(
      console=self._backend,
      show_time=False,
      show_path=False,
      markup=False,
      rich_tracebacks=True,
    )
    root_logger.setLevel(logging.INFO)
    root_logger.addHandler(rich_handler)

  def print(self, *args: Any, **kwargs: Any) -> None:
    self._backend.print(*args, **kwargs)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Injects a specific console instance for printing and logging.

  Args:
      new_console (Console): The configured Rich console to use globally.
  """
  console.set_backend(new_console)


def reset_console() -> None:
  """Resets logging and console to standard output."""
  console.reset()


def set_log_level(level: int) -> None:
  """Sets the root logger level (e.g. DEBUG for --verbose, WARNING for --json)."""
  logging.getLogger().setLevel(level)


def log_info(msg: str) -> None:
  logging.info(f"ℹ️  {msg}")


def log_success(msg: str) -> None:
  logging.log(SUCCESS_LEVEL_NUM, f"✅ {msg}")


def log_warning(msg: str) -> None:
  logging.warning(f"⚠️  {msg}")


def log_error(msg: str) -> None:
  logging.error(f"❌ {msg}")
