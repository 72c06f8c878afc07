"""Logging setup for SUBENUM.

All output goes to stderr through a single :class:`~rich.logging.RichHandler`
so ``subenum enumerate --json`` keeps stdout machine-readable. The uvicorn
loggers are attached to the same handlers when the API server runs.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Union

from rich.console import Console
from rich.logging import RichHandler

from subenum.core.config import LoggingConfig

ROOT_LOGGER = "subenum"
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

_FILE_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

_console = Console(stderr=True)
_configured = False


def resolve_level(level: Union[int, str]) -> int:
    """Turn ``"debug"``, ``"INFO"`` or ``logging.WARNING`` into a numeric level.

    Unknown names resolve to ``INFO``.
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _build_handlers(settings: LoggingConfig, level: int) -> List[logging.Handler]:
    console_handler = RichHandler(
        console=_console,
        rich_tracebacks=True,
        show_path=False,
        markup=False,
    )
    handlers: List[logging.Handler] = [console_handler]

    if settings.file:
        path = Path(settings.file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(level)
    return handlers


def _install(name: str, handlers: List[logging.Handler], level: int) -> None:
    target = logging.getLogger(name)
    for old in list(target.handlers):
        target.removeHandler(old)
        old.close()
    for handler in handlers:
        target.addHandler(handler)
    target.setLevel(level)
    target.propagate = False


def configure_logging(settings: LoggingConfig, verbose: bool = False) -> None:
    """(Re)configure the ``subenum`` and uvicorn loggers.

    Safe to call more than once: previously installed handlers are closed
    and replaced.

    Args:
        settings: The ``logging`` config section (level and optional file).
        verbose: Force ``DEBUG`` regardless of *settings*.
    """
    global _configured

    level = logging.DEBUG if verbose else resolve_level(settings.level)
    handlers = _build_handlers(settings, level)

    _install(ROOT_LOGGER, handlers, level)
    # uvicorn.error and uvicorn.access propagate into "uvicorn"
    _install(SERVER_LOGGERS[0], handlers, level)
    for name in SERVER_LOGGERS[1:]:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return *name* as a child of the ``subenum`` logger.

    The first call configures logging with default settings if nothing has
    done so yet.
    """
    if not _configured:
        configure_logging(LoggingConfig())

    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
