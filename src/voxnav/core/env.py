"""Logging setup for voxnav.

configure_logging() is called once by the CLI; library code only ever
logs through LOGGER.
"""

import logging
import os

LOGGER = logging.getLogger("voxnav")

_QUIET_LOGGERS = ("httpx", "httpcore", "LiteLLM", "uvicorn.access")


def configure_logging(level: str | None = None) -> None:
    """Route log records through a Rich handler on stderr.

    *level* defaults to the ``LOG_LEVEL`` environment variable, then INFO.
    """
    from rich.console import Console
    from rich.logging import RichHandler

    log_level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                show_time=False,
                show_path=False,
                rich_tracebacks=False,
            )
        ],
        force=True,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
