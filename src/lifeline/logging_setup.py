# SPDX-License-Identifier: MIT

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(name)s: %(message)s"


def configure_logging(level: str = "WARNING") -> None:
    """Route log records through rich on stderr."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # APScheduler logs every job run at INFO
    logging.getLogger("apscheduler").setLevel(
        max(logging.WARNING, logging.getLogger().level)
    )
