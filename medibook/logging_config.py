"""Root logger setup using rich for console output."""

import logging

from rich.logging import RichHandler

from medibook import config


def configure_logging(level: str | None = None) -> None:
    """Install a RichHandler on the root logger."""
    logging.basicConfig(
        level=level or config.LOG_LEVEL,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # Keep request logs from drowning out service logs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
