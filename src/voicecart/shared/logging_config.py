"""Simple centralized logging - configure once, use everywhere.

Call `configure_logging()` ONCE from the entry point (main.py).
All other modules just import the loguru logger directly.
"""

import os
import sys
from pathlib import Path

from loguru import logger

_configured = False


def configure_logging(level: str | None = None, log_dir: str | Path = "logs") -> None:
    """Function to configure logging settings.
    Falls back to the LOG_LEVEL env var (default INFO) when no level is given.
    Repeated calls are no-ops, so sinks are never added twice."""
    global _configured

    if _configured:
        return

    level = level or os.getenv("LOG_LEVEL", "INFO")

    logger.remove()  # Remove default handler

    # Console output goes to stderr so `find`/`narrow` JSON on stdout stays clean
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        colorize=True,
    )

    # File output (rotates daily)
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    logger.add(
        str(Path(log_dir) / "voicecart_{time:YYYY-MM-DD_HH-mm-ss}.log"),
        level=level,
        rotation="00:00",
        retention="30 days",
    )

    _configured = True
    logger.info("Logging configured | level={}", level)
