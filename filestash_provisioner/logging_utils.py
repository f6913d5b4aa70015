from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

_TAGS = {
    logging.DEBUG: ("DEBUG", "\033[0;36m"),
    logging.INFO: ("INFO", "\033[0;32m"),
    logging.WARNING: ("WARN", "\033[1;33m"),
    logging.ERROR: ("ERROR", "\033[0;31m"),
    logging.CRITICAL: ("ERROR", "\033[0;31m"),
}
_RESET = "\033[0m"


class TagFormatter(logging.Formatter):
    """Format records as `[INFO] message`, colored when writing to a TTY."""

    def __init__(self, color: bool) -> None:
        super().__init__(fmt="%(message)s")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        tag, color = _TAGS.get(record.levelno, (record.levelname, ""))
        msg = super().format(record)
        if self.color and color:
            return f"{color}[{tag}]{_RESET} {msg}"
        return f"[{tag}] {msg}"


def configure_logging(
    log_path: Optional[str] = None,
    level: int = logging.INFO,
    stream: Optional[TextIO] = None,
) -> Optional[str]:
    """Configure logging.

    Console output goes to stdout with severity tags. A file is only written
    when log_path is given, so an unprivileged run leaves nothing on disk.

    Returns the log file path in use, if any.
    """

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    for h in list(logger.handlers):
        if getattr(h, "_filestash_provisioner", False):
            logger.removeHandler(h)
            h.close()

    out = stream or sys.stdout
    console = logging.StreamHandler(out)
    console.setLevel(level)
    console.setFormatter(TagFormatter(color=bool(getattr(out, "isatty", lambda: False)())))
    setattr(console, "_filestash_provisioner", True)
    logger.addHandler(console)

    if log_path:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S%z",
            )
        )
        setattr(file_handler, "_filestash_provisioner", True)
        logger.addHandler(file_handler)
        logging.getLogger(__name__).debug("Logging to %s", log_path)

    return log_path
