"""Terminal and log file logging configuration.

Two independent knobs:

- ``-v`` / ``--verbose`` on the CLI controls **terminal** verbosity
  (stderr handler level).  Default: WARNING.
- ``STAKEMAP_LOG_LEVEL`` env var controls **log file** verbosity.
  Default: INFO.  The log file lives at ``<output_dir>/.stakemap/stakemap.log``.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

_LOG_FILENAME = "stakemap.log"

# Max log file size before rotation (2 MB)
_MAX_BYTES = 2 * 1024 * 1024

_BACKUP_COUNT = 2


def _parse_log_level(level_str: str) -> int:
    """Parse a level name case-insensitively; unknown names mean INFO."""
    numeric = getattr(logging, level_str.upper(), None)
    if isinstance(numeric, int):
        return numeric
    return logging.INFO


def setup_logging(
    *,
    output_dir: Path | None = None,
    verbose: bool = False,
) -> None:
    """Configure the stderr handler and, with *output_dir*, a rotating log file.

    Safe to call more than once: existing root handlers are replaced.
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

    # Root accepts everything; handlers filter independently
    root.setLevel(logging.DEBUG)

    terminal = logging.StreamHandler()
    terminal.setLevel(logging.DEBUG if verbose else logging.WARNING)
    terminal.setFormatter(logging.Formatter("%(levelname)s | %(name)s | %(message)s"))
    root.addHandler(terminal)

    if output_dir is not None:
        log_dir = output_dir / ".stakemap"
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_dir / _LOG_FILENAME,
            maxBytes=_MAX_BYTES,
            backupCount=_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(_parse_log_level(os.environ.get("STAKEMAP_LOG_LEVEL", "INFO")))
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root.addHandler(file_handler)
