"""
Logging setup for the libsql-shell command line.
"""

import logging
import sys
from pathlib import Path
from typing import Any


def setup_logging(log_settings: dict[str, Any]) -> None:
    """Configure the root logger from the `logging` config section.

    Log records go to stderr so stdout carries only query results and dumps;
    `file` adds a file handler, creating its directory.
    """
    log_level = getattr(logging, log_settings.get('level', 'INFO').upper())
    log_file = log_settings.get('file')

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers
    )
