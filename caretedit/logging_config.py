"""Logging setup for the editor.

The terminal owns stdout/stderr while the editor runs, so records go to a
rotating file in the user log directory instead of the console.
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Optional

import platformdirs

from .constants import EditorConstants

logger = logging.getLogger("caretedit")

LOG_FORMAT = "%(asctime)s - %(levelname)-8s - %(name)-20s - %(message)s (%(filename)s:%(lineno)d)"


def default_log_file() -> str:
    log_dir = platformdirs.user_log_dir(EditorConstants.APP_NAME, EditorConstants.APP_AUTHOR)
    return os.path.join(log_dir, EditorConstants.LOG_FILENAME)


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None) -> Optional[str]:
    """Attach a rotating file handler to the ``caretedit`` logger.

    Calling it again replaces the previous handler. Never raises; if the log
    directory cannot be created the system temp directory is used, and if no
    file can be opened logging is left unconfigured.

    Returns:
        The path being logged to, or None if no handler could be attached.
    """
    log_file = log_file or default_log_file()
    log_dir = os.path.dirname(log_file)
    if log_dir and not os.path.isdir(log_dir):
        try:
            os.makedirs(log_dir, exist_ok=True)
        except OSError as e:
            print(f"Error creating log directory '{log_dir}': {e}", file=sys.stderr)
            log_file = os.path.join(tempfile.gettempdir(), EditorConstants.LOG_FILENAME)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    try:
        handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=EditorConstants.LOG_MAX_BYTES,
            backupCount=EditorConstants.LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError as e:
        print(f"Error setting up file logger for '{log_file}': {e}", file=sys.stderr)
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    # Keep editor records out of whatever the host application logs to stderr
    logger.propagate = False
    return log_file
