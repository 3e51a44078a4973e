"""
Utility functions for the RFC search index.
"""
import logging
import os
from pathlib import Path

import psutil

from rfsee.common.config import (
    CONFIG_DIR, DEFAULT_INDEX_PATH, INDEX_FILE_NAME,
    RFC_EDITOR_FILE_TYPE, RFC_EDITOR_URL_BASE
)
from rfsee.common.errors import RfseeIOError

logger = logging.getLogger(__name__)


def rfc_url(number):
    """Canonical plain-text URL of an RFC."""
    return f"{RFC_EDITOR_URL_BASE}{number}.{RFC_EDITOR_FILE_TYPE}"


def home_dir():
    """Return the user's home directory, or None when it cannot be determined."""
    if os.name == 'nt':
        user_profile = os.environ.get('USERPROFILE')
        if user_profile:
            return Path(user_profile)
        drive = os.environ.get('HOMEDRIVE')
        path = os.environ.get('HOMEPATH')
        if drive and path:
            return Path(drive) / path
        return None

    home = os.environ.get('HOME')
    return Path(home) if home else None


def get_index_path(custom_path=None):
    """
    Resolve where the index file lives.

    An explicit path always wins. Otherwise the index goes to
    ~/.config/rfsee/index.json (the directory is created), falling back
    to /tmp/index.json on POSIX systems without a home directory.
    """
    if custom_path:
        return Path(custom_path)

    home = home_dir()
    if home is not None:
        config_dir = home / CONFIG_DIR
        try:
            config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RfseeIOError(f"Unable to create {config_dir}: {e}") from e
        return config_dir / INDEX_FILE_NAME

    if os.name != 'nt':
        logger.warning(f"No home directory found, using {DEFAULT_INDEX_PATH}")
        return Path(DEFAULT_INDEX_PATH)

    raise RfseeIOError("No default location for index on Windows")


def get_memory_usage():
    """Get current memory usage of the process in MB."""
    process = psutil.Process()
    return process.memory_info().rss / 1024 / 1024
