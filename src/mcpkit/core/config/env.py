"""
.env file support for mcpkit settings.

Only MCPKIT_* keys are read; anything else in a .env file belongs to the
host and is ignored. Values are returned as a mapping and never exported
into os.environ, so the process environment always wins when the two are
layered by the config loader.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

ENV_PREFIX = "MCPKIT_"


def read_env_file(path: Path) -> dict[str, str]:
    """
    Read MCPKIT_* settings from one .env file.

    Keys without a value (a bare ``MCPKIT_CACHE`` line) are skipped.

    Returns:
        Setting name -> value, empty if the file doesn't exist
    """
    if not path.is_file():
        return {}

    settings = {
        key: value
        for key, value in dotenv_values(path).items()
        if key.startswith(ENV_PREFIX) and value is not None
    }
    if settings:
        logger.debug(f"Read {len(settings)} setting(s) from {path}")
    return settings


def read_env_files(paths: Iterable[Path]) -> dict[str, str]:
    """
    Read MCPKIT_* settings from several .env files, later files winning.

    Args:
        paths: Files in increasing precedence order

    Returns:
        Merged setting name -> value
    """
    merged: dict[str, str] = {}
    for path in paths:
        merged.update(read_env_file(path))
    return merged
