"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars
"""

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .env import ENV_PREFIX, read_env_files
from .models import MCPKitConfig

logger = logging.getLogger(__name__)

# Global cache to avoid reloading config multiple times per process
_config_cache: MCPKitConfig | None = None


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """
    Get path to user configuration file.

    Returns:
        Path to ~/.config/mcpkit/config.json (or XDG equivalent)
    """
    return get_xdg_config_home() / "mcpkit" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        cwd: Working directory to search from (defaults to current directory)

    Returns:
        Path to .mcpkit.json in the project root
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / ".mcpkit.json"


def get_env_file_paths(cwd: Path | None = None) -> list[Path]:
    """
    Get .env files holding MCPKIT_* settings, lowest precedence first.

    Returns:
        [~/.config/mcpkit/.env, <project>/.env, <project>/.env.local]
    """
    if cwd is None:
        cwd = Path.cwd()
    return [get_xdg_config_home() / "mcpkit" / ".env", cwd / ".env", cwd / ".env.local"]


def collect_env_settings(cwd: Path | None = None) -> dict[str, str]:
    """
    Gather MCPKIT_* settings from .env files and the process environment.

    The process environment overrides every .env file.
    """
    settings = read_env_files(get_env_file_paths(cwd))
    settings.update(
        {key: value for key, value in os.environ.items() if key.startswith(ENV_PREFIX)}
    )
    return settings


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`. Nested
    dicts are merged, not replaced.

    Example:
        >>> deep_merge({"a": 1, "b": {"x": 10}}, {"b": {"y": 20}})
        {'a': 1, 'b': {'x': 10, 'y': 20}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if file doesn't exist or can't be parsed
    """
    if not path.exists():
        return None

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            logger.warning(f"Ignoring config at {path}: top level is not an object")
            return None
    except (json.JSONDecodeError, OSError) as e:
        # Config system should be resilient to a bad file
        logger.warning(f"Failed to parse config at {path}: {e}")
        return None


def _env_flag(value: str) -> bool:
    return value.lower() not in ("false", "0", "no", "")


def apply_env_overrides(
    config_dict: dict[str, Any], environ: Mapping[str, str] | None = None
) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Supported env vars:
        MCPKIT_STORAGE - overrides storage.backend
        MCPKIT_CACHE - overrides hooks.cache
        MCPKIT_CONTENT_PATH - overrides hooks.content_path
        MCPKIT_INIT_TOOL - overrides session.init_tool

    Args:
        config_dict: Configuration dictionary to override
        environ: Settings to read (defaults to os.environ)

    Returns:
        Configuration dictionary with env var overrides applied
    """
    if environ is None:
        environ = os.environ
    result = config_dict.copy()

    if storage := environ.get("MCPKIT_STORAGE"):
        result["storage"] = {**result.get("storage", {}), "backend": storage}

    if (cache_str := environ.get("MCPKIT_CACHE")) is not None:
        result["hooks"] = {**result.get("hooks", {}), "cache": _env_flag(cache_str)}

    if content_path := environ.get("MCPKIT_CONTENT_PATH"):
        result["hooks"] = {**result.get("hooks", {}), "content_path": content_path}

    if init_tool := environ.get("MCPKIT_INIT_TOOL"):
        result["session"] = {**result.get("session", {}), "init_tool": init_tool}

    return result


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default configuration.

    Returns:
        Dictionary with default configuration values
    """
    return {
        "hooks": {"cache": True, "max_workers": 4},
        "storage": {"backend": "memory"},
        "session": {"init_tool": "session_init", "always_allowed": ["server_info"]},
    }


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> MCPKitConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (MCPKIT_*), then .env.local, .env and
           ~/.config/mcpkit/.env
        2. Project config (.mcpkit.json)
        3. User config (~/.config/mcpkit/config.json)
        4. Hardcoded defaults

    Args:
        project_dir: Project directory to load .mcpkit.json from (defaults to cwd)
        use_cache: If True, return cached config from previous load

    Returns:
        Validated MCPKitConfig instance

    Raises:
        ValidationError: If the merged config fails Pydantic validation
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged = get_default_config()

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    if project_config := load_json_file(get_project_config_path(project_dir)):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged, collect_env_settings(project_dir))

    config = MCPKitConfig(**merged)
    _config_cache = config

    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    global _config_cache
    _config_cache = None
