"""
Configuration models and loading.

This module provides Pydantic models for mcpkit configuration
with multi-layer merging: defaults < user < project < env vars.
"""

from .env import read_env_file, read_env_files
from .loader import (
    clear_cache,
    collect_env_settings,
    get_env_file_paths,
    get_project_config_path,
    get_user_config_path,
    get_xdg_config_home,
    load_config,
)
from .models import (
    ComposerConfig,
    HooksConfig,
    MCPKitConfig,
    SessionConfig,
    StorageConfig,
)

__all__ = [
    # Models
    "ComposerConfig",
    "HooksConfig",
    "MCPKitConfig",
    "SessionConfig",
    "StorageConfig",
    # Loader functions
    "clear_cache",
    "collect_env_settings",
    "get_env_file_paths",
    "get_project_config_path",
    "get_user_config_path",
    "get_xdg_config_home",
    "load_config",
    "read_env_file",
    "read_env_files",
]
