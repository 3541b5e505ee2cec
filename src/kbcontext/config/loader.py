"""Configuration loading from files and environment.

Supports:
- TOML config files
- Environment variables (KBCTX_* prefix)
- .env files
- Named profiles ([profiles.<name>] tables overlaying the base file)
"""

import os
import re
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from kbcontext.config.schema import AppConfig
from kbcontext.observability.logging import get_logger

logger = get_logger(__name__)

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def _substitute_env_vars(obj: Any) -> Any:
    """Recursively substitute environment variables in a data structure.

    Supports formats:
    - ${VAR_NAME}
    - ${VAR_NAME:-default}

    Args:
        obj: Input data (dict, list, str, etc.)

    Returns:
        Data structure with environment variables substituted
    """
    if isinstance(obj, dict):
        return {k: _substitute_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_substitute_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        def replace_var(match):
            var_expr = match.group(1)
            if ":-" in var_expr:
                var_name, default_value = var_expr.split(":-", 1)
                return os.getenv(var_name.strip(), default_value)
            var_name = var_expr.strip()
            value = os.getenv(var_name)
            if value is None:
                logger.warning(
                    "env_var_not_found",
                    var_name=var_name,
                    suggestion="Check that the environment variable is set",
                )
                return match.group(0)
            return value

        return _ENV_VAR_PATTERN.sub(replace_var, obj)
    else:
        return obj


def _merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Merge overlay into base, descending into nested tables."""
    merged = dict(base)
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(
    config_path: Optional[Path] = None,
    profile: Optional[str] = None,
    env_file: Optional[Path] = None,
) -> AppConfig:
    """Load application configuration.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file (profile overlay, then base)
    3. Defaults

    Args:
        config_path: Path to TOML config file
        profile: Config profile to use (e.g., "compact")
        env_file: Path to .env file

    Returns:
        Loaded and validated configuration
    """
    if env_file and env_file.exists():
        load_dotenv(env_file)
        logger.info("loaded_env_file", path=str(env_file))

    config_data: dict[str, Any] = {}
    if config_path and config_path.exists():
        with open(config_path, "rb") as f:
            config_data = tomllib.load(f)
        logger.info("loaded_config_file", path=str(config_path))

        profiles = config_data.pop("profiles", {})
        if profile:
            if profile in profiles:
                config_data = _merge(config_data, profiles[profile])
                logger.info("applied_profile", profile=profile)
            else:
                logger.warning("profile_not_found", profile=profile, available=sorted(profiles))

        config_data = _substitute_env_vars(config_data)

    # Environment variables take precedence over values from the file
    env_config = AppConfig()
    env_overrides = env_config.model_dump(exclude_unset=True)
    config = AppConfig(**_merge(config_data, env_overrides))

    logger.debug(
        "config_loaded",
        log_level=config.logging.level.value,
        default_tokens=config.budget.default_tokens,
        chunk_threshold=config.chunking.threshold,
    )

    return config


def get_default_config_path() -> Path:
    """Get the default config file path.

    Searches in order:
    1. ./kbcontext.toml
    2. ~/.kbcontext/config.toml
    3. /etc/kbcontext/config.toml
    """
    search_paths = [
        Path.cwd() / "kbcontext.toml",
        Path.home() / ".kbcontext" / "config.toml",
        Path("/etc/kbcontext/config.toml"),
    ]

    for path in search_paths:
        if path.exists():
            return path

    return search_paths[0]
