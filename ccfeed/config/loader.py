"""Configuration loader."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .models import AppConfig
from .validators import check_for_warnings, emit_warnings

DEFAULT_CONFIG_CANDIDATES = (
    Path("config.yaml"),
    Path("config") / "config.yaml",
)


def load_config(config_path: Optional[Path] = None) -> tuple[AppConfig, EnvironmentConfig]:
    """
    Load and validate configuration from a YAML file and environment variables.

    File lookup:
    1. ``config_path`` if given (must exist)
    2. ``config.yaml`` in the current directory
    3. ``config/config.yaml``
    4. No file at all, provided CONCOURSE_URL is set in the environment

    ``CONCOURSE_URL`` overrides ``concourse.url`` from the file.

    Returns:
        Tuple of (AppConfig, EnvironmentConfig)

    Raises:
        ConfigurationError: If configuration is invalid or cannot be found
    """
    env_config = load_environment_config()

    config_file = _find_config_file(config_path, allow_missing=bool(env_config.concourse_url))
    config_dict = _read_yaml(config_file) if config_file else {}

    if env_config.concourse_url:
        concourse = config_dict.get("concourse")
        if not isinstance(concourse, dict):
            concourse = {}
        config_dict["concourse"] = {**concourse, "url": env_config.concourse_url}

    if not config_dict:
        raise ConfigurationError(
            "Configuration file is empty",
            suggestions=[
                "Copy config.example.yaml to config.yaml",
                "Set concourse.url in the config file or CONCOURSE_URL in the environment",
            ],
        )

    warnings = check_for_warnings(config_dict)
    if warnings:
        emit_warnings(warnings)

    try:
        app_config = AppConfig.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(
            "Configuration validation failed",
            errors=[_describe_error(error) for error in e.errors()],
            suggestions=[
                "Review config.example.yaml for correct format",
                "Check that all required fields are present",
                "Verify field types match the expected schema",
            ],
        ) from e

    return app_config, env_config


def _describe_error(error: Dict[str, Any]) -> str:
    field_path = " -> ".join(str(loc) for loc in error["loc"])
    error_type = error["type"]
    if error_type == "missing":
        return f"Missing required field: {field_path}"
    if error_type in ("string_type", "int_type", "int_parsing", "bool_type"):
        expected = error_type.split("_")[0]
        return f"Invalid type for '{field_path}': expected {expected}, got {error.get('input')!r}"
    return f"{field_path}: {error['msg']}"


def _read_yaml(config_file: Path) -> Dict[str, Any]:
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML configuration: {e}",
            suggestions=[
                "Check YAML syntax in your config file",
                "Ensure proper indentation (use spaces, not tabs)",
            ],
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read configuration file: {e}",
            suggestions=[f"Ensure {config_file} is readable", "Check file permissions"],
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration root must be a mapping, got {type(data).__name__}",
            suggestions=["Review config.example.yaml for correct format"],
        )
    return data


def _find_config_file(config_path: Optional[Path], allow_missing: bool = False) -> Optional[Path]:
    """
    Resolve the configuration file.

    Raises:
        ConfigurationError: If an explicit path does not exist, or no default
            file exists and ``allow_missing`` is False
    """
    if config_path:
        if not config_path.exists():
            raise ConfigurationError(
                f"Specified configuration file not found: {config_path}",
                suggestions=[
                    f"Ensure {config_path} exists",
                    "Copy config.example.yaml to config.yaml",
                ],
            )
        return config_path

    for candidate in DEFAULT_CONFIG_CANDIDATES:
        if candidate.exists():
            return candidate

    if allow_missing:
        return None

    raise ConfigurationError(
        "Configuration file not found",
        errors=[f"Tried: {candidate}" for candidate in DEFAULT_CONFIG_CANDIDATES],
        suggestions=[
            "Copy config.example.yaml to config.yaml",
            "Use --config to specify a custom location",
            "Or set CONCOURSE_URL to run without a config file",
        ],
    )
