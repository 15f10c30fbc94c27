"""
Configuration management for the message codec.

Configuration is loaded from multiple sources with layered precedence:
1. Built-in defaults (Pydantic model defaults)
2. YAML config file (/etc/ami-message/config.yml or --config path)
3. Environment variables (AMI_MESSAGE_* prefix, __ for nesting)
4. Command-line arguments (highest precedence)
"""

from __future__ import annotations

import argparse
import codecs
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_PATH = Path("/etc/ami-message/config.yml")
DEFAULT_ENV_PREFIX = "AMI_MESSAGE_"

# Variable: lines are stored as an ordinary "variable" field
VARIABLES_MODE_COMPAT = "compat"
# Variable: lines are parsed into Message.variables
VARIABLES_MODE_ROUTED = "routed"

# =============================================================================
# Codec Configuration
# =============================================================================


class CodecConfig(BaseModel):
    """Decoder behaviour settings.

    Attributes:
        variables_mode: How decode treats ``Variable:`` lines ('compat' or
            'routed').
        encoding: Text encoding used when decoding bytes and writing CLI output.
        encoding_errors: Codec error handler for byte conversion.
    """

    variables_mode: str = Field(
        default=VARIABLES_MODE_COMPAT,
        description="'compat': Variable lines become a 'variable' field (last wins); "
        "'routed': Variable lines are parsed into the variables mapping",
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding for byte input/output",
    )
    encoding_errors: str = Field(
        default="surrogateescape",
        description="Error handler for byte conversion (strict, replace, surrogateescape, ...)",
    )

    @field_validator("variables_mode")
    @classmethod
    def validate_variables_mode(cls, v: str) -> str:
        """Validate and normalize the variables mode."""
        valid_modes = {VARIABLES_MODE_COMPAT, VARIABLES_MODE_ROUTED}
        v_lower = v.lower()
        if v_lower not in valid_modes:
            raise ValueError(
                f"Invalid variables mode: {v}. Must be one of: {', '.join(sorted(valid_modes))}"
            )
        return v_lower

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Validate that the encoding is known to Python."""
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"Unknown encoding: {v}") from e
        return v

    @field_validator("encoding_errors")
    @classmethod
    def validate_encoding_errors(cls, v: str) -> str:
        """Validate that the error handler is registered."""
        try:
            codecs.lookup_error(v)
        except LookupError as e:
            raise ValueError(f"Unknown encoding error handler: {v}") from e
        return v

    @property
    def route_variables(self) -> bool:
        """Whether Variable: lines are parsed into the variables mapping."""
        return self.variables_mode == VARIABLES_MODE_ROUTED


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level.
        log_to_stdout: Log to stdout instead of stderr.
        json_format: Emit JSON log records instead of plain text.
        debug_mode: Force DEBUG level regardless of ``level``.
    """

    level: str = Field(
        default="warning",
        description="Log level: debug, info, warn, error, critical",
    )
    log_to_stdout: bool = Field(
        default=False,
        description="Whether to log to stdout instead of stderr",
    )
    json_format: bool = Field(
        default=True,
        description="Whether to emit JSON-formatted log records",
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable extra diagnostic logging",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"debug", "info", "warn", "warning", "error", "critical"}
        v_lower = v.lower()
        if v_lower not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(sorted(valid_levels))}"
            )
        # Normalize 'warn' to 'warning'
        if v_lower == "warn":
            return "warning"
        return v_lower


# =============================================================================
# Main Application Configuration
# =============================================================================


class AppConfig(BaseModel):
    """
    Main configuration model.

    Attributes:
        codec: Decoder behaviour settings.
        logging: Logging configuration.
    """

    codec: CodecConfig = Field(
        default_factory=CodecConfig,
        description="Codec settings",
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration",
    )


# =============================================================================
# Configuration Loading Functions
# =============================================================================


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Args:
        base: The base dictionary.
        override: The dictionary with values to override.

    Returns:
        A new dictionary with merged values.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Dictionary with configuration values.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        yaml.YAMLError: If the YAML is invalid.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def _parse_env_value(value: str) -> Any:
    """
    Parse an environment variable value to an appropriate Python type.

    Args:
        value: String value from environment variable.

    Returns:
        Parsed value: bool for the usual switch words, otherwise the string
        unchanged. Pydantic handles any further coercion.
    """
    if value.lower() in ("true", "yes", "on"):
        return True
    if value.lower() in ("false", "no", "off"):
        return False
    return value


def _load_env_config(prefix: str = DEFAULT_ENV_PREFIX) -> dict[str, Any]:
    """
    Load configuration from environment variables.

    - Prefix: AMI_MESSAGE_ (configurable)
    - Nested keys: Double underscore (__) separator
    - Example: AMI_MESSAGE_CODEC__VARIABLES_MODE=routed

    Args:
        prefix: Environment variable prefix.

    Returns:
        Dictionary with configuration values.
    """
    result: dict[str, Any] = {}

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        config_key = key[len(prefix) :].lower()
        parts = config_key.split("__")

        current = result
        for part in parts[:-1]:
            if part not in current:
                current[part] = {}
            current = current[part]

        current[parts[-1]] = _parse_env_value(value)

    return result


def config_arguments() -> argparse.ArgumentParser:
    """
    Build the argparse parent parser holding the configuration options.

    The returned parser has no help option so it can be passed as a parent to
    other parsers (see ``ami_message.cli``).
    """
    parser = argparse.ArgumentParser(add_help=False)

    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="Path to configuration file",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error", "critical"],
        help="Override log level",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode",
    )

    parser.add_argument(
        "--variables-mode",
        type=str,
        choices=[VARIABLES_MODE_COMPAT, VARIABLES_MODE_ROUTED],
        help="How Variable: lines are decoded",
    )

    return parser


def cli_overrides(parsed: argparse.Namespace) -> dict[str, Any]:
    """
    Convert parsed configuration options into a config override dictionary.

    Args:
        parsed: Namespace produced by a parser built on ``config_arguments``.

    Returns:
        Dictionary with overrides. The config file path, if given, is stored
        under the ``_config_path`` key.
    """
    result: dict[str, Any] = {}

    if getattr(parsed, "config", None):
        result["_config_path"] = parsed.config

    if getattr(parsed, "log_level", None):
        result["logging"] = {"level": parsed.log_level}

    if getattr(parsed, "debug", False):
        result.setdefault("logging", {})
        result["logging"]["debug_mode"] = True
        result["logging"]["level"] = "debug"

    if getattr(parsed, "variables_mode", None):
        result["codec"] = {"variables_mode": parsed.variables_mode}

    return result


def _parse_cli_args(args: list[str] | None = None) -> dict[str, Any]:
    """
    Parse command-line arguments.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Dictionary with parsed arguments.
    """
    parser = argparse.ArgumentParser(
        description="Manager protocol message codec",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        parents=[config_arguments()],
    )
    return cli_overrides(parser.parse_args(args))


def load_config(
    config_path: Path | str | None = None,
    env_prefix: str = DEFAULT_ENV_PREFIX,
    cli_args: list[str] | None = None,
    overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Load configuration from all sources with layered precedence.

    Configuration is loaded from multiple sources in order:
    1. Built-in defaults (from AppConfig model)
    2. YAML config file (if specified or default exists)
    3. Environment variables (AMI_MESSAGE_* prefix)
    4. Command-line arguments

    Later sources override earlier ones.

    Args:
        config_path: Path to YAML configuration file. If None, uses the
            CLI --config argument or the default path.
        env_prefix: Prefix for environment variables.
        cli_args: Command-line arguments. If None and no overrides are
            given, uses sys.argv.
        overrides: Already parsed CLI overrides (see ``cli_overrides``).
            Takes the place of ``cli_args`` when given.

    Returns:
        Fully configured AppConfig instance.

    Raises:
        FileNotFoundError: If specified config file doesn't exist.
        ValidationError: If configuration is invalid.

    Example:
        >>> config = load_config(cli_args=[])
        >>> print(config.codec.variables_mode)
        'compat'
    """
    config_dict: dict[str, Any] = {}

    if overrides is not None:
        cli_config = dict(overrides)
    else:
        cli_config = _parse_cli_args(cli_args)

    if config_path is None:
        if "_config_path" in cli_config:
            config_path = Path(cli_config.pop("_config_path"))
        elif DEFAULT_CONFIG_PATH.exists():
            config_path = DEFAULT_CONFIG_PATH
    else:
        cli_config.pop("_config_path", None)
        if isinstance(config_path, str):
            config_path = Path(config_path)

    if config_path is not None:
        yaml_config = _load_yaml_config(config_path)
        config_dict = _deep_merge(config_dict, yaml_config)

    env_config = _load_env_config(env_prefix)
    config_dict = _deep_merge(config_dict, env_config)

    config_dict = _deep_merge(config_dict, cli_config)

    return AppConfig(**config_dict)
