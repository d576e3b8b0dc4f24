"""Configuration file support for di2hap."""

import logging
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = {
    "vcf": "w",
    "vcf.gz": "wz",
    "bcf": "wb",
    "ubcf": "wbu",
}

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConfigurationError(Exception):
    """Raised when the run configuration cannot be used."""

    pass


class ConfigValidationError(ConfigurationError):
    """Raised when configuration validation fails."""

    pass


@dataclass
class ConvertConfig:
    """Configuration for haploid conversion."""

    haploid_code: str = "0"
    verify: bool = False
    output_format: str = "vcf"
    all_haploid: bool = False
    log_level: str = "INFO"
    progress_interval: int = 10_000


def validate_config(config_dict: dict[str, Any]) -> None:
    """Validate configuration values.

    Raises:
        ConfigValidationError: If any configuration value is invalid.
    """
    if "haploid_code" in config_dict:
        code = config_dict["haploid_code"]
        if not isinstance(code, str):
            raise ConfigValidationError(
                f"haploid_code must be a string, got {type(code).__name__}"
            )
        if not code:
            raise ConfigValidationError("haploid_code must not be empty")

    for key in ("verify", "all_haploid"):
        if key in config_dict and not isinstance(config_dict[key], bool):
            raise ConfigValidationError(
                f"{key} must be a boolean, got {type(config_dict[key]).__name__}"
            )

    if "output_format" in config_dict:
        output_format = config_dict["output_format"]
        if output_format not in OUTPUT_FORMATS:
            raise ConfigValidationError(
                f"output_format must be one of {sorted(OUTPUT_FORMATS)}, got '{output_format}'"
            )

    if "progress_interval" in config_dict:
        interval = config_dict["progress_interval"]
        if not isinstance(interval, int) or isinstance(interval, bool):
            raise ConfigValidationError(
                f"progress_interval must be an integer, got {type(interval).__name__}"
            )
        if interval <= 0:
            raise ConfigValidationError(f"progress_interval must be positive, got {interval}")

    if "log_level" in config_dict:
        log_level = config_dict["log_level"]
        if not isinstance(log_level, str):
            raise ConfigValidationError(
                f"log_level must be a string, got {type(log_level).__name__}"
            )
        if log_level.upper() not in VALID_LOG_LEVELS:
            raise ConfigValidationError(
                f"log_level must be one of {VALID_LOG_LEVELS}, got '{log_level}'"
            )


def load_config(config_path: Path, overrides: dict[str, Any] | None = None) -> ConvertConfig:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML configuration file.
        overrides: Optional dict of values to override loaded config.

    Returns:
        ConvertConfig instance with loaded values.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ConfigValidationError: If any configuration value is invalid.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "rb") as f:
        try:
            toml_data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigValidationError(f"Invalid TOML in {config_path}: {e}") from e

    config_dict = toml_data.get("di2hap", {})

    if overrides:
        config_dict.update(overrides)

    validate_config(config_dict)

    valid_fields = {f.name for f in fields(ConvertConfig)}
    unknown = sorted(set(config_dict) - valid_fields)
    if unknown:
        logger.warning("Ignoring unknown configuration keys: %s", ", ".join(unknown))

    filtered_config = {k: v for k, v in config_dict.items() if k in valid_fields}
    if "log_level" in filtered_config:
        filtered_config["log_level"] = filtered_config["log_level"].upper()

    return ConvertConfig(**filtered_config)
