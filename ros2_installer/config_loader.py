# ros2_installer/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the installer.

Handles loading settings from Pydantic model defaults, environment variables,
an optional YAML file and command-line arguments, applying this order of
precedence (later wins):
1. Pydantic Model Defaults
2. Environment Variables (ROS_VARIANT, INSTALL_DEV_TOOLS, SKIP_UPGRADE, ...)
3. YAML Configuration File
4. Command-Line Arguments
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from common.exceptions import ConfigurationError

from .config_models import AppSettings

module_logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "config.yaml"


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively updates `source` with values from `overrides`. Nested
    dictionaries are merged; None values in `overrides` never replace an
    existing value.
    """
    for key, value in overrides.items():
        if (
            isinstance(value, dict)
            and key in source
            and isinstance(source[key], dict)
        ):
            source[key] = _deep_update(source[key], value)
        elif value is not None:
            source[key] = value
    return source


def _format_validation_error(error: ValidationError) -> str:
    messages = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail.get("loc", ()))
        messages.append(f"{location}: {detail.get('msg')}" if location else str(detail.get("msg")))
    return "; ".join(messages)


def _build_settings(values: Optional[Dict[str, Any]] = None) -> AppSettings:
    try:
        return AppSettings(**(values or {}))
    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration error: {_format_validation_error(e)}",
            original_error=e,
        ) from e


def load_yaml_config(
    config_file_path: Union[str, Path],
    current_logger: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """
    Read a YAML mapping from config_file_path.

    A missing file, unparsable YAML, or a document that is not a mapping
    yields an empty dict; the latter two are logged as warnings.
    """
    logger_to_use = current_logger if current_logger else module_logger
    yaml_config_path = Path(config_file_path)

    if not yaml_config_path.is_file():
        logger_to_use.debug(
            f"Configuration file '{yaml_config_path}' not found. Using defaults, environment variables, and CLI args."
        )
        return {}

    try:
        with open(yaml_config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger_to_use.warning(
            f"Could not parse YAML config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}
    except OSError as e:
        logger_to_use.warning(
            f"Could not read config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}

    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        logger_to_use.warning(
            f"Config file '{yaml_config_path}' does not contain a valid YAML dictionary. Ignoring."
        )
        return {}

    logger_to_use.info(f"Loaded configuration from {yaml_config_path}")
    return yaml_data


def _cli_overrides(cli_args: argparse.Namespace) -> Dict[str, Any]:
    cli_arg_dict = vars(cli_args)
    mapped_cli_values: Dict[str, Any] = {}

    if cli_arg_dict.get("variant") is not None:
        mapped_cli_values["ros_variant"] = cli_arg_dict["variant"]
    if cli_arg_dict.get("skip_upgrade"):
        mapped_cli_values["skip_upgrade"] = True
    if cli_arg_dict.get("no_dev_tools"):
        mapped_cli_values["install_dev_tools"] = False
    return mapped_cli_values


def load_app_settings(
    cli_args: Optional[argparse.Namespace] = None,
    config_file_path: Union[str, Path] = DEFAULT_CONFIG_FILE,
    current_logger: Optional[logging.Logger] = None,
) -> AppSettings:
    """
    Loads application settings (see module docstring for precedence).

    Args:
        cli_args: Parsed command-line arguments (from argparse).
        config_file_path: Path to the optional YAML configuration file.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        An instance of AppSettings with the fully resolved configuration.

    Raises:
        ConfigurationError: A value failed validation, e.g. an unknown
            ROS_VARIANT or a non-boolean SKIP_UPGRADE.
    """
    logger_to_use = current_logger if current_logger else module_logger

    # BaseSettings reads the environment here: Model Defaults < Environment.
    settings_after_env_and_defaults = _build_settings()
    current_values_dict = settings_after_env_and_defaults.model_dump()

    yaml_data = load_yaml_config(config_file_path, logger_to_use)
    if yaml_data:
        current_values_dict = _deep_update(current_values_dict, yaml_data)

    if cli_args:
        current_values_dict = _deep_update(
            current_values_dict, _cli_overrides(cli_args)
        )

    final_settings = _build_settings(current_values_dict)
    logger_to_use.debug(
        "Successfully loaded and validated application settings"
    )
    return final_settings
