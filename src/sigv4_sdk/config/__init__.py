"""
Configuration management for the SigV4 Python SDK

This module loads signing credentials and settings from the environment or
JSON configuration files and configures SDK logging.
"""

from .signer_config import (
    ConfigError,
    LoggingConfig,
    configure_logging,
    load_config_from_json,
    load_config_from_file,
    load_signing_config_from_env,
    load_signing_config_from_json,
    load_signing_config_from_file,
)

__all__ = [
    'ConfigError',
    'LoggingConfig',
    'configure_logging',
    'load_config_from_json',
    'load_config_from_file',
    'load_signing_config_from_env',
    'load_signing_config_from_json',
    'load_signing_config_from_file',
]
