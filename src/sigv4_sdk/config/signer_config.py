"""
Signing configuration loading

Builds SigningConfig values from the environment, JSON text or JSON files and
applies the SDK logging settings.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from ..signing.types import SigningConfig, SigningError


ENV_ACCESS_KEY = 'AWS_ACCESS_KEY_ID'
ENV_SECRET_KEY = 'AWS_SECRET_ACCESS_KEY'
ENV_SESSION_TOKEN = 'AWS_SESSION_TOKEN'
ENV_REGION = 'AWS_REGION'
ENV_DEFAULT_REGION = 'AWS_DEFAULT_REGION'
ENV_SERVICE = 'SIGV4_SERVICE'

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


class ConfigError(Exception):
    """Configuration loading and validation error"""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = 'WARNING'
    log_canonical_request: bool = False


def configure_logging(config: LoggingConfig) -> None:
    """
    Apply logging configuration to the SDK loggers.

    Args:
        config: Logging configuration

    Raises:
        ConfigError: If the level name is unknown
    """
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        raise ConfigError(f"Unknown log level: {config.level}", "INVALID_FORMAT")

    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger('sigv4_sdk').setLevel(level)


def load_signing_config_from_env(
    environ: Optional[Mapping[str, str]] = None,
    service: Optional[str] = None,
    region: Optional[str] = None
) -> SigningConfig:
    """
    Load signing configuration from environment variables.

    Explicit service and region arguments win over the environment.

    Args:
        environ: Environment mapping (defaults to os.environ)
        service: Service identifier override
        region: Region identifier override

    Returns:
        SigningConfig: Signing configuration

    Raises:
        ConfigError: If credentials, region or service are missing
    """
    env = os.environ if environ is None else environ

    access_key = env.get(ENV_ACCESS_KEY)
    secret_key = env.get(ENV_SECRET_KEY)
    if not access_key or not secret_key:
        raise ConfigError(
            f"{ENV_ACCESS_KEY} and {ENV_SECRET_KEY} must be set",
            "MISSING_CREDENTIALS"
        )

    region = region or env.get(ENV_REGION) or env.get(ENV_DEFAULT_REGION)
    if not region:
        raise ConfigError(f"{ENV_REGION} or {ENV_DEFAULT_REGION} must be set", "INVALID_FORMAT")

    service = service or env.get(ENV_SERVICE)
    if not service:
        raise ConfigError(f"Service must be given or {ENV_SERVICE} set", "INVALID_FORMAT")

    return SigningConfig(
        region=region,
        service=service,
        access_key=access_key,
        secret_key=secret_key,
        session_token=env.get(ENV_SESSION_TOKEN) or None
    )


def _parse_config_dict(
    data: Dict[str, Any],
    overrides: Dict[str, Optional[str]]
) -> Tuple[SigningConfig, LoggingConfig]:
    """Parse configuration dictionary into structured objects"""
    logging_data = data.get('logging', {})
    logging_config = LoggingConfig(**logging_data)

    fields = {
        'region': overrides.get('region') or data.get('region'),
        'service': overrides.get('service') or data.get('service'),
        'access_key': data.get('access_key'),
        'secret_key': data.get('secret_key'),
    }
    if not fields['access_key'] or not fields['secret_key']:
        raise ConfigError("access_key and secret_key are required", "MISSING_CREDENTIALS")

    signing_config = SigningConfig(
        session_token=data.get('session_token'),
        add_content_sha256_header=bool(data.get('add_content_sha256_header', False)),
        log_canonical_request=logging_config.log_canonical_request,
        **fields
    )
    return signing_config, logging_config


def load_config_from_json(
    json_string: str,
    service: Optional[str] = None,
    region: Optional[str] = None
) -> Tuple[SigningConfig, LoggingConfig]:
    """
    Load signing and logging configuration from JSON text.

    Returns:
        tuple: (SigningConfig, LoggingConfig)

    Raises:
        ConfigError: If the JSON is malformed or incomplete
    """
    try:
        data = json.loads(json_string)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Failed to parse configuration JSON: {e}", "PARSE_ERROR")

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object", "INVALID_FORMAT")

    try:
        return _parse_config_dict(data, {'service': service, 'region': region})
    except (TypeError, ValueError, SigningError) as e:
        raise ConfigError(f"Invalid configuration format: {e}", "INVALID_FORMAT")


def load_signing_config_from_json(
    json_string: str,
    service: Optional[str] = None,
    region: Optional[str] = None
) -> SigningConfig:
    """Load signing configuration from JSON text"""
    signing_config, _ = load_config_from_json(json_string, service, region)
    return signing_config


def load_config_from_file(
    file_path: Union[str, Path],
    service: Optional[str] = None,
    region: Optional[str] = None
) -> Tuple[SigningConfig, LoggingConfig]:
    """Load signing and logging configuration from a JSON file"""
    try:
        path = Path(file_path)
        with open(path, 'r', encoding='utf-8') as f:
            json_string = f.read()
    except OSError as e:
        raise ConfigError(f"Failed to read configuration file: {e}", "FILE_ERROR")

    return load_config_from_json(json_string, service, region)


def load_signing_config_from_file(
    file_path: Union[str, Path],
    service: Optional[str] = None,
    region: Optional[str] = None
) -> SigningConfig:
    """Load signing configuration from a JSON file"""
    signing_config, _ = load_config_from_file(file_path, service, region)
    return signing_config
