"""
SigV4 Python SDK
AWS Signature Version 4 request signing for AWS and AWS-compatible APIs
"""

from .version import __version__
from .exceptions import (
    SigV4SDKError,
    ValidationError,
    ServerCommunicationError,
)
from .service import (
    Service,
    Region,
    ServiceProvider,
    AWS,
    ALIYUN,
    S3,
    DYNAMODB,
    OSS,
    get_provider,
)
from .signing import (
    # Core signing functionality
    Signer,
    Strategy,
    create_signer,
    sign_request,
    # Types
    ALGORITHM_V4,
    UNSIGNED_PAYLOAD,
    Signable,
    V4Signature,
    BodyStrategy,
    IgnoreBody,
    PreComputed,
    Default,
    HasBody,
    SigningConfig,
    SigningError,
    SigningErrorCodes,
    # Configuration
    SigningConfigBuilder,
    create_signing_config,
    # Utilities
    unchunk_http,
    # HTTP Integration
    SigV4Auth,
    SigV4RequestsAuth,
    SigningSession,
    create_signing_session,
)
from .signing.kernel import check_platform_compatibility
from .config import (
    ConfigError,
    LoggingConfig,
    configure_logging,
    load_signing_config_from_env,
    load_signing_config_from_json,
    load_signing_config_from_file,
)


# Initialize the SDK
def initialize_sdk():
    """
    Initialize the SigV4 SDK and check platform compatibility.

    Returns:
        dict: Compatibility information with 'compatible' (bool) and 'warnings' (list)
    """
    warnings = []
    compatible = True

    compat_info = check_platform_compatibility()
    if not compat_info['sha256_supported']:
        warnings.append('SHA-256 not supported by the cryptography backend')
        compatible = False

    if not compat_info['hmac_sha256_supported']:
        warnings.append('HMAC-SHA256 not supported by the cryptography backend')
        compatible = False

    return {
        'compatible': compatible,
        'warnings': warnings
    }


# Public API exports
__all__ = [
    '__version__',
    'initialize_sdk',
    'check_platform_compatibility',
    # Exceptions
    'SigV4SDKError',
    'ValidationError',
    'ServerCommunicationError',
    # Services
    'Service',
    'Region',
    'ServiceProvider',
    'AWS',
    'ALIYUN',
    'S3',
    'DYNAMODB',
    'OSS',
    'get_provider',
    # Request Signing - Core
    'Signer',
    'Strategy',
    'create_signer',
    'sign_request',
    # Request Signing - Types
    'ALGORITHM_V4',
    'UNSIGNED_PAYLOAD',
    'Signable',
    'V4Signature',
    'BodyStrategy',
    'IgnoreBody',
    'PreComputed',
    'Default',
    'HasBody',
    'SigningConfig',
    'SigningError',
    'SigningErrorCodes',
    # Request Signing - Configuration
    'SigningConfigBuilder',
    'create_signing_config',
    # Request Signing - Utilities
    'unchunk_http',
    # Request Signing - HTTP Integration
    'SigV4Auth',
    'SigV4RequestsAuth',
    'SigningSession',
    'create_signing_session',
    # Configuration loading
    'ConfigError',
    'LoggingConfig',
    'configure_logging',
    'load_signing_config_from_env',
    'load_signing_config_from_json',
    'load_signing_config_from_file',
]
