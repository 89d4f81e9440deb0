"""
SigV4 Python SDK - Request Signing Module

AWS Signature Version 4 implementation: the signing kernel, the percent
encoder feeding query canonicalization, and the signer that applies them to
outgoing HTTP requests.
"""

from .types import (
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
)

from .signer import (
    Signer,
    Strategy,
    EXCLUDE_HEADERS,
    X_AMZ_DATE,
    create_signer,
    sign_request,
    is_signable_header,
    render_date,
    unsafe_hash,
    unchunk_http,
)

from .signing_config import (
    SigningConfigBuilder,
    create_signing_config,
    validate_signing_config,
)

from .integration import (
    SigV4Auth,
    SigV4RequestsAuth,
    SigningSession,
    create_signing_session,
    sign_prepared_request,
)

from . import kernel
from . import uri_encoder

# Public API exports
__all__ = [
    # Core signing functionality
    'Signer',
    'Strategy',
    'create_signer',
    'sign_request',
    'kernel',
    'uri_encoder',
    # Types
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
    # Configuration
    'SigningConfigBuilder',
    'create_signing_config',
    'validate_signing_config',
    # Utilities
    'EXCLUDE_HEADERS',
    'X_AMZ_DATE',
    'is_signable_header',
    'render_date',
    'unsafe_hash',
    'unchunk_http',
    # HTTP Integration
    'SigV4Auth',
    'SigV4RequestsAuth',
    'SigningSession',
    'create_signing_session',
    'sign_prepared_request',
]
