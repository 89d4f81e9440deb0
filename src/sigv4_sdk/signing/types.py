"""
Type definitions for AWS Signature Version 4 request signing

This module provides the value types passed into and out of the signing
kernel, the body strategies understood by the signer and the signing
configuration.
"""

from datetime import datetime
from typing import Awaitable, Callable, Dict, Optional, Tuple, Union, Any
from dataclasses import dataclass


ALGORITHM_V4 = "AWS4-HMAC-SHA256"

# Placeholder accepted by S3 in place of a payload digest
UNSIGNED_PAYLOAD = "UNSIGNED-PAYLOAD"

# Type aliases for convenience
HeaderPair = Tuple[str, str]
QueryPair = Tuple[str, str]
Clock = Callable[[], Union[datetime, Awaitable[datetime]]]


@dataclass(frozen=True)
class Signable:
    """
    Input to the signing kernel

    Attributes:
        region: Region identifier embedded in the credential scope (e.g. us-east-1)
        service: Service identifier embedded in the credential scope (e.g. s3)
        method: HTTP method (GET, POST, etc.)
        http_path: Encoded request path, "/" when the request has none
        query_params: Query key/value pairs, in any order
        headers: Header name/value pairs to sign
        body: Raw body bytes, if available
        body_hash: Pre-computed lowercase hex sha256 digest or a placeholder
        access_key: Access key id
        secret_key: Secret access key
        instant: Request time (UTC)
    """
    region: str
    service: str
    method: str
    http_path: str
    query_params: Tuple[QueryPair, ...]
    headers: Tuple[HeaderPair, ...]
    body: Optional[bytes]
    body_hash: Optional[str]
    access_key: str
    secret_key: str
    instant: datetime


@dataclass(frozen=True)
class V4Signature:
    """
    Signature computed by the signing kernel

    Attributes:
        algorithm: Signing algorithm, always AWS4-HMAC-SHA256
        credential_scope: yyyyMMdd/region/service/aws4_request
        signed_headers: Semicolon joined lowercase header names
        signature: Lowercase hex signature
        access_key: Access key id
    """
    algorithm: str
    credential_scope: str
    signed_headers: str
    signature: str
    access_key: str

    def render_auth(self) -> str:
        """Render the Authorization header value."""
        return (
            f"{self.algorithm} Credential={self.access_key}/{self.credential_scope}, "
            f"SignedHeaders={self.signed_headers}, Signature={self.signature}"
        )


class BodyStrategy:
    """Base of the body strategy variants understood by the signer"""
    __slots__ = ()


@dataclass(frozen=True)
class IgnoreBody(BodyStrategy):
    """Sign without body bytes; the empty payload hash is used"""


@dataclass(frozen=True)
class PreComputed(BodyStrategy):
    """Use the given hash (hex digest or placeholder token) verbatim"""
    value: str


@dataclass(frozen=True)
class Default(BodyStrategy):
    """Drain the request body and hash it"""


@dataclass(frozen=True)
class HasBody(BodyStrategy):
    """Hash exactly the bytes supplied by the caller"""
    body: bytes


@dataclass
class SigningConfig:
    """
    Configuration for request signing

    Attributes:
        region: Region to sign for (str or Region)
        service: Service to sign for (str or Service)
        access_key: Access key id
        secret_key: Secret access key
        session_token: Optional STS session token, sent as X-Amz-Security-Token
        clock: Optional clock returning the signing time (may be async)
        add_content_sha256_header: Send the payload hash as X-Amz-Content-Sha256
        log_canonical_request: Log canonical requests at debug level
    """
    region: str
    service: str
    access_key: str
    secret_key: str
    session_token: Optional[str] = None
    clock: Optional[Clock] = None
    add_content_sha256_header: bool = False
    log_canonical_request: bool = False

    def __post_init__(self):
        """Validate signing configuration"""
        # Region and Service wrappers carry their identifier in .value
        self.region = getattr(self.region, 'value', self.region)
        self.service = getattr(self.service, 'value', self.service)

        for field_name, label in (
            ('region', 'Region'),
            ('service', 'Service'),
            ('access_key', 'Access key'),
            ('secret_key', 'Secret key'),
        ):
            if not getattr(self, field_name):
                raise SigningError(
                    f"{label} cannot be empty",
                    SigningErrorCodes.INVALID_CONFIG,
                    {"field": field_name}
                )

    def __repr__(self) -> str:
        return (
            f"SigningConfig(region='{self.region}', service='{self.service}', "
            f"access_key='{self.access_key}', secret_key='***', "
            f"session_token={'***' if self.session_token else None})"
        )


class SigningError(Exception):
    """
    Error class for signing operations

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Optional additional error details
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.code}, details: {self.details})"
        return f"{self.message} (code: {self.code})"

    def __repr__(self) -> str:
        return f"SigningError(message='{self.message}', code='{self.code}', details={self.details})"


# Common signing error codes
class SigningErrorCodes:
    """Standard error codes for signing operations"""

    # Input errors
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_CONFIG = "INVALID_CONFIG"
    INVALID_CLOCK = "INVALID_CLOCK"

    # Signing errors
    SIGNING_FAILED = "SIGNING_FAILED"

    # Crypto errors
    UNSUPPORTED_ALGORITHM = "UNSUPPORTED_ALGORITHM"
