"""
AWS Signature Version 4 signing kernel

Pure functions that turn a Signable into a V4Signature: digests, HMAC key
derivation, date formatting, canonical request and string-to-sign assembly.
Every intermediate string is byte-exact; any deviation yields a signature the
service rejects.
"""

import base64
import platform
import sys
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, Dict, Tuple

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac

from .types import (
    ALGORITHM_V4,
    Signable,
    V4Signature,
    SigningError,
    SigningErrorCodes,
)
from . import uri_encoder


AWS4_REQUEST = "aws4_request"


def sha256(data: bytes) -> bytes:
    """
    Compute the SHA-256 digest of data.

    Raises:
        SigningError: If the cryptography backend lacks SHA-256
    """
    try:
        digest = hashes.Hash(hashes.SHA256())
    except UnsupportedAlgorithm as e:
        raise SigningError(
            f"SHA-256 is not supported by the cryptography backend: {e}",
            SigningErrorCodes.UNSUPPORTED_ALGORITHM,
            {"algorithm": "SHA-256"}
        )
    digest.update(data)
    return digest.finalize()


def hmac_sha256(payload: bytes, key: bytes) -> bytes:
    """
    Compute HMAC-SHA256 of payload keyed with key.

    Raises:
        SigningError: If the cryptography backend lacks HMAC-SHA256
    """
    try:
        mac = hmac.HMAC(key, hashes.SHA256())
    except UnsupportedAlgorithm as e:
        raise SigningError(
            f"HMAC-SHA256 is not supported by the cryptography backend: {e}",
            SigningErrorCodes.UNSUPPORTED_ALGORITHM,
            {"algorithm": "HMAC-SHA256"}
        )
    mac.update(payload)
    return mac.finalize()


def to_hex(data: bytes) -> str:
    """Convert bytes to lowercase hex string."""
    return data.hex()


def b64(data: bytes) -> str:
    """Convert bytes to base64 text."""
    return base64.b64encode(data).decode('ascii')


def bs(text: str) -> bytes:
    """Encode text as UTF-8 bytes."""
    return text.encode('utf-8')


def _as_utc(instant: datetime) -> datetime:
    # Naive datetimes are taken to be UTC already
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def amz_date(instant: datetime) -> str:
    """Format instant as yyyyMMdd'T'HHmmss'Z' in UTC."""
    return _as_utc(instant).strftime('%Y%m%dT%H%M%SZ')


def date_stamp(instant: datetime) -> str:
    """Format instant as yyyyMMdd in UTC."""
    return _as_utc(instant).strftime('%Y%m%d')


def http_date(instant: datetime) -> str:
    """Format instant as an RFC 1123 HTTP-date."""
    return format_datetime(_as_utc(instant).replace(microsecond=0), usegmt=True)


def derive_signing_key(secret: str, date: str, region: str, service: str) -> bytes:
    """
    Derive the SigV4 signing key.

    Each stage is keyed by the output of the previous one, seeded with
    "AWS4" + secret.

    Args:
        secret: Secret access key
        date: Date stamp (yyyyMMdd)
        region: Region identifier
        service: Service identifier

    Returns:
        bytes: 32-byte signing key
    """
    k_secret = bs("AWS4" + secret)
    k_date = hmac_sha256(bs(date), k_secret)
    k_region = hmac_sha256(bs(region), k_date)
    k_service = hmac_sha256(bs(service), k_region)
    return hmac_sha256(bs(AWS4_REQUEST), k_service)


def payload_hash(signable: Signable) -> str:
    """
    Resolve the payload hash used in the canonical request.

    A supplied body_hash wins over the body; with neither, the hash of the
    empty payload is used.
    """
    if signable.body_hash is not None:
        return signable.body_hash
    return to_hex(sha256(signable.body if signable.body is not None else b''))


def canonical_query_string(signable: Signable) -> str:
    """Build the canonical query string, sorted by encoded key."""
    if not signable.query_params:
        return ""

    encoded = [
        (uri_encoder.encode(key), uri_encoder.encode(value))
        for key, value in signable.query_params
    ]
    encoded.sort(key=lambda pair: pair[0])
    return '&'.join(f"{key}={value}" for key, value in encoded)


def derive_canonical_request(signable: Signable) -> Tuple[str, str]:
    """
    Build the canonical request.

    Args:
        signable: Request data to canonicalize

    Returns:
        tuple: (canonical request, signed headers)
    """
    sorted_headers = sorted(
        ((name.lower(), value) for name, value in signable.headers),
        key=lambda pair: pair[0]
    )

    canonical_headers = '\n'.join(f"{name}:{value.strip()}" for name, value in sorted_headers)
    signed_headers = ';'.join(name for name, _ in sorted_headers)

    canonical_request = '\n'.join([
        signable.method,
        signable.http_path,
        canonical_query_string(signable),
        canonical_headers,
        "",  # blank line closing the header block
        signed_headers,
        payload_hash(signable),
    ])

    return canonical_request, signed_headers


def credential_scope(signable: Signable) -> str:
    """Build yyyyMMdd/region/service/aws4_request."""
    return '/'.join([
        date_stamp(signable.instant),
        signable.region,
        signable.service,
        AWS4_REQUEST,
    ])


def derive_string_to_sign(signable: Signable) -> Tuple[str, str, str]:
    """
    Build the string to sign.

    Returns:
        tuple: (string to sign, signed headers, credential scope)
    """
    canonical_request, signed_headers = derive_canonical_request(signable)
    scope = credential_scope(signable)

    string_to_sign = '\n'.join([
        ALGORITHM_V4,
        amz_date(signable.instant),
        scope,
        to_hex(sha256(bs(canonical_request))),
    ])

    return string_to_sign, signed_headers, scope


def sign(signable: Signable) -> V4Signature:
    """
    Sign a Signable.

    Args:
        signable: Request data to sign

    Returns:
        V4Signature: Computed signature
    """
    string_to_sign, signed_headers, scope = derive_string_to_sign(signable)
    signing_key = derive_signing_key(
        signable.secret_key,
        date_stamp(signable.instant),
        signable.region,
        signable.service
    )
    signature = to_hex(hmac_sha256(bs(string_to_sign), signing_key))

    return V4Signature(
        algorithm=ALGORITHM_V4,
        credential_scope=scope,
        signed_headers=signed_headers,
        signature=signature,
        access_key=signable.access_key
    )


def check_platform_compatibility() -> Dict[str, Any]:
    """
    Check that the cryptography backend provides the signing primitives.

    Returns:
        dict: Compatibility information including SHA-256 and HMAC-SHA256
              support and platform details
    """
    compatibility = {
        'sha256_supported': False,
        'hmac_sha256_supported': False,
        'platform_info': {
            'system': platform.system(),
            'python_version': sys.version,
            'architecture': platform.architecture()[0],
        }
    }

    try:
        sha256(b'')
        compatibility['sha256_supported'] = True
    except SigningError:
        pass

    try:
        hmac_sha256(b'', b'key')
        compatibility['hmac_sha256_supported'] = True
    except SigningError:
        pass

    return compatibility
