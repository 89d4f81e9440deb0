"""
HTTP client integration for request signing

This module plugs the SigV4 signer into HTTP client libraries: an ``httpx``
auth flow, a ``requests`` auth hook and a signing wrapper around
``requests.Session``.
"""

import logging
from typing import Optional, Union

import httpx
import requests
from requests.auth import AuthBase
from requests.models import PreparedRequest
from requests.sessions import Session

from .types import (
    SigningConfig,
    BodyStrategy,
    HasBody,
    SigningError,
    SigningErrorCodes,
)
from .signer import (
    Signer,
    unchunk_http,
    X_AMZ_DATE,
    X_AMZ_SECURITY_TOKEN,
    X_AMZ_CONTENT_SHA256,
)

logger = logging.getLogger(__name__)

# Headers the signer adds to a request
SIGNATURE_HEADERS = (
    X_AMZ_DATE,
    X_AMZ_SECURITY_TOKEN,
    X_AMZ_CONTENT_SHA256,
    'Authorization',
    'Date',
)


def _as_signer(config: Union[SigningConfig, Signer]) -> Signer:
    return config if isinstance(config, Signer) else Signer(config)


class SigV4Auth(httpx.Auth):
    """
    httpx authentication flow signing every request with SigV4.

    The body is buffered before signing; a chunked transfer coding is dropped
    since streaming payload signatures are not produced.
    """

    requires_request_body = True

    def __init__(
        self,
        config: Union[SigningConfig, Signer],
        body_strategy: Optional[BodyStrategy] = None
    ):
        """
        Initialize the auth flow.

        Args:
            config: Signing configuration or an existing signer
            body_strategy: Fixed body strategy (e.g. an UNSIGNED-PAYLOAD
                placeholder); the buffered body is hashed when omitted
        """
        self.signer = _as_signer(config)
        self.body_strategy = body_strategy

    def sync_auth_flow(self, request: httpx.Request):
        request.read()
        yield self.signer.sign_sync(unchunk_http(request), self._strategy_for(request))

    async def async_auth_flow(self, request: httpx.Request):
        await request.aread()
        yield await self.signer.sign(unchunk_http(request), self._strategy_for(request))

    def _strategy_for(self, request: httpx.Request) -> BodyStrategy:
        return self.body_strategy or HasBody(request.content)


class SigV4RequestsAuth(AuthBase):
    """
    requests authentication hook signing prepared requests with SigV4.

    Usage:
        requests.get(url, auth=SigV4RequestsAuth(config))
    """

    def __init__(
        self,
        config: Union[SigningConfig, Signer],
        body_strategy: Optional[BodyStrategy] = None
    ):
        self.signer = _as_signer(config)
        self.body_strategy = body_strategy

    def __call__(self, prepared_request: PreparedRequest) -> PreparedRequest:
        return sign_prepared_request(prepared_request, self.signer, self.body_strategy)


def _prepared_body(prepared_request: PreparedRequest) -> bytes:
    body = prepared_request.body
    if body is None:
        return b''
    if isinstance(body, str):
        return body.encode('utf-8')
    if isinstance(body, bytes):
        return body

    raise SigningError(
        "Streaming request bodies cannot be signed; pass bytes or a body strategy",
        SigningErrorCodes.INVALID_INPUT,
        {"body_type": str(type(body))}
    )


def sign_prepared_request(
    prepared_request: PreparedRequest,
    config: Union[SigningConfig, Signer],
    body_strategy: Optional[BodyStrategy] = None
) -> PreparedRequest:
    """
    Sign a prepared request.

    Args:
        prepared_request: Prepared request to sign
        config: Signing configuration or an existing signer
        body_strategy: Optional body strategy (default: hash the prepared body)

    Returns:
        PreparedRequest: Request with signature headers added

    Raises:
        SigningError: If signing fails
    """
    signer = _as_signer(config)

    if body_strategy is None:
        body = _prepared_body(prepared_request)
        body_strategy = HasBody(body)
    else:
        body = prepared_request.body if isinstance(prepared_request.body, bytes) else b''

    request = httpx.Request(
        prepared_request.method,
        prepared_request.url,
        headers=dict(prepared_request.headers),
        content=body
    )
    signed = signer.sign_sync(request, body_strategy)

    for name in SIGNATURE_HEADERS:
        if name in signed.headers:
            prepared_request.headers[name] = signed.headers[name]

    logger.debug(f"Signed {prepared_request.method} request to {prepared_request.url}")
    return prepared_request


class SigningSession:
    """
    HTTP session wrapper with automatic request signing capability.

    This class wraps a requests.Session and signs outgoing requests with
    SigV4. Signing failures are raised; requests are never sent unsigned
    while signing is enabled.
    """

    def __init__(
        self,
        signing_config: Optional[SigningConfig] = None,
        session: Optional[Session] = None,
        auto_sign: bool = True,
        body_strategy: Optional[BodyStrategy] = None
    ):
        """
        Initialize signing session.

        Args:
            signing_config: Optional signing configuration
            session: Optional existing requests session to wrap
            auto_sign: Whether to automatically sign requests
            body_strategy: Optional fixed body strategy for every request
        """
        self.session = session or requests.Session()
        self.signing_config = signing_config
        self.body_strategy = body_strategy
        self.auth = SigV4RequestsAuth(signing_config, body_strategy) if signing_config else None
        self.auto_sign = auto_sign

    def configure_signing(
        self,
        config: SigningConfig,
        auto_sign: bool = True
    ) -> None:
        """
        Configure request signing for this session.

        Args:
            config: Signing configuration
            auto_sign: Whether to automatically sign requests
        """
        self.signing_config = config
        self.auth = SigV4RequestsAuth(config, self.body_strategy)
        self.auto_sign = auto_sign
        logger.info(f"Configured request signing for {config.service} in {config.region}")

    def disable_signing(self) -> None:
        """Disable automatic request signing."""
        self.auto_sign = False
        logger.info("Disabled automatic request signing")

    def enable_signing(self) -> None:
        """Enable automatic request signing (if configured)."""
        if self.auth:
            self.auto_sign = True
            logger.info("Enabled automatic request signing")
        else:
            logger.warning("Cannot enable signing - no signing configuration available")

    def request(
        self,
        method: str,
        url: str,
        **kwargs
    ) -> requests.Response:
        """
        Make HTTP request with optional automatic signing.

        Args:
            method: HTTP method
            url: Request URL
            **kwargs: Additional arguments for requests

        Returns:
            requests.Response: HTTP response
        """
        if self.auto_sign and self.auth:
            kwargs['auth'] = self.auth
        return self.session.request(method, url, **kwargs)

    def get(self, url: str, **kwargs) -> requests.Response:
        """Make GET request."""
        return self.request('GET', url, **kwargs)

    def post(self, url: str, **kwargs) -> requests.Response:
        """Make POST request."""
        return self.request('POST', url, **kwargs)

    def put(self, url: str, **kwargs) -> requests.Response:
        """Make PUT request."""
        return self.request('PUT', url, **kwargs)

    def delete(self, url: str, **kwargs) -> requests.Response:
        """Make DELETE request."""
        return self.request('DELETE', url, **kwargs)

    def patch(self, url: str, **kwargs) -> requests.Response:
        """Make PATCH request."""
        return self.request('PATCH', url, **kwargs)

    def head(self, url: str, **kwargs) -> requests.Response:
        """Make HEAD request."""
        return self.request('HEAD', url, **kwargs)

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, *args):
        """Context manager exit."""
        self.close()


def create_signing_session(
    signing_config: Optional[SigningConfig] = None,
    auto_sign: bool = True,
    **session_kwargs
) -> SigningSession:
    """
    Create a new signing session.

    Args:
        signing_config: Optional signing configuration
        auto_sign: Whether to automatically sign requests
        **session_kwargs: Additional attributes for requests.Session

    Returns:
        SigningSession: Configured signing session
    """
    session = requests.Session()

    # Apply session configuration
    for key, value in session_kwargs.items():
        if hasattr(session, key):
            setattr(session, key, value)

    return SigningSession(
        signing_config=signing_config,
        session=session,
        auto_sign=auto_sign
    )
