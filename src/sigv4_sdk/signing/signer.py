"""
AWS Signature Version 4 request signer

This module applies the signing kernel to a live ``httpx.Request``: it reads
the clock, resolves the body according to a body strategy, selects the
headers to sign and returns a new request carrying the Authorization, Date
and X-Amz-Date headers. The input request is never modified.
"""

import inspect
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional, Tuple

import httpx

from .types import (
    Signable,
    SigningConfig,
    V4Signature,
    BodyStrategy,
    IgnoreBody,
    PreComputed,
    Default,
    HasBody,
    SigningError,
    SigningErrorCodes,
)
from . import kernel
from .signing_config import validate_signing_config

logger = logging.getLogger(__name__)

# Headers the transport may rewrite after signing
EXCLUDE_HEADERS = ('accept-encoding', 'authorization', 'user-agent')

X_AMZ_DATE = 'X-Amz-Date'
X_AMZ_SECURITY_TOKEN = 'X-Amz-Security-Token'
X_AMZ_CONTENT_SHA256 = 'X-Amz-Content-Sha256'


class Strategy:
    """Factory helpers for body strategies"""

    @staticmethod
    def ignore() -> BodyStrategy:
        return IgnoreBody()

    @staticmethod
    def pre_computed_hash(digest: bytes) -> BodyStrategy:
        """Use a raw sha256 digest computed elsewhere."""
        return PreComputed(kernel.to_hex(digest))

    @staticmethod
    def body_hash_placeholder(value: str) -> BodyStrategy:
        """Use a placeholder such as UNSIGNED-PAYLOAD as the payload hash."""
        return PreComputed(value)

    @staticmethod
    def default() -> BodyStrategy:
        return Default()

    @staticmethod
    def body(data: bytes) -> BodyStrategy:
        return HasBody(data)


def is_signable_header(name: str) -> bool:
    """Check whether a header takes part in the signature."""
    return name.lower() not in EXCLUDE_HEADERS


def render_date(instant: datetime) -> str:
    """Render the X-Amz-Date header value."""
    return kernel.amz_date(instant)


def unsafe_hash(data: bytes) -> str:
    """Lowercase hex sha256 of data."""
    return kernel.to_hex(kernel.sha256(data))


def utc_now() -> datetime:
    """Current UTC time with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def _copy_request(
    request: httpx.Request,
    headers: httpx.Headers,
    content: Optional[bytes] = None
) -> httpx.Request:
    """
    Build a new request from request with the given headers.

    Args:
        request: Request to copy method, URL, body and extensions from
        headers: Headers for the new request
        content: Body replacing the request body, if given

    Returns:
        httpx.Request: New request
    """
    if content is None:
        try:
            content = request.content
        except httpx.RequestNotRead:
            return httpx.Request(
                request.method,
                request.url,
                headers=headers,
                stream=request.stream,
                extensions=request.extensions
            )

    return httpx.Request(
        request.method,
        request.url,
        headers=headers,
        content=content,
        extensions=request.extensions
    )


def _drop_chunked(headers: httpx.Headers) -> None:
    """Remove the chunked coding from headers in place, keeping other codings."""
    if 'transfer-encoding' not in headers:
        return

    codings = [
        coding for coding in headers.get_list('transfer-encoding', split_commas=True)
        if coding and coding.lower() != 'chunked'
    ]

    del headers['transfer-encoding']
    if codings:
        headers['Transfer-Encoding'] = ', '.join(codings)


def unchunk_http(request: httpx.Request) -> httpx.Request:
    """
    Drop the chunked transfer coding from a request whose body is buffered.

    Other codings in Transfer-Encoding are kept; the header is removed when
    chunked was its only value.

    Args:
        request: Request to rewrite

    Returns:
        httpx.Request: Request without the chunked coding
    """
    if 'transfer-encoding' not in request.headers:
        return request

    headers = request.headers.copy()
    _drop_chunked(headers)
    return _copy_request(request, headers)


class Signer:
    """
    AWS Signature Version 4 signer

    Holds the signing configuration only, so one instance can sign any number
    of requests concurrently.
    """

    def __init__(self, config: SigningConfig):
        """
        Initialize the signer with configuration.

        Args:
            config: Signing configuration

        Raises:
            SigningError: If configuration is invalid
        """
        validate_signing_config(config)
        # Private copy; the validated configuration never changes afterwards
        self.config = replace(config)
        self._clock = self.config.clock or utc_now

    async def sign(
        self,
        request: httpx.Request,
        body_strategy: Optional[BodyStrategy] = None
    ) -> httpx.Request:
        """
        Sign a request.

        Args:
            request: Request to sign
            body_strategy: How to obtain the payload hash (default: drain the body)

        Returns:
            httpx.Request: New request carrying the signature headers

        Raises:
            SigningError: If signing fails
        """
        strategy = body_strategy or Default()

        instant = self._clock()
        if inspect.isawaitable(instant):
            instant = await instant

        headers = self._with_amz_headers(request, instant)

        if isinstance(strategy, Default):
            body, body_hash = await request.aread(), None
            _drop_chunked(headers)
        else:
            body, body_hash = self._resolve_body(strategy)

        signable = self._signable_for(request, headers, instant, body, body_hash)
        return self._finish(request, headers, signable, strategy)

    def sign_sync(
        self,
        request: httpx.Request,
        body_strategy: Optional[BodyStrategy] = None
    ) -> httpx.Request:
        """
        Sign a request without an event loop.

        The configured clock must be synchronous.

        Args:
            request: Request to sign
            body_strategy: How to obtain the payload hash (default: drain the body)

        Returns:
            httpx.Request: New request carrying the signature headers

        Raises:
            SigningError: If signing fails or the clock is asynchronous
        """
        strategy = body_strategy or Default()
        headers, signable = self._prepare_sync(request, strategy)
        return self._finish(request, headers, signable, strategy)

    def signable_sync(
        self,
        request: httpx.Request,
        body_strategy: Optional[BodyStrategy] = None
    ) -> Signable:
        """
        Build the kernel input sign_sync would sign, without signing.

        With a fixed clock the result matches the signed request exactly.
        """
        _, signable = self._prepare_sync(request, body_strategy or Default())
        return signable

    def build_signable(
        self,
        request: httpx.Request,
        headers: httpx.Headers,
        instant: datetime,
        body: Optional[bytes] = None,
        body_hash: Optional[str] = None
    ) -> Signable:
        """
        Build the kernel input for a request.

        Args:
            request: Request supplying method and URL
            headers: Headers of the request being signed
            instant: Signing time
            body: Resolved body bytes
            body_hash: Resolved payload hash

        Returns:
            Signable: Kernel input
        """
        url = request.url
        base_headers = [
            (name, value) for name, value in headers.multi_items()
            if is_signable_header(name)
        ]

        # The Host sent on the wire is the one signed; synthesize it only when absent
        has_host = any(name.lower() == 'host' for name, _ in base_headers)
        if not has_host and url.host:
            base_headers.append(('Host', url.netloc.decode('ascii')))

        http_path = url.raw_path.split(b'?', 1)[0].decode('ascii')

        return Signable(
            region=self.config.region,
            service=self.config.service,
            method=request.method,
            http_path=http_path or '/',
            query_params=tuple(url.params.multi_items()),
            headers=tuple(base_headers),
            body=body,
            body_hash=body_hash,
            access_key=self.config.access_key,
            secret_key=self.config.secret_key,
            instant=instant
        )

    def _prepare_sync(
        self,
        request: httpx.Request,
        strategy: BodyStrategy
    ) -> Tuple[httpx.Headers, Signable]:
        # Clock failures propagate; there is no fallback timestamp
        instant = self._clock()
        if inspect.isawaitable(instant):
            if inspect.iscoroutine(instant):
                instant.close()
            raise SigningError(
                "Synchronous signing requires a synchronous clock",
                SigningErrorCodes.INVALID_CLOCK
            )

        headers = self._with_amz_headers(request, instant)

        if isinstance(strategy, Default):
            body, body_hash = request.read(), None
            _drop_chunked(headers)
        else:
            body, body_hash = self._resolve_body(strategy)

        return headers, self._signable_for(request, headers, instant, body, body_hash)

    def _with_amz_headers(self, request: httpx.Request, instant: datetime) -> httpx.Headers:
        headers = request.headers.copy()
        # Date is rewritten after signing, so it must not be signed
        headers.pop('date', None)
        headers[X_AMZ_DATE] = render_date(instant)
        if self.config.session_token:
            headers[X_AMZ_SECURITY_TOKEN] = self.config.session_token
        return headers

    def _resolve_body(self, strategy: BodyStrategy) -> Tuple[Optional[bytes], Optional[str]]:
        """
        Resolve body bytes and hash for strategies that need no I/O.

        Returns:
            tuple: (body bytes, body hash)
        """
        if isinstance(strategy, IgnoreBody):
            return None, None
        if isinstance(strategy, PreComputed):
            return None, strategy.value
        if isinstance(strategy, HasBody):
            return strategy.body, None

        raise SigningError(
            f"Unsupported body strategy: {strategy!r}",
            SigningErrorCodes.INVALID_INPUT,
            {"strategy": repr(strategy)}
        )

    def _signable_for(
        self,
        request: httpx.Request,
        headers: httpx.Headers,
        instant: datetime,
        body: Optional[bytes],
        body_hash: Optional[str]
    ) -> Signable:
        if self.config.add_content_sha256_header:
            headers[X_AMZ_CONTENT_SHA256] = (
                body_hash if body_hash is not None else unsafe_hash(body or b'')
            )
        return self.build_signable(request, headers, instant, body, body_hash)

    def _finish(
        self,
        request: httpx.Request,
        headers: httpx.Headers,
        signable: Signable,
        strategy: BodyStrategy
    ) -> httpx.Request:
        signature = self._sign_signable(signable)

        headers['Authorization'] = signature.render_auth()
        headers['Date'] = kernel.http_date(signable.instant)

        # The transmitted bytes must be the ones that were hashed
        content = signable.body if isinstance(strategy, Default) and signable.body else None
        signed = _copy_request(request, headers, content)

        logger.debug(
            f"Signed {request.method} request to {request.url} "
            f"(signed headers: {signature.signed_headers})"
        )
        return signed

    def _sign_signable(self, signable: Signable) -> V4Signature:
        try:
            if self.config.log_canonical_request:
                canonical_request, _ = kernel.derive_canonical_request(signable)
                logger.debug(f"Canonical request:\n{canonical_request}")
            return kernel.sign(signable)

        except SigningError:
            raise
        except Exception as e:
            raise SigningError(
                f"Request signing failed: {e}",
                SigningErrorCodes.SIGNING_FAILED,
                {"original_error": str(e)}
            )


def create_signer(config: SigningConfig) -> Signer:
    """
    Create a new SigV4 signer.

    Args:
        config: Signing configuration

    Returns:
        Signer: Configured signer instance
    """
    return Signer(config)


async def sign_request(
    request: httpx.Request,
    config: SigningConfig,
    body_strategy: Optional[BodyStrategy] = None
) -> httpx.Request:
    """
    Sign a request with the given configuration.

    Args:
        request: Request to sign
        config: Signing configuration
        body_strategy: Optional body strategy

    Returns:
        httpx.Request: Signed request
    """
    signer = create_signer(config)
    return await signer.sign(request, body_strategy)
