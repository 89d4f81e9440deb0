"""
Configuration management for request signing

This module provides a fluent builder for SigV4 signing configurations and
their validation.
"""

from typing import Optional, Union, TYPE_CHECKING

from .types import (
    SigningConfig,
    SigningError,
    SigningErrorCodes,
    Clock,
)

if TYPE_CHECKING:
    from ..service import Region, Service


class SigningConfigBuilder:
    """
    Builder for creating signing configurations with fluent API
    """

    def __init__(self):
        self._region: Optional[str] = None
        self._service: Optional[str] = None
        self._access_key: Optional[str] = None
        self._secret_key: Optional[str] = None
        self._session_token: Optional[str] = None
        self._clock: Optional[Clock] = None
        self._add_content_sha256_header: bool = False
        self._log_canonical_request: bool = False

    def region(self, region: Union[str, 'Region']) -> 'SigningConfigBuilder':
        """
        Set the region to sign for.

        Args:
            region: Region identifier or Region value

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._region = getattr(region, 'value', region)
        return self

    def service(self, service: Union[str, 'Service']) -> 'SigningConfigBuilder':
        """
        Set the service to sign for.

        Args:
            service: Service identifier or Service value

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._service = getattr(service, 'value', service)
        return self

    def credentials(
        self,
        access_key: str,
        secret_key: str,
        session_token: Optional[str] = None
    ) -> 'SigningConfigBuilder':
        """
        Set the access key pair and optional session token.

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._access_key = access_key
        self._secret_key = secret_key
        self._session_token = session_token
        return self

    def session_token(self, token: Optional[str]) -> 'SigningConfigBuilder':
        """Set the STS session token sent as X-Amz-Security-Token."""
        self._session_token = token
        return self

    def clock(self, clock: Clock) -> 'SigningConfigBuilder':
        """
        Set the clock used to timestamp requests.

        Args:
            clock: Callable returning a datetime (or an awaitable of one)

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._clock = clock
        return self

    def content_sha256_header(self, include: bool = True) -> 'SigningConfigBuilder':
        """Send and sign the payload hash as X-Amz-Content-Sha256 (required by S3)."""
        self._add_content_sha256_header = include
        return self

    def log_canonical_request(self, enabled: bool = True) -> 'SigningConfigBuilder':
        """Log canonical requests at debug level."""
        self._log_canonical_request = enabled
        return self

    def build(self) -> SigningConfig:
        """
        Build the signing configuration.

        Returns:
            SigningConfig: Complete signing configuration

        Raises:
            SigningError: If configuration is invalid
        """
        for field_name, value in (
            ('Region', self._region),
            ('Service', self._service),
            ('Access key', self._access_key),
            ('Secret key', self._secret_key),
        ):
            if not value:
                raise SigningError(
                    f"{field_name} is required",
                    SigningErrorCodes.INVALID_CONFIG
                )

        return SigningConfig(
            region=self._region,
            service=self._service,
            access_key=self._access_key,
            secret_key=self._secret_key,
            session_token=self._session_token,
            clock=self._clock,
            add_content_sha256_header=self._add_content_sha256_header,
            log_canonical_request=self._log_canonical_request
        )


def create_signing_config() -> SigningConfigBuilder:
    """
    Create a new signing configuration builder.

    Returns:
        SigningConfigBuilder: New configuration builder
    """
    return SigningConfigBuilder()


def validate_signing_config(config: SigningConfig) -> None:
    """
    Validate signing configuration.

    Args:
        config: Signing configuration to validate

    Raises:
        SigningError: If configuration is invalid
    """
    if not isinstance(config, SigningConfig):
        raise SigningError(
            "Configuration must be SigningConfig instance",
            SigningErrorCodes.INVALID_CONFIG
        )

    for field_name in ('region', 'service', 'access_key', 'secret_key'):
        value = getattr(config, field_name)
        if not value or not isinstance(value, str):
            raise SigningError(
                f"{field_name} must be non-empty string",
                SigningErrorCodes.INVALID_CONFIG,
                {"field": field_name}
            )

    # Region and service end up verbatim in the credential scope
    for field_name in ('region', 'service'):
        if '/' in getattr(config, field_name):
            raise SigningError(
                f"{field_name} must not contain '/'",
                SigningErrorCodes.INVALID_CONFIG,
                {"field": field_name, "value": getattr(config, field_name)}
            )

    if config.session_token is not None and not isinstance(config.session_token, str):
        raise SigningError(
            "Session token must be a string",
            SigningErrorCodes.INVALID_CONFIG
        )

    if config.clock is not None and not callable(config.clock):
        raise SigningError(
            "Clock must be callable",
            SigningErrorCodes.INVALID_CLOCK
        )
