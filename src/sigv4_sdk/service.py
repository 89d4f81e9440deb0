"""
Service and region identifiers and base URL construction

AWS style endpoints are ``https://{service}.{region}.amazonaws.com``; Aliyun
style endpoints are ``https://{service}-{region}.aliyuncs.com``.
"""

from dataclasses import dataclass

from .exceptions import ValidationError


@dataclass(frozen=True)
class Service:
    """Service identifier, embedded verbatim in the credential scope"""
    value: str

    def __post_init__(self):
        if not self.value:
            raise ValidationError("Service identifier cannot be empty", "INVALID_SERVICE")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Region:
    """Region identifier, embedded verbatim in the credential scope"""
    value: str

    def __post_init__(self):
        if not self.value:
            raise ValidationError("Region identifier cannot be empty", "INVALID_REGION")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ServiceProvider:
    """
    Endpoint layout of an AWS-compatible provider

    Attributes:
        name: Provider name
        base_domain: Domain all service endpoints live under
        separator: Separator between service and region in the host name
    """
    name: str
    base_domain: str
    separator: str

    def url_for(self, service: Service, region: Region) -> str:
        """
        Build the base URL of a service in a region.

        Args:
            service: Service identifier
            region: Region identifier

        Returns:
            str: Base URL without trailing slash
        """
        return f"https://{service.value}{self.separator}{region.value}.{self.base_domain}"


AWS = ServiceProvider(name='aws', base_domain='amazonaws.com', separator='.')
ALIYUN = ServiceProvider(name='aliyun', base_domain='aliyuncs.com', separator='-')

PROVIDERS = {
    AWS.name: AWS,
    ALIYUN.name: ALIYUN,
}

# Well-known services
DYNAMODB = Service('dynamodb')
S3 = Service('s3')
OSS = Service('oss')


def get_provider(name: str) -> ServiceProvider:
    """
    Look up a provider by name.

    Raises:
        ValidationError: If the provider is unknown
    """
    provider = PROVIDERS.get(name.lower())
    if provider is None:
        raise ValidationError(
            f"Unknown provider: {name}",
            "INVALID_PROVIDER",
            {"available_providers": list(PROVIDERS.keys())}
        )
    return provider
