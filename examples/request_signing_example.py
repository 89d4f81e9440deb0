#!/usr/bin/env python3
"""
SigV4 Python SDK - Request Signing Example

This example demonstrates signing HTTP requests with AWS Signature Version 4
directly, through httpx and requests integrations, and with the different
body strategies. No request leaves the machine: httpx requests go to a mock
transport.
"""

import asyncio
import json
import sys
import os
from datetime import datetime, timezone

import httpx

# Add src to path for development
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from sigv4_sdk import (
    # Request signing
    create_signing_config,
    Signer,
    Strategy,
    UNSIGNED_PAYLOAD,
    # Services
    AWS,
    DYNAMODB,
    Region,
    # HTTP integration
    SigV4Auth,
    create_signing_session,
)
from sigv4_sdk.signing import kernel


EXAMPLE_INSTANT = datetime(2015, 8, 30, 12, 36, 0, tzinfo=timezone.utc)


def example_config(service="service", **builder_options):
    builder = (create_signing_config()
               .region("us-east-1")
               .service(service)
               .credentials("AKIDEXAMPLE", "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY")
               .clock(lambda: EXAMPLE_INSTANT))
    if builder_options.get('content_sha256_header'):
        builder.content_sha256_header()
    return builder.build()


def basic_signing_example():
    """Sign a request and show every intermediate string"""
    print("=== Basic Request Signing Example ===")

    signer = Signer(example_config())
    request = httpx.Request("GET", "https://example.amazonaws.com/")

    signable = signer.signable_sync(request)
    canonical_request, signed_headers = kernel.derive_canonical_request(signable)
    string_to_sign, _, scope = kernel.derive_string_to_sign(signable)

    print("1. Canonical request:")
    print("   " + canonical_request.replace("\n", "\n   "))
    print(f"\n2. Credential scope: {scope}")
    print(f"   Signed headers: {signed_headers}")
    print("\n3. String to sign:")
    print("   " + string_to_sign.replace("\n", "\n   "))

    signed = signer.sign_sync(request)
    print("\n4. Signature headers:")
    for name in ("X-Amz-Date", "Authorization", "Date"):
        print(f"   {name}: {signed.headers[name]}")


def body_strategy_example():
    """Compare payload hashes produced by each body strategy"""
    print("\n\n=== Body Strategy Example ===")

    signer = Signer(example_config(service="s3", content_sha256_header=True))
    request = httpx.Request("PUT", "https://examplebucket.s3.amazonaws.com/test.txt", content=b"Welcome to S3")

    strategies = {
        "default (drain body)": Strategy.default(),
        "explicit body": Strategy.body(b"Welcome to S3"),
        "unsigned payload": Strategy.body_hash_placeholder(UNSIGNED_PAYLOAD),
        "ignore body": Strategy.ignore(),
    }
    for label, strategy in strategies.items():
        signed = signer.sign_sync(request, strategy)
        print(f"   {label:22} X-Amz-Content-Sha256: {signed.headers['X-Amz-Content-Sha256']}")


def httpx_integration_example():
    """Sign httpx requests through the auth flow"""
    print("\n\n=== httpx Integration Example ===")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"authorization": request.headers["Authorization"]})

    config = example_config(service="dynamodb")
    url = AWS.url_for(DYNAMODB, Region("us-east-1"))
    payload = json.dumps({"TableName": "Music"}).encode("utf-8")

    with httpx.Client(auth=SigV4Auth(config), transport=httpx.MockTransport(handler)) as client:
        response = client.post(url, content=payload, headers={"X-Amz-Target": "DynamoDB_20120810.DescribeTable"})
        print(f"1. Sync client sent: {response.json()['authorization'][:72]}...")

    async def send_async():
        async with httpx.AsyncClient(auth=SigV4Auth(config), transport=httpx.MockTransport(handler)) as client:
            return await client.post(url, content=payload)

    response = asyncio.run(send_async())
    print(f"2. Async client sent: {response.json()['authorization'][:72]}...")


def requests_integration_example():
    """Attach signing to a requests session"""
    print("\n\n=== requests Integration Example ===")

    with create_signing_session(example_config()) as session:
        print(f"1. Auto signing enabled: {session.auto_sign}")
        session.disable_signing()
        print(f"2. After disable_signing: {session.auto_sign}")
        session.enable_signing()
        print(f"3. After enable_signing: {session.auto_sign}")


def error_handling_example():
    """Demonstrate error handling"""
    print("\n\n=== Error Handling Example ===")

    print("1. Configuration errors:")
    try:
        # Missing region
        create_signing_config().service("s3").credentials("AKIDEXAMPLE", "secret").build()
    except Exception as e:
        print(f"   Missing region: {type(e).__name__}: {e}")

    print("\n2. Clock errors:")
    async def async_clock():
        return EXAMPLE_INSTANT

    signer = Signer(create_signing_config()
                    .region("us-east-1")
                    .service("s3")
                    .credentials("AKIDEXAMPLE", "secret")
                    .clock(async_clock)
                    .build())
    try:
        signer.sign_sync(httpx.Request("GET", "https://s3.us-east-1.amazonaws.com/"))
    except Exception as e:
        print(f"   Async clock with sign_sync: {type(e).__name__}: {e}")


def main():
    """Run all examples"""
    print("SigV4 Python SDK - Request Signing Examples")
    print("=" * 50)

    basic_signing_example()
    body_strategy_example()
    httpx_integration_example()
    requests_integration_example()
    error_handling_example()

    print("\n\n=== All Examples Completed Successfully! ===")


if __name__ == "__main__":
    main()
