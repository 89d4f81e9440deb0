"""
Command-line interface for the SigV4 Python SDK
Signs HTTP requests and builds service endpoint URLs
"""

import argparse
import json
import sys
from dataclasses import replace
from typing import Dict, Optional, List

import httpx

from . import __version__, initialize_sdk
from .config import (
    ConfigError,
    LoggingConfig,
    configure_logging,
    load_config_from_file,
    load_signing_config_from_env,
)
from .exceptions import SigV4SDKError, ServerCommunicationError, ValidationError
from .service import Service, Region, get_provider, PROVIDERS
from .signing import Signer, Strategy, SigningError, UNSIGNED_PAYLOAD, kernel
from .signing.integration import SIGNATURE_HEADERS
from .signing.signer import utc_now


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='sigv4-sign',
        description='Sign HTTP requests with AWS Signature Version 4'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'SigV4 Python SDK {__version__}'
    )

    parser.add_argument(
        '--check-compatibility',
        action='store_true',
        help='Check platform compatibility and exit'
    )

    parser.add_argument(
        '--log-level',
        default=None,
        help='Log level for SDK messages (e.g. DEBUG, INFO)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    setup_sign_parser(subparsers)
    setup_url_parser(subparsers)

    return parser


def setup_sign_parser(subparsers):
    """Setup request signing subcommand."""
    sign_parser = subparsers.add_parser('sign', help='Sign an HTTP request and print its headers')
    sign_parser.add_argument('--url', required=True, help='Request URL')
    sign_parser.add_argument('--method', default='GET', help='HTTP method (default: GET)')
    sign_parser.add_argument('--region', help='Region (defaults to config or AWS_REGION)')
    sign_parser.add_argument('--service', help='Service (defaults to config or SIGV4_SERVICE)')
    sign_parser.add_argument(
        '--header',
        action='append',
        default=[],
        help='Extra header as "Name: value" (repeatable)'
    )
    body_group = sign_parser.add_mutually_exclusive_group()
    body_group.add_argument('--data', help='Request body text')
    body_group.add_argument('--data-file', help='Read request body from file')
    sign_parser.add_argument(
        '--unsigned-payload',
        action='store_true',
        help=f'Use {UNSIGNED_PAYLOAD} instead of hashing the body'
    )
    sign_parser.add_argument('--config', help='JSON configuration file with credentials')
    sign_parser.add_argument(
        '--show-canonical',
        action='store_true',
        help='Also print the canonical request and string to sign'
    )
    sign_parser.add_argument(
        '--format',
        choices=['text', 'json'],
        default='text',
        help='Output format (default: text)'
    )
    sign_parser.add_argument('--send', action='store_true', help='Send the signed request and print the response')


def setup_url_parser(subparsers):
    """Setup service URL subcommand."""
    url_parser = subparsers.add_parser('url', help='Print the base URL of a service endpoint')
    url_parser.add_argument('--provider', choices=sorted(PROVIDERS), default='aws', help='Provider (default: aws)')
    url_parser.add_argument('--service', required=True, help='Service identifier')
    url_parser.add_argument('--region', required=True, help='Region identifier')


def parse_headers(values: List[str]) -> Dict[str, str]:
    """
    Parse "Name: value" header arguments.

    Raises:
        ValidationError: If a header is malformed
    """
    headers = {}
    for raw in values:
        name, sep, value = raw.partition(':')
        if not sep or not name.strip():
            raise ValidationError(f"Invalid header (expected 'Name: value'): {raw}", "INVALID_HEADER")
        headers[name.strip()] = value.strip()
    return headers


def load_cli_config(args):
    """Load signing configuration from --config or the environment."""
    if args.config:
        signing_config, logging_config = load_config_from_file(args.config, args.service, args.region)
        if args.log_level is None:
            configure_logging(logging_config)
        return signing_config
    return load_signing_config_from_env(service=args.service, region=args.region)


def read_body(args) -> Optional[bytes]:
    """Read the request body from --data or --data-file."""
    if args.data is not None:
        return args.data.encode('utf-8')
    if args.data_file:
        with open(args.data_file, 'rb') as f:
            return f.read()
    return None


def handle_sign_command(args) -> int:
    """Handle request signing."""
    signing_config = load_cli_config(args)

    # Pin the clock so the printed canonical request matches the signature
    instant = utc_now()
    signer = Signer(replace(signing_config, clock=lambda: instant))

    request = httpx.Request(
        args.method.upper(),
        args.url,
        headers=parse_headers(args.header),
        content=read_body(args)
    )
    strategy = Strategy.body_hash_placeholder(UNSIGNED_PAYLOAD) if args.unsigned_payload else Strategy.default()
    signed = signer.sign_sync(request, strategy)

    headers = {name: signed.headers[name] for name in SIGNATURE_HEADERS if name in signed.headers}
    output = {'headers': headers}

    if args.show_canonical:
        signable = signer.signable_sync(request, strategy)
        canonical_request, _ = kernel.derive_canonical_request(signable)
        string_to_sign, _, _ = kernel.derive_string_to_sign(signable)
        output['canonical_request'] = canonical_request
        output['string_to_sign'] = string_to_sign

    if args.send:
        output['response'] = send_request(signed)

    if args.format == 'json':
        print(json.dumps(output, indent=2))
    else:
        for name, value in headers.items():
            print(f"{name}: {value}")
        if args.show_canonical:
            print("\nCanonical Request:")
            print(output['canonical_request'])
            print("\nString to Sign:")
            print(output['string_to_sign'])
        if args.send:
            print(f"\nResponse: {output['response']['status']}")
            print(output['response']['body'])

    return 0


def send_request(signed: httpx.Request) -> Dict[str, object]:
    """
    Send a signed request.

    Raises:
        ServerCommunicationError: If the request cannot be sent
    """
    try:
        with httpx.Client() as client:
            response = client.send(signed)
    except httpx.HTTPError as e:
        raise ServerCommunicationError(f"Failed to send request: {e}", "NETWORK_ERROR")

    return {'status': response.status_code, 'body': response.text}


def handle_url_command(args) -> int:
    """Handle service URL construction."""
    provider = get_provider(args.provider)
    print(provider.url_for(Service(args.service), Region(args.region)))
    return 0


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the CLI

    Args:
        argv: Command line arguments (None to use sys.argv)

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        if args.log_level:
            configure_logging(LoggingConfig(level=args.log_level))

        # Check compatibility if requested
        if args.check_compatibility:
            result = initialize_sdk()
            if result['compatible']:
                print("Platform is compatible with SigV4 SDK")
                return 0
            else:
                print("Platform is not compatible with SigV4 SDK")
                for warning in result['warnings']:
                    print(f"  Error: {warning}")
                return 1

        if args.command == 'sign':
            return handle_sign_command(args)
        elif args.command == 'url':
            return handle_url_command(args)
        else:
            # No command specified, show help
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130
    except (ConfigError, SigningError, SigV4SDKError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
