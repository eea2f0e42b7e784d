"""
Command-line interface for Banklink Python SDK
Provides key generation, request signing and callback verification
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from . import __version__
from .crypto.keys import (
    generate_private_key,
    create_self_signed_certificate,
    private_key_to_pem,
    certificate_to_pem,
    load_private_key_file,
    load_public_key_file,
    DEFAULT_KEY_SIZE,
)
from .exceptions import BanklinkSDKError
from .protocol.constants import Language, PRODUCTION_ENDPOINT, DEFAULT_LANGUAGE
from .protocol.variants import PROTOCOL_VARIANTS, get_protocol_variant
from .signing import RequestSigner, StampStrategy
from .verification import CallbackVerifier


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='banklink-cli',
        description='Banklink SDK command-line interface for signing requests and verifying callbacks'
    )
    
    parser.add_argument(
        '--version',
        action='version',
        version=f'Banklink Python SDK {__version__}'
    )
    
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging'
    )
    
    # Create subparsers for different commands
    subparsers = parser.add_subparsers(dest='command', help='Available commands')
    
    setup_keygen_parser(subparsers)
    setup_sign_parser(subparsers)
    setup_verify_parser(subparsers)
    
    return parser


def setup_keygen_parser(subparsers):
    """Setup key generation subcommand."""
    keygen_parser = subparsers.add_parser('keygen', help='Generate an RSA key and self-signed certificate')
    keygen_parser.add_argument(
        '--out-dir',
        required=True,
        help='Directory to write <name>.key and <name>.crt into'
    )
    keygen_parser.add_argument(
        '--name',
        default='banklink',
        help='Base file name (default: banklink)'
    )
    keygen_parser.add_argument(
        '--bits',
        type=int,
        default=DEFAULT_KEY_SIZE,
        help=f'RSA key size (default: {DEFAULT_KEY_SIZE})'
    )
    keygen_parser.add_argument(
        '--common-name',
        default='banklink.local',
        help='Certificate common name (default: banklink.local)'
    )
    keygen_parser.add_argument(
        '--days',
        type=int,
        default=365,
        help='Certificate validity in days (default: 365)'
    )


def setup_sign_parser(subparsers):
    """Setup request signing subcommand."""
    sign_parser = subparsers.add_parser('sign', help='Sign an outgoing authentication request')
    sign_parser.add_argument('--private-key', required=True, help='Relying party private key file')
    sign_parser.add_argument('--snd-id', required=True, help='Relying party identifier (VK_SND_ID)')
    sign_parser.add_argument('--return-url', required=True, help='Callback URL (VK_RETURN)')
    sign_parser.add_argument(
        '--lang',
        choices=[lang.value for lang in Language],
        default=DEFAULT_LANGUAGE.value,
        help=f'Bank UI language (default: {DEFAULT_LANGUAGE.value})'
    )
    sign_parser.add_argument(
        '--stamp-strategy',
        choices=[s.value for s in StampStrategy],
        default=StampStrategy.TIMESTAMP.value,
        help='VK_STAMP format (default: timestamp)'
    )
    sign_parser.add_argument(
        '--site',
        default=PRODUCTION_ENDPOINT,
        help='Bank endpoint the form posts to'
    )


def setup_verify_parser(subparsers):
    """Setup callback verification subcommand."""
    verify_parser = subparsers.add_parser('verify', help='Verify a bank callback field set')
    verify_parser.add_argument('--public-key', required=True, help='Bank certificate or public key file')
    verify_parser.add_argument('--fields', required=True, help='JSON file with the callback fields')
    verify_parser.add_argument(
        '--variant',
        choices=list(PROTOCOL_VARIANTS.keys()),
        default='identity',
        help='Protocol variant of the callback (default: identity)'
    )


def handle_keygen_command(args) -> int:
    """Handle key generation command."""
    try:
        out_dir = Path(args.out_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        
        private_key = generate_private_key(args.bits)
        certificate = create_self_signed_certificate(private_key, args.common_name, args.days)
        
        key_path = out_dir / f"{args.name}.key"
        cert_path = out_dir / f"{args.name}.crt"
        key_path.write_bytes(private_key_to_pem(private_key))
        key_path.chmod(0o600)
        cert_path.write_bytes(certificate_to_pem(certificate))
        
        print(f"Private key: {key_path}")
        print(f"Certificate: {cert_path}")
        return 0
        
    except (BanklinkSDKError, OSError, ValueError) as e:
        print(f"Error generating keys: {e}", file=sys.stderr)
        return 1


def handle_sign_command(args) -> int:
    """Handle request signing command."""
    try:
        private_key = load_private_key_file(args.private_key)
        signer = RequestSigner(
            private_key,
            snd_id=args.snd_id,
            return_url=args.return_url,
            lang=args.lang,
            stamp_strategy=StampStrategy(args.stamp_strategy),
            action_url=args.site
        )
        signed = signer.sign()
        
        output = {
            'action': signed.action_url,
            'fields': signed.fields,
        }
        print(json.dumps(output, indent=2))
        return 0
        
    except BanklinkSDKError as e:
        print(f"Error signing request: {e}", file=sys.stderr)
        return 1


def handle_verify_command(args) -> int:
    """Handle callback verification command."""
    try:
        with open(args.fields, 'r', encoding='utf-8') as f:
            fields = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error reading callback fields: {e}", file=sys.stderr)
        return 1
    
    if not isinstance(fields, dict):
        print("Error: callback fields must be a JSON object", file=sys.stderr)
        return 1
    
    try:
        public_key = load_public_key_file(args.public_key)
    except BanklinkSDKError as e:
        print(json.dumps({'status': 'error', 'error': {'code': e.error_code, 'message': str(e)}}, indent=2))
        return 1
    
    verifier = CallbackVerifier(public_key, get_protocol_variant(args.variant))
    result = verifier.verify({str(k): str(v) for k, v in fields.items()})
    
    output: Dict[str, Any] = {'status': result.status.value}
    if result.is_valid:
        output['identity'] = {
            'uid': result.identity.uid,
            'name': result.identity.name,
            'type': result.identity.identity_type.value,
        }
    else:
        output['error'] = {'code': result.error['code'], 'message': result.error['message']}
    
    print(json.dumps(output, indent=2))
    return 0 if result.is_valid else 1


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
    
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )
    
    try:
        if args.command == 'keygen':
            return handle_keygen_command(args)
        elif args.command == 'sign':
            return handle_sign_command(args)
        elif args.command == 'verify':
            return handle_verify_command(args)
        else:
            # No command specified, show help
            parser.print_help()
            return 1
        
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130


if __name__ == '__main__':
    sys.exit(main())
