"""
Cryptographic primitives for Banklink Python SDK
"""

from .rsa_sha1 import (
    sign_message,
    verify_signature,
    encode_signature,
    decode_signature,
)
from .keys import (
    coerce_private_key,
    coerce_public_key,
    load_private_key_file,
    load_public_key_file,
    generate_private_key,
    create_self_signed_certificate,
    private_key_to_pem,
    certificate_to_pem,
)

__all__ = [
    'sign_message',
    'verify_signature',
    'encode_signature',
    'decode_signature',
    'coerce_private_key',
    'coerce_public_key',
    'load_private_key_file',
    'load_public_key_file',
    'generate_private_key',
    'create_self_signed_certificate',
    'private_key_to_pem',
    'certificate_to_pem',
]
