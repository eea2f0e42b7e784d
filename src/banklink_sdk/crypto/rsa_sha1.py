"""
RSA PKCS#1 v1.5 signatures with SHA-1 digest

The banklink protocol mandates RSA with a SHA-1 digest over the canonical
signature input, with the raw signature base64-encoded for transport. No
other algorithm is offered here.
"""

import base64
import binascii
from typing import Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey

from ..exceptions import ValidationError, BanklinkErrorCodes


def sign_message(private_key: RSAPrivateKey, message: Union[str, bytes]) -> bytes:
    """
    Sign a message with RSA PKCS#1 v1.5 and SHA-1.
    
    Args:
        private_key: Parsed RSA private key
        message: Canonical signature input (str is UTF-8 encoded)
        
    Returns:
        bytes: Raw signature, as long as the key modulus
    """
    if isinstance(message, str):
        message = message.encode('utf-8')
    
    return private_key.sign(message, padding.PKCS1v15(), hashes.SHA1())


def verify_signature(
    public_key: RSAPublicKey,
    message: Union[str, bytes],
    signature: bytes
) -> bool:
    """
    Verify an RSA PKCS#1 v1.5 SHA-1 signature.
    
    Args:
        public_key: Parsed RSA public key
        message: Canonical signature input
        signature: Raw signature bytes
        
    Returns:
        bool: True only if the signature matches the message
    """
    if isinstance(message, str):
        message = message.encode('utf-8')
    
    try:
        public_key.verify(signature, message, padding.PKCS1v15(), hashes.SHA1())
        return True
    except InvalidSignature:
        return False


def encode_signature(signature: bytes) -> str:
    """Base64-encode a raw signature for the VK_MAC field (single line)."""
    return base64.b64encode(signature).decode('ascii')


def decode_signature(value: str) -> bytes:
    """
    Decode a transported VK_MAC value.
    
    Line breaks and other whitespace are dropped first; some banks wrap the
    base64 text at 60 or 76 columns.
    
    Args:
        value: Base64 signature text
        
    Returns:
        bytes: Raw signature
        
    Raises:
        ValidationError: If the value is empty or not valid base64
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(
            "Signature value is empty",
            BanklinkErrorCodes.INVALID_RESPONSE_SIGNATURE_ERR
        )
    
    compact = ''.join(value.split())
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(
            f"Signature is not valid base64: {e}",
            BanklinkErrorCodes.INVALID_RESPONSE_SIGNATURE_ERR
        )
