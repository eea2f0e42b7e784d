"""
RSA key material handling for the banklink handshake

The protocol core only works with parsed ``cryptography`` key objects. This
module coerces raw PEM/DER bytes or X.509 certificates into those objects and
provides the thin file-loading adapter used by the integration layer and CLI.
"""

import datetime
import logging
from pathlib import Path
from typing import Any, Optional, Union

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey
from cryptography.x509.oid import NameOID

from ..exceptions import KeyLoadError, BanklinkErrorCodes

logger = logging.getLogger(__name__)

PrivateKeyMaterial = Union[RSAPrivateKey, bytes, str]
PublicKeyMaterial = Union[RSAPublicKey, x509.Certificate, bytes, str]

DEFAULT_KEY_SIZE = 2048
PUBLIC_EXPONENT = 65537


def _material_bytes(material: Any, label: str, code: str) -> bytes:
    if material is None or (isinstance(material, (bytes, bytearray, str)) and not material):
        raise KeyLoadError(f"{label} material is missing", code)
    
    if not isinstance(material, (bytes, bytearray, str)):
        raise KeyLoadError(f"{label} must be RSA key material, got {type(material).__name__}", code)
    
    if isinstance(material, str):
        return material.encode('utf-8')
    return bytes(material)


def _is_pem(data: bytes) -> bool:
    return b'-----BEGIN' in data


def coerce_private_key(
    material: PrivateKeyMaterial,
    password: Optional[bytes] = None
) -> RSAPrivateKey:
    """
    Turn private key material into an RSA private key object.
    
    Args:
        material: Parsed key, or PEM/DER encoded key bytes (str is treated as PEM text)
        password: Optional passphrase for encrypted keys
        
    Returns:
        RSAPrivateKey: Parsed private key
        
    Raises:
        KeyLoadError: With code ``private_key_load_err`` if the material is
            missing, malformed, encrypted without password, or not RSA
    """
    if isinstance(material, RSAPrivateKey):
        return material
    
    data = _material_bytes(material, "Private key", BanklinkErrorCodes.PRIVATE_KEY_LOAD_ERR)
    try:
        if _is_pem(data):
            key = serialization.load_pem_private_key(data, password=password)
        else:
            key = serialization.load_der_private_key(data, password=password)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise KeyLoadError(
            f"Failed to parse private key: {e}",
            BanklinkErrorCodes.PRIVATE_KEY_LOAD_ERR
        )
    
    if not isinstance(key, RSAPrivateKey):
        raise KeyLoadError(
            f"Private key must be RSA, got {type(key).__name__}",
            BanklinkErrorCodes.PRIVATE_KEY_LOAD_ERR
        )
    
    return key


def coerce_public_key(material: PublicKeyMaterial) -> RSAPublicKey:
    """
    Turn public key material into an RSA public key object.
    
    Accepts a parsed key, a parsed certificate, or PEM/DER bytes holding
    either an X.509 certificate or a SubjectPublicKeyInfo public key.
    
    Args:
        material: Bank public key material
        
    Returns:
        RSAPublicKey: Parsed public key
        
    Raises:
        KeyLoadError: With code ``public_key_load_err`` on any parse failure
    """
    if isinstance(material, RSAPublicKey):
        return material
    
    if isinstance(material, x509.Certificate):
        try:
            key = material.public_key()
        except (ValueError, UnsupportedAlgorithm) as e:
            raise KeyLoadError(
                f"Unsupported certificate public key: {e}",
                BanklinkErrorCodes.PUBLIC_KEY_LOAD_ERR
            )
    else:
        data = _material_bytes(material, "Public key", BanklinkErrorCodes.PUBLIC_KEY_LOAD_ERR)
        try:
            if _is_pem(data):
                if b'CERTIFICATE' in data:
                    key = x509.load_pem_x509_certificate(data).public_key()
                else:
                    key = serialization.load_pem_public_key(data)
            else:
                try:
                    key = x509.load_der_x509_certificate(data).public_key()
                except ValueError:
                    key = serialization.load_der_public_key(data)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise KeyLoadError(
                f"Failed to parse public key: {e}",
                BanklinkErrorCodes.PUBLIC_KEY_LOAD_ERR
            )
    
    if not isinstance(key, RSAPublicKey):
        raise KeyLoadError(
            f"Public key must be RSA, got {type(key).__name__}",
            BanklinkErrorCodes.PUBLIC_KEY_LOAD_ERR
        )
    
    return key


def load_private_key_file(
    path: Union[str, Path],
    password: Optional[bytes] = None
) -> RSAPrivateKey:
    """
    Read and parse the relying party's private key file.
    
    Raises:
        KeyLoadError: With code ``private_key_load_err`` if the file cannot
            be read or parsed
    """
    try:
        data = Path(path).read_bytes()
    except (OSError, TypeError) as e:
        raise KeyLoadError(
            f"Cannot read private key file {path}: {e}",
            BanklinkErrorCodes.PRIVATE_KEY_LOAD_ERR,
            {"path": str(path)}
        )
    
    logger.debug(f"Loaded private key file: {path}")
    return coerce_private_key(data, password)


def load_public_key_file(path: Union[str, Path]) -> RSAPublicKey:
    """
    Read and parse the bank certificate or public key file.
    
    Raises:
        KeyLoadError: With code ``public_key_load_err`` if the file cannot
            be read or parsed
    """
    try:
        data = Path(path).read_bytes()
    except (OSError, TypeError) as e:
        raise KeyLoadError(
            f"Cannot read public key file {path}: {e}",
            BanklinkErrorCodes.PUBLIC_KEY_LOAD_ERR,
            {"path": str(path)}
        )
    
    logger.debug(f"Loaded public key file: {path}")
    return coerce_public_key(data)


def generate_private_key(key_size: int = DEFAULT_KEY_SIZE) -> RSAPrivateKey:
    """Generate a fresh RSA private key (for test environments and key ceremonies)."""
    if key_size < 1024:
        raise KeyLoadError(
            f"RSA key size too small: {key_size}",
            BanklinkErrorCodes.PRIVATE_KEY_LOAD_ERR
        )
    return rsa.generate_private_key(public_exponent=PUBLIC_EXPONENT, key_size=key_size)


def create_self_signed_certificate(
    private_key: RSAPrivateKey,
    common_name: str,
    valid_days: int = 365
) -> x509.Certificate:
    """
    Create a self-signed certificate binding the key to ``common_name``.
    
    Banks exchange certificates out of band; a self-signed one is enough to
    hand the relying party's public key over or to stand in for the bank in
    tests.
    """
    subject = issuer = x509.Name([
        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
    ])
    now = datetime.datetime.now(datetime.timezone.utc)
    
    return x509.CertificateBuilder().subject_name(
        subject
    ).issuer_name(
        issuer
    ).public_key(
        private_key.public_key()
    ).serial_number(
        x509.random_serial_number()
    ).not_valid_before(
        now
    ).not_valid_after(
        now + datetime.timedelta(days=valid_days)
    ).sign(private_key, hashes.SHA256())


def private_key_to_pem(private_key: RSAPrivateKey, password: Optional[bytes] = None) -> bytes:
    """Serialize a private key as PKCS#8 PEM, encrypted when a password is given."""
    if password:
        encryption = serialization.BestAvailableEncryption(password)
    else:
        encryption = serialization.NoEncryption()
    
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=encryption
    )


def certificate_to_pem(certificate: x509.Certificate) -> bytes:
    """Serialize a certificate as PEM."""
    return certificate.public_bytes(serialization.Encoding.PEM)
