"""
Banklink Python SDK - Request Signing Module

Canonical field encoding, VK_STAMP generation and RSA-SHA1 signing of the
outgoing banklink authentication request.
"""

from .types import (
    SignedRequest,
    SigningError,
    StampStrategy,
)

from .field_encoder import (
    FieldEncoder,
    encode_fields,
    prepend_length,
)

from .stamp import (
    STAMP_LENGTHS,
    generate_stamp,
    generate_timestamp_stamp,
    generate_host_token_stamp,
    validate_stamp,
)

from .request_signer import (
    RequestSigner,
    create_signer,
    sign_request,
)

# Public API exports
__all__ = [
    # Core signing functionality
    'RequestSigner',
    'create_signer',
    'sign_request',
    # Types
    'SignedRequest',
    'SigningError',
    'StampStrategy',
    # Canonical encoding
    'FieldEncoder',
    'encode_fields',
    'prepend_length',
    # Stamps
    'STAMP_LENGTHS',
    'generate_stamp',
    'generate_timestamp_stamp',
    'generate_host_token_stamp',
    'validate_stamp',
]
