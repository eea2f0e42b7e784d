"""
Banklink Python SDK - Callback Verification Module

Strict, ordered verification of the signed field set the bank returns and
extraction of the asserted identity.
"""

from .types import (
    CallbackResult,
    CallbackStatus,
    IdentityRecord,
    IdentityType,
    VerificationError,
)

from .identity import (
    extract_identity,
    extract_split_identity,
    extract_info_identity,
)

from .callback_verifier import (
    CallbackVerifier,
    create_verifier,
    verify_callback,
)

# Public API exports
__all__ = [
    # Core verification functionality
    'CallbackVerifier',
    'create_verifier',
    'verify_callback',
    # Types
    'CallbackResult',
    'CallbackStatus',
    'IdentityRecord',
    'IdentityType',
    'VerificationError',
    # Identity extraction
    'extract_identity',
    'extract_split_identity',
    'extract_info_identity',
]
