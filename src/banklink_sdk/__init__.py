"""
Banklink Python SDK
Signed request and callback handling for Baltic banklink authentication
"""

from .version import __version__
from .exceptions import (
    BanklinkSDKError,
    BanklinkErrorCodes,
    KeyLoadError,
    ValidationError,
    ConfigurationError,
)
from .protocol import (
    ServiceCode,
    ProtocolVersion,
    FieldName,
    IdentityLayout,
    Language,
    PRODUCTION_ENDPOINT,
    ProtocolVariant,
    IDENTITY_RESPONSE_VARIANT,
    AUTHENTICATION_RESPONSE_VARIANT,
    PROTOCOL_VARIANTS,
    get_protocol_variant,
)
from .crypto import (
    sign_message,
    verify_signature,
    coerce_private_key,
    coerce_public_key,
    load_private_key_file,
    load_public_key_file,
)
from .signing import (
    RequestSigner,
    create_signer,
    sign_request,
    SignedRequest,
    SigningError,
    StampStrategy,
    FieldEncoder,
    encode_fields,
    prepend_length,
    STAMP_LENGTHS,
    generate_stamp,
)
from .verification import (
    CallbackVerifier,
    create_verifier,
    verify_callback,
    CallbackResult,
    CallbackStatus,
    IdentityRecord,
    IdentityType,
    VerificationError,
    extract_identity,
)
from .config import (
    BanklinkConfig,
    load_config,
)
from .integration import (
    BanklinkStrategy,
    AuthHash,
    PhaseResponse,
    CallbackPhaseResult,
    create_strategy,
    render_autosubmit_form,
)


# Public API exports
__all__ = [
    '__version__',
    # Exceptions
    'BanklinkSDKError',
    'BanklinkErrorCodes',
    'KeyLoadError',
    'ValidationError',
    'ConfigurationError',
    # Protocol
    'ServiceCode',
    'ProtocolVersion',
    'FieldName',
    'IdentityLayout',
    'Language',
    'PRODUCTION_ENDPOINT',
    'ProtocolVariant',
    'IDENTITY_RESPONSE_VARIANT',
    'AUTHENTICATION_RESPONSE_VARIANT',
    'PROTOCOL_VARIANTS',
    'get_protocol_variant',
    # Crypto
    'sign_message',
    'verify_signature',
    'coerce_private_key',
    'coerce_public_key',
    'load_private_key_file',
    'load_public_key_file',
    # Request Signing
    'RequestSigner',
    'create_signer',
    'sign_request',
    'SignedRequest',
    'SigningError',
    'StampStrategy',
    'FieldEncoder',
    'encode_fields',
    'prepend_length',
    'STAMP_LENGTHS',
    'generate_stamp',
    # Callback Verification
    'CallbackVerifier',
    'create_verifier',
    'verify_callback',
    'CallbackResult',
    'CallbackStatus',
    'IdentityRecord',
    'IdentityType',
    'VerificationError',
    'extract_identity',
    # Configuration
    'BanklinkConfig',
    'load_config',
    # Integration
    'BanklinkStrategy',
    'AuthHash',
    'PhaseResponse',
    'CallbackPhaseResult',
    'create_strategy',
    'render_autosubmit_form',
]
