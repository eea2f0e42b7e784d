"""
Banklink Python SDK - Protocol Module

Typed protocol constants and data descriptions of the supported banklink
protocol variants.
"""

from .constants import (
    ServiceCode,
    ProtocolVersion,
    FieldName,
    IdentityLayout,
    Language,
    PRODUCTION_ENDPOINT,
    LENGTH_PREFIX_WIDTH,
    MAX_FIELD_LENGTH,
    DEFAULT_LANGUAGE,
    DEFAULT_ENCODING,
)
from .variants import (
    ProtocolVariant,
    REQUEST_SIGNED_FIELDS,
    IDENTITY_RESPONSE_VARIANT,
    AUTHENTICATION_RESPONSE_VARIANT,
    PROTOCOL_VARIANTS,
    DEFAULT_VARIANT,
    get_protocol_variant,
)

__all__ = [
    'ServiceCode',
    'ProtocolVersion',
    'FieldName',
    'IdentityLayout',
    'Language',
    'PRODUCTION_ENDPOINT',
    'LENGTH_PREFIX_WIDTH',
    'MAX_FIELD_LENGTH',
    'DEFAULT_LANGUAGE',
    'DEFAULT_ENCODING',
    'ProtocolVariant',
    'REQUEST_SIGNED_FIELDS',
    'IDENTITY_RESPONSE_VARIANT',
    'AUTHENTICATION_RESPONSE_VARIANT',
    'PROTOCOL_VARIANTS',
    'DEFAULT_VARIANT',
    'get_protocol_variant',
]
