"""
Protocol variant descriptions

Each banklink generation is described as data: the ordered field lists that go
into the signature input for each direction plus the constants the callback
must carry. The verifier and signer select behaviour from a variant instead of
branching on bank message types.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .constants import (
    FieldName,
    IdentityLayout,
    ProtocolVersion,
    ServiceCode,
    DEFAULT_ENCODING,
)
from ..exceptions import ConfigurationError, BanklinkErrorCodes


REQUEST_SIGNED_FIELDS: Tuple[str, ...] = (
    FieldName.SERVICE.value,
    FieldName.VERSION.value,
    FieldName.SND_ID.value,
    FieldName.STAMP.value,
    FieldName.RETURN.value,
)


@dataclass(frozen=True)
class ProtocolVariant:
    """
    Immutable description of one banklink protocol generation
    
    Attributes:
        name: Registry key of the variant
        description: Human readable summary
        request_service: VK_SERVICE sent in the outgoing request
        response_service: VK_SERVICE the callback must carry
        version: VK_VERSION for both directions
        request_fields: Ordered signed fields of the outgoing request
        response_fields: Ordered signed fields of the callback
        identity_layout: How the callback carries the subject
        encoding_field: Optional field naming the callback charset
        expected_encoding: Value ``encoding_field`` must hold
        charset: Charset used to turn field values into signature bytes
    """
    name: str
    description: str
    request_service: str
    response_service: str
    version: str
    request_fields: Tuple[str, ...]
    response_fields: Tuple[str, ...]
    identity_layout: IdentityLayout
    encoding_field: Optional[str] = None
    expected_encoding: Optional[str] = None
    charset: str = DEFAULT_ENCODING
    
    def __post_init__(self):
        """Validate variant description"""
        if not self.name:
            raise ConfigurationError("Variant name cannot be empty", BanklinkErrorCodes.INVALID_CONFIG_ERR)
        
        if not self.response_fields:
            raise ConfigurationError(
                f"Variant {self.name} must declare signed response fields",
                BanklinkErrorCodes.INVALID_CONFIG_ERR
            )
        
        if (self.encoding_field is None) != (self.expected_encoding is None):
            raise ConfigurationError(
                f"Variant {self.name} must set encoding field and expected encoding together",
                BanklinkErrorCodes.INVALID_CONFIG_ERR
            )
        
        if FieldName.MAC.value in self.response_fields or FieldName.MAC.value in self.request_fields:
            raise ConfigurationError(
                "VK_MAC cannot be part of the signed field list",
                BanklinkErrorCodes.INVALID_CONFIG_ERR
            )


# Identity response sent after a 3001 request (DNB Latvia, version 101)
IDENTITY_RESPONSE_VARIANT = ProtocolVariant(
    name='identity',
    description='Identity response with split person and company fields',
    request_service=ServiceCode.AUTH_REQUEST.value,
    response_service=ServiceCode.IDENTITY_RESPONSE.value,
    version=ProtocolVersion.V101.value,
    request_fields=REQUEST_SIGNED_FIELDS,
    response_fields=(
        FieldName.SERVICE.value,
        FieldName.VERSION.value,
        FieldName.SND_ID.value,
        FieldName.REC_ID.value,
        FieldName.STAMP.value,
        FieldName.T_NO.value,
        FieldName.PER_CODE.value,
        FieldName.PER_FNAME.value,
        FieldName.PER_LNAME.value,
        FieldName.COM_CODE.value,
        FieldName.COM_NAME.value,
        FieldName.TIME.value,
    ),
    identity_layout=IdentityLayout.SPLIT_FIELDS,
)

# Older authentication response carrying the subject in VK_INFO
AUTHENTICATION_RESPONSE_VARIANT = ProtocolVariant(
    name='authentication',
    description='Authentication response with nonce and VK_INFO subject field',
    request_service=ServiceCode.AUTH_REQUEST.value,
    response_service=ServiceCode.AUTH_REQUEST.value,
    version=ProtocolVersion.V101.value,
    request_fields=REQUEST_SIGNED_FIELDS,
    response_fields=(
        FieldName.SERVICE.value,
        FieldName.VERSION.value,
        FieldName.SND_ID.value,
        FieldName.STAMP.value,
        FieldName.NONCE.value,
        FieldName.INFO.value,
    ),
    identity_layout=IdentityLayout.INFO_FIELD,
    encoding_field=FieldName.ENCODING.value,
    expected_encoding='UTF-8',
)


PROTOCOL_VARIANTS: Dict[str, ProtocolVariant] = {
    IDENTITY_RESPONSE_VARIANT.name: IDENTITY_RESPONSE_VARIANT,
    AUTHENTICATION_RESPONSE_VARIANT.name: AUTHENTICATION_RESPONSE_VARIANT,
}

DEFAULT_VARIANT = IDENTITY_RESPONSE_VARIANT


def get_protocol_variant(name: str) -> ProtocolVariant:
    """
    Look up a built-in protocol variant by name.
    
    Args:
        name: Variant name ('identity' or 'authentication')
        
    Returns:
        ProtocolVariant: Matching variant
        
    Raises:
        ConfigurationError: If the name is unknown
    """
    variant = PROTOCOL_VARIANTS.get(name)
    if variant is None:
        raise ConfigurationError(
            f"Unknown protocol variant: {name}",
            BanklinkErrorCodes.INVALID_CONFIG_ERR,
            {"available_variants": list(PROTOCOL_VARIANTS.keys())}
        )
    return variant
