"""
Banklink callback verifier

Validates the field set the bank sends back through the browser. The checks
run in a fixed order and stop at the first failure:

1. parse the bank public key
2. VK_SERVICE matches the variant's callback service code
3. VK_VERSION matches the variant's version
4. the encoding field matches, for variants that carry one
5. rebuild the canonical signature input from the variant's signed fields
6. verify VK_MAC with RSA/SHA-1
7. extract the identity

Every failure is reported as a ``CallbackResult`` carrying one of the
``BanklinkErrorCodes``; unexpected exceptions become ``unknown_callback_err``.
"""

from typing import Dict, List, Mapping, Optional

from .types import CallbackResult, VerificationError
from .identity import extract_identity
from ..crypto.keys import PublicKeyMaterial, coerce_public_key
from ..crypto.rsa_sha1 import verify_signature, decode_signature
from ..exceptions import BanklinkSDKError, BanklinkErrorCodes
from ..protocol.constants import FieldName
from ..protocol.variants import ProtocolVariant, DEFAULT_VARIANT
from ..signing.field_encoder import encode_fields


class CallbackVerifier:
    """
    Verifier for one bank callback
    
    Holds no state besides its configuration; still, use one instance per
    callback so that nothing is shared between concurrent requests.
    """
    
    def __init__(
        self,
        public_key: PublicKeyMaterial,
        variant: ProtocolVariant = DEFAULT_VARIANT
    ):
        """
        Initialize the verifier.
        
        Args:
            public_key: Bank public key, certificate, or their PEM/DER bytes.
                Parsing is deferred to ``verify`` so that a bad key is
                reported as ``public_key_load_err``.
            variant: Protocol variant describing the expected callback
        """
        self.public_key = public_key
        self.variant = variant
    
    def verify(self, fields: Mapping[str, str]) -> CallbackResult:
        """
        Verify a callback field map.
        
        Args:
            fields: Callback parameters, however the caller sourced them
            
        Returns:
            CallbackResult: Valid result with identity, or error result
        """
        received: Dict[str, str] = {}
        
        try:
            received = dict(fields or {})
            identity = self._verify(received)
            return CallbackResult.create_valid(received, identity)
            
        except VerificationError as error:
            return CallbackResult.create_error(received, error)
            
        except Exception as error:
            return CallbackResult.create_error(
                received,
                VerificationError(
                    "Callback verification failed",
                    BanklinkErrorCodes.UNKNOWN_CALLBACK_ERR,
                    {'original_error': str(error)}
                )
            )
    
    def signature_input(self, fields: Mapping[str, str]) -> bytes:
        """
        Rebuild the canonical bytes the bank signed.
        
        Raises:
            VerificationError: ``missing_response_field_err`` if a signed field
                is absent, or the encoder's code for unrepresentable values
        """
        missing: List[str] = [name for name in self.variant.response_fields if fields.get(name) is None]
        if missing:
            raise VerificationError(
                f"Callback is missing signed fields: {', '.join(missing)}",
                BanklinkErrorCodes.MISSING_RESPONSE_FIELD_ERR,
                {'missing_fields': missing}
            )
        
        try:
            return encode_fields(
                [fields[name] for name in self.variant.response_fields],
                self.variant.charset
            )
        except BanklinkSDKError as e:
            raise VerificationError(str(e), e.error_code, e.details)
    
    def _verify(self, fields: Dict[str, str]):
        try:
            public_key = coerce_public_key(self.public_key)
        except BanklinkSDKError as e:
            raise VerificationError(
                f"Bank public key could not be loaded: {e}",
                BanklinkErrorCodes.PUBLIC_KEY_LOAD_ERR
            )
        
        self._check_constant(
            fields,
            FieldName.SERVICE.value,
            self.variant.response_service,
            BanklinkErrorCodes.UNSUPPORTED_RESPONSE_SERVICE_ERR
        )
        
        self._check_constant(
            fields,
            FieldName.VERSION.value,
            self.variant.version,
            BanklinkErrorCodes.UNSUPPORTED_RESPONSE_VERSION_ERR
        )
        
        if self.variant.encoding_field is not None:
            self._check_constant(
                fields,
                self.variant.encoding_field,
                self.variant.expected_encoding,
                BanklinkErrorCodes.UNSUPPORTED_RESPONSE_ENCODING_ERR
            )
        
        signature_input = self.signature_input(fields)
        
        try:
            signature = decode_signature(fields.get(FieldName.MAC.value))
        except BanklinkSDKError as e:
            raise VerificationError(str(e), BanklinkErrorCodes.INVALID_RESPONSE_SIGNATURE_ERR)
        
        if not verify_signature(public_key, signature_input, signature):
            raise VerificationError(
                "Callback signature does not match",
                BanklinkErrorCodes.INVALID_RESPONSE_SIGNATURE_ERR
            )
        
        return extract_identity(fields, self.variant.identity_layout)
    
    @staticmethod
    def _check_constant(
        fields: Mapping[str, str],
        name: str,
        expected: Optional[str],
        code: str
    ) -> None:
        actual = fields.get(name)
        if actual != expected:
            raise VerificationError(
                f"Unsupported {name} value: {actual!r}",
                code,
                {'field': name, 'expected': expected, 'actual': actual}
            )


def create_verifier(
    public_key: PublicKeyMaterial,
    variant: ProtocolVariant = DEFAULT_VARIANT
) -> CallbackVerifier:
    """
    Create a new callback verifier.
    
    Args:
        public_key: Bank public key material
        variant: Protocol variant
        
    Returns:
        CallbackVerifier: Verifier instance
    """
    return CallbackVerifier(public_key, variant)


def verify_callback(
    fields: Mapping[str, str],
    public_key: PublicKeyMaterial,
    variant: ProtocolVariant = DEFAULT_VARIANT
) -> CallbackResult:
    """
    Verify a single callback field map.
    
    Returns:
        CallbackResult: Verification result
    """
    return create_verifier(public_key, variant).verify(fields)
