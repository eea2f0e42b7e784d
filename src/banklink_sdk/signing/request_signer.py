"""
Banklink request signer

Builds the outgoing VK_* field set, encodes the signed subset canonically,
signs it with the relying party's RSA key (SHA-1 digest) and returns the field
map the caller renders as an auto-submitting hidden-field form.
"""

from typing import Dict, List, Optional

from .types import SignedRequest, SigningError, StampStrategy
from .field_encoder import encode_fields
from .stamp import generate_stamp
from ..crypto.keys import PrivateKeyMaterial, coerce_private_key
from ..crypto.rsa_sha1 import sign_message, encode_signature
from ..exceptions import KeyLoadError, BanklinkErrorCodes
from ..protocol.constants import FieldName, Language, PRODUCTION_ENDPOINT, DEFAULT_LANGUAGE
from ..protocol.variants import ProtocolVariant, DEFAULT_VARIANT


class RequestSigner:
    """
    Signer for one outgoing banklink request
    
    An instance represents a single request: the stamp is generated on first
    access and reused for both the signature input and the visible VK_STAMP
    field. Create a new signer for every request.
    """
    
    def __init__(
        self,
        private_key: PrivateKeyMaterial,
        snd_id: str,
        return_url: str,
        variant: ProtocolVariant = DEFAULT_VARIANT,
        lang: str = DEFAULT_LANGUAGE.value,
        stamp_strategy: StampStrategy = StampStrategy.TIMESTAMP,
        host: Optional[str] = None,
        action_url: str = PRODUCTION_ENDPOINT,
        password: Optional[bytes] = None
    ):
        """
        Initialize the signer.
        
        Args:
            private_key: Relying party RSA key, parsed or as PEM/DER bytes
            snd_id: Relying party identifier issued by the bank (VK_SND_ID)
            return_url: Callback URL the bank redirects back to (VK_RETURN)
            variant: Protocol variant supplying service and version codes
            lang: Bank UI language (VK_LANG, not signed)
            stamp_strategy: VK_STAMP format
            host: Relying party host, used by the host-token stamp strategy
            action_url: Bank endpoint the form posts to
            password: Passphrase for an encrypted private key
            
        Raises:
            SigningError: If ``snd_id`` or ``return_url`` is empty
        """
        if not snd_id:
            raise SigningError("VK_SND_ID cannot be empty", BanklinkErrorCodes.INVALID_CONFIG_ERR)
        
        if not return_url:
            raise SigningError("VK_RETURN cannot be empty", BanklinkErrorCodes.INVALID_CONFIG_ERR)
        
        self.private_key = private_key
        self.password = password
        self.snd_id = snd_id
        self.return_url = return_url
        self.variant = variant
        self.lang = lang.value if isinstance(lang, Language) else lang
        self.stamp_strategy = stamp_strategy
        self.host = host
        self.action_url = action_url or PRODUCTION_ENDPOINT
        self._stamp: Optional[str] = None
    
    @property
    def stamp(self) -> str:
        if self._stamp is None:
            self._stamp = generate_stamp(self.stamp_strategy, host=self.host)
        return self._stamp
    
    def signed_values(self) -> Dict[str, str]:
        """Values of the signed request fields, keyed by field name."""
        return {
            FieldName.SERVICE.value: self.variant.request_service,
            FieldName.VERSION.value: self.variant.version,
            FieldName.SND_ID.value: self.snd_id,
            FieldName.STAMP.value: self.stamp,
            FieldName.RETURN.value: self.return_url,
        }
    
    def signature_input(self) -> bytes:
        """
        Build the canonical bytes covered by VK_MAC.
        
        Returns:
            bytes: Length-prefixed concatenation of the variant's request fields
        """
        values = self.signed_values()
        ordered: List[str] = [values[name] for name in self.variant.request_fields]
        return encode_fields(ordered, self.variant.charset)
    
    def sign(self) -> SignedRequest:
        """
        Sign the request.
        
        Returns:
            SignedRequest: Outgoing fields including VK_MAC and VK_LANG
            
        Raises:
            SigningError: ``private_key_load_err`` if the key cannot be parsed,
                the encoder's codes for unrepresentable values, and
                ``unknown_request_err`` for anything else
        """
        try:
            try:
                key = coerce_private_key(self.private_key, self.password)
            except KeyLoadError as e:
                raise SigningError(
                    str(e),
                    BanklinkErrorCodes.PRIVATE_KEY_LOAD_ERR,
                    e.details
                )
            
            signature_input = self.signature_input()
            signature = encode_signature(sign_message(key, signature_input))
            
            fields = dict(self.signed_values())
            fields[FieldName.MAC.value] = signature
            fields[FieldName.LANG.value] = self.lang
            
            return SignedRequest(
                fields=fields,
                signature_input=signature_input,
                action_url=self.action_url
            )
            
        except Exception as e:
            if isinstance(e, SigningError):
                raise
            
            raise SigningError(
                f"Request signing failed: {e}",
                BanklinkErrorCodes.UNKNOWN_REQUEST_ERR,
                {"original_error": str(e)}
            )


def create_signer(
    private_key: PrivateKeyMaterial,
    snd_id: str,
    return_url: str,
    **kwargs
) -> RequestSigner:
    """
    Create a new request signer.
    
    Args:
        private_key: Relying party RSA key
        snd_id: Relying party identifier
        return_url: Callback URL
        **kwargs: Further ``RequestSigner`` options
        
    Returns:
        RequestSigner: Signer for a single request
    """
    return RequestSigner(private_key, snd_id, return_url, **kwargs)


def sign_request(
    private_key: PrivateKeyMaterial,
    snd_id: str,
    return_url: str,
    **kwargs
) -> SignedRequest:
    """
    Sign a single outgoing request.
    
    Returns:
        SignedRequest: Signed field map
    """
    return create_signer(private_key, snd_id, return_url, **kwargs).sign()
