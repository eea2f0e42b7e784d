"""
Canonical signature input construction

Every signed field is written as a three digit, zero padded decimal length
followed by the value itself, and the pieces are concatenated in protocol
order. The same encoding is used for the outgoing request and for the
callback; only the field list differs.
"""

from typing import Any, Iterable, List

from .types import SigningError
from ..exceptions import BanklinkErrorCodes
from ..protocol.constants import LENGTH_PREFIX_WIDTH, MAX_FIELD_LENGTH, DEFAULT_ENCODING


def _to_text(value: Any) -> str:
    if value is None:
        raise SigningError(
            "Field value cannot be None",
            BanklinkErrorCodes.INVALID_FIELD_VALUE_ERR
        )
    
    if isinstance(value, bytes):
        raise SigningError(
            "Field value must be text, not bytes",
            BanklinkErrorCodes.INVALID_FIELD_VALUE_ERR
        )
    
    return value if isinstance(value, str) else str(value)


def prepend_length(value: Any, encoding: str = DEFAULT_ENCODING) -> bytes:
    """
    Encode a single field as ``<length:03d><value>``.
    
    Args:
        value: Field value; non-string values are converted with ``str()``
        encoding: Charset used for the value bytes
        
    Returns:
        bytes: Length-prefixed field
        
    Raises:
        SigningError: ``field_too_long_err`` if the value does not fit the
            prefix, ``invalid_field_value_err`` for None, bytes, or text the
            charset cannot represent
    """
    text = _to_text(value)
    
    if len(text) > MAX_FIELD_LENGTH:
        raise SigningError(
            f"Field value is {len(text)} characters long, the length prefix allows at most {MAX_FIELD_LENGTH}",
            BanklinkErrorCodes.FIELD_TOO_LONG_ERR,
            {"length": len(text), "max_length": MAX_FIELD_LENGTH}
        )
    
    try:
        payload = text.encode(encoding)
    except UnicodeEncodeError as e:
        raise SigningError(
            f"Field value cannot be encoded as {encoding}: {e}",
            BanklinkErrorCodes.INVALID_FIELD_VALUE_ERR,
            {"encoding": encoding}
        )
    
    prefix = str(len(text)).rjust(LENGTH_PREFIX_WIDTH, '0').encode('ascii')
    return prefix + payload


def encode_fields(values: Iterable[Any], encoding: str = DEFAULT_ENCODING) -> bytes:
    """
    Build the canonical signature input from ordered field values.
    
    Args:
        values: Field values in protocol order
        encoding: Charset used for the value bytes
        
    Returns:
        bytes: Concatenated length-prefixed fields
    """
    return b''.join(prepend_length(value, encoding) for value in values)


class FieldEncoder:
    """
    Canonical encoder bound to one charset
    """
    
    def __init__(self, encoding: str = DEFAULT_ENCODING):
        self.encoding = encoding
    
    def encode(self, values: Iterable[Any]) -> bytes:
        return encode_fields(values, self.encoding)
    
    def encode_debug(self, values: Iterable[Any]) -> List[str]:
        """
        Return each length-prefixed field as text.
        
        Meant for diagnosing signature mismatches against a bank's reference
        string; the concatenation of the result equals ``encode()``.
        """
        return [prepend_length(value, self.encoding).decode(self.encoding) for value in values]
