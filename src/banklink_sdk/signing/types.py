"""
Type definitions for banklink request signing

This module provides the data classes and error type shared by the field
encoder, the stamp generator and the request signer.
"""

from typing import Dict, Optional, Any
from dataclasses import dataclass
from enum import Enum

from ..exceptions import BanklinkSDKError
from ..protocol.constants import FieldName


class StampStrategy(str, Enum):
    """VK_STAMP generation strategies"""
    TIMESTAMP = "timestamp"    # YYYYMMDDHHMMSS + 6 random digits, 20 chars
    HOST_TOKEN = "host_token"  # host + random token, right-aligned to 50 chars


@dataclass
class SignedRequest:
    """
    Signed outgoing request, ready to be rendered as a hidden-field form
    
    Attributes:
        fields: Outgoing field names to values, in rendering order
        signature_input: Canonical bytes that were signed into VK_MAC
        action_url: Bank endpoint the form posts to
    """
    fields: Dict[str, str]
    signature_input: bytes
    action_url: str
    
    def __post_init__(self):
        """Validate signed request"""
        if not isinstance(self.fields, dict):
            raise ValueError("Fields must be a dictionary")
        
        if not self.fields.get(FieldName.MAC.value):
            raise ValueError("Signed request must carry VK_MAC")
        
        if not self.action_url:
            raise ValueError("Action URL cannot be empty")
    
    @property
    def stamp(self) -> str:
        return self.fields[FieldName.STAMP.value]
    
    @property
    def signature(self) -> str:
        return self.fields[FieldName.MAC.value]


class SigningError(BanklinkSDKError):
    """
    Error class for signing and encoding operations
    
    Attributes:
        message: Error message
        code: One of ``BanklinkErrorCodes``
        details: Optional additional error details
    """
    
    def __init__(
        self, 
        message: str, 
        code: str, 
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code, details)
        self.message = message
        self.code = code
        
    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.code}, details: {self.details})"
        return f"{self.message} (code: {self.code})"
        
    def __repr__(self) -> str:
        return f"SigningError(message='{self.message}', code='{self.code}', details={self.details})"
