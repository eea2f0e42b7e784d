"""
Type definitions for banklink callback verification

This module provides the identity record produced by a verified callback,
the callback result returned to the surrounding framework, and the
verification error type.
"""

from typing import Dict, Optional, Any
from dataclasses import dataclass, field
from enum import Enum

from ..exceptions import BanklinkSDKError


class CallbackStatus(str, Enum):
    """Callback verification result status"""
    VALID = "valid"
    ERROR = "error"


class IdentityType(str, Enum):
    """Kind of authenticated subject"""
    PERSON = "person"
    COMPANY = "company"


@dataclass
class IdentityRecord:
    """
    Identity asserted by a verified bank callback
    
    Attributes:
        uid: Personal code or company registration code
        name: Display name
        identity_type: Person or company
        first_name: Given name (persons only)
        last_name: Family name (persons only)
        company_name: Company name (companies only)
        raw_fields: Complete callback field map, kept for audit
    """
    uid: str
    name: str
    identity_type: IdentityType
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company_name: Optional[str] = None
    raw_fields: Dict[str, str] = field(default_factory=dict)
    
    def __post_init__(self):
        """Validate identity record"""
        if not self.uid:
            raise ValueError("Identity uid cannot be empty")
    
    @property
    def is_person(self) -> bool:
        return self.identity_type == IdentityType.PERSON
    
    def to_info(self) -> Dict[str, Any]:
        """Auth-hash style ``info`` section of the identity."""
        info: Dict[str, Any] = {'full_name': self.name}
        if self.first_name is not None:
            info['first_name'] = self.first_name
        if self.last_name is not None:
            info['last_name'] = self.last_name
        if self.company_name is not None:
            info['company_name'] = self.company_name
        return info


class VerificationError(BanklinkSDKError):
    """Error class for verification operations"""
    
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
        return f"VerificationError(message='{self.message}', code='{self.code}', details={self.details})"


@dataclass
class CallbackResult:
    """
    Outcome of verifying one bank callback
    
    Attributes:
        status: Valid or error
        fields: Callback field map as received
        identity: Identity record, only set when status is valid
        error: ``{'code', 'message', 'details'}`` when status is error
    """
    status: CallbackStatus
    fields: Dict[str, str]
    identity: Optional[IdentityRecord] = None
    error: Optional[Dict[str, Any]] = None
    
    @property
    def is_valid(self) -> bool:
        return self.status == CallbackStatus.VALID and self.identity is not None
    
    @property
    def error_code(self) -> Optional[str]:
        return self.error['code'] if self.error else None
    
    @classmethod
    def create_valid(cls, fields: Dict[str, str], identity: IdentityRecord) -> 'CallbackResult':
        """Create successful result"""
        return cls(status=CallbackStatus.VALID, fields=fields, identity=identity)
    
    @classmethod
    def create_error(cls, fields: Dict[str, str], error: VerificationError) -> 'CallbackResult':
        """Create error result"""
        return cls(
            status=CallbackStatus.ERROR,
            fields=fields,
            error={
                'code': error.code,
                'message': error.message,
                'details': error.details
            }
        )
    
    def raise_for_error(self) -> IdentityRecord:
        """
        Return the identity or raise the recorded failure.
        
        Raises:
            VerificationError: If the callback did not verify
        """
        if self.is_valid:
            return self.identity
        
        error = self.error or {}
        raise VerificationError(
            error.get('message', 'Callback verification failed'),
            error.get('code', 'unknown_callback_err'),
            error.get('details')
        )
