"""
Exception classes for Banklink Python SDK
"""

from typing import Optional, Dict, Any


class BanklinkSDKError(Exception):
    """Base exception for all Banklink SDK errors"""
    
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


class KeyLoadError(BanklinkSDKError):
    """Exception raised when RSA key material or a certificate cannot be parsed"""
    pass


class ValidationError(BanklinkSDKError):
    """Exception raised for validation failures"""
    pass


class ConfigurationError(BanklinkSDKError):
    """Exception raised for invalid or incomplete SDK configuration"""
    pass


class BanklinkErrorCodes:
    """
    Stable failure codes reported to the surrounding web framework.
    
    The values double as the ``message`` query parameter of the failure
    redirect, so they are lowercase and must never change.
    """
    
    # Key material
    PRIVATE_KEY_LOAD_ERR = "private_key_load_err"
    PUBLIC_KEY_LOAD_ERR = "public_key_load_err"
    
    # Protocol constant mismatches
    UNSUPPORTED_RESPONSE_SERVICE_ERR = "unsupported_response_service_err"
    UNSUPPORTED_RESPONSE_VERSION_ERR = "unsupported_response_version_err"
    UNSUPPORTED_RESPONSE_ENCODING_ERR = "unsupported_response_encoding_err"
    
    # Canonical message and signature
    INVALID_RESPONSE_SIGNATURE_ERR = "invalid_response_signature_err"
    MISSING_RESPONSE_FIELD_ERR = "missing_response_field_err"
    FIELD_TOO_LONG_ERR = "field_too_long_err"
    INVALID_FIELD_VALUE_ERR = "invalid_field_value_err"
    INVALID_IDENTITY_ERR = "invalid_identity_err"
    
    # Configuration
    INVALID_CONFIG_ERR = "invalid_config_err"
    
    # Catch-all
    UNKNOWN_CALLBACK_ERR = "unknown_callback_err"
    UNKNOWN_REQUEST_ERR = "unknown_request_err"
