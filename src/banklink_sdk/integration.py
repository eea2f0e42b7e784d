"""
High-level integration module for Banklink SDK

This module wires configuration, key loading, request signing and callback
verification into a framework-agnostic authentication strategy. The host web
framework maps its request/response objects onto ``request_phase`` and
``callback_phase``; everything else (sessions, routing, locale) stays with the
framework.
"""

import html
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

from .config import BanklinkConfig
from .crypto.keys import load_private_key_file, load_public_key_file
from .exceptions import KeyLoadError, BanklinkErrorCodes
from .signing import RequestSigner, SignedRequest, SigningError, StampStrategy
from .verification import CallbackResult, CallbackVerifier, IdentityRecord, VerificationError

logger = logging.getLogger(__name__)

DEFAULT_FORM_TITLE = "Please wait, redirecting to the bank..."
DEFAULT_BUTTON_LABEL = "Click here if you are not redirected automatically"
AUTO_SUBMIT_SCRIPT = '<script type="text/javascript">document.forms[0].submit();</script>'


@dataclass
class PhaseResponse:
    """
    Framework-neutral HTTP response produced by a strategy phase
    """
    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""
    
    @property
    def location(self) -> Optional[str]:
        return self.headers.get('Location')


@dataclass
class AuthHash:
    """
    Authentication result handed to the application after a valid callback
    
    Attributes:
        provider: Strategy name
        uid: Subject identifier
        info: Display data (full name and name parts)
        extra: Raw callback fields under ``raw_info``
    """
    provider: str
    uid: str
    info: Dict[str, Any]
    extra: Dict[str, Any] = field(default_factory=dict)
    
    @classmethod
    def from_identity(cls, provider: str, identity: IdentityRecord) -> 'AuthHash':
        return cls(
            provider=provider,
            uid=identity.uid,
            info=identity.to_info(),
            extra={
                'identity_type': identity.identity_type.value,
                'raw_info': dict(identity.raw_fields),
            }
        )


@dataclass
class CallbackPhaseResult:
    """
    Outcome of the callback phase
    
    Attributes:
        result: Verification result
        auth: Authentication hash when the callback verified
        response: Failure redirect when it did not
    """
    result: CallbackResult
    auth: Optional[AuthHash] = None
    response: Optional[PhaseResponse] = None


def render_autosubmit_form(
    action_url: str,
    fields: Mapping[str, str],
    title: str = DEFAULT_FORM_TITLE,
    button_label: str = DEFAULT_BUTTON_LABEL
) -> str:
    """
    Render a single POST form with hidden inputs that submits itself on load.
    
    Args:
        action_url: Bank endpoint
        fields: Hidden field names to values
        title: Page title
        button_label: Label of the fallback submit button
        
    Returns:
        str: Complete HTML document
    """
    inputs = "\n".join(
        f'<input type="hidden" name="{html.escape(name)}" value="{html.escape(value)}" />'
        for name, value in fields.items()
    )
    
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        '<meta charset="utf-8" />\n'
        f"<title>{html.escape(title)}</title>\n"
        "</head>\n"
        "<body>\n"
        f"<h1>{html.escape(title)}</h1>\n"
        f"<form method='post' action='{html.escape(action_url)}' noValidate='noValidate'>\n"
        f"{inputs}\n"
        f'<button type="submit">{html.escape(button_label)}</button>\n'
        f"</form>{AUTO_SUBMIT_SCRIPT}\n"
        "</body>\n"
        "</html>\n"
    )


class BanklinkStrategy:
    """
    Banklink authentication strategy
    
    Stateless apart from its configuration; every phase builds a fresh signer
    or verifier, so one strategy may serve concurrent requests.
    """
    
    def __init__(self, config: BanklinkConfig, full_host: str, script_name: str = ""):
        """
        Initialize the strategy.
        
        Args:
            config: Relying party configuration
            full_host: Scheme, host and port of the relying party, e.g. ``http://example.org``
            script_name: Mount point of the application, if any
        """
        self.config = config
        self.full_host = full_host.rstrip('/')
        self.script_name = script_name.rstrip('/')
    
    @property
    def name(self) -> str:
        return self.config.name
    
    @property
    def callback_url(self) -> str:
        return self.full_host + self.script_name + self.config.callback_path
    
    def failure_location(self, error_code: str) -> str:
        """Failure redirect target for an error code"""
        query = urlencode({'message': error_code, 'strategy': self.name})
        return f"{self.script_name}{self.config.failure_path}?{query}"
    
    def fail(self, error_code: str) -> PhaseResponse:
        """Build the failure redirect response"""
        logger.warning(f"Banklink {self.name} authentication failed: {error_code}")
        return PhaseResponse(status=302, headers={'Location': self.failure_location(error_code)})
    
    def build_signed_request(self) -> SignedRequest:
        """
        Load the private key and sign a fresh outgoing request.
        
        Raises:
            SigningError: With the signer's error code
        """
        try:
            if self.config.private_key:
                private_key = self.config.private_key
            else:
                private_key = load_private_key_file(self.config.private_key_file)
        except KeyLoadError as e:
            raise SigningError(str(e), BanklinkErrorCodes.PRIVATE_KEY_LOAD_ERR, e.details)
        
        signer = RequestSigner(
            private_key,
            snd_id=self.config.snd_id,
            return_url=self.callback_url,
            variant=self.config.protocol_variant,
            lang=self.config.lang,
            stamp_strategy=StampStrategy(self.config.stamp_strategy),
            host=self.full_host,
            action_url=self.config.site
        )
        return signer.sign()
    
    def request_phase(self) -> PhaseResponse:
        """
        Run the request phase.
        
        Returns:
            PhaseResponse: 200 with the auto-submitting form, or a 302 failure redirect
        """
        logger.info(f"Starting banklink {self.name} request phase for {self.config.snd_id}")
        
        try:
            signed = self.build_signed_request()
        except SigningError as e:
            return self.fail(e.code)
        except Exception as e:
            logger.error(f"Unexpected error in banklink request phase: {e}")
            return self.fail(BanklinkErrorCodes.UNKNOWN_REQUEST_ERR)
        
        body = render_autosubmit_form(signed.action_url, signed.fields)
        return PhaseResponse(
            status=200,
            headers={'Content-Type': 'text/html; charset=utf-8'},
            body=body
        )
    
    def callback_phase(self, params: Mapping[str, str]) -> CallbackPhaseResult:
        """
        Run the callback phase over the parameters the bank returned.
        
        Args:
            params: Callback parameters (form POST or query string)
            
        Returns:
            CallbackPhaseResult: Auth hash on success, failure redirect otherwise
        """
        logger.info(f"Starting banklink {self.name} callback phase")
        
        try:
            if self.config.public_key:
                public_key = self.config.public_key
            else:
                public_key = load_public_key_file(self.config.public_key_file)
        except KeyLoadError as e:
            result = CallbackResult.create_error(
                dict(params or {}),
                VerificationError(str(e), BanklinkErrorCodes.PUBLIC_KEY_LOAD_ERR, e.details)
            )
            return CallbackPhaseResult(result=result, response=self.fail(result.error_code))
        except Exception as e:
            logger.error(f"Unexpected error loading banklink public key: {e}")
            result = CallbackResult.create_error(
                {},
                VerificationError(
                    "Callback verification failed",
                    BanklinkErrorCodes.UNKNOWN_CALLBACK_ERR,
                    {'original_error': str(e)}
                )
            )
            return CallbackPhaseResult(result=result, response=self.fail(result.error_code))
        
        verifier =CallbackVerifier(public_key, self.config.protocol_variant)
        result = verifier.verify(params)
        
        if not result.is_valid:
            return CallbackPhaseResult(result=result, response=self.fail(result.error_code))
        
        logger.info(f"Banklink {self.name} callback verified for {result.identity.identity_type.value}")
        return CallbackPhaseResult(
            result=result,
            auth=AuthHash.from_identity(self.name, result.identity)
        )


def create_strategy(
    config: BanklinkConfig,
    full_host: str,
    script_name: str = ""
) -> BanklinkStrategy:
    """
    Create a banklink strategy.
    
    Args:
        config: Relying party configuration
        full_host: Relying party scheme and host
        script_name: Application mount point
        
    Returns:
        BanklinkStrategy: Strategy instance
    """
    return BanklinkStrategy(config, full_host, script_name)
