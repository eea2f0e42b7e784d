"""
Configuration management for the banklink strategy

Provides the relying party configuration together with loaders for JSON
strings, JSON files and environment variables.
"""

import json
import logging
import os
from dataclasses import dataclass, fields as dataclass_fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ..exceptions import ConfigurationError, BanklinkErrorCodes
from ..protocol.constants import Language, PRODUCTION_ENDPOINT, DEFAULT_LANGUAGE
from ..protocol.variants import ProtocolVariant, PROTOCOL_VARIANTS, get_protocol_variant
from ..signing.types import StampStrategy

logger = logging.getLogger(__name__)

ENVIRONMENT_PREFIX = "BANKLINK_"


@dataclass
class BanklinkConfig:
    """
    Relying party configuration for one bank
    
    Attributes:
        snd_id: Identifier issued by the bank (VK_SND_ID)
        private_key_file: Path to the relying party RSA private key
        public_key_file: Path to the bank certificate or public key
        private_key: Inline PEM private key, used instead of the file when set
        public_key: Inline PEM certificate or public key, used instead of the file when set
        site: Bank endpoint the request form posts to
        lang: Bank UI language
        variant: Protocol variant name
        stamp_strategy: VK_STAMP format
        name: Strategy name used in paths and failure redirects
        request_path: Path that starts the request phase
        callback_path: Path the bank returns to
        failure_path: Path failures are redirected to
    """
    snd_id: str
    private_key_file: Optional[str] = None
    public_key_file: Optional[str] = None
    private_key: Optional[str] = None
    public_key: Optional[str] = None
    site: str = PRODUCTION_ENDPOINT
    lang: str = DEFAULT_LANGUAGE.value
    variant: str = 'identity'
    stamp_strategy: str = StampStrategy.TIMESTAMP.value
    name: str = 'dnb'
    request_path: Optional[str] = None
    callback_path: Optional[str] = None
    failure_path: str = '/auth/failure'
    
    def __post_init__(self):
        """Fill derived paths and validate configuration"""
        if self.request_path is None:
            self.request_path = f'/auth/{self.name}'
        if self.callback_path is None:
            self.callback_path = f'{self.request_path}/callback'
        self.validate()
    
    def validate(self) -> None:
        """
        Validate the configuration.
        
        Key files are not read here; missing or broken key material is
        reported by the phase that needs it.
        
        Raises:
            ConfigurationError: If a value is missing or unsupported
        """
        if not self.snd_id:
            raise ConfigurationError("snd_id is required", BanklinkErrorCodes.INVALID_CONFIG_ERR)
        
        if not self.site:
            raise ConfigurationError("site cannot be empty", BanklinkErrorCodes.INVALID_CONFIG_ERR)
        
        if not self.name:
            raise ConfigurationError("name cannot be empty", BanklinkErrorCodes.INVALID_CONFIG_ERR)
        
        if self.variant not in PROTOCOL_VARIANTS:
            raise ConfigurationError(
                f"Unknown protocol variant: {self.variant}",
                BanklinkErrorCodes.INVALID_CONFIG_ERR,
                {"available_variants": list(PROTOCOL_VARIANTS.keys())}
            )
        
        if self.stamp_strategy not in [s.value for s in StampStrategy]:
            raise ConfigurationError(
                f"Unknown stamp strategy: {self.stamp_strategy}",
                BanklinkErrorCodes.INVALID_CONFIG_ERR
            )
        
        if self.lang not in [lang.value for lang in Language]:
            raise ConfigurationError(
                f"Unsupported language: {self.lang}",
                BanklinkErrorCodes.INVALID_CONFIG_ERR,
                {"supported_languages": [lang.value for lang in Language]}
            )
        
        for path_name in ('request_path', 'callback_path', 'failure_path'):
            if not getattr(self, path_name).startswith('/'):
                raise ConfigurationError(
                    f"{path_name} must start with '/'",
                    BanklinkErrorCodes.INVALID_CONFIG_ERR
                )
    
    @property
    def protocol_variant(self) -> ProtocolVariant:
        return get_protocol_variant(self.variant)
    
    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'BanklinkConfig':
        """
        Build configuration from a mapping, ignoring unknown keys.
        
        Raises:
            ConfigurationError: If required keys are missing or values invalid
        """
        known = {f.name for f in dataclass_fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")
        
        try:
            return cls(**{k: v for k, v in data.items() if k in known})
        except TypeError as e:
            raise ConfigurationError(
                f"Invalid configuration format: {e}",
                BanklinkErrorCodes.INVALID_CONFIG_ERR
            )
    
    @classmethod
    def from_json(cls, json_string: str) -> 'BanklinkConfig':
        """Load configuration from a JSON object string"""
        try:
            data = json.loads(json_string)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Failed to parse configuration JSON: {e}",
                BanklinkErrorCodes.INVALID_CONFIG_ERR
            )
        
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Configuration JSON must be an object",
                BanklinkErrorCodes.INVALID_CONFIG_ERR
            )
        
        return cls.from_dict(data)
    
    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> 'BanklinkConfig':
        """Load configuration from a JSON file"""
        try:
            path = Path(file_path)
            with open(path, 'r', encoding='utf-8') as f:
                json_string = f.read()
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read configuration file: {e}",
                BanklinkErrorCodes.INVALID_CONFIG_ERR
            )
        
        logger.debug(f"Loaded banklink configuration from {file_path}")
        return cls.from_json(json_string)
    
    @classmethod
    def from_environment(
        cls,
        prefix: str = ENVIRONMENT_PREFIX,
        environ: Optional[Mapping[str, str]] = None
    ) -> 'BanklinkConfig':
        """
        Load configuration from ``<PREFIX><FIELD>`` environment variables.
        
        For example ``BANKLINK_SND_ID`` and ``BANKLINK_PRIVATE_KEY_FILE``.
        """
        env = os.environ if environ is None else environ
        data: Dict[str, Any] = {}
        
        for f in dataclass_fields(cls):
            value = env.get(f"{prefix}{f.name.upper()}")
            if value is not None:
                data[f.name] = value
        
        logger.debug(f"Loaded banklink configuration from environment ({len(data)} values)")
        return cls.from_dict(data)


def load_config(file_path: Union[str, Path]) -> BanklinkConfig:
    """Load banklink configuration from a JSON file"""
    return BanklinkConfig.from_file(file_path)
