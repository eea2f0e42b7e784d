"""
Configuration for Banklink Python SDK
"""

from .banklink_config import (
    BanklinkConfig,
    ENVIRONMENT_PREFIX,
    load_config,
)

__all__ = [
    'BanklinkConfig',
    'ENVIRONMENT_PREFIX',
    'load_config',
]
