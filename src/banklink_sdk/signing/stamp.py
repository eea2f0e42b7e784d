"""
VK_STAMP generation

The stamp correlates one outgoing request with the bank's callback. Two
fixed-width formats are supported; the bank validates the byte length of the
field, so the width of each strategy is part of the public contract.
"""

import re
import secrets
import uuid
from datetime import datetime
from typing import Dict, Optional

from .types import StampStrategy, SigningError
from ..exceptions import BanklinkErrorCodes


STAMP_LENGTHS: Dict[StampStrategy, int] = {
    StampStrategy.TIMESTAMP: 20,
    StampStrategy.HOST_TOKEN: 50,
}

TIMESTAMP_FORMAT = '%Y%m%d%H%M%S'
RANDOM_DIGITS = 6

_TIMESTAMP_STAMP_PATTERN = re.compile(r'^\d{20}$')


def generate_timestamp_stamp(now: Optional[datetime] = None) -> str:
    """
    Generate a 20 character stamp: ``YYYYMMDDHHMMSS`` plus six random digits.
    
    Args:
        now: Clock override for tests (defaults to local time)
        
    Returns:
        str: Stamp such as ``20170403112855087471``
    """
    moment = now or datetime.now()
    token = secrets.randbelow(10 ** RANDOM_DIGITS)
    return f"{moment.strftime(TIMESTAMP_FORMAT)}{token:0{RANDOM_DIGITS}d}"


def generate_host_token_stamp(host: Optional[str] = None) -> str:
    """
    Generate a 50 character stamp from the relying party host and a random token.
    
    ``:`` and ``/`` in the host are replaced with ``X``; the result is
    right-aligned with spaces and only the last 50 characters are kept.
    
    Args:
        host: Full host of the relying party, e.g. ``https://shop.example.lv``
        
    Returns:
        str: Stamp of exactly 50 characters
    """
    width = STAMP_LENGTHS[StampStrategy.HOST_TOKEN]
    normalized_host = re.sub(r'[:/]', 'X', host or '')
    return (normalized_host + uuid.uuid4().hex).rjust(width, ' ')[-width:]


def generate_stamp(
    strategy: StampStrategy = StampStrategy.TIMESTAMP,
    host: Optional[str] = None,
    now: Optional[datetime] = None
) -> str:
    """
    Generate a stamp with the given strategy.
    
    Raises:
        SigningError: If the strategy is unknown
    """
    try:
        strategy = StampStrategy(strategy)
    except ValueError:
        raise SigningError(
            f"Unknown stamp strategy: {strategy}",
            BanklinkErrorCodes.INVALID_CONFIG_ERR,
            {"available_strategies": [s.value for s in StampStrategy]}
        )
    
    if strategy == StampStrategy.HOST_TOKEN:
        return generate_host_token_stamp(host)
    
    return generate_timestamp_stamp(now)


def validate_stamp(stamp: str, strategy: StampStrategy = StampStrategy.TIMESTAMP) -> bool:
    """
    Check that a stamp has the exact width (and shape) of its strategy.
    
    Args:
        stamp: Stamp to check
        strategy: Strategy the stamp was generated with
        
    Returns:
        bool: True if the stamp is well formed
    """
    if not isinstance(stamp, str):
        return False
    
    strategy = StampStrategy(strategy)
    if len(stamp) != STAMP_LENGTHS[strategy]:
        return False
    
    if strategy == StampStrategy.TIMESTAMP:
        return bool(_TIMESTAMP_STAMP_PATTERN.match(stamp))
    
    return bool(stamp.strip())
