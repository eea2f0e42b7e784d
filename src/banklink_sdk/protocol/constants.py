"""
Protocol constants for the DNB banklink handshake

Service and version codes are transmitted and signed as fixed-width strings.
They are modelled as ``str`` enums so the zero padding travels with the value
into the length-prefixed signature input.
"""

from enum import Enum


class ServiceCode(str, Enum):
    """VK_SERVICE values"""
    AUTH_REQUEST = "3001"
    IDENTITY_RESPONSE = "2001"


class ProtocolVersion(str, Enum):
    """VK_VERSION values"""
    V101 = "101"


class FieldName(str, Enum):
    """Protocol-defined VK_* parameter names"""
    SERVICE = "VK_SERVICE"
    VERSION = "VK_VERSION"
    SND_ID = "VK_SND_ID"
    REC_ID = "VK_REC_ID"
    STAMP = "VK_STAMP"
    RETURN = "VK_RETURN"
    MAC = "VK_MAC"
    LANG = "VK_LANG"
    T_NO = "VK_T_NO"
    PER_CODE = "VK_PER_CODE"
    PER_FNAME = "VK_PER_FNAME"
    PER_LNAME = "VK_PER_LNAME"
    COM_CODE = "VK_COM_CODE"
    COM_NAME = "VK_COM_NAME"
    TIME = "VK_TIME"
    NONCE = "VK_NONCE"
    INFO = "VK_INFO"
    ENCODING = "VK_ENCODING"


class IdentityLayout(str, Enum):
    """How a callback variant carries the authenticated subject"""
    SPLIT_FIELDS = "split_fields"  # VK_PER_* / VK_COM_* fields
    INFO_FIELD = "info_field"      # single VK_INFO "ISIK:...;NIMI:..." field


class Language(str, Enum):
    """VK_LANG values accepted by the bank UI"""
    LATVIAN = "LAT"
    ENGLISH = "ENG"
    RUSSIAN = "RUS"


PRODUCTION_ENDPOINT = "https://ib.dnb.lv/login/index.php"

# Width of the decimal length prefix in the canonical signature input
LENGTH_PREFIX_WIDTH = 3
MAX_FIELD_LENGTH = 10 ** LENGTH_PREFIX_WIDTH - 1

DEFAULT_LANGUAGE = Language.ENGLISH
DEFAULT_ENCODING = "utf-8"
