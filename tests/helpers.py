"""
Helpers shared by the banklink SDK tests

The reference encoding here is written out independently of the SDK so that
tests compare the SDK against the protocol rather than against itself.
"""

import base64

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding


IDENTITY_FIELD_ORDER = [
    'VK_SERVICE', 'VK_VERSION', 'VK_SND_ID', 'VK_REC_ID', 'VK_STAMP', 'VK_T_NO',
    'VK_PER_CODE', 'VK_PER_FNAME', 'VK_PER_LNAME', 'VK_COM_CODE', 'VK_COM_NAME', 'VK_TIME',
]

AUTHENTICATION_FIELD_ORDER = [
    'VK_SERVICE', 'VK_VERSION', 'VK_SND_ID', 'VK_STAMP', 'VK_NONCE', 'VK_INFO',
]


def length_prefixed(values):
    """Reference canonical encoding: '%03d' length followed by the value"""
    return ''.join('%03d%s' % (len(v), v) for v in values).encode('utf-8')


def raw_sign(private_key, message: bytes) -> str:
    """Reference RSA-SHA1 signature, base64 encoded"""
    signature = private_key.sign(message, padding.PKCS1v15(), hashes.SHA1())
    return base64.b64encode(signature).decode('ascii')


# DER key containers whose algorithm identifier is the unassigned OID 1.2.3.4
UNKNOWN_ALGORITHM_PKCS8 = bytes.fromhex('300e020100300506032a030404020500')
UNKNOWN_ALGORITHM_SPKI = bytes.fromhex('300b300506032a030403020000')
