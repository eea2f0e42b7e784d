"""
Shared fixtures for the banklink SDK test suite

RSA keys are generated once per session; certificates stand in for the
certificates banks exchange out of band.
"""

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from banklink_sdk.crypto.keys import (
    create_self_signed_certificate,
    certificate_to_pem,
    private_key_to_pem,
)

from helpers import IDENTITY_FIELD_ORDER, length_prefixed, raw_sign


@pytest.fixture(scope='session')
def merchant_key():
    """Relying party RSA private key"""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope='session')
def bank_key():
    """Bank RSA private key used to sign callbacks"""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope='session')
def merchant_key_pem(merchant_key):
    return private_key_to_pem(merchant_key)


@pytest.fixture(scope='session')
def bank_certificate_pem(bank_key):
    return certificate_to_pem(create_self_signed_certificate(bank_key, 'ib.dnb.lv'))


@pytest.fixture
def identity_fields():
    """Unsigned identity callback fields as the bank sends them"""
    return {
        'VK_SERVICE': '2001',
        'VK_VERSION': '101',
        'VK_SND_ID': 'RIKOLV2X',
        'VK_REC_ID': 'MY_SND_ID',
        'VK_STAMP': '20170403112855087471',
        'VK_T_NO': '616365957',
        'VK_PER_CODE': '121200-00005',
        'VK_PER_FNAME': 'USER_5',
        'VK_PER_LNAME': 'TEST',
        'VK_COM_CODE': '',
        'VK_COM_NAME': '',
        'VK_TIME': '20170403113328',
        'VK_LANG': 'LAT',
    }


@pytest.fixture
def sign_callback(bank_key):
    """Return a function that adds a bank VK_MAC to callback fields"""
    def _sign(fields, order=IDENTITY_FIELD_ORDER):
        signed = dict(fields)
        signed['VK_MAC'] = raw_sign(bank_key, length_prefixed([fields[name] for name in order]))
        return signed
    return _sign


@pytest.fixture
def signed_identity_fields(identity_fields, sign_callback):
    return sign_callback(identity_fields)
