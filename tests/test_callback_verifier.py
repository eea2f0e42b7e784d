"""
Test suite for banklink callback verification

This module tests the ordered checks of the callback verifier, signature
validation, and identity extraction for both protocol variants.
"""

import pytest

from banklink_sdk.exceptions import BanklinkErrorCodes
from banklink_sdk.protocol import AUTHENTICATION_RESPONSE_VARIANT, IDENTITY_RESPONSE_VARIANT
from banklink_sdk.verification import (
    CallbackVerifier,
    CallbackStatus,
    IdentityType,
    VerificationError,
    create_verifier,
    verify_callback,
)

from helpers import AUTHENTICATION_FIELD_ORDER, IDENTITY_FIELD_ORDER, length_prefixed, raw_sign


@pytest.fixture
def verifier(bank_certificate_pem):
    return CallbackVerifier(bank_certificate_pem)


@pytest.fixture
def authentication_fields():
    """Unsigned authentication callback fields"""
    return {
        'VK_SERVICE': '3001',
        'VK_VERSION': '101',
        'VK_SND_ID': 'RIKOLV2X',
        'VK_STAMP': '20170403112855087471',
        'VK_NONCE': '7d1ed0c1d5b64a4f9fbd',
        'VK_INFO': 'ISIK:121200-00005;NIMI:USER_5 TEST',
        'VK_ENCODING': 'UTF-8',
    }


class TestValidCallback:
    """Test successful verification"""

    def test_person_identity(self, verifier, signed_identity_fields):
        """Test a correctly signed identity callback"""
        result = verifier.verify(signed_identity_fields)

        assert result.is_valid
        assert result.status == CallbackStatus.VALID
        assert result.error is None
        assert result.identity.uid == '121200-00005'
        assert result.identity.name == 'USER_5 TEST'
        assert result.identity.first_name == 'USER_5'
        assert result.identity.last_name == 'TEST'
        assert result.identity.identity_type == IdentityType.PERSON
        assert result.identity.raw_fields == signed_identity_fields

    def test_company_identity(self, verifier, identity_fields, sign_callback):
        """Test a callback that only carries a company"""
        identity_fields.update({
            'VK_PER_CODE': '',
            'VK_PER_FNAME': '',
            'VK_PER_LNAME': '',
            'VK_COM_CODE': '40003000000',
            'VK_COM_NAME': 'SIA Piemers',
        })
        result = verifier.verify(sign_callback(identity_fields))

        assert result.is_valid
        assert result.identity.uid == '40003000000'
        assert result.identity.name == 'SIA Piemers'
        assert result.identity.identity_type == IdentityType.COMPANY

    def test_person_code_wins_over_company(self, verifier, identity_fields, sign_callback):
        identity_fields.update({'VK_COM_CODE': '40003000000', 'VK_COM_NAME': 'SIA Piemers'})
        result = verifier.verify(sign_callback(identity_fields))

        assert result.is_valid
        assert result.identity.uid == '121200-00005'
        assert result.identity.is_person

    def test_unicode_values(self, verifier, identity_fields, sign_callback):
        """Test non-ASCII names are length-prefixed by characters"""
        identity_fields.update({'VK_PER_FNAME': 'Jānis', 'VK_PER_LNAME': 'Bērziņš'})
        result = verifier.verify(sign_callback(identity_fields))

        assert result.is_valid
        assert result.identity.name == 'Jānis Bērziņš'

    def test_mac_with_line_breaks(self, verifier, signed_identity_fields):
        """Test a VK_MAC wrapped by an intermediary still verifies"""
        mac = signed_identity_fields['VK_MAC']
        signed_identity_fields['VK_MAC'] = '\n'.join(mac[i:i + 64] for i in range(0, len(mac), 64))

        assert verifier.verify(signed_identity_fields).is_valid

    def test_unsigned_extra_fields_ignored(self, verifier, signed_identity_fields):
        signed_identity_fields['utf8'] = '1'
        assert verifier.verify(signed_identity_fields).is_valid

    def test_public_key_object(self, bank_key, signed_identity_fields):
        result = verify_callback(signed_identity_fields, bank_key.public_key())
        assert result.is_valid

    def test_create_verifier(self, bank_certificate_pem):
        verifier = create_verifier(bank_certificate_pem)

        assert isinstance(verifier, CallbackVerifier)
        assert verifier.variant is IDENTITY_RESPONSE_VARIANT


class TestRejectedCallback:
    """Test each failure mode and the order the checks run in"""

    def test_invalid_public_key(self, signed_identity_fields):
        result = CallbackVerifier(b'not a key').verify(signed_identity_fields)

        assert not result.is_valid
        assert result.status == CallbackStatus.ERROR
        assert result.error_code == BanklinkErrorCodes.PUBLIC_KEY_LOAD_ERR

    def test_unsupported_service(self, verifier, signed_identity_fields):
        signed_identity_fields['VK_SERVICE'] = '2004'
        result = verifier.verify(signed_identity_fields)

        assert result.error_code == BanklinkErrorCodes.UNSUPPORTED_RESPONSE_SERVICE_ERR
        assert result.identity is None

    def test_service_checked_before_signature(self, verifier, identity_fields):
        """Test an unsigned callback with the wrong service reports the service"""
        identity_fields['VK_SERVICE'] = '2004'
        identity_fields['VK_MAC'] = 'invalid_signature'

        result = verifier.verify(identity_fields)
        assert result.error_code == BanklinkErrorCodes.UNSUPPORTED_RESPONSE_SERVICE_ERR

    def test_unsupported_version(self, verifier, signed_identity_fields):
        signed_identity_fields['VK_VERSION'] = '109'
        result = verifier.verify(signed_identity_fields)

        assert result.error_code == BanklinkErrorCodes.UNSUPPORTED_RESPONSE_VERSION_ERR

    def test_invalid_mac(self, verifier, signed_identity_fields):
        signed_identity_fields['VK_MAC'] = 'invalid_signature'
        result = verifier.verify(signed_identity_fields)

        assert result.error_code == BanklinkErrorCodes.INVALID_RESPONSE_SIGNATURE_ERR
        assert result.identity is None

    def test_missing_mac(self, verifier, signed_identity_fields):
        del signed_identity_fields['VK_MAC']
        result = verifier.verify(signed_identity_fields)

        assert result.error_code == BanklinkErrorCodes.INVALID_RESPONSE_SIGNATURE_ERR

    @pytest.mark.parametrize('name', IDENTITY_FIELD_ORDER)
    def test_tampered_field(self, verifier, signed_identity_fields, name):
        """Test changing one character of any signed value breaks the signature"""
        value = signed_identity_fields[name]
        signed_identity_fields[name] = value[:-1] + ('X' if value[-1:] != 'X' else 'Y')
        result = verifier.verify(signed_identity_fields)
        expected = {
            'VK_SERVICE': BanklinkErrorCodes.UNSUPPORTED_RESPONSE_SERVICE_ERR,
            'VK_VERSION': BanklinkErrorCodes.UNSUPPORTED_RESPONSE_VERSION_ERR,
        }.get(name, BanklinkErrorCodes.INVALID_RESPONSE_SIGNATURE_ERR)

        assert result.identity is None
        assert result.error_code == expected

    def test_signed_by_other_key(self, verifier, merchant_key, identity_fields):
        identity_fields['VK_MAC'] = raw_sign(
            merchant_key,
            length_prefixed([identity_fields[name] for name in IDENTITY_FIELD_ORDER])
        )
        result = verifier.verify(identity_fields)

        assert result.error_code == BanklinkErrorCodes.INVALID_RESPONSE_SIGNATURE_ERR

    def test_missing_signed_field(self, verifier, signed_identity_fields):
        del signed_identity_fields['VK_T_NO']
        result = verifier.verify(signed_identity_fields)

        assert result.error_code == BanklinkErrorCodes.MISSING_RESPONSE_FIELD_ERR
        assert result.error['details']['missing_fields'] == ['VK_T_NO']

    def test_field_too_long(self, verifier, identity_fields, sign_callback):
        signed = sign_callback(identity_fields)
        signed['VK_PER_LNAME'] = 'x' * 1000

        result = verifier.verify(signed)
        assert result.error_code == BanklinkErrorCodes.FIELD_TOO_LONG_ERR

    def test_no_identity(self, verifier, identity_fields, sign_callback):
        """Test a correctly signed callback without any subject code"""
        identity_fields['VK_PER_CODE'] = ''
        result = verifier.verify(sign_callback(identity_fields))

        assert result.error_code == BanklinkErrorCodes.INVALID_IDENTITY_ERR

    def test_unexpected_error(self, verifier, signed_identity_fields, monkeypatch):
        """Test unexpected failures are reported, not raised"""
        def explode(*args, **kwargs):
            raise RuntimeError('boom')

        monkeypatch.setattr('banklink_sdk.verification.callback_verifier.verify_signature', explode)
        result = verifier.verify(signed_identity_fields)

        assert result.error_code == BanklinkErrorCodes.UNKNOWN_CALLBACK_ERR
        assert result.error['details']['original_error'] == 'boom'

    def test_non_mapping_fields(self, verifier):
        """Test a field list that is not a mapping is reported, not raised"""
        result = verifier.verify(['VK_SERVICE'])

        assert result.error_code == BanklinkErrorCodes.UNKNOWN_CALLBACK_ERR
        assert result.fields == {}

    def test_empty_callback(self, verifier):
        result = verifier.verify({})
        assert result.error_code == BanklinkErrorCodes.UNSUPPORTED_RESPONSE_SERVICE_ERR

    def test_raise_for_error(self, verifier, signed_identity_fields):
        signed_identity_fields['VK_VERSION'] = '109'
        result = verifier.verify(signed_identity_fields)

        with pytest.raises(VerificationError) as exc_info:
            result.raise_for_error()
        assert exc_info.value.code == BanklinkErrorCodes.UNSUPPORTED_RESPONSE_VERSION_ERR


class TestAuthenticationVariant:
    """Test the VK_INFO based variant"""

    @pytest.fixture
    def verifier(self, bank_certificate_pem):
        return CallbackVerifier(bank_certificate_pem, AUTHENTICATION_RESPONSE_VARIANT)

    def test_valid(self, verifier, authentication_fields, sign_callback):
        result = verifier.verify(sign_callback(authentication_fields, AUTHENTICATION_FIELD_ORDER))

        assert result.is_valid
        assert result.identity.uid == '121200-00005'
        assert result.identity.name == 'USER_5 TEST'

    def test_unsupported_encoding(self, verifier, authentication_fields, sign_callback):
        authentication_fields['VK_ENCODING'] = 'ISO-8859-13'
        result = verifier.verify(sign_callback(authentication_fields, AUTHENTICATION_FIELD_ORDER))

        assert result.error_code == BanklinkErrorCodes.UNSUPPORTED_RESPONSE_ENCODING_ERR

    def test_identity_fields_rejected(self, verifier, signed_identity_fields):
        """Test an identity callback does not pass as an authentication one"""
        result = verifier.verify(signed_identity_fields)
        assert result.error_code == BanklinkErrorCodes.UNSUPPORTED_RESPONSE_SERVICE_ERR

    def test_info_without_code(self, verifier, authentication_fields, sign_callback):
        authentication_fields['VK_INFO'] = 'NIMI:USER_5 TEST'
        result = verifier.verify(sign_callback(authentication_fields, AUTHENTICATION_FIELD_ORDER))

        assert result.error_code == BanklinkErrorCodes.INVALID_IDENTITY_ERR


class TestSignatureInput:
    """Test reconstruction of the signed bytes"""

    def test_matches_reference_encoding(self, verifier, identity_fields):
        expected = length_prefixed([identity_fields[name] for name in IDENTITY_FIELD_ORDER])
        assert verifier.signature_input(identity_fields) == expected

    def test_starts_with_service(self, verifier, identity_fields):
        assert verifier.signature_input(identity_fields).startswith(b'0042001003101')
