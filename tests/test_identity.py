"""
Test suite for identity extraction

Extraction runs on already verified fields, so these tests use plain dicts.
"""

import pytest

from banklink_sdk.exceptions import BanklinkErrorCodes
from banklink_sdk.protocol import IdentityLayout
from banklink_sdk.verification import (
    IdentityRecord,
    IdentityType,
    VerificationError,
    extract_identity,
)


class TestSplitFields:
    """Test the VK_PER_* / VK_COM_* layout"""
    
    def test_person(self, identity_fields):
        identity = extract_identity(identity_fields)
        
        assert identity.uid == '121200-00005'
        assert identity.name == 'USER_5 TEST'
        assert identity.to_info() == {
            'full_name': 'USER_5 TEST',
            'first_name': 'USER_5',
            'last_name': 'TEST',
        }
    
    def test_person_without_first_name(self, identity_fields):
        """Test the display name has no stray separator"""
        identity_fields['VK_PER_FNAME'] = ''
        assert extract_identity(identity_fields).name == 'TEST'
    
    def test_company(self):
        identity = extract_identity({
            'VK_PER_CODE': '',
            'VK_COM_CODE': '40003000000',
            'VK_COM_NAME': 'SIA Piemers',
        })
        
        assert identity.identity_type == IdentityType.COMPANY
        assert not identity.is_person
        assert identity.to_info() == {'full_name': 'SIA Piemers', 'company_name': 'SIA Piemers'}
    
    def test_missing_person_code_field(self):
        """Test an absent VK_PER_CODE falls through to the company"""
        identity = extract_identity({'VK_COM_CODE': '40003000000', 'VK_COM_NAME': 'SIA Piemers'})
        assert identity.uid == '40003000000'
    
    def test_neither_code(self, identity_fields):
        identity_fields['VK_PER_CODE'] = ''
        
        with pytest.raises(VerificationError) as exc_info:
            extract_identity(identity_fields)
        assert exc_info.value.code == BanklinkErrorCodes.INVALID_IDENTITY_ERR


class TestInfoField:
    """Test the VK_INFO layout"""
    
    def test_code_and_name(self):
        identity = extract_identity(
            {'VK_INFO': 'ISIK:121200-00005;NIMI:USER_5 TEST'},
            IdentityLayout.INFO_FIELD
        )
        
        assert identity.uid == '121200-00005'
        assert identity.name == 'USER_5 TEST'
        assert identity.is_person
    
    def test_code_only(self):
        identity = extract_identity({'VK_INFO': 'ISIK:121200-00005'}, IdentityLayout.INFO_FIELD)
        assert identity.name == ''
    
    @pytest.mark.parametrize('info', ['', 'NIMI:USER_5 TEST', 'ISIK:12120000005'])
    def test_malformed(self, info):
        with pytest.raises(VerificationError) as exc_info:
            extract_identity({'VK_INFO': info}, IdentityLayout.INFO_FIELD)
        assert exc_info.value.code == BanklinkErrorCodes.INVALID_IDENTITY_ERR


def test_identity_record_requires_uid():
    with pytest.raises(ValueError):
        IdentityRecord(uid='', name='x', identity_type=IdentityType.PERSON)
