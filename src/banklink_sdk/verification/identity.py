"""
Identity extraction from verified callback fields

Only called after the callback signature has been verified.
"""

import re
from typing import Mapping, Optional

from .types import IdentityRecord, IdentityType, VerificationError
from ..exceptions import BanklinkErrorCodes
from ..protocol.constants import FieldName, IdentityLayout


# VK_INFO payload of the authentication variant, e.g. "ISIK:121200-00005;NIMI:USER_5 TEST"
_INFO_CODE_PATTERN = re.compile(r'ISIK:(\d{6}-\d{5})')
_INFO_NAME_PATTERN = re.compile(r'NIMI:([^;]+)')


def _value(fields: Mapping[str, str], name: FieldName) -> Optional[str]:
    value = fields.get(name.value)
    if value is None or value == '':
        return None
    return value


def extract_split_identity(fields: Mapping[str, str]) -> IdentityRecord:
    """
    Map VK_PER_* / VK_COM_* fields to an identity.
    
    A non-empty VK_PER_CODE always makes the subject a person and any company
    fields are ignored; otherwise the company code is the subject id.
    
    Raises:
        VerificationError: ``invalid_identity_err`` if neither code is present
    """
    raw = dict(fields)
    per_code = _value(fields, FieldName.PER_CODE)
    
    if per_code is not None:
        first_name = fields.get(FieldName.PER_FNAME.value) or ''
        last_name = fields.get(FieldName.PER_LNAME.value) or ''
        return IdentityRecord(
            uid=per_code,
            name=' '.join(part for part in (first_name, last_name) if part),
            identity_type=IdentityType.PERSON,
            first_name=first_name,
            last_name=last_name,
            raw_fields=raw
        )
    
    com_code = _value(fields, FieldName.COM_CODE)
    if com_code is None:
        raise VerificationError(
            "Callback carries neither a personal nor a company code",
            BanklinkErrorCodes.INVALID_IDENTITY_ERR
        )
    
    company_name = fields.get(FieldName.COM_NAME.value) or ''
    return IdentityRecord(
        uid=com_code,
        name=company_name,
        identity_type=IdentityType.COMPANY,
        company_name=company_name,
        raw_fields=raw
    )


def extract_info_identity(fields: Mapping[str, str]) -> IdentityRecord:
    """
    Parse the ``ISIK:<code>;NIMI:<name>`` VK_INFO field.
    
    Raises:
        VerificationError: ``invalid_identity_err`` if no personal code is found
    """
    info = fields.get(FieldName.INFO.value) or ''
    
    code_match = _INFO_CODE_PATTERN.search(info)
    if not code_match:
        raise VerificationError(
            "VK_INFO does not contain a personal code",
            BanklinkErrorCodes.INVALID_IDENTITY_ERR
        )
    
    name_match = _INFO_NAME_PATTERN.search(info)
    return IdentityRecord(
        uid=code_match.group(1),
        name=name_match.group(1).strip() if name_match else '',
        identity_type=IdentityType.PERSON,
        raw_fields=dict(fields)
    )


def extract_identity(
    fields: Mapping[str, str],
    layout: IdentityLayout = IdentityLayout.SPLIT_FIELDS
) -> IdentityRecord:
    """
    Build the identity record for a verified callback.
    
    Args:
        fields: Verified callback fields
        layout: How the variant carries the subject
        
    Returns:
        IdentityRecord: Normalized identity
    """
    if layout == IdentityLayout.INFO_FIELD:
        return extract_info_identity(fields)
    return extract_split_identity(fields)
