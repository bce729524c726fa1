"""
Input normalization and format checks for registration
"""
import re
from datetime import date
from typing import Optional

import phonenumbers
from phonenumbers import PhoneMetadata

_PLACE_PATTERN = re.compile(r"^[a-zA-Z\s\-']+$")
_WHITESPACE = re.compile(r"\s+")


def trim_name(name: str) -> str:
    """Strip a free-text name and collapse inner whitespace runs to one space."""
    return _WHITESPACE.sub(" ", name.strip())


def _matches_general_pattern(parsed: phonenumbers.PhoneNumber) -> bool:
    """
    Country-level shape check: the national number fits the country's
    general numbering pattern, without requiring an assigned area code.
    """
    region = phonenumbers.region_code_for_country_code(parsed.country_code)
    if region == phonenumbers.UNKNOWN_REGION:
        return False
    if region == phonenumbers.REGION_CODE_FOR_NON_GEO_ENTITY:
        metadata = PhoneMetadata.metadata_for_nongeo_region(parsed.country_code)
    else:
        metadata = PhoneMetadata.metadata_for_region(region)
    if metadata is None or metadata.general_desc is None:
        return False
    pattern = metadata.general_desc.national_number_pattern
    national = phonenumbers.national_significant_number(parsed)
    return pattern is None or re.fullmatch(pattern, national) is not None


def normalize_phone(phone: str, default_region: Optional[str] = None) -> Optional[str]:
    """
    Parse and validate a phone number

    Args:
        phone: Raw phone number, ideally in international (+...) form
        default_region: ISO country code used when the number has no prefix

    Returns:
        The number in E.164 form, or None if it cannot be a number of its country
    """
    try:
        parsed = phonenumbers.parse(phone.strip(), default_region)
    except phonenumbers.NumberParseException:
        return None
    if not phonenumbers.is_possible_number(parsed) or not _matches_general_pattern(parsed):
        return None
    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)


def validate_phone(phone: str) -> bool:
    return normalize_phone(phone) is not None


def validate_place_name(value: str) -> bool:
    """City/country names: at least two characters of letters, spaces, - and '."""
    value = value.strip()
    return len(value) >= 2 and bool(_PLACE_PATTERN.match(value))


validate_city = validate_place_name
validate_country = validate_place_name


def is_before_today(value: date, today: Optional[date] = None) -> bool:
    """Date-only comparison against the current calendar day."""
    return value < (today or date.today())
