"""Shared validation utilities"""

import json
import re
from typing import Any, Optional


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a phone number to E.164 format.

    Accepts international numbers with a leading "+" and 10-digit North
    American numbers without a country code.

    Raises:
        ValueError: If the phone number is invalid
    """
    if not phone:
        return None

    has_plus = phone.strip().startswith("+")
    digits = re.sub(r"\D", "", phone)

    if not has_plus:
        if len(digits) == 10:
            digits = "1" + digits
        elif not (len(digits) == 11 and digits.startswith("1")):
            raise ValueError("Invalid phone number format")

    if not 8 <= len(digits) <= 15:
        raise ValueError("Invalid phone number format")

    return f"+{digits}"


def parse_json_field(value: Any) -> Any:
    """Decode a multipart form field that carries JSON, tolerating double encoding"""
    if value is None or isinstance(value, (dict, list)):
        return value
    decoded = json.loads(value)
    if isinstance(decoded, str):
        decoded = json.loads(decoded)
    return decoded


def parse_form_bool(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    return str(value).strip().lower() == "true"


def split_amenities(values: Optional[list[str]]) -> list[str]:
    """Amenities arrive as a comma-joined string or as repeated form fields"""
    amenities = []
    for value in values or []:
        amenities.extend(part.strip() for part in value.split(",") if part.strip())
    return amenities
