"""
Input Validator

Validation helpers for user-supplied identifiers that end up in database
lookups or Microsoft Graph queries. Every method returns a tuple
(is_valid, error_message); error_message is None when the value is valid.
"""

import re
from typing import Optional, Tuple

from app.buisness.core.asset_code_generator import ASSET_CODE_PATTERN

ValidationResult = Tuple[bool, Optional[str]]

PREFIX_PATTERN = re.compile(r'^[A-Z0-9]+$')
GUID_PATTERN = re.compile(
    r'^\{?[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}\}?$'
)
SERIAL_FORBIDDEN_CHARACTERS = ('<', '>', "'", '"')
SEARCH_FORBIDDEN_SEQUENCES = ('--', ';', '/*', '*/', 'xp_', 'exec(')

MAX_PREFIX_LENGTH = 20
MAX_ASSET_CODE_LENGTH = 50
MAX_SERIAL_NUMBER_LENGTH = 100
MAX_DEVICE_ID_LENGTH = 100


class InputValidator:

    @staticmethod
    def validate_prefix(prefix: Optional[str]) -> ValidationResult:
        if not prefix or not prefix.strip():
            return False, "Prefix is required"
        if len(prefix) > MAX_PREFIX_LENGTH:
            return False, f"Prefix cannot exceed {MAX_PREFIX_LENGTH} characters"
        if not PREFIX_PATTERN.match(prefix):
            return False, "Prefix must contain only uppercase letters and numbers"
        return True, None

    @staticmethod
    def validate_asset_code(asset_code: Optional[str]) -> ValidationResult:
        if not asset_code or not asset_code.strip():
            return False, "Asset code is required"
        if len(asset_code) > MAX_ASSET_CODE_LENGTH:
            return False, f"Asset code cannot exceed {MAX_ASSET_CODE_LENGTH} characters"
        if not ASSET_CODE_PATTERN.match(asset_code):
            return False, ("Asset code must follow the format TYPE-YY-MERK-NNNNN "
                           "(e.g. LAP-24-DBK-00001, optionally prefixed with DUM-)")
        return True, None

    @staticmethod
    def validate_serial_number(serial_number: Optional[str]) -> ValidationResult:
        if not serial_number or not serial_number.strip():
            return False, "Serial number is required"
        if len(serial_number) > MAX_SERIAL_NUMBER_LENGTH:
            return False, f"Serial number cannot exceed {MAX_SERIAL_NUMBER_LENGTH} characters"
        if any(ch in serial_number for ch in SERIAL_FORBIDDEN_CHARACTERS):
            return False, "Serial number contains invalid characters"
        return True, None

    @staticmethod
    def validate_device_id(device_id: Optional[str]) -> ValidationResult:
        if not device_id or not device_id.strip():
            return False, "Device ID is required"
        if len(device_id) > MAX_DEVICE_ID_LENGTH:
            return False, "Device ID is too long"
        if not GUID_PATTERN.match(device_id):
            return False, "Device ID must be a valid GUID"
        return True, None

    @staticmethod
    def validate_search_term(search_term: Optional[str], max_length: int = 100) -> ValidationResult:
        if not search_term or not search_term.strip():
            return False, "Search term is required"
        if len(search_term) > max_length:
            return False, f"Search term cannot exceed {max_length} characters"
        lowered = search_term.lower()
        if any(sequence in lowered for sequence in SEARCH_FORBIDDEN_SEQUENCES):
            return False, "Search term contains invalid characters"
        return True, None
