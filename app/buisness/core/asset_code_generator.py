"""
Asset Code Generator

Asset codes have the form [DUM-]TYPE-YY-[SEG-]NNNNN:
- DUM-   marks a placeholder (dummy) asset
- TYPE   asset type code, 2-10 letters (LAP, MON, ...)
- YY     two digit year
- SEG    optional location/brand segment, 1-10 alphanumerics
- NNNNN  five digit sequence number per prefix

Normal assets are numbered 00001-89999; dummy assets live in the reserved
band 90001-99999 so they never collide with real numbering.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from app import db
from app.buisness.core.exceptions import ValidationError
from app.logger import get_logger

logger = get_logger("inventory.buisness.core.asset_code_generator")

ASSET_CODE_PATTERN = re.compile(
    r'^(?P<dummy>DUM-)?(?P<type>[A-Z]{2,10})-(?P<year>\d{2})-(?:(?P<segment>[A-Z0-9]{1,10})-)?(?P<number>\d{5})$',
    re.IGNORECASE,
)

DUMMY_PREFIX = 'DUM-'
DUMMY_BAND_START = 90000
DUMMY_MAX_NUMBER = 99999
NORMAL_MAX_NUMBER = 89999
MAX_BRAND_SEGMENT_LENGTH = 4
MAX_SEGMENT_LENGTH = 10
MAX_BULK_CODES = 1000


@dataclass
class ParsedAssetCode:
    is_dummy: bool
    type_code: str
    year: int
    segment: Optional[str]
    number: int


def brand_segment(brand: Optional[str]) -> str:
    """Alphanumeric characters of the brand, upper-cased, at most four"""
    if not brand:
        return ''
    return ''.join(ch for ch in brand if ch.isalnum()).upper()[:MAX_BRAND_SEGMENT_LENGTH]


class AssetCodeGenerator:

    @staticmethod
    def build_prefix(asset_type_code: str, year: int, is_dummy: bool = False,
                     location_code: Optional[str] = None, brand: Optional[str] = None) -> str:
        """
        Build the code prefix (everything before the sequence number).

        The segment is the location code when given, otherwise a brand segment;
        when neither is available the segment is left out.
        """
        if not asset_type_code or not asset_type_code.strip():
            raise ValidationError("Asset type code is required to generate an asset code")

        parts = []
        if is_dummy:
            parts.append(DUMMY_PREFIX.rstrip('-'))
        parts.append(asset_type_code.strip().upper())
        parts.append(f"{year % 100:02d}")

        if location_code and location_code.strip():
            segment = ''.join(ch for ch in location_code if ch.isalnum()).upper()[:MAX_SEGMENT_LENGTH]
        else:
            segment = brand_segment(brand)
        if segment:
            parts.append(segment)

        return '-'.join(parts)

    @staticmethod
    def get_next_number(prefix: str, is_dummy: bool = False) -> int:
        """
        Scan existing codes with this prefix and return the next free number.

        Only codes whose remainder after the prefix is exactly five digits count,
        so "LAP-24" never picks up numbers from "LAP-24-DBK-xxxxx".
        """
        from app.data.core.asset_info.asset import Asset

        like_prefix = prefix + '-'
        codes = db.session.query(Asset.asset_code) \
            .filter(Asset.asset_code.like(like_prefix.replace('_', r'\_') + '%', escape='\\')) \
            .all()

        numbers = []
        for (code,) in codes:
            remainder = code[len(like_prefix):]
            if len(remainder) == 5 and remainder.isdigit():
                numbers.append(int(remainder))

        if is_dummy:
            highest = max([n for n in numbers if n > DUMMY_BAND_START], default=DUMMY_BAND_START)
            next_number = highest + 1
            if next_number > DUMMY_MAX_NUMBER:
                raise ValidationError(f"Dummy number range exhausted for prefix {prefix}")
        else:
            highest = max([n for n in numbers if n < DUMMY_BAND_START], default=0)
            next_number = highest + 1
            if next_number > NORMAL_MAX_NUMBER:
                raise ValidationError(f"Number range exhausted for prefix {prefix}")

        return next_number

    @staticmethod
    def format_code(prefix: str, number: int) -> str:
        return f"{prefix}-{number:05d}"

    @classmethod
    def generate(cls, asset_type_code: str, year: Optional[int] = None, is_dummy: bool = False,
                 location_code: Optional[str] = None, brand: Optional[str] = None) -> str:
        year = year if year is not None else datetime.now().year
        prefix = cls.build_prefix(asset_type_code, year, is_dummy, location_code, brand)
        code = cls.format_code(prefix, cls.get_next_number(prefix, is_dummy))
        logger.debug(f"Generated asset code {code}")
        return code

    @classmethod
    def generate_bulk(cls, count: int, asset_type_code: str, year: Optional[int] = None,
                      is_dummy: bool = False, location_code: Optional[str] = None,
                      brand: Optional[str] = None) -> List[str]:
        """
        Reserve `count` consecutive codes for one prefix.

        Raises:
            ValidationError: count outside 1-1000 or the number band would overflow
        """
        if count < 1 or count > MAX_BULK_CODES:
            raise ValidationError(f"Count must be between 1 and {MAX_BULK_CODES}")

        year = year if year is not None else datetime.now().year
        prefix = cls.build_prefix(asset_type_code, year, is_dummy, location_code, brand)
        start = cls.get_next_number(prefix, is_dummy)
        last = start + count - 1
        limit = DUMMY_MAX_NUMBER if is_dummy else NORMAL_MAX_NUMBER
        if last > limit:
            raise ValidationError(
                f"Cannot generate {count} codes for {prefix}: would exceed {limit:05d}")

        return [cls.format_code(prefix, n) for n in range(start, last + 1)]

    @staticmethod
    def validate_code_format(code: Optional[str]) -> bool:
        return bool(code) and ASSET_CODE_PATTERN.match(code.strip()) is not None

    @staticmethod
    def parse_code(code: Optional[str]) -> Optional[ParsedAssetCode]:
        if not code:
            return None
        match = ASSET_CODE_PATTERN.match(code.strip())
        if not match:
            return None
        segment = match.group('segment')
        return ParsedAssetCode(
            is_dummy=match.group('dummy') is not None,
            type_code=match.group('type').upper(),
            year=int(match.group('year')),
            segment=segment.upper() if segment else None,
            number=int(match.group('number')),
        )
