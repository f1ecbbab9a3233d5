"""
Tests for asset code generation and parsing
"""

import pytest

from app.buisness.core.asset_code_generator import AssetCodeGenerator, brand_segment
from app.buisness.core.asset_context import AssetContext
from app.buisness.core.exceptions import ValidationError


def test_build_prefix_segments():
    assert AssetCodeGenerator.build_prefix('lap', 2024, location_code='dbk') == 'LAP-24-DBK'
    assert AssetCodeGenerator.build_prefix('MON', 2025, is_dummy=True, location_code='WZC') == 'DUM-MON-25-WZC'
    assert AssetCodeGenerator.build_prefix('LAP', 2024, brand='Hewlett-Packard') == 'LAP-24-HEWL'
    assert AssetCodeGenerator.build_prefix('LAP', 2024) == 'LAP-24'


def test_location_wins_over_brand():
    assert AssetCodeGenerator.build_prefix('LAP', 2024, location_code='BIB', brand='Dell') == 'LAP-24-BIB'


def test_build_prefix_requires_type():
    with pytest.raises(ValidationError):
        AssetCodeGenerator.build_prefix('  ', 2024)


def test_brand_segment():
    assert brand_segment('Dell') == 'DELL'
    assert brand_segment('HP Inc.') == 'HPIN'
    assert brand_segment(None) == ''


def test_parse_code():
    parsed = AssetCodeGenerator.parse_code('DUM-LAP-24-DBK-90003')
    assert parsed.is_dummy
    assert parsed.type_code == 'LAP'
    assert parsed.year == 24
    assert parsed.segment == 'DBK'
    assert parsed.number == 90003

    parsed = AssetCodeGenerator.parse_code('MON-25-00012')
    assert not parsed.is_dummy
    assert parsed.segment is None
    assert parsed.number == 12

    assert AssetCodeGenerator.parse_code('garbage') is None
    assert not AssetCodeGenerator.validate_code_format('')


def test_numbering_continues_per_prefix(app, laptop_type):
    """Numbers continue from the highest existing code with the same prefix"""
    first = AssetContext.create({'serial_number': 'GEN-001', 'asset_type_id': laptop_type.id,
                                 'brand': 'Dell'}, code_year=2024).asset
    second = AssetContext.create({'serial_number': 'GEN-002', 'asset_type_id': laptop_type.id,
                                  'brand': 'Dell'}, code_year=2024).asset
    other_year = AssetContext.create({'serial_number': 'GEN-003', 'asset_type_id': laptop_type.id,
                                      'brand': 'Dell'}, code_year=2023).asset

    assert first.asset_code == 'LAP-24-DELL-00001'
    assert second.asset_code == 'LAP-24-DELL-00002'
    assert other_year.asset_code == 'LAP-23-DELL-00001'


def test_prefix_without_segment_ignores_longer_codes(app, laptop_type):
    AssetContext.create({'serial_number': 'GEN-010', 'asset_type_id': laptop_type.id, 'brand': 'Dell'},
                        code_year=2024)
    assert AssetCodeGenerator.get_next_number('LAP-24') == 1


def test_dummy_numbers_use_reserved_band(app, laptop_type):
    dummy = AssetContext.create({'serial_number': 'GEN-D1', 'asset_type_id': laptop_type.id,
                                 'is_dummy': True}, code_year=2024).asset
    normal = AssetContext.create({'serial_number': 'GEN-N1', 'asset_type_id': laptop_type.id},
                                 code_year=2024).asset

    assert dummy.asset_code == 'DUM-LAP-24-90001'
    assert normal.asset_code == 'LAP-24-00001'


def test_generate_bulk(app):
    codes = AssetCodeGenerator.generate_bulk(3, 'MON', year=2024, location_code='DBK')
    assert codes == ['MON-24-DBK-00001', 'MON-24-DBK-00002', 'MON-24-DBK-00003']

    with pytest.raises(ValidationError):
        AssetCodeGenerator.generate_bulk(0, 'MON')
    with pytest.raises(ValidationError):
        AssetCodeGenerator.generate_bulk(1001, 'MON')
