"""
Tests for the CSV asset import
"""

from datetime import date

import pytest

from app.buisness.core.exceptions import CsvValidationError
from app.data.core.asset_info.asset import Asset
from app.data.core.enums import AssetEventType, AssetStatus
from app.services.imports.csv_import_service import CSV_COLUMNS, CsvImportService

HEADER = ','.join(CSV_COLUMNS)


def _csv(*rows, header=HEADER):
    return ('\n'.join((header,) + rows) + '\n').encode('utf-8')


def test_validate_upload():
    with pytest.raises(CsvValidationError, match='No file uploaded'):
        CsvImportService.validate_upload(None, b'')
    with pytest.raises(CsvValidationError, match='.csv'):
        CsvImportService.validate_upload('assets.xlsx', b'data')
    with pytest.raises(CsvValidationError, match='empty'):
        CsvImportService.validate_upload('assets.csv', b'')
    with pytest.raises(CsvValidationError, match='maximum size'):
        CsvImportService.validate_upload('assets.csv', b'x' * 2048, max_size=1024)
    CsvImportService.validate_upload('ASSETS.CSV', b'data')


def test_parse_skips_comments_and_blank_lines():
    content = ('\ufeff' + HEADER + '\n'
               '# comment line\n'
               'SN1,LAP,,,,,,,,,,,\n'
               '\n'
               '   # indented comment\n'
               'SN2,MON\n').encode('utf-8')
    rows = CsvImportService.parse(content)
    assert [row['SerialNumber'] for row in rows] == ['SN1', 'SN2']
    assert [row['_row_number'] for row in rows] == [1, 2]
    assert rows[1]['Owner'] == ''


def test_header_is_case_insensitive():
    rows = CsvImportService.parse(b'serialnumber,ASSETTYPECODE\nSN1,LAP\n')
    assert rows[0]['SerialNumber'] == 'SN1'
    assert rows[0]['AssetTypeCode'] == 'LAP'


def test_invalid_headers():
    with pytest.raises(CsvValidationError, match='Unknown column'):
        CsvImportService.parse(b'SerialNumber,AssetTypeCode,Colour\nSN1,LAP,red\n')
    with pytest.raises(CsvValidationError, match='Missing required column'):
        CsvImportService.parse(b'SerialNumber,Owner\nSN1,Jan\n')
    with pytest.raises(CsvValidationError):
        CsvImportService.parse(b'# only a comment\n')


def test_quoted_fields_keep_blank_lines_and_hashes():
    content = _csv('SN1,LAP,,,,,,,,,,,"first line\n\nthird line"',
                   'SN2,LAP,,,,,,,,,,,"note\n# not a comment"')
    rows = CsvImportService.parse(content)
    assert rows[0]['Notes'] == 'first line\n\nthird line'
    assert rows[1]['Notes'] == 'note\n# not a comment'
    assert [row['_row_number'] for row in rows] == [1, 2]


def test_asset_code_column_is_ignored():
    rows = CsvImportService.parse(b'AssetCode,SerialNumber,AssetTypeCode\nLAP-24-00001,SN1,LAP\n')
    assert rows[0] == {'_row_number': 1, 'SerialNumber': 'SN1', 'AssetTypeCode': 'LAP'}


def test_import_creates_valid_rows_and_reports_invalid_ones(app):
    content = _csv(
        'CSV-001,LAP,InGebruik,2023-06-01,false,Laptop IT,IT,Jan Janssen,Dell,Latitude 5520,2023-06-15,2026-06-01,Imported',
        'CSV-002,XXX,Stock,,,,,,,,,,',
        'CSV-003,MON,Kapot,,,,,,,,,,',
        'CSV-004,MON,,15-13-2024,,,,,,,,,',
        'CSV-001,LAP,,,,,,,,,,,',
        'CSV-005,mon,,,true,,nope,,,,,,',
    )
    result = CsvImportService.import_assets(content, 'Importer', 'importer@example.org')

    assert result.total_rows == 6
    assert result.success_count == 1
    assert result.error_count == 5
    assert not result.is_fully_successful

    first = result.results[0]
    assert first.success
    assert first.asset_code.startswith('LAP-23-')
    asset = Asset.query.filter_by(serial_number='CSV-001').one()
    assert asset.status == AssetStatus.InGebruik
    assert asset.service.code == 'IT'
    assert asset.purchase_date == date(2023, 6, 1)
    created = asset.events.first()
    assert created.event_type == AssetEventType.Created
    assert created.notes == 'Imported'
    assert created.performed_by == 'Importer'

    assert result.results[1].errors == ["AssetTypeCode 'XXX' not found in the system"]
    assert result.results[2].errors[0].startswith("Invalid Status 'Kapot'")
    assert result.results[3].errors == ["PurchaseDate '15-13-2024' is not a valid date. Expected format: yyyy-MM-dd"]
    assert result.results[4].errors == ["SerialNumber 'CSV-001' is duplicated in this import"]
    assert result.results[5].errors == ["ServiceCode 'nope' not found"]


def test_import_rejects_existing_serial(app):
    CsvImportService.import_assets(_csv('CSV-EXIST,LAP,,,,,,,,,,,'))
    result = CsvImportService.import_assets(_csv('csv-exist,LAP,,,,,,,,,,,'))
    assert result.results[0].errors == ["SerialNumber 'csv-exist' already exists in the system"]


def test_import_dummy_asset(app):
    result = CsvImportService.import_assets(_csv('CSV-DUM,MON,,2024-02-01,ja,,,,,,,,'))
    assert result.is_fully_successful
    assert result.results[0].asset_code == 'DUM-MON-24-90001'


def test_numeric_status_is_rejected(app):
    result = CsvImportService.import_assets(_csv('CSV-NUM,LAP,1,,,,,,,,,,'))
    assert result.results[0].errors[0].startswith("Invalid Status '1'")


def test_result_dict_shape(app):
    result = CsvImportService.import_assets(_csv('CSV-DICT,LAP,,,,,,,,,,,'))
    body = result.to_dict()
    assert body['total_rows'] == 1
    assert body['success_count'] == 1
    assert body['is_fully_successful']
    assert body['results'][0]['serial_number'] == 'CSV-DICT'


def test_template_is_importable():
    template = CsvImportService.build_template()
    lines = template.splitlines()
    assert lines[0] == HEADER
    assert lines[1].startswith('ABC123,LAP,Stock')
    assert all(line.startswith('#') for line in lines[2:])
    assert CsvImportService.template_filename(date(2024, 3, 9)) == 'asset-import-template_20240309.csv'


def test_code_year():
    assert CsvImportService.code_year({'purchase_date': date(2021, 5, 1)}) == 2021
    assert CsvImportService.code_year({'installation_date': date(2022, 5, 1)}) == 2022
    assert CsvImportService.code_year({}) == date.today().year
