"""
CSV Import Service

Imports assets from a CSV file with the columns

    SerialNumber, AssetTypeCode, Status, PurchaseDate, IsDummy, AssetName,
    ServiceCode, Owner, Brand, Model, InstallationDate, WarrantyExpiry, Notes

Lines starting with '#' are comments. Every row is validated independently and
reported back with its own errors; valid rows are created even when other rows
fail. Each row is committed on its own so a database error on one row does not
undo the rows before it.
"""

import csv
import io
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional

from sqlalchemy import func

from app import db
from app.buisness.core.asset_context import AssetContext, clean_asset_data, serial_number_exists
from app.buisness.core.exceptions import CsvValidationError, InventoryError
from app.data.core.asset_info.asset_type import AssetType
from app.data.core.enums import AssetStatus
from app.data.core.organization_info.service import Service
from app.utils.date_parsing import parse_bool, parse_date
from app.utils.input_validator import InputValidator
from app.logger import get_logger

logger = get_logger("inventory.services.imports.csv_import")

CSV_COLUMNS = [
    'SerialNumber',
    'AssetTypeCode',
    'Status',
    'PurchaseDate',
    'IsDummy',
    'AssetName',
    'ServiceCode',
    'Owner',
    'Brand',
    'Model',
    'InstallationDate',
    'WarrantyExpiry',
    'Notes',
]
REQUIRED_COLUMNS = ('SerialNumber', 'AssetTypeCode')
# Written by the export, skipped on import
IGNORED_COLUMNS = ('AssetCode',)
DATE_COLUMNS = {
    'PurchaseDate': 'purchase_date',
    'InstallationDate': 'installation_date',
    'WarrantyExpiry': 'warranty_expiry',
}
TEXT_COLUMNS = {
    'AssetName': 'asset_name',
    'Owner': 'owner',
    'Brand': 'brand',
    'Model': 'model',
}
DEFAULT_MAX_FILE_SIZE = 5 * 1024 * 1024

EXAMPLE_ROW = [
    'ABC123', 'LAP', 'Stock', '2024-01-15', 'false', 'Laptop IT-001', 'IT',
    'Jan Janssen', 'Dell', 'Latitude 5520', '2024-02-01', '2027-01-15',
    'Test import from CSV template',
]


@dataclass
class CsvRowResult:
    row_number: int
    success: bool = False
    asset_code: Optional[str] = None
    serial_number: Optional[str] = None
    errors: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            'row_number': self.row_number,
            'success': self.success,
            'asset_code': self.asset_code,
            'serial_number': self.serial_number,
            'errors': self.errors,
        }


@dataclass
class CsvImportResult:
    results: List[CsvRowResult] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        return len(self.results)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def error_count(self) -> int:
        return self.total_rows - self.success_count

    @property
    def is_fully_successful(self) -> bool:
        return self.error_count == 0

    def to_dict(self):
        return {
            'total_rows': self.total_rows,
            'success_count': self.success_count,
            'error_count': self.error_count,
            'results': [r.to_dict() for r in self.results],
            'is_fully_successful': self.is_fully_successful,
        }


class CsvImportService:

    @staticmethod
    def validate_upload(filename: Optional[str], content: bytes, max_size: int = DEFAULT_MAX_FILE_SIZE):
        """
        Raises:
            CsvValidationError: missing, empty, oversized or non-.csv file
        """
        if not filename:
            raise CsvValidationError("No file uploaded")
        if not filename.lower().endswith('.csv'):
            raise CsvValidationError("Only .csv files are accepted")
        if not content:
            raise CsvValidationError("The uploaded file is empty")
        if len(content) > max_size:
            raise CsvValidationError(f"File exceeds the maximum size of {max_size // (1024 * 1024)} MB")

    @staticmethod
    def parse(content: bytes) -> List[Dict]:
        """
        Parse the CSV body into row dicts keyed by canonical column name.

        Returns:
            List of dicts with a '_row_number' key (1-based data row index)

        Raises:
            CsvValidationError: undecodable file or invalid header
        """
        try:
            text = content.decode('utf-8-sig')
        except UnicodeDecodeError:
            raise CsvValidationError("CSV file must be UTF-8 encoded")

        reader = csv.reader(io.StringIO(text))
        header = None
        rows = []
        row_number = 0
        for values in reader:
            values = [v.strip() for v in values]
            if not any(values) or values[0].startswith('#'):
                continue
            if header is None:
                header = values
                columns = CsvImportService._map_header(header)
                continue
            row_number += 1
            row = {'_row_number': row_number}
            for index, column in enumerate(columns):
                if column is not None:
                    row[column] = values[index] if index < len(values) else ''
            rows.append(row)

        if header is None:
            raise CsvValidationError("CSV file is empty or has no header row")
        return rows

    @staticmethod
    def _map_header(header: List[str]) -> List[Optional[str]]:
        """Canonical column per header cell; None for export-only columns"""
        lookup = {c.lower(): c for c in CSV_COLUMNS}
        ignored = {c.lower() for c in IGNORED_COLUMNS}
        columns = []
        unknown = []
        for name in header:
            canonical = lookup.get(name.lower())
            if canonical is None and name.lower() not in ignored:
                unknown.append(name)
            columns.append(canonical)
        if unknown:
            raise CsvValidationError(
                f"Unknown column(s): {', '.join(unknown)}. Expected headers: {', '.join(CSV_COLUMNS)}")
        missing = [c for c in REQUIRED_COLUMNS if c not in columns]
        if missing:
            raise CsvValidationError(
                f"Missing required column(s): {', '.join(missing)}. Expected headers: {', '.join(CSV_COLUMNS)}")
        return columns

    @staticmethod
    def validate_row(row: Dict, seen_serials: set) -> (Dict, List[str]):
        """
        Validate one parsed row.

        Returns:
            (asset data ready for AssetContext.create, list of error messages)
        """
        errors = []
        data = {}

        serial = row.get('SerialNumber', '')
        if not serial:
            errors.append("SerialNumber is required")
        else:
            is_valid, message = InputValidator.validate_serial_number(serial)
            if not is_valid:
                errors.append(message)
            elif serial.lower() in seen_serials:
                errors.append(f"SerialNumber '{serial}' is duplicated in this import")
            elif serial_number_exists(serial):
                errors.append(f"SerialNumber '{serial}' already exists in the system")
            seen_serials.add(serial.lower())
        data['serial_number'] = serial

        type_code = row.get('AssetTypeCode', '')
        if not type_code:
            errors.append("AssetTypeCode is required")
        else:
            asset_type = AssetType.query.filter(
                func.upper(AssetType.code) == type_code.upper(), AssetType.is_active.is_(True)).first()
            if asset_type is None:
                errors.append(f"AssetTypeCode '{type_code}' not found in the system")
            else:
                data['asset_type_id'] = asset_type.id

        service_code = row.get('ServiceCode', '')
        if service_code:
            service = Service.query.filter(
                func.upper(Service.code) == service_code.upper(), Service.is_active.is_(True)).first()
            if service is None:
                errors.append(f"ServiceCode '{service_code}' not found")
            else:
                data['service_id'] = service.id

        status = row.get('Status', '')
        if status:
            parsed = AssetStatus.try_parse(status)
            if parsed is None or status.lstrip('-').isdigit():
                errors.append(f"Invalid Status '{status}'. Valid values: {AssetStatus.valid_values()}")
            else:
                data['status'] = parsed

        for column, field_name in DATE_COLUMNS.items():
            try:
                data[field_name] = parse_date(row.get(column))
            except ValueError:
                errors.append(f"{column} '{row.get(column)}' is not a valid date. Expected format: yyyy-MM-dd")

        try:
            data['is_dummy'] = parse_bool(row.get('IsDummy'))
        except ValueError:
            errors.append(f"IsDummy '{row.get('IsDummy')}' is not a valid boolean")

        for column, field_name in TEXT_COLUMNS.items():
            data[field_name] = row.get(column) or None

        if not errors:
            try:
                data = clean_asset_data(data)
            except InventoryError as e:
                errors.extend(e.message.split('; '))

        return data, errors

    @staticmethod
    def code_year(data: Dict) -> int:
        for field_name in ('purchase_date', 'installation_date'):
            value = data.get(field_name)
            if isinstance(value, date):
                return value.year
        return datetime.now().year

    @staticmethod
    def import_assets(content: bytes, performed_by: Optional[str] = None,
                      performed_by_email: Optional[str] = None) -> CsvImportResult:
        rows = CsvImportService.parse(content)
        result = CsvImportResult()
        seen_serials = set()
        actor = performed_by or 'System'

        for row in rows:
            row_result = CsvRowResult(row_number=row['_row_number'], serial_number=row.get('SerialNumber') or None)
            result.results.append(row_result)

            data, errors = CsvImportService.validate_row(row, seen_serials)
            if errors:
                row_result.errors = errors
                continue

            try:
                context = AssetContext.create(
                    data,
                    performed_by=actor,
                    performed_by_email=performed_by_email,
                    code_year=CsvImportService.code_year(data),
                    notes=row.get('Notes') or None,
                    cleaned=True,
                )
                row_result.success = True
                row_result.asset_code = context.asset.asset_code
                logger.debug(f"CSV import: created asset {context.asset.asset_code} "
                             f"with serial {row_result.serial_number} (row {row_result.row_number})")
            except Exception as e:
                db.session.rollback()
                logger.error(f"Failed to create asset from CSV row {row_result.row_number}: {e}")
                row_result.errors = [f"Failed to create asset: {e}"]

        logger.info(f"CSV import completed by {actor}: {result.success_count} successful, "
                    f"{result.error_count} failed out of {result.total_rows} rows")
        return result

    @staticmethod
    def build_template() -> str:
        """Header row, example row and '#' comment lines describing the columns"""
        output = io.StringIO()
        writer = csv.writer(output, lineterminator='\n')
        writer.writerow(CSV_COLUMNS)
        writer.writerow(EXAMPLE_ROW)
        output.write("# Required columns: SerialNumber, AssetTypeCode\n")
        output.write(f"# Status values: {AssetStatus.valid_values()} (default: Stock)\n")
        output.write("# Dates use the format yyyy-MM-dd\n")
        output.write("# IsDummy: true/false; dummy assets are numbered from 90001\n")
        output.write("# AssetTypeCode and ServiceCode must match active codes (case-insensitive)\n")
        output.write("# Lines starting with # are ignored\n")
        return output.getvalue()

    @staticmethod
    def template_filename(today: Optional[date] = None) -> str:
        today = today or date.today()
        return f"asset-import-template_{today.strftime('%Y%m%d')}.csv"
