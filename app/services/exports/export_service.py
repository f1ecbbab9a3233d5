"""
Export Service
Writes the asset list as CSV (import-compatible columns plus AssetCode) or as
an Excel workbook.
"""

import csv
import io
from datetime import datetime
from typing import Dict, List, Optional

from openpyxl import Workbook
from openpyxl.styles import Font

from app.data.core.asset_info.asset import Asset
from app.data.core.enums import AssetEventType
from app.data.core.event_info.asset_event import AssetEvent
from app.services.core.asset_service import AssetService
from app.services.imports.csv_import_service import CSV_COLUMNS
from app.logger import get_logger

logger = get_logger("inventory.services.exports.export_service")

EXPORT_COLUMNS = ['AssetCode'] + CSV_COLUMNS
XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _format_date(value):
    return value.isoformat() if value else ''


def creation_notes(assets: List[Asset]) -> Dict[int, str]:
    """Notes of each asset's Created event, which is where imported notes live"""
    ids = [asset.id for asset in assets]
    if not ids:
        return {}
    events = AssetEvent.query.filter(AssetEvent.asset_id.in_(ids),
                                     AssetEvent.event_type == AssetEventType.Created).all()
    return {event.asset_id: event.notes for event in events if event.notes}


def asset_to_row(asset: Asset, notes: Optional[str] = None) -> List:
    return [
        asset.asset_code,
        asset.serial_number,
        asset.asset_type.code if asset.asset_type else '',
        asset.status.name if asset.status is not None else '',
        _format_date(asset.purchase_date),
        'true' if asset.is_dummy else 'false',
        asset.asset_name or '',
        asset.service.code if asset.service else '',
        asset.owner or '',
        asset.brand or '',
        asset.model or '',
        _format_date(asset.installation_date),
        _format_date(asset.warranty_expiry),
        notes or '',
    ]


class ExportService:

    @staticmethod
    def export_filename(extension: str, now: Optional[datetime] = None) -> str:
        now = now or datetime.now()
        return f"assets-{now.strftime('%Y%m%d-%H%M%S')}.{extension}"

    @staticmethod
    def build_csv(status: Optional[str] = None) -> str:
        assets = AssetService.get_all(status=status)
        notes = creation_notes(assets)
        output = io.StringIO()
        writer = csv.writer(output, lineterminator='\n')
        writer.writerow(EXPORT_COLUMNS)
        for asset in assets:
            writer.writerow(asset_to_row(asset, notes.get(asset.id)))
        logger.info(f"Exported {len(assets)} assets to CSV")
        return output.getvalue()

    @staticmethod
    def build_xlsx(status: Optional[str] = None) -> io.BytesIO:
        """Workbook with a bold, frozen header row; returns a rewound buffer"""
        assets = AssetService.get_all(status=status)
        notes = creation_notes(assets)
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = "Assets"
        sheet.append(EXPORT_COLUMNS)
        for cell in sheet[1]:
            cell.font = Font(bold=True)
        sheet.freeze_panes = "A2"
        for asset in assets:
            sheet.append(asset_to_row(asset, notes.get(asset.id)))

        output = io.BytesIO()
        workbook.save(output)
        output.seek(0)
        logger.info(f"Exported {len(assets)} assets to Excel")
        return output
