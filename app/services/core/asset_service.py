"""
Asset Service
Query and orchestration service for assets.

Handles:
- Paged and filtered asset listing
- Lookups by id, code and serial number
- Existence checks used by the frontend forms
- Create/update/delete through AssetContext
- Bulk creation of identical assets in one transaction
"""

from typing import Dict, List, Optional

from sqlalchemy import func

from app import db
from app.buisness.core.asset_context import AssetContext, clean_asset_data, serial_number_exists
from app.buisness.core.exceptions import NotFoundError, ValidationError
from app.data.core.asset_info.asset import Asset
from app.data.core.enums import AssetStatus
from app.utils.input_validator import InputValidator
from app.utils.paged_result import PagedResult
from app.logger import get_logger

logger = get_logger("inventory.services.core.asset_service")

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200
MAX_BULK_QUANTITY = 100


class AssetService:
    """
    Service for asset data.

    Provides methods for:
    - Building filtered asset queries
    - Paginating asset lists
    - Single and bulk asset mutations
    """

    @staticmethod
    def build_filtered_query(status: Optional[str] = None, asset_type_id: Optional[int] = None,
                             service_id: Optional[int] = None, building_id: Optional[int] = None,
                             search: Optional[str] = None):
        """
        Build a filtered asset query, newest first.

        Args:
            status: AssetStatus name or value
            asset_type_id: Filter by asset type
            service_id: Filter by service
            building_id: Filter by building
            search: Partial match on code, name, serial number or owner

        Returns:
            SQLAlchemy query object
        """
        query = Asset.query

        if status not in (None, ''):
            query = query.filter(Asset.status == AssetStatus.parse(status))

        if asset_type_id:
            query = query.filter(Asset.asset_type_id == asset_type_id)

        if service_id:
            query = query.filter(Asset.service_id == service_id)

        if building_id:
            query = query.filter(Asset.building_id == building_id)

        if search:
            like = f"%{search.strip()}%"
            query = query.filter(
                Asset.asset_code.ilike(like) | Asset.asset_name.ilike(like) |
                Asset.serial_number.ilike(like) | Asset.owner.ilike(like)
            )

        return query.order_by(Asset.created_at.desc(), Asset.id.desc())

    @staticmethod
    def get_paged(page_number: int = 1, page_size: int = DEFAULT_PAGE_SIZE, **filters) -> PagedResult:
        if page_number < 1:
            raise ValidationError("Page number must be at least 1")
        if page_size < 1 or page_size > MAX_PAGE_SIZE:
            raise ValidationError(f"Page size must be between 1 and {MAX_PAGE_SIZE}")

        query = AssetService.build_filtered_query(**filters)
        pagination = query.paginate(page=page_number, per_page=page_size, error_out=False)
        return PagedResult.from_pagination(pagination)

    @staticmethod
    def get_all(status: Optional[str] = None) -> List[Asset]:
        return AssetService.build_filtered_query(status=status).all()

    @staticmethod
    def get_by_id(asset_id: int) -> Optional[Asset]:
        return db.session.get(Asset, asset_id)

    @staticmethod
    def get_by_code(asset_code: str) -> Optional[Asset]:
        is_valid, error = InputValidator.validate_asset_code(asset_code)
        if not is_valid:
            raise ValidationError(error)
        return Asset.query.filter(func.upper(Asset.asset_code) == asset_code.strip().upper()).first()

    @staticmethod
    def get_by_serial(serial_number: str) -> Optional[Asset]:
        is_valid, error = InputValidator.validate_serial_number(serial_number)
        if not is_valid:
            raise ValidationError(error)
        return Asset.query.filter(func.lower(Asset.serial_number) == serial_number.strip().lower()).first()

    @staticmethod
    def code_exists(asset_code: str) -> bool:
        if not asset_code or not asset_code.strip():
            raise ValidationError("Asset code is required")
        query = Asset.query.filter(func.upper(Asset.asset_code) == asset_code.strip().upper())
        return db.session.query(query.exists()).scalar()

    @staticmethod
    def serial_number_exists(serial_number: str, exclude_asset_id: Optional[int] = None) -> bool:
        if not serial_number or not serial_number.strip():
            raise ValidationError("Serial number is required")
        return serial_number_exists(serial_number, exclude_asset_id)

    @staticmethod
    def create(data: Dict, performed_by: Optional[str] = None,
               performed_by_email: Optional[str] = None) -> Asset:
        return AssetContext.create(data, performed_by, performed_by_email).asset

    @staticmethod
    def update(asset_id: int, data: Dict, performed_by: Optional[str] = None,
               performed_by_email: Optional[str] = None) -> Asset:
        return AssetContext(asset_id).edit(data, performed_by, performed_by_email).asset

    @staticmethod
    def delete(asset_id: int) -> bool:
        try:
            AssetContext(asset_id).delete()
        except NotFoundError:
            return False
        return True

    @staticmethod
    def bulk_create(data: Dict, performed_by: Optional[str] = None,
                    performed_by_email: Optional[str] = None) -> Dict:
        """
        Create `quantity` assets sharing the same attributes.

        Serial numbers are "<serial_number_prefix>-0001", "-0002", ... All assets are
        created in one transaction; any failure rolls the whole batch back.

        Returns:
            Result dict with total_requested, successfully_created, failed,
            created_assets, errors and is_fully_successful
        """
        try:
            quantity = int(data.get('quantity', 0))
        except (TypeError, ValueError):
            raise ValidationError("Quantity must be an integer")
        if quantity < 1 or quantity > MAX_BULK_QUANTITY:
            raise ValidationError(f"Quantity must be between 1 and {MAX_BULK_QUANTITY}")

        serial_prefix = (data.get('serial_number_prefix') or '').strip()
        if not serial_prefix:
            raise ValidationError("Serial number prefix is required")

        template = {key: value for key, value in data.items()
                    if key not in ('quantity', 'serial_number_prefix', 'serial_number')}
        template['serial_number'] = f"{serial_prefix}-0001"
        clean_asset_data(template)

        created = []
        errors = []
        try:
            for index in range(1, quantity + 1):
                row = dict(template, serial_number=f"{serial_prefix}-{index:04d}")
                context = AssetContext.create(row, performed_by, performed_by_email, commit=False)
                created.append(context.asset)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error(f"Bulk create rolled back after {len(created)} of {quantity} assets: {e}")
            errors.append(str(e))
            created = []

        result = {
            'total_requested': quantity,
            'successfully_created': len(created),
            'failed': quantity - len(created),
            'created_assets': [asset.to_dict() for asset in created],
            'errors': errors,
            'is_fully_successful': len(created) == quantity and not errors,
        }
        logger.info(f"Bulk create: {result['successfully_created']}/{quantity} assets created")
        return result
