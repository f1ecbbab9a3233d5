"""
Asset Context (Core)
Provides a clean interface for creating, editing and deleting assets.

Handles:
- Field validation and normalisation of incoming asset data
- Asset code allocation (with a bounded retry on collisions)
- Alias generation
- Audit events for creation and for status/owner/location changes
"""

from datetime import datetime
from typing import Dict, Optional, Union

from sqlalchemy import func

from app import db
from app.buisness.core.asset_code_generator import AssetCodeGenerator
from app.buisness.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.data.core.asset_info.asset import Asset
from app.data.core.asset_info.asset_type import AssetType
from app.data.core.enums import AssetEventType, AssetStatus
from app.data.core.event_info.asset_event import AssetEvent
from app.data.core.organization_info.building import Building
from app.data.core.organization_info.service import Service
from app.utils.date_parsing import parse_bool, parse_date
from app.logger import get_logger

logger = get_logger("inventory.buisness.core.asset_context")

MAX_CODE_ATTEMPTS = 5
UNASSIGNED_OWNER = '(unassigned)'
UNSET_LOCATION = '(not set)'

STRING_FIELD_LIMITS = {
    'asset_name': 200,
    'alias': 200,
    'category': 100,
    'installation_location': 200,
    'legacy_building': 200,
    'legacy_department': 200,
    'owner': 200,
    'job_title': 200,
    'office_location': 200,
    'brand': 100,
    'model': 200,
    'serial_number': 100,
}
DATE_FIELDS = ('purchase_date', 'warranty_expiry', 'installation_date')
ID_FIELDS = ('asset_type_id', 'service_id', 'building_id')
EDITABLE_FIELDS = tuple(STRING_FIELD_LIMITS) + DATE_FIELDS + ID_FIELDS + ('status',)


def clean_asset_data(data: Dict, partial: bool = False) -> Dict:
    """
    Normalise raw request data into typed column values.

    Args:
        data: Raw values (JSON body or CSV row)
        partial: When True only keys present in data are returned

    Raises:
        ValidationError: on any invalid value; all problems are reported together
    """
    errors = []
    cleaned = {}

    for field, limit in STRING_FIELD_LIMITS.items():
        if field not in data:
            continue
        value = data[field]
        value = str(value).strip() if value is not None else None
        value = value or None
        if value and len(value) > limit:
            errors.append(f"{field} cannot exceed {limit} characters")
        cleaned[field] = value

    for field in DATE_FIELDS:
        if field not in data:
            continue
        try:
            cleaned[field] = parse_date(data[field])
        except ValueError as e:
            errors.append(f"{field}: {e}")

    for field in ID_FIELDS:
        if field not in data:
            continue
        value = data[field]
        if value in (None, ''):
            cleaned[field] = None
            continue
        try:
            cleaned[field] = int(value)
        except (TypeError, ValueError):
            errors.append(f"{field} must be an integer")

    if 'status' in data and data['status'] not in (None, ''):
        try:
            cleaned['status'] = AssetStatus.parse(data['status'])
        except ValueError as e:
            errors.append(str(e))

    if 'is_dummy' in data:
        try:
            cleaned['is_dummy'] = parse_bool(data['is_dummy'])
        except ValueError as e:
            errors.append(str(e))

    if not partial:
        if not cleaned.get('serial_number'):
            errors.append("Serial number is required")
        if not cleaned.get('asset_type_id'):
            errors.append("Asset type is required")

    purchase = cleaned.get('purchase_date')
    warranty = cleaned.get('warranty_expiry')
    installation = cleaned.get('installation_date')
    if purchase and warranty and warranty <= purchase:
        errors.append("Warranty expiry must be after purchase date")
    if purchase and installation and installation < purchase:
        errors.append("Installation date cannot be before purchase date")

    if errors:
        raise ValidationError('; '.join(errors))
    return cleaned


def serial_number_exists(serial_number: str, exclude_asset_id: Optional[int] = None) -> bool:
    query = Asset.query.filter(func.lower(Asset.serial_number) == serial_number.strip().lower())
    if exclude_asset_id is not None:
        query = query.filter(Asset.id != exclude_asset_id)
    return db.session.query(query.exists()).scalar()


class AssetContext:
    """
    Core context for a single asset.

    Provides:
    - Access to the asset and its related rows
    - create() for new assets (code, alias, Created event)
    - edit() with change events
    - delete()
    """

    def __init__(self, asset: Union[Asset, int]):
        """
        Initialize AssetContext with an Asset instance or asset ID.

        Raises:
            NotFoundError: when an ID does not match an asset
        """
        if isinstance(asset, int):
            self._asset = db.session.get(Asset, asset)
            if self._asset is None:
                raise NotFoundError(f"Asset with ID {asset} not found")
        else:
            self._asset = asset

    @property
    def asset(self) -> Asset:
        return self._asset

    @property
    def asset_id(self) -> int:
        return self._asset.id

    @staticmethod
    def build_alias(asset_type_name: Optional[str], owner: Optional[str],
                    brand: Optional[str], model: Optional[str]) -> Optional[str]:
        """<AssetType>-<Owner>-<Brand>-<Model>, skipping empty parts"""
        parts = [p.strip() for p in (asset_type_name, owner, brand, model) if p and p.strip()]
        return '-'.join(parts)[:200] if parts else None

    @staticmethod
    def location_display(asset: Asset) -> str:
        if asset.building is not None:
            return f"{asset.building.code} - {asset.building.name}"
        return asset.legacy_building or UNSET_LOCATION

    @staticmethod
    def _resolve_references(values: Dict):
        """Load and check the referenced rows; returns (asset_type, building)"""
        asset_type = None
        if values.get('asset_type_id'):
            asset_type = db.session.get(AssetType, values['asset_type_id'])
            if asset_type is None or not asset_type.is_active:
                raise ValidationError(f"Asset type {values['asset_type_id']} does not exist or is inactive")
        if values.get('service_id') and db.session.get(Service, values['service_id']) is None:
            raise ValidationError(f"Service {values['service_id']} does not exist")
        building = None
        if values.get('building_id'):
            building = db.session.get(Building, values['building_id'])
            if building is None:
                raise ValidationError(f"Building {values['building_id']} does not exist")
        return asset_type, building

    @classmethod
    def create(cls, data: Dict, performed_by: Optional[str] = None, performed_by_email: Optional[str] = None,
               code_year: Optional[int] = None, notes: Optional[str] = None, commit: bool = True,
               cleaned: bool = False) -> "AssetContext":
        """
        Create a new asset with a generated code and a Created event.

        Args:
            data: Raw asset data (see clean_asset_data); asset_type_id and serial_number are required
            performed_by: Display name of the acting user (defaults to "System")
            performed_by_email: Email of the acting user
            code_year: Year used in the code (defaults to the current year)
            notes: Notes stored on the Created event
            commit: Commit the transaction when done
            cleaned: data has already been through clean_asset_data

        Returns:
            AssetContext for the new asset
        """
        values = data if cleaned else clean_asset_data(data)
        if 'serial_number' not in values or not values.get('asset_type_id'):
            raise ValidationError("Serial number and asset type are required")

        if serial_number_exists(values['serial_number']):
            raise ConflictError(f"An asset with serial number '{values['serial_number']}' already exists")

        asset_type, building = cls._resolve_references(values)
        is_dummy = bool(values.get('is_dummy', False))
        year = code_year or datetime.now().year

        asset = Asset(is_dummy=is_dummy, status=values.get('status') or AssetStatus.Stock)
        for field in EDITABLE_FIELDS:
            if field in values and field != 'status':
                setattr(asset, field, values[field])
        if not asset.alias:
            asset.alias = cls.build_alias(asset_type.name, asset.owner, asset.brand, asset.model)

        cls._allocate_code(asset, asset_type.code, year, is_dummy,
                           building.code if building else None)

        actor = performed_by or 'System'
        AssetEvent.add_event(
            asset_id=asset.id,
            event_type=AssetEventType.Created,
            description=f"Asset created by {actor}",
            notes=notes,
            new_value=asset.asset_code,
            performed_by=actor,
            performed_by_email=performed_by_email,
        )

        if commit:
            db.session.commit()
        logger.info(f"Created asset {asset.asset_code} (IsDummy: {is_dummy}) with ID {asset.id}")
        return cls(asset)

    @staticmethod
    def _allocate_code(asset: Asset, type_code: str, year: int, is_dummy: bool, location_code: Optional[str]):
        """
        Assign the next free code and flush the asset.

        The generated number is re-checked against the table before use; a taken
        code is retried up to MAX_CODE_ATTEMPTS times. A writer racing between the
        check and the flush still surfaces as an IntegrityError (409).
        """
        for attempt in range(1, MAX_CODE_ATTEMPTS + 1):
            code = AssetCodeGenerator.generate(type_code, year, is_dummy, location_code, asset.brand)
            if Asset.query.filter_by(asset_code=code).first() is not None:
                logger.warning(f"Asset code {code} already taken (attempt {attempt}/{MAX_CODE_ATTEMPTS})")
                continue
            asset.asset_code = code
            db.session.add(asset)
            db.session.flush()
            return
        raise ConflictError(f"Could not allocate a unique asset code after {MAX_CODE_ATTEMPTS} attempts")

    def edit(self, data: Dict, performed_by: Optional[str] = None, performed_by_email: Optional[str] = None,
             commit: bool = True) -> "AssetContext":
        """
        Apply a partial update and record change events.

        Status, owner and location changes each produce an event carrying the
        old and new values.
        """
        values = clean_asset_data(data, partial=True)
        asset = self._asset

        if values.get('serial_number') and serial_number_exists(values['serial_number'], exclude_asset_id=asset.id):
            raise ConflictError(f"An asset with serial number '{values['serial_number']}' already exists")
        if 'serial_number' in values and not values['serial_number']:
            raise ValidationError("Serial number is required")
        if 'asset_type_id' in values and not values['asset_type_id']:
            raise ValidationError("Asset type is required")
        self._resolve_references(values)

        purchase = values.get('purchase_date', asset.purchase_date)
        warranty = values.get('warranty_expiry', asset.warranty_expiry)
        installation = values.get('installation_date', asset.installation_date)
        if purchase and warranty and warranty <= purchase:
            raise ValidationError("Warranty expiry must be after purchase date")
        if purchase and installation and installation < purchase:
            raise ValidationError("Installation date cannot be before purchase date")

        old_status = asset.status
        old_owner = asset.owner
        old_location = self.location_display(asset)

        asset.update_from_dict(values, EDITABLE_FIELDS)
        db.session.flush()
        db.session.expire(asset, ['asset_type', 'building', 'service'])

        if not asset.alias:
            asset.alias = self.build_alias(asset.asset_type.name if asset.asset_type else None,
                                           asset.owner, asset.brand, asset.model)

        actor = performed_by or 'System'
        if old_status != asset.status:
            AssetEvent.add_event(
                asset_id=asset.id,
                event_type=AssetEventType.StatusChanged,
                description=f"Status changed from {old_status.name} to {asset.status.name}",
                old_value=old_status.name,
                new_value=asset.status.name,
                performed_by=actor,
                performed_by_email=performed_by_email,
            )

        if (old_owner or None) != (asset.owner or None):
            old_display = old_owner or UNASSIGNED_OWNER
            new_display = asset.owner or UNASSIGNED_OWNER
            AssetEvent.add_event(
                asset_id=asset.id,
                event_type=AssetEventType.OwnerChanged,
                description=f"Owner changed from {old_display} to {new_display}",
                old_value=old_owner,
                new_value=asset.owner,
                performed_by=actor,
                performed_by_email=performed_by_email,
            )

        new_location = self.location_display(asset)
        if old_location != new_location:
            AssetEvent.add_event(
                asset_id=asset.id,
                event_type=AssetEventType.LocationChanged,
                description=f"Location changed from {old_location} to {new_location}",
                old_value=None if old_location == UNSET_LOCATION else old_location,
                new_value=None if new_location == UNSET_LOCATION else new_location,
                performed_by=actor,
                performed_by_email=performed_by_email,
            )

        if commit:
            db.session.commit()
        logger.info(f"Updated asset {asset.asset_code} (ID: {asset.id})")
        return self

    def delete(self, commit: bool = True):
        code = self._asset.asset_code
        asset_id = self._asset.id
        db.session.delete(self._asset)
        if commit:
            db.session.commit()
        logger.info(f"Deleted asset {code} (ID: {asset_id})")
