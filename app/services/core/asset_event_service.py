"""
Asset Event Service
Read access to the asset audit trail and manual event entry.
"""

from datetime import datetime
from typing import List, Optional

from app import db
from app.buisness.core.exceptions import NotFoundError, ValidationError
from app.data.core.asset_info.asset import Asset
from app.data.core.enums import AssetEventType
from app.data.core.event_info.asset_event import AssetEvent
from app.logger import get_logger

logger = get_logger("inventory.services.core.asset_event_service")

DEFAULT_RECENT_COUNT = 50
MAX_RECENT_COUNT = 200


class AssetEventService:

    @staticmethod
    def get_by_asset(asset_id: int) -> List[AssetEvent]:
        return AssetEvent.query.filter_by(asset_id=asset_id) \
                               .order_by(AssetEvent.event_date.desc(), AssetEvent.id.desc()) \
                               .all()

    @staticmethod
    def get_by_id(event_id: int) -> Optional[AssetEvent]:
        return db.session.get(AssetEvent, event_id)

    @staticmethod
    def get_recent(count: int = DEFAULT_RECENT_COUNT) -> List[AssetEvent]:
        if count < 1 or count > MAX_RECENT_COUNT:
            raise ValidationError(f"Count must be between 1 and {MAX_RECENT_COUNT}")
        return AssetEvent.query.order_by(AssetEvent.event_date.desc(), AssetEvent.id.desc()) \
                               .limit(count).all()

    @staticmethod
    def create(asset_id: int, event_type, description: str, notes: Optional[str] = None,
               old_value: Optional[str] = None, new_value: Optional[str] = None,
               performed_by: Optional[str] = None, performed_by_email: Optional[str] = None,
               event_date: Optional[datetime] = None) -> AssetEvent:
        """
        Record a manual event (maintenance, note, ...) for an asset.

        Raises:
            ValidationError: invalid event type or missing description
            NotFoundError: asset does not exist
        """
        parsed_type = AssetEventType.try_parse(event_type)
        if parsed_type is None:
            raise ValidationError(f"Invalid event type: {event_type}. Valid values: {AssetEventType.valid_values()}")
        if not description or not description.strip():
            raise ValidationError("Description is required")
        if len(description) > 500:
            raise ValidationError("Description cannot exceed 500 characters")
        if notes and len(notes) > 2000:
            raise ValidationError("Notes cannot exceed 2000 characters")
        if db.session.get(Asset, asset_id) is None:
            raise NotFoundError(f"Asset with ID {asset_id} not found")

        event = AssetEvent.add_event(
            asset_id=asset_id,
            event_type=parsed_type,
            description=description.strip(),
            notes=notes,
            old_value=old_value,
            new_value=new_value,
            performed_by=performed_by,
            performed_by_email=performed_by_email,
            event_date=event_date,
        )
        db.session.commit()
        logger.info(f"Recorded {parsed_type.name} event for asset {asset_id} (ID: {event.id})")
        return event
