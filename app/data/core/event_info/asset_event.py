from app import db
from app.data.core.timestamped_base import TimestampedBase, utcnow
from app.data.core.enums import AssetEventType


class AssetEvent(TimestampedBase):
    """Append-only audit trail entry for an asset"""
    __tablename__ = 'asset_events'

    asset_id = db.Column(db.Integer, db.ForeignKey('assets.id', ondelete='CASCADE'), nullable=False, index=True)
    event_type = db.Column(db.Enum(AssetEventType, native_enum=False, length=30, validate_strings=True),
                           nullable=False)
    description = db.Column(db.String(500), nullable=False)
    notes = db.Column(db.String(2000), nullable=True)
    old_value = db.Column(db.String(1000), nullable=True)
    new_value = db.Column(db.String(1000), nullable=True)
    performed_by = db.Column(db.String(200), nullable=True)
    performed_by_email = db.Column(db.String(200), nullable=True)
    event_date = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    asset = db.relationship('Asset', back_populates='events')

    def __repr__(self):
        return f'<AssetEvent {self.event_type.name if self.event_type is not None else None}: {self.description}>'

    def to_dict(self, include_audit_fields=True):
        result = super().to_dict(include_audit_fields=include_audit_fields)
        result['asset_code'] = self.asset.asset_code if self.asset else None
        return result

    @classmethod
    def add_event(cls, asset_id, event_type, description, notes=None, old_value=None, new_value=None,
                  performed_by=None, performed_by_email=None, event_date=None):
        """
        Create and stage a new asset event

        Args:
            asset_id (int): Asset the event belongs to
            event_type (AssetEventType): Type of event
            description (str): Short description, truncated to 500 characters
            notes (str, optional): Free text notes
            old_value / new_value (str, optional): Before and after values for change events
            performed_by (str, optional): Display name of the acting user
            performed_by_email (str, optional): Email of the acting user
            event_date (datetime, optional): Defaults to now (UTC)

        Returns:
            AssetEvent: The flushed event (caller commits)
        """
        event = cls(
            asset_id=asset_id,
            event_type=AssetEventType.parse(event_type),
            description=(description or '')[:500],
            notes=notes[:2000] if notes else None,
            old_value=old_value[:1000] if old_value else None,
            new_value=new_value[:1000] if new_value else None,
            performed_by=performed_by or 'System',
            performed_by_email=performed_by_email,
            event_date=event_date or utcnow(),
        )

        db.session.add(event)
        db.session.flush()  # Get the ID without committing
        return event
