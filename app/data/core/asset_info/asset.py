from app.data.core.timestamped_base import TimestampedBase
from app.data.core.enums import AssetStatus
from app import db


class Asset(TimestampedBase):
    __tablename__ = 'assets'

    asset_code = db.Column(db.String(50), unique=True, nullable=False, index=True)
    asset_name = db.Column(db.String(200), nullable=True)
    alias = db.Column(db.String(200), nullable=True)
    category = db.Column(db.String(100), nullable=True)
    is_dummy = db.Column(db.Boolean, default=False, nullable=False)
    asset_type_id = db.Column(db.Integer, db.ForeignKey('asset_types.id', ondelete='RESTRICT'), nullable=True)
    service_id = db.Column(db.Integer, db.ForeignKey('services.id', ondelete='SET NULL'), nullable=True)
    building_id = db.Column(db.Integer, db.ForeignKey('buildings.id', ondelete='SET NULL'), nullable=True)

    # Location and ownership
    installation_location = db.Column(db.String(200), nullable=True)
    legacy_building = db.Column(db.String(200), nullable=True)  # free text from before buildings were a table
    legacy_department = db.Column(db.String(200), nullable=True)
    owner = db.Column(db.String(200), nullable=True)
    job_title = db.Column(db.String(200), nullable=True)
    office_location = db.Column(db.String(200), nullable=True)

    status = db.Column(db.Enum(AssetStatus, native_enum=False, length=20, validate_strings=True),
                       default=AssetStatus.Stock, nullable=False)

    # Hardware
    brand = db.Column(db.String(100), nullable=True)
    model = db.Column(db.String(200), nullable=True)
    serial_number = db.Column(db.String(100), unique=True, nullable=False, index=True)

    purchase_date = db.Column(db.Date, nullable=True)
    warranty_expiry = db.Column(db.Date, nullable=True)
    installation_date = db.Column(db.Date, nullable=True)

    # Relationships
    asset_type = db.relationship('AssetType', back_populates='assets')
    service = db.relationship('Service', back_populates='assets')
    building = db.relationship('Building', back_populates='assets')
    events = db.relationship('AssetEvent', back_populates='asset', lazy='dynamic',
                             cascade='all, delete-orphan', passive_deletes=True)
    lease_contracts = db.relationship('LeaseContract', back_populates='asset', lazy='select',
                                      cascade='all, delete-orphan', passive_deletes=True)

    def to_dict(self, include_audit_fields=True):
        result = super().to_dict(include_audit_fields=include_audit_fields)
        result['asset_type'] = {
            'id': self.asset_type.id,
            'code': self.asset_type.code,
            'name': self.asset_type.name,
        } if self.asset_type else None
        result['service'] = {
            'id': self.service.id,
            'code': self.service.code,
            'name': self.service.name,
            'sector_name': self.service.sector.name if self.service.sector else None,
        } if self.service else None
        result['building'] = {
            'id': self.building.id,
            'code': self.building.code,
            'name': self.building.name,
        } if self.building else None
        return result

    def __repr__(self):
        return f'<Asset {self.asset_code} ({self.serial_number})>'
