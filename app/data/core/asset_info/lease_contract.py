from app.data.core.timestamped_base import TimestampedBase
from app.data.core.enums import LeaseStatus
from app import db


class LeaseContract(TimestampedBase):
    __tablename__ = 'lease_contracts'

    asset_id = db.Column(db.Integer, db.ForeignKey('assets.id', ondelete='CASCADE'), nullable=False, index=True)
    contract_number = db.Column(db.String(100), nullable=True)
    vendor = db.Column(db.String(200), nullable=True)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    monthly_rate = db.Column(db.Numeric(18, 2), nullable=True)
    total_value = db.Column(db.Numeric(18, 2), nullable=True)
    status = db.Column(db.Enum(LeaseStatus, native_enum=False, length=20, validate_strings=True),
                       default=LeaseStatus.Active, nullable=False)
    notes = db.Column(db.String(2000), nullable=True)

    asset = db.relationship('Asset', back_populates='lease_contracts')

    def to_dict(self, include_audit_fields=True):
        result = super().to_dict(include_audit_fields=include_audit_fields)
        result['asset_code'] = self.asset.asset_code if self.asset else None
        return result

    def __repr__(self):
        return f'<LeaseContract {self.contract_number} asset={self.asset_id}>'
