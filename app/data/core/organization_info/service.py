from app.data.core.timestamped_base import TimestampedBase
from app import db


class Service(TimestampedBase):
    """An organisational department (dienst); optionally grouped under a sector"""
    __tablename__ = 'services'

    code = db.Column(db.String(50), unique=True, nullable=False)
    name = db.Column(db.String(200), nullable=False)
    sector_id = db.Column(db.Integer, db.ForeignKey('sectors.id', ondelete='SET NULL'), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    sort_order = db.Column(db.Integer, default=0, nullable=False)

    sector = db.relationship('Sector', back_populates='services')
    assets = db.relationship('Asset', back_populates='service', passive_deletes=True)

    def to_dict(self, include_audit_fields=True):
        result = super().to_dict(include_audit_fields=include_audit_fields)
        result['sector_name'] = self.sector.name if self.sector else None
        return result

    def __repr__(self):
        return f'<Service {self.code}>'
