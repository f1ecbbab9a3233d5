from app.data.core.timestamped_base import TimestampedBase
from app import db


class AssetTemplate(TimestampedBase):
    """Pre-filled values for quickly registering common hardware"""
    __tablename__ = 'asset_templates'

    template_name = db.Column(db.String(200), nullable=False)
    asset_name = db.Column(db.String(200), nullable=True)
    category = db.Column(db.String(100), nullable=True)
    brand = db.Column(db.String(100), nullable=True)
    model = db.Column(db.String(200), nullable=True)
    owner = db.Column(db.String(200), nullable=True)
    building = db.Column(db.String(200), nullable=True)
    department = db.Column(db.String(200), nullable=True)
    office_location = db.Column(db.String(200), nullable=True)
    purchase_date = db.Column(db.Date, nullable=True)
    warranty_expiry = db.Column(db.Date, nullable=True)
    installation_date = db.Column(db.Date, nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    def __repr__(self):
        return f'<AssetTemplate {self.template_name}>'
