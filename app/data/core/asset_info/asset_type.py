from app.data.core.timestamped_base import TimestampedBase
from app import db


class AssetType(TimestampedBase):
    __tablename__ = 'asset_types'

    code = db.Column(db.String(10), unique=True, nullable=False)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(500), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    sort_order = db.Column(db.Integer, default=0, nullable=False)
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id', ondelete='SET NULL'), nullable=True)

    # Relationships
    category = db.relationship('Category', back_populates='asset_types')
    assets = db.relationship('Asset', back_populates='asset_type', passive_deletes='all')

    def to_dict(self, include_audit_fields=True):
        result = super().to_dict(include_audit_fields=include_audit_fields)
        result['category_code'] = self.category.code if self.category else None
        result['category_name'] = self.category.name if self.category else None
        return result

    def __repr__(self):
        return f'<AssetType {self.code}>'
