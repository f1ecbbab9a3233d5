from app.data.core.timestamped_base import TimestampedBase
from app import db


class Category(TimestampedBase):
    __tablename__ = 'categories'

    code = db.Column(db.String(20), unique=True, nullable=False)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(500), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    sort_order = db.Column(db.Integer, default=0, nullable=False)

    asset_types = db.relationship('AssetType', back_populates='category', lazy='select')

    @property
    def active_asset_types(self):
        return sorted((t for t in self.asset_types if t.is_active), key=lambda t: (t.sort_order, t.name))

    def to_dict(self, include_audit_fields=True, include_asset_types=False):
        result = super().to_dict(include_audit_fields=include_audit_fields)
        active_types = self.active_asset_types
        result['asset_type_count'] = len(active_types)
        if include_asset_types:
            result['asset_types'] = [{'id': t.id, 'code': t.code, 'name': t.name} for t in active_types]
        return result

    def __repr__(self):
        return f'<Category {self.code}>'
