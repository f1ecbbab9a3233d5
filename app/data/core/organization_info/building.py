from app.data.core.timestamped_base import TimestampedBase
from app import db


class Building(TimestampedBase):
    __tablename__ = 'buildings'

    code = db.Column(db.String(10), unique=True, nullable=False)
    name = db.Column(db.String(200), nullable=False)
    address = db.Column(db.String(500), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    sort_order = db.Column(db.Integer, default=0, nullable=False)

    assets = db.relationship('Asset', back_populates='building', passive_deletes=True)

    def __repr__(self):
        return f'<Building {self.code}>'
