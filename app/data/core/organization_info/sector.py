from app.data.core.timestamped_base import TimestampedBase
from app import db


class Sector(TimestampedBase):
    __tablename__ = 'sectors'

    code = db.Column(db.String(20), unique=True, nullable=False)
    name = db.Column(db.String(200), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    sort_order = db.Column(db.Integer, default=0, nullable=False)

    services = db.relationship('Service', back_populates='sector', passive_deletes=True)

    def __repr__(self):
        return f'<Sector {self.code}>'
