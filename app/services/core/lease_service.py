"""
Lease Contract Service
CRUD for lease contracts plus the active/expiring queries.
"""

from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from app import db
from app.buisness.core.exceptions import NotFoundError, ValidationError
from app.data.core.asset_info.asset import Asset
from app.data.core.asset_info.lease_contract import LeaseContract
from app.data.core.enums import AssetEventType, LeaseStatus
from app.data.core.event_info.asset_event import AssetEvent
from app.utils.date_parsing import parse_date
from app.logger import get_logger

logger = get_logger("inventory.services.core.lease_service")

DEFAULT_EXPIRING_DAYS = 90
MAX_EXPIRING_DAYS = 365
OPEN_STATUSES = (LeaseStatus.Active, LeaseStatus.Expiring)
CLOSED_STATUSES = (LeaseStatus.Expired, LeaseStatus.Terminated)


def _decimal(value, field):
    if value in (None, ''):
        return None
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{field} must be a number")
    if result < 0:
        raise ValidationError(f"{field} cannot be negative")
    return result


def _clean_lease_data(data: Dict) -> Dict:
    start_date = parse_date(data.get('start_date'))
    end_date = parse_date(data.get('end_date'))
    if start_date is None or end_date is None:
        raise ValidationError("Start date and end date are required")
    if end_date <= start_date:
        raise ValidationError("End date must be after start date")

    values = {
        'contract_number': (data.get('contract_number') or '').strip() or None,
        'vendor': (data.get('vendor') or '').strip() or None,
        'start_date': start_date,
        'end_date': end_date,
        'monthly_rate': _decimal(data.get('monthly_rate'), 'monthly_rate'),
        'total_value': _decimal(data.get('total_value'), 'total_value'),
        'notes': (data.get('notes') or '').strip() or None,
    }
    for field, limit in (('contract_number', 100), ('vendor', 200), ('notes', 2000)):
        if values[field] and len(values[field]) > limit:
            raise ValidationError(f"{field} cannot exceed {limit} characters")
    return values


class LeaseService:

    @staticmethod
    def get_by_asset(asset_id: int) -> List[LeaseContract]:
        return LeaseContract.query.filter_by(asset_id=asset_id) \
                                  .order_by(LeaseContract.start_date.desc()).all()

    @staticmethod
    def get_by_id(lease_id: int) -> Optional[LeaseContract]:
        return db.session.get(LeaseContract, lease_id)

    @staticmethod
    def get_active(asset_id: int, today: Optional[date] = None) -> Optional[LeaseContract]:
        today = today or date.today()
        return LeaseContract.query.filter(
            LeaseContract.asset_id == asset_id,
            LeaseContract.status.in_(OPEN_STATUSES),
            LeaseContract.start_date <= today,
            LeaseContract.end_date >= today,
        ).order_by(LeaseContract.start_date.desc()).first()

    @staticmethod
    def get_expiring(days_ahead: int = DEFAULT_EXPIRING_DAYS, today: Optional[date] = None) -> List[LeaseContract]:
        if days_ahead < 1 or days_ahead > MAX_EXPIRING_DAYS:
            raise ValidationError(f"Days ahead must be between 1 and {MAX_EXPIRING_DAYS}")
        today = today or date.today()
        return LeaseContract.query.filter(
            LeaseContract.status.in_(OPEN_STATUSES),
            LeaseContract.end_date >= today,
            LeaseContract.end_date <= today + timedelta(days=days_ahead),
        ).order_by(LeaseContract.end_date).all()

    @staticmethod
    def refresh_status(lease: LeaseContract, today: Optional[date] = None) -> LeaseContract:
        """
        Recompute the status of an open lease from its end date: Expired once the
        end date has passed, Expiring within 90 days of it, Active otherwise.
        Terminated and Expired leases are left alone.
        """
        today = today or date.today()
        if lease.status not in OPEN_STATUSES:
            return lease
        if lease.end_date < today:
            lease.status = LeaseStatus.Expired
        elif lease.end_date <= today + timedelta(days=DEFAULT_EXPIRING_DAYS):
            lease.status = LeaseStatus.Expiring
        else:
            lease.status = LeaseStatus.Active
        return lease

    @staticmethod
    def create(data: Dict, performed_by: Optional[str] = None,
               performed_by_email: Optional[str] = None) -> LeaseContract:
        asset_id = data.get('asset_id')
        asset = db.session.get(Asset, int(asset_id)) if str(asset_id or '').isdigit() else None
        if asset is None:
            raise NotFoundError(f"Asset with ID {asset_id} not found")

        lease = LeaseContract(asset_id=asset.id, status=LeaseStatus.Active, **_clean_lease_data(data))
        LeaseService.refresh_status(lease)
        db.session.add(lease)
        db.session.flush()

        AssetEvent.add_event(
            asset_id=asset.id,
            event_type=AssetEventType.LeaseStarted,
            description=f"Lease {lease.contract_number or lease.id} started with {lease.vendor or 'unknown vendor'}",
            new_value=f"{lease.start_date.isoformat()} - {lease.end_date.isoformat()}",
            performed_by=performed_by,
            performed_by_email=performed_by_email,
        )
        db.session.commit()
        logger.info(f"Created lease contract {lease.id} for asset {asset.asset_code}")
        return lease

    @staticmethod
    def update(lease_id: int, data: Dict, performed_by: Optional[str] = None,
               performed_by_email: Optional[str] = None) -> LeaseContract:
        lease = db.session.get(LeaseContract, lease_id)
        if lease is None:
            raise NotFoundError(f"Lease contract with ID {lease_id} not found")

        values = _clean_lease_data(data)
        if data.get('status') not in (None, ''):
            status = LeaseStatus.try_parse(data['status'])
            if status is None:
                raise ValidationError(f"Invalid lease status: {data['status']}")
            values['status'] = status

        old_status = lease.status
        for field, value in values.items():
            setattr(lease, field, value)
        LeaseService.refresh_status(lease)

        if lease.status != old_status and lease.status in CLOSED_STATUSES:
            AssetEvent.add_event(
                asset_id=lease.asset_id,
                event_type=AssetEventType.LeaseEnded,
                description=f"Lease {lease.contract_number or lease.id} {lease.status.name.lower()}",
                old_value=old_status.name,
                new_value=lease.status.name,
                performed_by=performed_by,
                performed_by_email=performed_by_email,
            )

        db.session.commit()
        logger.info(f"Updated lease contract {lease.id}")
        return lease

    @staticmethod
    def delete(lease_id: int) -> bool:
        lease = db.session.get(LeaseContract, lease_id)
        if lease is None:
            return False
        db.session.delete(lease)
        db.session.commit()
        logger.info(f"Deleted lease contract {lease_id}")
        return True
