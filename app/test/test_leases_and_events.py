"""
Tests for lease contracts, manual asset events and asset templates
"""

from datetime import date, datetime, timedelta

import pytest

from app.buisness.core.exceptions import NotFoundError, ValidationError
from app.data.core.enums import AssetEventType, LeaseStatus
from app.services.core.asset_event_service import AssetEventService
from app.services.core.asset_service import AssetService
from app.services.core.lease_service import LeaseService
from app.services.core.template_service import TemplateService


@pytest.fixture
def asset(app, laptop_type):
    return AssetService.create({'serial_number': 'LEASE-001', 'asset_type_id': laptop_type.id})


def _lease_data(asset, start, end, **extra):
    data = {'asset_id': asset.id, 'contract_number': 'LC-2024-01', 'vendor': 'Lease BV',
            'start_date': start.isoformat(), 'end_date': end.isoformat(), 'monthly_rate': '25.50'}
    data.update(extra)
    return data


def test_create_lease_records_event(asset):
    today = date.today()
    lease = LeaseService.create(_lease_data(asset, today - timedelta(days=30), today + timedelta(days=700)),
                                'Lease Admin')

    assert lease.status == LeaseStatus.Active
    assert float(lease.monthly_rate) == 25.5
    event = AssetEventService.get_by_asset(asset.id)[0]
    assert event.event_type == AssetEventType.LeaseStarted
    assert event.performed_by == 'Lease Admin'


def test_lease_ending_soon_starts_as_expiring(asset):
    today = date.today()
    lease = LeaseService.create(_lease_data(asset, today - timedelta(days=300), today + timedelta(days=30)))
    assert lease.status == LeaseStatus.Expiring


def test_lease_date_validation(asset):
    today = date.today()
    with pytest.raises(ValidationError):
        LeaseService.create(_lease_data(asset, today, today))
    with pytest.raises(ValidationError):
        LeaseService.create(_lease_data(asset, today, today + timedelta(days=10), monthly_rate='-1'))
    with pytest.raises(ValidationError):
        LeaseService.create({'asset_id': asset.id})
    with pytest.raises(NotFoundError):
        LeaseService.create(_lease_data(asset, today, today + timedelta(days=10), asset_id=999999))


def test_active_and_expiring_queries(asset):
    today = date.today()
    active = LeaseService.create(_lease_data(asset, today - timedelta(days=10), today + timedelta(days=45)))
    LeaseService.create(_lease_data(asset, today - timedelta(days=800), today - timedelta(days=10),
                                    contract_number='LC-OLD'))

    assert LeaseService.get_active(asset.id).id == active.id
    assert [lease.id for lease in LeaseService.get_expiring(60)] == [active.id]
    assert LeaseService.get_expiring(30) == []
    with pytest.raises(ValidationError):
        LeaseService.get_expiring(0)


def test_terminating_lease_records_lease_ended(asset):
    today = date.today()
    lease = LeaseService.create(_lease_data(asset, today - timedelta(days=10), today + timedelta(days=400)))

    LeaseService.update(lease.id, _lease_data(asset, today - timedelta(days=10), today + timedelta(days=400),
                                              status='Terminated'), 'Lease Admin')

    assert LeaseService.get_active(asset.id) is None
    ended = [e for e in AssetEventService.get_by_asset(asset.id) if e.event_type == AssetEventType.LeaseEnded]
    assert len(ended) == 1
    assert ended[0].old_value == 'Active'
    assert ended[0].new_value == 'Terminated'


def test_update_recomputes_status_from_end_date(asset):
    today = date.today()
    start = today - timedelta(days=10)
    lease = LeaseService.create(_lease_data(asset, start, today + timedelta(days=400)))
    assert lease.status == LeaseStatus.Active

    LeaseService.update(lease.id, _lease_data(asset, start, today + timedelta(days=30)))
    assert lease.status == LeaseStatus.Expiring

    LeaseService.update(lease.id, _lease_data(asset, start, today + timedelta(days=400)))
    assert lease.status == LeaseStatus.Active


def test_lease_past_its_end_date_is_expired(asset):
    today = date.today()
    old = LeaseService.create(_lease_data(asset, today - timedelta(days=800), today - timedelta(days=1)))
    assert old.status == LeaseStatus.Expired
    assert LeaseService.get_active(asset.id) is None

    lease = LeaseService.create(_lease_data(asset, today - timedelta(days=100), today + timedelta(days=200)))
    LeaseService.update(lease.id, _lease_data(asset, today - timedelta(days=100), today - timedelta(days=5)),
                        'Lease Admin')
    assert lease.status == LeaseStatus.Expired
    ended = [e for e in AssetEventService.get_by_asset(asset.id) if e.event_type == AssetEventType.LeaseEnded]
    assert len(ended) == 1
    assert ended[0].old_value == 'Active'
    assert ended[0].new_value == 'Expired'


def test_delete_lease(asset):
    today = date.today()
    lease = LeaseService.create(_lease_data(asset, today, today + timedelta(days=400)))
    assert LeaseService.delete(lease.id)
    assert not LeaseService.delete(lease.id)


def test_manual_event(asset):
    event = AssetEventService.create(asset.id, 'maintenance', 'Battery replaced', notes='Under warranty',
                                     performed_by='Technician', event_date=datetime(2024, 3, 1, 10, 0))
    assert event.event_type == AssetEventType.Maintenance
    assert event.event_date == datetime(2024, 3, 1, 10, 0)
    assert AssetEventService.get_by_id(event.id).description == 'Battery replaced'


def test_manual_event_validation(asset):
    with pytest.raises(ValidationError):
        AssetEventService.create(asset.id, 'Unplugged', 'x')
    with pytest.raises(ValidationError):
        AssetEventService.create(asset.id, 'Note', '   ')
    with pytest.raises(ValidationError):
        AssetEventService.create(asset.id, 'Note', 'x' * 501)
    with pytest.raises(NotFoundError):
        AssetEventService.create(999999, 'Note', 'Orphan')


def test_recent_events_newest_first(asset):
    AssetEventService.create(asset.id, 'Note', 'Old note', event_date=datetime(2020, 1, 1))
    recent = AssetEventService.get_recent(2)
    assert len(recent) == 2
    assert recent[0].event_type == AssetEventType.Created
    with pytest.raises(ValidationError):
        AssetEventService.get_recent(201)


def test_seeded_templates_are_listed(app):
    names = [t.template_name for t in TemplateService.get_all()]
    assert 'Dell Latitude Laptop' in names
    assert names == sorted(names)


def test_template_crud(app):
    template = TemplateService.create({'template_name': 'Lenovo ThinkPad', 'brand': 'Lenovo',
                                       'model': 'T14', 'purchase_date': '2024-01-15'})
    assert template.is_active
    assert template.purchase_date == date(2024, 1, 15)

    updated = TemplateService.update(template.id, {'template_name': 'Lenovo ThinkPad T14',
                                                   'brand': 'Lenovo', 'is_active': False})
    assert updated.template_name == 'Lenovo ThinkPad T14'
    assert updated.model is None
    assert template.id not in [t.id for t in TemplateService.get_all()]
    assert template.id in [t.id for t in TemplateService.get_all(include_inactive=True)]

    assert TemplateService.delete(template.id)
    assert TemplateService.get_by_id(template.id) is None

    with pytest.raises(ValidationError):
        TemplateService.create({'brand': 'No name'})
