"""
Tests for asset creation, editing and the change audit trail
"""

from datetime import date

import pytest

from app.buisness.core.asset_context import clean_asset_data
from app.buisness.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.data.core.enums import AssetEventType, AssetStatus
from app.data.core.organization_info.building import Building
from app.services.core.asset_event_service import AssetEventService
from app.services.core.asset_service import AssetService


def _create(laptop_type, serial, **extra):
    data = {'serial_number': serial, 'asset_type_id': laptop_type.id}
    data.update(extra)
    return AssetService.create(data, 'Test User', 'test.user@example.org')


def test_create_sets_defaults_and_created_event(app, laptop_type):
    asset = _create(laptop_type, 'SVC-001', owner='Jan Janssen', brand='Dell', model='Latitude 5520')

    assert asset.status == AssetStatus.Stock
    assert asset.alias == 'Laptop-Jan Janssen-Dell-Latitude 5520'
    events = AssetEventService.get_by_asset(asset.id)
    assert len(events) == 1
    assert events[0].event_type == AssetEventType.Created
    assert events[0].new_value == asset.asset_code
    assert events[0].performed_by == 'Test User'
    assert events[0].performed_by_email == 'test.user@example.org'


def test_create_uses_building_code_in_asset_code(app, laptop_type):
    building = Building.query.filter_by(code='BIB').one()
    asset = _create(laptop_type, 'SVC-002', building_id=building.id)
    assert asset.asset_code.startswith('LAP-')
    assert '-BIB-' in asset.asset_code


def test_duplicate_serial_is_rejected_case_insensitively(app, laptop_type):
    _create(laptop_type, 'SVC-DUP')
    with pytest.raises(ConflictError):
        _create(laptop_type, 'svc-dup')


def test_create_requires_serial_and_type(app):
    with pytest.raises(ValidationError) as excinfo:
        AssetService.create({})
    assert 'Serial number is required' in excinfo.value.message
    assert 'Asset type is required' in excinfo.value.message


def test_clean_asset_data_date_rules():
    with pytest.raises(ValidationError):
        clean_asset_data({'serial_number': 'X', 'asset_type_id': 1,
                          'purchase_date': '2024-05-01', 'warranty_expiry': '2024-05-01'})
    with pytest.raises(ValidationError):
        clean_asset_data({'serial_number': 'X', 'asset_type_id': 1,
                          'purchase_date': '2024-05-01', 'installation_date': '2024-04-30'})

    values = clean_asset_data({'serial_number': ' X ', 'asset_type_id': '1', 'status': 'ingebruik',
                               'purchase_date': '2024-05-01'})
    assert values['serial_number'] == 'X'
    assert values['asset_type_id'] == 1
    assert values['status'] == AssetStatus.InGebruik
    assert values['purchase_date'] == date(2024, 5, 1)


def test_unknown_asset_type_is_rejected(app):
    with pytest.raises(ValidationError):
        AssetService.create({'serial_number': 'SVC-404', 'asset_type_id': 99999})


def test_edit_records_status_owner_and_location_events(app, laptop_type):
    asset = _create(laptop_type, 'SVC-010', owner='Jan Janssen')
    building = Building.query.filter_by(code='DBK').one()

    AssetService.update(asset.id, {'status': 'InGebruik', 'owner': 'Piet Peeters', 'building_id': building.id},
                        'Editor', 'editor@example.org')

    events = {e.event_type: e for e in AssetEventService.get_by_asset(asset.id)}
    status_event = events[AssetEventType.StatusChanged]
    assert status_event.old_value == 'Stock'
    assert status_event.new_value == 'InGebruik'
    assert events[AssetEventType.OwnerChanged].old_value == 'Jan Janssen'
    assert events[AssetEventType.OwnerChanged].new_value == 'Piet Peeters'
    location_event = events[AssetEventType.LocationChanged]
    assert location_event.old_value is None
    assert location_event.new_value == 'DBK - Gemeentehuis Diepenbeek'
    assert location_event.performed_by == 'Editor'


def test_edit_without_changes_adds_no_events(app, laptop_type):
    asset = _create(laptop_type, 'SVC-011', owner='Jan Janssen')
    AssetService.update(asset.id, {'owner': 'Jan Janssen', 'model': 'Latitude 7440'})
    assert len(AssetEventService.get_by_asset(asset.id)) == 1


def test_clearing_owner_is_recorded(app, laptop_type):
    asset = _create(laptop_type, 'SVC-012', owner='Jan Janssen')
    AssetService.update(asset.id, {'owner': ''})
    event = [e for e in AssetEventService.get_by_asset(asset.id) if e.event_type == AssetEventType.OwnerChanged][0]
    assert event.description == 'Owner changed from Jan Janssen to (unassigned)'
    assert event.new_value is None


def test_edit_serial_conflict(app, laptop_type):
    _create(laptop_type, 'SVC-020')
    other = _create(laptop_type, 'SVC-021')
    with pytest.raises(ConflictError):
        AssetService.update(other.id, {'serial_number': 'SVC-020'})


def test_edit_unknown_asset(app):
    with pytest.raises(NotFoundError):
        AssetService.update(424242, {'owner': 'x'})


def test_delete(app, laptop_type):
    asset = _create(laptop_type, 'SVC-030')
    assert AssetService.delete(asset.id)
    assert AssetService.get_by_id(asset.id) is None
    assert not AssetService.delete(asset.id)


def test_lookups_and_existence_checks(app, laptop_type):
    asset = _create(laptop_type, 'SVC-040')

    assert AssetService.get_by_code(asset.asset_code.lower()).id == asset.id
    assert AssetService.get_by_serial('svc-040').id == asset.id
    assert AssetService.code_exists(asset.asset_code)
    assert not AssetService.code_exists('LAP-99-00001')
    assert AssetService.serial_number_exists('SVC-040')
    assert not AssetService.serial_number_exists('SVC-040', exclude_asset_id=asset.id)

    with pytest.raises(ValidationError):
        AssetService.get_by_code('not a code')


def test_paged_listing_and_filters(app, laptop_type, monitor_type):
    for index in range(3):
        _create(laptop_type, f'PAGE-L{index}')
    _create(monitor_type, 'PAGE-M0', owner='Filter Target', status='Defect')

    page = AssetService.get_paged(page_number=1, page_size=2)
    assert page.total_count == 4
    assert page.total_pages == 2
    assert page.has_next_page
    assert not page.has_previous_page
    assert len(page.items) == 2

    assert AssetService.get_paged(asset_type_id=monitor_type.id).total_count == 1
    assert AssetService.get_paged(status='Defect').total_count == 1
    assert AssetService.get_paged(search='filter target').total_count == 1

    with pytest.raises(ValidationError):
        AssetService.get_paged(page_size=201)


def test_bulk_create(app, monitor_type):
    result = AssetService.bulk_create({'quantity': 3, 'serial_number_prefix': 'BULK',
                                       'asset_type_id': monitor_type.id, 'brand': 'Samsung'}, 'Bulk User')

    assert result['is_fully_successful']
    assert result['successfully_created'] == 3
    serials = [a['serial_number'] for a in result['created_assets']]
    assert serials == ['BULK-0001', 'BULK-0002', 'BULK-0003']
    codes = [a['asset_code'] for a in result['created_assets']]
    assert len(set(codes)) == 3


def test_bulk_create_is_all_or_nothing(app, monitor_type):
    _create(monitor_type, 'ROLL-0002')
    result = AssetService.bulk_create({'quantity': 3, 'serial_number_prefix': 'ROLL',
                                       'asset_type_id': monitor_type.id})

    assert not result['is_fully_successful']
    assert result['successfully_created'] == 0
    assert result['failed'] == 3
    assert result['errors']
    assert AssetService.get_by_serial('ROLL-0001') is None


def test_bulk_quantity_limits(app, monitor_type):
    for quantity in (0, 101, 'many'):
        with pytest.raises(ValidationError):
            AssetService.bulk_create({'quantity': quantity, 'serial_number_prefix': 'Q',
                                      'asset_type_id': monitor_type.id})
