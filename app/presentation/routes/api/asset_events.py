"""
Asset event routes
Read the audit trail and record manual events
"""

from flask import Blueprint, jsonify
from flask_login import login_required

from app.auth import current_actor
from app.buisness.core.exceptions import NotFoundError
from app.presentation.routes.api.request_utils import int_arg, int_value, json_body, optional_text
from app.services.core.asset_event_service import DEFAULT_RECENT_COUNT, AssetEventService
from app.utils.date_parsing import parse_datetime
from app.logger import get_logger

bp = Blueprint('asset_events_api', __name__)
logger = get_logger("inventory.routes.asset_events")


@bp.route('/by-asset/<int:asset_id>', methods=['GET'])
@login_required
def events_by_asset(asset_id):
    events = AssetEventService.get_by_asset(asset_id)
    return jsonify([event.to_dict() for event in events])


@bp.route('/<int:event_id>', methods=['GET'])
@login_required
def get_event(event_id):
    event = AssetEventService.get_by_id(event_id)
    if event is None:
        raise NotFoundError(f"Asset event with ID {event_id} not found")
    return jsonify(event.to_dict())


@bp.route('/recent', methods=['GET'])
@login_required
def recent_events():
    events = AssetEventService.get_recent(int_arg('count', DEFAULT_RECENT_COUNT))
    return jsonify([event.to_dict() for event in events])


@bp.route('', methods=['POST'])
@login_required
def create_event():
    data = json_body()
    performed_by, email = current_actor()
    event = AssetEventService.create(
        asset_id=int_value(data.get('asset_id'), 'asset_id'),
        event_type=data.get('event_type'),
        description=optional_text(data.get('description')),
        notes=optional_text(data.get('notes')),
        old_value=optional_text(data.get('old_value')),
        new_value=optional_text(data.get('new_value')),
        performed_by=performed_by,
        performed_by_email=email,
        event_date=parse_datetime(data.get('event_date')),
    )
    logger.info(f"{event.event_type.name} event recorded for asset {event.asset_id} by {performed_by}")
    return jsonify(event.to_dict()), 201
