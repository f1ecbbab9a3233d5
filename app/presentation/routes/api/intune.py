"""
Intune managed device routes
"""

from flask import Blueprint, jsonify, request
from flask_login import login_required

from app.buisness.core.exceptions import NotFoundError
from app.services.integrations.graph_client import get_graph_client
from app.services.integrations.intune_service import IntuneService

bp = Blueprint('intune_api', __name__)


def _service() -> IntuneService:
    return IntuneService(get_graph_client())


@bp.route('/devices', methods=['GET'])
@login_required
def list_devices():
    return jsonify(_service().get_managed_devices())


@bp.route('/devices/search', methods=['GET'])
@login_required
def search_devices():
    return jsonify(_service().search_devices_by_name(request.args.get('name', '')))


@bp.route('/devices/serial/<serial_number>', methods=['GET'])
@login_required
def get_device_by_serial(serial_number):
    device = _service().get_device_by_serial(serial_number)
    if device is None:
        raise NotFoundError(f"Device with serial number '{serial_number}' not found")
    return jsonify(device)


@bp.route('/devices/os/<operating_system>', methods=['GET'])
@login_required
def get_devices_by_os(operating_system):
    return jsonify(_service().get_devices_by_os(operating_system))


@bp.route('/devices/<device_id>/compliance', methods=['GET'])
@login_required
def get_device_compliance(device_id):
    return jsonify(_service().is_device_compliant(device_id))


@bp.route('/devices/<device_id>', methods=['GET'])
@login_required
def get_device(device_id):
    device = _service().get_device_by_id(device_id)
    if device is None:
        raise NotFoundError(f"Device with ID '{device_id}' not found")
    return jsonify(device)


@bp.route('/statistics', methods=['GET'])
@login_required
def get_statistics():
    return jsonify(_service().get_statistics())
