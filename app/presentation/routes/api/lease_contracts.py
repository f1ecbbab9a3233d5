"""
Lease contract routes
"""

from flask import Blueprint, jsonify
from flask_login import login_required

from app.auth import current_actor
from app.buisness.core.exceptions import NotFoundError
from app.presentation.routes.api.request_utils import int_arg, json_body
from app.services.core.lease_service import DEFAULT_EXPIRING_DAYS, LeaseService
from app.logger import get_logger

bp = Blueprint('lease_contracts_api', __name__)
logger = get_logger("inventory.routes.lease_contracts")


@bp.route('/by-asset/<int:asset_id>', methods=['GET'])
@login_required
def leases_by_asset(asset_id):
    return jsonify([lease.to_dict() for lease in LeaseService.get_by_asset(asset_id)])


@bp.route('/active/<int:asset_id>', methods=['GET'])
@login_required
def active_lease(asset_id):
    lease = LeaseService.get_active(asset_id)
    if lease is None:
        raise NotFoundError(f"No active lease found for asset {asset_id}")
    return jsonify(lease.to_dict())


@bp.route('/expiring', methods=['GET'])
@login_required
def expiring_leases():
    leases = LeaseService.get_expiring(int_arg('days_ahead', DEFAULT_EXPIRING_DAYS))
    return jsonify([lease.to_dict() for lease in leases])


@bp.route('/<int:lease_id>', methods=['GET'])
@login_required
def get_lease(lease_id):
    lease = LeaseService.get_by_id(lease_id)
    if lease is None:
        raise NotFoundError(f"Lease contract with ID {lease_id} not found")
    return jsonify(lease.to_dict())


@bp.route('', methods=['POST'])
@login_required
def create_lease():
    performed_by, email = current_actor()
    lease = LeaseService.create(json_body(), performed_by, email)
    logger.info(f"Lease contract {lease.id} created by {performed_by}")
    return jsonify(lease.to_dict()), 201


@bp.route('/<int:lease_id>', methods=['PUT'])
@login_required
def update_lease(lease_id):
    performed_by, email = current_actor()
    lease = LeaseService.update(lease_id, json_body(), performed_by, email)
    return jsonify(lease.to_dict())


@bp.route('/<int:lease_id>', methods=['DELETE'])
@login_required
def delete_lease(lease_id):
    if not LeaseService.delete(lease_id):
        raise NotFoundError(f"Lease contract with ID {lease_id} not found")
    return '', 204
