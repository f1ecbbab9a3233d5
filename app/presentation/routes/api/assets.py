"""
Asset routes
CRUD, lookups, existence checks and bulk creation for assets
"""

from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required

from app import db, limiter
from app.auth import current_actor
from app.buisness.core.exceptions import InventoryError, NotFoundError
from app.presentation.routes.api.request_utils import int_arg, json_body
from app.services.core.asset_service import DEFAULT_PAGE_SIZE, AssetService
from app.logger import get_logger

bp = Blueprint('assets_api', __name__)
logger = get_logger("inventory.routes.assets")


@bp.route('', methods=['GET'])
@login_required
def list_assets():
    """Paged asset list with optional filters"""
    result = AssetService.get_paged(
        page_number=int_arg('page_number', 1),
        page_size=int_arg('page_size', DEFAULT_PAGE_SIZE),
        status=request.args.get('status'),
        asset_type_id=int_arg('asset_type_id'),
        service_id=int_arg('service_id'),
        building_id=int_arg('building_id'),
        search=request.args.get('search'),
    )
    return jsonify(result.to_dict())


@bp.route('/all', methods=['GET'])
@login_required
def list_all_assets():
    assets = AssetService.get_all(status=request.args.get('status'))
    return jsonify([asset.to_dict() for asset in assets])


@bp.route('/<int:asset_id>', methods=['GET'])
@login_required
def get_asset(asset_id):
    asset = AssetService.get_by_id(asset_id)
    if asset is None:
        raise NotFoundError(f"Asset with ID {asset_id} not found")
    return jsonify(asset.to_dict())


@bp.route('/by-code/<code>', methods=['GET'])
@login_required
def get_asset_by_code(code):
    asset = AssetService.get_by_code(code)
    if asset is None:
        raise NotFoundError(f"Asset with code '{code}' not found")
    return jsonify(asset.to_dict())


@bp.route('/by-serial/<serial_number>', methods=['GET'])
@login_required
def get_asset_by_serial(serial_number):
    asset = AssetService.get_by_serial(serial_number)
    if asset is None:
        raise NotFoundError(f"Asset with serial number '{serial_number}' not found")
    return jsonify(asset.to_dict())


@bp.route('/code-exists', methods=['GET'])
@login_required
def code_exists():
    return jsonify(AssetService.code_exists(request.args.get('code', '')))


@bp.route('/serial-exists', methods=['GET'])
@login_required
def serial_exists():
    exists = AssetService.serial_number_exists(request.args.get('serial_number', ''),
                                               exclude_asset_id=int_arg('exclude_asset_id'))
    return jsonify(exists)


@bp.route('', methods=['POST'])
@login_required
def create_asset():
    data = json_body()
    performed_by, email = current_actor()
    try:
        asset = AssetService.create(data, performed_by, email)
    except (ValueError, InventoryError) as e:
        logger.warning(f"Asset creation rejected: {e}")
        raise
    except Exception as e:
        logger.error(f"Error creating asset: {e}")
        db.session.rollback()
        raise
    logger.info(f"Asset {asset.asset_code} created by {performed_by}")
    return jsonify(asset.to_dict()), 201


@bp.route('/<int:asset_id>', methods=['PUT'])
@login_required
def update_asset(asset_id):
    data = json_body()
    performed_by, email = current_actor()
    try:
        asset = AssetService.update(asset_id, data, performed_by, email)
    except (ValueError, InventoryError) as e:
        logger.warning(f"Update of asset {asset_id} rejected: {e}")
        raise
    except Exception as e:
        logger.error(f"Error updating asset {asset_id}: {e}")
        db.session.rollback()
        raise
    return jsonify(asset.to_dict())


@bp.route('/<int:asset_id>', methods=['DELETE'])
@login_required
def delete_asset(asset_id):
    if not AssetService.delete(asset_id):
        raise NotFoundError(f"Asset with ID {asset_id} not found")
    return '', 204


@bp.route('/bulk', methods=['POST'])
@login_required
@limiter.limit(lambda: current_app.config['RATELIMIT_BULK'])
def bulk_create_assets():
    data = json_body()
    performed_by, email = current_actor()
    result = AssetService.bulk_create(data, performed_by, email)
    return jsonify(result)
