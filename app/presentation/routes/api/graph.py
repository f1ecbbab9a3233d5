"""
Microsoft Graph user lookup routes
"""

from flask import Blueprint, jsonify, request
from flask_login import login_required

from app.buisness.core.exceptions import NotFoundError
from app.presentation.routes.api.request_utils import int_arg
from app.services.integrations.graph_client import get_graph_client
from app.services.integrations.graph_user_service import GraphUserService, user_to_dict
from app.logger import get_logger

bp = Blueprint('graph_api', __name__)
logger = get_logger("inventory.routes.graph")


def _service() -> GraphUserService:
    return GraphUserService(get_graph_client())


@bp.route('/users/search', methods=['GET'])
@login_required
def search_users():
    query = request.args.get('query', '')
    logger.info(f"API request to search users with query: {query}")
    users = _service().search_users(query, int_arg('top', 10))
    return jsonify([user_to_dict(user) for user in users])


@bp.route('/users/upn/<path:upn>', methods=['GET'])
@login_required
def get_user_by_upn(upn):
    user = _service().get_user_by_upn(upn)
    if user is None:
        raise NotFoundError(f"User with UPN '{upn}' not found")
    return jsonify(user_to_dict(user))


@bp.route('/users/<user_id>', methods=['GET'])
@login_required
def get_user(user_id):
    user = _service().get_user_by_id(user_id)
    if user is None:
        raise NotFoundError(f"User with ID '{user_id}' not found")
    return jsonify(user_to_dict(user))


@bp.route('/users/<user_id>/manager', methods=['GET'])
@login_required
def get_user_manager(user_id):
    manager = _service().get_user_manager(user_id)
    if manager is None:
        raise NotFoundError(f"No manager found for user with ID '{user_id}'")
    return jsonify(user_to_dict(manager))
