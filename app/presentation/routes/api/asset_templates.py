"""
Asset template routes
"""

from flask import Blueprint, jsonify
from flask_login import login_required

from app.buisness.core.exceptions import NotFoundError
from app.presentation.routes.api.request_utils import bool_arg, json_body
from app.services.core.template_service import TemplateService

bp = Blueprint('asset_templates_api', __name__)


@bp.route('', methods=['GET'])
@login_required
def list_templates():
    templates = TemplateService.get_all(include_inactive=bool_arg('include_inactive'))
    return jsonify([template.to_dict() for template in templates])


@bp.route('/<int:template_id>', methods=['GET'])
@login_required
def get_template(template_id):
    template = TemplateService.get_by_id(template_id)
    if template is None:
        raise NotFoundError(f"Template with ID {template_id} not found")
    return jsonify(template.to_dict())


@bp.route('', methods=['POST'])
@login_required
def create_template():
    template = TemplateService.create(json_body())
    return jsonify(template.to_dict()), 201


@bp.route('/<int:template_id>', methods=['PUT'])
@login_required
def update_template(template_id):
    template = TemplateService.update(template_id, json_body())
    return jsonify(template.to_dict())


@bp.route('/<int:template_id>', methods=['DELETE'])
@login_required
def delete_template(template_id):
    if not TemplateService.delete(template_id):
        raise NotFoundError(f"Template with ID {template_id} not found")
    return '', 204
