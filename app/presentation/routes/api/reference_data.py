"""
Reference-data admin routes
CRUD for buildings, categories, sectors, services and asset types under /api/admin.

Reads need an authenticated user; writes need the admin role. Deletes are
soft (is_active=False).
"""

from flask import Blueprint, jsonify
from flask_login import login_required

from app import db
from app.auth import admin_required, current_actor
from app.buisness.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.data.core.asset_info.category import Category
from app.data.core.organization_info.sector import Sector
from app.data.core.repositories import (
    AssetTypeRepository,
    BuildingRepository,
    CategoryRepository,
    SectorRepository,
    ServiceRepository,
)
from app.presentation.routes.api.request_utils import bool_arg, int_arg, json_body
from app.utils.date_parsing import parse_bool
from app.logger import get_logger

bp = Blueprint('reference_data_api', __name__)
logger = get_logger("inventory.routes.reference_data")

FOREIGN_KEYS = {
    'sector_id': Sector,
    'category_id': Category,
}


def clean_reference_data(repository, data: dict, fields, partial_code: bool = False) -> dict:
    """
    Validate and type the submitted fields of a reference row.

    Raises:
        ValidationError: missing code/name, too long, or unknown foreign key
    """
    model = repository.model
    values = {}
    for field in fields:
        if field not in data:
            continue
        value = data[field]
        if field == 'is_active':
            values[field] = parse_bool(value, default=True)
        elif field == 'sort_order':
            try:
                values[field] = int(value or 0)
            except (TypeError, ValueError):
                raise ValidationError("sort_order must be an integer")
        elif field in FOREIGN_KEYS:
            if value in (None, ''):
                values[field] = None
                continue
            try:
                value = int(value)
            except (TypeError, ValueError):
                raise ValidationError(f"{field} must be an integer")
            if db.session.get(FOREIGN_KEYS[field], value) is None:
                raise ValidationError(f"{FOREIGN_KEYS[field].__name__} with ID {value} does not exist")
            values[field] = value
        else:
            text = str(value).strip() if value is not None else ''
            limit = getattr(model.__table__.c[field].type, 'length', None)
            if limit and len(text) > limit:
                raise ValidationError(f"{field} cannot exceed {limit} characters")
            values[field] = text or None

    if 'code' in values:
        if not values['code']:
            raise ValidationError("Code is required")
        values['code'] = values['code'].upper()
    elif not partial_code:
        raise ValidationError("Code is required")
    if not values.get('name'):
        raise ValidationError("Name is required")
    return values


def register_reference_routes(path: str, repository, create_fields, label: str, detail_kwargs=None):
    """Add list/get/create/update/delete routes for one reference table"""
    endpoint = path.replace('-', '_')

    def list_entities():
        kwargs = {'include_inactive': bool_arg('include_inactive')}
        if isinstance(repository, ServiceRepository):
            kwargs['sector_id'] = int_arg('sector_id')
        return jsonify([entity.to_dict() for entity in repository.get_all(**kwargs)])

    def get_entity(entity_id):
        entity = repository.get_by_id(entity_id)
        if entity is None:
            raise NotFoundError(f"{label} with ID {entity_id} not found")
        return jsonify(entity.to_dict(**(detail_kwargs or {})))

    def create_entity():
        values = clean_reference_data(repository, json_body(), create_fields)
        if repository.code_exists(values['code']):
            raise ConflictError(f"{label} with code '{values['code']}' already exists")
        entity = repository.create(repository.model.from_dict(values))
        logger.info(f"{label} {entity.code} created by {current_actor()[0]}")
        return jsonify(entity.to_dict()), 201

    def update_entity(entity_id):
        entity = repository.get_by_id(entity_id)
        if entity is None:
            raise NotFoundError(f"{label} with ID {entity_id} not found")
        fields = [f for f in create_fields if f in repository.updatable_fields]
        values = clean_reference_data(repository, json_body(), fields, partial_code=True)
        if 'code' in values and repository.code_exists(values['code'], exclude_id=entity_id):
            raise ConflictError(f"{label} with code '{values['code']}' already exists")
        entity = repository.update(entity, values)
        logger.info(f"{label} {entity.code} updated by {current_actor()[0]}")
        return jsonify(entity.to_dict())

    def delete_entity(entity_id):
        if not repository.delete(entity_id):
            raise NotFoundError(f"{label} with ID {entity_id} not found")
        logger.info(f"{label} {entity_id} deactivated by {current_actor()[0]}")
        return '', 204

    bp.add_url_rule(f'/{path}', f'list_{endpoint}', login_required(list_entities), methods=['GET'])
    bp.add_url_rule(f'/{path}/<int:entity_id>', f'get_{endpoint}', login_required(get_entity), methods=['GET'])
    bp.add_url_rule(f'/{path}', f'create_{endpoint}', admin_required(create_entity), methods=['POST'])
    bp.add_url_rule(f'/{path}/<int:entity_id>', f'update_{endpoint}', admin_required(update_entity),
                    methods=['PUT'])
    bp.add_url_rule(f'/{path}/<int:entity_id>', f'delete_{endpoint}', admin_required(delete_entity),
                    methods=['DELETE'])


register_reference_routes('buildings', BuildingRepository(),
                          ('code', 'name', 'address', 'is_active', 'sort_order'), 'Building')
register_reference_routes('categories', CategoryRepository(),
                          ('code', 'name', 'description', 'is_active', 'sort_order'), 'Category',
                          detail_kwargs={'include_asset_types': True})
register_reference_routes('sectors', SectorRepository(),
                          ('code', 'name', 'is_active', 'sort_order'), 'Sector')
register_reference_routes('services', ServiceRepository(),
                          ('code', 'name', 'sector_id', 'is_active', 'sort_order'), 'Service')
register_reference_routes('assettypes', AssetTypeRepository(),
                          ('code', 'name', 'description', 'category_id', 'is_active', 'sort_order'), 'Asset type')
