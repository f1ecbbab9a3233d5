"""
Asset Template Service
CRUD for the pre-filled asset templates.
"""

from typing import Dict, List, Optional

from app import db
from app.buisness.core.exceptions import NotFoundError, ValidationError
from app.data.core.asset_info.asset_template import AssetTemplate
from app.utils.date_parsing import parse_bool, parse_date
from app.logger import get_logger

logger = get_logger("inventory.services.core.template_service")

TEXT_FIELDS = {
    'template_name': 200,
    'asset_name': 200,
    'category': 100,
    'brand': 100,
    'model': 200,
    'owner': 200,
    'building': 200,
    'department': 200,
    'office_location': 200,
}
DATE_FIELDS = ('purchase_date', 'warranty_expiry', 'installation_date')


def _clean_template_data(data: Dict) -> Dict:
    values = {}
    for field, limit in TEXT_FIELDS.items():
        value = (str(data.get(field) or '')).strip() or None
        if value and len(value) > limit:
            raise ValidationError(f"{field} cannot exceed {limit} characters")
        values[field] = value
    if not values['template_name']:
        raise ValidationError("Template name is required")
    for field in DATE_FIELDS:
        values[field] = parse_date(data.get(field))
    values['is_active'] = parse_bool(data.get('is_active'), default=True)
    return values


class TemplateService:

    @staticmethod
    def get_all(include_inactive: bool = False) -> List[AssetTemplate]:
        query = AssetTemplate.query
        if not include_inactive:
            query = query.filter(AssetTemplate.is_active.is_(True))
        return query.order_by(AssetTemplate.template_name).all()

    @staticmethod
    def get_by_id(template_id: int) -> Optional[AssetTemplate]:
        return db.session.get(AssetTemplate, template_id)

    @staticmethod
    def create(data: Dict) -> AssetTemplate:
        template = AssetTemplate.from_dict(_clean_template_data(data))
        db.session.add(template)
        db.session.commit()
        logger.info(f"Created asset template {template.template_name} (ID: {template.id})")
        return template

    @staticmethod
    def update(template_id: int, data: Dict) -> AssetTemplate:
        template = db.session.get(AssetTemplate, template_id)
        if template is None:
            raise NotFoundError(f"Asset template with ID {template_id} not found")
        values = _clean_template_data(data)
        template.update_from_dict(values, values.keys())
        db.session.commit()
        logger.info(f"Updated asset template {template.template_name} (ID: {template_id})")
        return template

    @staticmethod
    def delete(template_id: int) -> bool:
        template = db.session.get(AssetTemplate, template_id)
        if template is None:
            return False
        db.session.delete(template)
        db.session.commit()
        logger.info(f"Deleted asset template {template_id}")
        return True
