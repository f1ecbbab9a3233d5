"""
Core models build module
Registers the inventory tables and inserts the reference data
"""

from app import db
from app.logger import get_logger

logger = get_logger("inventory.data.core.build")


def build_models():
    """
    Import every model so it is registered with SQLAlchemy's metadata
    """
    import app.data.core.asset_info.category
    import app.data.core.asset_info.asset_type
    import app.data.core.organization_info.building
    import app.data.core.organization_info.sector
    import app.data.core.organization_info.service
    import app.data.core.asset_info.asset
    import app.data.core.asset_info.asset_template
    import app.data.core.asset_info.lease_contract
    import app.data.core.event_info.asset_event

    logger.info("Core models build completed")


def insert_reference_data():
    """
    Insert categories, asset types, buildings, sectors, services and templates.
    Rows are looked up by code (or template name) so repeated builds are no-ops.
    """
    from app.data.core import seed_data
    from app.data.core.asset_info.category import Category
    from app.data.core.asset_info.asset_type import AssetType
    from app.data.core.asset_info.asset_template import AssetTemplate
    from app.data.core.organization_info.building import Building
    from app.data.core.organization_info.sector import Sector
    from app.data.core.organization_info.service import Service

    categories = {}
    for data in seed_data.CATEGORIES:
        category, _ = Category.find_or_create_from_dict(dict(data, is_active=True), lookup_fields=['code'])
        categories[category.code] = category

    for code, name, sort_order, category_code in seed_data.ASSET_TYPES:
        AssetType.find_or_create_from_dict({
            'code': code,
            'name': name,
            'sort_order': sort_order,
            'category_id': categories[category_code].id,
            'is_active': True,
        }, lookup_fields=['code'])

    for sort_order, (code, name) in enumerate(seed_data.BUILDINGS, start=1):
        Building.find_or_create_from_dict(
            {'code': code, 'name': name, 'sort_order': sort_order, 'is_active': True},
            lookup_fields=['code'])

    sectors = {}
    for sort_order, (code, name) in enumerate(seed_data.SECTORS, start=1):
        sector, _ = Sector.find_or_create_from_dict(
            {'code': code, 'name': name, 'sort_order': sort_order, 'is_active': True},
            lookup_fields=['code'])
        sectors[code] = sector

    for sort_order, (code, name, sector_code) in enumerate(seed_data.SERVICES, start=1):
        Service.find_or_create_from_dict({
            'code': code,
            'name': name,
            'sector_id': sectors[sector_code].id,
            'sort_order': sort_order,
            'is_active': True,
        }, lookup_fields=['code'])

    for data in seed_data.ASSET_TEMPLATES:
        AssetTemplate.find_or_create_from_dict(dict(data, is_active=True), lookup_fields=['template_name'])

    db.session.commit()
    logger.info("Reference data verified")
