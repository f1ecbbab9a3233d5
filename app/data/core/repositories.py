"""
Reference-data repositories

Thin CRUD wrappers over the lookup tables (buildings, categories, sectors,
services, asset types). Deletes are soft: rows are marked inactive so assets
that still point at them keep their history.
"""

from typing import List, Optional

from sqlalchemy import func

from app import db
from app.data.core.asset_info.asset_type import AssetType
from app.data.core.asset_info.category import Category
from app.data.core.organization_info.building import Building
from app.data.core.organization_info.sector import Sector
from app.data.core.organization_info.service import Service
from app.logger import get_logger

logger = get_logger("inventory.data.core.repositories")


class ReferenceRepository:
    """CRUD operations shared by all code/name/sort_order lookup tables"""

    model = None
    updatable_fields = ('name', 'is_active', 'sort_order')

    def base_query(self):
        return self.model.query

    def get_all(self, include_inactive: bool = False) -> List:
        query = self.base_query()
        if not include_inactive:
            query = query.filter(self.model.is_active.is_(True))
        return query.order_by(self.model.sort_order, self.model.name).all()

    def get_by_id(self, entity_id: int):
        return db.session.get(self.model, entity_id)

    def get_by_code(self, code: str, active_only: bool = False):
        if not code:
            return None
        query = self.model.query.filter(func.upper(self.model.code) == code.strip().upper())
        if active_only:
            query = query.filter(self.model.is_active.is_(True))
        return query.first()

    def code_exists(self, code: str, exclude_id: Optional[int] = None) -> bool:
        query = self.model.query.filter(func.upper(self.model.code) == code.strip().upper())
        if exclude_id is not None:
            query = query.filter(self.model.id != exclude_id)
        return db.session.query(query.exists()).scalar()

    def create(self, entity):
        entity.code = entity.code.strip().upper()
        db.session.add(entity)
        db.session.commit()
        logger.info(f"Created {self.model.__name__} {entity.code} (ID: {entity.id})")
        return entity

    def update(self, entity, data: dict):
        entity.update_from_dict(data, self.updatable_fields)
        db.session.commit()
        logger.info(f"Updated {self.model.__name__} {entity.code} (ID: {entity.id})")
        return entity

    def delete(self, entity_id: int) -> bool:
        entity = self.get_by_id(entity_id)
        if entity is None:
            return False
        entity.is_active = False
        db.session.commit()
        logger.info(f"Deactivated {self.model.__name__} {entity.code} (ID: {entity_id})")
        return True


class BuildingRepository(ReferenceRepository):
    model = Building
    updatable_fields = ('name', 'address', 'is_active', 'sort_order')


class SectorRepository(ReferenceRepository):
    model = Sector


class ServiceRepository(ReferenceRepository):
    model = Service
    updatable_fields = ('name', 'sector_id', 'is_active', 'sort_order')

    def get_all(self, include_inactive: bool = False, sector_id: Optional[int] = None) -> List:
        query = self.base_query()
        if not include_inactive:
            query = query.filter(Service.is_active.is_(True))
        if sector_id is not None:
            query = query.filter(Service.sector_id == sector_id)
        return query.order_by(Service.sort_order, Service.name).all()


class CategoryRepository(ReferenceRepository):
    model = Category
    updatable_fields = ('code', 'name', 'description', 'is_active', 'sort_order')

    def update(self, entity, data: dict):
        if data.get('code'):
            data = dict(data, code=data['code'].strip().upper())
        return super().update(entity, data)


class AssetTypeRepository(ReferenceRepository):
    model = AssetType
    updatable_fields = ('name', 'description', 'category_id', 'is_active', 'sort_order')
