"""
Core models package for the inventory
"""

from .asset_info.category import Category
from .asset_info.asset_type import AssetType
from .organization_info.building import Building
from .organization_info.sector import Sector
from .organization_info.service import Service
from .asset_info.asset import Asset
from .asset_info.asset_template import AssetTemplate
from .asset_info.lease_contract import LeaseContract
from .event_info.asset_event import AssetEvent
from .enums import AssetStatus, AssetEventType, LeaseStatus

__all__ = [
    'Category',
    'AssetType',
    'Building',
    'Sector',
    'Service',
    'Asset',
    'AssetTemplate',
    'LeaseContract',
    'AssetEvent',
    'AssetStatus',
    'AssetEventType',
    'LeaseStatus',
]
