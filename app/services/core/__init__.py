"""
Core Services
Query services for assets, the audit trail, leases and templates.

These services handle:
- Query building, filtering and pagination
- Validation of incoming data before it reaches the models
- Commit/rollback of the unit of work
"""

from .asset_service import AssetService
from .asset_event_service import AssetEventService
from .lease_service import LeaseService
from .template_service import TemplateService
