"""
Services Layer
Query, import/export and integration services used by the routes.

Services should:
- Not hold state between requests
- Read from multiple data models to aggregate information
- Raise InventoryError subclasses for expected failures
"""
