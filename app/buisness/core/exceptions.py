"""
Domain exceptions for the inventory.

Routes and services raise these; app/presentation/routes/error_handlers.py
maps them onto HTTP responses.
"""


class InventoryError(Exception):
    """Base class for all inventory errors"""
    status_code = 500

    def __init__(self, message: str = None):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__


class ValidationError(InventoryError, ValueError):
    """Request data failed validation"""
    status_code = 400


class NotFoundError(InventoryError, LookupError):
    """Requested resource was not found"""
    status_code = 404


class ConflictError(InventoryError):
    """Resource already exists"""
    status_code = 409


class CsvValidationError(InventoryError):
    """CSV file validation failed"""
    status_code = 400


class ExternalServiceError(InventoryError):
    """Upstream service call failed"""
    status_code = 502
