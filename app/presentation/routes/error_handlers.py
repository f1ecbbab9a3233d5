"""
JSON error responses.

Every error leaves the API as
{"error": ..., "status_code": ..., "timestamp": ..., "correlation_id": ...}.
"""

from datetime import datetime, timezone

from flask import g, jsonify
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException

from app import db
from app.buisness.core.exceptions import CsvValidationError, InventoryError, NotFoundError
from app.utils.logging_sanitizer import sanitize_exception_message
from app.logger import get_logger

logger = get_logger("inventory.routes.error_handlers")


def error_response(error: str, status_code: int, **extra):
    body = {
        'error': error,
        'status_code': status_code,
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'correlation_id': g.get('correlation_id'),
    }
    body.update(extra)
    return jsonify(body), status_code


def _log(error, status_code: int):
    message = sanitize_exception_message(error)
    if status_code >= 500:
        logger.error(f"Request failed with {status_code}: {type(error).__name__}: {message}", exc_info=error)
    else:
        logger.warning(f"Request failed with {status_code}: {type(error).__name__}: {message}")


def register_error_handlers(app):

    @app.errorhandler(CsvValidationError)
    def handle_csv_validation_error(error):
        _log(error, 400)
        return error_response("CSV file validation failed", 400, message=error.message)

    @app.errorhandler(InventoryError)
    def handle_inventory_error(error):
        _log(error, error.status_code)
        db.session.rollback()
        return error_response(error.message, error.status_code)

    @app.errorhandler(ValueError)
    def handle_value_error(error):
        _log(error, 400)
        db.session.rollback()
        return error_response(str(error), 400)

    @app.errorhandler(KeyError)
    def handle_key_error(error):
        db.session.rollback()
        _log(error, 404)
        return error_response("The requested resource was not found", 404)

    @app.errorhandler(NotFoundError)
    def handle_not_found(error):
        _log(error, 404)
        return error_response(error.message, 404)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error):
        db.session.rollback()
        _log(error, 409)
        return error_response("The resource conflicts with an existing record", 409)

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        _log(error, 500)
        return error_response("A database error occurred", 500)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        _log(error, error.code)
        return error_response(error.description or error.name, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        _log(error, 500)
        return error_response("An unexpected error occurred", 500)
