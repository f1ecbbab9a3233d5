"""
Generic data insertion mixin for SQLAlchemy models
Provides from_dict and to_dict methods used by the seed builder and the JSON API

LAYER PLACEMENT:
This mixin belongs in the business layer (app/buisness/core/) because it adds
serialization behaviour to models rather than table structure.
"""

from app import db
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from sqlalchemy import inspect
from app.logger import get_logger

logger = get_logger("inventory.buisness.core.data_insertion")

AUDIT_FIELDS = ('created_at', 'updated_at')


def serialize_value(value):
    """Convert a column value into something jsonify can emit"""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return value.name
    return value


class DataInsertionMixin:
    """
    Mixin that provides generic data insertion capabilities for SQLAlchemy models

    This mixin adds:
    - from_dict(): Create model instance from dictionary
    - to_dict(): Convert model instance to dictionary
    - update_from_dict(): Apply a partial update from a dictionary
    - find_or_create_from_dict(): Idempotent insert used by the seed builder
    """

    @classmethod
    def from_dict(cls, data_dict, skip_fields=None):
        """
        Create a model instance from a dictionary

        Args:
            data_dict (dict): Dictionary containing model data
            skip_fields (list, optional): Fields to skip during creation

        Returns:
            Model instance (not saved to database)
        """
        if skip_fields is None:
            skip_fields = []

        mapper = inspect(cls)
        columns = {c.key for c in mapper.columns}

        filtered_data = {}
        for key, value in data_dict.items():
            if key not in columns or key in skip_fields:
                continue
            if key in AUDIT_FIELDS and value is None:
                continue
            filtered_data[key] = value

        return cls(**filtered_data)

    def update_from_dict(self, data_dict, allowed_fields):
        """
        Copy the allowed keys present in data_dict onto the instance

        Returns:
            dict: {field: (old_value, new_value)} for the fields that changed
        """
        changes = {}
        for field in allowed_fields:
            if field not in data_dict:
                continue
            old_value = getattr(self, field)
            new_value = data_dict[field]
            if old_value != new_value:
                setattr(self, field, new_value)
                changes[field] = (old_value, new_value)
        return changes

    def to_dict(self, include_audit_fields=True):
        """
        Convert model instance to dictionary

        Args:
            include_audit_fields (bool): Whether to include created_at/updated_at

        Returns:
            dict: Dictionary representation of the model
        """
        result = {}
        mapper = inspect(self.__class__)

        for column in mapper.columns:
            if not include_audit_fields and column.key in AUDIT_FIELDS:
                continue
            result[column.key] = serialize_value(getattr(self, column.key))

        return result

    @classmethod
    def find_or_create_from_dict(cls, data_dict, lookup_fields, commit=False):
        """
        Find existing instance or create new one from dictionary

        Args:
            data_dict (dict): Dictionary containing model data
            lookup_fields (list): Fields to use for lookup
            commit (bool): Whether to commit the transaction

        Returns:
            tuple: (instance, created) where created is boolean
        """
        lookup_data = {field: data_dict[field] for field in lookup_fields if field in data_dict}
        existing = cls.query.filter_by(**lookup_data).first() if lookup_data else None
        if existing:
            return existing, False

        instance = cls.from_dict(data_dict)
        try:
            db.session.add(instance)
            if commit:
                db.session.commit()
            else:
                db.session.flush()
            logger.debug(f"Created {cls.__name__}: {instance}")
            return instance, True
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error creating {cls.__name__}: {e}")
            raise
