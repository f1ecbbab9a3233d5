#!/usr/bin/env python3
"""
Database build orchestrator for the inventory
Creates the tables and inserts the reference data
"""

from app import create_app, db
from app.logger import get_logger

logger = get_logger("inventory.build")


def build_database(seed_data=True, app=None):
    """
    Create all tables and, unless disabled, insert the reference data.

    Args:
        seed_data (bool): Insert asset types, categories, buildings, sectors,
            services and asset templates (idempotent)
        app (Flask, optional): Existing application; one is created when omitted
    """
    app = app or create_app()
    with app.app_context():
        from app.data.core.build import build_models, insert_reference_data

        logger.info("Building database tables")
        build_models()
        db.create_all()

        if seed_data:
            logger.info("Inserting reference data")
            insert_reference_data()
        else:
            logger.info("Skipping reference data (--no-seed-data)")

    logger.info("Database build completed")
    return app
