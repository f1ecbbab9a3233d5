"""
Routes package for the inventory API
Blueprints are imported inside init_app so the auth module can use the
error helpers in this package without an import cycle.
"""

from app.logger import get_logger

logger = get_logger("inventory.routes")


def init_app(app):
    """Register all blueprints with the Flask app"""
    from app import limiter
    from app.auth import user_bp
    from app.presentation.routes import health
    from app.presentation.routes.api import (
        asset_events,
        asset_templates,
        assets,
        csv_import,
        exports,
        graph,
        intune,
        lease_contracts,
        qr_codes,
        reference_data,
    )

    logger.debug("Initializing route blueprints")

    app.register_blueprint(health.bp)
    limiter.exempt(health.bp)

    app.register_blueprint(user_bp, url_prefix='/api/user')
    app.register_blueprint(assets.bp, url_prefix='/api/assets')
    app.register_blueprint(asset_events.bp, url_prefix='/api/assetevents')
    app.register_blueprint(lease_contracts.bp, url_prefix='/api/leasecontracts')
    app.register_blueprint(asset_templates.bp, url_prefix='/api/assettemplates')
    app.register_blueprint(reference_data.bp, url_prefix='/api/admin')
    app.register_blueprint(qr_codes.bp, url_prefix='/api/qrcode')
    app.register_blueprint(csv_import.bp, url_prefix='/api/csvimport')
    app.register_blueprint(exports.bp, url_prefix='/api/export')
    app.register_blueprint(graph.bp, url_prefix='/api/graph')
    app.register_blueprint(intune.bp, url_prefix='/api/intune')

    logger.info(f"Registered {len(app.blueprints)} blueprints")
