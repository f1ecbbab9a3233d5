import sqlite3
import uuid

from flask import Flask, g, request
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from sqlalchemy import event
from sqlalchemy.engine import Engine

from app.logger import get_logger

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://"  # Use Redis when running more than one worker
)

CORRELATION_HEADER = 'X-Correlation-ID'
CORS_ALLOWED_HEADERS = 'Authorization, Content-Type, X-Correlation-ID'
CORS_ALLOWED_METHODS = 'GET, POST, PUT, DELETE, OPTIONS'


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores ON DELETE rules unless foreign keys are switched on per connection"""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_app():
    from app.config import configure_app

    app = Flask(__name__)

    logger = get_logger("inventory")
    logger.info("Initializing Flask application")

    configure_app(app)
    logger.debug(f"Environment: {app.config['APP_ENV']}")

    # Registered before the rate limiter so a 429 still carries the correlation id
    @app.before_request
    def assign_correlation_id():
        """Reuse the caller's X-Correlation-ID or start a new one"""
        g.correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        if request.method == 'OPTIONS':
            return app.make_default_options_response()
        return None

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    login_manager.session_protection = None
    limiter.init_app(app)
    logger.debug("Extensions initialized")

    # Import models to ensure they're registered with SQLAlchemy
    from app.data.core.build import build_models
    build_models()
    logger.debug("Models imported and registered")

    from app.auth import create_token_validator
    app.extensions['token_validator'] = create_token_validator(app)

    from app.presentation.routes import init_app as init_routes
    from app.presentation.routes.error_handlers import register_error_handlers
    register_error_handlers(app)
    init_routes(app)

    @app.after_request
    def apply_cors(response):
        origin = request.headers.get('Origin')
        if origin and origin in app.config['CORS_ALLOWED_ORIGINS']:
            response.headers['Access-Control-Allow-Origin'] = origin
            response.headers['Access-Control-Allow-Credentials'] = 'true'
            response.headers['Access-Control-Allow-Headers'] = CORS_ALLOWED_HEADERS
            response.headers['Access-Control-Allow-Methods'] = CORS_ALLOWED_METHODS
            response.headers['Access-Control-Expose-Headers'] = CORRELATION_HEADER
            response.vary.add('Origin')
        return response

    @app.after_request
    def set_security_headers(response):
        """Add correlation and security headers to all responses"""
        response.headers[CORRELATION_HEADER] = g.get('correlation_id', '')

        # Prevent clickjacking
        response.headers['X-Frame-Options'] = 'DENY'

        # Prevent MIME-sniffing
        response.headers['X-Content-Type-Options'] = 'nosniff'

        # JSON API: nothing may be loaded or framed
        response.headers['Content-Security-Policy'] = "default-src 'none'; frame-ancestors 'none'"
        response.headers['Referrer-Policy'] = 'no-referrer'

        if app.config.get('ENABLE_HTTPS'):
            # max-age=31536000 (1 year), includeSubDomains applies to all subdomains
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        return response

    logger.info("Flask application initialization complete")

    return app
