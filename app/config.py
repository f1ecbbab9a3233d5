"""
Application configuration.

All settings come from environment variables (optionally loaded from .env by the
run script) and, when KEY_VAULT_URI is set, from Azure Key Vault.
"""

import os
from pathlib import Path

from app.logger import get_logger

logger = get_logger("inventory.config")

TRUE_VALUES = ('true', '1', 'yes', 'on')

# Key Vault configuration key -> Flask config key
KEY_VAULT_CONFIG_MAP = {
    'AzureAd:ClientSecret': 'AZURE_AD_CLIENT_SECRET',
    'AzureAd:ClientId': 'AZURE_AD_CLIENT_ID',
    'AzureAd:TenantId': 'AZURE_AD_TENANT_ID',
    'ConnectionStrings:DefaultConnection': 'SQLALCHEMY_DATABASE_URI',
}

REQUIRED_SECRETS = {
    'AzureAd:ClientSecret': 'AZURE_AD_CLIENT_SECRET',
    'ConnectionStrings:DefaultConnection': 'SQLALCHEMY_DATABASE_URI',
    'AzureAd:TenantId': 'AZURE_AD_TENANT_ID',
    'AzureAd:ClientId': 'AZURE_AD_CLIENT_ID',
}

DEVELOPMENT_ORIGINS = [
    'http://localhost:5173',
    'https://localhost:5173',
    'http://localhost:5174',
    'https://localhost:5174',
]


def env_flag(name, default='False'):
    return os.environ.get(name, default).lower() in TRUE_VALUES


def configure_app(app):
    """Populate app.config from the environment and Key Vault, then validate it."""
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')
    if not app.config['SECRET_KEY']:
        logger.critical("SECRET_KEY not set in environment! Application cannot start.")
        raise RuntimeError("SECRET_KEY environment variable is required")

    app.config['APP_ENV'] = os.environ.get('APP_ENV', 'production').lower()

    database_url = os.environ.get('DATABASE_URL')
    if database_url:
        app.config['SQLALCHEMY_DATABASE_URI'] = database_url
        app.config['DATABASE_URL_FROM_ENV'] = True
    else:
        instance_dir = Path(__file__).parent.parent / 'instance'
        instance_dir.mkdir(parents=True, exist_ok=True)
        default_db_path = instance_dir / 'inventory.db'
        app.config['SQLALCHEMY_DATABASE_URI'] = f"sqlite:///{str(default_db_path.resolve())}"
        app.config['DATABASE_URL_FROM_ENV'] = False
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    # Entra ID app registration
    app.config['AZURE_AD_TENANT_ID'] = os.environ.get('AZURE_AD_TENANT_ID', '')
    app.config['AZURE_AD_CLIENT_ID'] = os.environ.get('AZURE_AD_CLIENT_ID', '')
    app.config['AZURE_AD_CLIENT_SECRET'] = os.environ.get('AZURE_AD_CLIENT_SECRET', '')
    app.config['AZURE_AD_AUDIENCE'] = os.environ.get('AZURE_AD_AUDIENCE', '')
    app.config['KEY_VAULT_URI'] = os.environ.get('KEY_VAULT_URI', '')

    origins = os.environ.get('CORS_ALLOWED_ORIGINS', '')
    app.config['CORS_ALLOWED_ORIGINS'] = [o.strip() for o in origins.split(',') if o.strip()]

    app.config['RATELIMIT_DEFAULT'] = os.environ.get('RATELIMIT_DEFAULT', '100 per minute')
    app.config['RATELIMIT_BULK'] = os.environ.get('RATELIMIT_BULK', '10 per minute')
    app.config['RATELIMIT_ENABLED'] = env_flag('RATELIMIT_ENABLED', 'True')

    app.config['CSV_MAX_UPLOAD_BYTES'] = int(os.environ.get('CSV_MAX_UPLOAD_BYTES', str(5 * 1024 * 1024)))
    app.config['ENABLE_HTTPS'] = env_flag('ENABLE_HTTPS', 'True')
    app.config['JSON_SORT_KEYS'] = False

    if app.config['KEY_VAULT_URI']:
        load_key_vault_secrets(app)

    if app.config['APP_ENV'] == 'development':
        app.config['CORS_ALLOWED_ORIGINS'] = DEVELOPMENT_ORIGINS + app.config['CORS_ALLOWED_ORIGINS']
    elif app.config['APP_ENV'] != 'testing':
        validate_required_secrets(app)

    if app.config['ENABLE_HTTPS']:
        logger.info("HTTPS enforcement enabled")
    else:
        logger.warning("HTTPS enforcement DISABLED - acceptable for development only")


def load_key_vault_secrets(app):
    from app.services.integrations.key_vault import KeyVaultSecretLoader

    logger.info(f"Loading configuration from Key Vault {app.config['KEY_VAULT_URI']}")
    loader = KeyVaultSecretLoader(
        app.config['KEY_VAULT_URI'],
        app.config['AZURE_AD_TENANT_ID'],
        app.config['AZURE_AD_CLIENT_ID'],
        app.config['AZURE_AD_CLIENT_SECRET'],
    )
    secrets = loader.load()
    for secret_key, config_key in KEY_VAULT_CONFIG_MAP.items():
        if secrets.get(secret_key):
            app.config[config_key] = secrets[secret_key]
            if config_key == 'SQLALCHEMY_DATABASE_URI':
                app.config['DATABASE_URL_FROM_ENV'] = True


def validate_required_secrets(app):
    """
    Outside development every required secret must be present.

    Raises:
        RuntimeError: listing the missing secret names
    """
    missing = []
    for secret_key, config_key in REQUIRED_SECRETS.items():
        if config_key == 'SQLALCHEMY_DATABASE_URI':
            if not app.config.get('DATABASE_URL_FROM_ENV'):
                missing.append(secret_key)
        elif not app.config.get(config_key):
            missing.append(secret_key)

    if missing:
        logger.critical(f"Required configuration missing: {', '.join(missing)}")
        raise RuntimeError(f"Required configuration missing: {', '.join(missing)}")
