"""
Entra ID bearer-token authentication.

Flask-Login's request_loader validates the `Authorization: Bearer <jwt>` header
on every request; there is no server-side session. The validator lives in
app.extensions['token_validator'] so tests can swap in an HS256 validator.
"""

from datetime import datetime, timezone
from functools import wraps

import jwt
from flask import Blueprint, abort, current_app, jsonify
from flask_login import UserMixin, current_user, login_required

from app import login_manager
from app.presentation.routes.error_handlers import error_response
from app.logger import get_logger

logger = get_logger("inventory.auth")
user_bp = Blueprint('user', __name__)

ADMIN_ROLES = ('Admin', 'Global Administrator')
LOGIN_AUTHORITY = "https://login.microsoftonline.com"
API_VERSION = "1.0"


class EntraUser(UserMixin):
    """Authenticated caller built from validated token claims"""

    def __init__(self, claims: dict):
        self.claims = claims
        self.id = claims.get('oid') or claims.get('sub')
        self.name = claims.get('name') or claims.get('preferred_username')
        self.email = claims.get('email') or claims.get('preferred_username') or claims.get('upn')
        roles = claims.get('roles') or []
        self.roles = [roles] if isinstance(roles, str) else list(roles)

    @property
    def is_admin(self) -> bool:
        return any(role in ADMIN_ROLES for role in self.roles)

    def __repr__(self):
        return f'<EntraUser {self.name} ({self.id})>'


class EntraTokenValidator:
    """
    Validates access tokens issued by Entra ID.

    Signatures are checked against the tenant's JWKS (RS256). Passing
    signing_key switches to a fixed symmetric key, used by the test suite.
    """

    def __init__(self, tenant_id: str, client_id: str, audience: str = None,
                 signing_key: str = None, algorithms=None):
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.audiences = [audience] if audience else [f"api://{client_id}", client_id]
        self.issuers = [
            f"{LOGIN_AUTHORITY}/{tenant_id}/v2.0",
            f"https://sts.windows.net/{tenant_id}/",
        ]
        self.signing_key = signing_key
        if signing_key:
            self.algorithms = algorithms or ['HS256']
            self._jwks_client = None
        else:
            self.algorithms = algorithms or ['RS256']
            self._jwks_client = jwt.PyJWKClient(f"{LOGIN_AUTHORITY}/{tenant_id}/discovery/v2.0/keys")

    def decode(self, token: str) -> dict:
        """
        Raises:
            jwt.PyJWTError: invalid signature, audience, issuer or expired token
        """
        key = self.signing_key or self._jwks_client.get_signing_key_from_jwt(token).key
        claims = jwt.decode(token, key, algorithms=self.algorithms, audience=self.audiences,
                            options={"require": ["exp", "iss"]})
        if claims.get('iss') not in self.issuers:
            raise jwt.InvalidIssuerError(f"Invalid issuer: {claims.get('iss')}")
        return claims


def create_token_validator(app):
    """Validator for the configured tenant, or None when Entra ID is not configured"""
    tenant_id = app.config.get('AZURE_AD_TENANT_ID')
    client_id = app.config.get('AZURE_AD_CLIENT_ID')
    if not tenant_id or not client_id:
        logger.warning("Azure AD tenant/client id not configured; bearer tokens will be rejected")
        return None
    return EntraTokenValidator(tenant_id, client_id, app.config.get('AZURE_AD_AUDIENCE') or None)


@login_manager.request_loader
def load_user_from_request(request):
    header = request.headers.get('Authorization', '')
    if not header.lower().startswith('bearer '):
        return None
    validator = current_app.extensions.get('token_validator')
    if validator is None:
        return None
    try:
        claims = validator.decode(header[7:].strip())
    except jwt.PyJWTError as e:
        logger.warning(f"Rejected bearer token: {e}")
        return None
    return EntraUser(claims)


@login_manager.unauthorized_handler
def unauthorized():
    return error_response("Authentication required", 401)


def admin_required(f):
    """Requires the Admin or Global Administrator role"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return login_manager.unauthorized()
        if not current_user.is_admin:
            logger.warning(f"User {current_user.name} denied access to admin endpoint")
            abort(403)
        return f(*args, **kwargs)
    return decorated_function


def current_actor():
    """(display name, email) of the caller for audit rows"""
    if current_user and current_user.is_authenticated:
        return current_user.name or 'System', current_user.email
    return 'System', None


def _utc_timestamp():
    return datetime.now(timezone.utc).isoformat()


@user_bp.route('/test-auth')
@login_required
def test_auth():
    return jsonify({
        'message': "You are authenticated!",
        'timestamp': _utc_timestamp(),
        'authenticated': True,
    })


@user_bp.route('/me')
@login_required
def me():
    logger.debug(f"User info requested by {current_user.name}")
    return jsonify({
        'user_id': current_user.id,
        'user_name': current_user.name,
        'email': current_user.email,
        'roles': current_user.roles,
        'claims': [{'type': key, 'value': value} for key, value in current_user.claims.items()],
        'is_authenticated': True,
        'authentication_type': 'Bearer',
    })


@user_bp.route('/claims')
@login_required
def claims():
    items = [{'type': key, 'value': value} for key, value in current_user.claims.items()]
    return jsonify({'total_claims': len(items), 'claims': items})


@user_bp.route('/admin-only')
@admin_required
def admin_only():
    return jsonify({'message': "You have admin access!", 'timestamp': _utc_timestamp()})


@user_bp.route('/public')
def public():
    return jsonify({
        'message': "This is a public endpoint",
        'timestamp': _utc_timestamp(),
        'api_version': API_VERSION,
        'authenticated': current_user.is_authenticated,
    })
