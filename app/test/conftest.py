"""
Pytest configuration and fixtures for the inventory API tests
"""
import io
import json
import os
import time
from types import SimpleNamespace
from unittest.mock import MagicMock
from urllib.error import HTTPError

import jwt
import pytest
from flask import g, has_app_context
from flask.testing import FlaskClient

TEST_TENANT_ID = '11111111-1111-1111-1111-111111111111'
TEST_CLIENT_ID = '22222222-2222-2222-2222-222222222222'
TEST_SIGNING_KEY = 'inventory-test-signing-key-0123456789abcdef'

# The factory reads its configuration from the environment
os.environ['SECRET_KEY'] = 'test_secret_key_for_inventory_tests'
os.environ['APP_ENV'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['RATELIMIT_ENABLED'] = 'false'
os.environ['ENABLE_HTTPS'] = 'true'
os.environ['KEY_VAULT_URI'] = ''
os.environ['AZURE_AD_TENANT_ID'] = TEST_TENANT_ID
os.environ['AZURE_AD_CLIENT_ID'] = TEST_CLIENT_ID
os.environ['AZURE_AD_CLIENT_SECRET'] = 'test-client-secret'

from app import create_app
from app import db as _db
from app.auth import EntraTokenValidator
from app.build import build_database
from app.data.core.asset_info.asset import Asset
from app.data.core.asset_info.asset_type import AssetType
from app.data.core.asset_info.lease_contract import LeaseContract
from app.data.core.event_info.asset_event import AssetEvent
from app.services.integrations.graph_client import GraphClient


class RequestIsolatedClient(FlaskClient):
    """
    Test client whose requests start with an empty flask.g.

    Each test pushes one app context and requests reuse it, so values cached on
    g (the Flask-Login user, the correlation id) would otherwise carry over
    from the previous request.
    """

    def open(self, *args, **kwargs):
        if has_app_context():
            for name in list(g):
                g.pop(name)
        return super().open(*args, **kwargs)


class StaticTokenProvider:
    """Token provider that never calls the identity platform"""

    is_configured = True

    def get_token(self):
        return 'test-access-token'


def _make_token(roles=(), name='Test User', email='test.user@example.org', **overrides):
    now = int(time.time())
    claims = {
        'oid': 'aaaaaaaa-0000-0000-0000-000000000001',
        'sub': 'test-subject',
        'name': name,
        'preferred_username': email,
        'roles': list(roles),
        'aud': f'api://{TEST_CLIENT_ID}',
        'iss': f'https://login.microsoftonline.com/{TEST_TENANT_ID}/v2.0',
        'iat': now,
        'exp': now + 3600,
    }
    claims.update(overrides)
    return jwt.encode(claims, TEST_SIGNING_KEY, algorithm='HS256')


def _json_response(payload):
    response = MagicMock()
    response.read.return_value = json.dumps(payload).encode('utf-8')
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    return response


def _http_error(url, status_code, message):
    body = json.dumps({'error': {'code': 'Error', 'message': message}}).encode('utf-8')
    return HTTPError(url, status_code, message, hdrs=None, fp=io.BytesIO(body))


@pytest.fixture(scope='session')
def app():
    """Create Flask application with an in-memory database and reference data"""
    app = create_app()
    app.config['TESTING'] = True
    app.extensions['token_validator'] = EntraTokenValidator(
        TEST_TENANT_ID, TEST_CLIENT_ID, signing_key=TEST_SIGNING_KEY)
    app.extensions['graph_client'] = GraphClient(StaticTokenProvider())
    app.test_client_class = RequestIsolatedClient

    with app.app_context():
        build_database(seed_data=True, app=app)
    return app


@pytest.fixture(autouse=True)
def app_context(app):
    """Fresh application context (and database session) for every test"""
    with app.app_context():
        yield


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    return app.test_client()


@pytest.fixture(autouse=True)
def clean_assets(app_context):
    """Remove assets (and their events and leases) created by a test"""
    yield
    _db.session.rollback()
    AssetEvent.query.delete()
    LeaseContract.query.delete()
    Asset.query.delete()
    _db.session.commit()


@pytest.fixture
def make_token():
    """Factory for HS256 tokens accepted by the test validator"""
    return _make_token


@pytest.fixture
def auth_headers():
    return {'Authorization': f'Bearer {_make_token()}'}


@pytest.fixture
def admin_headers():
    return {'Authorization': f'Bearer {_make_token(roles=["Admin"], name="Admin User")}'}


@pytest.fixture
def laptop_type(app):
    return AssetType.query.filter_by(code='LAP').one()


@pytest.fixture
def monitor_type(app):
    return AssetType.query.filter_by(code='MON').one()


@pytest.fixture
def graph_api(monkeypatch):
    """
    Canned Microsoft Graph responses.

    Add entries to `routes` as {url fragment: (status code, payload)}; the first
    fragment found in the request URL wins. Unmatched requests get a 404.
    Every request made is appended to `requests`.
    """
    fake = SimpleNamespace(routes={}, requests=[])

    def fake_urlopen(request, timeout=None):
        fake.requests.append(request)
        for fragment, (status_code, payload) in fake.routes.items():
            if fragment in request.full_url:
                if status_code >= 400:
                    raise _http_error(request.full_url, status_code, payload)
                return _json_response(payload)
        raise _http_error(request.full_url, 404, 'Resource not found')

    monkeypatch.setattr('app.services.integrations.graph_client.urlopen', fake_urlopen)
    return fake
