"""
Tests for the Microsoft Graph user lookup and Intune device endpoints.
Graph traffic is served by the graph_api fixture; nothing leaves the process.
"""

from unittest.mock import MagicMock
from urllib.parse import unquote

import pytest

from app.buisness.core.exceptions import ExternalServiceError, ValidationError
from app.services.integrations import graph_client as graph_module
from app.services.integrations.graph_client import (
    ClientCredentialsTokenProvider,
    GraphClient,
    GraphRequestError,
    get_graph_client,
)
from app.services.integrations.graph_user_service import GraphUserService
from app.services.integrations.intune_service import DEVICES_PATH, IntuneService

DEVICE_ID = '0f8fad5b-d9cb-469f-a165-70867728950e'

JAN = {
    'id': 'user-1',
    'displayName': 'Jan Janssen',
    'userPrincipalName': 'jan.janssen@example.org',
    'mail': 'jan.janssen@example.org',
    'department': 'Dienst IT',
    'jobTitle': 'Systeembeheerder',
    'businessPhones': ['+32 11 00 00 00'],
}

DEVICES = [
    {'id': 'd1', 'deviceName': 'LAP-24-DBK-00001', 'operatingSystem': 'Windows',
     'complianceState': 'compliant', 'lastSyncDateTime': '2024-05-02T10:00:00Z'},
    {'id': 'd2', 'deviceName': 'LAP-24-DBK-00002', 'operatingSystem': 'Windows',
     'complianceState': 'noncompliant', 'lastSyncDateTime': '2024-05-03T10:00:00Z'},
    {'id': 'd3', 'deviceName': 'iPad-Balie', 'operatingSystem': 'iOS',
     'complianceState': 'compliant', 'lastSyncDateTime': None},
]


@pytest.fixture
def graph_client(app):
    return get_graph_client()


def test_search_users(client, auth_headers, graph_api):
    graph_api.routes['/users?'] = (200, {'value': [JAN]})

    response = client.get('/api/graph/users/search?query=jan&top=5', headers=auth_headers)
    assert response.status_code == 200
    users = response.get_json()
    assert users[0]['display_name'] == 'Jan Janssen'
    assert users[0]['user_principal_name'] == 'jan.janssen@example.org'
    assert users[0]['business_phones'] == ['+32 11 00 00 00']

    request = graph_api.requests[0]
    url = unquote(request.full_url)
    assert '"displayName:jan" OR "mail:jan" OR "userPrincipalName:jan"' in url
    assert '$top=5' in url
    assert request.get_header('Consistencylevel') == 'eventual'
    assert request.get_header('Authorization') == 'Bearer test-access-token'


def test_search_users_validation(client, auth_headers, graph_client):
    service = GraphUserService(graph_client)
    with pytest.raises(ValidationError, match='cannot be empty'):
        service.search_users('  ')
    with pytest.raises(ValidationError, match='at least 2'):
        service.search_users('j')
    with pytest.raises(ValidationError, match='Top parameter'):
        service.search_users('jan', top=51)
    with pytest.raises(ValidationError):
        service.search_users("jan'; --")

    assert client.get('/api/graph/users/search?query=j', headers=auth_headers).status_code == 400


def test_user_lookups(client, auth_headers, graph_api):
    graph_api.routes['/users/user-1/manager'] = (200, dict(JAN, id='boss', displayName='Chef'))
    graph_api.routes['/users/user-1'] = (200, JAN)
    graph_api.routes['/users/jan.janssen@example.org'] = (200, JAN)

    assert client.get('/api/graph/users/user-1', headers=auth_headers).get_json()['id'] == 'user-1'
    manager = client.get('/api/graph/users/user-1/manager', headers=auth_headers).get_json()
    assert manager['display_name'] == 'Chef'
    by_upn = client.get('/api/graph/users/upn/jan.janssen@example.org', headers=auth_headers)
    assert by_upn.get_json()['mail'] == 'jan.janssen@example.org'

    assert client.get('/api/graph/users/unknown', headers=auth_headers).status_code == 404
    assert client.get('/api/graph/users/unknown/manager', headers=auth_headers).status_code == 404


def test_graph_failure_maps_to_bad_gateway(client, auth_headers, graph_api):
    graph_api.routes['/users'] = (503, 'Service unavailable')
    response = client.get('/api/graph/users/search?query=jan', headers=auth_headers)
    assert response.status_code == 502
    assert 'Service unavailable' in response.get_json()['error']


def test_graph_requires_authentication(client):
    assert client.get('/api/graph/users/search?query=jan').status_code == 401
    assert client.get('/api/intune/devices').status_code == 401


def test_list_and_filter_devices(client, auth_headers, graph_api):
    graph_api.routes[DEVICES_PATH] = (200, {'value': DEVICES})

    devices = client.get('/api/intune/devices', headers=auth_headers).get_json()
    assert len(devices) == 3
    assert '$top=999' in graph_api.requests[-1].full_url

    client.get('/api/intune/devices/search?name=LAP', headers=auth_headers)
    assert "startswith(deviceName, 'LAP')" in unquote(graph_api.requests[-1].full_url)

    client.get('/api/intune/devices/os/Windows', headers=auth_headers)
    assert "operatingSystem eq 'Windows'" in unquote(graph_api.requests[-1].full_url)

    device = client.get('/api/intune/devices/serial/SN123', headers=auth_headers).get_json()
    assert device['id'] == 'd1'
    assert "serialNumber eq 'SN123'" in unquote(graph_api.requests[-1].full_url)


def test_device_filter_injection_is_rejected(client, auth_headers, graph_api):
    response = client.get('/api/intune/devices/search', query_string={'name': "x' or 1 eq 1"},
                          headers=auth_headers)
    assert response.status_code == 400
    assert response.get_json()['error'] == "Search name contains invalid characters"
    assert client.get('/api/intune/devices/search', headers=auth_headers).status_code == 400
    assert graph_api.requests == []


def test_device_by_serial_not_found(client, auth_headers, graph_api):
    graph_api.routes[DEVICES_PATH] = (200, {'value': []})
    assert client.get('/api/intune/devices/serial/NOPE', headers=auth_headers).status_code == 404


def test_device_by_id(client, auth_headers, graph_api):
    graph_api.routes[f'{DEVICES_PATH}/{DEVICE_ID}'] = (200, dict(DEVICES[0], id=DEVICE_ID,
                                                                 totalStorageSpaceInBytes=256))
    device = client.get(f'/api/intune/devices/{DEVICE_ID}', headers=auth_headers).get_json()
    assert device['totalStorageSpaceInBytes'] == 256

    other = '1b4e28ba-2fa1-11d2-883f-0016d3cca427'
    assert client.get(f'/api/intune/devices/{other}', headers=auth_headers).status_code == 404
    assert client.get('/api/intune/devices/not-a-guid', headers=auth_headers).status_code == 400


def test_device_compliance(client, auth_headers, graph_api):
    graph_api.routes[f'{DEVICES_PATH}/{DEVICE_ID}'] = (200, {'id': DEVICE_ID, 'complianceState': 'compliant'})
    body = client.get(f'/api/intune/devices/{DEVICE_ID}/compliance', headers=auth_headers).get_json()
    assert body['device_id'] == DEVICE_ID
    assert body['is_compliant'] is True
    assert 'checked_at' in body

    unknown = '1b4e28ba-2fa1-11d2-883f-0016d3cca427'
    body = client.get(f'/api/intune/devices/{unknown}/compliance', headers=auth_headers).get_json()
    assert body['is_compliant'] is False


def test_device_statistics(graph_client, graph_api):
    graph_api.routes[DEVICES_PATH] = (200, {'value': DEVICES})
    stats = IntuneService(graph_client).get_statistics()

    assert stats['total_devices'] == 3
    assert stats['by_operating_system'][0] == {'operating_system': 'Windows', 'count': 2}
    assert {'compliance_state': 'noncompliant', 'count': 1} in stats['by_compliance_state']
    assert [d['device_id'] for d in stats['last_synced_devices']] == ['d2', 'd1']


def test_intune_failure_raises_external_error(graph_client, graph_api):
    graph_api.routes[DEVICES_PATH] = (500, 'Internal error')
    with pytest.raises(ExternalServiceError):
        IntuneService(graph_client).get_managed_devices()


def test_client_credentials_token_is_cached(graph_api):
    graph_api.routes['/oauth2/v2.0/token'] = (200, {'access_token': 'app-token', 'expires_in': 3600})
    graph_api.routes['/organization'] = (200, {'value': []})
    provider = ClientCredentialsTokenProvider('tenant', 'client', 'secret')
    graph = GraphClient(provider)

    graph.get('/organization')
    graph.get('/organization')

    token_requests = [r for r in graph_api.requests if 'oauth2' in r.full_url]
    assert len(token_requests) == 1
    assert graph_api.requests[-1].get_header('Authorization') == 'Bearer app-token'


def test_unconfigured_credentials():
    provider = ClientCredentialsTokenProvider('tenant', 'client', '')
    assert not provider.is_configured
    with pytest.raises(GraphRequestError):
        provider.get_token()


def test_credentials_are_redacted_in_logs(graph_api, monkeypatch):
    log = MagicMock()
    monkeypatch.setattr(graph_module, 'logger', log)
    graph_api.routes['/oauth2/v2.0/token'] = (200, {'access_token': 'app-token', 'expires_in': 3600})
    graph_api.routes['/organization'] = (200, {'value': []})

    GraphClient(ClientCredentialsTokenProvider('tenant', 'client', 'secret')).get('/organization')
    request_log = [c.args[0] for c in log.debug.call_args_list if c.args[0].startswith('GET ')][0]
    assert "'Authorization': '[REDACTED]'" in request_log
    assert 'app-token' not in request_log

    graph_api.routes['/oauth2/v2.0/token'] = (401, 'invalid_client')
    with pytest.raises(GraphRequestError):
        ClientCredentialsTokenProvider('tenant', 'client', 'top-secret-value').get_token()
    failure_log = log.error.call_args.args[0]
    assert "'client_secret': '[REDACTED]'" in failure_log
    assert 'top-secret-value' not in failure_log
