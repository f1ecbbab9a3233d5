"""
Minimal Microsoft identity / Graph HTTP client.

Acquires app-only tokens with the OAuth2 client-credentials grant and performs
JSON GET requests against Microsoft Graph (or any Azure REST endpoint that
accepts a bearer token, such as Key Vault).
"""

import json
import threading
import time
from typing import Dict, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode, quote
from urllib.request import Request, urlopen

from flask import current_app

from app.utils.logging_sanitizer import sanitize_dict, sanitize_headers
from app.logger import get_logger

logger = get_logger("inventory.services.integrations.graph_client")

GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"
GRAPH_SCOPE = "https://graph.microsoft.com/.default"
LOGIN_AUTHORITY = "https://login.microsoftonline.com"
REQUEST_TIMEOUT = 10
TOKEN_REFRESH_MARGIN = 60


class GraphRequestError(Exception):
    """HTTP error returned by an Azure endpoint"""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class ClientCredentialsTokenProvider:
    """Caches an app-only access token until shortly before it expires."""

    def __init__(self, tenant_id: str, client_id: str, client_secret: str, scope: str = GRAPH_SCOPE):
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.client_secret = client_secret
        self.scope = scope
        self._token = None
        self._expires_at = 0.0
        self._lock = threading.Lock()

    @property
    def is_configured(self) -> bool:
        return bool(self.tenant_id and self.client_id and self.client_secret)

    def get_token(self) -> str:
        with self._lock:
            if self._token and time.time() < self._expires_at - TOKEN_REFRESH_MARGIN:
                return self._token

            if not self.is_configured:
                raise GraphRequestError(500, "Azure AD client credentials are not configured")

            url = f"{LOGIN_AUTHORITY}/{self.tenant_id}/oauth2/v2.0/token"
            form = {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "scope": self.scope,
                "grant_type": "client_credentials",
            }
            request = Request(url, data=urlencode(form).encode("utf-8"),
                              headers={"Content-Type": "application/x-www-form-urlencoded"})
            try:
                payload = _read_json(request)
            except GraphRequestError as e:
                logger.error(f"Token request to {url} failed ({e.status_code}: {e.message}) with {sanitize_dict(form)}")
                raise

            self._token = payload["access_token"]
            self._expires_at = time.time() + int(payload.get("expires_in", 3600))
            logger.debug(f"Acquired access token for scope {self.scope}")
            return self._token


class GraphClient:
    """JSON GET client for Microsoft Graph."""

    def __init__(self, token_provider: ClientCredentialsTokenProvider, base_url: str = GRAPH_BASE_URL):
        self.token_provider = token_provider
        self.base_url = base_url.rstrip("/")

    def get(self, path: str, params: Optional[Dict[str, str]] = None,
            headers: Optional[Dict[str, str]] = None) -> dict:
        """
        GET a Graph resource.

        Args:
            path: Resource path relative to the base URL, e.g. "/users/{id}"
            params: OData query parameters ($select, $filter, ...)
            headers: Extra request headers

        Returns:
            Decoded JSON response

        Raises:
            GraphRequestError: on any non-2xx response or transport failure
        """
        url = self.base_url + path
        if params:
            url += "?" + urlencode(params, quote_via=quote, safe="$,'()")
        request_headers = {
            "Authorization": f"Bearer {self.token_provider.get_token()}",
            "Accept": "application/json",
        }
        if headers:
            request_headers.update(headers)
        logger.debug(f"GET {url} headers={sanitize_headers(request_headers)}")
        return _read_json(Request(url, headers=request_headers))


def _read_json(request: Request) -> dict:
    try:
        with urlopen(request, timeout=REQUEST_TIMEOUT) as response:
            return json.loads(response.read().decode("utf-8") or "{}")
    except HTTPError as e:
        detail = ""
        try:
            detail = json.loads(e.read().decode("utf-8")).get("error", {})
            if isinstance(detail, dict):
                detail = detail.get("message", "")
        except (ValueError, AttributeError):
            pass
        raise GraphRequestError(e.code, str(detail or e.reason)) from e
    except URLError as e:
        raise GraphRequestError(503, f"Connection failed: {e.reason}") from e


def get_graph_client() -> GraphClient:
    """GraphClient for the current app, built once from the AZURE_AD_* settings"""
    client = current_app.extensions.get("graph_client")
    if client is None:
        provider = ClientCredentialsTokenProvider(
            current_app.config.get("AZURE_AD_TENANT_ID"),
            current_app.config.get("AZURE_AD_CLIENT_ID"),
            current_app.config.get("AZURE_AD_CLIENT_SECRET"),
        )
        client = GraphClient(provider)
        current_app.extensions["graph_client"] = client
    return client
