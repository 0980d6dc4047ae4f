"""
HTTP client for the platform backend: the single point where the console
talks to the API service.

PRINCIPLE: pages and stores never build URLs or headers themselves.
Everything goes through APIClient, which:
- attaches the stored session token as a bearer credential,
- turns HTTP/transport failures into APIError,
- reacts to 401 globally (clear token, fire on_auth_failure) so page
  controllers never carry their own 401 handling.
"""
from __future__ import annotations

import httpx
from typing import Any, Callable, Dict, Optional
import logging

from admin_console.errors import APIError, AuthenticationError
from admin_console.token_storage import TokenStorage
from admin_console.utils.audit import record_metric

logger = logging.getLogger(__name__)


class APIClient:
    """HTTP client for the backend REST API."""

    def __init__(
        self,
        base_url: str,
        storage: TokenStorage,
        on_auth_failure: Optional[Callable[[], None]] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Base URL of the API (e.g. http://localhost:8081/api)
            storage: Where the session token is read from and cleared
            on_auth_failure: Called once for every 401 response
            timeout: Request timeout in seconds
            transport: Optional httpx transport (ASGI app, mock)
        """
        self.base_url = base_url.rstrip('/')
        self.storage = storage
        self.on_auth_failure = on_auth_failure
        self.timeout = timeout
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.storage.get()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict] = None,
        params: Optional[Dict] = None
    ) -> Dict[str, Any]:
        """
        Base method for HTTP requests.

        Args:
            method: HTTP method (GET, POST)
            path: API path (e.g. /admin/reports)
            json: JSON body
            params: Query parameters; None values are dropped

        Returns:
            Parsed JSON envelope {success, data, message?}

        Raises:
            AuthenticationError: on 401, after the token has been cleared
            APIError: on any other HTTP or transport failure
        """
        url = f"{self.base_url}{path}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=self._headers(),
                    json=json,
                    params=params or None
                )
        except httpx.HTTPError as e:
            logger.error(f"API request failed: {method} {url} - {e}")
            raise APIError(f"Backend unreachable: {e}") from e

        if response.status_code == 401:
            self._handle_auth_failure(method, path)
            raise AuthenticationError()

        if response.is_error:
            message = _error_message(response)
            logger.error(f"API request failed: {method} {url} - {response.status_code} {message}")
            raise APIError(message, status_code=response.status_code)

        if not response.content:
            return {"success": True, "data": None}
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"API request failed: {method} {url} - non-JSON body ({response.status_code})")
            raise APIError("Malformed backend response", status_code=response.status_code) from e

    def _handle_auth_failure(self, method: str, path: str) -> None:
        logger.warning(f"Unauthorized response: {method} {path}, dropping session token")
        self.storage.clear()
        record_metric("auth.failure", {"method": method, "path": path}, outcome="denied")
        if self.on_auth_failure is not None:
            self.on_auth_failure()

    async def get(self, path: str, params: Optional[Dict] = None) -> Dict[str, Any]:
        return await self._request("GET", path, params=params)

    async def post(self, path: str, json: Optional[Dict] = None) -> Dict[str, Any]:
        return await self._request("POST", path, json=json)


def _error_message(response: httpx.Response) -> str:
    """Prefer the backend envelope message over the bare status line."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"HTTP {response.status_code}"
