from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

import requests

from ..core.constants import DEFAULT_REQUEST_TIMEOUT
from .token_store import MemoryTokenStore, TokenStore

logger = logging.getLogger(__name__)

SESSION_INVALIDATING = frozenset({401, 403})


class ApiError(Exception):
    """A failed API call; ``status`` is None for network errors and timeouts."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


class SessionExpiredError(ApiError):
    """401/403: the stored token was cleared and the session must restart at login."""


def _error_message(response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("error") or body.get("message")
        if message:
            return str(message)
    return f"Request failed with status {response.status_code}"


class ApiClient:
    """Authenticated JSON request wrapper.

    Attaches ``Authorization: Bearer <token>`` from the token store, merges
    caller headers over the defaults and turns non-2xx responses into ApiError.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token_store: Optional[TokenStore] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        on_unauthorized: Optional[Callable[[], None]] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self.token_store = token_store or MemoryTokenStore()
        self._session = session or requests.Session()
        self._timeout = timeout
        self.on_unauthorized = on_unauthorized

    @property
    def has_token(self) -> bool:
        return bool(self.token_store.get())

    def clear_token(self) -> None:
        self.token_store.clear()

    def _headers(self, extra: Optional[Mapping[str, str]], *, authenticated: bool) -> dict:
        headers = {"Accept": "application/json"}
        token = self.token_store.get() if authenticated else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        headers.update(extra or {})
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        authenticated: bool = True,
    ) -> Any:
        url = f"{self._base_url}{path}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            response = self._session.request(
                method,
                url,
                json=json,
                params=params or None,
                headers=self._headers(headers, authenticated=authenticated),
                timeout=self._timeout,
            )
        except requests.Timeout:
            logger.warning("%s %s timed out after %ss", method, path, self._timeout)
            raise ApiError("The server did not respond in time")
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ApiError(f"Network error: {e}")

        status = response.status_code
        if authenticated and status in SESSION_INVALIDATING:
            message = _error_message(response)
            logger.warning("%s %s -> %s, clearing session", method, path, status)
            self.clear_token()
            if self.on_unauthorized:
                self.on_unauthorized()
            raise SessionExpiredError(message, status)

        if not 200 <= status < 300:
            message = _error_message(response)
            logger.warning("%s %s -> %s: %s", method, path, status, message)
            raise ApiError(message, status)

        content_type = response.headers.get("Content-Type", "")
        if "application/json" in content_type:
            return response.json()
        return response.content

    def get(self, path: str, **kwargs) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> Any:
        return self.request("POST", path, **kwargs)

    def patch(self, path: str, **kwargs) -> Any:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        return self.request("DELETE", path, **kwargs)
