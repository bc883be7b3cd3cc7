"""HTTP client for the marketplace REST backend."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from flask import current_app

from brixxo.errors import BackendError, TransportError, error_from_response

logger = logging.getLogger(__name__)


class BackendClient:
    """Thin wrapper over a ``requests.Session``.

    Each call is attempted exactly once. A bearer token, when given, is sent
    with every request.
    """

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: Optional[float] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def url(self, endpoint: str) -> str:
        return f"{self.base_url}/api{endpoint}"

    def request(self, method: str, endpoint: str, **kwargs: Any) -> Dict[str, Any]:
        url = self.url(endpoint)
        try:
            r = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:  # network issue
            logger.warning("%s %s failed: %s", method, endpoint, e)
            raise TransportError(str(e) or "Network error") from e
        if r.status_code >= 400:
            raise error_from_response(r)
        if not r.content:
            return {}
        try:
            return r.json()
        except ValueError as e:  # html error page from a proxy, etc.
            logger.warning("%s %s returned a non-JSON body: %s", method, endpoint, e)
            raise BackendError("Invalid response from server", status=r.status_code) from e

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint: str, data: Any = None) -> Any:
        return self.request("POST", endpoint, json=data)

    def put(self, endpoint: str, data: Any = None) -> Any:
        return self.request("PUT", endpoint, json=data)

    def delete(self, endpoint: str, data: Any = None) -> Any:
        return self.request("DELETE", endpoint, json=data)

    def upload(self, endpoint: str, data: Optional[Dict[str, Any]] = None, files: Any = None) -> Any:
        """POST a multipart body; requests sets the boundary content type."""
        return self.request("POST", endpoint, data=data, files=files)


def client_from_config(token: Optional[str] = None) -> BackendClient:
    cfg = current_app.config
    return BackendClient(cfg["BACKEND_API_URL"], token=token, timeout=cfg.get("BACKEND_TIMEOUT"))
