# app/services/api_client.py
"""
HTTP client for the hosted performance-management API.

Every request carries JSON headers and, when the local storage holds an access
token, a bearer ``Authorization`` header. Responses are normalised into
either a decoded payload or one of the ``ApiError`` subclasses.
"""
import json
import logging
from typing import Any, Dict, Optional
import requests

from app.config.settings import settings
from app.exceptions import ApiRequestError, ApiResponseError
from app.services.local_storage import LocalStorage, MemoryStorage

logger = logging.getLogger(__name__)


def error_message(data: Any) -> str:
    """Pick the human-readable message out of an error body"""
    if isinstance(data, dict):
        for key in ("message", "error", "detail"):
            value = data.get(key)
            if value and isinstance(value, str):
                return value
    return "API request failed"


def unwrap(payload: Any) -> Any:
    """Return ``payload["data"]`` for ``{success, data}`` envelopes, the payload itself otherwise"""
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


class ApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        storage: Optional[LocalStorage] = None,
        session=None,
        timeout: Optional[float] = None,
        token_key: Optional[str] = None
    ):
        self.base_url = (base_url if base_url is not None else settings.API_BASE_URL).rstrip("/")
        self.storage = storage or MemoryStorage()
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else settings.API_TIMEOUT
        self.token_key = token_key or settings.ACCESS_TOKEN_KEY

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        token = self.storage.get_item(self.token_key)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if extra:
            headers.update(extra)
        return headers

    def set_token(self, token: Optional[str]) -> None:
        """Store (or with None, forget) the bearer token sent with every request"""
        if token:
            self.storage.set_item(self.token_key, token)
        else:
            self.storage.remove_item(self.token_key)

    def request(
        self,
        method: str,
        endpoint: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Any:
        url = f"{self.base_url}{endpoint}"
        kwargs: Dict[str, Any] = {"headers": self._headers(headers)}
        if json is not None:
            kwargs["json"] = json
        if params:
            kwargs["params"] = {key: value for key, value in params.items() if value is not None}
        if self.timeout:
            kwargs["timeout"] = self.timeout

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Network error calling {method} {url}: {str(e)}")
            raise ApiRequestError(f"Network error: {str(e)}") from e

        return self._handle_response(method, url, response)

    def _handle_response(self, method: str, url: str, response) -> Any:
        status = response.status_code
        content_type = response.headers.get("content-type", "")
        text = response.text or ""

        if not 200 <= status < 300:
            data = self._error_body(status, text)
            message = error_message(data)
            logger.error(f"{method} {url} failed with status {status}: {message}")
            raise ApiResponseError(message, status, data)

        if "application/json" not in content_type:
            return text

        if not text.strip():
            return {"success": True}

        try:
            payload = json.loads(text)
        except ValueError:
            logger.error(f"Invalid JSON in response to {method} {url}")
            raise ApiResponseError("Invalid server response", status, {"error": "Invalid JSON response"})

        if isinstance(payload, dict) and payload.get("success") is False:
            message = error_message(payload)
            logger.error(f"{method} {url} reported failure: {message}")
            raise ApiResponseError(message, status, payload)

        return payload

    @staticmethod
    def _error_body(status: int, text: str) -> Any:
        if not text.strip():
            return {"message": f"HTTP error! status: {status}"}
        try:
            return json.loads(text)
        except ValueError:
            return {"message": text}

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint: str, data: Any = None) -> Any:
        return self.request("POST", endpoint, json=data)

    def put(self, endpoint: str, data: Any = None) -> Any:
        return self.request("PUT", endpoint, json=data)

    def patch(self, endpoint: str, data: Any = None) -> Any:
        return self.request("PATCH", endpoint, json=data)

    def delete(self, endpoint: str) -> Any:
        return self.request("DELETE", endpoint)
