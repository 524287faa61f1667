import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error. Please check your connection and try again."


class ApiError(Exception):
    """Backend answered with a non-2xx status."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class NetworkError(ApiError):
    """The request never got a response (connection refused, timeout, DNS…)."""

    def __init__(self, message: str = NETWORK_ERROR_MESSAGE):
        super().__init__(message, None)


class NotFoundError(ApiError):
    pass


class ApiClient:
    """Thin JSON-over-HTTP wrapper around a requests session."""

    def __init__(self, base_url: str, timeout: float = 10.0, session=None):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({
            "Content-Type": "application/json; charset=UTF-8",
            "Accept": "application/json; charset=UTF-8",
        })

    @property
    def base_url(self) -> str:
        return self._base_url

    def get(self, path: str) -> Any:
        return self.request("GET", path)

    def post(self, path: str, data: dict | None = None) -> Any:
        return self.request("POST", path, data)

    def put(self, path: str, data: dict | None = None) -> Any:
        return self.request("PUT", path, data)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def request(self, method: str, path: str, data: dict | None = None) -> Any:
        """Send a request and decode the JSON body.

        Any 2xx is success; an empty or non-JSON 2xx body decodes to None.
        """
        url = f"{self._base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            resp = self._session.request(method, url, json=data, timeout=self._timeout)
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise NetworkError() from e

        if not 200 <= resp.status_code < 300:
            message = self._error_message(resp)
            logger.warning("%s %s -> HTTP %s: %s", method, url, resp.status_code, message)
            if resp.status_code == 404:
                raise NotFoundError(message, resp.status_code)
            raise ApiError(message, resp.status_code)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return None

    @staticmethod
    def _error_message(resp) -> str:
        fallback = f"Request failed with status {resp.status_code}"
        content_type = resp.headers.get("content-type", "")
        try:
            if "application/json" in content_type:
                body = resp.json()
                if isinstance(body, dict):
                    return str(body.get("error") or body.get("message") or fallback)
                return fallback
            return resp.text or resp.reason or fallback
        except ValueError:
            return resp.reason or fallback

    def close(self):
        self._session.close()
