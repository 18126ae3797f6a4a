# portal/backend.py
"""
Thin HTTP client for the backend REST API.

Every domain call goes through `BackendClient.request`, which turns
transport problems and HTTP error statuses into `BackendError` subclasses.
Views catch those; nothing here retries.
"""
import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """Backend call failed. `status_code` is None for transport errors."""

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class NotFound(BackendError):
    pass


class Conflict(BackendError):
    pass


class BackendUnavailable(BackendError):
    pass


def unwrap(payload, *keys):
    """
    Normalize the backend's response envelopes.

    Deployments answer with a bare object/list, or wrap it as
    ``{"data": ...}``, ``{"jobs": ...}``, ``{"job": ...}`` and so on. The first
    of `keys` (then "data") present in a dict payload wins; otherwise the
    payload is returned unchanged.
    """
    if isinstance(payload, dict):
        for key in keys + ('data',):
            if key in payload and payload[key] is not None:
                return payload[key]
    return payload


def error_message(payload, default):
    if isinstance(payload, dict):
        return payload.get('error') or payload.get('message') or default
    return default


class BackendClient:
    def __init__(self, base_url=None, timeout=None, session=None):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip('/')
        self.timeout = timeout if timeout is not None else settings.API_TIMEOUT
        self.session = session or requests.Session()

    def url(self, path):
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(self, method, path, **kwargs):
        kwargs.setdefault('timeout', self.timeout)
        url = self.url(path)
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.exceptions.Timeout as exc:
            raise BackendUnavailable(f"Backend timeout on {method} {path}") from exc
        except requests.exceptions.ConnectionError as exc:
            raise BackendUnavailable(f"Cannot connect to backend for {method} {path}") from exc
        except requests.exceptions.RequestException as exc:
            raise BackendError(f"Backend request failed: {method} {path}: {exc}") from exc

        if response.status_code >= 400:
            payload = self._json(response)
            message = error_message(payload, f"{method} {path} returned {response.status_code}")
            logger.debug("Backend %s %s -> %s: %s", method, path, response.status_code, message)
            if response.status_code == 404:
                raise NotFound(message, response.status_code, payload)
            if response.status_code == 409:
                raise Conflict(message, response.status_code, payload)
            raise BackendError(message, response.status_code, payload)
        return response

    def json(self, method, path, **kwargs):
        return self._json(self.request(method, path, **kwargs))

    def get(self, path, **kwargs):
        return self.json('GET', path, **kwargs)

    def post(self, path, **kwargs):
        return self.json('POST', path, **kwargs)

    def put(self, path, **kwargs):
        return self.json('PUT', path, **kwargs)

    def delete(self, path, **kwargs):
        return self.json('DELETE', path, **kwargs)

    def stream(self, path):
        """Open a streamed GET (caller must close the response)."""
        return self.request('GET', path, stream=True)

    @staticmethod
    def _json(response):
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None
