import json
import logging
from dataclasses import dataclass

import requests

from .errors import TransportError

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ('GET', 'POST', 'PUT', 'DELETE')


@dataclass
class ApiResponse:
    """Status code and raw body text of one HTTP exchange."""
    method: str
    url: str
    status_code: int
    body: str

    def json(self):
        return json.loads(self.body)

    def excerpt(self, limit=200):
        """Short single-line view of the body for assertion messages."""
        text = self.body.replace('\n', ' ')
        return text if len(text) <= limit else text[:limit] + '...'


class ApiClient:
    """
    Thin wrapper around a requests.Session bound to the configured base URL.
    Paths are given relative to the base URL, e.g. "category/{id}".
    """

    def __init__(self, settings, session=None):
        if not settings.base_url:
            raise ValueError("HarnessSettings.base_url must be set before creating a client")
        self.base_url = settings.base_url.rstrip('/') + '/'
        self.timeout = settings.timeout
        self.session = session or requests.Session()

    def url_for(self, path):
        return self.base_url + path.lstrip('/')

    def execute(self, method, path, token=None, json=None, headers=None):
        """
        Sends one request and returns an ApiResponse.
        A bearer Authorization header is attached when a token is given and
        `json` (any serializable object) becomes the request body.
        Any failure to obtain a response (connection refused, timeout,
        broken chunked body, redirect loop...) is raised as TransportError.
        """
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        url = self.url_for(path)
        request_headers = dict(headers or {})
        if token:
            request_headers['Authorization'] = f"Bearer {token}"

        logger.debug("%s %s body=%r", method, url, json)
        try:
            response = self.session.request(
                method, url, headers=request_headers, json=json, timeout=self.timeout
            )
        except requests.exceptions.RequestException as exc:
            logger.error("%s %s did not complete: %s", method, url, exc)
            raise TransportError(method, url, exc) from exc

        logger.debug("%s %s -> %s", method, url, response.status_code)
        return ApiResponse(
            method=method,
            url=url,
            status_code=response.status_code,
            body=response.text,
        )

    # --- Convenience wrappers ---

    def get(self, path, token=None):
        return self.execute('GET', path, token=token)

    def post(self, path, json=None, token=None):
        return self.execute('POST', path, token=token, json=json)

    def put(self, path, json=None, token=None):
        return self.execute('PUT', path, token=token, json=json)

    def delete(self, path, token=None):
        return self.execute('DELETE', path, token=token)

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
