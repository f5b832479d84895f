# api_client.py - minimal HTTP client wrapper around requests
import logging
import os
from urllib.parse import urlsplit

import requests

from apiclient.exceptions import ConfigurationError
from apiclient.helpers import must_get, must_payload, must_post, must_put

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def redact_headers(headers):
    """Copy of ``headers`` with the Authorization value reduced to its scheme."""
    safe = dict(headers)
    for name, value in safe.items():
        # header names are case-insensitive
        if name.lower() == "authorization":
            if isinstance(value, bytes):
                value = value.decode("latin-1")
            safe[name] = value.split(" ", 1)[0] + " [REDACTED]"
    return safe


class APIClient:
    def __init__(self, base_url, timeout=DEFAULT_TIMEOUT, session=None):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_env(cls, base_url=None, environ=None):
        """Build a client from BASE_URL and TIMEOUT (seconds, default 30)."""
        environ = os.environ if environ is None else environ
        base_url = base_url or environ.get("BASE_URL")
        if not base_url:
            raise ConfigurationError("BASE_URL is not set")
        raw_timeout = environ.get("TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ConfigurationError(f"TIMEOUT must be a number of seconds, got {raw_timeout!r}") from None
        if timeout <= 0:
            raise ConfigurationError(f"TIMEOUT must be positive, got {timeout}")
        return cls(base_url, timeout=timeout)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        self.session.close()

    def url(self, endpoint):
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def prepare(self, req):
        if not urlsplit(req.url).scheme:
            req.url = self.url(req.url)
        return self.session.prepare_request(req)

    def send(self, req, builder=None):
        """Run ``builder`` over ``req``, then prepare and send it with the client timeout.

        A url without a scheme is joined to ``base_url``. Only hand-built
        Request objects can carry one, since the must_* helpers reject them.
        """
        if builder is not None:
            req = builder(req)
        prepared = self.prepare(req)

        logger.info("%s %s", prepared.method, prepared.url)
        for k, v in redact_headers(prepared.headers).items():
            logger.debug("REQ-HEADER %s: %s", k, v)

        resp = self.session.send(prepared, timeout=self.timeout)
        logger.info("%s %s -> status %s", prepared.method, prepared.url, resp.status_code)
        return resp

    def get(self, endpoint, builder=None):
        return self.send(must_get(self.url(endpoint)), builder)

    def post(self, endpoint, value, builder=None):
        payload = must_payload(value)
        req = must_post(self.url(endpoint), payload)
        req.headers["Content-Type"] = payload.content_type
        return self.send(req, builder)

    def put(self, endpoint, value, builder=None):
        payload = must_payload(value)
        req = must_put(self.url(endpoint), payload)
        req.headers["Content-Type"] = payload.content_type
        return self.send(req, builder)
