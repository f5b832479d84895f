# helpers.py - build GET/POST/PUT requests and JSON payload bodies
import dataclasses
import io
import json
import logging

from requests import Request
from requests.exceptions import RequestException
from requests.models import PreparedRequest

from apiclient.exceptions import InvalidRequestURL, PayloadEncodingError

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"

# these chars only ever occur inside JSON strings, so escaping them is lossless
_HTML_ESCAPES = {
    ord("<"): "\\u003c",
    ord(">"): "\\u003e",
    ord("&"): "\\u0026",
    0x2028: "\\u2028",
    0x2029: "\\u2029",
}


class Payload(io.BytesIO):
    """JSON request body. ``close()`` is a no-op, so the body can be re-read."""

    content_type = JSON_CONTENT_TYPE

    def close(self):
        return None


def _check_url(url):
    # let requests apply the same checks it runs when the request is prepared
    try:
        PreparedRequest().prepare_url(url, None)
    except RequestException as exc:
        raise InvalidRequestURL(url, str(exc)) from exc


def new_request(method: str, url: str, body=None) -> Request:
    _check_url(url)
    return Request(method.upper(), url, data=body)


def must_get(url: str) -> Request:
    return new_request("GET", url)


def must_post(url: str, body) -> Request:
    return new_request("POST", url, body)


def must_put(url: str, body) -> Request:
    return new_request("PUT", url, body)


def _encode_default(value):
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def must_payload(value) -> Payload:
    """Encode ``value`` as compact JSON and wrap it as a request body.

    Object keys are sorted and "<", ">" and "&" are written as \\u escapes,
    so the output is byte-stable and safe to embed in HTML. Dataclass
    instances are written as objects of their fields. Values json cannot
    represent, NaN and infinities included, raise PayloadEncodingError.
    """
    try:
        raw = json.dumps(
            value,
            default=_encode_default,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
            sort_keys=True,
        )
    except (TypeError, ValueError, RecursionError) as exc:
        raise PayloadEncodingError(value, str(exc)) from exc
    body = raw.translate(_HTML_ESCAPES).encode("utf-8")
    logger.debug("Encoded %s payload (%d bytes)", type(value).__name__, len(body))
    return Payload(body)
