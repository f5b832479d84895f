# builder.py - compose request modifications as an ordered list of steps
"""
RequestBuilder collects transformation steps for a ``requests.Request``
and applies them in the order they were added:

    builder = (
        RequestBuilder()
        .with_auth("user", "secret")
        .with_params({"page": ["2"]})
        .with_headers({"accept": "application/json"})
    )
    req = builder(must_get("https://api.example.com/items"))

Builders are immutable, each ``with_*`` call returns a new builder and
leaves the original untouched, so a partially configured builder can be
shared and extended safely.
"""
import logging
import re
from typing import Callable, Iterable, Mapping, Tuple, Union
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from requests import Request
from requests.auth import HTTPBasicAuth

logger = logging.getLogger(__name__)

Step = Callable[[Request], Request]
HeaderValue = Union[str, bytes, Iterable[Union[str, bytes]]]
ParamValue = Union[str, bytes, int, float, Iterable[Union[str, bytes, int, float]]]

# stray percent signs and ";" separators make a query malformed
_MALFORMED_QUERY = re.compile(r"%(?![0-9A-Fa-f]{2})|;")


def _as_list(value):
    if isinstance(value, (str, bytes, int, float)):
        return [value]
    return list(value)


def _query_text(value):
    # query values are held as latin-1 text so each char stands for one raw byte
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return str(value).encode("utf-8").decode("latin-1")


def _header_text(value):
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return str(value)


def _parse_query(query: str):
    # the request's own url is trusted; an unparsable query counts as empty
    if _MALFORMED_QUERY.search(query):
        logger.debug("Ignoring unparsable query string: %r", query)
        return {}
    pairs = parse_qsl(query, keep_blank_values=True, encoding="latin-1")
    values = {}
    for key, value in pairs:
        values.setdefault(key, []).append(value)
    return values


def replace_headers(headers: Mapping[str, HeaderValue]) -> Step:
    flat = {}
    for name, value in headers.items():
        if isinstance(value, (str, bytes)):
            flat[name] = value
        else:
            flat[name] = ", ".join(_header_text(v) for v in _as_list(value))

    def step(req: Request) -> Request:
        req.headers = dict(flat)
        return req

    return step


def merge_params(params: Mapping[str, ParamValue]) -> Step:
    extra = {
        _query_text(key): [_query_text(v) for v in _as_list(value)]
        for key, value in params.items()
    }

    def step(req: Request) -> Request:
        parts = urlsplit(req.url)
        values = _parse_query(parts.query)
        for key, vals in extra.items():
            values.setdefault(key, []).extend(vals)
        # sorted by key so the encoded query is stable
        query = urlencode(sorted(values.items()), doseq=True, encoding="latin-1")
        req.url = urlunsplit(parts._replace(query=query))
        return req

    return step


def basic_auth(username: str, password: str) -> Step:
    def step(req: Request) -> Request:
        req.auth = HTTPBasicAuth(username, password)
        return req

    return step


class RequestBuilder:
    """Ordered, immutable sequence of ``Request -> Request`` steps."""

    def __init__(self, steps: Iterable[Step] = ()):
        self._steps: Tuple[Step, ...] = tuple(steps)

    @property
    def steps(self) -> Tuple[Step, ...]:
        return self._steps

    def __len__(self):
        return len(self._steps)

    def __repr__(self):
        names = ", ".join(getattr(s, "__qualname__", repr(s)) for s in self._steps)
        return f"RequestBuilder([{names}])"

    def then(self, step: Step) -> "RequestBuilder":
        if not callable(step):
            raise TypeError(f"builder step must be callable, got {type(step).__name__}")
        return RequestBuilder(self._steps + (step,))

    def with_headers(self, headers: Mapping[str, HeaderValue]) -> "RequestBuilder":
        """Replace the request headers entirely with ``headers``.

        A header given several values is sent once with the values joined
        by ``", "``. Names and values are not validated.
        """
        return self.then(replace_headers(headers))

    def with_params(self, params: Mapping[str, ParamValue]) -> "RequestBuilder":
        """Append ``params`` to the query string already on the request url.

        Existing values for a key are kept and the new ones follow them.
        The resulting url length is not checked.
        """
        return self.then(merge_params(params))

    def with_auth(self, username: str, password: str) -> "RequestBuilder":
        """Set HTTP Basic credentials on the request.

        Credentials are stored on ``Request.auth`` rather than in the
        headers, so a header replacement earlier or later in the chain
        does not drop them. The ``Authorization`` header is written when
        the request is prepared.
        """
        return self.then(basic_auth(username, password))

    def build(self, req: Request) -> Request:
        for step in self._steps:
            req = step(req)
        logger.debug("Built %s %s with %d step(s)", req.method, req.url, len(self._steps))
        return req

    __call__ = build
