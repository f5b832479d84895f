# exceptions.py - errors raised while building requests and payloads


class ApiClientError(Exception):
    """Base class for every error raised by apiclient."""


class RequestBuildError(ApiClientError, ValueError):
    pass


class InvalidRequestURL(RequestBuildError):
    def __init__(self, url, reason):
        super().__init__(f"invalid request url {url!r}: {reason}")
        self.url = url
        self.reason = reason


class PayloadEncodingError(ApiClientError, TypeError):
    def __init__(self, value, reason):
        super().__init__(f"cannot encode {type(value).__name__} as JSON: {reason}")
        self.value = value
        self.reason = reason


class ConfigurationError(ApiClientError):
    pass
