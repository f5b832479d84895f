"""Fluent builders and helpers for constructing ``requests`` HTTP requests."""
from apiclient.api_client import APIClient
from apiclient.builder import RequestBuilder
from apiclient.exceptions import (
    ApiClientError,
    ConfigurationError,
    InvalidRequestURL,
    PayloadEncodingError,
    RequestBuildError,
)
from apiclient.helpers import Payload, must_get, must_payload, must_post, must_put, new_request

__version__ = "0.1.0"

__all__ = [
    "APIClient",
    "ApiClientError",
    "ConfigurationError",
    "InvalidRequestURL",
    "Payload",
    "PayloadEncodingError",
    "RequestBuildError",
    "RequestBuilder",
    "must_get",
    "must_payload",
    "must_post",
    "must_put",
    "new_request",
]
