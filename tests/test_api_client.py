"""Tests for APIClient."""

from unittest.mock import MagicMock, patch

import pytest
from requests import Request

from apiclient.api_client import APIClient, redact_headers
from apiclient.builder import RequestBuilder
from apiclient.exceptions import ConfigurationError


@pytest.fixture
def client():
    return APIClient("http://api.test/", timeout=5)


def _response(status=200):
    resp = MagicMock()
    resp.status_code = status
    return resp


class TestConfiguration:
    """APIClient construction and environment config."""

    def test_base_url_trailing_slash_stripped(self, client):
        assert client.base_url == "http://api.test"

    @pytest.mark.parametrize("endpoint", ["items", "/items"])
    def test_url_join(self, client, endpoint):
        assert client.url(endpoint) == "http://api.test/items"

    def test_from_env(self):
        client = APIClient.from_env(environ={"BASE_URL": "https://svc.local", "TIMEOUT": "12.5"})
        assert client.base_url == "https://svc.local"
        assert client.timeout == 12.5

    def test_from_env_default_timeout(self):
        client = APIClient.from_env(environ={"BASE_URL": "https://svc.local"})
        assert client.timeout == 30.0

    def test_from_env_explicit_base_url_wins(self):
        client = APIClient.from_env("https://explicit.local", environ={"BASE_URL": "https://env.local"})
        assert client.base_url == "https://explicit.local"

    def test_from_env_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("BASE_URL", "https://os.local")
        monkeypatch.delenv("TIMEOUT", raising=False)
        assert APIClient.from_env().base_url == "https://os.local"

    def test_from_env_missing_base_url(self):
        with pytest.raises(ConfigurationError):
            APIClient.from_env(environ={})

    @pytest.mark.parametrize("timeout", ["soon", "0", "-1"])
    def test_from_env_bad_timeout(self, timeout):
        with pytest.raises(ConfigurationError):
            APIClient.from_env(environ={"BASE_URL": "https://svc.local", "TIMEOUT": timeout})

    def test_context_manager_closes_session(self):
        session = MagicMock()
        with APIClient("http://api.test", session=session) as client:
            assert client.session is session
        session.close.assert_called_once_with()


class TestSend:
    """Preparing and sending requests."""

    def test_send_uses_timeout(self, client):
        with patch.object(client.session, "send", return_value=_response()) as mock_send:
            resp = client.send(Request("GET", "http://api.test/health"))
        assert resp.status_code == 200
        prepared = mock_send.call_args.args[0]
        assert prepared.method == "GET"
        assert prepared.url == "http://api.test/health"
        assert mock_send.call_args.kwargs == {"timeout": 5}

    def test_relative_url_joined_to_base(self, client):
        with patch.object(client.session, "send", return_value=_response()) as mock_send:
            client.send(Request("GET", "/items"))
        assert mock_send.call_args.args[0].url == "http://api.test/items"

    def test_builder_applied_before_send(self, client):
        builder = RequestBuilder().with_params({"page": ["2"]}).with_auth("user", "secret")
        with patch.object(client.session, "send", return_value=_response()) as mock_send:
            client.get("/items", builder)
        prepared = mock_send.call_args.args[0]
        assert prepared.url == "http://api.test/items?page=2"
        assert prepared.headers["Authorization"].startswith("Basic ")

    def test_post_sends_json_payload(self, client):
        with patch.object(client.session, "send", return_value=_response(201)) as mock_send:
            resp = client.post("/items", {"name": "widget"})
        assert resp.status_code == 201
        prepared = mock_send.call_args.args[0]
        assert prepared.method == "POST"
        assert prepared.headers["Content-Type"] == "application/json"
        assert prepared.body.read() == b'{"name":"widget"}'

    def test_put_sends_json_payload(self, client):
        with patch.object(client.session, "send", return_value=_response()) as mock_send:
            client.put("items/1", [1, 2, 3])
        prepared = mock_send.call_args.args[0]
        assert prepared.method == "PUT"
        assert prepared.url == "http://api.test/items/1"
        assert prepared.body.read() == b"[1,2,3]"

    def test_post_builder_headers_replace_content_type(self, client):
        builder = RequestBuilder().with_headers({"Accept": "text/plain"})
        with patch.object(client.session, "send", return_value=_response()) as mock_send:
            client.post("/items", {}, builder)
        prepared = mock_send.call_args.args[0]
        assert prepared.headers["Accept"] == "text/plain"
        assert "Content-Type" not in prepared.headers

    def test_authorization_not_logged(self, client, caplog):
        builder = RequestBuilder().with_auth("user", "secret")
        with caplog.at_level("DEBUG", logger="apiclient.api_client"):
            with patch.object(client.session, "send", return_value=_response()):
                client.get("/items", builder)
        assert "Basic [REDACTED]" in caplog.text
        assert "dXNlcjpzZWNyZXQ=" not in caplog.text

    def test_lowercase_authorization_not_logged(self, client, caplog):
        builder = RequestBuilder().with_headers({"authorization": "Bearer SECRETTOKEN"})
        with caplog.at_level("DEBUG", logger="apiclient.api_client"):
            with patch.object(client.session, "send", return_value=_response()):
                client.get("/items", builder)
        assert "SECRETTOKEN" not in caplog.text
        assert "Bearer [REDACTED]" in caplog.text


class TestRedactHeaders:
    """Header redaction for logs."""

    def test_redacts_scheme_value(self):
        safe = redact_headers({"Authorization": "Bearer abc.def", "Accept": "*/*"})
        assert safe == {"Authorization": "Bearer [REDACTED]", "Accept": "*/*"}

    def test_leaves_input_untouched(self):
        headers = {"Authorization": "Basic xyz"}
        redact_headers(headers)
        assert headers == {"Authorization": "Basic xyz"}

    @pytest.mark.parametrize("name", ["authorization", "AUTHORIZATION", "AuThOrIzAtIoN"])
    def test_header_name_case_ignored(self, name):
        safe = redact_headers({name: "Bearer abc.def"})
        assert safe == {name: "Bearer [REDACTED]"}

    def test_bytes_value_redacted(self):
        assert redact_headers({"Authorization": b"Basic xyz"}) == {"Authorization": "Basic [REDACTED]"}

    def test_prepared_case_insensitive_headers(self, client):
        req = RequestBuilder().with_headers({"authorization": "Token s3cret"})(Request("GET", "/x"))
        safe = redact_headers(client.prepare(req).headers)
        assert safe["authorization"] == "Token [REDACTED]"
