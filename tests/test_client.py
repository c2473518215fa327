"""
Tests for the completions client: credentials, retry policy, backoff timing.

Run with:
    pytest tests/test_client.py -v
"""

import json
import socket
import urllib.error

import pytest

from ai_changelog.config import EffectiveConfig
from ai_changelog.errors import EnvError, ProtocolError, TransportError
from ai_changelog.llm.client import OpenAIClient
from ai_changelog.llm.transport import HttpResponse, TransportFailure, UrllibTransport
from ai_changelog.prompts import build_request

OK_BODY = json.dumps({"choices": [{"message": {"content": "### Added\n- Did X"}}]})


class FakeTransport:
    """Replays scripted responses; exceptions in the script are raised."""

    def __init__(self, *script):
        self.script = list(script)
        self.calls = []

    def post(self, url, body, headers, timeout):
        self.calls.append({"url": url, "body": body, "headers": headers, "timeout": timeout})
        step = self.script.pop(0)
        if isinstance(step, Exception):
            raise step
        return step


@pytest.fixture
def api_request():
    return build_request('+print("hi")\n', EffectiveConfig())


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_client(sleeps, monkeypatch):
    monkeypatch.delenv("AI_CHANGELOG_API_URL", raising=False)

    def _make(transport, api_key="sk-test", **kwargs):
        return OpenAIClient(api_key=api_key, transport=transport, sleep=sleeps.append, **kwargs)
    return _make


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------

class TestCredentials:

    def test_missing_key_fails_before_network(self, make_client, api_request, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        transport = FakeTransport()
        client = make_client(transport, api_key=None)
        with pytest.raises(EnvError, match="OPENAI_API_KEY environment variable is not set"):
            client.send(api_request)
        assert transport.calls == []

    def test_key_read_from_environment(self, make_client, api_request, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        transport = FakeTransport(HttpResponse(200, OK_BODY))
        make_client(transport, api_key=None).send(api_request)
        assert transport.calls[0]["headers"]["Authorization"] == "Bearer sk-env"


# ---------------------------------------------------------------------------
# Request shape
# ---------------------------------------------------------------------------

class TestRequest:

    def test_posts_serialized_request(self, make_client, api_request):
        transport = FakeTransport(HttpResponse(200, OK_BODY))
        make_client(transport).send(api_request)

        call = transport.calls[0]
        assert call["url"] == OpenAIClient.DEFAULT_URL
        assert call["timeout"] == 30
        assert call["headers"]["Content-Type"] == "application/json"
        assert json.loads(call["body"]) == api_request.to_payload()

    def test_url_override_from_environment(self, make_client, api_request, monkeypatch):
        transport = FakeTransport(HttpResponse(200, OK_BODY))
        monkeypatch.setenv("AI_CHANGELOG_API_URL", "http://localhost:8080/v1/chat/completions")
        client = make_client(transport)
        client.send(api_request)
        assert transport.calls[0]["url"] == "http://localhost:8080/v1/chat/completions"


# ---------------------------------------------------------------------------
# Retry policy
# ---------------------------------------------------------------------------

class TestRetry:

    def test_success_first_try(self, make_client, api_request, sleeps):
        transport = FakeTransport(HttpResponse(200, OK_BODY))
        assert make_client(transport).send(api_request) == OK_BODY
        assert len(transport.calls) == 1
        assert sleeps == []

    def test_rate_limited_twice_then_success(self, make_client, api_request, sleeps):
        transport = FakeTransport(
            HttpResponse(429, '{"error": "slow down"}'),
            HttpResponse(429, '{"error": "slow down"}'),
            HttpResponse(200, OK_BODY),
        )
        assert make_client(transport).send(api_request) == OK_BODY
        assert len(transport.calls) == 3
        assert sleeps == [2, 4]

    def test_transport_failure_is_retried(self, make_client, api_request, sleeps):
        transport = FakeTransport(
            TransportFailure("Request timed out after 30s"),
            HttpResponse(200, OK_BODY),
        )
        assert make_client(transport).send(api_request) == OK_BODY
        assert sleeps == [2]

    def test_server_error_fails_immediately(self, make_client, api_request, sleeps):
        transport = FakeTransport(HttpResponse(500, "internal error"), HttpResponse(200, OK_BODY))
        with pytest.raises(ProtocolError) as exc_info:
            make_client(transport).send(api_request)
        assert len(transport.calls) == 1
        assert sleeps == []
        assert exc_info.value.status == 500
        assert "internal error" in str(exc_info.value)

    @pytest.mark.parametrize("status", [400, 401, 404, 503])
    def test_other_statuses_not_retried(self, make_client, api_request, status):
        transport = FakeTransport(HttpResponse(status, "nope"))
        with pytest.raises(ProtocolError, match=f"HTTP {status}"):
            make_client(transport).send(api_request)
        assert len(transport.calls) == 1

    def test_rate_limit_exhausts_attempts(self, make_client, api_request, sleeps):
        transport = FakeTransport(*[HttpResponse(429, "") for _ in range(3)])
        with pytest.raises(TransportError, match="Failed after 3 attempts"):
            make_client(transport).send(api_request)
        assert len(transport.calls) == 3
        assert sleeps == [2, 4]

    def test_transport_failures_exhaust_attempts(self, make_client, api_request, sleeps):
        transport = FakeTransport(*[TransportFailure("Connection failed: refused") for _ in range(3)])
        with pytest.raises(TransportError, match="Connection failed: refused"):
            make_client(transport).send(api_request)
        assert sleeps == [2, 4]

    def test_mixed_failures_then_success(self, make_client, api_request, sleeps):
        transport = FakeTransport(
            TransportFailure("Connection lost"),
            HttpResponse(429, ""),
            HttpResponse(200, OK_BODY),
        )
        assert make_client(transport).send(api_request) == OK_BODY
        assert sleeps == [2, 4]

    def test_verbose_logs_attempts(self, make_client, api_request, capsys):
        transport = FakeTransport(HttpResponse(429, ""), HttpResponse(200, OK_BODY))
        make_client(transport, verbose=True).send(api_request)
        captured = capsys.readouterr()
        assert "Attempt 1/3" in captured.err
        assert "Attempt 2/3" in captured.err
        assert "Retrying in 2s" in captured.err
        assert captured.out == ""

    def test_quiet_by_default(self, make_client, api_request, capsys):
        transport = FakeTransport(HttpResponse(200, OK_BODY))
        make_client(transport).send(api_request)
        assert capsys.readouterr().err == ""


# ---------------------------------------------------------------------------
# UrllibTransport
# ---------------------------------------------------------------------------

class FakeUrlResponse:

    def __init__(self, status, body):
        self.status = status
        self._body = body

    def read(self):
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False


class TestUrllibTransport:

    def test_returns_status_and_body(self, monkeypatch):
        seen = {}

        def fake_urlopen(req, timeout):
            seen["method"] = req.get_method()
            seen["timeout"] = timeout
            return FakeUrlResponse(200, b'{"ok": true}')

        monkeypatch.setattr("urllib.request.urlopen", fake_urlopen)
        response = UrllibTransport().post("http://example.test", b"{}", {}, 30)
        assert response == HttpResponse(200, '{"ok": true}')
        assert seen == {"method": "POST", "timeout": 30}

    def test_http_error_becomes_response(self, monkeypatch):
        import io

        def fake_urlopen(req, timeout):
            raise urllib.error.HTTPError(req.full_url, 429, "Too Many Requests", {}, io.BytesIO(b"slow down"))

        monkeypatch.setattr("urllib.request.urlopen", fake_urlopen)
        response = UrllibTransport().post("http://example.test", b"{}", {}, 30)
        assert response.status == 429
        assert response.body == "slow down"

    @pytest.mark.parametrize("exc, message", [
        (urllib.error.URLError(socket.timeout("timed out")), "timed out"),
        (urllib.error.URLError("Name or service not known"), "Connection failed"),
        (socket.timeout("timed out"), "timed out"),
        (ConnectionResetError("reset by peer"), "Connection lost"),
    ])
    def test_failures_raise_transport_failure(self, monkeypatch, exc, message):
        def fake_urlopen(req, timeout):
            raise exc

        monkeypatch.setattr("urllib.request.urlopen", fake_urlopen)
        with pytest.raises(TransportFailure, match=message):
            UrllibTransport().post("http://example.test", b"{}", {}, 30)
