"""Tests for token validation against GET /user."""

from __future__ import annotations

import httpx
import pytest

from github_mcp_wrapper.auth.validator import (
    ACCEPT,
    MIN_TOKEN_LENGTH,
    USER_AGENT,
    validate_credential,
)
from github_mcp_wrapper.exceptions import (
    CredentialRejectedError,
    CredentialTooShortError,
    ValidationNetworkError,
)
from github_mcp_wrapper.models import (
    Credential,
    CredentialSource,
    CredentialSourceKind,
    WrapperSettings,
)

TOKEN = "ghp_" + "a" * 36


@pytest.fixture(autouse=True)
def _quiet(quiet_output):
    yield


def _credential(value: str = TOKEN) -> Credential:
    return Credential(
        value=value, source=CredentialSource(kind=CredentialSourceKind.EXPLICIT)
    )


class _Recorder:
    """httpx handler that records requests and returns a canned response."""

    def __init__(self, response: httpx.Response | None = None, exc: Exception | None = None):
        self.response = response
        self.exc = exc
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        assert self.response is not None
        return self.response

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


class TestTooShort:
    @pytest.mark.parametrize("length", [1, 10, MIN_TOKEN_LENGTH - 1])
    def test_rejected_without_request(self, length: int) -> None:
        recorder = _Recorder(httpx.Response(200, json={"login": "octocat"}))
        with pytest.raises(CredentialTooShortError):
            validate_credential(
                _credential("x" * length), WrapperSettings(), transport=recorder.transport
            )
        assert recorder.requests == []

    def test_exactly_minimum_length_is_checked(self) -> None:
        recorder = _Recorder(httpx.Response(200, json={"login": "octocat"}))
        login = validate_credential(
            _credential("x" * MIN_TOKEN_LENGTH), WrapperSettings(), transport=recorder.transport
        )
        assert login == "octocat"
        assert len(recorder.requests) == 1


class TestRequest:
    def test_success_returns_login(self) -> None:
        recorder = _Recorder(httpx.Response(200, json={"login": "octocat", "id": 1}))
        assert (
            validate_credential(_credential(), WrapperSettings(), transport=recorder.transport)
            == "octocat"
        )

    def test_request_shape(self) -> None:
        recorder = _Recorder(httpx.Response(200, json={"login": "octocat"}))
        validate_credential(_credential(), WrapperSettings(), transport=recorder.transport)

        (request,) = recorder.requests
        assert request.method == "GET"
        assert str(request.url) == "https://api.github.com/user"
        assert request.headers["Authorization"] == f"token {TOKEN}"
        assert request.headers["User-Agent"] == USER_AGENT
        assert request.headers["Accept"] == ACCEPT

    def test_custom_api_url(self) -> None:
        recorder = _Recorder(httpx.Response(200, json={"login": "octocat"}))
        settings = WrapperSettings(api_url="https://ghe.example.com/api/v3/")
        validate_credential(_credential(), settings, transport=recorder.transport)
        assert str(recorder.requests[0].url) == "https://ghe.example.com/api/v3/user"


class TestRejected:
    @pytest.mark.parametrize("status", [401, 403, 404, 500])
    def test_non_2xx(self, status: int) -> None:
        recorder = _Recorder(httpx.Response(status, json={"message": "Bad credentials"}))
        with pytest.raises(CredentialRejectedError) as excinfo:
            validate_credential(_credential(), WrapperSettings(), transport=recorder.transport)
        assert str(status) in str(excinfo.value)
        assert len(recorder.requests) == 1

    def test_2xx_without_login(self) -> None:
        recorder = _Recorder(httpx.Response(200, json={"id": 1}))
        with pytest.raises(CredentialRejectedError, match="no login field"):
            validate_credential(_credential(), WrapperSettings(), transport=recorder.transport)

    def test_2xx_with_non_object_body(self) -> None:
        recorder = _Recorder(httpx.Response(200, json=["login"]))
        with pytest.raises(CredentialRejectedError):
            validate_credential(_credential(), WrapperSettings(), transport=recorder.transport)

    def test_2xx_with_invalid_json(self) -> None:
        recorder = _Recorder(httpx.Response(200, text="<html>maintenance</html>"))
        with pytest.raises(CredentialRejectedError, match="invalid JSON"):
            validate_credential(_credential(), WrapperSettings(), transport=recorder.transport)


class TestNetworkErrors:
    def test_timeout(self) -> None:
        recorder = _Recorder(exc=httpx.ReadTimeout("timed out"))
        with pytest.raises(ValidationNetworkError, match="timeout"):
            validate_credential(_credential(), WrapperSettings(), transport=recorder.transport)
        assert len(recorder.requests) == 1

    def test_connection_error_not_retried(self) -> None:
        recorder = _Recorder(exc=httpx.ConnectError("connection refused"))
        with pytest.raises(ValidationNetworkError, match="network error"):
            validate_credential(_credential(), WrapperSettings(), transport=recorder.transport)
        assert len(recorder.requests) == 1

    def test_exit_code_is_generic_failure(self) -> None:
        recorder = _Recorder(exc=httpx.ConnectError("down"))
        with pytest.raises(ValidationNetworkError) as excinfo:
            validate_credential(_credential(), WrapperSettings(), transport=recorder.transport)
        assert excinfo.value.exit_code == 1
