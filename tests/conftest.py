from __future__ import annotations

import logging
import os

import aiohttp
import pytest
from asyncclick.testing import CliRunner
from yarl import URL

from tplcontroller.encryption import encrypt
from tplcontroller.protocol import SEPARATOR

_LOGGER = logging.getLogger(__name__)

MOCK_HOST = "127.0.0.1"
MOCK_PWD = "correct_pwd"  # noqa: S105
MOCK_BAD_PWD = "foobar"  # noqa: S105
MOCK_CHALLENGE = [
    "00004",
    "1",
    "0",
    "mJq8eVKyP2",
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789",
]
LED_ID = "112|1,0,0"
STATE_HEADER = ["00000", f"id {LED_ID}"]
SUCCESS_RESPONSE = f"00000{SEPARATOR}"


def mock_session_id(password: str = MOCK_PWD) -> str:
    return encrypt(MOCK_CHALLENGE[3], encrypt(password), MOCK_CHALLENGE[4])


class MockTplDevice:
    """Fake web management interface answering the session requests."""

    class _mock_response:
        def __init__(self, status: int, body: str):
            self.status = status
            self._body = body

        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_t, exc_v, exc_tb):
            pass

        async def read(self):
            return self._body.encode()

    def __init__(
        self,
        host: str = MOCK_HOST,
        *,
        password: str = MOCK_PWD,
        states: dict[str, str] | None = None,
        challenge: list[str] | None = None,
        challenge_status: int = 401,
        login_status: int = 200,
        set_response: str = SUCCESS_RESPONSE,
        logout_error: Exception | None = None,
        empty_state: bool = False,
    ):
        self.host = host
        self.password = password
        self.states = {"enable": "0"} if states is None else states
        self.challenge = MOCK_CHALLENGE if challenge is None else challenge
        self.challenge_status = challenge_status
        self.login_status = login_status
        self.set_response = set_response
        self.logout_error = logout_error
        self.empty_state = empty_state

        self.logged_in = False
        #: (code, params, body) of every received request
        self.requests: list[tuple[int, dict, str | None]] = []

    @property
    def codes(self) -> list[int]:
        return [code for code, _, _ in self.requests]

    @property
    def payloads(self) -> list[str | None]:
        return [body for code, _, body in self.requests if code == 1]

    async def post(self, url: URL, params=None, data=None, headers=None, **__):
        assert url == URL(f"http://{self.host}/")
        assert headers["Host"] == self.host
        assert headers["Referer"] == f"http://{self.host}"

        body = data.decode() if data is not None else None
        code = params["code"]
        self.requests.append((code, dict(params), body))
        _LOGGER.debug("Request %s: %s %r", url, params, body)
        return self._post(code, params, body)

    def _post(self, code: int, params: dict, body: str | None):
        if code == 7 and params["asyn"] == 1:
            assert "id" not in params
            return self._mock_response(
                self.challenge_status, SEPARATOR.join(self.challenge) + SEPARATOR
            )

        if params.get("id") != mock_session_id(self.password):
            return self._mock_response(403, "")

        if code == 7:
            self.logged_in = self.login_status == 200
            return self._mock_response(self.login_status, "")

        if code == 11:
            if self.logout_error:
                raise self.logout_error
            self.logged_in = False
            return self._mock_response(200, SUCCESS_RESPONSE)

        if not self.logged_in:
            pytest.fail(f"Received code {code} without login")

        if code == 2:
            assert body == LED_ID
            if self.empty_state:
                return self._mock_response(200, "")
            lines = [*STATE_HEADER, *(f"{k} {v}" for k, v in self.states.items())]
            return self._mock_response(200, SEPARATOR.join(lines) + SEPARATOR)

        if code == 1:
            id_line, *changes = body.split(SEPARATOR)
            assert id_line == f"id {LED_ID}"
            if self.set_response.startswith("00000"):
                for change in changes:
                    key, value = change.split(" ", 1)
                    self.states[key] = value
            return self._mock_response(200, self.set_response)

        pytest.fail(f"Unexpected code {code}")


@pytest.fixture()
def mock_device(mocker):
    """Return a factory for fake devices reachable through aiohttp."""
    devices: dict[str, MockTplDevice] = {}

    def _create(host: str = MOCK_HOST, **kwargs) -> MockTplDevice:
        device = MockTplDevice(host, **kwargs)
        devices[host] = device
        return device

    async def _post(url: URL, *args, **kwargs):
        return await devices[url.host].post(url, *args, **kwargs)

    mocker.patch.object(aiohttp.ClientSession, "post", side_effect=_post)
    return _create


@pytest.fixture()
def runner():
    """Runner fixture that unsets the TPL_ environment variables for tests."""
    tpl_vars = {k: None for k in os.environ if k.startswith("TPL_")}
    return CliRunner(env=tpl_vars)
