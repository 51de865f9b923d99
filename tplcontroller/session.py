"""Implementation of the web management session handshake.

The device does not use cookies or tokens. A session is opened by:

challenge: an unauthenticated request (``code=7&asyn=1``) which the device
rejects with 401. The body holds CRLF separated challenge values.

derivation: the session id is the password obfuscation applied to challenge
value 3, keyed by the obfuscated password, with challenge value 4 as the
output dictionary (see :mod:`tplcontroller.encryption`).

login: ``code=7&asyn=0&id=<session id>``. Only a 200 response opens the
session.

After login the command group state is read (``code=2``) and written
(``code=1``) with the same id, and the session is closed with ``code=11``.
Challenges are single use, so every session starts with a fresh one and a
session is never reused.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum, auto
from typing import Any

from yarl import URL

from .deviceconfig import DeviceConfig
from .encryption import encrypt
from .exceptions import AuthenticationError, DeviceError, TplException
from .httpclient import HttpClient
from .protocol import CHALLENGE_STATUS, RequestCode, split_values

_LOGGER = logging.getLogger(__name__)

#: Index of the challenge value which is scrambled into the session id
CHALLENGE_VALUE_INDEX = 3
#: Index of the challenge value used as output dictionary
CHALLENGE_DICTIONARY_INDEX = 4


def _is_ok(status: int) -> bool:
    return 200 <= status < 300


class SessionState(Enum):
    """Enum for session state."""

    CHALLENGE_REQUIRED = auto()  # Handshake needed
    LOGIN_REQUIRED = auto()  # Session id derived, login needed
    ESTABLISHED = auto()  # Ready to read and write states
    CLOSED = auto()  # Logged out or discarded


class TplSession:
    """A single authenticated exchange with a device."""

    COMMON_HEADERS = {
        "Content-Type": "application/x-www-form-urlencoded",
    }

    def __init__(
        self,
        *,
        config: DeviceConfig,
        http_client: HttpClient | None = None,
    ) -> None:
        self._config = config
        self._host = config.host
        self._owns_http_client = http_client is None
        self._http_client = http_client or HttpClient(config)

        base_url = f"http://{config.address}"
        self._app_url = URL(f"{base_url}/")
        self._headers = {
            **self.COMMON_HEADERS,
            "Host": config.address,
            "Referer": base_url,
        }

        self._state = SessionState.CHALLENGE_REQUIRED
        self._session_id: str | None = None
        self._state_read = False

        _LOGGER.debug("Created session for %s", self._host)

    @property
    def state(self) -> SessionState:
        """Return the current session state."""
        return self._state

    @property
    def session_id(self) -> str | None:
        """Return the derived session id, if any."""
        return self._session_id

    def _ensure_state(self, expected: SessionState, step: str) -> None:
        if self._state is not expected:
            raise TplException(
                f"Cannot {step} on {self._host}, session is {self._state.name}"
            )

    def _discard(self) -> None:
        self._state = SessionState.CLOSED
        self._session_id = None

    async def _post(
        self,
        code: RequestCode,
        *,
        asyn: int = 0,
        data: str | None = None,
        valid_status: Callable[[int], bool] = _is_ok,
        error_cls: type[DeviceError] = DeviceError,
    ) -> tuple[int, str]:
        params: dict[str, Any] = {"code": int(code), "asyn": asyn}
        if self._session_id is not None:
            params["id"] = self._session_id

        status, body = await self._http_client.post(
            self._app_url,
            params=params,
            data=data.encode() if data is not None else None,
            headers=self._headers,
        )
        _LOGGER.debug(
            "%s responded with status %s to %s", self._host, status, code.name
        )

        if not valid_status(status):
            raise error_cls(f"Request failed with status code {status}", status=status)

        return status, body

    async def perform_challenge(self) -> list[str]:
        """Request a fresh challenge from the device."""
        self._ensure_state(SessionState.CHALLENGE_REQUIRED, "request challenge")
        try:
            _, body = await self._post(
                RequestCode.AUTH,
                asyn=1,
                valid_status=lambda status: status == CHALLENGE_STATUS,
                error_cls=AuthenticationError,
            )
        except TplException:
            self._discard()
            raise

        return split_values(body)

    @staticmethod
    def generate_session_id(challenge: list[str], password: str) -> str:
        """Derive the session id from challenge values and the password."""
        if len(challenge) <= CHALLENGE_DICTIONARY_INDEX:
            raise AuthenticationError(
                f"Malformed challenge with {len(challenge)} values"
            )

        return encrypt(
            challenge[CHALLENGE_VALUE_INDEX],
            encrypt(password),
            challenge[CHALLENGE_DICTIONARY_INDEX],
        )

    async def perform_handshake(self, password: str) -> str:
        """Fetch a challenge and derive the session id from it."""
        _LOGGER.debug("Starting handshake with %s", self._host)
        challenge = await self.perform_challenge()
        try:
            self._session_id = self.generate_session_id(challenge, password)
        except AuthenticationError:
            self._discard()
            raise

        self._state = SessionState.LOGIN_REQUIRED
        _LOGGER.debug("Handshake with %s complete", self._host)
        return self._session_id

    async def perform_login(self) -> bool:
        """Login with the derived session id.

        Returns True if the device accepted the session. Other successful
        status codes leave nothing to do and discard the session.
        """
        self._ensure_state(SessionState.LOGIN_REQUIRED, "login")
        try:
            status, _ = await self._post(RequestCode.AUTH)
        except TplException:
            self._discard()
            raise

        if status != 200:
            _LOGGER.debug("Login to %s not confirmed: %s", self._host, status)
            self._discard()
            return False

        self._state = SessionState.ESTABLISHED
        _LOGGER.debug("Logged in to %s", self._host)
        return True

    async def fetch_state(self, command_id: str) -> list[str]:
        """Read the state dump of a command group."""
        self._ensure_state(SessionState.ESTABLISHED, "read state")
        _, body = await self._post(RequestCode.GET_STATE, data=command_id)
        self._state_read = True
        return split_values(body)

    async def set_state(self, payload: str) -> str:
        """Write an update payload and return the raw device response."""
        self._ensure_state(SessionState.ESTABLISHED, "write state")
        if not self._state_read:
            raise TplException(f"Cannot write state on {self._host} before reading")
        _, body = await self._post(RequestCode.SET_STATE, data=payload)
        return body

    async def logout(self) -> None:
        """Close the session on the device.

        Only sessions which have read a state are closed. Failures are not
        reported as the requested action has already completed.
        """
        if self._session_id is None or not self._state_read:
            self._discard()
            return

        try:
            await self._post(RequestCode.LOGOUT)
        except TplException as ex:
            _LOGGER.debug("Logout from %s failed: %s", self._host, ex)
        finally:
            self._discard()

    async def close(self) -> None:
        """Discard the session and close an owned http client."""
        self._discard()
        if self._owns_http_client:
            await self._http_client.close()
