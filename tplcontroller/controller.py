"""Controller for a single device.

>>> from tplcontroller import TplController
>>> async with TplController.from_values("192.168.178.2", "secret") as ctrl:
>>>     print(await ctrl.toggle_led())
{'state': 'success'}

Every call runs one complete request cycle: handshake, login, state read,
update and logout. Nothing is kept between calls.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TypedDict

from .commands import COMMANDS, LED, TOGGLE, Command, get_command
from .credentials import Credentials
from .deviceconfig import DeviceConfig
from .exceptions import InvalidStateError, TplException
from .httpclient import HttpClient
from .reconcile import (
    ResolvedStates,
    is_success,
    merge_states,
    parse_current_states,
    resolve_states,
)
from .session import TplSession

_LOGGER = logging.getLogger(__name__)


class ActionResult(TypedDict, total=False):
    """Result of a processed action."""

    state: str


def _state(state: str) -> ActionResult:
    return {"state": state}


class TplController:
    """Turn features of a device into a requested state."""

    commands: Mapping[str, Command] = COMMANDS

    def __init__(self, config: DeviceConfig) -> None:
        self._config = config
        self._http_client = HttpClient(config)

    @classmethod
    def from_values(
        cls, host: str, password: str, *, timeout: int | None = None
    ) -> TplController:
        """Create a controller from a host and a password."""
        config = DeviceConfig(host, credentials=Credentials(password))
        if timeout is not None:
            config.timeout = timeout
        return cls(config)

    @property
    def config(self) -> DeviceConfig:
        """Return the configuration of the controller."""
        return self._config

    @property
    def host(self) -> str:
        """Return the device host."""
        return self._config.host

    async def turn_feature(
        self, command: Command | str | None, states: Mapping[str, Any] | None
    ) -> ActionResult:
        """Turn the keys of command into the requested states.

        Returns an empty result if host or password are not configured.
        """
        if isinstance(command, str):
            command = get_command(command)
        if command is None:
            return _state("invalid command")

        try:
            resolved = resolve_states(command, states)
        except InvalidStateError as ex:
            _LOGGER.debug("Unable to resolve %s for %s: %s", states, command.id, ex)
            return _state("invalid state")

        password = self._config.password
        if not self._config.host or not password:
            _LOGGER.debug("Host or password missing, nothing to do")
            return {}

        try:
            return await self._process(command, resolved, password)
        except TplException as ex:
            _LOGGER.debug("Processing %s on %s failed: %s", command.id, self.host, ex)
            return _state(str(ex))

    async def turn_led(self, state: Any) -> ActionResult:
        """Turn the LED on, off or toggle it."""
        return await self.turn_feature(LED, {"enable": state})

    async def toggle_led(self) -> ActionResult:
        """Toggle the LED."""
        return await self.turn_led(TOGGLE)

    async def _process(
        self, command: Command, resolved: ResolvedStates, password: str
    ) -> ActionResult:
        session = TplSession(config=self._config, http_client=self._http_client)
        await session.perform_handshake(password)

        if not await session.perform_login():
            return {}

        try:
            values = await session.fetch_state(command.id)
            if not values:
                _LOGGER.debug("Empty state for %s on %s", command.id, self.host)
                return {}

            current = parse_current_states(values)
            payload = merge_states(command, resolved, current)
            if payload is None:
                return _state("no action")

            response = await session.set_state(payload)
            return _state("success" if is_success(response) else "error")
        finally:
            await session.logout()

    async def close(self) -> None:
        """Close the underlying http client."""
        await self._http_client.close()

    async def __aenter__(self) -> TplController:
        return self

    async def __aexit__(self, exc_t, exc_v, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.host}>"
