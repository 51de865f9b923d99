"""Module for HttpClient class."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp
from yarl import URL

from .deviceconfig import DeviceConfig
from .exceptions import (
    TimeoutError,
    TplException,
    _ConnectionError,
)

_LOGGER = logging.getLogger(__name__)


class HttpClient:
    """HttpClient Class.

    Thin wrapper around an aiohttp session which converts every transport
    level failure into a library exception. Status codes are returned to the
    caller as they are; deciding which status is acceptable is up to the
    session protocol.
    """

    def __init__(self, config: DeviceConfig) -> None:
        self._config = config
        self._client_session: aiohttp.ClientSession | None = None

    @property
    def client(self) -> aiohttp.ClientSession:
        """Return the underlying http client."""
        if self._config.http_client and issubclass(
            self._config.http_client.__class__, aiohttp.ClientSession
        ):
            return self._config.http_client

        if not self._client_session:
            self._client_session = aiohttp.ClientSession()
        return self._client_session

    async def post(
        self,
        url: URL,
        *,
        params: dict[str, Any] | None = None,
        data: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> tuple[int, str]:
        """Send an http post request to the device.

        Returns the status code together with the decoded response body.
        """
        _LOGGER.debug("Posting to %s with code %s", url, params and params.get("code"))
        if self._config.timeout is None:
            _LOGGER.warning("Request timeout is set to None.")
        client_timeout = aiohttp.ClientTimeout(total=self._config.timeout)

        try:
            resp = await self.client.post(
                url,
                params=params,
                data=data,
                timeout=client_timeout,
                headers=headers,
            )
            async with resp:
                response_data = await resp.read()
        except (aiohttp.ServerDisconnectedError, aiohttp.ClientOSError) as ex:
            raise _ConnectionError(
                f"Device connection error: {self._config.host}: {ex}"
            ) from ex
        except (aiohttp.ServerTimeoutError, asyncio.TimeoutError) as ex:
            raise TimeoutError(
                "Unable to query the device, "
                + f"timed out: {self._config.host}: {ex}"
            ) from ex
        except Exception as ex:
            raise TplException(
                f"Unable to query the device: {self._config.host}: {ex}"
            ) from ex

        if resp.status != 200:
            _LOGGER.debug(
                "Device %s received status code %s with response %r",
                self._config.host,
                resp.status,
                response_data,
            )

        return resp.status, response_data.decode(errors="replace")

    async def close(self) -> None:
        """Close the ClientSession."""
        client = self._client_session
        self._client_session = None
        if client:
            await client.close()
