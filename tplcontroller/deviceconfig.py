"""Configuration for connecting to a device.

A :class:`DeviceConfig` carries everything a single request cycle needs:

>>> from tplcontroller import Credentials, DeviceConfig
>>> config = DeviceConfig("192.168.178.2", credentials=Credentials("secret"))
>>> print(config.to_dict_control_credentials(exclude_credentials=True))
{'host': '192.168.178.2', 'timeout': 5}

The configuration is read-only once a controller has been created from it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Self

from aiohttp import ClientSession
from mashumaro import field_options
from mashumaro.config import BaseConfig
from mashumaro.mixins.orjson import DataClassORJSONMixin
from mashumaro.types import SerializationStrategy

from .credentials import Credentials

_LOGGER = logging.getLogger(__name__)


class _DoNotSerialize(SerializationStrategy):
    def serialize(self, value: Any) -> None:
        return None

    def deserialize(self, value: Any) -> None:
        return None


@dataclass
class DeviceConfig(DataClassORJSONMixin):
    """Class to represent the parameters needed to talk to a device."""

    class Config(BaseConfig):
        """Serialization config."""

        omit_none = True

    DEFAULT_TIMEOUT = 5
    #: IP address or hostname
    host: str
    #: Timeout for each request to the device
    timeout: int | None = DEFAULT_TIMEOUT
    #: Override the default http port to support port forwarding
    port_override: int | None = None
    #: Credentials of the device web interface
    credentials: Credentials | None = None

    # compare=False will be excluded from object comparison.
    #: Set a custom http_client for the device to use.
    http_client: ClientSession | None = field(
        default=None,
        compare=False,
        metadata=field_options(serialization_strategy=_DoNotSerialize()),
    )

    @property
    def address(self) -> str:
        """Return the address used for urls and the Host header."""
        if self.port_override:
            return f"{self.host}:{self.port_override}"
        return self.host

    @property
    def password(self) -> str | None:
        """Return the configured password, if any."""
        return self.credentials.password if self.credentials else None

    def __pre_serialize__(self) -> Self:
        return replace(self, http_client=None)

    def to_dict_control_credentials(
        self, *, exclude_credentials: bool = False
    ) -> dict[str, Any]:
        """Convert the config to a dict, optionally leaving out the credentials."""
        if exclude_credentials:
            return replace(self, credentials=None).to_dict()
        return self.to_dict()
