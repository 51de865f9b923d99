"""python-tplcontroller exceptions."""

from __future__ import annotations

from asyncio import TimeoutError as _asyncioTimeoutError
from typing import Any


class TplException(Exception):
    """Base exception for library errors."""


class TimeoutError(TplException, _asyncioTimeoutError):
    """Timeout exception for device errors."""

    def __repr__(self) -> str:
        return TplException.__repr__(self)

    def __str__(self) -> str:
        return TplException.__str__(self)


class _ConnectionError(TplException):
    """Connection exception for device errors."""


class DeviceError(TplException):
    """Base exception for errors reported by the device."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self.status: int | None = kwargs.get("status")
        super().__init__(*args)

    def __repr__(self) -> str:
        status = f"status={self.status}" if self.status is not None else ""
        return f"{self.__class__.__name__}({status})"


class AuthenticationError(DeviceError):
    """Exception for a failed or malformed challenge/login exchange."""


class InvalidStateError(TplException):
    """Exception for desired states that cannot be resolved for a command."""
