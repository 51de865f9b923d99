"""Wire level constants of the web management protocol.

Every request is a POST to the device root with two query parameters:
``code`` selects the operation and ``asyn`` marks the challenge request.
Authenticated requests add the session ``id``. Multi-value bodies use
CRLF separated lines in both directions.
"""

from __future__ import annotations

from enum import IntEnum

SEPARATOR = "\r\n"

#: Status prefix of a successful state-set response
SUCCESS_MARKER = "00000"

#: Status the device answers the unauthenticated challenge request with
CHALLENGE_STATUS = 401


class RequestCode(IntEnum):
    """Enum for the ``code`` query parameter."""

    SET_STATE = 1
    GET_STATE = 2
    AUTH = 7
    LOGOUT = 11


def split_values(data: str | None) -> list[str]:
    """Split a response body into its non-empty lines."""
    if not data:
        return []
    return [value for value in data.split(SEPARATOR) if value]


def join_values(values: list[str]) -> str:
    """Join lines into a request body."""
    return SEPARATOR.join(values)
