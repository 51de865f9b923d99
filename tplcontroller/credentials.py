"""Credentials class for the device web interface."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Credentials:
    """Credentials for authentication.

    The management interface only knows a single administrator account,
    so the password is the only secret the handshake needs.
    """

    #: Password of the device web interface
    password: str = field(default="", repr=False)
