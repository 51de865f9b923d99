"""Python interface for the web management protocol of TP-Link devices.

All actions are available through the :class:`TplController` class::

>>> from tplcontroller import TplController
>>> ctrl = TplController.from_values("192.168.178.2", "secret")
>>> await ctrl.turn_led("off")
{'state': 'success'}

Each action returns a dict with a ``state`` of ``success``, ``error``,
``no action``, ``invalid command``, ``invalid state`` or the error message
of a failed request.
"""

from tplcontroller.commands import COMMANDS, LED, Command, KeySpec
from tplcontroller.controller import ActionResult, TplController
from tplcontroller.credentials import Credentials
from tplcontroller.deviceconfig import DeviceConfig
from tplcontroller.exceptions import (
    AuthenticationError,
    DeviceError,
    InvalidStateError,
    TimeoutError,
    TplException,
)
from tplcontroller.version import __version__

__all__ = [
    "ActionResult",
    "AuthenticationError",
    "COMMANDS",
    "Command",
    "Credentials",
    "DeviceConfig",
    "DeviceError",
    "InvalidStateError",
    "KeySpec",
    "LED",
    "TimeoutError",
    "TplController",
    "TplException",
    "__version__",
]
