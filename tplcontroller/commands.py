"""Catalog of the controllable features of a device.

A :class:`Command` names the device command group read and written for a
feature and describes every key of that group the library knows about.
Keys map human facing aliases to the raw values the device uses and may
allow ``toggle`` as a pseudo value which inverts the current state.

>>> from tplcontroller.commands import COMMANDS
>>> COMMANDS["led"].keys["enable"].aliases["on"]
'1'
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

TOGGLE = "toggle"


@dataclass(frozen=True)
class KeySpec:
    """Description of a single key of a command group."""

    #: Alias name to raw device value, ``None`` if the key takes raw values only
    aliases: Mapping[str, str] | None = field(default=None, hash=False)
    #: Whether ``toggle`` is accepted for this key
    toggle: bool = False

    def __post_init__(self) -> None:
        if self.aliases is not None:
            aliases = {
                str(name).lower(): str(value) for name, value in self.aliases.items()
            }
            object.__setattr__(self, "aliases", MappingProxyType(aliases))

    @property
    def is_binary(self) -> bool:
        """Return True if the key has exactly two aliased values."""
        return self.aliases is not None and len(self.aliases) == 2


@dataclass(frozen=True)
class Command:
    """A device command group and its known keys."""

    #: Command group identifier sent to the device
    id: str
    keys: Mapping[str, KeySpec] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", MappingProxyType(dict(self.keys)))


LED = Command(
    id="112|1,0,0",
    keys={
        "enable": KeySpec(aliases={"on": "1", "off": "0"}, toggle=True),
    },
)

COMMANDS: Mapping[str, Command] = MappingProxyType(
    {
        "led": LED,
    }
)


def get_command(name: str) -> Command | None:
    """Return the catalog command for name, if any."""
    return COMMANDS.get(name.lower())
