"""Reconciliation of desired states with the state reported by a device.

The device reports a command group as a dump of ``<key> <value>`` lines after
two header lines. Desired states are given with aliases (``on``), the
``toggle`` pseudo value or raw values. Reconciling both produces the smallest
update that reaches the desired state, for example::

    id 112|1,0,0
    enable 1

Only keys whose resolved value differs from the reported one are written.
If nothing differs there is nothing to send.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from .commands import TOGGLE, Command, KeySpec
from .exceptions import DeviceError, InvalidStateError
from .protocol import SUCCESS_MARKER, join_values, split_values

_LOGGER = logging.getLogger(__name__)

#: Number of header lines preceding the key value pairs of a state dump
HEADER_LINES = 2


class PendingToggle(Enum):
    """Marker for a key that inverts its current value."""

    TOGGLE = "toggle"


ResolvedStates = dict[str, str | PendingToggle]


def parse_current_states(values: list[str]) -> dict[str, str]:
    """Parse the lines of a state dump into a key value mapping."""
    current: dict[str, str] = {}
    for line in values[HEADER_LINES:]:
        key, sep, value = line.partition(" ")
        if not sep:
            raise DeviceError(f"Unable to parse state line {line!r}")
        current[key] = value
    return current


def resolve_states(
    command: Command, states: Mapping[str, Any] | None
) -> ResolvedStates:
    """Resolve aliases and toggles of the desired states.

    Keys unknown to the command are passed on as they are.
    """
    if not command.keys or not states:
        raise InvalidStateError("invalid state")

    resolved: ResolvedStates = {}
    for key, requested in states.items():
        spec = command.keys.get(key)
        if spec is None:
            resolved[key] = str(requested)
            continue

        value = str(requested).lower()
        if spec.aliases and value in spec.aliases:
            resolved[key] = spec.aliases[value]
        elif spec.toggle and value == TOGGLE:
            if spec.aliases is not None and not spec.is_binary:
                raise InvalidStateError(
                    f"Toggle is not supported for {key} "
                    + f"with {len(spec.aliases)} values"
                )
            resolved[key] = PendingToggle.TOGGLE
        else:
            resolved[key] = str(requested)

    return resolved


def resolve_toggle(spec: KeySpec | None, current: str | None) -> str:
    """Return the value which inverts current.

    Keys with two aliases switch to the other aliased value. Keys without
    aliases are treated as single bit flags.
    """
    if spec is not None and spec.is_binary:
        first, second = spec.aliases.values()  # type: ignore[union-attr]
        return second if current == first else first

    return "1" if current == "0" else "0"


def merge_states(
    command: Command, resolved: ResolvedStates, current: Mapping[str, str]
) -> str | None:
    """Return the update payload for the resolved states, None if up to date."""
    changes = []
    for key, value in resolved.items():
        if value is PendingToggle.TOGGLE:
            value = resolve_toggle(command.keys.get(key), current.get(key))
        if value != current.get(key):
            changes.append(f"{key} {value}")

    if not changes:
        _LOGGER.debug("Command %s already in requested state", command.id)
        return None

    _LOGGER.debug("Command %s changes: %s", command.id, changes)
    return join_values([f"id {command.id}", *changes])


def reconcile(
    command: Command, states: Mapping[str, Any] | None, dump: str | list[str]
) -> str | None:
    """Return the update payload reaching states from a raw state dump."""
    values = split_values(dump) if isinstance(dump, str) else dump
    resolved = resolve_states(command, states)
    return merge_states(command, resolved, parse_current_states(values))


def is_success(response: str | None) -> bool:
    """Return True if a state-set response reports success."""
    if not response:
        return False
    return response.startswith(SUCCESS_MARKER)
