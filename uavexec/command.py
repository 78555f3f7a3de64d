"""Mission commands: immutable parameter carriers, one per behaviour.

Commands hold what to do; the matching command execution engine decides how.
An engine borrows its command and never mutates it, so all commands are
frozen dataclasses. Node references (charging station, exchange partner) are
held by identity and excluded from equality.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from uavexec.unit import Number, Second

if TYPE_CHECKING:
    from uavexec.nodes import Node


class Command:
    """Marker base class for all mission commands."""


@dataclass(frozen=True)
class WaypointCommand(Command):
    """Fly in a straight line to ``(x, y, z)``."""

    x: float
    y: float
    z: float


@dataclass(frozen=True)
class TakeoffCommand(Command):
    """Climb or descend vertically to altitude ``z``."""

    z: float


@dataclass(frozen=True)
class HoldPositionCommand(Command):
    """Hover at ``(x, y, z)`` for ``hold_seconds``."""

    x: float
    y: float
    z: float
    hold_seconds: Second | Number

    def __post_init__(self):
        if self.hold_seconds < 0:
            msg = f"Hold duration cannot be negative, got {self.hold_seconds}"
            raise ValueError(msg)


@dataclass(frozen=True)
class ChargeCommand(Command):
    """Charge at ``charging_node`` until the battery is full."""

    charging_node: Node | None = field(default=None, compare=False)


@dataclass(frozen=True)
class ExchangeCommand(Command):
    """Exchange mission data with ``other_node``, optionally followed by a recharge detour.

    Attributes:
        other_node: The partner taking over the mission, if known.
        recharge_requested: Whether this node should hand over its mission and
            leave to recharge once the exchange ends.
    """

    other_node: Node | None = field(default=None, compare=False)
    recharge_requested: bool = False

    def is_other_node_known(self) -> bool:
        return self.other_node is not None

    def is_recharge_requested(self) -> bool:
        return self.recharge_requested


@dataclass(frozen=True)
class IdleCommand(Command):
    """Wait in place until told otherwise."""
