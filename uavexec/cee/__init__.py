"""Command execution engines: one behaviour instance per UAV and command.

Exports:
    CommandExecEngine: Abstract lifecycle shared by all engines
    CeeType: Variant tag
    CeeState: Lifecycle stage
    WaypointCEE, TakeoffCEE, HoldPositionCEE, ChargeCEE, ExchangeCEE, IdleCEE:
        The concrete behaviours
    make_cee: Build the engine matching a command
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from uavexec.command import (
    ChargeCommand,
    Command,
    ExchangeCommand,
    HoldPositionCommand,
    IdleCommand,
    TakeoffCommand,
    WaypointCommand,
)

from .charge import ChargeCEE
from .engine import CeeState, CeeType, CommandExecEngine, Coordinates, distance
from .exchange import ExchangeCEE
from .hold_position import HoldPositionCEE
from .idle import IdleCEE
from .takeoff import TakeoffCEE
from .waypoint import WaypointCEE

if TYPE_CHECKING:
    from uavexec.nodes import UAVNode

_ENGINES: dict[type[Command], type[CommandExecEngine]] = {
    WaypointCommand: WaypointCEE,
    TakeoffCommand: TakeoffCEE,
    HoldPositionCommand: HoldPositionCEE,
    ChargeCommand: ChargeCEE,
    ExchangeCommand: ExchangeCEE,
    IdleCommand: IdleCEE,
}


def make_cee(node: UAVNode, command: Command) -> CommandExecEngine:
    """Create the engine that executes ``command`` on ``node``.

    Raises:
        TypeError: If no engine handles the command's type.
    """
    try:
        engine = _ENGINES[type(command)]
    except KeyError:
        msg = f"No command execution engine for {type(command).__name__}"
        raise TypeError(msg) from None
    return engine(node, command)


__all__ = [
    "CommandExecEngine",
    "CeeType",
    "CeeState",
    "Coordinates",
    "distance",
    "WaypointCEE",
    "TakeoffCEE",
    "HoldPositionCEE",
    "ChargeCEE",
    "ExchangeCEE",
    "IdleCEE",
    "make_cee",
]
