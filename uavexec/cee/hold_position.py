"""Hovering in place for a fixed duration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from uavexec import config
from uavexec.command import HoldPositionCommand
from uavexec.errors import InvariantViolationError, PrematureQueryError
from uavexec.model import Estimate
from uavexec.unit import ClockTime, Number, Time

from .engine import CeeType, CommandExecEngine

if TYPE_CHECKING:
    from uavexec.nodes import UAVNode


class HoldPositionCEE(CommandExecEngine):
    """Hovers until ``now + hold_seconds``, measured from initialisation.

    The node does not move; each slice only draws hover current. The driver
    must poll completion at least once per slice: a poll that finds the
    deadline already passed, without having reported completion before,
    means the hold lasted longer than commanded and raises
    ``InvariantViolationError``.

    Attributes:
        hold_position_till (ClockTime | None): Completion deadline, set by
            ``initialize``.
    """

    command: HoldPositionCommand
    hold_position_till: ClockTime | None

    def __init__(self, node: UAVNode, command: HoldPositionCommand | None):
        to = (command.x, command.y, command.z) if command is not None else None
        super().__init__(node, command, CeeType.HOLD_POSITION, to=to)
        self.hold_position_till = None

    def _initialize(self, now: ClockTime) -> None:
        self.hold_position_till = now + self.command.hold_seconds
        super()._initialize(now)

    def _write_node_parameters(self) -> None:
        self.node.pitch = 0.0
        self.node.climb_angle = 0.0
        self.node.speed = 0.0

    def _check_completion(self, now: float) -> bool:
        if self.hold_position_till is None:
            msg = "HoldPosition completion polled before initialisation"
            raise PrematureQueryError(msg)
        deadline = float(self.hold_position_till)
        if now > deadline + config.EPSILON:
            msg = (
                f"Unexpected situation: HoldPosition of {self.node.name} lasted longer than "
                f"intended (deadline {self.hold_position_till}, now {ClockTime(now)})"
            )
            raise InvariantViolationError(msg)
        return now >= deadline - config.EPSILON

    def get_overall_duration(self) -> float:
        return float(self.command.hold_seconds)

    def get_remaining_time(self, now: Time | Number | None = None) -> float:
        if self.hold_position_till is None or now is None:
            msg = "get_remaining_time(): HoldPosition needs an initialised deadline and the current time"
            raise PrematureQueryError(msg)
        return float(self.hold_position_till) - float(now)

    def get_probable_consumption(
        self, normalized: bool = True, from_method: Estimate = Estimate.MEAN
    ) -> float:
        duration = float(self.command.hold_seconds)
        total = self.node.get_hover_consumption(duration, from_method)
        return self._checked_consumption(total, duration, normalized)
