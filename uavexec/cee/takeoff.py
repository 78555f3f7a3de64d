"""Vertical climb or descent to a target altitude."""

from __future__ import annotations

from typing import TYPE_CHECKING

from uavexec import config
from uavexec.command import TakeoffCommand
from uavexec.model import Estimate
from uavexec.unit import ClockTime, Number, Time

from .engine import CeeType, CommandExecEngine

if TYPE_CHECKING:
    from uavexec.nodes import UAVNode


class TakeoffCEE(CommandExecEngine):
    """Moves the node straight up (climb angle +90) or down (-90) to ``command.z``.

    The horizontal position and the heading are left untouched.
    """

    command: TakeoffCommand

    def __init__(self, node: UAVNode, command: TakeoffCommand | None):
        to = (node.x, node.y, command.z) if command is not None else None
        super().__init__(node, command, CeeType.TAKEOFF, to=to)

    def _initialize(self, now: ClockTime) -> None:
        self.pitch = 0.0
        self.climb_angle = 90.0 if self.to_coordinates[2] > self.from_coordinates[2] else -90.0
        self.speed = self.node.get_speed(self.climb_angle)
        super()._initialize(now)

    def _write_node_parameters(self) -> None:
        self.node.pitch = self.pitch
        self.node.climb_angle = self.climb_angle
        self.node.speed = self.speed

    def _advance(self, step: float) -> None:
        target = self.to_coordinates[2]
        step_distance = self.speed * step
        if step_distance >= abs(target - self.node.z) - config.EPSILON:
            self.node.z = target
        elif target > self.node.z:
            self.node.z += step_distance
        else:
            self.node.z -= step_distance

    def _check_completion(self, now: float) -> bool:
        return abs(self.to_coordinates[2] - self.node.z) < config.EPSILON

    def _height(self) -> float:
        return abs(self.to_coordinates[2] - self.from_coordinates[2])

    def get_overall_duration(self) -> float:
        self._require_initialized("get_overall_duration")
        return self._height() / self.speed

    def get_overall_duration_quantile(self) -> float:
        self._require_initialized("get_overall_duration_quantile")
        return self._height() / self.node.get_speed(self.climb_angle, Estimate.QUANTILE)

    def get_remaining_time(self, now: Time | Number | None = None) -> float:
        self._require_initialized("get_remaining_time")
        return abs(self.to_coordinates[2] - self.node.z) / self.speed

    def get_probable_consumption(
        self, normalized: bool = True, from_method: Estimate = Estimate.MEAN
    ) -> float:
        self._require_initialized("get_probable_consumption")
        duration = self._height() / self.speed
        total = self.node.get_movement_consumption(self.climb_angle, duration, from_method)
        return self._checked_consumption(total, duration, normalized)
