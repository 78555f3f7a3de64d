"""Straight-line flight to a waypoint."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from uavexec import config
from uavexec.command import WaypointCommand
from uavexec.model import Estimate
from uavexec.unit import ClockTime, Number, Time

from .engine import CeeType, CommandExecEngine, distance

if TYPE_CHECKING:
    from uavexec.nodes import UAVNode


def _clamp(delta: float) -> float:
    return 0.0 if abs(delta) < config.EPSILON else delta


class WaypointCEE(CommandExecEngine):
    """Flies the node from its position at construction to the command's target.

    Heading and climb angle are derived from the segment once, at
    initialisation; the speed then follows from the climb angle through the
    node's flight model. Every slice moves the node ``speed * step`` meters
    along that direction. The slice that would overshoot lands exactly on the
    target instead.

    Completion is reached when the Manhattan distance to the target drops
    below ``EPSILON``.
    """

    command: WaypointCommand

    def __init__(self, node: UAVNode, command: WaypointCommand | None):
        to = (command.x, command.y, command.z) if command is not None else None
        super().__init__(node, command, CeeType.WAYPOINT, to=to)

    def _initialize(self, now: ClockTime) -> None:
        x0, y0, z0 = self.from_coordinates
        x1, y1, z1 = self.to_coordinates
        dx, dy, dz = _clamp(x1 - x0), _clamp(y1 - y0), _clamp(z1 - z0)

        self.yaw = math.degrees(math.atan2(dy, dx))
        if self.yaw < 0.0:
            self.yaw += 360.0
        self.climb_angle = math.degrees(math.atan2(dz, math.hypot(dx, dy)))
        self.pitch = -self.climb_angle

        self.speed = self.node.get_speed(self.climb_angle)
        super()._initialize(now)

    def _write_node_parameters(self) -> None:
        self.node.yaw = self.yaw
        self.node.pitch = self.pitch
        self.node.climb_angle = self.climb_angle
        self.node.speed = self.speed

    def _advance(self, step: float) -> None:
        step_distance = self.speed * step
        if step_distance >= distance(self.node.position, self.to_coordinates) - config.EPSILON:
            self.node.x, self.node.y, self.node.z = self.to_coordinates
            return

        climb = math.radians(self.climb_angle)
        yaw = math.radians(self.yaw)
        step_xy = step_distance * math.cos(climb)
        self.node.x += step_xy * math.cos(yaw)
        self.node.y += step_xy * math.sin(yaw)
        self.node.z += step_distance * math.sin(climb)

    def _check_completion(self, now: float) -> bool:
        x1, y1, z1 = self.to_coordinates
        manhattan = abs(x1 - self.node.x) + abs(y1 - self.node.y) + abs(z1 - self.node.z)
        return manhattan < config.EPSILON

    def get_overall_duration(self) -> float:
        self._require_initialized("get_overall_duration")
        return distance(self.from_coordinates, self.to_coordinates) / self.speed

    def get_overall_duration_quantile(self) -> float:
        """Duration at the flight model's pessimistic speed for this climb angle."""
        self._require_initialized("get_overall_duration_quantile")
        pessimistic_speed = self.node.get_speed(self.climb_angle, Estimate.QUANTILE)
        return distance(self.from_coordinates, self.to_coordinates) / pessimistic_speed

    def get_remaining_time(self, now: Time | Number | None = None) -> float:
        self._require_initialized("get_remaining_time")
        return distance(self.node.position, self.to_coordinates) / self.speed

    def get_probable_consumption(
        self, normalized: bool = True, from_method: Estimate = Estimate.MEAN
    ) -> float:
        self._require_initialized("get_probable_consumption")
        length = distance(self.from_coordinates, self.to_coordinates)
        if length == 0.0:
            return 0.0
        duration = length / self.speed
        total = self.node.get_movement_consumption(self.climb_angle, duration, from_method)
        return self._checked_consumption(total, duration, normalized, strictly_positive=True)
