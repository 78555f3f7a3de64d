"""Kinematics and energy model of a UAV.

The command execution engines never compute speeds or current draw
themselves; they ask the node, which delegates to a ``FlightModel``:

    • get_speed(climb_angle, method): cruise speed for a flight-path angle
    • get_movement_consumption(climb_angle, duration, method): charge used while moving
    • get_hover_consumption(duration, method): charge used while hovering

``method`` selects between a stochastic draw, the expected value and a
pessimistic quantile (``Estimate``). Speeds and current draw are linearly
interpolated over the absolute climb angle, from level flight (0°) to purely
vertical flight (90°), with separate climb and descent profiles.

The per-second rate an engine discharges while it runs is drawn once at
initialisation by a ``ConsumptionProvider``. The default provider samples the
model (``Estimate.RANDOM``); tests inject ``FixedConsumptionProvider``.

Example:
    >>> model = FlightModel(horizontal_speed=10.0, climb_speed=4.0)
    >>> model.get_speed(90.0)
    4.0
    >>> model.get_hover_consumption(60.0)
    270.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, auto
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import numpy as np

from uavexec import config

if TYPE_CHECKING:
    from uavexec.cee import CommandExecEngine

_ANGLE_GRID = (0.0, 90.0)


class Estimate(IntEnum):
    """How a forecast is derived from the model.

    RANDOM: One stochastic draw around the expected value.
    MEAN: The expected value.
    QUANTILE: A pessimistic value (slower speed, higher consumption).
    """

    RANDOM = auto()
    MEAN = auto()
    QUANTILE = auto()


@dataclass(frozen=True)
class FlightModel:
    """Speed and current-draw profile of one UAV type.

    Attributes:
        horizontal_speed (float): Speed in level flight, m/s.
        climb_speed (float): Speed in vertical climb, m/s.
        descent_speed (float): Speed in vertical descent, m/s.
        pessimistic_speed_factor (float): Multiplier applied to speeds for
            ``Estimate.QUANTILE``, in (0, 1].
        hover_consumption (float): Draw while hovering, mAh/s.
        horizontal_consumption (float): Draw in level flight, mAh/s.
        climb_consumption (float): Draw in vertical climb, mAh/s.
        descent_consumption (float): Draw in vertical descent, mAh/s.
        relative_std (float): Standard deviation of the draw relative to its mean.
        quantile_z (float): z-score of the pessimistic quantile.
        rng (np.random.Generator): Source of randomness for ``Estimate.RANDOM``.
    """

    horizontal_speed: float = config.HORIZONTAL_SPEED
    climb_speed: float = config.CLIMB_SPEED
    descent_speed: float = config.DESCENT_SPEED
    pessimistic_speed_factor: float = config.PESSIMISTIC_SPEED_FACTOR
    hover_consumption: float = config.HOVER_CONSUMPTION
    horizontal_consumption: float = config.HORIZONTAL_CONSUMPTION
    climb_consumption: float = config.CLIMB_CONSUMPTION
    descent_consumption: float = config.DESCENT_CONSUMPTION
    relative_std: float = config.CONSUMPTION_RELATIVE_STD
    quantile_z: float = config.QUANTILE_Z_SCORE
    rng: np.random.Generator = field(default_factory=np.random.default_rng, compare=False, repr=False)

    def __post_init__(self):
        speeds = (self.horizontal_speed, self.climb_speed, self.descent_speed)
        if min(speeds) <= 0.0:
            msg = f"Speeds must be positive, got {speeds}"
            raise ValueError(msg)
        if not 0.0 < self.pessimistic_speed_factor <= 1.0:
            msg = f"Invalid pessimistic speed factor: {self.pessimistic_speed_factor}"
            raise ValueError(msg)
        if self.relative_std < 0.0:
            msg = f"Relative standard deviation cannot be negative: {self.relative_std}"
            raise ValueError(msg)

    @staticmethod
    def _interp(climb_angle: float, level: float, up: float, down: float) -> float:
        angle = float(np.clip(climb_angle, -90.0, 90.0))
        vertical = up if angle >= 0.0 else down
        return float(np.interp(abs(angle), _ANGLE_GRID, (level, vertical)))

    def get_speed(self, climb_angle: float, method: Estimate = Estimate.MEAN) -> float:
        """Cruise speed in m/s for a flight-path angle in degrees."""
        speed = self._interp(
            climb_angle, self.horizontal_speed, self.climb_speed, self.descent_speed
        )
        if method is Estimate.QUANTILE:
            speed *= self.pessimistic_speed_factor
        return speed

    def movement_rate(self, climb_angle: float) -> float:
        """Expected draw in mAh/s while flying at ``climb_angle``."""
        return self._interp(
            climb_angle,
            self.horizontal_consumption,
            self.climb_consumption,
            self.descent_consumption,
        )

    def _estimate(self, mean: float, method: Estimate) -> float:
        std = mean * self.relative_std
        if method is Estimate.MEAN:
            return mean
        if method is Estimate.QUANTILE:
            return mean + self.quantile_z * std
        return max(0.0, float(self.rng.normal(mean, std)))

    def get_movement_consumption(
        self, climb_angle: float, duration: float, method: Estimate = Estimate.MEAN
    ) -> float:
        """Charge in mAh used flying at ``climb_angle`` for ``duration`` seconds."""
        return self._estimate(self.movement_rate(climb_angle) * float(duration), method)

    def get_hover_consumption(self, duration: float, method: Estimate = Estimate.MEAN) -> float:
        """Charge in mAh used hovering for ``duration`` seconds."""
        return self._estimate(self.hover_consumption * float(duration), method)


@runtime_checkable
class ConsumptionProvider(Protocol):
    """Draws the per-second discharge rate an engine applies while it runs."""

    def draw(self, cee: CommandExecEngine) -> float: ...


class ForecastConsumptionProvider:
    """Samples the engine's own normalised forecast once (``Estimate.RANDOM``)."""

    def draw(self, cee: CommandExecEngine) -> float:
        return cee.get_probable_consumption(normalized=True, from_method=Estimate.RANDOM)


class FixedConsumptionProvider:
    """Always returns the same rate; for deterministic runs and tests."""

    def __init__(self, rate: float):
        if rate < 0.0:
            msg = f"Consumption rate cannot be negative, got {rate}"
            raise ValueError(msg)
        self.rate = float(rate)

    def draw(self, cee: CommandExecEngine) -> float:
        return self.rate
