"""Open-ended waiting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from uavexec.command import IdleCommand
from uavexec.errors import UndefinedForecastError
from uavexec.model import Estimate
from uavexec.unit import ClockTime, Number, Time

from .engine import CeeType, CommandExecEngine, Coordinates

if TYPE_CHECKING:
    from uavexec.nodes import UAVNode


class IdleCEE(CommandExecEngine):
    """Keeps the node where it is, drawing nothing, until told to stop.

    Used to terminate a detour chain so the driver always has a current
    engine to poll. Only ``command_completed`` ends it.
    """

    def __init__(self, node: UAVNode, command: IdleCommand | None, location: Coordinates | None = None):
        super().__init__(node, command, CeeType.IDLE, to=location, origin=location)

    def _initialize(self, now: ClockTime) -> None:
        self.consumption_per_second = 0.0

    def _check_completion(self, now: float) -> bool:
        return False

    def get_overall_duration(self) -> float:
        raise UndefinedForecastError("IdleCEE has no determined ending time")

    def get_remaining_time(self, now: Time | Number | None = None) -> float:
        raise UndefinedForecastError("IdleCEE has no determined ending time")

    def get_probable_consumption(
        self, normalized: bool = True, from_method: Estimate = Estimate.MEAN
    ) -> float:
        return 0.0
