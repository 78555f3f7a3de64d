"""Charging at a charging station."""

from __future__ import annotations

from typing import TYPE_CHECKING

from uavexec.command import ChargeCommand
from uavexec.errors import InvariantViolationError, PrematureQueryError, UndefinedForecastError
from uavexec.model import Estimate
from uavexec.unit import ClockTime, MilliampHour, Number, Time

from .engine import CeeType, CommandExecEngine, Coordinates

if TYPE_CHECKING:
    from uavexec.nodes import UAVNode


class ChargeCEE(CommandExecEngine):
    """Stays docked until the battery reports full.

    The station does the charging; this engine only parks the node and waits.
    How long that takes depends on the station, so no duration forecast
    exists. Charging counts as negative consumption: see
    :meth:`get_consumption_total`.

    Attributes:
        battery_remaining_execution_start (MilliampHour | None): Battery level
            at activation.
    """

    command: ChargeCommand
    battery_remaining_execution_start: MilliampHour | None

    def __init__(self, node: UAVNode, command: ChargeCommand | None, location: Coordinates | None = None):
        """Create the engine; ``location`` is the station's position when known."""
        super().__init__(node, command, CeeType.CHARGE, to=location, origin=location)
        self.battery_remaining_execution_start = None

    def _initialize(self, now: ClockTime) -> None:
        self.consumption_per_second = 0.0

    def _write_node_parameters(self) -> None:
        self._hold_still()
        self.battery_remaining_execution_start = self.node.battery.remaining

    def _check_completion(self, now: float) -> bool:
        return self.node.battery.is_full()

    def get_overall_duration(self) -> float:
        raise UndefinedForecastError("ChargeCEE has no determined ending time")

    def get_remaining_time(self, now: Time | Number | None = None) -> float:
        raise UndefinedForecastError("ChargeCEE has no determined ending time")

    def get_probable_consumption(
        self, normalized: bool = True, from_method: Estimate = Estimate.MEAN
    ) -> float:
        return 0.0

    def get_consumption_total(self) -> float:
        """Charge gained since activation, as a negative consumption in mAh.

        Raises:
            PrematureQueryError: If the engine has not been activated.
            InvariantViolationError: If the battery lost charge while docked.
        """
        if not self.started:
            raise PrematureQueryError("get_consumption_total(): ChargeCEE not yet started")
        gained = float(self.node.battery.remaining) - float(self.battery_remaining_execution_start)
        if gained < 0.0:
            msg = f"Battery of {self.node.name} lost {-gained:.3f} mAh while charging"
            raise InvariantViolationError(msg)
        return -gained
