"""Mission hand-over to another UAV, optionally followed by a recharge detour.

When the exchange command asks for a recharge, this engine is where a UAV
leaves its mission:

    1. Entry: the remaining mission data is transferred to the partner UAV.
    2. The exchange itself lasts until the driver ends it (``command_completed``).
    3. Exit: a detour is synthesised and handed back to the driver.

The detour is three engines, none of which count towards the mission:

    WaypointCEE ──▶ ChargeCEE ──▶ IdleCEE
    (to nearest      (until full)   (until released)
     station)

Before returning them, the engine forecasts the flight to the station by
initialising (but not activating) the waypoint engine, and reserves a spot
at the station with the expected arrival time and the charge expected to be
spent on the way. The reservation is fire-and-forget.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from uavexec import config
from uavexec.command import ChargeCommand, ExchangeCommand, IdleCommand, WaypointCommand
from uavexec.errors import UndefinedForecastError
from uavexec.log import get_logger
from uavexec.messages import ReserveSpotMessage
from uavexec.model import Estimate
from uavexec.unit import ClockTime, MilliampHour, Number, Time

from .charge import ChargeCEE
from .engine import CeeType, CommandExecEngine
from .idle import IdleCEE
from .waypoint import WaypointCEE

if TYPE_CHECKING:
    from uavexec.nodes import Node, UAVNode

logger = get_logger(__name__)


class ExchangeCEE(CommandExecEngine):
    """Data or payload exchange with ``command.other_node``.

    The node hovers in place for the duration of the exchange. The exchange
    has no forecastable length: only the override flag completes it.
    """

    command: ExchangeCommand

    def __init__(self, node: UAVNode, command: ExchangeCommand | None):
        super().__init__(node, command, CeeType.EXCHANGE)

    @property
    def other_node(self) -> Node | None:
        return self.command.other_node if self.command is not None else None

    def _write_node_parameters(self) -> None:
        self._hold_still()

    def _check_completion(self, now: float) -> bool:
        return False

    def get_overall_duration(self) -> float:
        raise UndefinedForecastError("ExchangeCEE has no determined ending time")

    def get_remaining_time(self, now: Time | Number | None = None) -> float:
        raise UndefinedForecastError("ExchangeCEE has no determined ending time")

    def get_probable_consumption(
        self, normalized: bool = True, from_method: Estimate = Estimate.MEAN
    ) -> float:
        """Hover consumption per second; the exchange length is unknown, so only the rate exists."""
        if not normalized:
            logger.warning("get_probable_consumption(): non-normalized not supported for ExchangeCEE")
        duration = 1.0
        total = self.node.get_hover_consumption(duration, Estimate.MEAN)
        return self._checked_consumption(total, duration, normalized=True)

    def perform_entry_actions(self, now: Time | Number) -> None:
        if not self.command.is_recharge_requested():
            return
        if not self.command.is_other_node_known():
            logger.error(
                "perform_entry_actions(): No other node for %s's exchange command.", self.node.name
            )
            return

        logger.info(
            "perform_entry_actions(): Ready for exchange, sending data to other node (%s)",
            self.other_node.name,
        )
        self.node.transfer_mission_data_to(self.other_node)

    def perform_exit_actions(self, now: Time | Number) -> list[CommandExecEngine]:
        """Build the recharge detour and reserve a spot at the nearest station.

        Returns:
            list[CommandExecEngine]: ``[waypoint, charge, idle]`` when a recharge
                was requested and a station exists, otherwise an empty list.
        """
        if not self.command.is_recharge_requested():
            return []

        station = self.node.find_nearest_charging_station(self.node.x, self.node.y, self.node.z)
        if station is None:
            logger.error("perform_exit_actions(): No charging station reachable for %s.", self.node.name)
            return []

        go_to_station = WaypointCEE(self.node, WaypointCommand(*station.position))
        go_to_station.set_part_of_mission(False)
        go_to_station.set_no_replacement_needed()

        # Initialised only to read the forecast; the driver activates it later
        go_to_station.initialize(now)
        duration = go_to_station.get_overall_duration()

        reservation = ReserveSpotMessage(
            estimated_arrival=ClockTime.from_si(float(now) + duration),
            consumption_till_arrival=MilliampHour.from_si(
                go_to_station.get_probable_consumption(normalized=False)
            ),
            target_percentage=config.TARGET_CHARGE_PERCENTAGE,
            sender=self.node,
        )
        self.node.get_output_channel_to(station).send(reservation)

        charge = ChargeCEE(self.node, ChargeCommand(station), location=station.position)
        charge.set_part_of_mission(False)
        charge.set_no_replacement_needed()

        idle = IdleCEE(self.node, IdleCommand(), location=station.position)
        idle.set_part_of_mission(False)
        idle.set_no_replacement_needed()

        self.node.mission_id = None

        logger.info(
            "perform_exit_actions(): GoToChargingNode and Charge CEE added to %s (arrival %s at %s).",
            self.node.name,
            reservation.estimated_arrival,
            station.name,
        )
        return [go_to_station, charge, idle]
