"""UAV node: the agent whose commands the engines execute.

The node owns everything an engine reads or writes: position and attitude,
the battery, the flight model, and the queues of pending work. It is also
the driver of its own engines: ``update(dt, now)`` runs the execution
contract for whatever engine is current.

Driver Contract:
    For every time slice ``[now, now + dt]``:

        1. No current engine: take the next ready-made engine, or build one
           for the next queued command, then initialize →
           perform_entry_actions → set_node_parameters.
        2. Poll completion at the slice start, so engines that are done on
           arrival (zero-length hold, waypoint at the current position)
           finish without consuming time.
        3. update_state for the rest of the slice, or only up to the
           engine's remaining time when it has a determined end.
        4. Poll completion at the end of the step; on completion run
           perform_exit_actions, mark the engine completed, move it to
           ``history`` and prepend whatever the exit actions returned.
        5. Repeat with the rest of the slice.

    Engines that are never completed (Idle, Exchange) absorb the remainder
    of the slice; ``cancel_current`` is the only way out for them.

Example:
    >>> uav = UAVNode(0, 0, 0, battery=Battery(5000), name="uav-1")
    >>> uav.assign(TakeoffCommand(z=30))
    >>> uav.assign(WaypointCommand(100, 0, 30))
    >>> for t in range(60):
    ...     uav.update(1, t)
    >>> uav.position
    (100.0, 0.0, 30.0)
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from typing import TYPE_CHECKING

from uavexec import config
from uavexec.cee import CeeType, CommandExecEngine, make_cee
from uavexec.command import Command
from uavexec.energy import Battery
from uavexec.log import get_logger
from uavexec.messages import Message, MissionDataMessage
from uavexec.model import ConsumptionProvider, Estimate, FlightModel, ForecastConsumptionProvider
from uavexec.unit import Number, Time

from .node import Node

if TYPE_CHECKING:
    from .charging_station import ChargingNetwork, ChargingStation

logger = get_logger(__name__)

# Engines whose remaining time bounds the step; the rest of the slice goes to the next engine
_TIMED_CEES = (CeeType.WAYPOINT, CeeType.TAKEOFF, CeeType.HOLD_POSITION)


class UAVNode(Node):
    """A UAV executing a queue of command execution engines.

    Attributes:
        yaw (float): Heading in degrees, written by engines at activation.
        pitch (float): Nose angle in degrees.
        climb_angle (float): Flight-path angle in degrees.
        speed (float): Speed along the flight path in m/s.
        battery (Battery): Energy reserve.
        flight_model (FlightModel): Kinematics and consumption profile.
        consumption_provider (ConsumptionProvider): Draws each engine's
            per-second discharge rate at initialisation.
        charging_network (ChargingNetwork | None): Stations this UAV may use.
        mission_id (int | None): Mission currently flown; None while on a detour.
        cees (deque[CommandExecEngine]): Ready-made engines (detours), run before
            any queued command, next one first.
        commands (deque[Command]): Queued mission commands, turned into engines
            when they start.
        current_cee (CommandExecEngine | None): The active engine.
        history (list[CommandExecEngine]): Completed engines, oldest first.
        received_missions (list[MissionDataMessage]): Missions handed over by
            other UAVs.
    """

    yaw: float
    pitch: float
    climb_angle: float
    speed: float

    battery: Battery
    flight_model: FlightModel
    consumption_provider: ConsumptionProvider
    charging_network: ChargingNetwork | None
    mission_id: int | None

    cees: deque[CommandExecEngine]
    commands: deque[Command]
    current_cee: CommandExecEngine | None
    history: list[CommandExecEngine]
    received_missions: list[MissionDataMessage]

    def __init__(
        self,
        x: float = 0.0,
        y: float = 0.0,
        z: float = 0.0,
        battery: Battery | None = None,
        flight_model: FlightModel | None = None,
        consumption_provider: ConsumptionProvider | None = None,
        charging_network: ChargingNetwork | None = None,
        mission_id: int | None = None,
        name: str | None = None,
    ):
        """Create a UAV at ``(x, y, z)``, level and at rest.

        Args:
            battery (Battery | None): Defaults to a full pack of
                ``config.BATTERY_CAPACITY``.
            flight_model (FlightModel | None): Defaults to ``FlightModel()``.
            consumption_provider (ConsumptionProvider | None): Defaults to
                sampling each engine's forecast.
            charging_network (ChargingNetwork | None): Stations for recharge
                detours; without one, detours are skipped.
            mission_id (int | None): Mission the UAV starts on.
            name (str | None): Display name.
        """
        super().__init__(x, y, z, name)
        self.yaw = 0.0
        self.pitch = 0.0
        self.climb_angle = 0.0
        self.speed = 0.0

        self.battery = battery if battery is not None else Battery(config.BATTERY_CAPACITY)
        self.flight_model = flight_model if flight_model is not None else FlightModel()
        self.consumption_provider = (
            consumption_provider if consumption_provider is not None else ForecastConsumptionProvider()
        )
        self.charging_network = charging_network
        self.mission_id = mission_id

        self.cees = deque()
        self.commands = deque()
        self.current_cee = None
        self.history = []
        self.received_missions = []

    # -------------------------------- Model delegation --------------------------------

    def get_speed(self, climb_angle: float, method: Estimate = Estimate.MEAN) -> float:
        return self.flight_model.get_speed(climb_angle, method)

    def get_movement_consumption(
        self, climb_angle: float, duration: float, method: Estimate = Estimate.MEAN
    ) -> float:
        return self.flight_model.get_movement_consumption(climb_angle, duration, method)

    def get_hover_consumption(self, duration: float, method: Estimate = Estimate.MEAN) -> float:
        return self.flight_model.get_hover_consumption(duration, method)

    # -------------------------------- Collaboration --------------------------------

    def find_nearest_charging_station(self, x: float, y: float, z: float) -> ChargingStation | None:
        """Closest station to ``(x, y, z)``, or None if no network or station is known."""
        if self.charging_network is None:
            return None
        return self.charging_network.nearest(x, y, z)

    def transfer_mission_data_to(self, other: Node) -> None:
        """Send the current mission and its pending steps to ``other``."""
        message = MissionDataMessage(mission_id=self.mission_id, pending=self.pending_mission(), sender=self)
        self.get_output_channel_to(other).send(message)

    def on_message(self, message: Message) -> None:
        if isinstance(message, MissionDataMessage):
            self.received_missions.append(message)
            logger.info(
                "%s received mission %s (%d steps) from %s",
                self.name,
                message.mission_id,
                len(message.pending),
                message.sender.name if message.sender is not None else "unknown",
            )

    # -------------------------------- Queue management --------------------------------

    @property
    def is_busy(self) -> bool:
        return self.current_cee is not None or len(self.cees) > 0 or len(self.commands) > 0

    def assign(self, command: Command) -> None:
        """Queue ``command`` behind everything already pending.

        The engine is built when the command starts, so its segment begins
        wherever the UAV is at that moment.
        """
        self.commands.append(command)

    def enqueue(self, cee: CommandExecEngine) -> None:
        """Queue a ready-made engine; it runs before any queued command."""
        if cee.node is not self:
            msg = f"{cee!r} is bound to another node"
            raise ValueError(msg)
        self.cees.append(cee)

    def prepend_cees(self, cees: Iterable[CommandExecEngine]) -> None:
        """Put ``cees`` in front of the queue, keeping their order: the first runs next."""
        self.cees.extendleft(reversed(list(cees)))

    def pending_mission(self) -> tuple[Command, ...]:
        """Commands of the current mission that have not started yet, in order."""
        queued = tuple(cee.command for cee in self.cees if cee.part_of_mission and cee.command is not None)
        return queued + tuple(self.commands)

    def cancel_current(self) -> None:
        """End the current engine at its next completion poll."""
        if self.current_cee is not None:
            self.current_cee.command_completed = True

    # -------------------------------- Driver --------------------------------

    def _next_cee(self) -> CommandExecEngine | None:
        if self.cees:
            return self.cees.popleft()
        if self.commands:
            return make_cee(self, self.commands.popleft())
        return None

    def _start_next_cee(self, now: float) -> CommandExecEngine | None:
        cee = self._next_cee()
        if cee is None:
            return None
        cee.initialize(now)
        cee.perform_entry_actions(now)
        cee.set_node_parameters(now)
        self.current_cee = cee
        return cee

    def _finish_cee(self, cee: CommandExecEngine, now: float) -> None:
        follow_ups = cee.perform_exit_actions(now)
        cee.mark_completed()
        self.history.append(cee)
        self.current_cee = None
        if follow_ups:
            self.prepend_cees(follow_ups)
        logger.debug("%s: %s completed at t=%.3f", self.name, cee.type_name, now)

    def _step_limit(self, cee: CommandExecEngine, now: float, available: float) -> float:
        if cee.type not in _TIMED_CEES:
            return available
        remaining = cee.get_remaining_time(now)
        return min(available, remaining) if remaining > config.EPSILON else available

    def update(self, dt: Time | Number, now: Time | Number) -> None:
        """Run the current engines over the slice ``[now, now + dt]``."""
        t = float(now)
        end = t + float(dt)

        while end - t > config.EPSILON:
            cee = self.current_cee or self._start_next_cee(t)
            if cee is None:
                return
            if cee.is_command_completed(t):
                self._finish_cee(cee, t)
                continue

            step = self._step_limit(cee, t, end - t)
            cee.update_state(step)
            t = end if end - (t + step) <= config.EPSILON else t + step

            if cee.is_command_completed(t):
                self._finish_cee(cee, t)
