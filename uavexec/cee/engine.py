"""Abstract command execution engine shared by every UAV behaviour.

A command execution engine (CEE) executes exactly one mission command for one
UAV node. It turns the command's parameters into kinematics, advances the
node's position and battery over simulated time, and tells the driver when
the command is done so the next one can start.

Lifecycle:
    The driver walks every engine through the same ordered steps, enforced by
    a ``StateMachine`` over ``CeeState``:

        CREATED ──initialize──▶ INITIALIZED ──set_node_parameters──▶ ACTIVE ──mark_completed──▶ COMPLETED
                                  ▲        │
                                  └────────┘ (re-initialising before activation is allowed)

    1. Construction binds node and command and fixes the geometry.
    2. ``initialize(now)`` derives angles and speed and draws the per-second
       consumption rate. It reads the node but never writes to it.
    3. ``set_node_parameters(now)`` is the activation: the only place where an
       engine writes yaw, pitch, climb angle and speed onto the node.
    4. ``update_state(step_size)`` advances the node by one time slice and
       discharges the battery by ``consumption_per_second * step_size``.
    5. ``is_command_completed(now)`` is polled after each slice. Once it
       returns True it keeps returning True.
    6. ``perform_entry_actions(now)`` runs right before activation,
       ``perform_exit_actions(now)`` right after completion. Exit actions
       return the engines that must run next; the driver prepends them to the
       node's queue.

Forecasting:
    ``get_overall_duration``, ``get_overall_duration_quantile``,
    ``get_remaining_time`` and ``get_probable_consumption`` answer planning
    questions before or during execution. Engines without a determined end
    (Charge, Exchange, Idle) raise ``UndefinedForecastError`` for durations.

Cancellation:
    Setting ``command_completed`` to True ends any engine at its next poll,
    regardless of its own completion test.

Units:
    Coordinates in meters, angles in degrees, speeds in m/s, times in seconds
    (``Second``/``ClockTime`` or plain numbers) and charge in mAh.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import TYPE_CHECKING

from uavexec import config
from uavexec.command import Command
from uavexec.errors import InvariantViolationError, MissingCommandError, PrematureQueryError
from uavexec.log import get_logger
from uavexec.model import Estimate
from uavexec.state import Action, StateMachine
from uavexec.unit import ClockTime, Number, Second, Time

if TYPE_CHECKING:
    from uavexec.nodes import UAVNode

logger = get_logger(__name__)

Coordinates = tuple[float, float, float]


class CeeType(Enum):
    """Kind of behaviour an engine implements; the value is its display name."""

    WAYPOINT = "Waypoint"
    TAKEOFF = "Take Off"
    HOLD_POSITION = "Hold Position"
    CHARGE = "Charge"
    EXCHANGE = "Exchange"
    IDLE = "Idle"


class CeeState(Enum):
    """Lifecycle stage of an engine."""

    CREATED = auto()
    INITIALIZED = auto()
    ACTIVE = auto()
    COMPLETED = auto()


def distance(a: Coordinates, b: Coordinates) -> float:
    """Euclidean distance, with anything below ``EPSILON`` reported as 0."""
    d = math.dist(a, b)
    return 0.0 if d < config.EPSILON else d


class CommandExecEngine(ABC):
    """Shared lifecycle and state of all command execution engines.

    Subclasses implement the variant hooks:

        • _initialize(now): derive kinematics, draw the consumption rate
        • _write_node_parameters(): push kinematics onto the node at activation
        • _advance(step): move the node for one slice (default: no motion)
        • _check_completion(now): the variant's own completion test
        • get_overall_duration / get_remaining_time / get_probable_consumption

    Attributes:
        node (UAVNode): The UAV this engine drives. Borrowed; the engine never
            outlives it.
        command (Command | None): The command being executed. Borrowed and never
            mutated.
        yaw (float): Heading in degrees, [0, 360).
        pitch (float): Nose angle in degrees.
        climb_angle (float): Flight-path angle in degrees, (-90, 90].
        speed (float): Speed along the flight path in m/s.
        consumption_per_second (float): Discharge rate in mAh/s applied during
            ``update_state``; drawn once at initialisation, never negative.
        time_execution_start (ClockTime | None): When the engine was activated.
        command_completed (bool): External override ending the engine.
        part_of_mission (bool): False for detours that do not count towards
            mission progress.
        replacement_needed (bool): Whether the mission manager should replace
            this engine with the next mission step when it finishes.
    """

    node: UAVNode
    command: Command | None

    yaw: float
    pitch: float
    climb_angle: float
    speed: float
    consumption_per_second: float

    time_execution_start: ClockTime | None
    command_completed: bool
    part_of_mission: bool
    replacement_needed: bool

    _type: CeeType
    _from: Coordinates
    _to: Coordinates
    _completion_latched: bool
    _lifecycle: StateMachine

    def __init__(
        self,
        node: UAVNode,
        command: Command | None,
        cee_type: CeeType,
        to: Coordinates | None = None,
        origin: Coordinates | None = None,
    ):
        """Bind the engine to ``node`` and ``command``.

        Args:
            node (UAVNode): The UAV to drive.
            command (Command | None): Parameters of the behaviour.
            cee_type (CeeType): Variant tag, fixed for the engine's lifetime.
            to (Coordinates | None): Target of the segment; defaults to ``origin``.
            origin (Coordinates | None): Start of the segment; defaults to the
                node's position at construction time.
        """
        self.node = node
        self.command = command
        self._type = cee_type

        self._from = tuple(map(float, origin)) if origin is not None else node.position
        self._to = tuple(map(float, to)) if to is not None else self._from

        self.yaw = 0.0
        self.pitch = 0.0
        self.climb_angle = 0.0
        self.speed = 0.0
        self.consumption_per_second = 0.0

        self.time_execution_start = None
        self.command_completed = False
        self.part_of_mission = True
        self.replacement_needed = True
        self._completion_latched = False

        self._lifecycle = StateMachine(
            CeeState.CREATED,
            {
                CeeState.CREATED: [Action(CeeState.INITIALIZED, self._initialize)],
                CeeState.INITIALIZED: [
                    Action(CeeState.INITIALIZED, self._initialize),
                    Action(CeeState.ACTIVE, self._activate),
                ],
                CeeState.ACTIVE: [Action(CeeState.COMPLETED)],
                CeeState.COMPLETED: [],
            },
        )

    # -------------------------------- Identity and geometry --------------------------------

    @property
    def type(self) -> CeeType:
        return self._type

    @property
    def type_name(self) -> str:
        """Human readable name of the variant, e.g. ``"Hold Position"``."""
        return self._type.value

    @property
    def from_coordinates(self) -> Coordinates:
        return self._from

    @property
    def to_coordinates(self) -> Coordinates:
        return self._to

    @property
    def state(self) -> CeeState:
        return self._lifecycle.current

    @property
    def is_active(self) -> bool:
        """Whether the engine has been activated and not yet marked completed."""
        return self.state is CeeState.ACTIVE

    @property
    def started(self) -> bool:
        """Whether the engine has been activated at some point."""
        return self.state in (CeeState.ACTIVE, CeeState.COMPLETED)

    def set_part_of_mission(self, part_of_mission: bool) -> None:
        self.part_of_mission = part_of_mission

    def set_no_replacement_needed(self) -> None:
        self.replacement_needed = False

    # -------------------------------- Lifecycle --------------------------------

    def initialize(self, now: Time | Number) -> None:
        """Derive kinematics and draw the consumption rate.

        Does not touch the node. May be called again as long as the engine has
        not been activated.

        Raises:
            MissingCommandError: If the engine was built without a command.
            ValueError: If the engine has already been activated.
        """
        if self.command is None:
            msg = f"initialize(): {self.type_name} engine has no command"
            raise MissingCommandError(msg)
        self._lifecycle.request_transition(CeeState.INITIALIZED, ClockTime.from_si(float(now)))

    def set_node_parameters(self, now: Time | Number) -> None:
        """Activate the engine: write its kinematics onto the node and start the clock.

        Raises:
            ValueError: If the engine is not initialised or already active.
        """
        self._lifecycle.request_transition(CeeState.ACTIVE, ClockTime.from_si(float(now)))
        logger.debug("%s: %s activated at %s", self.node.name, self.type_name, self.time_execution_start)

    def update_state(self, step_size: Second | Number) -> None:
        """Advance the node by one time slice of ``step_size`` seconds.

        Raises:
            ValueError: If ``step_size`` is not positive or the engine is not active.
        """
        step = float(step_size)
        if step <= 0.0:
            msg = f"update_state(): step size must be positive, got {step_size}"
            raise ValueError(msg)
        if not self.is_active:
            msg = f"update_state(): {self.type_name} engine is {self.state.name}, not ACTIVE"
            raise ValueError(msg)

        self._advance(step)
        self.node.battery.discharge(self.consumption_per_second * step)

    def is_command_completed(self, now: Time | Number) -> bool:
        """Whether the command is done. Never flips back to False once True."""
        if self.command_completed or self._completion_latched:
            return True
        if self._check_completion(float(now)):
            self._completion_latched = True
            return True
        return False

    def mark_completed(self) -> None:
        """Move an active engine to its terminal state; called by the driver."""
        self._lifecycle.request_transition(CeeState.COMPLETED)

    def perform_entry_actions(self, now: Time | Number) -> None:
        """Side effects run right before activation. No-op by default."""

    def perform_exit_actions(self, now: Time | Number) -> list[CommandExecEngine]:
        """Side effects run right after completion.

        Returns:
            list[CommandExecEngine]: Engines to run next, in execution order.
                Empty by default.
        """
        return []

    # -------------------------------- Variant hooks --------------------------------

    def _initialize(self, now: ClockTime) -> None:
        self.consumption_per_second = self.predict_norm_consumption_random()

    def _activate(self, now: ClockTime) -> None:
        self.time_execution_start = now
        self._write_node_parameters()

    def _write_node_parameters(self) -> None:
        """Copy this engine's kinematics onto the node. No-op by default."""

    def _advance(self, step: float) -> None:
        """Move the node for ``step`` seconds. No motion by default."""

    @abstractmethod
    def _check_completion(self, now: float) -> bool:
        """The variant's own completion test."""

    def _require_initialized(self, query: str) -> None:
        if self.state is CeeState.CREATED:
            msg = f"{query}(): {self.type_name} engine has not been initialised"
            raise PrematureQueryError(msg)

    def _hold_still(self) -> None:
        """Park the node: level attitude, zero speed, cosmetic heading from the battery level."""
        self.node.yaw = (self.node.battery.remaining_percentage * 36.0) % 360.0
        self.node.pitch = 0.0
        self.node.climb_angle = 0.0
        self.node.speed = 0.0

    # -------------------------------- Forecasting --------------------------------

    @abstractmethod
    def get_overall_duration(self) -> float:
        """Expected duration in seconds from activation to completion.

        Raises:
            UndefinedForecastError: For engines without a determined end.
        """

    def get_overall_duration_quantile(self) -> float:
        """Pessimistic duration for conservative planning; the plain duration by default."""
        return self.get_overall_duration()

    @abstractmethod
    def get_remaining_time(self, now: Time | Number | None = None) -> float:
        """Expected seconds until completion from the node's current state.

        Raises:
            UndefinedForecastError: For engines without a determined end.
        """

    @abstractmethod
    def get_probable_consumption(
        self, normalized: bool = True, from_method: Estimate = Estimate.MEAN
    ) -> float:
        """Forecast charge use in mAh, or mAh/s if ``normalized``.

        Raises:
            InvariantViolationError: If the model forecast is implausible.
        """

    def predict_norm_consumption_random(self) -> float:
        """Draw the per-second discharge rate through the node's consumption provider.

        Raises:
            InvariantViolationError: If the provider returns a negative rate.
        """
        rate = float(self.node.consumption_provider.draw(self))
        if rate < 0.0:
            msg = f"{self.type_name}: consumption rate drawn negative ({rate} mAh/s)"
            raise InvariantViolationError(msg)
        return rate

    def _checked_consumption(
        self, total: float, duration: float, normalized: bool, strictly_positive: bool = False
    ) -> float:
        """Validate a consumption forecast and return it as total or per second."""
        if duration <= config.EPSILON:
            return 0.0
        rate = total / duration
        if total < 0.0 or (strictly_positive and total <= 0.0):
            msg = f"{self.type_name}: implausible consumption forecast {total} mAh"
            raise InvariantViolationError(msg)
        if rate >= config.CONSUMPTION_SANITY_CEILING:
            msg = (
                f"{self.type_name}: consumption forecast {rate:.1f} mAh/s exceeds "
                f"{config.CONSUMPTION_SANITY_CEILING} mAh/s"
            )
            raise InvariantViolationError(msg)
        return rate if normalized else total

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(node={self.node.name}, state={self.state.name}, "
            f"from={self._from}, to={self._to})"
        )
