"""Command execution engines for simulated UAV missions.

uavexec models how a UAV executes one atomic mission command at a time. Each
command is carried out by a command execution engine (CEE) that advances the
UAV's position, attitude and battery over simulated time and reports when the
command is done, so the next one can begin.

Framework Components:
    Engines (uavexec.cee):
        • CommandExecEngine: Shared lifecycle (initialize → activate → update → complete)
        • WaypointCEE, TakeoffCEE, HoldPositionCEE: Motion and hovering
        • ChargeCEE, IdleCEE: Open-ended stays at a charging station
        • ExchangeCEE: Mission hand-over, optionally followed by a recharge detour
        • make_cee: Engine factory keyed by command type

    Forecasting:
        Every engine answers duration, pessimistic duration, remaining time and
        probable consumption queries before and during execution. Engines with
        no determined end raise ``UndefinedForecastError``.

    Participants (uavexec.nodes):
        • UAVNode: Holds kinematic state and battery, and drives its engine queue
        • ChargingStation, ChargingNetwork: Reservation target and charger

    Models (uavexec.model, uavexec.energy):
        • FlightModel: Speeds and current draw interpolated over climb angle
        • ConsumptionProvider: Injected source of per-engine discharge rates
        • Battery: Charge level with clamped discharge and charge

    Simulation (uavexec.simulator):
        • Simulator: Fixed-step outer loop with rich progress and pandas telemetry
        • plot_telemetry: Battery and altitude plots with matplotlib

    Support:
        • uavexec.unit: Float-backed time and charge units
        • uavexec.state: Guarded state machine used for the engine lifecycle
        • uavexec.errors: Error taxonomy rooted at ``CeeError``
        • uavexec.log: Logger helpers and the rich console

Quick Start:
    >>> from uavexec import Simulator, UAVNode, TakeoffCommand, WaypointCommand
    >>> uav = UAVNode(0, 0, 0, name="uav-1")
    >>> uav.assign(TakeoffCommand(z=30))
    >>> uav.assign(WaypointCommand(200, 0, 30))
    >>> sim = Simulator([uav])
    >>> _ = sim.run(until=120, progress=False)
    >>> uav.position
    (200.0, 0.0, 30.0)

Units:
    Meters, degrees, seconds and milliamp-hours throughout. Plain numbers are
    accepted wherever a unit object is, and read in those units.
"""

from .cee import (
    CeeState,
    CeeType,
    ChargeCEE,
    CommandExecEngine,
    ExchangeCEE,
    HoldPositionCEE,
    IdleCEE,
    TakeoffCEE,
    WaypointCEE,
    make_cee,
)
from .command import (
    ChargeCommand,
    Command,
    ExchangeCommand,
    HoldPositionCommand,
    IdleCommand,
    TakeoffCommand,
    WaypointCommand,
)
from .energy import Battery
from .errors import (
    CeeError,
    InvariantViolationError,
    MissingCommandError,
    PrematureQueryError,
    UndefinedForecastError,
)
from .log import configure_logging
from .messages import Channel, Message, MissionDataMessage, ReserveSpotMessage
from .model import ConsumptionProvider, Estimate, FixedConsumptionProvider, FlightModel, ForecastConsumptionProvider
from .nodes import ChargingNetwork, ChargingStation, Node, UAVNode
from .simulator import Simulator, plot_telemetry

__version__ = "0.1.0"

__all__ = [
    "CommandExecEngine",
    "CeeType",
    "CeeState",
    "WaypointCEE",
    "TakeoffCEE",
    "HoldPositionCEE",
    "ChargeCEE",
    "ExchangeCEE",
    "IdleCEE",
    "make_cee",
    "Command",
    "WaypointCommand",
    "TakeoffCommand",
    "HoldPositionCommand",
    "ChargeCommand",
    "ExchangeCommand",
    "IdleCommand",
    "Battery",
    "CeeError",
    "MissingCommandError",
    "UndefinedForecastError",
    "InvariantViolationError",
    "PrematureQueryError",
    "configure_logging",
    "Message",
    "ReserveSpotMessage",
    "MissionDataMessage",
    "Channel",
    "Estimate",
    "FlightModel",
    "ConsumptionProvider",
    "ForecastConsumptionProvider",
    "FixedConsumptionProvider",
    "Node",
    "UAVNode",
    "ChargingStation",
    "ChargingNetwork",
    "Simulator",
    "plot_telemetry",
]
