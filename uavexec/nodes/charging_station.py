"""Charging stations and the network a UAV searches for the nearest one."""

from __future__ import annotations

import math
from collections.abc import Iterable

from uavexec import config
from uavexec.cee import ChargeCEE
from uavexec.log import get_logger
from uavexec.messages import Message, ReserveSpotMessage
from uavexec.unit import Number, Time

from .node import Node
from .uav import UAVNode

logger = get_logger(__name__)


class ChargingStation(Node):
    """Ground station that recharges docked UAVs.

    A UAV announces itself with a ``ReserveSpotMessage``; from then on the
    station charges it on every update in which the UAV sits on the pad with an
    active ``ChargeCEE``. The UAV's charge engine completes on its own once the
    battery is full.

    Attributes:
        charge_rate (float): Charge delivered to each docked UAV, in mAh/s.
        reservations (list[ReserveSpotMessage]): Reservations received so far.
        visitors (list[UAVNode]): UAVs that announced themselves, in arrival order.
    """

    charge_rate: float
    reservations: list[ReserveSpotMessage]
    visitors: list[UAVNode]

    def __init__(
        self,
        x: float = 0.0,
        y: float = 0.0,
        z: float = 0.0,
        charge_rate: float = config.CHARGE_RATE,
        name: str | None = None,
    ):
        if charge_rate <= 0:
            msg = f"charge_rate must be positive, got {charge_rate}"
            raise ValueError(msg)
        super().__init__(x, y, z, name)
        self.charge_rate = float(charge_rate)
        self.reservations = []
        self.visitors = []

    def on_message(self, message: Message) -> None:
        if not isinstance(message, ReserveSpotMessage):
            return
        self.reservations.append(message)
        if isinstance(message.sender, UAVNode) and message.sender not in self.visitors:
            self.visitors.append(message.sender)
        logger.info(
            "%s: spot reserved for %s, arrival %s, %s needed on the way",
            self.name,
            message.sender.name if message.sender is not None else "unknown",
            message.estimated_arrival,
            message.consumption_till_arrival,
        )

    def is_docked(self, uav: UAVNode) -> bool:
        """Whether ``uav`` is on the pad and charging."""
        cee = uav.current_cee
        return (
            isinstance(cee, ChargeCEE)
            and cee.is_active
            and math.dist(uav.position, self.position) < config.EPSILON
        )

    def update(self, dt: Time | Number, now: Time | Number) -> None:
        amount = self.charge_rate * float(dt)
        for uav in self.visitors:
            if self.is_docked(uav) and not uav.battery.is_full():
                uav.battery.charge(amount)


class ChargingNetwork:
    """The set of charging stations known to a fleet."""

    stations: list[ChargingStation]

    def __init__(self, stations: Iterable[ChargingStation] = ()):
        self.stations = list(stations)

    def add(self, station: ChargingStation) -> None:
        self.stations.append(station)

    def nearest(self, x: float, y: float, z: float) -> ChargingStation | None:
        """Station closest to ``(x, y, z)``; None if the network is empty."""
        if not self.stations:
            return None
        return min(self.stations, key=lambda station: math.dist(station.position, (x, y, z)))

    def __len__(self) -> int:
        return len(self.stations)

    def __iter__(self):
        return iter(self.stations)
