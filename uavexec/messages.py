"""Messages exchanged between nodes and the channel that carries them.

Delivery is fire-and-forget: ``Channel.send`` drops the message in the
receiver's inbox and returns. Nothing waits for, or expects, a reply.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from uavexec import config
from uavexec.unit import ClockTime, MilliampHour

if TYPE_CHECKING:
    from uavexec.command import Command
    from uavexec.nodes import Node


@dataclass(frozen=True)
class Message:
    """Base class for inter-node messages."""

    sender: Node | None = field(default=None, kw_only=True, compare=False)


@dataclass(frozen=True)
class ReserveSpotMessage(Message):
    """Announces an incoming UAV to a charging station.

    Attributes:
        estimated_arrival (ClockTime): When the UAV expects to dock.
        consumption_till_arrival (MilliampHour): Expected charge used on the way.
        target_percentage (float): Charge level the UAV wants to leave with.
    """

    estimated_arrival: ClockTime
    consumption_till_arrival: MilliampHour
    target_percentage: float = config.TARGET_CHARGE_PERCENTAGE


@dataclass(frozen=True)
class MissionDataMessage(Message):
    """Hands the remaining mission over to another UAV.

    Attributes:
        mission_id (int | None): Identifier of the mission being handed over.
        pending (tuple[Command, ...]): Mission commands not yet started, in order.
    """

    mission_id: int | None
    pending: tuple[Command, ...] = ()


class Channel:
    """One-way link from ``sender`` to ``receiver``."""

    def __init__(self, sender: Node, receiver: Node):
        self.sender = sender
        self.receiver = receiver

    def send(self, message: Message) -> None:
        self.receiver.receive(message)

    def __repr__(self) -> str:
        return f"Channel({self.sender.name} → {self.receiver.name})"
