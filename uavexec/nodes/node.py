"""Base class for everything that takes part in a simulation run.

A node has a position in a local Cartesian frame (meters; z is altitude), a
name for logs, and an inbox. Nodes talk to each other through one-way
``Channel`` objects obtained from ``get_output_channel_to``; delivery is
immediate and fire-and-forget.

Execution Model:
    The simulator calls ``update(dt, now)`` on every node once per time slice,
    where ``now`` is the simulation time at the start of the slice and ``dt``
    its length. Nodes are updated one after the other, never concurrently.

Example:
    >>> class Beacon(Node):
    ...     def update(self, dt, now):
    ...         pass
    >>> a, b = Beacon(0, 0, 0, name="a"), Beacon(1, 1, 0, name="b")
    >>> a.get_output_channel_to(b).send(Message(sender=a))
    >>> len(b.inbox)
    1
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from uavexec.messages import Channel, Message
from uavexec.unit import Number, Time


class Node(ABC):
    """Abstract simulation participant with a position and an inbox.

    Attributes:
        id (int): Unique identifier generated from the object's address.
        name (str): Display name used in logs and telemetry.
        x (float): East coordinate in meters.
        y (float): North coordinate in meters.
        z (float): Altitude in meters.
        inbox (list[Message]): Messages received so far, in arrival order.
    """

    id: int
    name: str
    x: float
    y: float
    z: float
    inbox: list[Message]

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0, name: str | None = None):
        self.id = id(self)
        self.name = name if name is not None else f"{type(self).__name__}-{self.id:x}"
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)
        self.inbox = []

    @property
    def position(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def get_output_channel_to(self, other: Node) -> Channel:
        """Channel carrying messages from this node to ``other``."""
        return Channel(self, other)

    def receive(self, message: Message) -> None:
        """Accept a message delivered through a channel."""
        self.inbox.append(message)
        self.on_message(message)

    def on_message(self, message: Message) -> None:
        """React to a received message. No-op by default."""

    @abstractmethod
    def update(self, dt: Time | Number, now: Time | Number) -> None:
        """Advance the node by one time slice ``[now, now + dt]``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, x={self.x:.2f}, y={self.y:.2f}, z={self.z:.2f})"
