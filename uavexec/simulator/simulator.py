"""Outer simulation loop driving a set of nodes in fixed time slices.

The simulator owns simulated time. Every slice it calls ``update(dt, now)`` on
each node in insertion order, where ``now`` is the start of the slice, and
then samples the state of every UAV into a telemetry table.

Simulation Flow:
    1. Nodes are registered at construction (UAVs, charging stations, ...)
    2. ``run(until)`` steps from ``ClockTime(0)`` until ``until`` is reached
       or no UAV has work left
    3. After each slice one telemetry row per UAV is recorded
    4. ``telemetry()`` returns the rows as a ``pandas.DataFrame``

Usage Pattern:
    >>> network = ChargingNetwork([ChargingStation(0, 0, 0, name="pad")])
    >>> uav = UAVNode(0, 0, 0, charging_network=network, name="uav-1")
    >>> uav.assign(TakeoffCommand(z=20))
    >>> sim = Simulator([uav, *network])
    >>> _ = sim.run(until=Minute(1), progress=False)
    >>> sim.telemetry().tail(1)["z"].item()
    20.0
"""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn, TimeElapsedColumn

from uavexec import config
from uavexec.log import CONSOLE, get_logger
from uavexec.nodes import Node, UAVNode
from uavexec.unit import ClockTime, Number, Second, Time

logger = get_logger(__name__)

TELEMETRY_COLUMNS = ["time", "node", "x", "y", "z", "battery_percentage", "cee"]


class Simulator:
    """Steps a fixed set of nodes through simulated time.

    Attributes:
        nodes (list[Node]): Participants, updated in this order every slice.
        dt (Second): Length of one slice.
        now (ClockTime): Start of the next slice to simulate.
    """

    nodes: list[Node]
    dt: Second
    now: ClockTime
    _rows: list[dict]

    def __init__(self, nodes: Iterable[Node], dt: Time | Number = config.DT):
        dt = Second.from_si(float(dt))
        if dt <= 0:
            msg = f"Time step must be positive, got {dt}"
            raise ValueError(msg)
        self.nodes = list(nodes)
        self.dt = dt
        self.now = ClockTime(0)
        self._rows = []

    @property
    def uavs(self) -> list[UAVNode]:
        return [node for node in self.nodes if isinstance(node, UAVNode)]

    def is_idle(self) -> bool:
        """Whether no UAV has a current or pending engine."""
        return not any(uav.is_busy for uav in self.uavs)

    def step(self) -> None:
        """Simulate one slice ``[now, now + dt]``."""
        for node in self.nodes:
            node.update(self.dt, self.now)
        self.now = ClockTime.from_si(float(self.now) + float(self.dt))
        self._record()

    def run(self, until: Time | Number, progress: bool = True, stop_when_idle: bool = True) -> ClockTime:
        """Run slices until ``until`` is reached.

        Args:
            until (Time | Number): Simulated time at which to stop.
            progress (bool): Show a rich progress bar on the shared console.
            stop_when_idle (bool): Stop early once no UAV has work left.

        Returns:
            ClockTime: The simulated time reached.
        """
        end = float(until)
        total = max(0, round((end - float(self.now)) / float(self.dt)))
        if total == 0:
            return self.now

        logger.info("Simulating %d node(s) until %s", len(self.nodes), ClockTime.from_si(end))
        if not progress:
            self._loop(end, stop_when_idle)
            return self.now

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(bar_width=40),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=CONSOLE,
            auto_refresh=True,
        ) as bar:
            task = bar.add_task("[green]Simulating...", total=total)
            self._loop(end, stop_when_idle, lambda: bar.advance(task))
        return self.now

    def _loop(self, end: float, stop_when_idle: bool, on_step=None) -> None:
        while end - float(self.now) > config.EPSILON:
            if stop_when_idle and self.is_idle():
                logger.info("All UAVs idle at %s", self.now)
                break
            self.step()
            if on_step is not None:
                on_step()

    def _record(self) -> None:
        for uav in self.uavs:
            self._rows.append(
                {
                    "time": float(self.now),
                    "node": uav.name,
                    "x": uav.x,
                    "y": uav.y,
                    "z": uav.z,
                    "battery_percentage": uav.battery.remaining_percentage,
                    "cee": uav.current_cee.type_name if uav.current_cee is not None else None,
                }
            )

    def telemetry(self) -> pd.DataFrame:
        """Recorded UAV states, one row per UAV and slice."""
        return pd.DataFrame(self._rows, columns=TELEMETRY_COLUMNS)
