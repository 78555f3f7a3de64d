"""Simulation participants.

Exports:
    Node: Abstract positioned participant with an inbox
    UAVNode: UAV that drives its own command execution engines
    ChargingStation: Ground station recharging docked UAVs
    ChargingNetwork: Collection of stations with nearest-station lookup
"""

from .charging_station import ChargingNetwork, ChargingStation
from .node import Node
from .uav import UAVNode

__all__ = ["Node", "UAVNode", "ChargingStation", "ChargingNetwork"]
