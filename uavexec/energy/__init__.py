"""Energy management for simulated UAVs.

Components:
    Battery: Charge level and capacity with discharge/charge operations.

Example:
    >>> from uavexec.energy import Battery
    >>> battery = Battery(capacity=5000, remaining=4000)
    >>> battery.discharge(250)
    True
    >>> battery.remaining_percentage
    75.0
"""

from .battery import Battery

__all__ = ["Battery"]
