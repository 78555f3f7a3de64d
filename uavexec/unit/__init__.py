"""Type-safe units for the quantities the engine tracks.

Exports:
    Unit, UnitFloat: Family bookkeeping and the float-backed base class.
    Second, Minute, Hour, ClockTime, Time: Durations and clock time.
    MilliampHour, AmpHour, Charge, ZERO_CHARGE: Battery charge.
"""

from .unit_base import Number, Unit
from .unit_charge import ZERO_CHARGE, AmpHour, Charge, MilliampHour
from .unit_float import UnitFloat
from .unit_time import ClockTime, Hour, Minute, Second, Time

__all__ = [
    "Number",
    "Unit",
    "UnitFloat",
    "Second",
    "Minute",
    "Hour",
    "ClockTime",
    "Time",
    "MilliampHour",
    "AmpHour",
    "Charge",
    "ZERO_CHARGE",
]
