"""Time units.

``Second`` is the family root. ``ClockTime`` is a point on the simulation
clock rather than a duration and prints as ``HH:MM:SS.sss``.

Example:
    >>> float(Minute(1.5))
    90.0
    >>> str(ClockTime(3725.5))
    '01:02:05.500'
"""

from __future__ import annotations

from math import isfinite

from .unit_float import UnitFloat


class Second(UnitFloat):
    """Time unit: second (SI)."""

    IS_FAMILY_ROOT = True
    SCALE_TO_SI = 1.0
    SYMBOL = "s"


class Minute(Second):
    """Time unit: minute (60 s)."""

    SCALE_TO_SI = 60.0
    SYMBOL = "min"


class Hour(Second):
    """Time unit: hour (3600 s)."""

    SCALE_TO_SI = 3600.0
    SYMBOL = "h"


class ClockTime(Second):
    """Absolute simulation time, counted in seconds from the start of the run."""

    SCALE_TO_SI = 1.0

    @classmethod
    def from_str(cls, time_str: str) -> ClockTime:
        """Parse a ``"HH:MM:SS"`` string."""
        h, m, s = map(float, time_str.split(":"))
        return cls(h * 3600 + m * 60 + s)

    def __str__(self) -> str:
        if not isfinite(float(self)):
            return "--:--:--"
        h, r = divmod(float(self), 3600)
        m, s = divmod(r, 60)
        return f"{int(h):02d}:{int(m):02d}:{s:06.3f}"

    def __repr__(self) -> str:
        return f"{str(self)} (= {float(self):g} {self.ROOT.SYMBOL})"


Time = Second | Minute | Hour | ClockTime
