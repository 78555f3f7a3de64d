"""Electric charge units for battery bookkeeping.

Battery levels and consumption forecasts are expressed in milliamp-hours, the
unit UAV battery packs are rated in. ``MilliampHour`` is therefore the SI
value of this family inside the simulation (scale 1.0), with ``AmpHour`` as a
convenience for large packs.

Example:
    >>> float(AmpHour(2.2))
    2200.0
"""

from .unit_float import UnitFloat


class MilliampHour(UnitFloat):
    """Charge unit: milliamp-hour (family root)."""

    IS_FAMILY_ROOT = True
    SCALE_TO_SI = 1.0
    SYMBOL = "mAh"


class AmpHour(MilliampHour):
    """Charge unit: amp-hour (1000 mAh)."""

    SCALE_TO_SI = 1000.0
    SYMBOL = "Ah"


Charge = MilliampHour | AmpHour

ZERO_CHARGE = MilliampHour(0.0)
