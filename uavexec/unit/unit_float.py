"""Float-backed units stored internally in SI.

A ``UnitFloat`` *is* a float holding the SI value (seconds, milliamp-hours),
so it can be passed straight into ``math`` and ``numpy`` functions. Values are
scaled on construction and converted back only for display or through
:meth:`UnitFloat.to`.

Example:
    >>> class Second(UnitFloat):
    ...     IS_FAMILY_ROOT = True
    ...     SYMBOL = "s"
    >>> class Minute(Second):
    ...     SCALE_TO_SI = 60.0
    ...     SYMBOL = "min"
    >>> float(Minute(2))
    120.0
"""

from __future__ import annotations

from typing import ClassVar

from .unit_base import Number, Unit


class UnitFloat(float, Unit):
    """Base class for numeric units with automatic SI conversion.

    Attributes:
        SCALE_TO_SI (ClassVar[float]): Factor from the native scale to SI.
    """

    SCALE_TO_SI: ClassVar[float] = 1.0
    IS_FAMILY_ROOT: ClassVar[bool] = True

    def __new__(cls, value: Number):
        return float.__new__(cls, float(value) * cls.SCALE_TO_SI)

    @classmethod
    def from_si(cls, si_value: float) -> UnitFloat:
        """Build an instance from a value that is already in SI."""
        return float.__new__(cls, si_value)

    def to(self, unit_type: type[UnitFloat]) -> float:
        """Return the value expressed in ``unit_type``'s native scale."""
        self._check_same_root(unit_type)
        return float(self) / unit_type.SCALE_TO_SI

    def as_unit(self, unit_type: type[UnitFloat]) -> UnitFloat:
        """Re-type the value as another unit of the same family."""
        self._check_same_root(unit_type)
        return unit_type.from_si(float(self))

    # -------------------------------- Arithmetic Operations --------------------------------

    def __add__(self, other: UnitFloat | Number) -> UnitFloat:
        self._check_same_root(type(other))
        return type(self).from_si(float(self) + float(other))

    def __radd__(self, other: UnitFloat | Number) -> UnitFloat:
        return self.__add__(other)

    def __sub__(self, other: UnitFloat | Number) -> UnitFloat:
        self._check_same_root(type(other))
        return type(self).from_si(float(self) - float(other))

    def __rsub__(self, other: UnitFloat | Number) -> UnitFloat:
        self._check_same_root(type(other))
        return type(self).from_si(float(other) - float(self))

    def __mul__(self, k: Number) -> UnitFloat:
        if isinstance(k, Number):
            return type(self).from_si(float(self) * float(k))
        return NotImplemented

    def __rmul__(self, k: Number) -> UnitFloat:
        return self.__mul__(k)

    def __truediv__(self, k: Number) -> UnitFloat:
        if isinstance(k, Number):
            return type(self).from_si(float(self) / float(k))
        return NotImplemented

    # -------------------------------- Comparisons --------------------------------

    def __lt__(self, other: UnitFloat | Number) -> bool:
        self._check_same_root(type(other))
        return float(self) < float(other)

    def __le__(self, other: UnitFloat | Number) -> bool:
        self._check_same_root(type(other))
        return float(self) <= float(other)

    def __gt__(self, other: UnitFloat | Number) -> bool:
        self._check_same_root(type(other))
        return float(self) > float(other)

    def __ge__(self, other: UnitFloat | Number) -> bool:
        self._check_same_root(type(other))
        return float(self) >= float(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Number):
            return NotImplemented
        self._check_same_root(type(other))
        return float(self) == float(other)

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Number):
            return NotImplemented
        self._check_same_root(type(other))
        return float(self) != float(other)

    __hash__ = float.__hash__

    def __str__(self) -> str:
        return f"{self.to(type(self)):g} {type(self).SYMBOL}".strip()

    def __repr__(self) -> str:
        return f"{self.to(type(self)):g} {type(self).SYMBOL} (= {float(self):g} SI)"
