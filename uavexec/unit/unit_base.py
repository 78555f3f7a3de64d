"""Unit family foundation for type-safe physical quantities.

Every unit belongs to a *family* (time, electric charge, ...) identified by
its ROOT class. Arithmetic and comparisons are allowed inside one family and
rejected across families, so a battery level can never be silently added to a
duration.

Family roots are declared with ``IS_FAMILY_ROOT = True``; every subclass picks
up the nearest declared root through the MRO when it is created.

Example:
    >>> class Second(UnitFloat):
    ...     IS_FAMILY_ROOT = True
    >>> class Minute(Second):
    ...     SCALE_TO_SI = 60.0
    >>> Minute.ROOT is Second
    True
"""

from __future__ import annotations

from typing import ClassVar

Number = int | float


class Unit:
    """Base class for all unit types.

    Concrete units derive from :class:`UnitFloat`; this class only carries the
    family bookkeeping.

    Attributes:
        ROOT (ClassVar[type[Unit]]): Root class of the unit family.
        SYMBOL (ClassVar[str]): Display symbol.
        IS_FAMILY_ROOT (ClassVar[bool]): Marks the class as a family root.
    """

    __slots__ = ()

    ROOT: ClassVar[type[Unit]]
    SYMBOL: ClassVar[str] = ""
    IS_FAMILY_ROOT: ClassVar[bool] = False

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.__dict__.get("IS_FAMILY_ROOT", False):
            cls.ROOT = cls
            return

        for base in cls.mro()[1:]:
            if base.__dict__.get("IS_FAMILY_ROOT", False):
                cls.ROOT = base
                return

        cls.ROOT = cls

    @classmethod
    def _check_same_root(cls, unit_type: type) -> None:
        """Reject operations between different unit families.

        Plain ``int``/``float`` operands are accepted and taken to be SI values
        already, which lets simulation code mix bare seconds and ``Second``.

        Raises:
            TypeError: If ``unit_type`` is a unit of another family.
        """
        if not issubclass(unit_type, Unit):
            return
        if cls.ROOT is not unit_type.ROOT:
            msg = f"Incompatible unit families: {cls.ROOT.__name__} and {unit_type.ROOT.__name__}"
            raise TypeError(msg)
