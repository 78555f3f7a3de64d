"""Battery model consumed by the command execution engines.

The engines only rely on four operations: ``discharge``, ``is_full``,
``remaining`` and ``remaining_percentage``. Charging is driven from the
outside (a charging station), through ``charge``.

Charge is tracked in milliamp-hours; plain numbers are accepted everywhere and
read as mAh.
"""

from uavexec.unit import ZERO_CHARGE, Charge, MilliampHour, Number


class Battery:
    """Charge level and capacity of a UAV battery pack.

    Attributes:
        _capacity (MilliampHour): Maximum charge.
        _remaining (MilliampHour): Current charge.
    """

    _capacity: MilliampHour
    _remaining: MilliampHour

    def __init__(self, capacity: Charge | Number, remaining: Charge | Number | None = None):
        """Create a battery, full unless ``remaining`` is given.

        Raises:
            ValueError: If either value is negative, the capacity is zero or the
                remaining charge exceeds the capacity.
        """
        capacity = MilliampHour.from_si(float(capacity))
        remaining = capacity if remaining is None else MilliampHour.from_si(float(remaining))

        if capacity <= ZERO_CHARGE:
            msg = f"Battery capacity must be positive, got {capacity}"
            raise ValueError(msg)
        if remaining < ZERO_CHARGE or remaining > capacity:
            msg = f"Remaining charge {remaining} outside [0, {capacity}]"
            raise ValueError(msg)

        self._capacity = capacity
        self._remaining = remaining

    @property
    def capacity(self) -> MilliampHour:
        return self._capacity

    @property
    def remaining(self) -> MilliampHour:
        """Current charge level."""
        return self._remaining

    @property
    def remaining_percentage(self) -> float:
        """Current charge as a percentage of capacity, 0.0 to 100.0."""
        return float(self._remaining) / float(self._capacity) * 100.0

    def discharge(self, amount: Charge | Number) -> bool:
        """Draw ``amount`` from the battery.

        An overdraw empties the battery instead of going negative.

        Returns:
            bool: False if the battery could not cover the full amount.

        Raises:
            ValueError: If ``amount`` is negative.
        """
        if amount < 0:
            msg = f"Discharge amount cannot be negative, got {amount}"
            raise ValueError(msg)

        if float(self._remaining) >= float(amount):
            self._remaining = MilliampHour.from_si(float(self._remaining) - float(amount))
            return True
        self._remaining = MilliampHour.from_si(0.0)
        return False

    def charge(self, amount: Charge | Number) -> MilliampHour:
        """Add up to ``amount`` to the battery, stopping at capacity.

        Returns:
            MilliampHour: The charge actually added.

        Raises:
            ValueError: If ``amount`` is negative.
        """
        if amount < 0:
            msg = f"Charge amount cannot be negative, got {amount}"
            raise ValueError(msg)

        room = float(self._capacity) - float(self._remaining)
        if float(amount) >= room:
            self._remaining = self._capacity
            return MilliampHour.from_si(room)
        self._remaining = MilliampHour.from_si(float(self._remaining) + float(amount))
        return MilliampHour.from_si(float(amount))

    def is_empty(self) -> bool:
        return self._remaining <= ZERO_CHARGE

    def is_full(self) -> bool:
        """Whether the battery is charged to capacity."""
        return self._remaining >= self._capacity

    def __repr__(self) -> str:
        return f"Battery({float(self._remaining):.1f}/{float(self._capacity):.1f} mAh)"
