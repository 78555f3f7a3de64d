"""Simulation-wide constants.

Units follow the rest of the package: meters, seconds, degrees, and
milliamp-hours for charge. Flight-model defaults describe a mid-size
quadcopter and are only used when a ``FlightModel`` is built without
arguments.
"""

from uavexec.unit import AmpHour, Second

# Absolute tolerance for positional and angular comparisons
EPSILON = 1e-10

# Upper bound for a plausible forecast, in mAh per second of execution
CONSUMPTION_SANITY_CEILING = 1000.0

# Charge level requested from a charging station when reserving a spot
TARGET_CHARGE_PERCENTAGE = 100.0

# Simulation Configuration
DT = Second(1)

# Battery Configuration
BATTERY_CAPACITY = AmpHour(5.0)

# Flight Model: speeds in m/s
HORIZONTAL_SPEED = 10.0
CLIMB_SPEED = 3.0
DESCENT_SPEED = 2.0
PESSIMISTIC_SPEED_FACTOR = 0.8

# Flight Model: current draw in mAh per second
HOVER_CONSUMPTION = 4.5
HORIZONTAL_CONSUMPTION = 5.0
CLIMB_CONSUMPTION = 7.0
DESCENT_CONSUMPTION = 4.0

# Relative standard deviation of the current draw, and the z-score used for quantiles
CONSUMPTION_RELATIVE_STD = 0.1
QUANTILE_Z_SCORE = 1.645

# Charging Station: charge rate in mAh per second
CHARGE_RATE = 10.0
