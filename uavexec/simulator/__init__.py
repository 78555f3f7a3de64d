from .analyze import plot_telemetry
from .simulator import TELEMETRY_COLUMNS, Simulator

__all__ = ["Simulator", "TELEMETRY_COLUMNS", "plot_telemetry"]
