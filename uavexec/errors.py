"""Errors raised by the command execution engines.

All of them signal a programming or modelling defect rather than a transient
condition: they are raised, never caught and retried inside the engine, and
end the current simulation run.

Hierarchy:
    CeeError (RuntimeError)
    ├── MissingCommandError      initialize() on an engine built without a command
    ├── UndefinedForecastError   duration queries on open-ended engines
    ├── InvariantViolationError  overrun deadlines, implausible consumption
    └── PrematureQueryError      queries that need an activated engine
"""


class CeeError(RuntimeError):
    """Base class for command execution engine errors."""


class MissingCommandError(CeeError):
    """An engine was initialised without a bound command."""


class UndefinedForecastError(CeeError):
    """A duration or remaining-time forecast was requested from an engine that has none.

    Charge, Exchange and Idle end on external events, so a planning layer
    asking them for a duration has a bug.
    """


class InvariantViolationError(CeeError):
    """A modelling invariant was broken (deadline overrun, consumption out of bounds)."""


class PrematureQueryError(CeeError):
    """A query that needs an activated engine was made before activation."""
