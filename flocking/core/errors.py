"""
core/errors.py

Contract violations of the simulation core.

Nothing here is transient. The simulation is pure computation:
a rejected call is rejected, never retried.
"""


class FlockError(Exception):
    """Base class for flocking errors."""


class FlockConfigError(FlockError, ValueError):
    """Invalid population, coefficient, or configuration value."""


class InvalidTimeStepError(FlockError, ValueError):
    """Negative or non-finite delta time passed to update()."""


class FlockStateError(FlockError, RuntimeError):
    """Flock used in a state it does not support (e.g. re-entrant update)."""
