"""Exception types raised by gaitcore.

All errors derive from ``ValueError`` so existing ``except ValueError``
handlers keep working.

Classes
-------
GaitError
    Base class for every gaitcore error.
InvalidInput
    Malformed arguments (too few points, out-of-range boundaries, ...).
DimensionMismatch
    Paired arrays that must share a length do not.
DataConsistencyError
    A computed result violates a physical invariant of gait.
InsufficientStepsError
    Too many floating steps to compute step length.
"""


class GaitError(ValueError):
    """Base class for gaitcore errors."""


class InvalidInput(GaitError):
    """Arguments cannot form a valid interval, cycle, or ensemble."""


class DimensionMismatch(InvalidInput):
    """Arrays that must have the same length (or enough samples) do not."""


class DataConsistencyError(GaitError):
    """Result violates a physical invariant, e.g. single support <= 0.

    Usually points to misordered or missing gait events.
    """


class InsufficientStepsError(DataConsistencyError, InvalidInput):
    """Fraction of non-floating steps is below the required threshold."""
