"""Finite-difference derivatives with boundary padding.

Used to derive velocity-like signals (e.g. heel-marker velocity) from
sampled positions.

    Ref: Winter DA. Biomechanics and Motor Control of Human Movement.
    4th ed. Wiley; 2009. Chapter 2.

Functions
---------
central_diff
    1st/2nd order centered difference along the first axis.
central_diff_segments
    Same, applied independently to each contiguous run of valid
    samples so that gaps (NaN) do not leak into neighbouring values.
"""

import logging
from typing import Optional, Union

import numpy as np

from .errors import DimensionMismatch, InvalidInput
from .intervals import valid_runs

logger = logging.getLogger(__name__)

FORWARD_BACKWARD = "forward_backward"

_MIN_SAMPLES = 3


def _check_args(x: np.ndarray, order: int, padding) -> None:
    if order not in (1, 2):
        raise InvalidInput(f"order must be 1 or 2, got {order!r}")
    if isinstance(padding, str) and padding != FORWARD_BACKWARD:
        raise InvalidInput(
            f"padding must be None, a number, or {FORWARD_BACKWARD!r}, got {padding!r}"
        )
    if x.ndim not in (1, 2):
        raise InvalidInput(f"x must be 1-D or 2-D, got shape {x.shape}")
    if x.shape[0] < _MIN_SAMPLES:
        raise DimensionMismatch(
            f"at least {_MIN_SAMPLES} samples are required for an order-{order} "
            f"central difference, got {x.shape[0]}"
        )


def _interior(x: np.ndarray, order: int, dt: float) -> np.ndarray:
    if order == 1:
        return (x[2:] - x[:-2]) / (2 * dt)
    return (x[2:] - 2 * x[1:-1] + x[:-2]) / dt**2


def central_diff(
    x,
    order: int = 1,
    *,
    dt: float = 1.0,
    padding: Union[None, float, str] = FORWARD_BACKWARD,
) -> np.ndarray:
    """Centered finite difference along the first axis of *x*.

    Parameters
    ----------
    x : array-like
        1-D signal, or 2-D array with samples along axis 0.
    order : int
        Derivative order, 1 or 2.
    dt : float
        Sampling period.
    padding : None, float, or ``"forward_backward"``
        ``None`` returns an array two samples shorter than *x*. A number
        (e.g. ``np.nan``) fills the first and last samples.
        ``"forward_backward"`` uses a forward difference for the first
        sample and a backward difference for the last one, of the same
        order as the interior.

    Returns
    -------
    np.ndarray

    Raises
    ------
    DimensionMismatch
        If *x* has fewer than 3 samples.
    InvalidInput
        If *order* or *padding* is not supported.
    """
    x = np.asarray(x, dtype=float)
    _check_args(x, order, padding)

    inner = _interior(x, order, dt)
    if padding is None:
        return inner

    out = np.empty_like(x)
    out[1:-1] = inner
    if padding == FORWARD_BACKWARD:
        if order == 1:
            out[0] = (x[1] - x[0]) / dt
            out[-1] = (x[-1] - x[-2]) / dt
        else:
            out[0] = (x[2] - 2 * x[1] + x[0]) / dt**2
            out[-1] = (x[-1] - 2 * x[-2] + x[-3]) / dt**2
    else:
        out[0] = padding
        out[-1] = padding
    return out


def central_diff_segments(
    x,
    order: int = 1,
    *,
    dt: float = 1.0,
    padding: Union[None, float, str] = FORWARD_BACKWARD,
    min_length: Optional[int] = None,
) -> np.ndarray:
    """Central difference restricted to contiguous runs of valid samples.

    Missing samples (NaN or ``None``) split *x* into maximal valid runs.
    Each run with at least *min_length* samples is differentiated on its
    own with :func:`central_diff`; gaps and shorter runs become NaN. The
    result always has the same shape as *x*. With ``padding=None`` the
    first and last sample of each run are NaN.

    2-D input is processed column by column.
    """
    x = np.asarray(x, dtype=float)
    if min_length is None:
        min_length = _MIN_SAMPLES
    if min_length < _MIN_SAMPLES:
        raise InvalidInput(f"min_length must be >= {_MIN_SAMPLES}, got {min_length}")

    if x.ndim == 2:
        return np.column_stack([
            central_diff_segments(x[:, j], order, dt=dt, padding=padding,
                                  min_length=min_length)
            for j in range(x.shape[1])
        ])
    if x.ndim != 1:
        raise InvalidInput(f"x must be 1-D or 2-D, got shape {x.shape}")

    out = np.full_like(x, np.nan)
    runs = valid_runs(np.isfinite(x), min_length=min_length)
    for rg in runs:
        seg = x[rg.start:rg.stop]
        if padding is None:
            out[rg.start + 1:rg.stop - 1] = central_diff(seg, order, dt=dt, padding=None)
        else:
            out[rg.start:rg.stop] = central_diff(seg, order, dt=dt, padding=padding)

    n_missing = int(np.count_nonzero(~np.isfinite(x)))
    if n_missing:
        logger.debug(
            f"Differentiated {len(runs)} valid runs; {n_missing} missing samples left as NaN"
        )
    return out
