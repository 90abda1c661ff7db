"""Time normalization of gait cycles and ensemble averaging.

Each cycle (e.g. footstrike to the next ipsilateral footstrike) is
resampled onto ``length`` points spanning ``[start, end)`` of the cycle,
so index ``i`` of a normalized cycle is ``i`` percent of the cycle when
``length == 100``. Normalized cycles are concatenated and can then be
reduced position-wise into mean and SD curves.

    Ref: Duhamel A, Bourriez JL, Devos P, et al. Statistical tools
    for clinical gait analysis. Gait Posture. 2004;20(2):204-212.
    doi:10.1016/j.gaitpost.2003.09.010

Functions
---------
normalized_time
    ``length`` evenly spaced points on ``[t1, t2)``.
time_normalize
    Resample a signal cycle by cycle with a cubic spline.
times_to_indices
    Position of event times inside one normalized cycle.
cycle_times_to_indices
    Same, across consecutive cycles of a concatenated array.
ensemble
    Position-wise mean and SD of stacked normalized cycles.
limit_cycle
    ``ensemble(time_normalize(...))`` in one call.
"""

import logging

import numpy as np
from scipy.interpolate import CubicSpline

from .errors import InvalidInput
from .reductions import circ_mean, circ_std

logger = logging.getLogger(__name__)


def _check_length(length: int) -> int:
    if isinstance(length, bool) or not isinstance(length, (int, np.integer)) or length < 1:
        raise InvalidInput(f"length must be a positive integer, got {length!r}")
    return int(length)


def normalized_time(t1: float, t2: float, length: int = 100) -> np.ndarray:
    """Return *length* evenly spaced points covering ``[t1, t2)``."""
    length = _check_length(length)
    return np.linspace(t1, t2, length + 1)[:length]


def time_normalize(signal, boundaries, length: int = 100, bc_type: str = "natural") -> np.ndarray:
    """Normalize every cycle of *signal* to *length* samples.

    A cubic spline is fitted over the whole signal on its sample-index
    grid and evaluated at :func:`normalized_time` points for each pair
    of consecutive *boundaries*. The final boundary of each cycle is
    exclusive, so the last boundary may equal ``len(signal)``.

    Parameters
    ----------
    signal : array-like, shape (n_samples,) or (n_samples, n_channels)
        Continuous signal; channels are normalized independently.
    boundaries : array-like
        Strictly increasing cycle boundaries as sample indices (may be
        fractional).
    length : int
        Samples per normalized cycle (default 100).
    bc_type : str
        Spline boundary condition passed to ``scipy.interpolate.CubicSpline``.

    Returns
    -------
    np.ndarray
        Shape ``(length * n_cycles,)`` or ``(length * n_cycles, n_channels)``.

    Raises
    ------
    InvalidInput
        If fewer than two boundaries are given, boundaries are not
        increasing or fall outside ``[0, len(signal)]``, or the signal
        contains non-finite values.
    """
    length = _check_length(length)
    signal = np.asarray(signal, dtype=float)
    boundaries = np.asarray(boundaries, dtype=float)

    if signal.ndim not in (1, 2):
        raise InvalidInput(f"signal must be 1-D or 2-D, got shape {signal.shape}")
    n = signal.shape[0]
    if n < 2:
        raise InvalidInput("signal must have at least two samples")
    if boundaries.ndim != 1 or boundaries.size < 2:
        raise InvalidInput("at least two boundaries are required to form a cycle")
    if np.any(np.diff(boundaries) <= 0):
        raise InvalidInput("boundaries must be strictly increasing")
    if boundaries[0] < 0 or boundaries[-1] > n:
        raise InvalidInput(
            f"boundaries [{boundaries[0]}, {boundaries[-1]}] outside signal index range [0, {n}]"
        )
    if not np.all(np.isfinite(signal)):
        raise InvalidInput("signal contains missing values; fill gaps before normalizing")

    spline = CubicSpline(np.arange(n, dtype=float), signal, axis=0, bc_type=bc_type)
    t = np.concatenate([
        normalized_time(boundaries[i], boundaries[i + 1], length)
        for i in range(boundaries.size - 1)
    ])
    logger.debug(f"Normalized {boundaries.size - 1} cycles to {length} samples")
    return spline(t)


def times_to_indices(t1: float, t2: float, times, length: int = 100) -> np.ndarray:
    """Locate *times* inside a cycle normalized between *t1* and *t2*.

    Each time maps to the first normalized time that is ``>=`` it. A
    time equal to *t2* maps to *length*, i.e. the first sample of the
    following cycle.

    Raises
    ------
    InvalidInput
        If ``t1 >= t2`` or a time lies outside ``[t1, t2]``.
    """
    if not t1 < t2:
        raise InvalidInput("t1 must be less than t2")
    times = np.atleast_1d(np.asarray(times, dtype=float))
    if np.any((times < t1) | (times > t2)):
        raise InvalidInput("times must be between the normalizing events")
    nt = normalized_time(t1, t2, length)
    return np.searchsorted(nt, times, side="left")


def cycle_times_to_indices(base_times, times, length: int = 100) -> np.ndarray:
    """Locate *times* inside an array normalized by consecutive *base_times*.

    Indices are offset into the concatenated output of
    :func:`time_normalize`, so cycle ``k`` occupies
    ``[k * length, (k + 1) * length)``.
    """
    base = np.asarray(base_times, dtype=float)
    if base.ndim != 1 or base.size < 2:
        raise InvalidInput("at least two base times are required")
    if np.any(np.diff(base) <= 0):
        raise InvalidInput("base times must be strictly increasing")
    times = np.atleast_1d(np.asarray(times, dtype=float))
    if np.any((times < base[0]) | (times > base[-1])):
        raise InvalidInput("times must be between the first and last base times")

    cycle = np.clip(np.searchsorted(base, times, side="right") - 1, 0, base.size - 2)
    out = np.empty(times.size, dtype=np.int64)
    for k in np.unique(cycle):
        sel = cycle == k
        out[sel] = times_to_indices(base[k], base[k + 1], times[sel], length) + k * length
    return out


def ensemble(normalized, length: int = 100, ddof: int = 1, circular: bool = False) -> dict:
    """Position-wise mean and SD of concatenated normalized cycles.

    Samples ``i, i + length, i + 2*length, ...`` are reduced together.

    Parameters
    ----------
    normalized : array-like, shape (k * length,) or (k * length, n_channels)
        Output of :func:`time_normalize`.
    length : int
        Samples per cycle.
    ddof : int
        Delta degrees of freedom of the SD (default 1, sample SD).
    circular : bool
        Treat values as angles in radians and use circular statistics.

    Returns
    -------
    dict
        ``mean`` and ``std`` (shape ``(length, ...)``) and ``n_cycles``.

    Raises
    ------
    InvalidInput
        If the number of samples is not a multiple of *length*.
    """
    length = _check_length(length)
    data = np.asarray(normalized, dtype=float)
    if data.ndim not in (1, 2) or data.shape[0] == 0:
        raise InvalidInput(f"normalized data must be a non-empty 1-D or 2-D array, got shape {data.shape}")
    if data.shape[0] % length != 0:
        raise InvalidInput(
            f"length of data ({data.shape[0]}) must be an exact multiple of length ({length})"
        )

    k = data.shape[0] // length
    stacked = data.reshape((k, length) + data.shape[1:])

    if circular:
        mean = circ_mean(stacked, axis=0)
        std = circ_std(stacked, axis=0)
    else:
        mean = np.mean(stacked, axis=0)
        if k > ddof:
            std = np.std(stacked, axis=0, ddof=ddof)
        else:
            logger.warning(f"Only {k} cycle(s) for ddof={ddof}; SD is undefined")
            std = np.full(mean.shape, np.nan)

    return {"mean": mean, "std": std, "n_cycles": k}


def limit_cycle(
    signal,
    boundaries,
    length: int = 100,
    bc_type: str = "natural",
    ddof: int = 1,
    circular: bool = False,
) -> dict:
    """Ensemble average of *signal* over the cycles given by *boundaries*."""
    normed = time_normalize(signal, boundaries, length, bc_type=bc_type)
    return ensemble(normed, length, ddof=ddof, circular=circular)
