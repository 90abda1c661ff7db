"""Signal reductions: per-interval extrema, trend removal, circular stats.

Functions
---------
interval_extrema
    Minimum and maximum of a signal within each interval.
avg_extrema
    Average minimum and maximum across intervals.
mean_std_range
    Average range (max - min) across intervals and its variability.
demean, detrend
    Remove the mean / the least-squares linear trend.
circ_mean, circ_std
    Circular mean and standard deviation.
    Ref: Fisher NI. Statistical Analysis of Circular Data. Cambridge
    University Press; 1993.
"""

import logging
from typing import Tuple

import numpy as np

from .errors import InvalidInput
from .intervals import intervals

logger = logging.getLogger(__name__)


# ── Per-interval extrema ─────────────────────────────────────────────


def interval_extrema(x, boundaries) -> Tuple[np.ndarray, np.ndarray]:
    """Minimum and maximum of *x* within each ``[b[i], b[i+1])`` interval.

    Raises
    ------
    InvalidInput
        If an interval reaches past the end of *x*.
    """
    x = np.asarray(x, dtype=float)
    rgs = intervals(boundaries, end_included=False)
    mins = np.empty(len(rgs))
    maxs = np.empty(len(rgs))
    for i, rg in enumerate(rgs):
        if rg.start < 0 or rg.stop > x.shape[0]:
            raise InvalidInput(
                f"interval [{rg.start}, {rg.stop}) outside signal of length {x.shape[0]}"
            )
        seg = x[rg.start:rg.stop]
        mins[i] = np.min(seg)
        maxs[i] = np.max(seg)
    return mins, maxs


def avg_extrema(x, boundaries) -> Tuple[float, float]:
    """Average minimum and maximum over all intervals given by *boundaries*."""
    mins, maxs = interval_extrema(x, boundaries)
    return float(np.mean(mins)), float(np.mean(maxs))


def mean_std_range(x, boundaries) -> Tuple[float, float]:
    """Average range of *x* per interval and its sample standard deviation."""
    mins, maxs = interval_extrema(x, boundaries)
    roms = maxs - mins
    if roms.size < 2:
        return float(np.mean(roms)), float("nan")
    return float(np.mean(roms)), float(np.std(roms, ddof=1))


# ── Trend removal ────────────────────────────────────────────────────


def demean(x, inplace: bool = False) -> np.ndarray:
    """Subtract the mean of *x*.

    With ``inplace=True`` *x* must be a float ndarray and is modified.
    """
    if inplace:
        if not isinstance(x, np.ndarray):
            raise TypeError("inplace demean requires a numpy array")
        if x.dtype.kind != "f":
            raise InvalidInput(f"inplace demean requires a float array, got dtype {x.dtype}")
        x -= np.mean(x)
        return x
    x = np.asarray(x, dtype=float)
    return x - np.mean(x)


def detrend(y, inplace: bool = False) -> np.ndarray:
    """Remove the least-squares linear trend of *y* over its sample index."""
    arr = np.asarray(y, dtype=float)
    if arr.ndim != 1:
        raise InvalidInput(f"detrend expects a 1-D signal, got shape {arr.shape}")
    if arr.size < 2:
        raise InvalidInput("detrend requires at least two samples")
    t = np.arange(arr.size, dtype=float)
    slope, intercept = np.polyfit(t, arr, 1)
    trend = intercept + slope * t
    if inplace:
        if not isinstance(y, np.ndarray):
            raise TypeError("inplace detrend requires a numpy array")
        if y.dtype.kind != "f":
            raise InvalidInput(f"inplace detrend requires a float array, got dtype {y.dtype}")
        y -= trend
        return y
    return arr - trend


# ── Circular statistics ──────────────────────────────────────────────


def circ_mean(x, axis=None, degrees: bool = False):
    """Circular mean of angles *x* (radians, or degrees if *degrees*)."""
    x = np.asarray(x, dtype=float)
    if degrees:
        x = np.deg2rad(x)
    s = np.mean(np.sin(x), axis=axis)
    c = np.mean(np.cos(x), axis=axis)
    m = np.arctan2(s, c)
    return np.rad2deg(m) if degrees else m


def circ_std(x, axis=None, degrees: bool = False):
    """Circular standard deviation ``sqrt(-2 ln R)`` of angles *x*."""
    x = np.asarray(x, dtype=float)
    if degrees:
        x = np.deg2rad(x)
    s = np.mean(np.sin(x), axis=axis)
    c = np.mean(np.cos(x), axis=axis)
    # Resultant length can exceed 1 by rounding for identical angles
    r = np.minimum(np.hypot(c, s), 1.0)
    sd = np.sqrt(-2.0 * np.log(r))
    return np.rad2deg(sd) if degrees else sd
