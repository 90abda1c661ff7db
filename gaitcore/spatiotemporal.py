"""Spatiotemporal gait metrics from footstrike and foot-off events.

FS = footstrike, FO = foot-off (liftoff).

Stride time
    Time between consecutive FS of the same foot.
Step time
    Time since the previous opposite FS (a left step runs from a right
    FS to the next left FS).
Swing / stance
    FO -> FS and FS -> FO of the same leg.
Single support
    Time with exactly one foot on the ground. The sum of left and right
    swing when walking, the sum of left and right stance when running.
Double support
    Time with both feet on the ground. Stride time minus left and right
    swing when walking, zero when running (replaced by a float phase).

Walking::

    |RFS|     |LFO|     |LFS|     |RFO|     |RFS|
      |         Right stance        | R swing |
                | L swing |     Left stance ...
      |  L DS   |         |  R DS   |         |
      |  Left step time   |  Right step time  |
      |             Stride time               |

Running::

    |RFS|      |RFO|     |LFS|      |LFO|     |RFS|
      | R stance |         Right swing          |
                 |  Float  | L stance |  ...
      |  Left step time    |  Right step time   |
      |             Stride time                 |

Walking/running branching is expressed per stride as conditional
arithmetic, so mixed trials are handled stride by stride.

    Ref: Perry J, Burnfield JM. Gait Analysis: Normal and
    Pathological Function. 2nd ed. SLACK Incorporated; 2010.
    Ref: Novacheck TF. The biomechanics of running. Gait Posture.
    1998;7(1):77-95. doi:10.1016/S0966-6362(97)00038-6
"""

import logging
from typing import Dict, List, Optional, Union

import numpy as np

from .errors import DataConsistencyError, DimensionMismatch, InsufficientStepsError, InvalidInput
from .events import begin_with_event, find_floating_steps, to_indices, validate_events
from .intervals import intervals, rotating_diff

logger = logging.getLogger(__name__)


# ── Temporal metrics ─────────────────────────────────────────────────


def stride_time(fs) -> np.ndarray:
    """Durations between consecutive footstrikes of one limb."""
    return np.diff(np.asarray(fs))


def step_time(lfs, rfs, fs: float = 1.0) -> Dict[str, np.ndarray]:
    """Left and right step times.

    A left step is the time from a right footstrike to the next left
    footstrike, and vice versa.

    Parameters
    ----------
    lfs, rfs : array-like
        Left and right footstrikes (indices or seconds).
    fs : float
        Sampling frequency; results are divided by it, so index input
        with the true *fs* gives seconds.

    Returns
    -------
    dict
        ``{"left": lsteps, "right": rsteps}``.
    """
    lfs = validate_events(lfs, "lfs")
    rfs = validate_events(rfs, "rfs")
    if lfs[0] > rfs[0]:
        lsteps, rsteps = rotating_diff(rfs, lfs)
    else:
        rsteps, lsteps = rotating_diff(lfs, rfs)
    return {"left": lsteps / fs, "right": rsteps / fs}


def swing_stance(fs, fo, normalize: bool = True) -> Dict[str, np.ndarray]:
    """Swing and stance times of one limb.

    If *normalize* is True, swing and stance are expressed as a fraction
    of the enclosing stride. Any FO preceding the first FS is dropped
    first (removing an initial swing), and both lists are truncated to
    the same number of strides, since their counts can differ by one at
    the trial boundaries.

    Returns
    -------
    dict
        ``{"swing": ..., "stance": ...}``.
    """
    fs = validate_events(fs, "fs")
    fo = validate_events(fo, "fo")
    if normalize:
        fs, fo = begin_with_event(fs, fo)

    if fo[0] < fs[0]:
        sw, st = rotating_diff(fo, fs)
    else:
        st, sw = rotating_diff(fs, fo)

    if normalize:
        strides = stride_time(fs)
        n = min(st.size, sw.size, strides.size)
        if n < max(st.size, sw.size):
            logger.debug(f"swing_stance truncated to {n} strides")
        sw = sw[:n] / strides[:n]
        st = st[:n] / strides[:n]

    return {"swing": sw, "stance": st}


def swing(fs, fo, normalize: bool = True) -> np.ndarray:
    """Swing times (FO -> FS); see :func:`swing_stance`."""
    return swing_stance(fs, fo, normalize=normalize)["swing"]


def stance(fs, fo, normalize: bool = True) -> np.ndarray:
    """Stance times (FS -> FO); see :func:`swing_stance`."""
    return swing_stance(fs, fo, normalize=normalize)["stance"]


def swing_intervals(fs, fo, step: int = 1) -> List[range]:
    """Sample ranges of each swing phase (FO to the following FS)."""
    return intervals(fo, fs, step=step)


def stance_intervals(fs, fo, step: int = 1) -> List[range]:
    """Sample ranges of each stance phase (FS to the following FO)."""
    return intervals(fs, fo, step=step)


# ── Single / double support ──────────────────────────────────────────


def _support_components(lfs, lfo, rfs, rfo) -> dict:
    """Per right-stride intermediates shared by the support metrics."""
    rfs, lfo, lfs, rfo = begin_with_event(rfs, lfo, lfs, rfo)

    steps = step_time(lfs, rfs)
    left = swing_stance(lfs, lfo, normalize=False)
    right = swing_stance(rfs, rfo, normalize=False)
    series = {
        "lstep": steps["left"],
        "rstep": steps["right"],
        "lswing": left["swing"],
        "lstance": left["stance"],
        "rswing": right["swing"],
        "rstance": right["stance"],
    }
    n = min(v.size for v in series.values())
    comp = {k: v[:n].astype(float) for k, v in series.items()}
    comp["strides"] = stride_time(rfs).astype(float)
    comp["n"] = n
    return comp


def _normalize_by_stride(values: np.ndarray, strides: np.ndarray) -> np.ndarray:
    n = min(values.size, strides.size)
    return values[:n] / strides[:n]


def single_support(lfs, lfo, rfs, rfo, normalize: bool = True) -> np.ndarray:
    """Single support time per right stride.

    For each right stride the right contribution is the right swing if
    the right stance outlasts the left step (walking), else the right
    stance (running); the left contribution is chosen symmetrically
    against the right step.

    Raises
    ------
    DataConsistencyError
        If any single support value is <= 0, which indicates misordered
        or missing gait events.
    """
    c = _support_components(lfs, lfo, rfs, rfo)
    ss = (
        np.where(c["rstance"] > c["lstep"], c["rswing"], c["rstance"])
        + np.where(c["lstance"] > c["rstep"], c["lswing"], c["lstance"])
    )

    bad = np.flatnonzero(ss <= 0)
    if bad.size:
        raise DataConsistencyError(
            f"Single support cannot be <= 0 (strides {bad.tolist()}). Check your gait events"
        )

    if normalize:
        ss = _normalize_by_stride(ss, c["strides"])
    return ss


def double_support(lfs, lfo, rfs, rfo, normalize: bool = True) -> np.ndarray:
    """Double support time per right stride.

    Left double support (right FS -> left FO) is counted when the right
    stance lasts at least the left step; right double support likewise
    against the right step. Running strides therefore give exactly 0.
    """
    c = _support_components(lfs, lfo, rfs, rfo)
    ds = (
        np.where(c["rstance"] >= c["lstep"], c["lstep"] - c["lswing"], 0.0)
        + np.where(c["lstance"] >= c["rstep"], c["rstep"] - c["rswing"], 0.0)
    )

    if normalize:
        ds = _normalize_by_stride(ds, c["strides"])
    return ds


def gait_mode(lfs, lfo, rfs, rfo) -> List[str]:
    """Classify each right stride as ``"walking"``, ``"running"`` or ``"mixed"``.

    Walking strides have both a left and a right double-support phase,
    running strides have neither.
    """
    c = _support_components(lfs, lfo, rfs, rfo)
    left_ds = c["rstance"] >= c["lstep"]
    right_ds = c["lstance"] >= c["rstep"]
    modes = []
    for l_ds, r_ds in zip(left_ds, right_ds):
        if l_ds and r_ds:
            modes.append("walking")
        elif not l_ds and not r_ds:
            modes.append("running")
        else:
            modes.append("mixed")
    return modes


# ── Spatial metrics ──────────────────────────────────────────────────


def _events_to_indices(stream, fs: float, name: str) -> np.ndarray:
    arr = validate_events(stream, name)
    if np.issubdtype(arr.dtype, np.floating):
        arr = to_indices(arr, fs)
    return arr.astype(np.int64)


def _check_positions(lft_pos, rft_pos, lfs, rfs):
    lft_pos = np.asarray(lft_pos, dtype=float)
    rft_pos = np.asarray(rft_pos, dtype=float)
    if lft_pos.ndim != 2 or rft_pos.ndim != 2:
        raise InvalidInput("foot position data must be 2-D arrays (samples x axes)")
    if lft_pos.shape[0] != rft_pos.shape[0]:
        raise DimensionMismatch("left and right foot position data have unequal lengths")
    if max(lfs[-1], rfs[-1]) >= lft_pos.shape[0]:
        raise InvalidInput("foot strike after the end of foot position data")
    if min(lfs[0], rfs[0]) < 0:
        raise InvalidInput("foot strike before the start of foot position data")
    return lft_pos, rft_pos


def step_length(
    lfs,
    lfo,
    rfs,
    rfo,
    lft_pos,
    rft_pos,
    *,
    ap: int = 0,
    vt: Optional[int] = 2,
    fs: float = 1.0,
    required_steps: Union[float, int] = 0.9,
) -> Dict[str, np.ndarray]:
    """Left and right step lengths at each footstrike.

    The step length of a footstrike is the distance between the landing
    foot and the opposite (stance) foot at that instant, measured along
    the anteroposterior axis and, when *vt* is given, the vertical axis.

    Step length is only meaningful while the opposite foot is on the
    ground, so floating footstrikes (after a flight phase) are excluded.

    Parameters
    ----------
    lfs, lfo, rfs, rfo : array-like
        Gait events. Float arrays are treated as times and converted
        to indices with *fs*; int arrays are sample indices.
    lft_pos, rft_pos : array-like, shape (n_samples, n_axes)
        Left and right foot marker positions.
    ap, vt : int
        Column of the anteroposterior and vertical axes (*vt* may be
        None to use the AP axis only).
    fs : float
        Sampling frequency for time-to-index conversion.
    required_steps : float or int
        Minimum usable steps per side, as a fraction of footstrikes
        (float) or an absolute count (int).

    Returns
    -------
    dict
        ``{"left": lsteps, "right": rsteps}``.

    Raises
    ------
    DimensionMismatch
        If left and right position arrays have different lengths.
    InvalidInput
        If a footstrike lies outside the position data.
    InsufficientStepsError
        If too many footstrikes are floating.
    """
    lfs = _events_to_indices(lfs, fs, "lfs")
    lfo = _events_to_indices(lfo, fs, "lfo")
    rfs = _events_to_indices(rfs, fs, "rfs")
    rfo = _events_to_indices(rfo, fs, "rfo")
    lft_pos, rft_pos = _check_positions(lft_pos, rft_pos, lfs, rfs)

    floating = find_floating_steps(lfs, lfo, rfs, rfo)
    if isinstance(required_steps, (int, np.integer)) and not isinstance(required_steps, bool):
        min_l = min_r = int(required_steps)
    else:
        min_l = int(round(required_steps * lfs.size))
        min_r = int(round(required_steps * rfs.size))

    n_good_l = lfs.size - len(floating["left"])
    n_good_r = rfs.size - len(floating["right"])
    if n_good_l < min_l or n_good_r < min_r:
        raise InsufficientStepsError(
            f"number of floating steps exceeds limits (usable left {n_good_l}/{lfs.size}, "
            f"right {n_good_r}/{rfs.size}); try lowering the number of required steps?"
        )

    cols = [ap] if vt is None else sorted([ap, vt])
    good_rfs = np.delete(rfs, floating["right"])
    good_lfs = np.delete(lfs, floating["left"])

    rsteps = np.linalg.norm(rft_pos[np.ix_(good_rfs, cols)] - lft_pos[np.ix_(good_rfs, cols)], axis=1)
    lsteps = np.linalg.norm(lft_pos[np.ix_(good_lfs, cols)] - rft_pos[np.ix_(good_lfs, cols)], axis=1)

    return {"left": lsteps, "right": rsteps}


def step_width(
    lfs,
    rfs,
    lft_pos,
    rft_pos,
    *,
    ml: int = 1,
    fs: float = 1.0,
) -> Dict[str, np.ndarray]:
    """Mediolateral distance between consecutive opposite-limb footstrikes.

    A left step width is the left foot's ML coordinate at a left
    footstrike minus the right foot's ML coordinate at the preceding
    right footstrike, and vice versa. Values are signed along the ML
    axis, so left and right widths have opposite signs in a consistent
    lab frame.

    Returns
    -------
    dict
        ``{"left": lsteps, "right": rsteps}``.
    """
    lfs = _events_to_indices(lfs, fs, "lfs")
    rfs = _events_to_indices(rfs, fs, "rfs")
    lft_pos, rft_pos = _check_positions(lft_pos, rft_pos, lfs, rfs)

    lml = lft_pos[lfs, ml]
    rml = rft_pos[rfs, ml]
    if lfs[0] > rfs[0]:
        lsteps, rsteps = rotating_diff(rml, lml, start=0)
    else:
        rsteps, lsteps = rotating_diff(lml, rml, start=0)

    return {"left": lsteps, "right": rsteps}
