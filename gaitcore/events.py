"""Gait event stream helpers.

Event streams are ascending sequences of footstrike (FS) and foot-off
(FO) occurrences per limb, given either as sample indices (ints) or as
times in seconds (floats).

Functions
---------
validate_events
    Check that a stream is 1-D, non-empty and strictly increasing.
to_indices, to_times
    Convert between times (s) and 0-based sample indices.
begin_with_event
    Align several streams so they start after a common footstrike.
find_floating_steps
    Locate footstrikes preceded by a flight (float) phase.
match_events
    Pair predicted events with reference events.
"""

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np
from scipy.spatial import cKDTree

from .errors import InvalidInput

logger = logging.getLogger(__name__)


def validate_events(stream, name: str = "events") -> np.ndarray:
    """Return *stream* as an array after checking it is strictly increasing.

    Raises
    ------
    InvalidInput
        If the stream is empty, not 1-D, or not strictly increasing.
    """
    arr = np.asarray(stream)
    if arr.ndim != 1:
        raise InvalidInput(f"{name} must be one-dimensional, got shape {arr.shape}")
    if arr.size == 0:
        raise InvalidInput(f"{name} is empty")
    if np.any(np.diff(arr) <= 0):
        raise InvalidInput(f"{name} must be strictly increasing")
    return arr


def to_indices(times, fs: float) -> np.ndarray:
    """Convert event times (s) to the nearest 0-based sample indices."""
    return np.rint(np.asarray(times, dtype=float) * fs).astype(np.int64)


def to_times(indices, fs: float) -> np.ndarray:
    """Convert 0-based sample indices to times (s)."""
    return np.asarray(indices, dtype=float) / fs


def begin_with_event(fs, *events) -> Tuple[np.ndarray, ...]:
    """Trim event streams so that they all begin after a common footstrike.

    The reference footstrike is the last element of *fs* preceding the
    latest first element among *events* (the first footstrike when none
    precede it). *fs* is kept from that footstrike on, and every stream
    in *events* is trimmed to the elements strictly after it.

    This prevents a stream that starts early (e.g. a foot-off before the
    first recorded footstrike) from producing negative durations.

    Returns
    -------
    tuple of np.ndarray
        ``(fs, *events)`` after trimming, in argument order.

    Raises
    ------
    InvalidInput
        If no events are given, a stream is empty, or a stream has no
        element after the reference footstrike.
    """
    if not events:
        raise InvalidInput("begin_with_event requires at least one event stream")
    fs = validate_events(fs, "fs")
    events = [validate_events(ev, f"events[{i}]") for i, ev in enumerate(events)]

    latest_first = max(ev[0] for ev in events)
    before = np.flatnonzero(fs < latest_first)
    k = int(before[-1]) if before.size else 0
    ref = fs[k]

    trimmed = []
    for i, ev in enumerate(events):
        j = int(np.searchsorted(ev, ref, side="right"))
        if j >= ev.size:
            raise InvalidInput(f"events[{i}] has no element after footstrike {ref}")
        trimmed.append(ev[j:])

    if k or any(len(t) != len(ev) for t, ev in zip(trimmed, events)):
        logger.debug(
            f"begin_with_event dropped {k} footstrikes and "
            f"{[len(ev) - len(t) for t, ev in zip(trimmed, events)]} events"
        )
    return (fs[k:], *trimmed)


def find_floating_steps(lfs, lfo, rfs, rfo) -> Dict[str, List[int]]:
    """Find footstrikes that follow a flight phase.

    Events are merged and scanned in time order. A footstrike is
    floating when the opposite foot lifted off after the opposite
    limb's previous footstrike (both feet airborne at landing, as in
    running), or when no previous opposite footstrike exists.

    Returns
    -------
    dict
        ``{"left": [...], "right": [...]}`` with indices into *lfs* and
        *rfs* of the floating footstrikes.
    """
    merged = []
    for label, stream in (("rfs", rfs), ("lfs", lfs), ("lfo", lfo), ("rfo", rfo)):
        merged.extend((label, value, i) for i, value in enumerate(np.asarray(stream)))
    merged.sort(key=lambda e: e[1])

    floating = {"left": [], "right": []}
    last_seen = {"rfs": None, "lfs": None}
    lifted_since = {"rfs": False, "lfs": False}

    for label, _, idx in merged:
        if label in ("rfo", "lfo"):
            # Foot-off of one limb follows that limb's footstrike
            owner = "rfs" if label == "rfo" else "lfs"
            if last_seen[owner] is not None:
                lifted_since[owner] = True
            continue

        opp = "lfs" if label == "rfs" else "rfs"
        side = "right" if label == "rfs" else "left"
        if last_seen[opp] is None or lifted_since[opp]:
            floating[side].append(idx)

        last_seen[label] = idx
        lifted_since[label] = False

    logger.debug(
        f"Floating steps: left={len(floating['left'])}, right={len(floating['right'])}"
    )
    return floating


def match_events(predicted, actual, tolerance: Optional[float] = None) -> dict:
    """Pair predicted events with their nearest reference events.

    Each predicted event is matched to the closest actual event. When
    several predicted events share a nearest neighbour only the closest
    one is kept. Matches farther than *tolerance* are discarded.

    Parameters
    ----------
    predicted : array-like
        Detected event times or indices.
    actual : array-like
        Reference event times or indices, same units.
    tolerance : float, optional
        Maximum absolute error of a match. Defaults to half the median
        interval between actual events.

    Returns
    -------
    dict
        ``predicted_idx`` (kept indices into *predicted*),
        ``actual_idx`` (matched indices into *actual*), ``errors``
        (signed predicted - actual), ``missed`` (actual events without
        a match).

    Raises
    ------
    InvalidInput
        If either stream has fewer than two events, or if the median
        event intervals differ by more than a factor of 10 (likely a
        units mismatch, e.g. frames vs seconds).
    """
    pred = validate_events(predicted, "predicted").astype(float)
    act = validate_events(actual, "actual").astype(float)
    if pred.size < 2 or act.size < 2:
        raise InvalidInput("at least two predicted and two actual events are required")

    mdiff_pred = float(np.median(np.diff(pred)))
    mdiff_act = float(np.median(np.diff(act)))

    def rel_err(x, y):
        return abs(x - y) / y

    if rel_err(mdiff_pred, mdiff_act) > 10 or rel_err(mdiff_act, mdiff_pred) > 10:
        raise InvalidInput(
            "large difference in event frequency; are predicted and actual "
            "events in the same units (e.g. frames vs seconds)?"
        )

    if tolerance is None:
        tolerance = 0.5 * mdiff_act

    tree = cKDTree(act[:, None])
    dists, idxs = tree.query(pred[:, None], p=np.inf)

    # Resolve duplicate nearest neighbours: closest predicted event wins
    keep = np.ones(pred.size, dtype=bool)
    for a_idx in np.unique(idxs):
        claimants = np.flatnonzero(idxs == a_idx)
        if claimants.size > 1:
            best = claimants[np.argmin(dists[claimants])]
            keep[claimants[claimants != best]] = False

    keep &= dists <= tolerance
    pred_idx = np.flatnonzero(keep)
    act_idx = idxs[keep]
    errors = pred[pred_idx] - act[act_idx]
    missed = int(act.size - act_idx.size)

    logger.info(
        f"Matched {pred_idx.size}/{pred.size} predicted events; {missed} actual events missed"
    )
    return {
        "predicted_idx": pred_idx,
        "actual_idx": act_idx,
        "errors": errors,
        "missed": missed,
    }
