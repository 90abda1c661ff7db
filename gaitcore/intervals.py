"""Interval algebra over ordered boundary sequences.

Turns ascending sample-index sequences into non-overlapping ranges and
pairs up phase-offset event streams. These primitives are shared by
every spatiotemporal metric.

Functions
---------
intervals
    Ranges between adjacent boundaries, or matched across two streams.
rotating_diff
    Paired differences between N interleaved, phase-offset sequences.
interleave
    Round-robin flatten of N sequences (fixture builder).
valid_runs
    Maximal runs of valid samples in a boolean mask.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

from .errors import InvalidInput

logger = logging.getLogger(__name__)


def _as_index_array(values, name: str) -> np.ndarray:
    """Return *values* as a 1-D int64 array, rejecting fractional values."""
    arr = np.asarray(values)
    if arr.ndim != 1:
        raise InvalidInput(f"{name} must be one-dimensional, got shape {arr.shape}")
    if arr.size == 0:
        return arr.astype(np.int64)
    if not np.issubdtype(arr.dtype, np.integer):
        if not np.all(np.isfinite(arr)) or not np.all(np.mod(arr, 1) == 0):
            raise InvalidInput(f"{name} must contain integer sample indices")
    return arr.astype(np.int64)


def _closed_range(start: int, stop: int, step: int, end_included: bool) -> range:
    rg = range(start, stop + 1, step)
    if end_included:
        return rg
    return rg[:-1]


def intervals(
    a,
    b=None,
    *,
    end_included: bool = False,
    step: int = 1,
) -> List[range]:
    """Build ranges from one or two ascending boundary sequences.

    With a single sequence, one range is returned per adjacent pair
    ``a[i]..a[i+1]``. With two sequences, each range starts at an
    element of *a* and ends at the nearest following element of *b*:
    the first ``b`` strictly greater than the current ``a`` is located,
    then the last ``a`` strictly less than that ``b``. Both positions
    then advance past the matched pair.

    Matching across two sequences is lossy on purpose: boundary values
    that cannot be paired (e.g. two ``a`` values in a row) are skipped
    so that no two ranges share an ``a`` or ``b`` endpoint.

    Parameters
    ----------
    a : array-like of int
        Ascending start boundaries (sample indices).
    b : array-like of int, optional
        Ascending end boundaries.
    end_included : bool
        Include the closing boundary in each range. When False the
        range stops one *step* before it.
    step : int
        Range step (default 1).

    Returns
    -------
    list of range

    Raises
    ------
    InvalidInput
        If fewer than two boundaries are given for a single sequence,
        if boundaries are not strictly increasing integers, or if *step*
        is not positive.
    """
    if isinstance(step, bool) or not isinstance(step, (int, np.integer)) or step < 1:
        raise InvalidInput(f"step must be a positive integer, got {step!r}")
    step = int(step)

    a = _as_index_array(a, "a")

    if b is None:
        if a.size < 2:
            raise InvalidInput("at least two boundaries are required to create an interval")
        if np.any(np.diff(a) <= 0):
            raise InvalidInput("boundaries must be strictly increasing")
        return [
            _closed_range(int(a[i]), int(a[i + 1]), step, end_included)
            for i in range(a.size - 1)
        ]

    b = _as_index_array(b, "b")
    if np.any(np.diff(a) <= 0) or np.any(np.diff(b) <= 0):
        raise InvalidInput("boundaries must be strictly increasing")
    ranges = []
    ai = 0
    bi = 0
    while ai < a.size and bi < b.size:
        bi += int(np.searchsorted(b[bi:], a[ai], side="right"))
        if bi >= b.size:
            break
        ai += int(np.searchsorted(a[ai:], b[bi], side="left")) - 1
        ranges.append(_closed_range(int(a[ai]), int(b[bi]), step, end_included))
        ai += 1
        bi += 1

    return ranges


def rotating_diff(*sequences, start: Optional[int] = None) -> Tuple[np.ndarray, ...]:
    """Paired differences between N interleaved, phase-offset sequences.

    The sequences are treated as channels of a single cyclic timeline
    (e.g. ``rfs, lfs`` or ``fs, fo``). Starting from channel *start*,
    the difference between the current element of the next channel and
    the current element of the current channel is appended to the
    current channel's output; the current channel then advances and
    the next channel becomes current. Iteration stops when the next
    channel is exhausted.

    Parameters
    ----------
    *sequences : array-like
        Two or more ascending sequences.
    start : int, optional
        Channel to start from. Defaults to the channel holding the
        smallest first value; on ties the lowest channel index wins.

    Returns
    -------
    tuple of np.ndarray
        One array of differences per channel, in channel order.

    Raises
    ------
    InvalidInput
        If fewer than two sequences are given, a sequence is empty, or
        *start* is not a valid channel index.
    """
    n = len(sequences)
    if n < 2:
        raise InvalidInput("rotating_diff requires at least two sequences")
    seqs = [np.asarray(s) for s in sequences]
    for i, s in enumerate(seqs):
        if s.ndim != 1 or s.size == 0:
            raise InvalidInput(f"sequence {i} must be a non-empty 1-D sequence")

    if start is None:
        # np.argmin returns the first occurrence, so ties go to the lowest index
        start = int(np.argmin([s[0] for s in seqs]))
    elif not 0 <= start < n:
        raise InvalidInput(f"start must be in [0, {n}), got {start}")

    diffed = [[] for _ in range(n)]
    pos = [0] * n

    curr = start
    nxt = (curr + 1) % n
    while pos[nxt] < seqs[nxt].size:
        diffed[curr].append(seqs[nxt][pos[nxt]] - seqs[curr][pos[curr]])
        pos[curr] += 1
        curr = nxt
        nxt = (curr + 1) % n

    dtype = np.result_type(*seqs)
    return tuple(np.asarray(d, dtype=dtype) for d in diffed)


def interleave(*sequences) -> np.ndarray:
    """Round-robin flatten sequences, truncated to the shortest one.

    ``interleave([1, 3, 5], [2, 4])`` gives ``[1, 2, 3, 4]``.
    """
    if not sequences:
        raise InvalidInput("interleave requires at least one sequence")
    seqs = [np.asarray(s) for s in sequences]
    minlen = min(s.size for s in seqs)
    return np.column_stack([s[:minlen] for s in seqs]).ravel()


def valid_runs(mask, min_length: int = 1) -> List[range]:
    """Return maximal runs of True in *mask* as ranges of indices.

    Parameters
    ----------
    mask : array-like of bool
        Per-sample validity flags.
    min_length : int
        Runs shorter than this are dropped.

    Returns
    -------
    list of range
    """
    mask = np.asarray(mask, dtype=bool)
    if mask.ndim != 1:
        raise InvalidInput(f"mask must be one-dimensional, got shape {mask.shape}")
    edges = np.diff(np.concatenate(([0], mask.astype(np.int8), [0])))
    starts = np.flatnonzero(edges == 1)
    stops = np.flatnonzero(edges == -1)
    runs = [range(int(s), int(e)) for s, e in zip(starts, stops) if e - s >= min_length]
    logger.debug(f"Found {len(runs)} valid runs (min_length={min_length})")
    return runs
