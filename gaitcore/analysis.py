"""Trial-level gait analysis built on the spatiotemporal and
time-normalization primitives.

Functions
---------
analyze_events
    All temporal metrics for one trial (main entry point).
spatiotemporal_table
    Per-stride metrics of one trial as a pandas DataFrame.
analyze_steps
    Step length and width of one trial from foot positions.
cycle_ensembles
    Time-normalized ensemble curves for several signals of one trial.
analyze_trials
    ``analyze_events`` over a batch of independent trials; a failing
    trial is logged and reported without aborting the batch.

Variability metrics:
    Ref: Hausdorff JM, Rios DA, Edelberg HK. Gait variability and
    fall risk in community-living older adults: a 1-year prospective
    study. Arch Phys Med Rehabil. 2001;82(8):1050-1056.
    doi:10.1053/apmr.2001.24893
"""

import logging
from typing import Dict, Optional

import numpy as np
import pandas as pd

from .config import get_config
from .errors import GaitError, InvalidInput
from .events import to_times, validate_events
from .spatiotemporal import (
    double_support,
    gait_mode,
    single_support,
    step_length,
    step_time,
    step_width,
    stride_time,
    swing_stance,
)
from .timenormalize import ensemble, time_normalize

logger = logging.getLogger(__name__)

_EVENT_KEYS = ("lfs", "lfo", "rfs", "rfo")


def _cv(values) -> float:
    """Coefficient of variation (%)."""
    if len(values) < 2:
        return 0.0
    m = np.mean(values)
    if m == 0:
        return 0.0
    return float(np.std(values, ddof=1) / m * 100)


def _describe(values) -> dict:
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        return {"mean": None, "std": None, "cv": None, "n": 0}
    return {
        "mean": round(float(np.mean(values)), 4),
        "std": round(float(np.std(values, ddof=1)), 4) if values.size > 1 else 0.0,
        "cv": round(_cv(values), 2),
        "n": int(values.size),
    }


def _events_in_seconds(events: dict, fs: float) -> Dict[str, np.ndarray]:
    """Validate the four event streams and express them in seconds."""
    if not isinstance(events, dict):
        raise TypeError("events must be a dict with lfs, lfo, rfs, rfo")
    missing = [k for k in _EVENT_KEYS if k not in events]
    if missing:
        raise InvalidInput(f"missing event streams: {missing}")

    out = {}
    for key in _EVENT_KEYS:
        arr = validate_events(events[key], key)
        if np.issubdtype(arr.dtype, np.integer):
            arr = to_times(arr, fs)
        out[key] = arr.astype(float)
    return out


def analyze_events(events: dict, fs: Optional[float] = None, config: Optional[dict] = None) -> dict:
    """Compute temporal gait metrics for one trial.

    Parameters
    ----------
    events : dict
        ``lfs``, ``lfo``, ``rfs``, ``rfo`` streams. Integer streams are
        sample indices converted with *fs*; float streams are seconds.
    fs : float, optional
        Sampling frequency in Hz. Defaults to ``config["events"]["fs"]``.
    config : dict, optional
        Overrides merged against ``DEFAULT_CONFIG``.

    Returns
    -------
    dict
        Keys ``stride_time``, ``step_time``, ``swing``, ``stance``
        (each ``{"left", "right"}``), ``single_support``,
        ``double_support``, ``gait_mode``, ``normalized`` and
        ``summary`` (mean / SD / CV%% per metric).

    Raises
    ------
    InvalidInput
        If an event stream is missing or malformed.
    DataConsistencyError
        If the events produce non-positive single support.
    """
    cfg = get_config(config)
    if fs is None:
        fs = cfg["events"]["fs"]
    normalize = cfg["spatiotemporal"]["normalize"]

    ev = _events_in_seconds(events, fs)
    lfs, lfo, rfs, rfo = (ev[k] for k in _EVENT_KEYS)

    left = swing_stance(lfs, lfo, normalize=normalize)
    right = swing_stance(rfs, rfo, normalize=normalize)

    results = {
        "stride_time": {"left": stride_time(lfs), "right": stride_time(rfs)},
        "step_time": step_time(lfs, rfs),
        "swing": {"left": left["swing"], "right": right["swing"]},
        "stance": {"left": left["stance"], "right": right["stance"]},
        "single_support": single_support(lfs, lfo, rfs, rfo, normalize=normalize),
        "double_support": double_support(lfs, lfo, rfs, rfo, normalize=normalize),
        "gait_mode": gait_mode(lfs, lfo, rfs, rfo),
        "normalized": normalize,
    }

    summary = {}
    for metric in ("stride_time", "step_time", "swing", "stance"):
        for side in ("left", "right"):
            summary[f"{metric}_{side}"] = _describe(results[metric][side])
    summary["single_support"] = _describe(results["single_support"])
    summary["double_support"] = _describe(results["double_support"])

    modes = results["gait_mode"]
    summary["gait_mode_counts"] = {m: modes.count(m) for m in ("walking", "running", "mixed")}
    results["summary"] = summary

    logger.info(
        f"Analyzed {summary['stride_time_right']['n']} right strides: "
        f"stride={summary['stride_time_right']['mean']}s, "
        f"modes={summary['gait_mode_counts']}"
    )
    return results


def spatiotemporal_table(results: dict) -> pd.DataFrame:
    """Per-right-stride metrics of :func:`analyze_events` as a DataFrame.

    Series of unequal length are aligned on the stride index and padded
    with NaN.
    """
    columns = {
        "stride_time_right": results["stride_time"]["right"],
        "stride_time_left": results["stride_time"]["left"],
        "step_time_left": results["step_time"]["left"],
        "step_time_right": results["step_time"]["right"],
        "swing_left": results["swing"]["left"],
        "swing_right": results["swing"]["right"],
        "stance_left": results["stance"]["left"],
        "stance_right": results["stance"]["right"],
        "single_support": results["single_support"],
        "double_support": results["double_support"],
        "gait_mode": results["gait_mode"],
    }
    df = pd.DataFrame({k: pd.Series(v, dtype=None if k == "gait_mode" else float)
                       for k, v in columns.items()})
    df.index.name = "stride"
    return df


def analyze_steps(
    events: dict,
    lft_pos,
    rft_pos,
    fs: Optional[float] = None,
    config: Optional[dict] = None,
) -> dict:
    """Compute step length and step width for one trial.

    Parameters
    ----------
    events : dict
        ``lfs``, ``lfo``, ``rfs``, ``rfo`` streams (see
        :func:`analyze_events`).
    lft_pos, rft_pos : array-like, shape (n_samples, n_axes)
        Left and right foot marker positions sampled at *fs*.
    fs : float, optional
        Sampling frequency in Hz. Defaults to ``config["events"]["fs"]``.
    config : dict, optional
        Overrides merged against ``DEFAULT_CONFIG``. The
        ``spatiotemporal`` section gives ``required_steps`` and the
        ``ap_axis``, ``ml_axis`` and ``vt_axis`` columns (``vt_axis``
        may be None for AP-only step length).

    Returns
    -------
    dict
        ``step_length`` and ``step_width`` (each ``{"left", "right"}``)
        and ``summary`` (mean / SD / CV%% per side).

    Raises
    ------
    InsufficientStepsError
        If too many footstrikes are floating.
    """
    cfg = get_config(config)
    if fs is None:
        fs = cfg["events"]["fs"]
    st_cfg = cfg["spatiotemporal"]

    ev = _events_in_seconds(events, fs)
    lengths = step_length(
        ev["lfs"], ev["lfo"], ev["rfs"], ev["rfo"], lft_pos, rft_pos,
        ap=st_cfg["ap_axis"],
        vt=st_cfg["vt_axis"],
        fs=fs,
        required_steps=st_cfg["required_steps"],
    )
    widths = step_width(ev["lfs"], ev["rfs"], lft_pos, rft_pos, ml=st_cfg["ml_axis"], fs=fs)

    summary = {}
    for side in ("left", "right"):
        summary[f"step_length_{side}"] = _describe(lengths[side])
        summary[f"step_width_{side}"] = _describe(widths[side])

    logger.info(
        f"Step length: left={summary['step_length_left']['mean']}, "
        f"right={summary['step_length_right']['mean']}"
    )
    return {"step_length": lengths, "step_width": widths, "summary": summary}


def cycle_ensembles(signals: dict, boundaries, config: Optional[dict] = None) -> dict:
    """Time-normalize and ensemble-average several signals of one trial.

    Parameters
    ----------
    signals : dict
        Name -> 1-D or 2-D array sampled on the same index grid as
        *boundaries*.
    boundaries : array-like
        Cycle boundaries (sample indices), e.g. right footstrikes.
    config : dict, optional
        Overrides for the ``timenormalize`` and ``ensemble`` sections.

    Returns
    -------
    dict
        Name -> ``{"normalized", "mean", "std", "n_cycles"}``.
    """
    cfg = get_config(config)
    length = cfg["timenormalize"]["length"]
    bc_type = cfg["timenormalize"]["bc_type"]
    ddof = cfg["ensemble"]["ddof"]
    circular = cfg["ensemble"]["circular"]

    result = {}
    for name, sig in signals.items():
        normed = time_normalize(sig, boundaries, length, bc_type=bc_type)
        ens = ensemble(normed, length, ddof=ddof, circular=circular)
        result[name] = {"normalized": normed, **ens}
        logger.debug(f"Ensemble for {name}: {ens['n_cycles']} cycles")
    return result


def analyze_trials(trials: dict, fs: Optional[float] = None, config: Optional[dict] = None) -> dict:
    """Run :func:`analyze_events` for each trial of a batch.

    Trials are independent; a trial that is not a dict or raises a
    :class:`GaitError` is logged and listed under ``errors`` and the
    batch continues.

    Parameters
    ----------
    trials : dict
        Trial name -> events dict (see :func:`analyze_events`).

    Returns
    -------
    dict
        ``results`` (name -> analysis) and ``errors`` (name -> message).
    """
    if not isinstance(trials, dict):
        raise TypeError("trials must be a dict of trial name -> events")

    results = {}
    errors = {}
    for name, events in trials.items():
        if not isinstance(events, dict):
            errors[name] = f"TypeError: events must be a dict, got {type(events).__name__}"
            logger.warning(f"Trial {name!r} skipped: {errors[name]}")
            continue
        try:
            results[name] = analyze_events(events, fs=fs, config=config)
        except GaitError as e:
            logger.warning(f"Trial {name!r} skipped: {type(e).__name__}: {e}")
            errors[name] = f"{type(e).__name__}: {e}"

    logger.info(f"Analyzed {len(results)}/{len(trials)} trials ({len(errors)} failed)")
    return {"results": results, "errors": errors}
