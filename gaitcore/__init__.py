"""gaitcore -- Spatiotemporal gait metrics and gait-cycle normalization.

Quick start::

    from gaitcore import step_time, swing_stance, single_support, double_support
    steps = step_time(lfs, rfs)
    phases = swing_stance(rfs, rfo)            # fractions of the stride
    ss = single_support(lfs, lfo, rfs, rfo)
    ds = double_support(lfs, lfo, rfs, rfo)    # 0 for running strides

Cycle normalization and ensemble curves::

    from gaitcore import time_normalize, ensemble
    normed = time_normalize(knee_angle, rfs_indices, length=100)
    curves = ensemble(normed, length=100)
    curves["mean"], curves["std"]

Whole-trial analysis::

    from gaitcore import analyze_events, spatiotemporal_table
    results = analyze_events({"lfs": lfs, "lfo": lfo, "rfs": rfs, "rfo": rfo}, fs=100.0)
    df = spatiotemporal_table(results)

Configuration::

    from gaitcore import load_config
    cfg = load_config("analysis.yaml")
    results = analyze_events(events, config=cfg)
"""

__version__ = "0.1.0"

from .errors import (
    GaitError,
    InvalidInput,
    DimensionMismatch,
    DataConsistencyError,
    InsufficientStepsError,
)
from .intervals import intervals, rotating_diff, interleave, valid_runs
from .derivatives import central_diff, central_diff_segments, FORWARD_BACKWARD
from .reductions import (
    interval_extrema,
    avg_extrema,
    mean_std_range,
    demean,
    detrend,
    circ_mean,
    circ_std,
)
from .events import (
    validate_events,
    to_indices,
    to_times,
    begin_with_event,
    find_floating_steps,
    match_events,
)
from .spatiotemporal import (
    stride_time,
    step_time,
    swing_stance,
    swing,
    stance,
    swing_intervals,
    stance_intervals,
    single_support,
    double_support,
    gait_mode,
    step_length,
    step_width,
)
from .timenormalize import (
    normalized_time,
    time_normalize,
    times_to_indices,
    cycle_times_to_indices,
    ensemble,
    limit_cycle,
)
from .analysis import (
    analyze_events,
    spatiotemporal_table,
    analyze_steps,
    cycle_ensembles,
    analyze_trials,
)
from .config import load_config, save_config, get_config, DEFAULT_CONFIG

__all__ = [
    # Errors
    "GaitError",
    "InvalidInput",
    "DimensionMismatch",
    "DataConsistencyError",
    "InsufficientStepsError",
    # Interval algebra
    "intervals",
    "rotating_diff",
    "interleave",
    "valid_runs",
    # Derivatives
    "central_diff",
    "central_diff_segments",
    "FORWARD_BACKWARD",
    # Reductions
    "interval_extrema",
    "avg_extrema",
    "mean_std_range",
    "demean",
    "detrend",
    "circ_mean",
    "circ_std",
    # Events
    "validate_events",
    "to_indices",
    "to_times",
    "begin_with_event",
    "find_floating_steps",
    "match_events",
    # Spatiotemporal metrics
    "stride_time",
    "step_time",
    "swing_stance",
    "swing",
    "stance",
    "swing_intervals",
    "stance_intervals",
    "single_support",
    "double_support",
    "gait_mode",
    "step_length",
    "step_width",
    # Time normalization
    "normalized_time",
    "time_normalize",
    "times_to_indices",
    "cycle_times_to_indices",
    "ensemble",
    "limit_cycle",
    # Analysis
    "analyze_events",
    "spatiotemporal_table",
    "analyze_steps",
    "cycle_ensembles",
    "analyze_trials",
    # Config
    "load_config",
    "save_config",
    "get_config",
    "DEFAULT_CONFIG",
    # Meta
    "__version__",
]
