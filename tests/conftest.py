"""Shared test fixtures for the gaitcore test suite.

Provides synthetic walking and running event trains with known step,
swing, stance and support durations.
"""

import numpy as np
import pytest

from gaitcore.intervals import interleave

STRIDE = 1.3
LSTEP = 0.6 * STRIDE
RSTEP = STRIDE - LSTEP


def _noise(n, seed=0xBEEF):
    rng = np.random.RandomState(seed)
    return {
        "rswing": rng.randn(n) * 0.001,
        "lswing": rng.randn(n) * 0.001,
        "rds": rng.randn(n) * 0.001,
        "lds": rng.randn(n) * 0.001,
    }


def make_walking_events(n_strides=100, seed=0xBEEF):
    """Walking: RFS, LFO, LFS, RFO repeated, with double-support phases.

    Returns a dict with event streams (seconds) and the per-stride
    durations used to build them.
    """
    sigma = _noise(n_strides, seed)
    lstance = 0.70 * STRIDE
    rstance = 0.75 * STRIDE
    lswings = (STRIDE - lstance) + sigma["lswing"]
    rswings = (STRIDE - rstance) + sigma["rswing"]
    ldss = LSTEP - lswings + sigma["lds"]
    rdss = RSTEP - rswings + sigma["rds"]

    lsteps = lswings + ldss
    rsteps = rswings + rdss
    strides = lsteps + rsteps

    ge = np.cumsum(np.concatenate([[0.0], interleave(ldss, lswings, rdss, rswings)]))
    return {
        "rfs": ge[0::4],
        "lfo": ge[1::4],
        "lfs": ge[2::4],
        "rfo": ge[3::4],
        "lswings": lswings,
        "rswings": rswings,
        "ldss": ldss,
        "rdss": rdss,
        "lsteps": lsteps,
        "rsteps": rsteps,
        "strides": strides,
    }


def make_running_events(n_strides=100, seed=0xBEEF):
    """Running: RFS, RFO, LFS, LFO repeated, with float phases."""
    sigma = _noise(n_strides, seed)
    lstances = 0.30 * STRIDE + sigma["lswing"]
    rstances = 0.35 * STRIDE + sigma["rswing"]
    lfloats = LSTEP - lstances + sigma["lds"]
    rfloats = RSTEP - rstances + sigma["rds"]

    lsteps = rstances + lfloats
    rsteps = lstances + rfloats
    strides = lsteps + rsteps

    ge = np.cumsum(np.concatenate([[0.0], interleave(rstances, lfloats, lstances, rfloats)]))
    return {
        "rfs": ge[0::4],
        "rfo": ge[1::4],
        "lfs": ge[2::4],
        "lfo": ge[3::4],
        "lstances": lstances,
        "rstances": rstances,
        "lsteps": lsteps,
        "rsteps": rsteps,
        "strides": strides,
    }


def event_streams(fixture):
    """Only the four event streams of a fixture dict."""
    return {k: fixture[k] for k in ("lfs", "lfo", "rfs", "rfo")}


@pytest.fixture
def walking():
    return make_walking_events()


@pytest.fixture
def running():
    return make_running_events()
