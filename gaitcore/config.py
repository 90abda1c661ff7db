"""Analysis configuration management.

Supports JSON and YAML config files for reproducible analyses.
Configuration is merged against ``DEFAULT_CONFIG`` so partial
overrides work seamlessly.

Functions
---------
load_config
    Load analysis config from a JSON or YAML file.
save_config
    Save analysis config to a JSON or YAML file.
get_config
    Merge an in-memory override dict against the defaults.

Attributes
----------
DEFAULT_CONFIG : dict
    Default configuration values for all computation stages.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


DEFAULT_CONFIG = {
    "events": {
        # Sampling frequency (Hz) used to convert between times and indices
        "fs": 100.0,
    },
    "spatiotemporal": {
        "normalize": True,
        # Fraction (float) or count (int) of non-floating steps per side
        "required_steps": 0.9,
        # Columns of the foot position arrays
        "ap_axis": 0,
        "ml_axis": 1,
        "vt_axis": 2,
    },
    "timenormalize": {
        "length": 100,
        "bc_type": "natural",
    },
    "ensemble": {
        "ddof": 1,
        "circular": False,
    },
}


def load_config(path: Union[str, Path]) -> dict:
    """Load analysis config from a JSON or YAML file.

    The loaded configuration is merged against ``DEFAULT_CONFIG``
    so partial overrides work correctly.

    Parameters
    ----------
    path : str or Path
        Path to config file (``.json`` or ``.yaml``/``.yml``).

    Returns
    -------
    dict
        Merged configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If the config file does not exist.
    ImportError
        If YAML is requested but ``pyyaml`` is not installed.
    ValueError
        If the file content is not a dict.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        try:
            import yaml
        except ImportError:
            raise ImportError("PyYAML required for YAML configs: pip install pyyaml")
        with open(path) as f:
            cfg = yaml.safe_load(f)
    else:
        with open(path) as f:
            cfg = json.load(f)

    if not isinstance(cfg, dict):
        raise ValueError("Config must be a dict")

    merged = _deep_merge(DEFAULT_CONFIG, cfg)
    logger.info(f"Loaded config from {path}")
    return merged


def save_config(config: dict, path: Union[str, Path]) -> str:
    """Save analysis config to a JSON or YAML file.

    Parameters
    ----------
    config : dict
        Configuration dictionary.
    path : str or Path
        Output file path (``.json`` or ``.yaml``/``.yml``).

    Returns
    -------
    str
        Path to the saved file.

    Raises
    ------
    ImportError
        If YAML is requested but ``pyyaml`` is not installed.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        try:
            import yaml
        except ImportError:
            raise ImportError("PyYAML required for YAML configs: pip install pyyaml")
        with open(path, "w") as f:
            yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
    else:
        with open(path, "w") as f:
            json.dump(config, f, indent=2, ensure_ascii=False)

    logger.info(f"Saved config to {path}")
    return str(path)


def get_config(overrides: Optional[dict] = None) -> dict:
    """Return a fresh copy of ``DEFAULT_CONFIG`` merged with *overrides*."""
    if overrides is None:
        return copy.deepcopy(DEFAULT_CONFIG)
    if not isinstance(overrides, dict):
        raise TypeError("config must be a dict")
    return _deep_merge(DEFAULT_CONFIG, overrides)


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into a deep copy of base."""
    result = copy.deepcopy(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result
