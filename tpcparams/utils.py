# utils.py
import numpy as np
from typing import Dict, Optional, Any

# Boltzmann constant (eV/K)
K_BOLTZMANN = 8.62e-05
KELVIN_OFFSET = 273.15

# Default extraction settings; override any subset via the `options` argument
DEFAULT_EXTRACTION_OPTIONS: Dict[str, Any] = {
    'coarse_step': 1.0,           # grid step for locating topt/rmax and for regressions
    'fine_step': 0.001,           # grid step for boundary and breadth searches
    'extrapolation_range': 50.0,  # distance beyond the observed edge searched for ctmin/ctmax
    'threshold_fraction': 0.05,   # fallback boundary criterion, as a fraction of rmax
    'breadth_level': 0.8,         # fraction of rmax defining thermal performance breadth
    'min_regression_points': 3,
}


def resolve_options(options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Merges user options over the defaults and validates them."""
    resolved = dict(DEFAULT_EXTRACTION_OPTIONS)
    if not options:
        return resolved

    unknown_keys = set(options) - set(DEFAULT_EXTRACTION_OPTIONS)
    if unknown_keys:
        raise ValueError(f"Unknown extraction options: {sorted(unknown_keys)}")
    resolved.update(options)

    for key in ('coarse_step', 'fine_step'):
        if not np.isfinite(resolved[key]) or resolved[key] <= 0:
            raise ValueError(f"Option '{key}' must be a positive finite number, got {resolved[key]}.")
    if not np.isfinite(resolved['extrapolation_range']) or resolved['extrapolation_range'] < 0:
        raise ValueError(f"Option 'extrapolation_range' must be non-negative, got {resolved['extrapolation_range']}.")
    for key in ('threshold_fraction', 'breadth_level'):
        if not 0.0 < resolved[key] < 1.0:
            raise ValueError(f"Option '{key}' must lie in (0, 1), got {resolved[key]}.")
    if int(resolved['min_regression_points']) < 2:
        raise ValueError("Option 'min_regression_points' must be at least 2 for a linear regression.")
    resolved['min_regression_points'] = int(resolved['min_regression_points'])
    return resolved


def make_temperature_grid(start: float, end: float, step: float) -> np.ndarray:
    """
    Evenly spaced temperatures from `start` up to and including `end` (when it
    falls on the grid).

    Each point is computed as start + i * step from its integer index, so the
    axis does not drift even for tens of thousands of points.
    """
    if not (np.isfinite(start) and np.isfinite(end)):
        raise ValueError(f"Grid limits must be finite, got ({start}, {end}).")
    if not np.isfinite(step) or step <= 0:
        raise ValueError(f"Grid step must be positive, got {step}.")
    if end < start:
        raise ValueError(f"Grid end ({end}) is below grid start ({start}).")

    # Small tolerance so an end point that is an exact multiple of step survives rounding
    n_points = int(np.floor((end - start) / step + 1e-9)) + 1
    return start + np.arange(n_points, dtype=float) * step


def to_inverse_kt(temp_c: np.ndarray) -> np.ndarray:
    """Arrhenius axis: 1 / (k * T) with T in Kelvin. Input in degrees Celsius."""
    return 1.0 / (K_BOLTZMANN * (np.asarray(temp_c, dtype=float) + KELVIN_OFFSET))
