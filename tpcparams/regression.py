# regression.py
import numpy as np
from scipy.stats import linregress
from typing import Any, Dict, Optional, Tuple

from .datatypes import SampleGrid
from .exceptions import InsufficientDataError
from .utils import K_BOLTZMANN, KELVIN_OFFSET, resolve_options, to_inverse_kt


def _restrict_to_side(grid: SampleGrid, topt: float, side: str, anchor: Optional[float] = None) -> SampleGrid:
    """Points at/below topt ('low', rising limb) or at/above topt or `anchor` ('high', deactivation tail)."""
    if side == 'low':
        return grid.select(grid.temp <= topt)
    if side == 'high':
        cut = topt if anchor is None else anchor
        return grid.select(grid.temp >= cut)
    raise ValueError(f"Unknown side: {side!r} (expected 'low' or 'high').")


def _fit_arrhenius(grid: SampleGrid, topt: float, side: str, opts: Dict[str, Any],
                   anchor: Optional[float] = None) -> Optional[Tuple[float, SampleGrid]]:
    """
    OLS fit of log(rate) against 1/kT on one side of topt.

    Returns (slope, points used), or None when no rate on that side is
    positive. Raises InsufficientDataError with fewer than
    `min_regression_points` usable points.
    """
    min_points = opts['min_regression_points']
    subset = _restrict_to_side(grid.finite(), topt, side, anchor)
    if len(subset) < min_points:
        raise InsufficientDataError(f"Only {len(subset)} points on the {side} side of {topt:.3f} (need {min_points}).")

    if not np.any(subset.rate > 0):
        return None
    # log(rate) and 1/kT need positive rate and positive absolute temperature
    usable = (subset.rate > 0) & (subset.temp + KELVIN_OFFSET > 0)
    subset = subset.select(usable)
    if len(subset) < min_points:
        raise InsufficientDataError(f"Only {len(subset)} positive rates on the {side} side of {topt:.3f} (need {min_points}).")

    res = linregress(to_inverse_kt(subset.temp), np.log(subset.rate))
    if not np.isfinite(res.slope):
        return None
    return float(res.slope), subset


def estimate_slope_parameter(grid: SampleGrid, topt: float, side: str,
                             options: Optional[Dict[str, Any]] = None,
                             anchor: Optional[float] = None) -> Optional[float]:
    """
    Arrhenius-style energy (eV) from one limb of the curve.

    side='low' gives the activation energy e (rate rises with temperature, so
    e = -slope). side='high' gives the deactivation energy eh = slope from the
    tail at/above topt, or at/above `anchor` when the deactivation onset (th)
    is known. Returns None when log(rate) is undefined on every point.
    """
    fit = _fit_arrhenius(grid, topt, side, resolve_options(options), anchor)
    if fit is None:
        return None
    slope, _ = fit
    return -slope if side == 'low' else slope


def estimate_q10(grid: SampleGrid, topt: float, options: Optional[Dict[str, Any]] = None) -> Optional[float]:
    """
    Q10 of the rising limb, converted from its activation energy at the mean
    absolute temperature of the fitted points: q10 = exp(10 * e / (k * T^2)).
    """
    fit = _fit_arrhenius(grid, topt, 'low', resolve_options(options))
    if fit is None:
        return None
    slope, subset = fit
    e = -slope
    t_ref = np.mean(subset.temp + KELVIN_OFFSET)
    with np.errstate(over='ignore'):
        q10 = np.exp(10.0 * e / (K_BOLTZMANN * t_ref ** 2))
    if not np.isfinite(q10):
        return None
    return float(q10)
