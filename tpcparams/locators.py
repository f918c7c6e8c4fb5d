# locators.py
import numpy as np
from typing import Any, Dict, Optional, Tuple

from .datatypes import CurveModel, SampleGrid
from .exceptions import BoundaryNotFoundError, EmptyGridError
from .sampling import extrapolation_grid, sample_grid
from .utils import resolve_options


def locate_max(grid: SampleGrid) -> Tuple[float, float]:
    """
    Returns (topt, rmax) of a sampled curve.

    When several points share the exact maximum rate, topt is the mean of
    their temperatures.
    """
    grid = grid.finite()
    if len(grid) == 0:
        raise EmptyGridError("Cannot locate a maximum on a grid with no finite points.")
    rmax = np.max(grid.rate)
    topt = np.mean(grid.temp[grid.rate == rmax])
    return float(topt), float(rmax)


def _closest_crossing(side: SampleGrid, threshold: float, direction: str) -> float:
    """Temperature nearest topt (first point of `side` in the search direction) with rate <= threshold."""
    crossed = side.temp[side.rate <= threshold]
    if crossed.size == 0:
        raise BoundaryNotFoundError(f"No rate <= {threshold:.6g} on the {direction} side.")
    return float(np.min(crossed)) if direction == 'high' else float(np.max(crossed))


def locate_boundary(model: CurveModel, topt: float, rmax: float, direction: str,
                    options: Optional[Dict[str, Any]] = None) -> Optional[float]:
    """
    Critical thermal limit on one side of topt ('high' -> ctmax, 'low' -> ctmin).

    The curve is predicted every `fine_step` degrees up to `extrapolation_range`
    degrees beyond the observed data. The limit is the point nearest topt where
    the rate reaches 0; when the curve never reaches 0 there (asymptotic
    families such as Sharpe-Schoolfield), it is the point nearest topt where the
    rate drops to `threshold_fraction` * rmax. Returns None if neither exists.

    Only temperatures strictly above (or below) topt are searched; topt itself
    is never returned, even when the rate there is already <= 0.
    """
    opts = resolve_options(options)
    grid = extrapolation_grid(model, direction, opts['extrapolation_range'], opts['fine_step'])

    # Only points strictly beyond topt, so ctmin < topt < ctmax always holds
    if direction == 'high':
        side = grid.select(grid.temp > topt)
    else:
        side = grid.select(grid.temp < topt)

    try:
        return _closest_crossing(side, 0.0, direction)
    except BoundaryNotFoundError:
        pass
    try:
        return _closest_crossing(side, opts['threshold_fraction'] * rmax, direction)
    except BoundaryNotFoundError:
        return None


def locate_breadth(model: CurveModel, topt: float, rmax: float,
                   options: Optional[Dict[str, Any]] = None) -> Optional[float]:
    """
    Thermal performance breadth: width of the temperature range around topt,
    within the observed domain, over which rate stays >= breadth_level * rmax.
    """
    opts = resolve_options(options)
    t_min, t_max = model.observed_domain
    grid = sample_grid(model, t_min, t_max, opts['fine_step'])
    if grid.n_valid == 0:
        raise EmptyGridError(f"Model produced no finite rate over the observed domain [{t_min}, {t_max}].")

    # Invalid points count as falling below the level
    above = grid.valid & (np.where(grid.valid, grid.rate, -np.inf) >= opts['breadth_level'] * rmax)
    i_opt = int(np.argmin(np.abs(grid.temp - topt)))
    if not above[i_opt]:
        return None

    below_left = np.nonzero(~above[:i_opt])[0]
    below_right = np.nonzero(~above[i_opt:])[0]
    i_left = below_left[-1] + 1 if below_left.size else 0
    i_right = i_opt + below_right[0] - 1 if below_right.size else len(grid) - 1
    return float(grid.temp[i_right] - grid.temp[i_left])
