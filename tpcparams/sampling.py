# sampling.py
import numpy as np

from .datatypes import CurveModel, SampleGrid
from .exceptions import EmptyGridError
from .utils import make_temperature_grid


def sample_grid(model: CurveModel, start: float, end: float, step: float) -> SampleGrid:
    """Evaluates `model` on an evenly spaced grid, keeping every point with its validity tag."""
    temps = make_temperature_grid(start, end, step)
    return SampleGrid(temps, model.evaluate(temps))


def sample_model(model: CurveModel, start: float, end: float, step: float) -> SampleGrid:
    """
    Dense re-sampling of a fitted curve.

    Returns only the finite points of the grid; NaN and infinite rates are
    dropped, not replaced. The returned grid may be empty.
    """
    return sample_grid(model, start, end, step).finite()


def require_points(grid: SampleGrid, description: str) -> SampleGrid:
    """Raises EmptyGridError if `grid` has no valid point."""
    if grid.n_valid == 0:
        raise EmptyGridError(f"Model produced no finite rate over the {description}.")
    return grid


def coarse_grid(model: CurveModel, step: float = 1.0) -> SampleGrid:
    """Finite grid spanning exactly the observed domain; used to locate topt and rmax."""
    t_min, t_max = model.observed_domain
    return require_points(sample_model(model, t_min, t_max, step), f"observed domain [{t_min}, {t_max}]")


def observed_grid(model: CurveModel) -> SampleGrid:
    """
    The model evaluated at its observed temperatures (finite, de-duplicated,
    ascending). Used for the limb regressions, so the point count on each
    side of topt is the number of observations there.
    """
    temps = np.unique(model.temperatures[np.isfinite(model.temperatures)])
    return SampleGrid(temps, model.evaluate(temps))


def extrapolation_grid(model: CurveModel, direction: str, extrapolation_range: float = 50.0,
                       step: float = 0.001) -> SampleGrid:
    """
    Fine finite grid extended `extrapolation_range` beyond the observed edge
    in the search direction ('high' extends the maximum, 'low' the minimum).
    """
    t_min, t_max = model.observed_domain
    if direction == 'high':
        start, end = t_min, t_max + extrapolation_range
    elif direction == 'low':
        start, end = t_min - extrapolation_range, t_max
    else:
        raise ValueError(f"Unknown search direction: {direction!r} (expected 'high' or 'low').")
    return require_points(sample_model(model, start, end, step), f"extrapolation range [{start}, {end}]")
