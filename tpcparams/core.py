# core.py
import numpy as np
import warnings
from tqdm import tqdm
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .datatypes import CurveModel, ParameterBundle
from .exceptions import EmptyGridError
from .locators import locate_boundary, locate_breadth, locate_max
from .regression import estimate_q10, estimate_slope_parameter
from .sampling import coarse_grid, observed_grid
from .utils import resolve_options

# Order of entries in a ParameterBundle ('th' is appended when the family exposes it)
BUNDLE_KEYS = (
    'rmax', 'topt', 'ctmin', 'ctmax', 'e', 'eh', 'q10',
    'thermal_safety_margin', 'thermal_breadth', 'breadth', 'skewness',
)

# ==============================================================================
# <<< Anchors: topt and rmax >>>
# ==============================================================================

def _anchors(model: CurveModel, opts: Dict[str, Any]) -> Tuple[float, float]:
    """(topt, rmax): explicit fitted terms when the family has them, otherwise a coarse-grid search."""
    params = model.parameters
    topt = model.family.explicit_topt(params)
    rmax = model.family.explicit_rmax(params)

    t_min, t_max = model.observed_domain
    if topt is not None and not (np.isfinite(topt) and t_min <= topt <= t_max):
        warnings.warn(f"Fitted topt ({topt:.3f}) of '{model.model_name}' lies outside the observed "
                      f"temperatures [{t_min}, {t_max}]. Estimating topt and rmax numerically.")
        topt, rmax = None, None

    if topt is None:
        num_topt, num_rmax = locate_max(coarse_grid(model, opts['coarse_step']))
        return num_topt, (num_rmax if rmax is None else rmax)

    if rmax is None:
        rate_at_topt = float(model.evaluate(topt))
        if not np.isfinite(rate_at_topt):
            raise EmptyGridError(f"Model '{model.model_name}' is not finite at its fitted topt ({topt:.3f}).")
        rmax = rate_at_topt
    return float(topt), float(rmax)


# --- Per-parameter helpers (anchors already known) ---

def _activation_energy(model: CurveModel, opts: Dict[str, Any], topt: float) -> Optional[float]:
    explicit = model.family.explicit_parameters(model.parameters)
    if 'e' in explicit:
        return explicit['e']
    return estimate_slope_parameter(observed_grid(model), topt, 'low', opts)


def _deactivation_energy(model: CurveModel, opts: Dict[str, Any], topt: float) -> Optional[float]:
    explicit = model.family.explicit_parameters(model.parameters)
    if 'eh' in explicit:
        return explicit['eh']
    return estimate_slope_parameter(observed_grid(model), topt, 'high', opts,
                                    anchor=explicit.get('th'))


def _q10(model: CurveModel, opts: Dict[str, Any], topt: float) -> Optional[float]:
    return estimate_q10(observed_grid(model), topt, opts)


def _difference(a: Optional[float], b: Optional[float]) -> Optional[float]:
    if a is None or b is None:
        return None
    return float(a - b)


# ==============================================================================
# <<< Single-parameter entry points >>>
# ==============================================================================

def get_topt(model: CurveModel, options: Optional[Dict[str, Any]] = None) -> float:
    """Optimum temperature (degrees C)."""
    return _anchors(model, resolve_options(options))[0]


def get_rmax(model: CurveModel, options: Optional[Dict[str, Any]] = None) -> float:
    """Maximum rate, the rate at topt."""
    return _anchors(model, resolve_options(options))[1]


def get_ctmax(model: CurveModel, options: Optional[Dict[str, Any]] = None) -> Optional[float]:
    """
    Critical thermal maximum (degrees C).

    Predictions run every 0.001 degrees up to 50 degrees above the data, so the
    estimate is accurate to 0.001 degrees. Where the curve never reaches zero
    (e.g. Sharpe-Schoolfield), the temperature where rate falls to 5% of rmax
    is returned instead. None if neither criterion is met.
    """
    opts = resolve_options(options)
    topt, rmax = _anchors(model, opts)
    return locate_boundary(model, topt, rmax, 'high', opts)


def get_ctmin(model: CurveModel, options: Optional[Dict[str, Any]] = None) -> Optional[float]:
    """Critical thermal minimum (degrees C). Mirror image of get_ctmax below topt."""
    opts = resolve_options(options)
    topt, rmax = _anchors(model, opts)
    return locate_boundary(model, topt, rmax, 'low', opts)


def get_e(model: CurveModel, options: Optional[Dict[str, Any]] = None) -> Optional[float]:
    """Activation energy (eV) of the rising limb."""
    opts = resolve_options(options)
    return _activation_energy(model, opts, _anchors(model, opts)[0])


def get_eh(model: CurveModel, options: Optional[Dict[str, Any]] = None) -> Optional[float]:
    """Deactivation energy (eV) of the high-temperature tail."""
    opts = resolve_options(options)
    return _deactivation_energy(model, opts, _anchors(model, opts)[0])


def get_q10(model: CurveModel, options: Optional[Dict[str, Any]] = None) -> Optional[float]:
    """Q10 temperature coefficient of the rising limb."""
    opts = resolve_options(options)
    return _q10(model, opts, _anchors(model, opts)[0])


def get_thermal_safety_margin(model: CurveModel, options: Optional[Dict[str, Any]] = None) -> Optional[float]:
    """ctmax - topt."""
    opts = resolve_options(options)
    topt, rmax = _anchors(model, opts)
    return _difference(locate_boundary(model, topt, rmax, 'high', opts), topt)


def get_thermal_breadth(model: CurveModel, options: Optional[Dict[str, Any]] = None) -> Optional[float]:
    """ctmax - ctmin."""
    opts = resolve_options(options)
    topt, rmax = _anchors(model, opts)
    return _difference(locate_boundary(model, topt, rmax, 'high', opts),
                       locate_boundary(model, topt, rmax, 'low', opts))


def get_breadth(model: CurveModel, options: Optional[Dict[str, Any]] = None) -> Optional[float]:
    """Thermal performance breadth: range of temperatures where rate >= breadth_level * rmax."""
    opts = resolve_options(options)
    topt, rmax = _anchors(model, opts)
    return locate_breadth(model, topt, rmax, opts)


def get_skewness(model: CurveModel, options: Optional[Dict[str, Any]] = None) -> Optional[float]:
    """Skewness as activation energy minus deactivation energy (e - eh)."""
    opts = resolve_options(options)
    topt = _anchors(model, opts)[0]
    return _difference(_activation_energy(model, opts, topt), _deactivation_energy(model, opts, topt))


# ==============================================================================
# <<< Bundle assembly >>>
# ==============================================================================

def calc_params(model: CurveModel, options: Optional[Dict[str, Any]] = None) -> ParameterBundle:
    """
    Computes every derived parameter of a fitted curve.

    Failure to locate topt/rmax raises EmptyGridError. Any other parameter that
    cannot be estimated is returned as None, with the reason recorded in
    `bundle.failures`; the remaining parameters are still computed.
    """
    opts = resolve_options(options)
    topt, rmax = _anchors(model, opts)

    values: Dict[str, Optional[float]] = {'rmax': rmax, 'topt': topt}
    failures: Dict[str, str] = {}

    def attempt(name: str, compute: Callable[[], Optional[float]], none_reason: str) -> None:
        try:
            value = compute()
        except ValueError as exc:  # includes EmptyGridError and InsufficientDataError
            values[name] = None
            failures[name] = f"{type(exc).__name__}: {exc}"
            return
        values[name] = None if value is None else float(value)
        if value is None:
            failures[name] = none_reason

    attempt('ctmin', lambda: locate_boundary(model, topt, rmax, 'low', opts),
            "no rate <= 0 or <= threshold_fraction * rmax below topt")
    attempt('ctmax', lambda: locate_boundary(model, topt, rmax, 'high', opts),
            "no rate <= 0 or <= threshold_fraction * rmax above topt")
    attempt('e', lambda: _activation_energy(model, opts, topt), "no positive rate at or below topt")
    attempt('eh', lambda: _deactivation_energy(model, opts, topt), "no positive rate at or above topt")
    attempt('q10', lambda: _q10(model, opts, topt), "activation energy not estimable")

    values['thermal_safety_margin'] = _difference(values['ctmax'], topt)
    values['thermal_breadth'] = _difference(values['ctmax'], values['ctmin'])
    attempt('breadth', lambda: locate_breadth(model, topt, rmax, opts), "rate at topt below breadth_level * rmax")
    values['skewness'] = _difference(values['e'], values['eh'])

    for derived, sources in (('thermal_safety_margin', ('ctmax',)),
                             ('thermal_breadth', ('ctmax', 'ctmin')),
                             ('skewness', ('e', 'eh'))):
        if values[derived] is None:
            missing = [s for s in sources if values[s] is None]
            failures[derived] = f"depends on undefined {', '.join(missing)}"

    explicit = model.family.explicit_parameters(model.parameters)
    if 'th' in explicit:
        values['th'] = explicit['th']

    ordered = {key: values[key] for key in BUNDLE_KEYS}
    ordered.update({key: v for key, v in values.items() if key not in ordered})
    return ParameterBundle(model_name=model.model_name, values=ordered, failures=failures)


def calc_params_batch(models: Iterable[CurveModel], options: Optional[Dict[str, Any]] = None,
                      show_progress: bool = True) -> List[Optional[ParameterBundle]]:
    """
    Runs calc_params over many curves. A curve whose topt/rmax cannot be
    located yields None (with a warning) instead of stopping the batch.
    """
    opts = resolve_options(options)
    bundles: List[Optional[ParameterBundle]] = []
    for i, model in enumerate(tqdm(models, desc="Extracting TPC parameters", disable=not show_progress)):
        try:
            bundles.append(calc_params(model, opts))
        except EmptyGridError as e:
            warnings.warn(f"Curve {i} ('{model.model_name}'): {e}. Skipping.")
            bundles.append(None)
    return bundles
