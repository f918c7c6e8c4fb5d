# example.py
import numpy as np
from scipy.optimize import curve_fit

from tpcparams import CurveModel, calc_params, calc_params_batch
from tpcparams.models import sharpeschoolhigh_1981, quadratic_2008

# --- Define Constants ---
TREF = 20.0

# --- 1. Generate Synthetic Data ---
true_params = {'r_tref': 1.2, 'e': 0.65, 'eh': 3.2, 'th': 33.0, 'tref': TREF}

def generate_data(n_points=12, noise_level=0.05, seed=None):
    """Generates one noisy thermal performance curve from the Sharpe-Schoolfield model."""
    rng = np.random.default_rng(seed)
    temp = np.linspace(8.0, 44.0, n_points)
    rate = sharpeschoolhigh_1981(temp, **true_params)
    return temp, np.clip(rate + rng.normal(0, noise_level, size=temp.shape), 0.0, None)

# --- 2. Fit models with an external least-squares routine ---
def fit_sharpe(temp, rate):
    """tref is fixed, so it is closed over rather than fitted."""
    func = lambda t, r_tref, e, eh, th: sharpeschoolhigh_1981(t, r_tref, e, eh, th, TREF)
    popt, _ = curve_fit(func, temp, rate, p0=[1.0, 0.6, 3.0, 30.0],
                        bounds=([0.0, 0.0, 0.0, 0.0], [10.0, 2.0, 10.0, 60.0]), maxfev=20000)
    params = dict(zip(['r_tref', 'e', 'eh', 'th'], popt))
    params['tref'] = TREF
    return CurveModel.from_family('sharpeschoolhigh_1981', params, temp)

def fit_quadratic(temp, rate):
    popt, _ = curve_fit(quadratic_2008, temp, rate, p0=[-1.0, 0.2, -0.005])
    return CurveModel.from_family('quadratic_2008', dict(zip(['a', 'b', 'c'], popt)), temp)

def print_bundle(bundle):
    print(f"--- {bundle.model_name} ---")
    for name, value in bundle.values.items():
        text = f"{value:.3f}" if value is not None else f"undefined ({bundle.failures[name]})"
        print(f"  {name:>22}: {text}")

if __name__ == '__main__':
    print("Generating synthetic data...")
    temp, rate = generate_data(seed=42)

    print("\nFitting models and extracting derived parameters...")
    for fit_func in (fit_sharpe, fit_quadratic):
        try:
            model = fit_func(temp, rate)
        except RuntimeError as e:
            print(f"Fit failed: {e}")
            continue
        print_bundle(calc_params(model))

    # --- 3. Many curves at once ---
    print("\nExtracting parameters for 200 replicate curves...")
    replicate_models = [fit_sharpe(*generate_data(seed=i)) for i in range(200)]
    bundles = calc_params_batch(replicate_models)
    ctmax_values = np.array([b['ctmax'] for b in bundles if b is not None and b.is_defined('ctmax')])
    print(f"ctmax across replicates: median {np.median(ctmax_values):.2f}, "
          f"2.5-97.5% range {np.percentile(ctmax_values, 2.5):.2f}-{np.percentile(ctmax_values, 97.5):.2f}")
