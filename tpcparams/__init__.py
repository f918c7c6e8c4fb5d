# tpcparams/__init__.py

# Import key classes and functions to expose them at the top level

# --- Import Datatypes ---
from .datatypes import (
    CurveModel,
    SampleGrid,
    ParameterBundle,
)

# --- Import Exceptions ---
from .exceptions import (
    TPCParamsError,
    EmptyGridError,
    InsufficientDataError,
)

# --- Import Core Functions ---
from .core import (
    calc_params,
    calc_params_batch,
    get_topt,
    get_rmax,
    get_ctmax,
    get_ctmin,
    get_e,
    get_eh,
    get_q10,
    get_thermal_safety_margin,
    get_thermal_breadth,
    get_breadth,
    get_skewness,
)

# --- Import Engine Components ---
from .sampling import sample_model
from .locators import locate_max, locate_boundary
from .regression import estimate_slope_parameter, estimate_q10

# --- Import Models & Utils ---
from .models import MODEL_REGISTRY, ModelFamily, get_model_family
from . import models
from . import utils


__all__ = [
    # Datatypes
    'CurveModel',
    'SampleGrid',
    'ParameterBundle',

    # Exceptions
    'TPCParamsError',
    'EmptyGridError',
    'InsufficientDataError',

    # Core functions
    'calc_params',
    'calc_params_batch',
    'get_topt',
    'get_rmax',
    'get_ctmax',
    'get_ctmin',
    'get_e',
    'get_eh',
    'get_q10',
    'get_thermal_safety_margin',
    'get_thermal_breadth',
    'get_breadth',
    'get_skewness',

    # Engine components
    'sample_model',
    'locate_max',
    'locate_boundary',
    'estimate_slope_parameter',
    'estimate_q10',

    # Models
    'MODEL_REGISTRY',
    'ModelFamily',
    'get_model_family',
    'models',
    'utils',
]

__version__ = "0.1.0"
