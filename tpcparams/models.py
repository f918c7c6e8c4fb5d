# models.py
import numpy as np
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .utils import K_BOLTZMANN, KELVIN_OFFSET

# --- Library of rate equations (vectorised, temperatures in degrees C) ---

def gaussian_1987(temp, rmax, topt, a):
    """Gaussian model (Lynch & Gabriel 1987): rate = rmax * exp(-0.5 * (|temp - topt| / a)^2)"""
    return rmax * np.exp(-0.5 * (np.abs(temp - topt) / a) ** 2)

def quadratic_2008(temp, a, b, c):
    """Quadratic model (Montagnes et al. 2008): rate = a + b*temp + c*temp^2"""
    return a + b * temp + c * temp ** 2

def lactin2_1995(temp, a, b, tmax, delta_t):
    """Lactin2 model: rate = exp(a*temp) - exp(a*tmax - (tmax - temp)/delta_t) + b"""
    return np.exp(a * temp) - np.exp(a * tmax - (tmax - temp) / delta_t) + b

def delong_2017(temp, c, eb, ef, tm, ehc):
    """DeLong enzyme-assisted Arrhenius model. tm is the melting temperature in degrees C."""
    temp_k = temp + KELVIN_OFFSET
    tm_k = tm + KELVIN_OFFSET
    exponent = -(eb - (ef * (1 - temp_k / tm_k) + ehc * (temp_k - tm_k - temp_k * np.log(temp_k / tm_k)))) / (K_BOLTZMANN * temp_k)
    return c * np.exp(exponent)

def sharpeschoolhigh_1981(temp, r_tref, e, eh, th, tref):
    """Sharpe-Schoolfield model with high-temperature inactivation only."""
    temp_k = temp + KELVIN_OFFSET
    tref_k = tref + KELVIN_OFFSET
    boltzmann_term = r_tref * np.exp(e / K_BOLTZMANN * (1 / tref_k - 1 / temp_k))
    inactivation_term = 1 / (1 + np.exp(eh / K_BOLTZMANN * (1 / (th + KELVIN_OFFSET) - 1 / temp_k)))
    return boltzmann_term * inactivation_term

def pawar_2018(temp, r_tref, e, eh, topt, tref):
    """Modified Sharpe-Schoolfield model (Pawar et al. 2018) parameterised on topt."""
    temp_k = temp + KELVIN_OFFSET
    tref_k = tref + KELVIN_OFFSET
    boltzmann_term = r_tref * np.exp(e / K_BOLTZMANN * (1 / tref_k - 1 / temp_k))
    inactivation_term = 1 / (1 + e / (eh - e) * np.exp(eh / K_BOLTZMANN * (1 / (topt + KELVIN_OFFSET) - 1 / temp_k)))
    return boltzmann_term * inactivation_term


# --- Model families ---

class ModelFamily(ABC):
    """
    A rate equation family: evaluates rate over temperature and reports which
    derived parameters the equation already carries as fitted terms.

    Explicit accessors return None when the family has no such term.
    """
    name: str = 'generic'
    param_names: Tuple[str, ...] = ()

    @abstractmethod
    def evaluate(self, temp: np.ndarray, params: Mapping[str, float]) -> np.ndarray:
        """Rate at each temperature in `temp` (degrees C)."""

    def check_parameters(self, params: Mapping[str, float]) -> None:
        missing = [p for p in self.param_names if p not in params]
        if missing:
            raise ValueError(f"Model family '{self.name}' is missing parameters: {missing}")

    def explicit_topt(self, params: Mapping[str, float]) -> Optional[float]:
        return None

    def explicit_rmax(self, params: Mapping[str, float]) -> Optional[float]:
        return None

    def explicit_parameters(self, params: Mapping[str, float]) -> Dict[str, float]:
        """Explicit bundle entries other than topt/rmax (e.g. 'e', 'eh', 'th')."""
        return {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class GenericFamily(ModelFamily):
    """Wraps an arbitrary vectorised callable func(temp, **params). Exposes nothing explicitly."""

    def __init__(self, func: Callable[..., np.ndarray], name: str = 'generic'):
        if not callable(func):
            raise ValueError("GenericFamily requires a callable rate function.")
        self.func = func
        self.name = name

    def evaluate(self, temp: np.ndarray, params: Mapping[str, float]) -> np.ndarray:
        return self.func(temp, **params)


class RateEquationFamily(ModelFamily):
    """
    A named closed-form rate equation.

    `explicit_terms` maps a bundle entry name to the fitted parameter that
    holds it exactly, e.g. {'topt': 'topt', 'rmax': 'rmax'}.
    """

    def __init__(self, name: str, func: Callable[..., np.ndarray], param_names: Iterable[str],
                 explicit_terms: Optional[Dict[str, str]] = None):
        self.name = name
        self.func = func
        self.param_names = tuple(param_names)
        self.explicit_terms = MappingProxyType(dict(explicit_terms or {}))
        unknown = [p for p in self.explicit_terms.values() if p not in self.param_names]
        if unknown:
            raise ValueError(f"Explicit terms {unknown} are not parameters of '{name}'.")

    def evaluate(self, temp: np.ndarray, params: Mapping[str, float]) -> np.ndarray:
        return self.func(temp, **{p: params[p] for p in self.param_names})

    def _explicit(self, key: str, params: Mapping[str, float]) -> Optional[float]:
        param_name = self.explicit_terms.get(key)
        if param_name is None:
            return None
        return float(params[param_name])

    def explicit_topt(self, params: Mapping[str, float]) -> Optional[float]:
        return self._explicit('topt', params)

    def explicit_rmax(self, params: Mapping[str, float]) -> Optional[float]:
        return self._explicit('rmax', params)

    def explicit_parameters(self, params: Mapping[str, float]) -> Dict[str, float]:
        return {key: float(params[p]) for key, p in self.explicit_terms.items() if key not in ('topt', 'rmax')}


# --- Registry of model families ---

class ModelRegistry:
    """Read-only name -> ModelFamily lookup, populated once at construction."""

    def __init__(self, families: Iterable[ModelFamily]):
        table: Dict[str, ModelFamily] = {}
        for family in families:
            if family.name in table:
                raise ValueError(f"Duplicate model family name: {family.name}")
            table[family.name] = family
        self._families = MappingProxyType(table)

    def get(self, name: str) -> ModelFamily:
        try:
            return self._families[name]
        except KeyError:
            raise ValueError(f"Unknown model family: {name}. Available: {self.names()}") from None

    def names(self) -> List[str]:
        return sorted(self._families)

    def __contains__(self, name: object) -> bool:
        return name in self._families

    def __iter__(self):
        return iter(self._families.values())

    def __len__(self) -> int:
        return len(self._families)


MODEL_REGISTRY = ModelRegistry([
    RateEquationFamily('gaussian_1987', gaussian_1987, ['rmax', 'topt', 'a'],
                       explicit_terms={'rmax': 'rmax', 'topt': 'topt'}),
    RateEquationFamily('quadratic_2008', quadratic_2008, ['a', 'b', 'c']),
    RateEquationFamily('lactin2_1995', lactin2_1995, ['a', 'b', 'tmax', 'delta_t']),
    RateEquationFamily('delong_2017', delong_2017, ['c', 'eb', 'ef', 'tm', 'ehc']),
    RateEquationFamily('sharpeschoolhigh_1981', sharpeschoolhigh_1981, ['r_tref', 'e', 'eh', 'th', 'tref'],
                       explicit_terms={'e': 'e', 'eh': 'eh', 'th': 'th'}),
    RateEquationFamily('pawar_2018', pawar_2018, ['r_tref', 'e', 'eh', 'topt', 'tref'],
                       explicit_terms={'topt': 'topt', 'e': 'e', 'eh': 'eh'}),
])


def get_model_family(model_name: str, registry: ModelRegistry = MODEL_REGISTRY) -> ModelFamily:
    """Looks up a model family by name. Raises ValueError for unknown names."""
    return registry.get(model_name)
