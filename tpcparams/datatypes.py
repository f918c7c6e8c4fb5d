# datatypes.py
import numpy as np
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Tuple

from .models import ModelFamily, GenericFamily, get_model_family

# --- Core Data Structures ---

@dataclass(frozen=True, eq=False)
class CurveModel:
    """
    A fitted thermal performance curve. Immutable once built.

    `temperatures` are the independent-variable values used for the fit and
    define the observed domain.
    """
    family: ModelFamily
    parameters: Mapping[str, float]
    temperatures: np.ndarray

    def __post_init__(self):
        params = MappingProxyType({str(k): float(v) for k, v in dict(self.parameters).items()})
        temps = np.array(self.temperatures, dtype=float).ravel()
        temps.setflags(write=False)
        if not np.any(np.isfinite(temps)):
            raise ValueError("CurveModel requires at least one finite temperature value.")
        self.family.check_parameters(params)
        object.__setattr__(self, 'parameters', params)
        object.__setattr__(self, 'temperatures', temps)

    @classmethod
    def from_callable(cls, func: 'RateCallable', parameters: Mapping[str, float],
                      temperatures, name: str = 'generic') -> 'CurveModel':
        """Wraps a vectorised func(temp, **parameters) fitted by an external routine."""
        return cls(GenericFamily(func, name=name), parameters, temperatures)

    @classmethod
    def from_family(cls, model_name: str, parameters: Mapping[str, float], temperatures) -> 'CurveModel':
        """Builds a model for one of the registered rate equation families."""
        return cls(get_model_family(model_name), parameters, temperatures)

    @property
    def model_name(self) -> str:
        return self.family.name

    @property
    def observed_domain(self) -> Tuple[float, float]:
        finite_temps = self.temperatures[np.isfinite(self.temperatures)]
        return float(np.min(finite_temps)), float(np.max(finite_temps))

    def evaluate(self, temp) -> np.ndarray:
        """Rate at `temp`. Non-finite results are returned as-is, never raised."""
        temp_arr = np.asarray(temp, dtype=float)
        with np.errstate(all='ignore'):
            rate = np.asarray(self.family.evaluate(temp_arr, self.parameters), dtype=float)
        if rate.shape != temp_arr.shape:
            rate = np.broadcast_to(rate, temp_arr.shape).copy()
        return rate


@dataclass(frozen=True, eq=False)
class SampleGrid:
    """
    Ordered (temp, rate) pairs at a fixed step.

    `valid` tags each point; a point whose rate is NaN or infinite is never
    valid. Downstream code works on `finite()` grids only.
    """
    temp: np.ndarray
    rate: np.ndarray
    valid: Optional[np.ndarray] = None

    def __post_init__(self):
        temp = np.asarray(self.temp, dtype=float)
        rate = np.asarray(self.rate, dtype=float)
        if temp.ndim != 1 or temp.shape != rate.shape:
            raise ValueError(f"Grid temp/rate must be 1-D and equal length (got {temp.shape} and {rate.shape}).")
        if temp.size > 1 and np.any(np.diff(temp) <= 0):
            raise ValueError("Grid temperatures must be strictly increasing.")
        valid = np.isfinite(rate)
        if self.valid is not None:
            valid = valid & np.asarray(self.valid, dtype=bool)
        object.__setattr__(self, 'temp', temp)
        object.__setattr__(self, 'rate', rate)
        object.__setattr__(self, 'valid', valid)

    def __len__(self) -> int:
        return int(self.temp.size)

    @property
    def n_valid(self) -> int:
        return int(np.count_nonzero(self.valid))

    def finite(self) -> 'SampleGrid':
        """New grid holding only the valid points."""
        return SampleGrid(self.temp[self.valid], self.rate[self.valid])

    def select(self, mask: np.ndarray) -> 'SampleGrid':
        """New grid restricted to `mask`, keeping the validity tags."""
        mask = np.asarray(mask, dtype=bool)
        return SampleGrid(self.temp[mask], self.rate[mask], self.valid[mask])


# --- Extraction Results ---

@dataclass(frozen=True)
class ParameterBundle:
    """
    Derived parameters of one fitted curve. A value of None means the
    parameter is not estimable for this model/data combination; the reason is
    kept in `failures`.
    """
    model_name: str
    values: Mapping[str, Optional[float]]
    failures: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'values', MappingProxyType(dict(self.values)))
        object.__setattr__(self, 'failures', MappingProxyType(dict(self.failures)))

    def __getitem__(self, name: str) -> Optional[float]:
        return self.values[name]

    def __contains__(self, name: object) -> bool:
        return name in self.values

    def __iter__(self):
        return iter(self.values)

    def get(self, name: str, default: Optional[float] = None) -> Optional[float]:
        return self.values.get(name, default)

    def is_defined(self, name: str) -> bool:
        return self.values.get(name) is not None

    def to_dict(self) -> Dict[str, Optional[float]]:
        return dict(self.values)


# --- Type Hints ---

# Vectorised rate function: takes a temperature array plus fitted parameters as keywords
RateCallable = Callable[..., np.ndarray]
