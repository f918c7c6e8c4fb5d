"""Tests for model families, the registry and CurveModel."""

import numpy as np
import pytest

from tpcparams import MODEL_REGISTRY, CurveModel, get_model_family
from tpcparams.models import (
    GenericFamily,
    ModelFamily,
    ModelRegistry,
    RateEquationFamily,
    gaussian_1987,
    sharpeschoolhigh_1981,
)


class TestRegistry:
    """Tests for the read-only model registry."""

    def test_known_families(self):
        assert MODEL_REGISTRY.names() == [
            'delong_2017', 'gaussian_1987', 'lactin2_1995', 'pawar_2018',
            'quadratic_2008', 'sharpeschoolhigh_1981',
        ]
        assert 'gaussian_1987' in MODEL_REGISTRY
        assert len(MODEL_REGISTRY) == 6

    def test_unknown_family(self):
        with pytest.raises(ValueError, match="Unknown model family"):
            get_model_family('not_a_model')

    def test_registry_cannot_be_mutated(self):
        with pytest.raises(TypeError):
            MODEL_REGISTRY._families['extra'] = GenericFamily(lambda temp: temp)

    def test_duplicate_names_rejected(self):
        family = RateEquationFamily('gauss', gaussian_1987, ['rmax', 'topt', 'a'])
        with pytest.raises(ValueError):
            ModelRegistry([family, family])

    def test_explicit_term_must_be_a_parameter(self):
        with pytest.raises(ValueError):
            RateEquationFamily('gauss', gaussian_1987, ['rmax', 'topt', 'a'], explicit_terms={'th': 'th'})

    def test_family_without_evaluate_cannot_be_built(self):
        class Unfinished(ModelFamily):
            name = 'unfinished'

        with pytest.raises(TypeError):
            ModelFamily()
        with pytest.raises(TypeError):
            Unfinished()


class TestExplicitTerms:
    """Families report the derived parameters they carry as fitted terms."""

    def test_generic_family_exposes_nothing(self):
        family = GenericFamily(lambda temp: temp)
        assert family.explicit_topt({}) is None
        assert family.explicit_rmax({}) is None
        assert family.explicit_parameters({}) == {}

    def test_gaussian_exposes_topt_and_rmax(self):
        family = get_model_family('gaussian_1987')
        params = {'rmax': 2.0, 'topt': 25.0, 'a': 5.0}
        assert family.explicit_topt(params) == 25.0
        assert family.explicit_rmax(params) == 2.0
        assert family.explicit_parameters(params) == {}

    def test_sharpe_schoolfield_exposes_energies_and_th(self):
        family = get_model_family('sharpeschoolhigh_1981')
        params = {'r_tref': 1.0, 'e': 0.6, 'eh': 3.0, 'th': 30.0, 'tref': 20.0}
        assert family.explicit_topt(params) is None
        assert family.explicit_parameters(params) == {'e': 0.6, 'eh': 3.0, 'th': 30.0}

    def test_quadratic_exposes_nothing(self):
        family = get_model_family('quadratic_2008')
        assert family.explicit_parameters({'a': 1.0, 'b': 1.0, 'c': -1.0}) == {}


class TestRateEquations:
    """Spot checks of the bundled rate equations."""

    def test_gaussian_peak(self):
        assert gaussian_1987(np.array([25.0]), 2.0, 25.0, 5.0)[0] == pytest.approx(2.0)

    def test_sharpe_schoolfield_at_reference_temperature(self):
        # Far below th the inactivation term is ~1, so rate ~ r_tref at tref
        rate = sharpeschoolhigh_1981(np.array([20.0]), 1.0, 0.6, 3.0, 40.0, 20.0)[0]
        assert rate == pytest.approx(1.0, rel=1e-3)

    def test_pawar_peaks_at_topt(self, pawar_model):
        temps = np.linspace(20.0, 36.0, 16001)
        rates = pawar_model.evaluate(temps)
        assert temps[np.argmax(rates)] == pytest.approx(28.0, abs=2e-3)

    def test_delong_is_finite_over_biological_range(self):
        model = CurveModel.from_family('delong_2017', {'c': 14.45, 'eb': 0.58, 'ef': 2.215, 'tm': 45.0, 'ehc': 0.085},
                                       np.arange(5.0, 41.0))
        assert np.all(np.isfinite(model.evaluate(np.arange(5.0, 41.0))))


class TestCurveModel:
    """Tests for CurveModel construction and evaluation."""

    def test_observed_domain_ignores_non_finite(self):
        model = CurveModel.from_callable(lambda temp: temp, {}, [np.nan, 5.0, 12.0, 30.0])
        assert model.observed_domain == (5.0, 30.0)

    def test_requires_finite_temperature(self):
        with pytest.raises(ValueError):
            CurveModel.from_callable(lambda temp: temp, {}, [np.nan])

    def test_missing_family_parameters(self):
        with pytest.raises(ValueError, match="missing parameters"):
            CurveModel.from_family('gaussian_1987', {'rmax': 1.0}, [0.0, 10.0])

    def test_model_is_read_only(self, parabola_model):
        with pytest.raises(TypeError):
            parabola_model.parameters['peak'] = 0.0
        with pytest.raises(ValueError):
            parabola_model.temperatures[0] = 100.0

    def test_evaluate_silences_floating_point_errors(self):
        model = CurveModel.from_callable(lambda temp, a: np.exp(a * temp) / (temp - 1.0), {'a': 100.0}, [0.0, 10.0])
        with np.errstate(all='raise'):
            rates = model.evaluate(np.array([1.0, 10.0]))
        assert not np.any(np.isfinite(rates))

    def test_scalar_evaluation(self, parabola_model):
        assert float(parabola_model.evaluate(25.0)) == 100.0
