"""Pytest fixtures for tpcparams tests."""

import numpy as np
import pytest

from tpcparams import CurveModel


def parabola(temp, peak, height):
    return height - (temp - peak) ** 2


def bell(temp, centre):
    return 1.0 / (1.0 + (temp - centre) ** 2)


@pytest.fixture
def parabola_model():
    """Downward parabola peaking at 25 (rate 100) with exact roots at 15 and 35."""
    return CurveModel.from_callable(parabola, {'peak': 25.0, 'height': 100.0}, np.arange(0.0, 31.0), name='parabola')


@pytest.fixture
def asymptotic_model():
    """Always-positive curve peaking at 25 (rate 1); reaches 5% of peak at 25 +/- sqrt(19)."""
    return CurveModel.from_callable(bell, {'centre': 25.0}, np.arange(0.0, 31.0), name='bell')


@pytest.fixture
def sparse_rising_limb_model():
    """Same parabola observed over [24, 40]: only 24 and 25 lie on the rising limb."""
    return CurveModel.from_callable(parabola, {'peak': 25.0, 'height': 100.0}, np.arange(24.0, 41.0), name='parabola')


@pytest.fixture
def sparse_observation_model():
    """Same parabola observed at five temperatures: 10 and 18 are the only observations below topt."""
    temps = np.array([10.0, 18.0, 30.0, 35.0, 40.0])
    return CurveModel.from_callable(parabola, {'peak': 25.0, 'height': 100.0}, temps, name='parabola')


@pytest.fixture
def sharpe_model():
    """Sharpe-Schoolfield (high) curve: explicit e, eh and th; never reaches zero."""
    params = {'r_tref': 1.0, 'e': 0.6, 'eh': 3.0, 'th': 30.0, 'tref': 20.0}
    return CurveModel.from_family('sharpeschoolhigh_1981', params, np.linspace(5.0, 40.0, 15))


@pytest.fixture
def gaussian_model():
    """Gaussian curve with explicit rmax=2 and topt=25."""
    params = {'rmax': 2.0, 'topt': 25.0, 'a': 5.0}
    return CurveModel.from_family('gaussian_1987', params, np.arange(10.0, 41.0, 2.5))


@pytest.fixture
def pawar_model():
    """Pawar curve with explicit topt=28 but no explicit rmax."""
    params = {'r_tref': 1.0, 'e': 0.6, 'eh': 3.0, 'topt': 28.0, 'tref': 20.0}
    return CurveModel.from_family('pawar_2018', params, np.linspace(5.0, 40.0, 15))


@pytest.fixture
def nan_model():
    """A model that is non-finite everywhere."""
    return CurveModel.from_callable(lambda temp: np.full_like(temp, np.nan), {}, np.arange(0.0, 31.0))
