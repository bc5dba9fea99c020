import logging
import math

import numpy as np
import pytest

from cosmic.utils.integration import RombergDiagnostics, romberg


def test_cubic_is_integrated_exactly():
    assert romberg(lambda x: x ** 3, 0.0, 2.0) == pytest.approx(4.0, abs=1e-12)


def test_sine_over_half_period():
    assert romberg(math.sin, 0.0, math.pi) == pytest.approx(2.0, abs=1e-9)


@pytest.mark.parametrize(
    "func, a, b, expected",
    [
        (math.sin, 0.0, math.pi, 2.0),
        (lambda x: x * (1.0 - x), 0.0, 1.0, 1.0 / 6.0),
        (lambda x: x * x * (2.0 - x), 0.0, 2.0, 4.0 / 3.0),
    ],
)
def test_vanishing_endpoints_do_not_stop_refinement(func, a, b, expected):
    value, info = romberg(func, a, b, full_output=True)

    assert info.converged
    assert info.levels > 2
    assert value == pytest.approx(expected, abs=1e-8)


def test_vectorized_callable_receives_arrays():
    calls = []

    def integrand(x):
        calls.append(np.ndim(x))
        return np.exp(x)

    result = romberg(integrand, 0.0, 1.0, vectorized=True)

    assert result == pytest.approx(math.e - 1.0, abs=1e-9)
    assert set(calls) == {1}


def test_scalar_and_vectorized_paths_agree():
    scalar = romberg(lambda x: 1.0 / (1.0 + x * x), 0.0, 1.0)
    vector = romberg(lambda x: 1.0 / (1.0 + x * x), 0.0, 1.0, vectorized=True)

    assert scalar == pytest.approx(math.pi / 4.0, abs=1e-9)
    assert vector == pytest.approx(scalar, abs=1e-14)


def test_full_output_reports_convergence():
    value, info = romberg(np.cos, 0.0, 1.0, vectorized=True, full_output=True)

    assert isinstance(info, RombergDiagnostics)
    assert info.converged
    assert info.error_estimate < 1e-8
    assert info.evaluations == 2 ** (info.levels - 1) + 1
    assert value == pytest.approx(math.sin(1.0), abs=1e-10)


def test_zero_integrand_converges_when_trapezoids_agree():
    value, info = romberg(lambda x: 0.0, 0.0, 5.0, full_output=True)

    assert value == 0.0
    assert info.converged
    assert info.levels == 2


def test_exhausted_table_returns_last_estimate(caplog):
    coarse = 0.5 * (0.0 + 1.0)
    t1 = 0.5 * coarse + 0.5 * math.sqrt(0.5)
    t2 = 0.5 * t1 + 0.25 * (math.sqrt(0.25) + math.sqrt(0.75))

    with caplog.at_level(logging.WARNING, logger="cosmic.utils.integration"):
        value, info = romberg(np.sqrt, 0.0, 1.0, max_levels=3, vectorized=True, full_output=True)

    assert not info.converged
    assert info.levels == 3
    assert value == pytest.approx(t2 + (t2 - t1) / 3.0, abs=1e-14)
    assert "without reaching tolerance" in caplog.text


def test_plain_call_stays_silent_about_non_convergence():
    value = romberg(np.sqrt, 0.0, 1.0, max_levels=3, vectorized=True)

    assert isinstance(value, float)


def test_nan_integrand_propagates():
    value, info = romberg(lambda x: np.full_like(x, np.nan), 0.0, 1.0,
                          vectorized=True, full_output=True)

    assert math.isnan(value)
    assert not info.converged


def test_tolerance_is_configurable():
    _, loose = romberg(np.exp, 0.0, 3.0, tol=1e-3, vectorized=True, full_output=True)
    _, tight = romberg(np.exp, 0.0, 3.0, tol=1e-12, vectorized=True, full_output=True)

    assert loose.levels < tight.levels
