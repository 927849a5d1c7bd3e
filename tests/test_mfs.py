import pytest

from endofuzz.fuzzy.core.mfs import Gaussian, Trapezoidal, Triangular, make_mf
from endofuzz.fuzzy.core.types import ConfigurationError


class TestTriangular:
    def test_peak_and_ramps(self):
        mf = Triangular(0.25, 0.5, 0.75)
        assert mf.mu(0.5) == 1.0
        assert mf.mu(0.375) == pytest.approx(0.5)
        assert mf.mu(0.625) == pytest.approx(0.5)

    def test_open_support(self):
        mf = Triangular(0.0, 0.15, 0.45)
        assert mf.mu(0.0) == 0.0
        assert mf.mu(0.45) == 0.0
        assert mf.mu(-1.0) == 0.0

    def test_shoulder_peak_on_foot(self):
        assert Triangular(0.0, 0.0, 0.3).mu(0.0) == 1.0

    def test_malformed_breakpoints_stay_in_unit_interval(self):
        mf = Triangular(0.8, 0.2, 0.5)
        for x in (0.0, 0.1, 0.3, 0.5, 0.7, 0.9, 1.0):
            assert 0.0 <= mf.mu(x) <= 1.0


class TestTrapezoidal:
    def test_plateau_and_ramps(self):
        mf = Trapezoidal(0.55, 0.8, 1.0, 1.0)
        assert mf.mu(0.9) == 1.0
        assert mf.mu(1.0) == 1.0  # right shoulder
        assert mf.mu(0.675) == pytest.approx(0.5)
        assert mf.mu(0.55) == 0.0

    def test_malformed_breakpoints_stay_in_unit_interval(self):
        mf = Trapezoidal(0.9, 0.1, 0.2, 0.3)
        for x in (0.0, 0.15, 0.25, 0.5, 0.95, 1.0):
            assert 0.0 <= mf.mu(x) <= 1.0


def test_gaussian_peak():
    mf = Gaussian(0.5, 0.1)
    assert mf.mu(0.5) == 1.0
    assert mf.mu(0.6) == pytest.approx(0.6065, abs=1e-4)


@pytest.mark.parametrize("shape, params, cls", [
    ("tri", [0, 0.5, 1], Triangular),
    ("TRAP", [0, 0.2, 0.8, 1], Trapezoidal),
    ("gauss", [0.5, 0.2], Gaussian),
])
def test_make_mf(shape, params, cls):
    assert isinstance(make_mf(shape, params), cls)


@pytest.mark.parametrize("shape, params", [
    ("tri", [0.5, 0.2, 1]),          # unordered
    ("tri", [0, 1]),                 # arity
    ("trap", [0, 0.5, 0.4, 1]),      # unordered
    ("gauss", [0.5, 0]),             # sigma
    ("bell", [1, 2, 3]),             # unknown shape
    ("tri", [0, "x", 1]),            # not a number
    ("tri", [0, float("nan"), 1]),
])
def test_make_mf_rejects_malformed(shape, params):
    with pytest.raises(ConfigurationError):
        make_mf(shape, params)


def test_describe():
    assert make_mf("trap", [0.55, 0.8, 1, 1]).describe() == "trap 0.55 0.8 1 1"
