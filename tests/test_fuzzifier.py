import logging

import pytest

from endofuzz.fuzzy.core.types import ConfigurationError, ValidationError
from endofuzz.fuzzy.model.fuzzifier import Fuzzifier


@pytest.fixture
def fuzzifier(rb):
    return Fuzzifier(rb)


def test_covers_every_term(fuzzifier, rb, polyp_vector):
    fin = fuzzifier.fuzzify(polyp_vector)
    assert set(fin.memberships) == set(rb.terms)
    assert all(0.0 <= m <= 1.0 for m in fin.memberships.values())


def test_example_memberships(fuzzifier, polyp_vector):
    fin = fuzzifier.fuzzify(polyp_vector)
    assert fin["textureIrregularity:high"] == 1.0
    assert fin["lesionLikelihood:high"] == 1.0
    assert fin["edgeDensity:low"] == pytest.approx(0.5)
    assert fin["edgeDensity:medium"] == pytest.approx(0.2)
    assert fin["inflammation:low"] == pytest.approx(0.8333, abs=1e-4)
    assert fin["inflammation:medium"] == 0.0


def test_zero_vector_is_degenerate(fuzzifier, zero_vector):
    assert fuzzifier.fuzzify(zero_vector).is_degenerate()


def test_values_are_read_only_copy(fuzzifier, polyp_vector):
    fin = fuzzifier.fuzzify(polyp_vector)
    polyp_vector["redness"] = 0.0
    assert fin.values["redness"] == 0.8
    with pytest.raises(TypeError):
        fin.values["redness"] = 0.1


def test_missing_feature_is_configuration_error(fuzzifier, polyp_vector):
    del polyp_vector["inflammation"]
    with pytest.raises(ConfigurationError, match="inflammation"):
        fuzzifier.fuzzify(polyp_vector)


@pytest.mark.parametrize("bad", [-0.01, 1.01, float("nan"), float("inf"), "0.5", None, True])
def test_invalid_values_rejected(fuzzifier, polyp_vector, bad):
    polyp_vector["redness"] = bad
    with pytest.raises(ValidationError, match="redness"):
        fuzzifier.fuzzify(polyp_vector)


def test_bounds_accepted(fuzzifier, polyp_vector):
    polyp_vector["redness"] = 1
    polyp_vector["edgeDensity"] = 0
    fin = fuzzifier.fuzzify(polyp_vector)
    assert fin["redness:high"] == 1.0
    assert fin.values["edgeDensity"] == 0.0


def test_not_a_mapping(fuzzifier):
    with pytest.raises(ValidationError):
        fuzzifier.fuzzify([0.1, 0.2])


def test_unknown_features_ignored_with_warning(fuzzifier, polyp_vector, caplog):
    polyp_vector["glare"] = 0.4
    with caplog.at_level(logging.WARNING, logger="endofuzz.fuzzy.model.fuzzifier"):
        fin = fuzzifier.fuzzify(polyp_vector)
    assert "glare" not in fin.values
    assert "glare" in caplog.text
