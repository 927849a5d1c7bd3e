from __future__ import annotations

import copy

import pytest

from endofuzz.fuzzy.io.rulebase_loader import DEFAULT_RULEBASE, build_rule_base, load_document
from endofuzz.fuzzy.model.diagnosis import Diagnoser, default_rule_base

FEATURES = ("textureIrregularity", "redness", "edgeDensity", "lesionLikelihood", "inflammation")


@pytest.fixture(scope="session")
def rb():
    return default_rule_base()


@pytest.fixture(scope="session")
def diagnoser(rb):
    return Diagnoser(rb)


@pytest.fixture(scope="session")
def _default_doc():
    return load_document(DEFAULT_RULEBASE)


@pytest.fixture
def default_doc(_default_doc):
    """Fresh, mutable copy of the packaged rule base document."""
    return copy.deepcopy(_default_doc)


@pytest.fixture
def polyp_vector():
    return {
        "textureIrregularity": 0.9,
        "redness": 0.8,
        "edgeDensity": 0.3,
        "lesionLikelihood": 0.85,
        "inflammation": 0.2,
    }


@pytest.fixture
def zero_vector():
    return {name: 0.0 for name in FEATURES}


def _ramp_doc():
    """
    Two features whose single 'ramp' term has membership equal to the input value,
    so rule strengths can be set exactly from the test.
    """
    return {
        "name": "ramp",
        "categories": ["alpha", "beta", "gamma"],
        "fallback_category": "gamma",
        "risk_bands": [
            {"name": "low", "value": 12.5, "mf": ["trap", 0, 0, 15, 30]},
            {"name": "high", "value": 62.5, "mf": ["tri", 45, 62.5, 80]},
        ],
        "features": {
            "x": {"terms": {"ramp": ["trap", 0, 1, 1, 1]}},
            "y": {"terms": {"ramp": ["trap", 0, 1, 1, 1]}},
        },
        "rules": [
            {"id": 1, "if": ["x is ramp"], "then": {"disease": "beta", "risk": "high"},
             "explanation": "x drives beta ({strength:.2f})"},
            {"id": 2, "if": ["y is ramp"], "then": {"disease": "alpha", "risk": "low"},
             "explanation": "y drives alpha ({strength:.2f})"},
        ],
        "recommendations": {
            "*": {"default": ["Check the input.", "Repeat the measurement."]},
        },
        "report": {
            "summary": "Looks like {disease} ({risk_level}).",
            "summary_indeterminate": "Nothing fired: {disease}.",
        },
    }


@pytest.fixture
def ramp_rb():
    return build_rule_base(_ramp_doc())


@pytest.fixture
def ramp_document():
    return _ramp_doc()
