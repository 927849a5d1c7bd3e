from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from numbers import Real
from types import MappingProxyType
from typing import Dict, Mapping

from .knowledge import RuleBase
from ..core.types import ConfigurationError, FeatureVector, Float, Memberships, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FuzzifiedInput:
    values: FeatureVector              # crisp feature values actually used
    memberships: Mapping[str, Float]   # term name -> degree in [0, 1]

    def __getitem__(self, term: str) -> Float:
        return self.memberships[term]

    def is_degenerate(self) -> bool:
        return not any(m > 0.0 for m in self.memberships.values())


def validate_features(rb: RuleBase, features: Mapping[str, object]) -> FeatureVector:
    """
    Check a feature vector against the catalog and return a read-only copy.
    Missing features -> ConfigurationError (schema mismatch between supplier and rule base).
    Non-numeric / out-of-domain values -> ValidationError. Values are never clamped.
    """
    if not isinstance(features, Mapping):
        raise ValidationError(f"feature vector must be a mapping, got {type(features).__name__}")

    missing = [name for name in rb.features if name not in features]
    if missing:
        raise ConfigurationError(
            f"feature vector is missing {', '.join(missing)} required by rule base '{rb.name}'")

    extra = [k for k in features if k not in rb.features]
    if extra:
        logger.warning("Ignoring features unknown to rule base '%s': %s", rb.name, ", ".join(map(str, extra)))

    out: Dict[str, Float] = {}
    for name, var in rb.features.items():
        raw = features[name]
        if isinstance(raw, bool) or not isinstance(raw, Real):
            raise ValidationError(f"{name}: expected a number, got {raw!r}")
        x = float(raw)
        if math.isnan(x) or not var.contains(x):
            raise ValidationError(f"{name}={raw!r} outside [{var.vmin:g}, {var.vmax:g}]")
        out[name] = x
    return MappingProxyType(out)


class Fuzzifier:
    def __init__(self, rb: RuleBase) -> None:
        self.rb = rb

    def fuzzify(self, features: Mapping[str, object]) -> FuzzifiedInput:
        values = validate_features(self.rb, features)
        mus: Memberships = {}
        for fname, var in self.rb.features.items():
            x = values[fname]
            for term in var.terms.values():
                mus[term.name] = term.mu(x)
        return FuzzifiedInput(values, MappingProxyType(mus))
