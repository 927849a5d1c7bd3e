from typing import Dict, Mapping

class FuzzyError(Exception):
    """Domain error for the diagnosis pipeline."""

class ConfigurationError(FuzzyError):
    """Rule base / term catalog is inconsistent with itself or with the input schema."""

class ValidationError(FuzzyError):
    """Caller-supplied feature vector violates the domain contract."""

Float = float
FeatureVector = Mapping[str, Float]
Memberships = Dict[str, Float]
