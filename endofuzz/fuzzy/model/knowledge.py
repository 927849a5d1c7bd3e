from __future__ import annotations

from dataclasses import dataclass, field, replace as dc_replace
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

from .variable import FeatureVariable, LinguisticTerm, RiskBand
from ..core import norms
from ..core.defuzz import (
    DEFUZZ_METHODS, RISK_LEVEL_THRESHOLDS, TOP_RISK_LEVEL, RiskLevel,
)
from ..core.rule import Rule
from ..core.types import ConfigurationError, Float

WILDCARD = "*"
DEFAULT_KEY = "default"


def check_template(template: str, sample: Mapping[str, object], where: str) -> None:
    """Fail fast when a str.format template does not render against values shaped like the real ones."""
    try:
        template.format_map(sample)
    except (KeyError, IndexError, ValueError, TypeError, AttributeError) as e:
        raise ConfigurationError(f"{where}: bad template {template!r} ({type(e).__name__}: {e})") from e


@dataclass(frozen=True)
class EngineSettings:
    tnorm: str = "min"
    snorm: str = "max"
    threshold: Float = 0.1              # reporting threshold for fired rules
    defuzz: str = "weighted_average"    # 'weighted_average' | 'centroid' | 'mom'
    grid: int = 1001                    # sample count on the 0-100 axis for grid methods

    def __post_init__(self) -> None:
        if self.tnorm not in norms.TNORMS:
            raise ConfigurationError(f"engine.tnorm: unsupported '{self.tnorm}' (known: {', '.join(norms.TNORMS)})")
        if self.snorm not in norms.SNORMS:
            raise ConfigurationError(f"engine.snorm: unsupported '{self.snorm}' (known: {', '.join(norms.SNORMS)})")
        if self.defuzz not in DEFUZZ_METHODS:
            raise ConfigurationError(f"engine.defuzz: unsupported '{self.defuzz}' (known: {', '.join(DEFUZZ_METHODS)})")
        if not (0.0 <= self.threshold < 1.0):
            raise ConfigurationError(f"engine.threshold must be in [0, 1), got {self.threshold}")
        if self.grid < 3:
            raise ConfigurationError(f"engine.grid must be >= 3, got {self.grid}")


@dataclass(frozen=True)
class RecommendationCatalog:
    """
    Static recommendations keyed by disease (or '*') and risk level (or 'default').
    Lookup order: [disease][level] -> [disease][default] -> [*][level] -> [*][default].
    """
    entries: Mapping[str, Mapping[str, Tuple[str, ...]]]

    def __post_init__(self) -> None:
        levels = {lv.value for lv in RiskLevel} | {DEFAULT_KEY}
        frozen: Dict[str, Mapping[str, Tuple[str, ...]]] = {}
        for disease, by_level in self.entries.items():
            inner: Dict[str, Tuple[str, ...]] = {}
            for level, items in by_level.items():
                where = f"recommendations[{disease!r}][{level!r}]"
                if level not in levels:
                    raise ConfigurationError(f"{where}: unknown risk level (expected one of {sorted(levels)})")
                items = tuple(items)
                if not (2 <= len(items) <= 3):
                    raise ConfigurationError(f"{where}: expected 2-3 recommendations, got {len(items)}")
                if not all(isinstance(s, str) and s.strip() for s in items):
                    raise ConfigurationError(f"{where}: recommendations must be non-empty strings")
                inner[level] = items
            frozen[disease] = MappingProxyType(inner)
        if DEFAULT_KEY not in frozen.get(WILDCARD, {}):
            raise ConfigurationError(f"recommendations: missing fallback entry ['{WILDCARD}']['{DEFAULT_KEY}']")
        object.__setattr__(self, "entries", MappingProxyType(frozen))

    def select(self, disease: str, level: RiskLevel) -> Tuple[str, ...]:
        for key in (disease, WILDCARD):
            by_level = self.entries.get(key)
            if not by_level:
                continue
            for lv in (level.value, DEFAULT_KEY):
                if lv in by_level:
                    return by_level[lv]
        return self.entries[WILDCARD][DEFAULT_KEY]


@dataclass(frozen=True)
class RuleBase:
    """
    Read-only catalog of features/terms, disease categories, risk bands and rules.
    All cross-reference checks run at construction; an instance that exists is valid.
    """
    features: Mapping[str, FeatureVariable]
    categories: Tuple[str, ...]
    fallback_category: str
    risk_bands: Mapping[str, RiskBand]
    rules: Tuple[Rule, ...]
    recommendations: RecommendationCatalog
    summary_template: str
    indeterminate_template: str
    engine: EngineSettings = field(default_factory=EngineSettings)
    risk_levels: Tuple[Tuple[Float, RiskLevel], ...] = RISK_LEVEL_THRESHOLDS
    top_risk_level: RiskLevel = TOP_RISK_LEVEL
    name: str = "rulebase"

    def __post_init__(self) -> None:
        set_ = object.__setattr__
        set_(self, "features", MappingProxyType(dict(self.features)))
        set_(self, "risk_bands", MappingProxyType(dict(self.risk_bands)))
        set_(self, "categories", tuple(self.categories))
        set_(self, "risk_levels", tuple(self.risk_levels))

        if not self.features:
            raise ConfigurationError("features: at least one feature required")
        if not self.categories:
            raise ConfigurationError("categories: at least one category required")
        if len(set(self.categories)) != len(self.categories):
            raise ConfigurationError("categories: duplicate category names")
        if self.fallback_category not in self.categories:
            raise ConfigurationError(f"fallback_category '{self.fallback_category}' is not a known category")
        if not self.risk_bands:
            raise ConfigurationError("risk_bands: at least one band required")
        for band in self.risk_bands.values():
            if not (0.0 <= band.value <= 100.0):
                raise ConfigurationError(f"risk_bands[{band.name!r}]: value must be within [0, 100]")
            if self.engine.defuzz != "weighted_average" and band.mf is None:
                raise ConfigurationError(
                    f"risk_bands[{band.name!r}]: engine.defuzz={self.engine.defuzz} needs a membership function")
        self._check_risk_levels()

        terms: Dict[str, LinguisticTerm] = {}
        for var in self.features.values():
            if not var.terms:
                raise ConfigurationError(f"features[{var.name!r}]: at least one term required")
            for t in var.terms.values():
                terms[t.name] = t
        set_(self, "_terms", MappingProxyType(terms))

        explain_sample = dict.fromkeys(self.template_fields(), 0.5)
        by_id: Dict[int, Rule] = {}
        for r in self.rules:
            where = f"rule {r.id}"
            if r.id in by_id:
                raise ConfigurationError(f"{where}: duplicate rule id")
            if not r.antecedent:
                raise ConfigurationError(f"{where}: empty antecedent")
            for tname in r.antecedent:
                if tname not in terms:
                    raise ConfigurationError(f"{where}: unknown linguistic term '{tname}'")
            if r.disease is None and r.risk is None:
                raise ConfigurationError(f"{where}: consequent needs a disease and/or a risk band")
            if r.disease is not None and r.disease not in self.categories:
                raise ConfigurationError(f"{where}: unknown disease category '{r.disease}'")
            if r.risk is not None and r.risk not in self.risk_bands:
                raise ConfigurationError(f"{where}: unknown risk band '{r.risk}'")
            check_template(r.explanation, explain_sample, f"{where}.explanation")
            by_id[r.id] = r
        set_(self, "rules", tuple(sorted(self.rules, key=lambda r: r.id)))
        set_(self, "_by_id", MappingProxyType(by_id))

        summary_sample = {
            "disease": self.fallback_category,
            "confidence": 0.5,
            "risk_score": 0.5,
            "risk_level": self.top_risk_level.value,
        }
        check_template(self.summary_template, summary_sample, "report.summary")
        check_template(self.indeterminate_template, summary_sample, "report.summary_indeterminate")
        for disease in self.recommendations.entries:
            if disease != WILDCARD and disease not in self.categories:
                raise ConfigurationError(f"recommendations: unknown disease category '{disease}'")

    def _check_risk_levels(self) -> None:
        rank = {lv: i for i, lv in enumerate(RiskLevel)}
        prev, prev_rank = 0.0, -1
        for bound, level in self.risk_levels:
            if not isinstance(level, RiskLevel):
                raise ConfigurationError(f"risk_levels: unknown level {level!r}")
            if not (prev < bound <= 100.0):
                raise ConfigurationError("risk_levels: bounds must be strictly increasing within (0, 100]")
            if rank[level] <= prev_rank:
                raise ConfigurationError(
                    f"risk_levels: {level.value} out of order (levels must follow {[lv.value for lv in RiskLevel]})")
            prev, prev_rank = bound, rank[level]
        if not isinstance(self.top_risk_level, RiskLevel) or rank[self.top_risk_level] <= prev_rank:
            raise ConfigurationError(f"risk_levels: top level {self.top_risk_level!r} must rank above every bounded level")

    # ---------- lookups ----------

    @property
    def terms(self) -> Mapping[str, LinguisticTerm]:
        return self._terms

    def rule(self, rule_id: int) -> Rule:
        try:
            return self._by_id[rule_id]
        except KeyError:
            raise KeyError(f"no rule with id {rule_id}") from None

    def has_rule(self, rule_id: int) -> bool:
        return rule_id in self._by_id

    def template_fields(self) -> Tuple[str, ...]:
        return ("strength", "strength_pct") + tuple(self.features)

    def describe(self) -> str:
        return (f"{self.name}: features={len(self.features)}, terms={len(self.terms)}, "
                f"categories={len(self.categories)}, risk_bands={len(self.risk_bands)}, rules={len(self.rules)}")

    def replace(self, **changes) -> "RuleBase":
        """New validated rule base with some fields swapped (e.g. engine settings)."""
        return dc_replace(self, **changes)
