from __future__ import annotations

from dataclasses import dataclass

from .engine import AggregatedConclusion
from .knowledge import RuleBase
from ..core.defuzz import (
    RiskLevel, SCORE_MAX, SCORE_MIN, argmax_stable, centroid_on_grid, clamp_score,
    mom_on_grid, risk_level, weighted_average,
)
from ..core.types import Float

SCORE_DIGITS = 2


@dataclass(frozen=True)
class CrispOutcome:
    disease: str
    confidence: Float       # 0-100
    risk_score: Float       # 0-100
    risk_level: RiskLevel
    indeterminate: bool     # no disease rule had any strength; fallback category used


class Defuzzifier:
    def __init__(self, rb: RuleBase) -> None:
        self.rb = rb

    def classify(self, agg: AggregatedConclusion) -> tuple[str, Float, bool]:
        idx, strength = argmax_stable(self.rb.categories, agg.diseases)
        if strength <= 0.0:
            return self.rb.fallback_category, 0.0, True
        return self.rb.categories[idx], strength, False

    def score(self, agg: AggregatedConclusion) -> Float:
        method = self.rb.engine.defuzz
        bands = self.rb.risk_bands
        if method == "weighted_average":
            y = weighted_average({b.name: b.value for b in bands.values()}, agg.risks, empty=0.0)
        else:
            active = [(bands[name].mf, s) for name, s in agg.risks.items() if s > 0.0]

            def agg_mu(y: Float) -> Float:
                # Mamdani implication (clip) + max aggregation
                best = 0.0
                for mf, s in active:
                    v = min(s, mf.mu(y))
                    if v > best:
                        best = v
                return best

            grid = (SCORE_MIN, SCORE_MAX, self.rb.engine.grid)
            if method == "centroid":
                y = centroid_on_grid(*grid, agg_mu, empty=0.0)
            else:
                y = mom_on_grid(*grid, agg_mu, empty=0.0)
        return round(clamp_score(y), SCORE_DIGITS)

    def level(self, score: Float) -> RiskLevel:
        return risk_level(score, self.rb.risk_levels, self.rb.top_risk_level)

    def defuzzify(self, agg: AggregatedConclusion) -> CrispOutcome:
        disease, strength, indeterminate = self.classify(agg)
        confidence = round(clamp_score(strength * 100.0), SCORE_DIGITS)
        score = self.score(agg)
        return CrispOutcome(disease, confidence, score, self.level(score), indeterminate)
