from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from .defuzzifier import CrispOutcome
from .engine import InferenceResult
from .fuzzifier import FuzzifiedInput
from .knowledge import RuleBase
from .variable import split_term
from ..core.defuzz import RiskLevel
from ..core.rule import RuleFiring
from ..core.types import Float


@dataclass(frozen=True)
class FiredRule:
    id: int
    conditions: Tuple[str, ...]
    conclusion: str
    explanation: str
    strength: Float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "if": list(self.conditions),
            "then": self.conclusion,
            "explanation": self.explanation,
        }


@dataclass(frozen=True)
class DiagnosisReport:
    disease: str
    confidence: Float
    risk_score: Float
    risk_level: RiskLevel
    fired_rules: Tuple[FiredRule, ...]
    recommendations: Tuple[str, ...]
    summary: str

    def to_dict(self) -> Dict[str, Any]:
        """Presentation-layer shape: disease, confidence, riskScore, riskLevel, fuzzyRules, recommendations, summary."""
        return {
            "disease": self.disease,
            "confidence": self.confidence,
            "riskScore": self.risk_score,
            "riskLevel": self.risk_level.value,
            "fuzzyRules": [r.to_dict() for r in self.fired_rules],
            "recommendations": list(self.recommendations),
            "summary": self.summary,
        }

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


def render_condition(term: str) -> str:
    feature, label = split_term(term)
    return f"{feature} is {label}"


class ReportAssembler:
    """Formatting and catalog selection only; numbers pass through untouched."""

    def __init__(self, rb: RuleBase) -> None:
        self.rb = rb

    def render_rule(self, firing: RuleFiring, fin: FuzzifiedInput) -> FiredRule:
        rule = firing.rule
        ctx: Dict[str, Any] = dict(fin.values)
        ctx["strength"] = firing.strength
        ctx["strength_pct"] = firing.strength * 100.0
        return FiredRule(
            id=rule.id,
            conditions=tuple(render_condition(t) for t in rule.antecedent),
            conclusion=" AND ".join(rule.conclusions()),
            explanation=rule.explanation.format_map(ctx),
            strength=firing.strength,
        )

    def summarize(self, outcome: CrispOutcome, fired: Tuple[FiredRule, ...]) -> str:
        template = self.rb.summary_template if fired else self.rb.indeterminate_template
        return template.format_map({
            "disease": outcome.disease,
            "confidence": outcome.confidence,
            "risk_score": outcome.risk_score,
            "risk_level": outcome.risk_level.value,
        })

    def assemble(self, outcome: CrispOutcome, result: InferenceResult, fin: FuzzifiedInput) -> DiagnosisReport:
        fired = tuple(self.render_rule(f, fin) for f in result.fired)
        return DiagnosisReport(
            disease=outcome.disease,
            confidence=outcome.confidence,
            risk_score=outcome.risk_score,
            risk_level=outcome.risk_level,
            fired_rules=fired,
            recommendations=self.rb.recommendations.select(outcome.disease, outcome.risk_level),
            summary=self.summarize(outcome, fired),
        )
