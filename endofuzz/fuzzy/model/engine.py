from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Tuple

from .fuzzifier import FuzzifiedInput
from .knowledge import RuleBase
from ..core import norms
from ..core.rule import RuleFiring
from ..core.types import Float


def _clip01(x: float) -> float:
    return 0.0 if x < 0.0 else (1.0 if x > 1.0 else x)


@dataclass(frozen=True)
class AggregatedConclusion:
    diseases: Mapping[str, Float]   # every category, in catalog order
    risks: Mapping[str, Float]      # every risk band, in catalog order

    def is_empty(self) -> bool:
        return not any(s > 0.0 for s in self.diseases.values()) and \
            not any(s > 0.0 for s in self.risks.values())


@dataclass(frozen=True)
class InferenceResult:
    firings: Tuple[RuleFiring, ...]     # one per rule, rule-id order
    conclusion: AggregatedConclusion

    @property
    def fired(self) -> Tuple[RuleFiring, ...]:
        return tuple(f for f in self.firings if f.fired)


class InferenceEngine:
    """
    Rule evaluation: alpha = T-norm(antecedent memberships) per rule;
    aggregation: S-norm over alphas of rules sharing a conclusion (disease or risk band).
    The reporting threshold only decides which firings are flagged for explanation.
    """
    def __init__(self, rb: RuleBase) -> None:
        self.rb = rb
        self.tnorm_fn: Callable = norms.TNORMS[rb.engine.tnorm]
        self.snorm_fn: Callable = norms.SNORMS[rb.engine.snorm]
        self.threshold = float(rb.engine.threshold)

    def fire(self, fin: FuzzifiedInput) -> Tuple[RuleFiring, ...]:
        out: List[RuleFiring] = []
        for rule in self.rb.rules:
            mus = tuple(fin[t] for t in rule.antecedent)
            # single antecedent: strength is the membership itself for every t-norm
            alpha = _clip01(float(self.tnorm_fn(mus)))
            out.append(RuleFiring(rule, alpha, mus, alpha > self.threshold))
        return tuple(out)

    def aggregate(self, firings: Tuple[RuleFiring, ...]) -> AggregatedConclusion:
        d_buckets: Dict[str, List[Float]] = {c: [] for c in self.rb.categories}
        r_buckets: Dict[str, List[Float]] = {b: [] for b in self.rb.risk_bands}
        for f in firings:
            if f.strength <= 0.0:
                continue
            if f.rule.disease is not None:
                d_buckets[f.rule.disease].append(f.strength)
            if f.rule.risk is not None:
                r_buckets[f.rule.risk].append(f.strength)
        diseases = {c: _clip01(float(self.snorm_fn(v))) for c, v in d_buckets.items()}
        risks = {b: _clip01(float(self.snorm_fn(v))) for b, v in r_buckets.items()}
        return AggregatedConclusion(MappingProxyType(diseases), MappingProxyType(risks))

    def infer(self, fin: FuzzifiedInput) -> InferenceResult:
        firings = self.fire(fin)
        return InferenceResult(firings, self.aggregate(firings))
