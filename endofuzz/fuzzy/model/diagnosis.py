# Full pipeline: fuzzify -> infer -> defuzzify -> assemble

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Mapping, Optional

from .defuzzifier import Defuzzifier
from .engine import InferenceEngine, InferenceResult
from .fuzzifier import FuzzifiedInput, Fuzzifier
from .knowledge import RuleBase
from .report import DiagnosisReport, ReportAssembler
from ..io.rulebase_loader import DEFAULT_RULEBASE, load_rule_base

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def default_rule_base() -> RuleBase:
    """Process-wide rule base shipped with the package; loaded once, never mutated."""
    return load_rule_base(DEFAULT_RULEBASE)


class Diagnoser:
    """Stateless after construction; one instance can serve concurrent calls."""

    def __init__(self, rb: Optional[RuleBase] = None) -> None:
        self.rb = rb if rb is not None else default_rule_base()
        self.fuzzifier = Fuzzifier(self.rb)
        self.engine = InferenceEngine(self.rb)
        self.defuzzifier = Defuzzifier(self.rb)
        self.assembler = ReportAssembler(self.rb)

    def infer(self, features: Mapping[str, object]) -> tuple[FuzzifiedInput, InferenceResult]:
        fin = self.fuzzifier.fuzzify(features)
        return fin, self.engine.infer(fin)

    def diagnose(self, features: Mapping[str, object]) -> DiagnosisReport:
        fin, result = self.infer(features)
        if result.conclusion.is_empty():
            logger.info("No rule fired for %s; falling back to '%s'", dict(fin.values), self.rb.fallback_category)
        outcome = self.defuzzifier.defuzzify(result.conclusion)
        report = self.assembler.assemble(outcome, result, fin)
        logger.debug("Diagnosis: disease=%s confidence=%.2f risk=%.2f (%s) fired=%s",
                     report.disease, report.confidence, report.risk_score, report.risk_level.value,
                     [r.id for r in report.fired_rules])
        return report


def diagnose(features: Mapping[str, object], rule_base: Optional[RuleBase] = None) -> DiagnosisReport:
    """
    Diagnose one feature vector (feature name -> value in [0, 1]).

    Raises ConfigurationError when a feature required by the rule base is missing,
    ValidationError when a value is not a number in [0, 1]. No partial report is returned.
    """
    return Diagnoser(rule_base).diagnose(features)
