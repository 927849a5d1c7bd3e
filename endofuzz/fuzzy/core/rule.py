from dataclasses import dataclass
from typing import Optional, Tuple
from ..core.types import Float

Antecedent = Tuple[str, ...]  # term names, e.g. ("redness:high", "inflammation:high")

@dataclass(frozen=True)
class Rule:
    id: int
    antecedent: Antecedent
    disease: Optional[str] = None   # disease category concluded, if any
    risk: Optional[str] = None      # risk band concluded, if any
    explanation: str = ""

    def conclusions(self) -> Tuple[str, ...]:
        out = []
        if self.disease is not None:
            out.append(f"disease is {self.disease}")
        if self.risk is not None:
            out.append(f"risk is {self.risk}")
        return tuple(out)

@dataclass(frozen=True)
class RuleFiring:
    rule: Rule
    strength: Float
    memberships: Tuple[Float, ...]  # aligned with rule.antecedent
    fired: bool                     # strength > reporting threshold
