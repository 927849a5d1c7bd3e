# Input features with their linguistic terms, and output risk bands

from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple
from ..core.mfs import MembershipFunction
from ..core.types import Float

TERM_SEP = ":"

def term_name(feature: str, label: str) -> str:
    return f"{feature}{TERM_SEP}{label}"

def split_term(name: str) -> Tuple[str, str]:
    feature, _, label = name.rpartition(TERM_SEP)
    return feature, label

@dataclass(frozen=True)
class LinguisticTerm:
    feature: str
    label: str
    mf: MembershipFunction

    @property
    def name(self) -> str:
        return term_name(self.feature, self.label)

    def mu(self, x: Float) -> Float:
        return self.mf.mu(x)

@dataclass(frozen=True)
class FeatureVariable:
    name: str
    terms: Mapping[str, LinguisticTerm]   # label -> term, read-only
    vmin: Float = 0.0
    vmax: Float = 1.0
    description: str = ""

    @classmethod
    def build(cls, name: str, terms: Mapping[str, MembershipFunction], description: str = "") -> "FeatureVariable":
        lts = {label: LinguisticTerm(name, label, mf) for label, mf in terms.items()}
        return cls(name, MappingProxyType(lts), description=description)

    def contains(self, x: Float) -> bool:
        return self.vmin <= x <= self.vmax

@dataclass(frozen=True)
class RiskBand:
    name: str
    value: Float                               # representative crisp value on the 0-100 scale
    mf: Optional[MembershipFunction] = None    # only needed for grid defuzzification
