from enum import Enum
from typing import Callable, List, Mapping, Sequence, Tuple
from .types import Float


class RiskLevel(str, Enum):
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    CRITICAL = "Critical"


# score < bound -> level; anything at or above the last bound is CRITICAL
RISK_LEVEL_THRESHOLDS: Tuple[Tuple[Float, RiskLevel], ...] = (
    (25.0, RiskLevel.LOW),
    (50.0, RiskLevel.MODERATE),
    (75.0, RiskLevel.HIGH),
)
TOP_RISK_LEVEL = RiskLevel.CRITICAL

SCORE_MIN = 0.0
SCORE_MAX = 100.0


def risk_level(score: Float,
               thresholds: Sequence[Tuple[Float, RiskLevel]] = RISK_LEVEL_THRESHOLDS,
               top: RiskLevel = TOP_RISK_LEVEL) -> RiskLevel:
    for bound, level in thresholds:
        if score < bound:
            return level
    return top


def clamp_score(x: Float) -> Float:
    return max(SCORE_MIN, min(SCORE_MAX, float(x)))


def argmax_stable(order: Sequence[str], strengths: Mapping[str, Float]) -> Tuple[int, Float]:
    """Index and value of the strongest label; ties go to the lowest index."""
    best_i, best = -1, 0.0
    for i, label in enumerate(order):
        s = float(strengths.get(label, 0.0))
        if best_i < 0 or s > best:
            best_i, best = i, s
    return best_i, best


def weighted_average(values: Mapping[str, Float], strengths: Mapping[str, Float],
                     empty: Float = 0.0) -> Float:
    """sum(v * s) / sum(s) over the labels in `values`; `empty` when nothing is active."""
    num = 0.0
    den = 0.0
    for label, v in values.items():
        s = float(strengths.get(label, 0.0))
        num += float(v) * s
        den += s
    return num / den if den > 0.0 else empty


def _linspace(ymin: Float, ymax: Float, n: int) -> List[Float]:
    if n <= 1:
        return [(ymin + ymax) / 2.0]
    step = (ymax - ymin) / (n - 1)
    return [ymin + i * step for i in range(n)]


def centroid_on_grid(ymin: Float, ymax: Float, n: int, mu: Callable[[Float], Float],
                     empty: Float = 0.0) -> Float:
    ys = _linspace(ymin, ymax, int(n))
    num = 0.0
    den = 0.0
    for y in ys:
        w = mu(y)
        num += y * w
        den += w
    return num / den if den > 0.0 else empty


def mom_on_grid(ymin: Float, ymax: Float, n: int, mu: Callable[[Float], Float],
                empty: Float = 0.0) -> Float:
    ys = _linspace(ymin, ymax, int(n))
    ws = [mu(y) for y in ys]
    m = max(ws) if ws else 0.0
    if m <= 0.0:
        return empty
    # numeric tolerance
    tol = max(1e-12, 1e-6 * m)
    tops = [y for y, w in zip(ys, ws) if abs(w - m) <= tol]
    return sum(tops) / len(tops)


DEFUZZ_METHODS = ("weighted_average", "centroid", "mom")
