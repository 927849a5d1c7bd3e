# T-norms (fuzzy AND) and S-norms / t-conorms (fuzzy OR) over iterables of degrees.
from typing import Callable, Dict, Iterable
from .types import Float

Norm = Callable[[Iterable[Float]], Float]

def _fold(vals: Iterable[Float], init: Float, op) -> Float:
    acc = init
    for v in vals:
        acc = op(acc, float(v))
    return acc

# --- T-norms (neutral element 1) ---
def t_min(vals: Iterable[Float]) -> Float:
    return _fold(vals, 1.0, min)

def t_prod(vals: Iterable[Float]) -> Float:
    return _fold(vals, 1.0, lambda a, b: a * b)

def t_lukasiewicz(vals: Iterable[Float]) -> Float:
    return _fold(vals, 1.0, lambda a, b: max(0.0, a + b - 1.0))

def _t_hamacher_pair(a: Float, b: Float) -> Float:
    denom = a + b - a * b
    if denom == 0.0:  # (0,0) -> 0
        return 0.0
    return (a * b) / denom

def t_hamacher(vals: Iterable[Float]) -> Float:
    return _fold(vals, 1.0, _t_hamacher_pair)

# --- S-norms (neutral element 0) ---
def s_max(vals: Iterable[Float]) -> Float:
    return _fold(vals, 0.0, max)

def s_prob(vals: Iterable[Float]) -> Float:
    # algebraic sum
    return _fold(vals, 0.0, lambda a, b: a + b - a * b)

def s_bsum(vals: Iterable[Float]) -> Float:
    # bounded sum; same operator as the Lukasiewicz t-conorm
    return _fold(vals, 0.0, lambda a, b: min(1.0, a + b))

def _s_hamacher_pair(a: Float, b: Float) -> Float:
    denom = 1.0 - a * b
    if denom == 0.0:  # (1,1) -> 1
        return 1.0
    return (a + b - 2.0 * a * b) / denom

def s_hamacher(vals: Iterable[Float]) -> Float:
    return _fold(vals, 0.0, _s_hamacher_pair)

TNORMS: Dict[str, Norm] = {
    "min": t_min,
    "prod": t_prod,
    "lukasiewicz": t_lukasiewicz,
    "hamacher": t_hamacher,
}
SNORMS: Dict[str, Norm] = {
    "max": s_max,
    "prob": s_prob,
    "bsum": s_bsum,
    "lukasiewicz": s_bsum,
    "hamacher": s_hamacher,
}
