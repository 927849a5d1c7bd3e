from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence
import math
from .types import ConfigurationError, Float

def _clamp01(x: Float) -> Float:
    if x <= 0.0:
        return 0.0
    elif x >= 1.0:
        return 1.0
    else:
        return x

class MembershipFunction:
    shape = ""

    def mu(self, x: Float) -> Float:
        raise NotImplementedError
    def support(self) -> tuple[Float, Float]:
        raise NotImplementedError
    def params(self) -> tuple[Float, ...]:
        raise NotImplementedError

    def describe(self) -> str:
        return f"{self.shape} " + " ".join(f"{p:g}" for p in self.params())

# Support is open: the feet of a ramp have membership 0 unless they also lie
# on the peak/plateau (shoulder terms).

@dataclass(frozen=True)
class Triangular(MembershipFunction):
    a: Float; b: Float; c: Float
    shape = "tri"
    def mu(self, x: Float) -> Float:
        if x == self.b: return 1.0
        if x <= self.a or x >= self.c: return 0.0
        if x < self.b:  return _clamp01((x - self.a) / (self.b - self.a or 1e-12))
        return _clamp01((self.c - x) / (self.c - self.b or 1e-12))
    def support(self) -> tuple[Float, Float]:
        return (self.a, self.c)
    def params(self) -> tuple[Float, ...]:
        return (self.a, self.b, self.c)

@dataclass(frozen=True)
class Trapezoidal(MembershipFunction):
    a: Float; b: Float; c: Float; d: Float
    shape = "trap"
    def mu(self, x: Float) -> Float:
        if self.b <= x <= self.c: return 1.0
        if x <= self.a or x >= self.d: return 0.0
        if self.a < x < self.b: return _clamp01((x - self.a) / (self.b - self.a or 1e-12))
        return _clamp01((self.d - x) / (self.d - self.c or 1e-12))
    def support(self) -> tuple[Float, Float]:
        return (self.a, self.d)
    def params(self) -> tuple[Float, ...]:
        return (self.a, self.b, self.c, self.d)

@dataclass(frozen=True)
class Gaussian(MembershipFunction):
    mu0: Float; sigma: Float
    shape = "gauss"
    def mu(self, x: Float) -> Float:
        z = (x - self.mu0) / (self.sigma or 1e-12)
        return _clamp01(math.exp(-0.5 * z * z))
    def support(self) -> tuple[Float, Float]:
        s = 4.0 * self.sigma
        return (self.mu0 - s, self.mu0 + s)
    def params(self) -> tuple[Float, ...]:
        return (self.mu0, self.sigma)


_ARITY = {"tri": 3, "trap": 4, "gauss": 2}
SHAPES = tuple(_ARITY)


def make_mf(shape: str, params: Sequence[Float]) -> MembershipFunction:
    """Build and validate a membership function from its shape name and breakpoints."""
    shape = str(shape).lower()
    if shape not in _ARITY:
        raise ConfigurationError(f"unknown membership shape '{shape}' (expected one of {', '.join(SHAPES)})")
    if len(params) != _ARITY[shape]:
        raise ConfigurationError(f"{shape}: expected {_ARITY[shape]} parameters, got {len(params)}")
    try:
        p = [float(v) for v in params]
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{shape}: parameters must be numbers ({e})") from e
    if any(math.isnan(v) or math.isinf(v) for v in p):
        raise ConfigurationError(f"{shape}: parameters must be finite")

    if shape == "tri":
        if not (p[0] <= p[1] <= p[2]):
            raise ConfigurationError("tri: a <= b <= c required")
        return Triangular(*p)
    if shape == "trap":
        if not (p[0] <= p[1] <= p[2] <= p[3]):
            raise ConfigurationError("trap: a <= b <= c <= d required")
        return Trapezoidal(*p)
    if p[1] <= 0:
        raise ConfigurationError("gauss: sigma > 0 required")
    return Gaussian(*p)
