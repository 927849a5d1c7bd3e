"""
Rule base document (YAML or JSON), top-level sections:

  name: <str>                                 # optional
  engine: {tnorm, snorm, threshold, defuzz, grid}   # optional, defaults: min/max/0.1/weighted_average
  categories: [<disease>, ...]                # closed set; order is the tie-break order
  fallback_category: <disease>
  risk_bands: [{name, value, mf: [shape, params...]}, ...]
  risk_levels: [{level: Low, below: 25}, ..., {level: Critical}]   # optional
  features:
    <feature>: {description, terms: {<label>: [tri a b c | trap a b c d | gauss mean sigma]}}
  rules:
    - id: <int>
      if: ["<feature> is <label>", ...]       # or "<feature>:<label>"
      then: {disease: <disease>, risk: <band>}
      explanation: <str.format template>      # fields: strength, strength_pct, <feature>...
  recommendations: {<disease>|'*': {<RiskLevel>|default: [2-3 strings]}}
  report: {summary: <template>, summary_indeterminate: <template>}

Notes:
- Keywords are case-sensitive; feature/term names too.
- Everything is validated once, at load; any problem raises ConfigurationError
  with the location in the document (e.g. "rules[3].if[1]").
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import yaml

from ..core.defuzz import RISK_LEVEL_THRESHOLDS, TOP_RISK_LEVEL, RiskLevel
from ..core.mfs import MembershipFunction, make_mf
from ..core.rule import Rule
from ..core.types import ConfigurationError, Float
from ..model.knowledge import EngineSettings, RecommendationCatalog, RuleBase
from ..model.variable import TERM_SEP, FeatureVariable, RiskBand, term_name

logger = logging.getLogger(__name__)

DEFAULT_RULEBASE = Path(__file__).resolve().parents[2] / "data" / "endoscopy.yaml"

PathLike = Union[str, Path]


def _fail(where: str, msg: str) -> ConfigurationError:
    return ConfigurationError(f"{where}: {msg}")


def _section(doc: Mapping[str, Any], key: str, kind: type, required: bool = True):
    val = doc.get(key)
    if val is None:
        if required:
            raise _fail(key, "section is missing")
        return None
    if not isinstance(val, kind):
        raise _fail(key, f"expected {kind.__name__}, got {type(val).__name__}")
    return val


def load_document(path: PathLike) -> Dict[str, Any]:
    p = Path(path)
    try:
        with open(p, encoding="utf-8") as f:
            if p.suffix.lower() in (".yml", ".yaml"):
                doc = yaml.safe_load(f)
            else:
                doc = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"cannot read rule base {p}: {e}") from e
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"malformed rule base {p}: {e}") from e
    if not isinstance(doc, dict):
        raise ConfigurationError(f"rule base {p}: top level must be a mapping")
    return doc


# ---------- pieces ----------

def parse_mf(spec: Any, where: str) -> MembershipFunction:
    """[shape, p1, p2, ...] or {shape: ..., params: [...]}"""
    if isinstance(spec, Mapping):
        shape, params = spec.get("shape"), spec.get("params")
    elif isinstance(spec, (list, tuple)) and spec:
        shape, params = spec[0], list(spec[1:])
    else:
        raise _fail(where, f"membership function must be [shape, params...], got {spec!r}")
    if not isinstance(params, (list, tuple)):
        raise _fail(where, "membership function params must be a list")
    try:
        return make_mf(shape, params)
    except ConfigurationError as e:
        raise _fail(where, str(e)) from e


def parse_term_ref(raw: Any, where: str) -> str:
    if not isinstance(raw, str):
        raise _fail(where, f"expected '<feature> is <label>', got {raw!r}")
    words = raw.split()
    if len(words) == 3 and words[1].lower() == "is":
        return term_name(words[0], words[2])
    if len(words) == 1 and ":" in raw:
        feature, _, label = raw.partition(":")
        if feature and label:
            return term_name(feature, label)
    raise _fail(where, f"expected '<feature> is <label>', got {raw!r}")


def _check_name(name: str, where: str) -> str:
    # ":" and whitespace delimit "<feature> is <label>" and "<feature>:<label>"
    if not name or TERM_SEP in name or any(ch.isspace() for ch in name):
        raise _fail(where, f"invalid name {name!r} (must be non-empty, without '{TERM_SEP}' or spaces)")
    return name


def parse_features(doc: Mapping[str, Any]) -> Dict[str, FeatureVariable]:
    out: Dict[str, FeatureVariable] = {}
    for fname, fspec in _section(doc, "features", dict).items():
        where = f"features.{fname}"
        fname = _check_name(str(fname), where)
        if not isinstance(fspec, Mapping):
            raise _fail(where, "expected a mapping with 'terms'")
        terms = fspec.get("terms")
        if not isinstance(terms, Mapping) or not terms:
            raise _fail(f"{where}.terms", "at least one term required")
        mfs = {_check_name(str(label), f"{where}.terms.{label}"): parse_mf(spec, f"{where}.terms.{label}")
               for label, spec in terms.items()}
        out[fname] = FeatureVariable.build(fname, mfs, description=str(fspec.get("description", "")))
    return out


def parse_risk_bands(doc: Mapping[str, Any]) -> Dict[str, RiskBand]:
    out: Dict[str, RiskBand] = {}
    for i, spec in enumerate(_section(doc, "risk_bands", list)):
        where = f"risk_bands[{i}]"
        if not isinstance(spec, Mapping) or "name" not in spec or "value" not in spec:
            raise _fail(where, "expected {name, value[, mf]}")
        name = str(spec["name"])
        if name in out:
            raise _fail(where, f"duplicate risk band '{name}'")
        try:
            value = float(spec["value"])
        except (TypeError, ValueError) as e:
            raise _fail(f"{where}.value", str(e)) from e
        mf = parse_mf(spec["mf"], f"{where}.mf") if spec.get("mf") is not None else None
        out[name] = RiskBand(name, value, mf)
    return out


def parse_risk_levels(doc: Mapping[str, Any]) -> Tuple[Tuple[Tuple[Float, RiskLevel], ...], RiskLevel]:
    specs = _section(doc, "risk_levels", list, required=False)
    if not specs:
        return RISK_LEVEL_THRESHOLDS, TOP_RISK_LEVEL
    bounds: List[Tuple[Float, RiskLevel]] = []
    top: Optional[RiskLevel] = None
    for i, spec in enumerate(specs):
        where = f"risk_levels[{i}]"
        if not isinstance(spec, Mapping) or "level" not in spec:
            raise _fail(where, "expected {level[, below]}")
        try:
            level = RiskLevel(spec["level"])
        except ValueError:
            raise _fail(where, f"unknown level {spec['level']!r} (expected {[lv.value for lv in RiskLevel]})") from None
        if top is not None:
            raise _fail(where, "only the last level may omit 'below'")
        if "below" in spec:
            try:
                bounds.append((float(spec["below"]), level))
            except (TypeError, ValueError) as e:
                raise _fail(f"{where}.below", str(e)) from e
        else:
            top = level
    if top is None:
        raise _fail("risk_levels", "last level must have no 'below' bound")
    return tuple(bounds), top


def parse_rules(doc: Mapping[str, Any]) -> List[Rule]:
    out: List[Rule] = []
    for i, spec in enumerate(_section(doc, "rules", list)):
        where = f"rules[{i}]"
        if not isinstance(spec, Mapping):
            raise _fail(where, "expected a mapping")
        rid = spec.get("id")
        if isinstance(rid, bool) or not isinstance(rid, int):
            raise _fail(f"{where}.id", f"integer id required, got {rid!r}")
        conds = spec.get("if")
        if isinstance(conds, str):
            conds = [conds]
        if not isinstance(conds, list) or not conds:
            raise _fail(f"{where}.if", "at least one condition required")
        ante = tuple(parse_term_ref(c, f"{where}.if[{j}]") for j, c in enumerate(conds))
        then = spec.get("then")
        if not isinstance(then, Mapping):
            raise _fail(f"{where}.then", "expected {disease[, risk]} mapping")
        unknown = set(then) - {"disease", "risk"}
        if unknown:
            raise _fail(f"{where}.then", f"unknown keys {sorted(unknown)}")
        disease = then.get("disease")
        risk = then.get("risk")
        explanation = spec.get("explanation", "")
        if not isinstance(explanation, str):
            raise _fail(f"{where}.explanation", "expected a string")
        out.append(Rule(
            id=rid,
            antecedent=ante,
            disease=None if disease is None else str(disease),
            risk=None if risk is None else str(risk),
            explanation=explanation,
        ))
    return out


def parse_engine(doc: Mapping[str, Any]) -> EngineSettings:
    spec = _section(doc, "engine", dict, required=False) or {}
    known = {"tnorm", "snorm", "threshold", "defuzz", "grid"}
    unknown = set(spec) - known
    if unknown:
        raise _fail("engine", f"unknown keys {sorted(unknown)}")
    kwargs: Dict[str, Any] = {}
    try:
        for k in ("tnorm", "snorm", "defuzz"):
            if k in spec:
                kwargs[k] = str(spec[k]).lower()
        if "threshold" in spec:
            kwargs["threshold"] = float(spec["threshold"])
        if "grid" in spec:
            kwargs["grid"] = int(spec["grid"])
    except (TypeError, ValueError) as e:
        raise _fail("engine", str(e)) from e
    return EngineSettings(**kwargs)


def parse_recommendations(doc: Mapping[str, Any]) -> RecommendationCatalog:
    spec = _section(doc, "recommendations", dict)
    entries: Dict[str, Dict[str, Tuple[str, ...]]] = {}
    for disease, by_level in spec.items():
        if not isinstance(by_level, Mapping):
            raise _fail(f"recommendations[{disease!r}]", "expected a mapping of risk level -> list")
        inner: Dict[str, Tuple[str, ...]] = {}
        for level, items in by_level.items():
            if not isinstance(items, list):
                raise _fail(f"recommendations[{disease!r}][{level!r}]", "expected a list of strings")
            inner[str(level)] = tuple(items)
        entries[str(disease)] = inner
    return RecommendationCatalog(entries)


# ---------- API ----------

def build_rule_base(doc: Mapping[str, Any], name: Optional[str] = None) -> RuleBase:
    categories = _section(doc, "categories", list)
    report = _section(doc, "report", dict)
    levels, top = parse_risk_levels(doc)
    for key in ("summary", "summary_indeterminate"):
        if not isinstance(report.get(key), str):
            raise _fail(f"report.{key}", "template string required")
    fallback = doc.get("fallback_category")
    if not isinstance(fallback, str):
        raise _fail("fallback_category", "category name required")
    return RuleBase(
        features=parse_features(doc),
        categories=tuple(str(c) for c in categories),
        fallback_category=fallback,
        risk_bands=parse_risk_bands(doc),
        rules=tuple(parse_rules(doc)),
        recommendations=parse_recommendations(doc),
        summary_template=report["summary"],
        indeterminate_template=report["summary_indeterminate"],
        engine=parse_engine(doc),
        risk_levels=levels,
        top_risk_level=top,
        name=str(name or doc.get("name") or "rulebase"),
    )


def load_rule_base(path: PathLike = DEFAULT_RULEBASE) -> RuleBase:
    p = Path(path)
    doc = load_document(p)
    try:
        rb = build_rule_base(doc, name=doc.get("name") or p.stem)
    except ConfigurationError as e:
        raise ConfigurationError(f"[{p.name}] {e}") from e
    logger.info("Loaded rule base %s", rb.describe())
    return rb
