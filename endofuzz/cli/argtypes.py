import argparse
from typing import Dict, Iterable

from ..fuzzy.io.rulebase_loader import load_rule_base
from ..fuzzy.model.diagnosis import default_rule_base
from ..fuzzy.model.knowledge import RuleBase

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]
LOG_LEVEL_DEFAULT = "WARNING"

def parse_keyval(s: str):
    """'redness=0.8' -> ('redness', 0.8)"""
    if "=" not in s:
        raise argparse.ArgumentTypeError(f"Invalid element: '{s}' (expected 'feature=value').")
    k, v = (t.strip() for t in s.split("=", 1))
    if not k:
        raise argparse.ArgumentTypeError(f"Empty feature name in: '{s}'.")
    try:
        return k, float(v)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Not a number: '{v}' (in '{s}').") from None

def pairs_to_dict(pairs: Iterable) -> Dict[str, float]:
    """Accepts ('k', v) tuples or 'k=v[,k=v]' strings."""
    out: Dict[str, float] = {}
    for item in pairs or []:
        if isinstance(item, tuple):
            k, v = item
            out[k] = v
            continue
        for tok in str(item).split(","):
            tok = tok.strip()
            if tok:
                k, v = parse_keyval(tok)
                out[k] = v
    return out

def rule_base_from(args) -> RuleBase:
    path = getattr(args, "rulebase", None)
    return load_rule_base(path) if path else default_rule_base()
