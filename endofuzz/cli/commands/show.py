import sys
from typing import List, Optional

from ..argtypes import pairs_to_dict, rule_base_from
from ...fuzzy.model.engine import InferenceEngine
from ...fuzzy.model.fuzzifier import Fuzzifier
from ...fuzzy.model.report import render_condition


# ========= utils: ANSI / pretty =========

_RESET = "\x1b[0m"

def _use_ansi() -> bool:
    return sys.stdout.isatty()

def _ansi_color(mu: float) -> str:
    """
    Colour by membership degree:
      >= 0.50 -> green
      >= 0.20 -> yellow
      <  0.20 -> grey
    """
    if not _use_ansi():
        return ""
    if mu >= 0.50:
        return "\x1b[32m"  # green
    if mu >= 0.20:
        return "\x1b[33m"  # yellow
    return "\x1b[90m"      # grey


# ========= main =========

def cmd_show(args) -> None:
    """
    Flags:
      --rulebase PATH              : rule base document (default: packaged)
      --at x=1 y=2 / --at "x=1,y=2": point at which memberships/strengths are computed
      --fired-only                 : only rules with strength >= --min-alpha at --at
      --min-alpha FLOAT            : threshold for --fired-only (default 0.0)
    """
    rb = rule_base_from(args)

    xdict = pairs_to_dict(getattr(args, "at", None))
    fired_only = bool(getattr(args, "fired_only", False))
    min_alpha = float(getattr(args, "min_alpha", 0.0))

    alphas = {}
    fin = None
    if xdict:
        fin = Fuzzifier(rb).fuzzify(xdict)
        alphas = {f.rule.id: f.strength for f in InferenceEngine(rb).fire(fin)}

    # --- Features ---
    print("Features:")
    for name, var in rb.features.items():
        if fin is not None:
            parts: List[str] = []
            for lbl, term in var.terms.items():
                mu = fin[term.name]
                color = _ansi_color(mu)
                reset = _RESET if color else ""
                parts.append(f"{color}{lbl}({mu:.2f}){reset}")
            print(f"  {name}={fin.values[name]:g} -> " + ", ".join(parts))
        else:
            terms = ", ".join(f"{lbl}[{t.mf.describe()}]" for lbl, t in var.terms.items())
            print(f"  {name} [{var.vmin:g},{var.vmax:g}] -> terms: {terms}")

    # --- Outputs ---
    print("Categories:")
    for i, c in enumerate(rb.categories):
        suffix = "  (fallback)" if c == rb.fallback_category else ""
        print(f"  {i}: {c}{suffix}")
    print("Risk bands:")
    for band in rb.risk_bands.values():
        mf = f" mf={band.mf.describe()}" if band.mf is not None else ""
        print(f"  {band.name} value={band.value:g}{mf}")

    # --- Rules ---
    e = rb.engine
    print(f"Engine: tnorm={e.tnorm}, snorm={e.snorm}, threshold={e.threshold}, defuzz={e.defuzz}")
    print("Rules:")
    shown = 0
    for r in rb.rules:
        alpha_val: Optional[float] = alphas.get(r.id)
        if fired_only and alpha_val is not None and alpha_val < min_alpha:
            continue
        ants = " AND ".join(render_condition(t) for t in r.antecedent)
        suffix = f"  α={alpha_val:.4f}" if alpha_val is not None else ""
        print(f"  R{r.id}: IF {ants} THEN {' AND '.join(r.conclusions())}{suffix}")
        shown += 1

    if shown == 0:
        print("  (no rules to show with these filters)")
