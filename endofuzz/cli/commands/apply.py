import csv
import logging
import sys
from typing import Dict, List

from ..argtypes import rule_base_from
from ...fuzzy.core.types import FuzzyError
from ...fuzzy.model.diagnosis import Diagnoser

logger = logging.getLogger(__name__)

OUT_COLUMNS = ["disease", "confidence", "riskScore", "riskLevel", "firedRules"]

def _cell_to_float(name: str, raw: str, lineno: int) -> float:
    try:
        return float(raw)
    except ValueError:
        raise SystemExit(f"[apply] line {lineno}: column '{name}' is not a number: {raw!r}") from None

def cmd_apply(args):
    """
    Batch diagnosis of a CSV. The header must name every feature of the rule base;
    other columns are ignored unless listed in --keep-cols (copied to the output).
    """
    diag = Diagnoser(rule_base_from(args))
    features = list(diag.rb.features)
    keep = [c.strip() for c in (getattr(args, "keep_cols", "") or "").split(",") if c.strip()]

    out_path = getattr(args, "out", None)
    with open(args.csv, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        if not reader.fieldnames:
            raise SystemExit("Empty CSV file.")
        missing = [c for c in features + keep if c not in reader.fieldnames]
        if missing:
            raise SystemExit(f"CSV is missing columns: {', '.join(missing)} (available: {reader.fieldnames})")

        out_f = open(out_path, "w", newline="", encoding="utf-8") if out_path else sys.stdout
        try:
            writer = csv.writer(out_f)
            writer.writerow(keep + OUT_COLUMNS)
            n = 0
            for lineno, row in enumerate(reader, 2):
                data: Dict[str, float] = {c: _cell_to_float(c, row[c], lineno) for c in features}
                try:
                    report = diag.diagnose(data)
                except FuzzyError as e:
                    raise SystemExit(f"[apply] line {lineno}: {e}") from e
                fired: List[str] = [str(r.id) for r in report.fired_rules]
                writer.writerow([row[c] for c in keep] + [
                    report.disease,
                    f"{report.confidence:.2f}",
                    f"{report.risk_score:.2f}",
                    report.risk_level.value,
                    " ".join(fired),
                ])
                n += 1
        finally:
            if out_path:
                out_f.close()
    logger.info("Diagnosed %d rows from %s", n, args.csv)
    if out_path:
        print(f"[apply] {n} results written to {out_path}")
