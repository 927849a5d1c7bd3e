import json
from typing import Dict

import yaml

from ..argtypes import pairs_to_dict, rule_base_from
from ...fuzzy.model.diagnosis import Diagnoser
from ...fuzzy.model.report import DiagnosisReport

def _load_features(path: str) -> Dict[str, object]:
    try:
        with open(path, encoding="utf-8") as f:
            if path.lower().endswith((".yml", ".yaml")):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except OSError as e:
        raise SystemExit(f"Cannot read features file {path}: {e}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise SystemExit(f"Malformed features file {path}: {e}")
    if not isinstance(data, dict):
        raise SystemExit(f"Features file {path} must contain a mapping feature -> value.")
    return data

def format_report(report: DiagnosisReport) -> str:
    lines = [
        f"Disease: {report.disease} (confidence {report.confidence:.1f}%)",
        f"Risk: {report.risk_score:.2f} ({report.risk_level.value})",
        "Fired rules:",
    ]
    if not report.fired_rules:
        lines.append("  (none)")
    for r in report.fired_rules:
        lines.append(f"  R{r.id}: IF {' AND '.join(r.conditions)} THEN {r.conclusion}  α={r.strength:.3f}")
        lines.append(f"      {r.explanation}")
    lines.append("Recommendations:")
    lines.extend(f"  - {s}" for s in report.recommendations)
    lines.append(f"Summary: {report.summary}")
    return "\n".join(lines)

def cmd_diagnose(args):
    data: Dict[str, object] = {}
    if getattr(args, "features", None):
        data.update(_load_features(args.features))
    data.update(pairs_to_dict(getattr(args, "kv", None)))
    if not data:
        raise SystemExit("No features given (use feature=value pairs or --features FILE).")

    report = Diagnoser(rule_base_from(args)).diagnose(data)
    if getattr(args, "json", False):
        print(report.to_json(indent=getattr(args, "indent", 2)))
    else:
        print(format_report(report))
