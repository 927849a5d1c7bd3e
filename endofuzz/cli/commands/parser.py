import argparse
from ..argtypes import parse_keyval, LOG_LEVELS, LOG_LEVEL_DEFAULT
from .apply import cmd_apply
from .diagnose import cmd_diagnose
from .explain import cmd_explain
from .show import cmd_show
from .validate import cmd_validate

def build_parser():
    fmt = argparse.ArgumentDefaultsHelpFormatter
    ap = argparse.ArgumentParser(
        prog="endofuzz",
        description=("Endoscopy fuzzy inference CLI: explainable diagnosis from image-feature vectors "
                     "(validate -> show -> diagnose/explain -> apply)"),
        formatter_class=fmt,
        epilog=(
            "Examples:\n"
            "  endofuzz validate\n"
            "  endofuzz show --at textureIrregularity=0.9 redness=0.8 edgeDensity=0.3 "
            "lesionLikelihood=0.85 inflammation=0.2 --fired-only --min-alpha 0.1\n"
            "  endofuzz diagnose textureIrregularity=0.9 redness=0.8 edgeDensity=0.3 "
            "lesionLikelihood=0.85 inflammation=0.2 --json\n"
            "  endofuzz diagnose --features sample.json\n"
            "  endofuzz explain --rulebase custom.yaml textureIrregularity=0.9 ... --threshold 0.1\n"
            "  endofuzz apply --csv features.csv --out reports.csv\n"
        )
    )
    ap.add_argument("--log-level", choices=LOG_LEVELS, default=LOG_LEVEL_DEFAULT)

    sub = ap.add_subparsers(dest="cmd", required=True)

    def with_rulebase(sp):
        sp.add_argument("--rulebase", help="rule base document (.yaml/.yml/.json); default: packaged endoscopy.yaml")
        return sp

    # validate
    sp_v = with_rulebase(sub.add_parser("validate", help="Load and validate a rule base", formatter_class=fmt))
    sp_v.set_defaults(func=cmd_validate)

    # show
    sp_s = with_rulebase(sub.add_parser("show", help="Show features/terms/rules; optionally memberships at a point",
                                        formatter_class=fmt))
    sp_s.add_argument("--at", nargs="*", help="feature=value pairs")
    sp_s.add_argument("--fired-only", action="store_true", help="Only rules whose strength reaches --min-alpha at --at")
    sp_s.add_argument("--min-alpha", type=float, default=0.0, help="strength threshold for --fired-only")
    sp_s.set_defaults(func=cmd_show)

    # diagnose
    sp_d = with_rulebase(sub.add_parser("diagnose", help="Diagnosis report for one feature vector", formatter_class=fmt))
    sp_d.add_argument("kv", nargs="*", type=parse_keyval, help="feature=value pairs")
    sp_d.add_argument("--features", help="JSON/YAML file with the feature vector (kv pairs override it)")
    sp_d.add_argument("--json", action="store_true", help="print the report as JSON")
    sp_d.add_argument("--indent", type=int, default=2, help="JSON indentation")
    sp_d.set_defaults(func=cmd_diagnose)

    # explain
    sp_e = with_rulebase(sub.add_parser("explain", help="Rule-by-rule trace for one feature vector",
                                        formatter_class=fmt))
    sp_e.add_argument("kv", nargs="+", type=parse_keyval, help="feature=value pairs")
    sp_e.add_argument("--json", action="store_true")
    sp_e.add_argument("--threshold", type=float, default=0.0, help="hide rules with strength below this")
    sp_e.set_defaults(func=cmd_explain)

    # apply
    sp_a = with_rulebase(sub.add_parser("apply", help="Diagnose every row of a CSV (batch)", formatter_class=fmt))
    sp_a.add_argument("--csv", required=True, help="input CSV; header must name the features")
    sp_a.add_argument("--out", help="output CSV (stdout when omitted)")
    sp_a.add_argument("--keep-cols", default="", help="comma-separated input columns copied to the output")
    sp_a.set_defaults(func=cmd_apply)

    return ap
