import json
from ..argtypes import pairs_to_dict, rule_base_from
from ...fuzzy.model.diagnosis import Diagnoser
from ...fuzzy.model.variable import split_term

def cmd_explain(args):
    diag = Diagnoser(rule_base_from(args))
    fin, result = diag.infer(pairs_to_dict(args.kv))
    threshold = float(getattr(args, "threshold", 0.0))
    report_threshold = diag.rb.engine.threshold

    rules = []
    for f in result.firings:
        if f.strength < threshold:
            continue
        rules.append({
            "rule_id": f.rule.id,
            "antecedent": [{"term": t, "value": fin.values[split_term(t)[0]], "mu": mu}
                           for t, mu in zip(f.rule.antecedent, f.memberships)],
            "alpha": f.strength,
            "reported": f.fired,
            "consequent": {"disease": f.rule.disease, "risk": f.rule.risk},
        })
    agg = result.conclusion

    if getattr(args, "json", False):
        print(json.dumps({
            "rules": rules,
            "diseases": dict(agg.diseases),
            "risks": dict(agg.risks),
            "threshold": report_threshold,
        }, indent=2))
        return

    print(f"Engine: tnorm={diag.rb.engine.tnorm}, snorm={diag.rb.engine.snorm}, report threshold={report_threshold}")
    for r in rules:
        ants = " AND ".join(f"{a['term']} (μ={a['mu']:.3f})" for a in r["antecedent"])
        then = " AND ".join(f"{k} is {v}" for k, v in r["consequent"].items() if v is not None)
        mark = "*" if r["reported"] else " "
        print(f" {mark}R{r['rule_id']}: IF {ants} THEN {then}  alpha={r['alpha']:.4f}")
    print("Disease strengths:")
    for c, s in agg.diseases.items():
        print(f"  {c}: {s:.4f}")
    print("Risk band strengths:")
    for b, s in agg.risks.items():
        print(f"  {b}: {s:.4f}")
