import csv
import json

import pytest

from endofuzz.cli.main import main

POLYP_ARGS = ["textureIrregularity=0.9", "redness=0.8", "edgeDensity=0.3",
              "lesionLikelihood=0.85", "inflammation=0.2"]


def test_validate(capsys):
    main(["validate"])
    out = capsys.readouterr().out
    assert out.startswith("OK: kvasir-afis")
    assert "rules=16" in out


def test_validate_broken_rule_base(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("categories: [a]\n", encoding="utf-8")
    with pytest.raises(SystemExit, match="error: .*broken.yaml"):
        main(["validate", "--rulebase", str(path)])


def test_diagnose_json(capsys):
    main(["diagnose", *POLYP_ARGS, "--json"])
    doc = json.loads(capsys.readouterr().out)
    assert doc["disease"] == "polyps"
    assert doc["riskLevel"] == "High"
    assert [r["id"] for r in doc["fuzzyRules"]] == [1, 15]


def test_diagnose_text(capsys):
    main(["diagnose", *POLYP_ARGS])
    out = capsys.readouterr().out
    assert "Disease: polyps (confidence 100.0%)" in out
    assert "Risk: 62.50 (High)" in out
    assert "R1: IF textureIrregularity is high AND lesionLikelihood is high" in out


def test_diagnose_features_file(tmp_path, capsys):
    path = tmp_path / "vec.yaml"
    path.write_text("\n".join(a.replace("=", ": ") for a in POLYP_ARGS), encoding="utf-8")
    main(["diagnose", "--features", str(path), "redness=0.0", "--json"])
    doc = json.loads(capsys.readouterr().out)
    assert doc["disease"] == "polyps"


def test_diagnose_missing_feature():
    with pytest.raises(SystemExit, match="missing inflammation"):
        main(["diagnose", *POLYP_ARGS[:-1]])


def test_diagnose_bad_pair():
    with pytest.raises(SystemExit):
        main(["diagnose", "redness"])


def test_explain_json(capsys):
    main(["explain", *POLYP_ARGS, "--json", "--threshold", "0.01"])
    doc = json.loads(capsys.readouterr().out)
    assert [r["rule_id"] for r in doc["rules"]] == [1, 15]
    assert doc["rules"][0]["antecedent"][0] == {"term": "textureIrregularity:high", "value": 0.9, "mu": 1.0}
    assert doc["diseases"]["polyps"] == 1.0
    assert doc["threshold"] == 0.1


def test_explain_text(capsys):
    main(["explain", *POLYP_ARGS])
    out = capsys.readouterr().out
    assert " *R1: IF textureIrregularity:high" in out
    assert "Risk band strengths:" in out


def test_show_at_point(capsys):
    main(["show", "--at", *POLYP_ARGS, "--fired-only", "--min-alpha", "0.1"])
    out = capsys.readouterr().out
    assert "edgeDensity=0.3 -> low(0.50), medium(0.20), high(0.00)" in out
    assert "R1: IF textureIrregularity is high AND lesionLikelihood is high" in out
    assert "R8:" not in out


def test_show_catalog(capsys):
    main(["show"])
    out = capsys.readouterr().out
    assert "textureIrregularity [0,1] -> terms: low[tri 0 0.15 0.45]" in out
    assert "8: other-normal/diagnostic-categories  (fallback)" in out


def test_apply(tmp_path, capsys):
    src = tmp_path / "in.csv"
    dst = tmp_path / "out.csv"
    src.write_text(
        "image,textureIrregularity,redness,edgeDensity,lesionLikelihood,inflammation\n"
        "a.jpg,0.9,0.8,0.3,0.85,0.2\n"
        "b.jpg,0,0,0,0,0\n",
        encoding="utf-8",
    )
    main(["apply", "--csv", str(src), "--out", str(dst), "--keep-cols", "image"])
    assert "2 results written" in capsys.readouterr().out
    with open(dst, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert rows[0] == {"image": "a.jpg", "disease": "polyps", "confidence": "100.00",
                       "riskScore": "62.50", "riskLevel": "High", "firedRules": "1 15"}
    assert rows[1]["disease"] == "other-normal/diagnostic-categories"
    assert rows[1]["firedRules"] == ""


def test_apply_missing_column(tmp_path):
    src = tmp_path / "in.csv"
    src.write_text("redness\n0.5\n", encoding="utf-8")
    with pytest.raises(SystemExit, match="missing columns"):
        main(["apply", "--csv", str(src)])


def test_apply_bad_row(tmp_path):
    src = tmp_path / "in.csv"
    src.write_text(
        "textureIrregularity,redness,edgeDensity,lesionLikelihood,inflammation\n"
        "0.9,1.8,0.3,0.85,0.2\n",
        encoding="utf-8",
    )
    with pytest.raises(SystemExit, match="line 2"):
        main(["apply", "--csv", str(src)])
