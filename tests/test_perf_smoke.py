import importlib.util
from pathlib import Path

from jsonmend.domain_impl.json.json_parse_core import parse
from jsonmend.domain_impl.json.json_repair_core import repair_with_report

_TOOL_PATH = Path(__file__).resolve().parents[1] / "tools" / "perf_smoke.py"


def _load_tool():
    spec = importlib.util.spec_from_file_location("perf_smoke", _TOOL_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_synthetic_payload_is_valid():
    perf_smoke = _load_tool()
    result = parse(perf_smoke._build_synthetic_payload(20))
    assert result.is_valid
    assert len(result.value["users"]) == 20


def test_damaged_payload_repairs_to_same_shape():
    perf_smoke = _load_tool()
    report = repair_with_report(perf_smoke._build_damaged_payload(20))
    assert report.changed
    value = parse(report.text).value
    assert len(value["users"]) == 20
    assert value["users"][0]["flags"] == [True, True, None]
    assert value["meta"] == {"records": 20}


def test_main_runs_strict_gate(capsys):
    perf_smoke = _load_tool()
    code = perf_smoke.main(
        [
            "--synthetic-records",
            "20",
            "--iterations",
            "1",
            "--warmup",
            "0",
            "--strict",
            "--max-parse-ms",
            "60000",
            "--max-repair-ms",
            "60000",
            "--max-total-ms",
            "60000",
        ]
    )
    assert code == 0
    assert "perf_smoke strict gate: PASS" in capsys.readouterr().out
