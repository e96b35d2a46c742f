import argparse
import gc
import time
import tracemalloc
from pathlib import Path

from jsonmend import constants as app_constants
from jsonmend.domain_impl.json import json_format_core
from jsonmend.domain_impl.json import json_io_core
from jsonmend.domain_impl.json import json_parse_core
from jsonmend.domain_impl.json import json_repair_core
from jsonmend.domain_impl.json import json_scan_core


def _build_synthetic_payload(records: int) -> str:
    # Deterministic synthetic payload for repeatable local/CI perf checks.
    records = max(20, int(records))
    users = []
    for idx in range(records):
        users.append(
            {
                "id": f"user-{idx}",
                "name": f"User {idx}",
                "email": f"user{idx}@example.com",
                "stats": {"level": idx % 60, "xp": idx * 17, "ratio": idx / 7.0},
                "flags": [idx % 2 == 0, idx % 3 == 0, None],
            }
        )
    return json_format_core.minify({"users": users, "meta": {"records": records}})


def _build_damaged_payload(records: int) -> str:
    # Same shape as the synthetic payload, written the way hand-edited or
    # Python-printed JSON tends to arrive: bare keys, single quotes, trailing
    # commas and Python literals.
    records = max(20, int(records))
    rows = []
    for idx in range(records):
        flags = ", ".join("True" if flag else "False" for flag in (idx % 2 == 0, idx % 3 == 0))
        rows.append(
            f"  {{id: 'user-{idx}', name: 'User {idx}', email: 'user{idx}@example.com',"
            f" stats: {{level: {idx % 60}, xp: {idx * 17},}}, flags: [{flags}, None,],}},"
        )
    return "{users: [\n" + "\n".join(rows) + f"\n], // generated\n meta: {{records: {records}}}"


def _count_nodes(root) -> tuple[int, int]:
    count = 0
    max_depth = 0
    stack = [(root, 1)]
    while stack:
        value, depth = stack.pop()
        count += 1
        if depth > max_depth:
            max_depth = depth
        if isinstance(value, dict):
            for item in value.values():
                stack.append((item, depth + 1))
        elif isinstance(value, list):
            for item in value:
                stack.append((item, depth + 1))
    return count, max_depth


def _run_once(payload_text: str, damaged_text: str) -> dict:
    parse_start = time.perf_counter()
    result = json_parse_core.parse(payload_text)
    parse_ms = (time.perf_counter() - parse_start) * 1000.0
    if not result.is_valid:
        raise ValueError(f"payload is not valid JSON: {result.error.message}")

    total_start = time.perf_counter()
    node_count, max_depth = _count_nodes(result.value)
    token_count = sum(1 for _ in json_scan_core.iter_tokens(payload_text))
    json_format_core.pretty_print(result.value)
    json_format_core.minify(result.value)
    total_ms = (time.perf_counter() - total_start) * 1000.0

    repair_start = time.perf_counter()
    report = json_repair_core.repair_with_report(damaged_text)
    repair_ms = (time.perf_counter() - repair_start) * 1000.0

    return {
        "parse_ms": parse_ms,
        "total_ms": total_ms,
        "repair_ms": repair_ms,
        "repair_changed": report.changed,
        "node_count": node_count,
        "max_depth": max_depth,
        "token_count": token_count,
    }


def _fmt_bytes(num_bytes: int) -> str:
    mib = float(num_bytes) / (1024.0 * 1024.0)
    return f"{mib:.2f} MiB"


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Quick performance/memory smoke check for the JSON core."
    )
    parser.add_argument(
        "--input",
        type=Path,
        help="Path to a JSON file. If omitted, synthetic payload is used.",
    )
    parser.add_argument("--synthetic-records", type=int, default=app_constants.PERF_SYNTHETIC_RECORDS_DEFAULT)
    parser.add_argument("--warmup", type=int, default=1)
    parser.add_argument("--iterations", type=int, default=5)
    # Strict gate exits non-zero when perf thresholds regress.
    parser.add_argument("--strict", action="store_true")
    parser.add_argument("--max-parse-ms", type=float, default=app_constants.PERF_MAX_PARSE_MS)
    parser.add_argument("--max-repair-ms", type=float, default=app_constants.PERF_MAX_REPAIR_MS)
    parser.add_argument("--max-total-ms", type=float, default=app_constants.PERF_MAX_TOTAL_MS)
    args = parser.parse_args(argv)

    records = max(20, int(args.synthetic_records))
    if args.input:
        if not args.input.exists():
            print(f"ERROR: input not found: {args.input}")
            return 2
        source = str(args.input)
        try:
            payload_text = json_io_core.load_document_text(args.input)
        except (OSError, ValueError, TypeError, RuntimeError, AttributeError, KeyError, IndexError, ImportError) as exc:
            print(f"ERROR: failed to load input payload: {exc}")
            return 2
    else:
        source = f"synthetic:{records}"
        payload_text = _build_synthetic_payload(records)
    damaged_text = _build_damaged_payload(records)

    iterations = max(1, int(args.iterations))
    warmup = max(0, int(args.warmup))

    samples = []
    peak_samples = []
    tracemalloc.start()
    try:
        for idx in range(warmup + iterations):
            gc.collect()
            try:
                metrics = _run_once(payload_text, damaged_text)
            except ValueError as exc:
                print(f"ERROR: {exc}")
                return 2
            _, peak_bytes = tracemalloc.get_traced_memory()
            if idx < warmup:
                continue
            samples.append(metrics)
            peak_samples.append(peak_bytes)
    finally:
        tracemalloc.stop()

    avg_parse = sum(m["parse_ms"] for m in samples) / len(samples)
    avg_repair = sum(m["repair_ms"] for m in samples) / len(samples)
    max_total = max(m["total_ms"] for m in samples)
    repaired = all(m["repair_changed"] for m in samples)

    print("perf_smoke summary")
    print(f"- source: {source}")
    print(f"- iterations: {iterations} (warmup={warmup})")
    print(f"- payload size: {len(payload_text):,} chars")
    print(f"- avg parse: {avg_parse:.2f} ms")
    print(f"- avg repair: {avg_repair:.2f} ms (repaired={repaired})")
    print(f"- max scan+format: {max_total:.2f} ms")
    print(f"- max nodes: {max(m['node_count'] for m in samples):,}")
    print(f"- max depth: {max(m['max_depth'] for m in samples)}")
    print(f"- tokens: {max(m['token_count'] for m in samples):,}")
    print(f"- peak traced memory: {_fmt_bytes(max(peak_samples))}")

    if not args.strict:
        return 0

    failures = []
    if avg_parse > float(args.max_parse_ms):
        failures.append(f"avg parse {avg_parse:.2f} ms > {args.max_parse_ms:.2f} ms")
    if avg_repair > float(args.max_repair_ms):
        failures.append(f"avg repair {avg_repair:.2f} ms > {args.max_repair_ms:.2f} ms")
    if max_total > float(args.max_total_ms):
        failures.append(f"max scan+format {max_total:.2f} ms > {args.max_total_ms:.2f} ms")
    if not repaired:
        failures.append("damaged payload was not repaired")

    if failures:
        print("perf_smoke strict gate: FAIL")
        for failure in failures:
            print(f"- {failure}")
        return 1

    print("perf_smoke strict gate: PASS")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
