#!/usr/bin/env python3
import json
import sys
from pathlib import Path
from statistics import mean, median


def safe_mean(xs):
    xs = [x for x in xs if x is not None]
    return mean(xs) if xs else None


def pct(n, d):
    return (100.0 * n / d) if d else 0.0


def main():
    if len(sys.argv) < 2:
        print("Usage: python scripts/summarize_run.py results/run_YYYYMMDD_HHMMSS")
        sys.exit(1)

    run_dir = Path(sys.argv[1])
    metrics_path = run_dir / "metrics.json"
    if not metrics_path.exists():
        raise FileNotFoundError(f"Missing: {metrics_path}")

    m = json.loads(metrics_path.read_text())
    steps = m.get("steps", [])
    n = len(steps)
    if n == 0:
        print("No steps found in metrics.json")
        return

    summary = m.get("summary", {})
    step_ms = [s.get("stages_ms", {}).get("step") for s in steps]
    deltas = [abs(s.get("heading_delta", 0.0)) for s in steps]
    fallback = sum(1 for s in steps if s.get("fallback"))
    candidates = [s.get("candidate_count", 0) for s in steps]

    print("\n============ PURE PURSUIT RUN SUMMARY ============")
    print(f"Run dir: {run_dir}")
    print(f"Steps: {n}  arrived={summary.get('arrived')}")
    print(f"Final position: {summary.get('final_position')}  heading={summary.get('final_heading')}")

    sm = safe_mean(step_ms)
    print(f"\nStep latency (ms): avg={sm:.4f}" if sm is not None else "\nStep latency (ms): (missing)")

    print("\nHeading changes (deg/step):")
    print(f"  avg={mean(deltas):.3f}  med={median(deltas):.3f}  max={max(deltas):.3f}")

    print("\nTarget selection:")
    print(f"  fallback steps: {fallback}/{n} ({pct(fallback, n):.1f}%)")
    print(f"  candidates/step: avg={mean(candidates):.2f}  max={max(candidates)}")
    print("==================================================\n")


if __name__ == "__main__":
    main()
