from __future__ import annotations
import argparse
from pathlib import Path

from bnanalysis.config import DEFAULT_STATE_CAP, DEFAULT_STEP_CAP, AnalysisConfig
from bnanalysis.loader import load_networks, write_result_json
from bnanalysis.pipeline import analyze_specs, summarize

def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Find attractors of synchronous Boolean networks")
    ap.add_argument("rules", nargs="+", help="rule files (.txt one rule per line, or .csv)")
    ap.add_argument("--state-cap", type=int, default=DEFAULT_STATE_CAP)
    ap.add_argument("--step-cap", type=int, default=DEFAULT_STEP_CAP)
    ap.add_argument("--c-style", action="store_true", help="accept &&, || and ~ in rule files")
    ap.add_argument("--json-dir", type=Path, help="write one <network>.json result per input")
    ap.add_argument("--csv-dir", type=Path, help="write one <network>_attractors.csv table per input")
    ap.add_argument("--summary", type=Path, help="write the per-network summary table to this CSV")
    return ap.parse_args(argv)

def main(argv=None):
    args = parse_args(argv)
    cfg = AnalysisConfig(state_cap=args.state_cap, step_cap=args.step_cap)
    specs, meta = load_networks(args.rules, c_style=args.c_style)
    print(f"Loaded {meta['n_networks']} networks")

    for out_dir in (args.json_dir, args.csv_dir):
        if out_dir is not None:
            out_dir.mkdir(parents=True, exist_ok=True)

    # each network is analysed once; the summary reuses these outcomes
    items = analyze_specs(specs, cfg, progress=True)

    failures = 0
    for item in items:
        name, outcome = item.spec.name, item.outcome
        if args.json_dir is not None:
            write_result_json(outcome, args.json_dir / f"{name}.json")
        if not outcome.ok:
            failures += 1
            print(f"{name}: cannot analyse: {outcome.message}")
            continue

        kinds = {}
        for a in outcome.attractors:
            kinds[a.type.value] = kinds.get(a.type.value, 0) + 1
        print(f"{name}: {len(outcome.attractors)} attractors {kinds}, "
              f"{outcome.explored_state_count}/{outcome.total_state_space} states explored")
        for w in outcome.warning_messages:
            print(f"  warning: {w}")
        if args.csv_dir is not None:
            outcome.attractor_table().to_csv(args.csv_dir / f"{name}_attractors.csv", index=False)

    if args.summary is not None:
        df = summarize(items, cfg)
        df.to_csv(args.summary, index=False)
        print(f"Wrote: {args.summary}")

    return 1 if failures else 0

if __name__ == "__main__":
    raise SystemExit(main())
