#!/usr/bin/env python3
"""Sample plan workbook generator.

Generates synthetic ISO-style implementation checklists for manual testing and
timing of the importer. Layout mirrors the workbooks seen in practice:
- Rows 1-2: banner / project title rows
- Row 3: header row (ID, Task Name, Deliverables, Dependency, Week,
  Task Ownership, Status)
- Row 4+: numbered rows ("1", "1.1", "1.1.1", ...)

With --noise the generator also sprinkles blank rows, section notes without an
id and orphan task ids whose phase / subphase rows are missing.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

HEADER = ["ID", "Task Name", "Deliverables", "Dependency", "Week", "Task Ownership", "Status"]
STATUSES = ["Completed", "In Progress", "To be started", "Not Started", "Under Review", ""]
OWNERS = ["John Doe", "Jane Smith", "Client", "Consultant", "A. Kumar", ""]


def generate_plan_rows(
    phases: int, sub_phases: int, tasks: int, seed: int = 42, noise: bool = False
) -> list[list[Any]]:
    rng = np.random.default_rng(seed)
    rows: list[list[Any]] = [
        ["ISO 27001 Implementation", None, None, None, None, None, None],
        ["DETAILED PROJECT PLAN", None, "Client: Sample Co", None, None, None, None],
        list(HEADER),
    ]
    for p in range(1, phases + 1):
        rows.append([str(p), f"Phase {p} activities", None, None, None, None, None])
        for s in range(1, sub_phases + 1):
            rows.append([f"{p}.{s}", f"Workstream {p}.{s}", None, None, None, None, None])
            for t in range(1, tasks + 1):
                rows.append([
                    f"{p}.{s}.{t}",
                    f"Task {p}.{s}.{t}",
                    f"Deliverable for {p}.{s}.{t}",
                    f"{p}.{s}.{t - 1}" if t > 1 else None,
                    f"W{int(rng.integers(1, 27))}",
                    str(rng.choice(OWNERS)) or None,
                    str(rng.choice(STATUSES)) or None,
                ])
            if noise:
                rows.append([None] * len(HEADER))
                rows.append([None, "Notes: review with client", None, None, None, None, None])
        if noise:
            rows.append([f"Appendix {p}", "Reference material", None, None, None, None, None])
    if noise:
        orphan = phases + 1
        rows.append([f"{orphan}.1.1", "Orphan task", None, None, None, "Jane Smith", "In Progress"])
    return rows


def create_plan_workbook(output_path: Path, rows: list[list[Any]]) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name="Project Plan", header=False, index=False)
    print(f"Created plan workbook: {output_path} ({len(rows)} rows)")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic ISO-style project plan workbook",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s plan.xlsx
  %(prog)s big_plan.xlsx --phases 12 --sub-phases 6 --tasks 20
  %(prog)s messy_plan.xlsx --noise --seed 7
        """,
    )
    parser.add_argument("output", type=Path, help="Output .xlsx path")
    parser.add_argument("--phases", type=int, default=5, help="Number of phases (default: 5)")
    parser.add_argument("--sub-phases", type=int, default=3, help="Subphases per phase (default: 3)")
    parser.add_argument("--tasks", type=int, default=4, help="Tasks per subphase (default: 4)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--noise", action="store_true", help="Add blank / unnumbered / orphan rows")
    args = parser.parse_args()

    for name in ("phases", "sub_phases", "tasks"):
        if getattr(args, name) <= 0:
            print(f"Error: --{name.replace('_', '-')} must be positive", file=sys.stderr)
            return 1

    rows = generate_plan_rows(args.phases, args.sub_phases, args.tasks, seed=args.seed, noise=args.noise)
    try:
        create_plan_workbook(args.output, rows)
    except OSError as e:
        print(f"Error writing workbook: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
