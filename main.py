"""
LinSolver — Command-line entry point.

Solve a linear system given as rows ``a11 a12 ... | b1`` and print the
elimination trace, the analysis and the answer.

    python main.py "2 1 | 3" "1 -1 | 0"
"""

import argparse
import json
import logging
import sys

from solver import solve_system
from solver.parsing import parse_equation_rows


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Solve a system of linear equations step by step.",
    )
    parser.add_argument(
        "rows", nargs="+",
        help='one equation per argument, e.g. "2 1 | 3"',
    )
    parser.add_argument("--json", action="store_true",
                        help="print the full result as JSON")
    parser.add_argument("--quiet", action="store_true",
                        help="omit the step-by-step trace")
    parser.add_argument("--verbose", action="store_true",
                        help="log every row operation")
    return parser


def render(result: dict, show_steps: bool = True) -> str:
    """Plain-text report for the terminal."""
    lines = ["System:", result["given"]["inputs"]["augmented_matrix"], ""]
    if show_steps:
        for step in result["steps"]:
            lines.append(f"Step {step['step_number']}: {step['description']}"
                         f": {step['explanation']}")
            lines.append(step["expression"])
            lines.append("")
    lines.append(result["result"]["explanation"])
    lines.append("")
    lines.append(result["final_answer"])
    if result["verification_steps"]:
        lines.append("")
        lines.append(f"Verification: {result['summary']['validation_status']}")
    return "\n".join(lines)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        matrix, vector = parse_equation_rows(args.rows)
        result = solve_system(matrix, vector)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False))
    else:
        print(render(result, show_steps=not args.quiet))
    return 0


if __name__ == "__main__":
    sys.exit(main())
