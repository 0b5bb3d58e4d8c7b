"""Summarize a COM displacement CSV log."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from body_com.service import summarize_displacement_log  # pylint: disable=wrong-import-position


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Summarize a com_data.csv displacement log.")
    parser.add_argument("log", type=Path, help="Path to the CSV log written during tracking.")
    parser.add_argument("--json", action="store_true", help="Print the summary as JSON.")
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    try:
        summary = summarize_displacement_log(args.log)
    except FileNotFoundError as exc:
        parser.error(str(exc))

    if args.json:
        print(json.dumps(summary.as_dict(), indent=2))
        return
    print(f"Rows: {summary.row_count}")
    if summary.final is None:
        return
    print("Final displacement: X: {:.2f} mm, Y: {:.2f} mm, Z: {:.2f} mm".format(*summary.final))
    print("Max |displacement|: X: {:.2f} mm, Y: {:.2f} mm, Z: {:.2f} mm".format(*summary.max_abs))
    print(f"Path length: {summary.path_length:.2f} mm")


if __name__ == "__main__":
    main()
