"""CLI to track the whole-body center of mass over a skeleton stream."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from body_com.config import build_config_from_env  # pylint: disable=wrong-import-position
from body_com.features.config import SEGMENT_MODELS  # pylint: disable=wrong-import-position
from body_com.sensor import ReplayBackend, SetupError, load_calibration  # pylint: disable=wrong-import-position
from body_com.service import run_tracking  # pylint: disable=wrong-import-position
from body_com.vis import ImageFileRenderer, OpenCVDisplay, ScriptedInput  # pylint: disable=wrong-import-position

LOGGER = logging.getLogger("body_com.scripts.run_com_tracking")

SUCCESS = 0
SETUP_FAILURE = 1

MODES = {
    # headless: log displacement once a reference is set
    "pipe": {"displacement_mode": "after-reference", "project_to_color": False},
    # preview: project and display every frame, reference starts at the origin
    "stream": {"displacement_mode": "always", "project_to_color": True},
}


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Track body center of mass from recorded skeleton frames.")
    parser.add_argument("recording", type=Path, help="Skeleton recording JSON to replay.")
    parser.add_argument(
        "--mode",
        choices=sorted(MODES),
        default="pipe",
        help="'pipe' logs displacement after a reference is set; 'stream' shows a live overlay (default: pipe).",
    )
    parser.add_argument("--calibration", type=Path, default=None, help="Optional calibration JSON.")
    parser.add_argument(
        "--segment-model",
        choices=sorted(SEGMENT_MODELS),
        default=None,
        help="Segment coefficient table (default: BASIC_8 or BODY_COM_SEGMENT_MODEL).",
    )
    parser.add_argument(
        "--existence",
        choices=["all", "confidence"],
        default=None,
        help="Keep every segment, or only segments whose joints are confidently tracked.",
    )
    parser.add_argument(
        "--min-confidence",
        choices=["NONE", "LOW", "MEDIUM"],
        default=None,
        help="Joints must be tracked above this level for their segments to count (default: LOW).",
    )
    parser.add_argument("--log", type=Path, default=None, help="CSV displacement log (default: com_data.csv).")
    parser.add_argument("--no-log", action="store_true", help="Disable the displacement log.")
    parser.add_argument("--capture-timeout-ms", type=int, default=None, help="Capture timeout (default: 1000).")
    parser.add_argument(
        "--inference-timeout-ms",
        type=int,
        default=None,
        help="Body tracking result timeout; waits indefinitely when omitted.",
    )
    parser.add_argument("--max-frames", type=int, default=None, help="Stop after this many frames.")
    parser.add_argument(
        "--reference-at",
        type=int,
        action="append",
        default=[],
        help="Frame index at which to set the reference pose (repeatable, headless runs).",
    )
    parser.add_argument("--quit-at", type=int, default=None, help="Frame index at which to stop (headless runs).")
    parser.add_argument("--save-frames", type=Path, default=None, help="Write overlay frames to this directory.")
    parser.add_argument("--no-display", action="store_true", help="Never open a preview window.")
    parser.add_argument("--json", action="store_true", help="Print the run summary as JSON.")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose)

    mode = MODES[args.mode]
    try:
        config = build_config_from_env(
            segment_model=args.segment_model,
            existence_policy=args.existence,
            min_confidence=args.min_confidence,
            displacement_mode=mode["displacement_mode"],
            log_path=args.log,
            capture_timeout_ms=args.capture_timeout_ms,
            inference_timeout_ms=args.inference_timeout_ms,
            max_frames=args.max_frames,
            project_to_color=mode["project_to_color"] or args.save_frames is not None,
        )
    except ValueError as exc:
        parser.error(str(exc))
    if args.no_log:
        config.log_path = None

    calibration = None
    if args.calibration is not None:
        try:
            calibration = load_calibration(args.calibration)
        except SetupError as exc:
            LOGGER.error("%s", exc)
            print("Exiting...")
            return SETUP_FAILURE
    backend = ReplayBackend(recording_path=args.recording, calibration=calibration)

    renderer = None
    operator_input = None
    if args.mode == "stream" and not args.no_display:
        renderer = operator_input = OpenCVDisplay()
    elif args.save_frames is not None:
        renderer = ImageFileRenderer(args.save_frames)
    if operator_input is None:
        operator_input = ScriptedInput(set_reference_at=args.reference_at, quit_at=args.quit_at)

    try:
        summary = run_tracking(backend, config, renderer=renderer, operator_input=operator_input)
    except SetupError as exc:
        LOGGER.error("%s", exc)
        print("Exiting...")
        return SETUP_FAILURE

    if args.json:
        print(json.dumps(summary.as_dict(), indent=2))
    else:
        print(
            f"Processed {summary.frames_processed} frames "
            f"({summary.skeletons_processed} skeletons), wrote {summary.rows_written} log rows; "
            f"stopped: {summary.stop_reason.value if summary.stop_reason else 'unknown'}"
        )
    print("Exiting...")
    return SUCCESS


if __name__ == "__main__":
    sys.exit(main())
