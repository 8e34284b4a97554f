#!/usr/bin/env python3
"""
build_slideshow_script.py - Plan a slideshow and write its Premiere Pro script.

Usage examples
--------------
# Write create_slideshow.jsx for a project folder (30fps, ±2s variation)
  python build_slideshow_script.py ~/Projects/Trip

# 29.97fps sequence, no variation, reproducible
  python build_slideshow_script.py ~/Projects/Trip --fps 29.97 --variation 0 --seed 7

# Use the sequence timebase reported by Premiere (ticks per frame)
  python build_slideshow_script.py ~/Projects/Trip --ticks-per-frame 8475667200

# Print the frame plan only
  python build_slideshow_script.py ~/Projects/Trip --plan-only
"""

from __future__ import annotations

import argparse
import json
import random
import sys
from pathlib import Path

from autoslideshow.config import settings
from autoslideshow.services import JsxGenerator, SlideshowService


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Plan a frame-accurate slideshow and write its Premiere Pro script."
    )
    parser.add_argument("folder", help="Project folder with images/ and voiceovers/")
    parser.add_argument(
        "--variation",
        type=float,
        default=settings.default_max_variation,
        help="Maximum per-image deviation in seconds (default: %(default)s)",
    )
    parser.add_argument(
        "--fps",
        type=float,
        default=None,
        help=f"Sequence frame rate (default: {settings.default_fps})",
    )
    parser.add_argument(
        "--ticks-per-frame",
        type=int,
        default=None,
        help="Sequence timebase in host ticks; overrides --fps",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible variation")
    parser.add_argument("-o", "--output", default=None, help="Output .jsx path")
    parser.add_argument(
        "--plan-only",
        action="store_true",
        help="Print the frame plan as JSON and exit",
    )
    return parser


def main() -> int:
    args = _parser().parse_args()
    folder = Path(args.folder).expanduser()

    if args.output is None and not args.plan_only:
        try:
            generated = SlideshowService.write_script(
                folder,
                max_variation=args.variation,
                frame_rate=args.fps,
                ticks_per_frame=args.ticks_per_frame,
                seed=args.seed,
            )
        except ValueError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        print(f"Script: {generated.script_path}")
        print(f"Log:    {generated.log_path}")
        return 0

    rng = random.Random(args.seed) if args.seed is not None else None
    try:
        plan = SlideshowService.build_plan(
            folder,
            max_variation=args.variation,
            frame_rate=args.fps,
            ticks_per_frame=args.ticks_per_frame,
            rng=rng,
        )
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.plan_only:
        print(json.dumps({
            "frame_rate": plan.frame_rate,
            "ticks_per_frame": plan.ticks_per_frame,
            "total_frames": plan.duration_plan.total_frames,
            "frame_counts": plan.duration_plan.frame_counts,
        }, indent=2))
        return 0

    output = Path(args.output).expanduser()
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(JsxGenerator.generate_create_script(plan, settings), encoding="utf-8")
    print(f"Script: {output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
