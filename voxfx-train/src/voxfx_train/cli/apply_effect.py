"""``voxfx-apply``: apply a voice effect to an audio file.

Usage::

    voxfx-apply --input in.wav --output out.wav --effect robot
    voxfx-apply --input in.wav --output out.wav --effect custom --model voice.voxmodel
    voxfx-apply --list-effects
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from voxfx_core.catalog import list_effects
from voxfx_core.constants import SAMPLE_RATE
from voxfx_core.errors import VoxFXError
from voxfx_data.preprocessing import load_pcm, save_pcm
from voxfx_export.model_file import read_model_file

from voxfx_train.cloning import AdvancedEffectPipeline

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="voxfx-apply",
        description="Apply a catalog voice effect to an audio file.",
    )
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="Input audio file (any format soundfile can read).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output WAV path (16-bit PCM).",
    )
    parser.add_argument(
        "--effect",
        default="none",
        help="Effect id from the catalog (default: none).",
    )
    parser.add_argument(
        "--model",
        type=Path,
        default=None,
        help="Custom voice model (.voxmodel) for the 'custom' effect.",
    )
    parser.add_argument(
        "--sample-rate",
        type=int,
        default=SAMPLE_RATE,
        help=f"Processing sample rate (default: {SAMPLE_RATE}).",
    )
    parser.add_argument(
        "--match-input-duration",
        action="store_true",
        help="Keep the input duration for cloned and custom effects.",
    )
    parser.add_argument(
        "--list-effects",
        action="store_true",
        help="Print the effect catalog and exit.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose logging.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_effects:
        for spec in list_effects():
            print(f"{spec.id:<16} {spec.category.value:<8} {spec.display_name}")
        return

    if args.input is None or args.output is None:
        parser.error("--input and --output are required unless --list-effects is given")

    try:
        model = read_model_file(args.model) if args.model is not None else None
        data, sr = load_pcm(args.input, args.sample_rate)
        pipeline = AdvancedEffectPipeline(
            sample_rate=sr,
            match_input_duration=args.match_input_duration,
        )
        out = pipeline.apply_effect(data, args.effect, custom_model=model)
        save_pcm(args.output, out, sr)
    except (VoxFXError, ValueError) as exc:
        logger.error("%s", exc)
        sys.exit(1)

    logger.info("Applied effect %r: %s -> %s", args.effect, args.input, args.output)


if __name__ == "__main__":
    main()
