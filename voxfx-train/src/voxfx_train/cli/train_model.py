"""``voxfx-train``: train a custom voice model from recordings.

Usage::

    voxfx-train --samples s1.wav s2.wav s3.wav s4.wav s5.wav \\
        --name my_voice --registry-dir models/ --gender female --emotion happy
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from voxfx_core.constants import SAMPLE_RATE
from voxfx_core.errors import VoxFXError
from voxfx_core.types import Age, Emotion, Gender, TrainingProgress, VoiceCharacteristics
from voxfx_data.preprocessing import load_pcm
from voxfx_data.validation import SampleValidator
from voxfx_export.registry import FileModelRegistry

from voxfx_train.manager import VoiceCloningManager
from voxfx_train.trainer import VoiceModelTrainer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="voxfx-train",
        description="Train a custom voice model and store it in a model directory.",
    )
    parser.add_argument(
        "--samples",
        required=True,
        nargs="+",
        type=Path,
        help="Training recordings (3-15 s each, 5-20 files).",
    )
    parser.add_argument(
        "--name",
        required=True,
        help="Model name; also the id it is stored under.",
    )
    parser.add_argument(
        "--registry-dir",
        required=True,
        type=Path,
        help="Directory holding .voxmodel files.",
    )
    parser.add_argument(
        "--emotion",
        default=Emotion.NEUTRAL.value,
        choices=[e.value for e in Emotion],
    )
    parser.add_argument(
        "--gender",
        default=Gender.NEUTRAL.value,
        choices=[g.value for g in Gender],
    )
    parser.add_argument(
        "--age",
        default=Age.YOUNG_ADULT.value,
        choices=[a.value for a in Age],
    )
    parser.add_argument("--accent", default=None)
    parser.add_argument(
        "--pitch-range",
        nargs=2,
        type=float,
        default=[0.5, 2.0],
        metavar=("LO", "HI"),
        help="Pitch ratio range; custom conversion scales pitch by HI (default: 0.5 2.0).",
    )
    parser.add_argument(
        "--formant-shift",
        type=float,
        default=1.0,
        help="Formant scaling applied by custom conversion (default: 1.0).",
    )
    parser.add_argument(
        "--sample-rate",
        type=int,
        default=SAMPLE_RATE,
        help=f"Processing sample rate (default: {SAMPLE_RATE}).",
    )
    parser.add_argument(
        "--skip-validation",
        action="store_true",
        help="Train even if samples fail the duration/quality checks.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose logging.",
    )
    return parser


def _log_progress(event: TrainingProgress) -> None:
    logger.info("[%3.0f%%] %s", event.progress * 100, event.message)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        characteristics = VoiceCharacteristics(
            emotion=Emotion(args.emotion),
            gender=Gender(args.gender),
            age=Age(args.age),
            accent=args.accent,
            pitch_range=(args.pitch_range[0], args.pitch_range[1]),
            formant_shift=args.formant_shift,
        )
        samples = [load_pcm(p, args.sample_rate)[0] for p in args.samples]

        if not args.skip_validation:
            results = SampleValidator().validate_batch(samples, args.sample_rate)
            failed = False
            for path, result in zip(args.samples, results):
                for issue in result.issues:
                    logger.error("%s: %s", path, issue)
                    failed = True
            for result in results[len(args.samples):]:
                for issue in result.issues:
                    logger.error("%s", issue)
                    failed = True
            if failed:
                logger.error("Validation failed; use --skip-validation to train anyway")
                sys.exit(1)

        manager = VoiceCloningManager(
            FileModelRegistry(args.registry_dir),
            trainer=VoiceModelTrainer(sample_rate=args.sample_rate),
        )
        try:
            model = manager.train(args.name, samples, characteristics, on_progress=_log_progress)
        finally:
            manager.shutdown()
    except (VoxFXError, ValueError) as exc:
        logger.error("%s", exc)
        sys.exit(1)

    logger.info(
        "Saved %s to %s (%d samples)", model.id, args.registry_dir, model.training_sample_count,
    )


if __name__ == "__main__":
    main()
