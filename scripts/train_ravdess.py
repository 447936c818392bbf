#!/usr/bin/env python3
"""Train the emotion classifier on a RAVDESS folder.

The corpus is expected as distributed:
    data_root/
        Actor_01/03-01-01-01-01-01-01.wav
        Actor_01/03-01-01-01-01-02-01.wav
        ...
        Actor_24/...

Labels come from the emotion field of each file name. Features are
extracted from every clip with a known emotion, the network is trained and
the parameter blob is written as JSON.

Features are used at their raw scale: spectral centroid and rolloff are FFT
bin indices in the thousands. With the default learning rate, plain SGD on
real recordings often overflows; the run then stops with TRAINING_DIVERGED,
nothing is written and the exit code is 2. Lower --learning_rate to retry.

Press Ctrl+C during training to stop after the current epoch; the partial
parameters are only written with --save_partial.

Usage:
    python scripts/train_ravdess.py --data_root ./ravdess --output model.json
    python scripts/train_ravdess.py --data_root ./ravdess --holdout_actors 23 24
    python scripts/train_ravdess.py --data_root ./ravdess --epochs 50 --seed 7
"""

import argparse
import json
import logging
import sys
import threading
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from audioio import AudioConfig
from corpus import build_training_samples, scan_corpus, summarize_corpus
from corpus.errors import CorpusError
from model import EmotionClassifier, TrainingReport, save_parameters
from model.errors import ModelError


DIVERGENCE_NOTE = (
    "note: features are not rescaled (centroid and rolloff are FFT bin indices),\n"
    "so training on real clips at --lr 0.01 often diverges. A diverged run\n"
    "exits with code 2 and writes nothing; retry with a smaller --lr."
)


def select_entries(entries, holdout_actors: list[str]) -> list:
    """Drop entries whose actor is held out (``"7"`` matches ``Actor_07``)."""
    held_out = {f"Actor_{a.zfill(2)}" for a in holdout_actors}
    return [e for e in entries if e.actor not in held_out]


def run_training(
    classifier: EmotionClassifier,
    samples: list,
) -> tuple[TrainingReport | None, bool]:
    """Train in a worker thread so Ctrl+C can cancel between epochs.

    Returns:
        Tuple of (report, interrupted). The report is None if training
        raised; the exception is re-raised in the caller's thread.
    """
    cancel_event = threading.Event()
    outcome: dict = {}

    def target() -> None:
        try:
            outcome["report"] = classifier.train(samples, cancel_event=cancel_event)
        except ModelError as e:
            outcome["error"] = e

    worker = threading.Thread(target=target, name="trainer", daemon=True)
    worker.start()

    interrupted = False
    while worker.is_alive():
        try:
            worker.join(timeout=0.5)
        except KeyboardInterrupt:
            if not interrupted:
                print("\nInterrupted: stopping after the current epoch...", file=sys.stderr)
            interrupted = True
            cancel_event.set()

    if "error" in outcome:
        raise outcome["error"]
    return outcome.get("report"), interrupted


def main() -> int:
    """Main entry point for the training script.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        description="Train the emotion classifier on the RAVDESS corpus",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=DIVERGENCE_NOTE,
    )
    parser.add_argument(
        "--data_root",
        type=str,
        required=True,
        help="RAVDESS root directory (containing Actor_XX folders)",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default="model.json",
        help="Where to write the parameter blob (default: model.json)",
    )
    parser.add_argument(
        "--epochs", "-e",
        type=int,
        default=100,
        help="Training epochs (default: 100)",
    )
    parser.add_argument(
        "--learning_rate", "--lr",
        type=float,
        default=0.01,
        help="SGD learning rate (default: 0.01)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for initialisation and shuffling",
    )
    parser.add_argument(
        "--holdout_actors",
        nargs="*",
        default=[],
        help="Actor numbers to leave out of training, e.g. 23 24",
    )
    parser.add_argument(
        "--sample_rate",
        type=int,
        default=16000,
        help="Sample rate to resample to before feature extraction (default: 16000)",
    )
    parser.add_argument(
        "--save_partial",
        action="store_true",
        help="Write the parameters even if training was interrupted",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress progress output",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        entries = scan_corpus(args.data_root)
    except CorpusError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    entries = select_entries(entries, args.holdout_actors)
    summary = summarize_corpus(entries)
    if summary.trainable_files == 0:
        print(f"Error: No RAVDESS clips with a known emotion under {args.data_root}", file=sys.stderr)
        return 1

    if not args.quiet:
        print(f"Found {summary.total_files} files from {len(summary.by_actor)} actors")
        for label, count in summary.by_emotion.items():
            print(f"  {label}: {count}")
        print()

    samples = build_training_samples(
        entries,
        audio_config=AudioConfig(target_sample_rate=args.sample_rate),
        progress=not args.quiet,
    )

    classifier = EmotionClassifier(
        learning_rate=args.learning_rate,
        epochs=args.epochs,
        seed=args.seed,
    )

    try:
        report, interrupted = run_training(classifier, samples)
    except ModelError as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.code == "TRAINING_DIVERGED":
            print(DIVERGENCE_NOTE, file=sys.stderr)
            return 2
        return 1

    print("\nTraining Results")
    print("================")
    print(json.dumps(report.to_dict(), indent=2))

    if interrupted and not args.save_partial:
        print("Training was interrupted; parameters not saved (use --save_partial).")
        return 130

    path = save_parameters(classifier, args.output)
    print(f"\nParameters saved to: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
