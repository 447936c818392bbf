#!/usr/bin/env python3
"""Evaluate emotion recognition on a RAVDESS folder.

The true label of every clip is read from its RAVDESS file name. Without
--model_path the untrained rule-based fallback is evaluated.

It reports:
- Per-class accuracy
- Macro F1 score
- Overall accuracy
- Confusion matrix (optional)

Usage:
    python scripts/eval_dataset.py --data_root ./ravdess --model_path model.json
    python scripts/eval_dataset.py --data_root ./ravdess --model_path model.json --actors 23 24
    python scripts/eval_dataset.py --data_root ./ravdess --confusion --json results.json

Example output:
    Evaluation Results
    ==================
    Total samples: 120
    Overall accuracy: 31.7%
    Macro F1: 0.284

    Per-class results:
    ------------------
    angry        Acc: 56.2%  F1: 0.450  (9/16)
    calm         Acc: 43.8%  F1: 0.341  (7/16)
"""

import argparse
import json
import sys
from collections import defaultdict
from pathlib import Path
from typing import TypedDict

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tqdm import tqdm

from audioio import AudioConfig
from audioio.errors import AudioIOError
from corpus import scan_corpus
from corpus.errors import CorpusError
from features.errors import FeatureError
from model import EMOTION_LABELS, EmotionClassifier, load_parameters, predict_clip
from model.errors import ModelError


class ClassMetrics(TypedDict):
    """Metrics for a single class."""
    true_positives: int
    false_positives: int
    false_negatives: int
    total: int
    correct: int


def compute_precision_recall_f1(
    tp: int, fp: int, fn: int
) -> tuple[float, float, float]:
    """Compute precision, recall, and F1 score from raw counts."""
    precision = tp / (tp + fp) if (tp + fp) > 0 else 0.0
    recall = tp / (tp + fn) if (tp + fn) > 0 else 0.0
    f1 = 2 * precision * recall / (precision + recall) if (precision + recall) > 0 else 0.0
    return precision, recall, f1


def summarize_metrics(class_metrics: dict[str, ClassMetrics]) -> tuple[dict[str, dict], float, float, float]:
    """Per-class accuracy/precision/recall/F1 and their macro averages.

    Classes without samples are left out of the macro averages.

    Returns:
        Tuple of (per_class_results, macro_precision, macro_recall, macro_f1).
    """
    per_class: dict[str, dict] = {}
    for label in sorted(class_metrics):
        metrics = class_metrics[label]
        if metrics["total"] == 0:
            continue
        precision, recall, f1 = compute_precision_recall_f1(
            metrics["true_positives"],
            metrics["false_positives"],
            metrics["false_negatives"],
        )
        per_class[label] = {
            "accuracy": metrics["correct"] / metrics["total"],
            "precision": precision,
            "recall": recall,
            "f1": f1,
            "total": metrics["total"],
            "correct": metrics["correct"],
        }

    if not per_class:
        return per_class, 0.0, 0.0, 0.0

    n = len(per_class)
    return (
        per_class,
        sum(r["precision"] for r in per_class.values()) / n,
        sum(r["recall"] for r in per_class.values()) / n,
        sum(r["f1"] for r in per_class.values()) / n,
    )


def main() -> int:
    """Main entry point for the evaluation script.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        description="Evaluate emotion recognition on a RAVDESS folder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s --data_root ./ravdess --model_path model.json
    %(prog)s --data_root ./ravdess --model_path model.json --actors 23 24
    %(prog)s --data_root ./ravdess --limit_per_class 20 --confusion
        """,
    )
    parser.add_argument(
        "--data_root",
        type=str,
        required=True,
        help="RAVDESS root directory (containing Actor_XX folders)",
    )
    parser.add_argument(
        "--model_path", "-m",
        type=str,
        default=None,
        help="Parameter blob written by train_ravdess.py (default: rule-based prediction)",
    )
    parser.add_argument(
        "--actors",
        nargs="*",
        default=None,
        help="Only evaluate these actor numbers, e.g. the held-out 23 24",
    )
    parser.add_argument(
        "--limit_per_class", "-l",
        type=int,
        default=None,
        help="Maximum number of samples to evaluate per class (default: all)",
    )
    parser.add_argument(
        "--sample_rate",
        type=int,
        default=16000,
        help="Sample rate to resample to before feature extraction (default: 16000)",
    )
    parser.add_argument(
        "--confusion",
        action="store_true",
        help="Print confusion matrix",
    )
    parser.add_argument(
        "--json",
        type=str,
        default=None,
        help="Save results to JSON file",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress progress output",
    )

    args = parser.parse_args()

    try:
        entries = scan_corpus(args.data_root)
        classifier = EmotionClassifier()
        if args.model_path:
            load_parameters(args.model_path, classifier)
    except (CorpusError, ModelError) as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    if args.actors:
        wanted = {f"Actor_{a.zfill(2)}" for a in args.actors}
        entries = [e for e in entries if e.actor in wanted]

    # Collect samples
    samples: list[tuple[Path, str]] = []
    label_counts: dict[str, int] = defaultdict(int)
    for entry in entries:
        if not entry.has_known_emotion:
            continue
        if args.limit_per_class is not None and label_counts[entry.emotion] >= args.limit_per_class:
            continue
        samples.append((entry.path, entry.emotion))
        label_counts[entry.emotion] += 1

    if not samples:
        print("Error: No RAVDESS clips with a known emotion found", file=sys.stderr)
        return 1

    if not args.quiet:
        print(f"Evaluating {classifier.name} (trained={classifier.is_trained})")
        print(f"Found {len(samples)} samples across {len(label_counts)} classes")
        for label, count in sorted(label_counts.items()):
            print(f"  {label}: {count}")
        print()

    class_metrics: dict[str, ClassMetrics] = {
        label: {"true_positives": 0, "false_positives": 0, "false_negatives": 0, "total": 0, "correct": 0}
        for label in EMOTION_LABELS
    }

    # Confusion matrix: confusion[true][pred] = count
    confusion: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))

    errors: list[dict] = []
    total_correct = 0
    total_samples = 0
    audio_config = AudioConfig(target_sample_rate=args.sample_rate)

    for audio_path, true_label in tqdm(samples, desc="Evaluating", disable=args.quiet):
        try:
            result = predict_clip(audio_path, classifier, audio_config=audio_config)
        except (AudioIOError, FeatureError, ModelError) as e:
            errors.append({"file": str(audio_path), "error": e.message, "code": e.code})
            continue

        pred_label = result.label
        total_samples += 1
        class_metrics[true_label]["total"] += 1
        confusion[true_label][pred_label] += 1

        if pred_label == true_label:
            total_correct += 1
            class_metrics[true_label]["correct"] += 1
            class_metrics[true_label]["true_positives"] += 1
        else:
            class_metrics[true_label]["false_negatives"] += 1
            class_metrics[pred_label]["false_positives"] += 1

    per_class_results, macro_precision, macro_recall, macro_f1 = summarize_metrics(class_metrics)
    overall_accuracy = total_correct / total_samples if total_samples > 0 else 0.0

    print("\nEvaluation Results")
    print("==================")
    print(f"Total samples: {total_samples}")
    print(f"Overall accuracy: {overall_accuracy:.1%}")
    print(f"Macro F1: {macro_f1:.3f}")
    print(f"Macro Precision: {macro_precision:.3f}")
    print(f"Macro Recall: {macro_recall:.3f}")

    if errors:
        print(f"Errors: {len(errors)} files failed to process")

    print("\nPer-class results:")
    print("-" * 50)
    for label, r in per_class_results.items():
        print(f"{label:12s} Acc: {r['accuracy']:5.1%}  F1: {r['f1']:.3f}  ({r['correct']}/{r['total']})")

    if args.confusion and confusion:
        print("\nConfusion Matrix (rows=true, cols=pred):")
        print("-" * 60)
        print(f"{'':12s}" + "".join(f"{label[:5]:>6s}" for label in EMOTION_LABELS))
        for true_label in EMOTION_LABELS:
            row = f"{true_label[:12]:12s}"
            for pred_label in EMOTION_LABELS:
                row += f"{confusion[true_label][pred_label]:6d}"
            print(row)

    if args.json:
        results = {
            "model_name": classifier.name,
            "is_trained": classifier.is_trained,
            "total_samples": total_samples,
            "overall_accuracy": overall_accuracy,
            "macro_f1": macro_f1,
            "macro_precision": macro_precision,
            "macro_recall": macro_recall,
            "per_class": per_class_results,
            "confusion_matrix": {k: dict(v) for k, v in confusion.items()},
            "errors": errors,
        }
        with open(args.json, "w") as f:
            json.dump(results, f, indent=2)
        print(f"\nResults saved to: {args.json}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
