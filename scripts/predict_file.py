#!/usr/bin/env python3
"""Predict emotion from a single audio file.

This script extracts features from one WAV file, runs the classifier and
prints the result as JSON to stdout. Without --model_path the untrained
rule-based fallback is used.

Usage:
    python scripts/predict_file.py --input path/to/audio.wav
    python scripts/predict_file.py --input path/to/audio.wav --model_path model.json
    python scripts/predict_file.py --input path/to/audio.wav --features

Example output:
    {
        "label": "sad",
        "confidence": 0.32,
        "probabilities": [0.16, 0.08, 0.08, 0.32, 0.08, 0.08, 0.08, 0.08],
        "scores": {"neutral": 0.16, "calm": 0.08, ...},
        "model_name": "EmotiNet-RAVDESS v2.1.0",
        "is_trained": false,
        "duration_sec": 3.5
    }
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from audioio import AudioConfig, load_validate_preprocess
from audioio.errors import AudioIOError
from features import extract_feature_vector
from features.errors import FeatureError
from model import EmotionClassifier, load_parameters
from model.errors import ModelError


def main() -> int:
    """Main entry point for the script.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        description="Predict emotion from an audio file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s --input speech.wav
    %(prog)s --input speech.wav --model_path model.json
    %(prog)s --input speech.wav --features --pretty
        """,
    )
    parser.add_argument(
        "--input", "-i",
        type=str,
        required=True,
        help="Path to the input audio file (WAV format)",
    )
    parser.add_argument(
        "--model_path", "-m",
        type=str,
        default=None,
        help="Parameter blob written by train_ravdess.py (default: rule-based prediction)",
    )
    parser.add_argument(
        "--sample_rate",
        type=int,
        default=16000,
        help="Sample rate to resample to before feature extraction (default: 16000)",
    )
    parser.add_argument(
        "--features", "-f",
        action="store_true",
        help="Include the extracted feature vector in the output",
    )
    parser.add_argument(
        "--pretty", "-p",
        action="store_true",
        help="Pretty-print JSON output with indentation",
    )

    args = parser.parse_args()

    input_path = Path(args.input)
    if not input_path.exists():
        print(json.dumps({"error": f"File not found: {args.input}"}), file=sys.stderr)
        return 1

    try:
        classifier = EmotionClassifier()
        if args.model_path:
            load_parameters(args.model_path, classifier)

        waveform, sample_rate = load_validate_preprocess(
            input_path,
            AudioConfig(target_sample_rate=args.sample_rate),
        )
        vector = extract_feature_vector(waveform, sample_rate)
        result = classifier.predict(vector.to_list())
        result.duration_sec = waveform.shape[1] / sample_rate

        output = result.to_dict()
        if args.features:
            output["features"] = vector.named()

        indent = 2 if args.pretty else None
        print(json.dumps(output, indent=indent))
        return 0

    except (AudioIOError, FeatureError, ModelError) as e:
        error_output = {
            "error": e.message,
            "code": e.code,
            "details": e.details,
        }
        print(json.dumps(error_output), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
