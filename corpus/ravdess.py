"""RAVDESS filename parsing and corpus walking.

RAVDESS names every clip with seven dash-separated two-digit fields::

    Modality-VocalChannel-Emotion-Intensity-Statement-Repetition-Actor.wav
    03-01-05-02-01-01-12.wav  ->  speech, angry, strong, "Kids ...", Actor_12

The corpus ships as ``Actor_01`` .. ``Actor_24`` folders of such files.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Iterable, Union

from tqdm import tqdm

from audioio import AudioConfig, AudioIOError, load_validate_preprocess
from features import FeatureConfig, FeatureError, extract_feature_vector
from model.labels import RAVDESS_EMOTION_CODES
from model.types import TrainingSample

from .errors import CorpusError


logger = logging.getLogger(__name__)


UNKNOWN: Final[str] = "unknown"

INTENSITY_CODES: Final[dict[str, str]] = {
    "01": "normal",
    "02": "strong",
}

STATEMENT_CODES: Final[dict[str, str]] = {
    "01": "Kids are talking by the door",
    "02": "Dogs are sitting by the door",
}


@dataclass
class RavdessFileInfo:
    """Metadata decoded from one RAVDESS file name.

    Attributes:
        name: File name including extension.
        emotion: Emotion label, or "unknown" for an unmapped code.
        intensity: "normal", "strong" or "unknown".
        statement: Spoken sentence, or "unknown".
        repetition: Repetition field as written ("01" or "02").
        actor: Actor folder name, e.g. "Actor_07".
        modality: Raw modality code ("01" full AV, "02" video, "03" audio).
        vocal_channel: Raw vocal channel code ("01" speech, "02" song).
        path: Location on disk, when the file came from a directory scan.
    """

    name: str
    emotion: str = UNKNOWN
    intensity: str = UNKNOWN
    statement: str = UNKNOWN
    repetition: str = UNKNOWN
    actor: str = "Unknown"
    modality: str = UNKNOWN
    vocal_channel: str = UNKNOWN
    path: Path | None = field(default=None, compare=False)

    @property
    def has_known_emotion(self) -> bool:
        return self.emotion != UNKNOWN

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "emotion": self.emotion,
            "intensity": self.intensity,
            "statement": self.statement,
            "repetition": self.repetition,
            "actor": self.actor,
            "modality": self.modality,
            "vocal_channel": self.vocal_channel,
            "path": str(self.path) if self.path is not None else None,
        }


def parse_ravdess_filename(name: str) -> RavdessFileInfo | None:
    """Decode a RAVDESS file name.

    Args:
        name: File name or path. A trailing ``.wav`` is ignored.

    Returns:
        RavdessFileInfo, or None when the name does not have exactly seven
        dash-separated fields.

    Examples:
        >>> info = parse_ravdess_filename("03-01-05-02-01-01-12.wav")
        >>> info.emotion, info.intensity, info.actor
        ('angry', 'strong', 'Actor_12')
        >>> parse_ravdess_filename("speech.wav") is None
        True
    """
    file_name = Path(name).name
    stem = file_name[:-4] if file_name.lower().endswith(".wav") else file_name
    parts = stem.split("-")
    if len(parts) != 7:
        return None

    modality, vocal_channel, emotion, intensity, statement, repetition, actor = parts
    return RavdessFileInfo(
        name=file_name,
        emotion=RAVDESS_EMOTION_CODES.get(emotion, UNKNOWN),
        intensity=INTENSITY_CODES.get(intensity, UNKNOWN),
        statement=STATEMENT_CODES.get(statement, UNKNOWN),
        repetition=repetition,
        actor=f"Actor_{actor.zfill(2)}",
        modality=modality,
        vocal_channel=vocal_channel,
    )


def describe_file(name: str, path: Path | None = None) -> RavdessFileInfo:
    """Like ``parse_ravdess_filename`` but never None: unparsable names get "unknown" fields."""
    info = parse_ravdess_filename(name) or RavdessFileInfo(name=Path(name).name)
    info.path = path
    return info


def scan_corpus(root: str | Path) -> list[RavdessFileInfo]:
    """Recursively list every ``.wav`` file under ``root``, sorted by path.

    Raises:
        CorpusError: If ``root`` is not a directory (CORPUS_NOT_FOUND) or
            holds no .wav files (EMPTY_CORPUS).
    """
    root = Path(root)
    if not root.is_dir():
        raise CorpusError(
            message=f"Corpus directory not found: {root}",
            code="CORPUS_NOT_FOUND",
            details={"root": str(root)},
        )

    paths = sorted(p for p in root.rglob("*") if p.is_file() and p.suffix.lower() == ".wav")
    if not paths:
        raise CorpusError(
            message=f"No .wav files found under {root}",
            code="EMPTY_CORPUS",
            details={"root": str(root)},
        )

    entries = [describe_file(p.name, path=p) for p in paths]
    logger.info("Scanned %s: %d wav files", root, len(entries))
    return entries


@dataclass
class CorpusSummary:
    """File counts of a corpus, per actor and per emotion."""

    total_files: int
    trainable_files: int
    by_actor: dict[str, int]
    by_emotion: dict[str, int]

    def to_dict(self) -> dict:
        return {
            "total_files": self.total_files,
            "trainable_files": self.trainable_files,
            "num_actors": len(self.by_actor),
            "by_actor": self.by_actor,
            "by_emotion": self.by_emotion,
        }


def summarize_corpus(entries: Iterable[RavdessFileInfo]) -> CorpusSummary:
    """Count files per actor and per emotion, with keys sorted."""
    entries = list(entries)
    actors = Counter(e.actor for e in entries)
    emotions = Counter(e.emotion for e in entries)
    return CorpusSummary(
        total_files=len(entries),
        trainable_files=sum(1 for e in entries if e.has_known_emotion),
        by_actor=dict(sorted(actors.items())),
        by_emotion=dict(sorted(emotions.items())),
    )


def extract_training_sample(
    info: RavdessFileInfo,
    source: Union[str, Path, bytes, None] = None,
    audio_config: AudioConfig | None = None,
    feature_config: FeatureConfig | None = None,
) -> TrainingSample | None:
    """Decode one file and turn it into a labeled feature vector.

    Args:
        info: Parsed file metadata.
        source: WAV path or bytes. Defaults to ``info.path``.
        audio_config: Audio pipeline configuration.
        feature_config: Feature extraction configuration.

    Returns:
        TrainingSample, or None when the emotion is unknown (the audio is
        not decoded) or the audio cannot be decoded or featurized (logged
        at WARNING).
    """
    if not info.has_known_emotion:
        return None

    if source is None:
        source = info.path
    if source is None:
        logger.warning("Skipping %s: no audio source", info.name)
        return None

    try:
        waveform, sample_rate = load_validate_preprocess(source, audio_config)
    except AudioIOError as e:
        logger.warning("Skipping %s at %s stage: %s", info.name, e.stage, e)
        return None

    try:
        vector = extract_feature_vector(waveform, sample_rate, feature_config)
    except FeatureError as e:
        logger.warning("Skipping %s at features stage: %s", info.name, e)
        return None

    return TrainingSample(features=vector.to_list(), label=info.emotion, source=info.name)


def build_training_samples(
    entries: Iterable[RavdessFileInfo],
    audio_config: AudioConfig | None = None,
    feature_config: FeatureConfig | None = None,
    progress: bool = False,
) -> list[TrainingSample]:
    """Featurize every known-emotion entry that has a path on disk.

    Args:
        entries: Entries from ``scan_corpus``.
        audio_config: Audio pipeline configuration.
        feature_config: Feature extraction configuration.
        progress: Show a tqdm progress bar.

    Returns:
        Training samples in entry order. Files that fail to decode are
        skipped.
    """
    entries = list(entries)
    samples = []
    for info in tqdm(entries, desc="Extracting features", unit="file", disable=not progress):
        sample = extract_training_sample(info, audio_config=audio_config, feature_config=feature_config)
        if sample is not None:
            samples.append(sample)

    logger.info("Built %d training samples from %d files", len(samples), len(entries))
    return samples
