"""Labeled speech corpus support (RAVDESS).

Example:
    >>> from corpus import scan_corpus, summarize_corpus, build_training_samples
    >>> entries = scan_corpus("data/ravdess")
    >>> summarize_corpus(entries).by_emotion["angry"]
    192
    >>> samples = build_training_samples(entries, progress=True)
"""

from .errors import CorpusError
from .ravdess import (
    INTENSITY_CODES,
    STATEMENT_CODES,
    CorpusSummary,
    RavdessFileInfo,
    build_training_samples,
    describe_file,
    extract_training_sample,
    parse_ravdess_filename,
    scan_corpus,
    summarize_corpus,
)

__all__ = [
    "CorpusError",
    "RavdessFileInfo",
    "CorpusSummary",
    "parse_ravdess_filename",
    "describe_file",
    "scan_corpus",
    "summarize_corpus",
    "extract_training_sample",
    "build_training_samples",
    "INTENSITY_CODES",
    "STATEMENT_CODES",
]
