"""Exceptions raised while walking a labeled speech corpus."""

from typing import Any


class CorpusError(Exception):
    """Base exception for corpus errors.

    Attributes:
        message: Human-readable error description.
        code: Short error code string (e.g., "CORPUS_NOT_FOUND").
        details: Optional dictionary with additional context.

    Common codes:
        - CORPUS_NOT_FOUND: The corpus root does not exist or is not a directory.
        - EMPTY_CORPUS: No WAV files were found under the root.
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"[{self.code}] {self.message} (details: {self.details})"
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, code={self.code!r}, details={self.details!r})"
