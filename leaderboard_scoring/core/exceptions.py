"""
Exceptions for the leaderboard scoring system.

Configuration problems are fatal and raised before any computation starts.
Data integrity problems are not raised: they are collected as
``DataIntegrityWarning`` instances and returned alongside the results.
"""

from typing import Optional


class ConfigurationError(ValueError):
    """Raised when coefficients, filters or configuration files are invalid."""
    pass


class SnapshotError(Exception):
    """Raised when a snapshot file cannot be read or decoded."""
    pass


class RecordValidationError(SnapshotError):
    """Raised when a snapshot record is missing fields or has malformed values."""
    pass


class DataIntegrityWarning(UserWarning):
    """
    A recoverable problem with the input records.

    The offending record is excluded from the computation, the warning is
    logged and returned with the result so partial leaderboards stay usable.

    Attributes:
        kind (str): Category of the problem (e.g. 'orphan_score')
        record_id (str): Identifier of the record that was excluded or altered
        reference_id (Optional[str]): Identifier the record pointed at, if any
        message (str): Human readable description
    """

    def __init__(self, kind: str, record_id: str, message: str, reference_id: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.record_id = record_id
        self.reference_id = reference_id
        self.message = message

    def as_dict(self) -> dict:
        return {
            "kind": self.kind,
            "record_id": self.record_id,
            "reference_id": self.reference_id,
            "message": self.message,
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, DataIntegrityWarning):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __hash__(self) -> int:
        return hash((self.kind, self.record_id, self.reference_id))

    def __repr__(self) -> str:
        return f"DataIntegrityWarning(kind={self.kind!r}, record_id={self.record_id!r})"
