"""Persisted data models."""
from securenotes.models.note import (
    PLACEHOLDER_CONTENT,
    LockState,
    Locked,
    NoteRecord,
    Unlocked,
    clean_tags,
    is_utf8_encodable,
    make_preview,
)

__all__ = [
    "PLACEHOLDER_CONTENT",
    "LockState",
    "Locked",
    "NoteRecord",
    "Unlocked",
    "clean_tags",
    "is_utf8_encodable",
    "make_preview",
]
