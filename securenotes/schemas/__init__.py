"""Pydantic schemas."""
from securenotes.schemas.common import ApiResponse, ErrorDetail
from securenotes.schemas.note import (
    NoteEdit,
    NoteSave,
    NoteUnlock,
    NoteView,
    PinUpdate,
    TrashEmptied,
)

__all__ = [
    "ApiResponse",
    "ErrorDetail",
    "NoteEdit",
    "NoteSave",
    "NoteUnlock",
    "NoteView",
    "PinUpdate",
    "TrashEmptied",
]
