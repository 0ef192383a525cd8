"""Note services."""
from securenotes.services.note_service import NoteService
from securenotes.services.note_store import NoteDocument, NoteDocumentStore

__all__ = [
    "NoteDocument",
    "NoteDocumentStore",
    "NoteService",
]
