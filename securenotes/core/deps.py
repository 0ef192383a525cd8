"""Dependency injection utilities."""
from typing import Annotated

from fastapi import Depends, Request

from securenotes.config import Settings
from securenotes.core.crypto import CipherEngine, MasterKeySource
from securenotes.core.security import PasswordHasher
from securenotes.services.note_service import NoteService
from securenotes.services.note_store import NoteDocumentStore


def build_note_service(settings: Settings) -> NoteService:
    """Wire the note service for ``settings``.

    Raises:
        ConfigurationError: the master key is missing or malformed
    """
    key_source = MasterKeySource.from_settings(settings)
    return NoteService(
        store=NoteDocumentStore(settings.notes_path),
        cipher=CipherEngine(key_source),
        hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
        preview_length=settings.preview_length,
    )


def get_note_service(request: Request) -> NoteService:
    """Get the application's note service."""
    return request.app.state.note_service


# Type alias for dependency injection
NoteServiceDep = Annotated[NoteService, Depends(get_note_service)]
