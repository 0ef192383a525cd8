"""Core module."""
from securenotes.core.crypto import CipherEngine, MasterKeySource
from securenotes.core.error_handler import guarded
from securenotes.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DecryptionError,
    InstanceLockError,
    NoteError,
    NotFoundError,
    StorageError,
    TrashedError,
    ValidationError,
)
from securenotes.core.security import PasswordHasher

__all__ = [
    "CipherEngine",
    "MasterKeySource",
    "PasswordHasher",
    "guarded",
    "NoteError",
    "ValidationError",
    "NotFoundError",
    "TrashedError",
    "AuthenticationError",
    "DecryptionError",
    "StorageError",
    "ConfigurationError",
    "InstanceLockError",
]
