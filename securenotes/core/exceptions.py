"""Errors raised by the note store.

Every error carries a human readable ``message`` and a stable ``error_code``
which the service boundary copies into the failure envelope.
"""
from fastapi import status


class NoteError(Exception):
    """Base class for note store errors."""

    error_code = "NOTE_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(NoteError):
    """Missing content or password."""

    error_code = "VALIDATION_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(NoteError):
    """Unknown note id."""

    error_code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Note not found") -> None:
        super().__init__(message)


class TrashedError(NoteError):
    """Mutation attempted on a note that is in the trash."""

    error_code = "NOTE_TRASHED"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, message: str = "Note is in the trash") -> None:
        super().__init__(message)


class AuthenticationError(NoteError):
    """Wrong unlock password."""

    error_code = "AUTHENTICATION_FAILED"
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Incorrect password") -> None:
        super().__init__(message)


class DecryptionError(NoteError):
    """Corrupt ciphertext or IV, or a key mismatch."""

    error_code = "DECRYPTION_FAILED"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class StorageError(NoteError):
    """The notes document could not be read or written."""

    error_code = "STORAGE_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ConfigurationError(NoteError):
    """Fatal deployment misconfiguration, raised at startup."""

    error_code = "CONFIGURATION_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class InstanceLockError(ConfigurationError):
    """Another process already owns the data directory."""

    error_code = "INSTANCE_LOCKED"
