"""Note request and response schemas."""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from securenotes.models.note import PLACEHOLDER_CONTENT, NoteRecord


class CamelModel(BaseModel):
    """Accepts and emits camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NoteView(CamelModel):
    """A note as seen across the service boundary.

    Never carries ``iv``, ``encryptedData`` or ``passwordHash``.
    """

    id: int
    content: str
    preview: str
    locked: bool
    created_at: int
    updated_at: int
    deleted_at: int | None = None
    pinned: bool = False
    tags: list[str] = Field(default_factory=list)

    @classmethod
    def from_record(cls, record: NoteRecord, plaintext: str | None = None) -> "NoteView":
        """Sanitize a record.

        A locked note shows the placeholder unless ``plaintext`` was just
        decrypted by the caller.
        """
        if plaintext is not None:
            content = plaintext
        elif record.locked:
            content = PLACEHOLDER_CONTENT
        else:
            content = record.content

        return cls(
            id=record.id,
            content=content,
            preview=record.preview,
            locked=record.locked,
            created_at=record.created_at,
            updated_at=record.updated_at,
            deleted_at=record.deleted_at,
            pinned=record.pinned,
            tags=list(record.tags),
        )


class NoteSave(CamelModel):
    """Create-or-save request."""

    id: int | None = None
    content: str
    password: str | None = None
    should_lock: bool = False
    tags: list[str] = Field(default_factory=list)


class NoteEdit(CamelModel):
    """Edit request."""

    content: str
    password: str | None = None
    should_lock: bool = False
    tags: list[str] = Field(default_factory=list)


class NoteUnlock(CamelModel):
    """Unlock request."""

    password: str


class PinUpdate(CamelModel):
    """Pin request."""

    pinned: bool


class TrashEmptied(CamelModel):
    """Result of emptying the trash."""

    purged: int
