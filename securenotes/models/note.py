"""Note record model and its lock state."""
import re
from dataclasses import dataclass
from typing import Any, Iterable, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

PLACEHOLDER_CONTENT = "Locked Note"

_WHITESPACE = re.compile(r"\s+")


def is_utf8_encodable(value: str) -> bool:
    """False for text holding lone surrogates, which cannot be stored."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def make_preview(content: str, length: int = 10) -> str:
    """Collapse whitespace and cut the text down to a short title."""
    return _WHITESPACE.sub(" ", content or "").strip()[:length]


def clean_tags(tags: Iterable[str] | str | None) -> list[str]:
    """Split on commas, trim, drop empties and de-duplicate (first seen wins)."""
    if tags is None:
        return []
    if isinstance(tags, str):
        tags = [tags]

    cleaned: list[str] = []
    for item in tags:
        for tag in str(item).split(","):
            tag = tag.strip()
            if tag and tag not in cleaned:
                cleaned.append(tag)
    return cleaned


@dataclass(frozen=True)
class Unlocked:
    """Content is stored as plaintext."""

    content: str


@dataclass(frozen=True)
class Locked:
    """Content is encrypted at rest; only the placeholder is stored in clear."""

    iv: str
    encrypted_data: str
    password_hash: str


LockState = Union[Unlocked, Locked]


class NoteRecord(BaseModel):
    """One persisted note.

    Field names are snake_case in Python and camelCase in the document.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int = Field(validation_alias=AliasChoices("id", "noteId"), serialization_alias="id")
    content: str = ""
    preview: str = ""
    locked: bool = False
    iv: str | None = None
    encrypted_data: str | None = Field(default=None, alias="encryptedData")
    password_hash: str | None = Field(default=None, alias="passwordHash")
    created_at: int = Field(alias="createdAt")
    updated_at: int = Field(alias="updatedAt")
    deleted_at: int | None = Field(default=None, alias="deletedAt")
    pinned: bool = False
    tags: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def backfill_timestamps(cls, data: Any) -> Any:
        """Older documents may lack timestamps; the id doubles as creation time."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("createdAt") is None and data.get("created_at") is None:
            data["createdAt"] = data.get("id", data.get("noteId"))
        if data.get("updatedAt") is None and data.get("updated_at") is None:
            data["updatedAt"] = data.get("createdAt", data.get("created_at"))
        return data

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, value: Any) -> list[str]:
        return clean_tags(value)

    @field_validator("pinned", "locked", mode="before")
    @classmethod
    def null_as_false(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("content", "preview", "iv", "encrypted_data", "password_hash")
    @classmethod
    def require_utf8(cls, value: str | None) -> str | None:
        if value is not None and not is_utf8_encodable(value):
            raise ValueError("text is not valid UTF-8")
        return value

    @field_validator("tags")
    @classmethod
    def require_utf8_tags(cls, value: list[str]) -> list[str]:
        if not all(is_utf8_encodable(tag) for tag in value):
            raise ValueError("tag is not valid UTF-8")
        return value

    @model_validator(mode="after")
    def check_lock_fields(self) -> "NoteRecord":
        present = [f is not None for f in (self.iv, self.encrypted_data, self.password_hash)]
        if self.locked and not all(present):
            raise ValueError(f"note {self.id} is locked but is missing encryption fields")
        if not self.locked and any(present):
            raise ValueError(f"note {self.id} is unlocked but carries encryption fields")
        if self.locked:
            self.content = PLACEHOLDER_CONTENT
        return self

    @property
    def is_trashed(self) -> bool:
        return self.deleted_at is not None

    @property
    def state(self) -> LockState:
        if self.locked:
            return Locked(
                iv=self.iv,
                encrypted_data=self.encrypted_data,
                password_hash=self.password_hash,
            )
        return Unlocked(content=self.content)

    def with_state(self, state: LockState, **changes: Any) -> "NoteRecord":
        """Return a copy moved into ``state``, with other fields updated.

        Crypto fields and content are always derived from the state, so the
        result can never mix a plaintext body with encryption fields.
        """
        data = self.model_dump()
        data.update(changes)
        if isinstance(state, Locked):
            data.update(
                locked=True,
                content=PLACEHOLDER_CONTENT,
                iv=state.iv,
                encrypted_data=state.encrypted_data,
                password_hash=state.password_hash,
            )
        else:
            data.update(
                locked=False,
                content=state.content,
                iv=None,
                encrypted_data=None,
                password_hash=None,
            )
        return NoteRecord.model_validate(data)

    def updated(self, **changes: Any) -> "NoteRecord":
        """Return a validated copy with ``changes`` applied, lock state untouched."""
        return self.with_state(self.state, **changes)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
