"""
Note Service
Lock, unlock, edit and trash transitions over the notes document.
"""
import logging
import time
from typing import Callable, Iterable, List, Optional

from securenotes.core.crypto import CipherEngine
from securenotes.core.exceptions import (
    AuthenticationError,
    NotFoundError,
    TrashedError,
    ValidationError,
)
from securenotes.core.security import PasswordHasher
from securenotes.models.note import (
    LockState,
    Locked,
    NoteRecord,
    Unlocked,
    clean_tags,
    is_utf8_encodable,
    make_preview,
)
from securenotes.schemas.note import NoteView
from securenotes.services.note_store import NoteDocument, NoteDocumentStore

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class NoteService:
    """
    Public note operations.

    Every mutation runs inside one store transaction. Slow work (bcrypt,
    encryption) is done before the transaction starts so the document lock is
    held only for the read-modify-write itself. Results are always sanitized
    :class:`NoteView` objects.
    """

    def __init__(
        self,
        store: NoteDocumentStore,
        cipher: CipherEngine,
        hasher: PasswordHasher,
        preview_length: int = 10,
        clock: Callable[[], int] = _now_ms,
    ):
        self.store = store
        self.cipher = cipher
        self.hasher = hasher
        self.preview_length = preview_length
        self._clock = clock

    # --- Helpers ---

    @staticmethod
    def _index_of(document: NoteDocument, note_id: int) -> int:
        for index, record in enumerate(document):
            if record.id == note_id:
                return index
        raise NotFoundError(f"Note {note_id} not found")

    @staticmethod
    def _require_active(record: NoteRecord) -> None:
        if record.is_trashed:
            raise TrashedError(f"Note {record.id} is in the trash; restore it first")

    @staticmethod
    def _fresh_id(document: NoteDocument, now: int) -> int:
        taken = {record.id for record in document}
        candidate = now
        while candidate in taken:
            candidate += 1
        return candidate

    @staticmethod
    def _require_utf8(
        content: Optional[str] = None,
        password: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> None:
        """Reject text that cannot be encoded, such as lone surrogates."""
        if content is not None and not is_utf8_encodable(content):
            raise ValidationError("Note content contains characters that are not valid UTF-8")
        if password is not None and not is_utf8_encodable(password):
            raise ValidationError("Password contains characters that are not valid UTF-8")
        if tags is not None and not all(is_utf8_encodable(tag) for tag in tags):
            raise ValidationError("Tags contain characters that are not valid UTF-8")

    def _hash_password(self, password: Optional[str]) -> Optional[str]:
        """Hash ``password``, or return None if it is missing or blank."""
        if password is None or not password.strip():
            return None
        return self.hasher.hash(password)

    def _seal(self, content: str, password_hash: str) -> Locked:
        iv, encrypted_data = self.cipher.encrypt_text(content)
        return Locked(iv=iv, encrypted_data=encrypted_data, password_hash=password_hash)

    def _update(self, note_id: int, change: Callable[[NoteRecord], NoteRecord]) -> NoteRecord:
        """Replace one record with ``change(record)`` inside a transaction."""
        result: Optional[NoteRecord] = None

        def apply(document: NoteDocument) -> NoteDocument:
            nonlocal result
            index = self._index_of(document, note_id)
            result = change(document[index])
            document[index] = result
            return document

        self.store.transaction(apply)
        return result

    def _get(self, note_id: int) -> NoteRecord:
        document = self.store.load()
        return document[self._index_of(document, note_id)]

    # --- Operations ---

    def save_note(
        self,
        content: str,
        note_id: Optional[int] = None,
        password: Optional[str] = None,
        should_lock: bool = False,
        tags: Optional[Iterable[str]] = None,
    ) -> NoteView:
        """
        Create a note, or overwrite an existing one with the same id.

        Overwriting keeps ``createdAt`` and ``pinned``. Saving unlocked drops
        any previous encryption fields.

        Raises:
            ValidationError: empty content, text that is not valid UTF-8, or
                locking without a password
            TrashedError: ``note_id`` belongs to a trashed note
        """
        if not content:
            raise ValidationError("Note content is required")
        tag_list = clean_tags(tags)
        self._require_utf8(content, password, tag_list)

        state: LockState
        if should_lock:
            password_hash = self._hash_password(password)
            if password_hash is None:
                raise ValidationError("A password is required to lock this note")
            state = self._seal(content, password_hash)
        else:
            state = Unlocked(content=content)

        preview = make_preview(content, self.preview_length)
        saved: Optional[NoteRecord] = None

        def apply(document: NoteDocument) -> NoteDocument:
            nonlocal saved
            now = self._clock()
            index = None
            if note_id is not None:
                index = next((i for i, r in enumerate(document) if r.id == note_id), None)

            if index is not None:
                previous = document[index]
                self._require_active(previous)
                saved = previous.with_state(state, preview=preview, updated_at=now, tags=tag_list)
                document[index] = saved
            else:
                new_id = note_id if note_id is not None else self._fresh_id(document, now)
                saved = NoteRecord(
                    id=new_id,
                    preview=preview,
                    created_at=now,
                    updated_at=now,
                    pinned=False,
                    tags=tag_list,
                ).with_state(state)
                document.append(saved)
            return document

        self.store.transaction(apply)
        logger.info(f"Saved note {saved.id} (locked={saved.locked})")
        return NoteView.from_record(saved)

    def edit_note(
        self,
        note_id: int,
        content: str,
        password: Optional[str] = None,
        should_lock: bool = False,
        tags: Optional[Iterable[str]] = None,
    ) -> NoteView:
        """
        Edit a note's content, lock state and tags.

        Keeping a locked note locked without a new password reuses its
        password hash; the content is re-encrypted under a fresh IV either way.

        Raises:
            NotFoundError: unknown id
            TrashedError: note is in the trash
            ValidationError: locking an unlocked note without a password
        """
        tag_list = clean_tags(tags)
        self._require_utf8(content, password, tag_list)
        new_hash = self._hash_password(password) if should_lock else None
        sealed = self.cipher.encrypt_text(content) if should_lock else None
        preview = make_preview(content, self.preview_length)

        def change(record: NoteRecord) -> NoteRecord:
            self._require_active(record)
            state: LockState
            if should_lock:
                password_hash = new_hash
                if password_hash is None:
                    current = record.state
                    if not isinstance(current, Locked):
                        raise ValidationError("A password is required to lock this note")
                    password_hash = current.password_hash
                iv, encrypted_data = sealed
                state = Locked(iv=iv, encrypted_data=encrypted_data, password_hash=password_hash)
            else:
                state = Unlocked(content=content)
            return record.with_state(state, preview=preview, updated_at=self._clock(), tags=tag_list)

        record = self._update(note_id, change)
        logger.info(f"Edited note {note_id} (locked={record.locked})")
        return NoteView.from_record(record)

    def unlock_note(self, note_id: int, password: str) -> NoteView:
        """
        Verify the password and return the note with its plaintext.

        Nothing is written; the note stays locked on disk.

        Raises:
            NotFoundError: unknown id
            TrashedError: note is in the trash
            AuthenticationError: wrong password
            DecryptionError: stored ciphertext cannot be decrypted
        """
        self._require_utf8(password=password)
        record = self._get(note_id)
        self._require_active(record)

        state = record.state
        if isinstance(state, Unlocked):
            return NoteView.from_record(record)

        if not self.hasher.verify(password or "", state.password_hash):
            logger.info(f"Rejected unlock of note {note_id}: incorrect password")
            raise AuthenticationError("Incorrect password")

        plaintext = self.cipher.decrypt_text(state.iv, state.encrypted_data)
        return NoteView.from_record(record, plaintext=plaintext)

    def delete_note(self, note_id: int) -> NoteView:
        """Move a note to the trash. Its lock state is kept."""

        def change(record: NoteRecord) -> NoteRecord:
            if record.is_trashed:
                return record
            now = self._clock()
            return record.updated(deleted_at=now, updated_at=now)

        record = self._update(note_id, change)
        logger.info(f"Moved note {note_id} to trash")
        return NoteView.from_record(record)

    def restore_note(self, note_id: int) -> NoteView:
        """Bring a note back from the trash."""

        def change(record: NoteRecord) -> NoteRecord:
            if not record.is_trashed:
                return record
            return record.updated(deleted_at=None, updated_at=self._clock())

        record = self._update(note_id, change)
        logger.info(f"Restored note {note_id} from trash")
        return NoteView.from_record(record)

    def purge_note(self, note_id: int) -> None:
        """Remove a trashed note permanently."""

        def apply(document: NoteDocument) -> NoteDocument:
            index = self._index_of(document, note_id)
            if not document[index].is_trashed:
                raise ValidationError("Only notes in the trash can be deleted forever")
            del document[index]
            return document

        self.store.transaction(apply)
        logger.info(f"Deleted note {note_id} forever")

    def empty_trash(self) -> int:
        """Purge every trashed note and return how many were removed."""
        purged = 0

        def apply(document: NoteDocument) -> NoteDocument:
            nonlocal purged
            kept = [record for record in document if not record.is_trashed]
            purged = len(document) - len(kept)
            return kept

        self.store.transaction(apply)
        logger.info(f"Emptied trash ({purged} notes)")
        return purged

    def toggle_pin(self, note_id: int, pinned: bool) -> NoteView:
        """Set whether an active note is pinned."""

        def change(record: NoteRecord) -> NoteRecord:
            self._require_active(record)
            return record.updated(pinned=bool(pinned), updated_at=self._clock())

        return NoteView.from_record(self._update(note_id, change))

    def list_active(self) -> List[NoteView]:
        """Notes not in the trash, pinned first then most recently updated."""
        records = [record for record in self.store.load() if not record.is_trashed]
        records.sort(key=lambda r: (not r.pinned, -r.updated_at))
        return [NoteView.from_record(record) for record in records]

    def list_trash(self) -> List[NoteView]:
        """Trashed notes, most recently deleted first."""
        records = [record for record in self.store.load() if record.is_trashed]
        records.sort(key=lambda r: r.deleted_at, reverse=True)
        return [NoteView.from_record(record) for record in records]
