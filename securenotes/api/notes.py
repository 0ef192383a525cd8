"""Notes API routes.

Routes are plain functions so bcrypt and file I/O run in the worker pool
instead of on the event loop.
"""
from fastapi import APIRouter

from securenotes.core.deps import NoteServiceDep
from securenotes.schemas.common import ApiResponse
from securenotes.schemas.note import (
    NoteEdit,
    NoteSave,
    NoteUnlock,
    NoteView,
    PinUpdate,
    TrashEmptied,
)

router = APIRouter()


@router.get("", response_model=ApiResponse[list[NoteView]])
def list_notes(service: NoteServiceDep):
    """List notes that are not in the trash."""
    return ApiResponse(data=service.list_active())


@router.post("", response_model=ApiResponse[NoteView])
def save_note(note: NoteSave, service: NoteServiceDep):
    """Create a note, or overwrite the note with the given id."""
    return ApiResponse(
        data=service.save_note(
            note.content,
            note_id=note.id,
            password=note.password,
            should_lock=note.should_lock,
            tags=note.tags,
        )
    )


@router.get("/trash", response_model=ApiResponse[list[NoteView]])
def list_trash(service: NoteServiceDep):
    """List trashed notes, most recently deleted first."""
    return ApiResponse(data=service.list_trash())


@router.delete("/trash", response_model=ApiResponse[TrashEmptied])
def empty_trash(service: NoteServiceDep):
    """Delete every trashed note forever."""
    return ApiResponse(data=TrashEmptied(purged=service.empty_trash()))


@router.put("/{note_id}", response_model=ApiResponse[NoteView])
def edit_note(note_id: int, note: NoteEdit, service: NoteServiceDep):
    """Edit content, lock state and tags of a note."""
    return ApiResponse(
        data=service.edit_note(
            note_id,
            note.content,
            password=note.password,
            should_lock=note.should_lock,
            tags=note.tags,
        )
    )


@router.post("/{note_id}/unlock", response_model=ApiResponse[NoteView])
def unlock_note(note_id: int, request: NoteUnlock, service: NoteServiceDep):
    """Return a locked note's plaintext if the password matches."""
    return ApiResponse(data=service.unlock_note(note_id, request.password))


@router.put("/{note_id}/pin", response_model=ApiResponse[NoteView])
def pin_note(note_id: int, request: PinUpdate, service: NoteServiceDep):
    """Pin or unpin a note."""
    return ApiResponse(data=service.toggle_pin(note_id, request.pinned))


@router.delete("/{note_id}", response_model=ApiResponse[NoteView])
def delete_note(note_id: int, service: NoteServiceDep):
    """Move a note to the trash."""
    return ApiResponse(data=service.delete_note(note_id))


@router.post("/{note_id}/restore", response_model=ApiResponse[NoteView])
def restore_note(note_id: int, service: NoteServiceDep):
    """Restore a note from the trash."""
    return ApiResponse(data=service.restore_note(note_id))


@router.delete("/{note_id}/forever", response_model=ApiResponse[None])
def delete_forever(note_id: int, service: NoteServiceDep):
    """Delete a trashed note permanently."""
    service.purge_note(note_id)
    return ApiResponse()
