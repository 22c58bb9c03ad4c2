from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from src.api.auth import get_current_user
from src.api.database import get_db
from src.api.models import User
from src.api.schemas import MessageResponse, NoteCreateRequest, NoteResponse, NoteUpdateRequest
from src.api.services import notes_service

router = APIRouter(prefix="/notes", tags=["Notes"])


# PUBLIC_INTERFACE
@router.get("", response_model=List[NoteResponse], summary="List the caller's notes")
def list_notes(
    q: Optional[str] = Query(None, description="Search query for title/content"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    List notes belonging to the current user in creation order, optionally
    narrowed to those whose title or content contains `q` (case-insensitive).
    """
    return notes_service.list_notes(db, current_user, q)


# PUBLIC_INTERFACE
@router.post("", response_model=NoteResponse, summary="Create a new note")
def create_note(
    payload: NoteCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create a new note for the authenticated user.

    Body:
        title: note title (default "Untitled Note")
        content: note content (default "")
        color: hex color; a random palette color when omitted

    Returns:
        Created NoteResponse
    """
    return notes_service.create_note(
        db, current_user, title=payload.title, content=payload.content, color=payload.color
    )


# PUBLIC_INTERFACE
@router.get("/{note_id}", response_model=NoteResponse, summary="Get a note by ID")
def get_note(
    note_id: int = Path(..., ge=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Retrieve a single note by ID. Only the owner can access it.
    """
    return notes_service.get_owned_note(db, current_user, note_id)


# PUBLIC_INTERFACE
@router.put("/{note_id}", response_model=NoteResponse, summary="Update a note by ID")
def update_note(
    payload: NoteUpdateRequest,
    note_id: int = Path(..., ge=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Replace a note's title, content, color and pinned flag. Only the owner can modify it.
    """
    return notes_service.update_note(
        db,
        current_user,
        note_id,
        title=payload.title,
        content=payload.content,
        color=payload.color,
        pinned=payload.pinned,
    )


# PUBLIC_INTERFACE
@router.delete("/{note_id}", response_model=MessageResponse, summary="Delete a note by ID")
def delete_note(
    note_id: int = Path(..., ge=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Delete a note. Only the owner can delete it.
    """
    notes_service.delete_note(db, current_user, note_id)
    return MessageResponse(message="Note deleted")
