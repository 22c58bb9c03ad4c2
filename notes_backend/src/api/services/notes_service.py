import logging
import random
from typing import List, Optional

from sqlalchemy.orm import Session

from src.api.errors import NoteNotFound
from src.api.models import DEFAULT_NOTE_TITLE, Note, User, utcnow

logger = logging.getLogger(__name__)

# Color palette
PALETTE = (
    "#f6d365",  # yellow
    "#a770ef",  # purple
    "#fd6e6a",  # red
    "#42e695",  # green
    "#43cea2",  # teal
    "#f7971e",  # orange
    "#2b86c5",  # blue
    "#ffb6b9",  # pink
    "#6a89cc",  # indigo
    "#f8ffae",  # light yellow
)


def random_color() -> str:
    return random.choice(PALETTE)


def list_notes(db: Session, owner: User, q: Optional[str] = None) -> List[Note]:
    query = db.query(Note).filter(Note.user_id == owner.id)
    if q:
        # Match q literally: LIKE wildcards in user input are escaped
        escaped = q.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        like = f"%{escaped}%"
        query = query.filter(
            (Note.title.ilike(like, escape="\\")) | (Note.content.ilike(like, escape="\\"))
        )
    return query.order_by(Note.id).all()


def get_owned_note(db: Session, owner: User, note_id: int) -> Note:
    """Look a note up by id and owner together, so other users' notes read as missing."""
    note = db.query(Note).filter(Note.id == note_id, Note.user_id == owner.id).first()
    if note is None:
        raise NoteNotFound()
    return note


def create_note(
    db: Session,
    owner: User,
    title: str = DEFAULT_NOTE_TITLE,
    content: str = "",
    color: Optional[str] = None,
) -> Note:
    note = Note(title=title, content=content, color=color or random_color(), user_id=owner.id)
    db.add(note)
    db.commit()
    db.refresh(note)
    logger.info("Note created", extra={"event": "note_created", "extra_data": {"note_id": note.id, "user_id": owner.id}})
    return note


def update_note(
    db: Session, owner: User, note_id: int, title: str, content: str, color: str, pinned: bool
) -> Note:
    note = get_owned_note(db, owner, note_id)
    note.title = title
    note.content = content
    note.color = color
    note.pinned = pinned
    # onupdate only fires when a column changes; every save counts as a write
    note.updated_at = utcnow()
    db.commit()
    db.refresh(note)
    logger.info("Note updated", extra={"event": "note_updated", "extra_data": {"note_id": note.id, "pinned": note.pinned}})
    return note


def delete_note(db: Session, owner: User, note_id: int) -> None:
    note = get_owned_note(db, owner, note_id)
    db.delete(note)
    db.commit()
    logger.info("Note deleted", extra={"event": "note_deleted", "extra_data": {"note_id": note_id}})
