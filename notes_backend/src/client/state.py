"""
In-memory view state for a user's notes: the fetched list, the selected note
and its edit buffers, and the title search.

Every action issues one API call. A failure leaves the state unchanged and
records a fixed message in `error`; `NotAuthenticated` is not caught.
"""
from typing import Any, Dict, List, Optional

from src.client.session import ApiError, NotesApiClient

Note = Dict[str, Any]

DEFAULT_TITLE = "Untitled Note"


def is_light_color(hex_color: Optional[str]) -> bool:
    """True when dark text reads better on this background color."""
    if not hex_color:
        return False
    digits = hex_color.lstrip("#")
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    rgb = int(digits, 16)
    r = (rgb >> 16) & 0xFF
    g = (rgb >> 8) & 0xFF
    b = rgb & 0xFF
    return (r * 0.299 + g * 0.587 + b * 0.114) > 186


class NoteBoard:
    def __init__(self, api: NotesApiClient):
        self.api = api
        self.notes: List[Note] = []
        self.selected: Optional[Note] = None
        self.edit_title = ""
        self.edit_content = ""
        self.search = ""
        self.error = ""

    # Derived views

    @property
    def filtered_notes(self) -> List[Note]:
        needle = self.search.lower()
        return [n for n in self.notes if needle in (n.get("title") or "").lower()]

    @property
    def pinned_notes(self) -> List[Note]:
        return [n for n in self.filtered_notes if n.get("pinned")]

    @property
    def other_notes(self) -> List[Note]:
        return [n for n in self.filtered_notes if not n.get("pinned")]

    @property
    def visible_notes(self) -> List[Note]:
        return self.pinned_notes + self.other_notes

    # Helpers

    def _load_into_editor(self, note: Optional[Note]) -> None:
        self.selected = note
        self.edit_title = (note or {}).get("title") or ""
        self.edit_content = (note or {}).get("content") or ""

    def _replace(self, updated: Note) -> None:
        self.notes = [updated if n["id"] == updated["id"] else n for n in self.notes]

    # Actions

    def refresh(self) -> bool:
        self.error = ""
        try:
            self.notes = self.api.list_notes()
        except ApiError:
            self.error = "Failed to fetch notes"
            return False
        if self.selected is not None:
            current = next((n for n in self.notes if n["id"] == self.selected["id"]), None)
            self._load_into_editor(current)
        return True

    def select(self, note: Note) -> None:
        self._load_into_editor(note)

    def new_note(self) -> Optional[Note]:
        try:
            note = self.api.create_note(title=DEFAULT_TITLE, content="")
        except ApiError:
            self.error = "Failed to create note"
            return None
        self.notes = [note] + self.notes
        self._load_into_editor(note)
        return note

    def save(self) -> Optional[Note]:
        if self.selected is None:
            return None
        try:
            note = self.api.update_note(
                self.selected["id"],
                title=self.edit_title,
                content=self.edit_content,
                color=self.selected["color"],
                pinned=self.selected["pinned"],
            )
        except ApiError:
            self.error = "Failed to save note"
            return None
        self._replace(note)
        self.selected = note
        return note

    def delete(self) -> bool:
        if self.selected is None:
            return False
        note_id = self.selected["id"]
        try:
            self.api.delete_note(note_id)
        except ApiError:
            self.error = "Failed to delete note"
            return False
        self.notes = [n for n in self.notes if n["id"] != note_id]
        self._load_into_editor(None)
        return True

    def change_color(self, color: str) -> Optional[Note]:
        if self.selected is None:
            return None
        try:
            note = self.api.update_note(
                self.selected["id"],
                title=self.edit_title,
                content=self.edit_content,
                color=color,
                pinned=self.selected["pinned"],
            )
        except ApiError:
            self.error = "Failed to update color"
            return None
        self._replace(note)
        self.selected = note
        return note

    def toggle_pin(self, note: Note) -> Optional[Note]:
        try:
            updated = self.api.update_note(
                note["id"],
                title=note["title"],
                content=note["content"],
                color=note["color"],
                pinned=not note["pinned"],
            )
        except ApiError:
            self.error = "Failed to pin/unpin note"
            return None
        self._replace(updated)
        if self.selected is not None and self.selected["id"] == updated["id"]:
            self.selected = updated
        return updated

    def logout(self) -> None:
        self.api.logout()
        self.notes = []
        self.search = ""
        self._load_into_editor(None)
