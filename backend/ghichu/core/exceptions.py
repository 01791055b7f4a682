from __future__ import annotations


class NoteAccessError(Exception):
    """Base class for errors raised by the note access layer."""

    detail = "Note operation failed"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.detail)
        self.detail = detail or self.detail


class Unauthenticated(NoteAccessError):
    """Raised by write operations when no caller identity is available."""

    detail = "Authentication required"


class NotFoundOrForbidden(NoteAccessError):
    """Raised when a target note is missing or owned by someone else.

    Both cases share one error so callers cannot discover other users' notes.
    """

    detail = "Note not found or you do not have access to it"
