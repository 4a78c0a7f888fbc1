import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from smartnotes.core.domain import paths
from smartnotes.core.domain.errors import ValidationError


def utc_now() -> str:
    """Timestamp format used on every note (ISO-8601, UTC)."""
    return datetime.now(timezone.utc).isoformat()


def new_note_id() -> str:
    return str(uuid.uuid4())


@dataclass
class Note:
    """
    Represents a single note in the collection.

    folder_path is None for notes at the root, otherwise a normalized
    absolute folder path. Folders themselves are never stored.
    """
    id: str
    title: str
    content: str = ""
    tags: List[str] = field(default_factory=list)
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)
    summary: Optional[str] = None
    folder_path: Optional[str] = None

    def __post_init__(self):
        self.folder_path = paths.to_folder_path(self.folder_path)

    @property
    def folder_id(self) -> str:
        """The folder this note sits in, with '/' for the root."""
        return paths.from_folder_path(self.folder_path)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "tags": list(self.tags),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "folderPath": self.folder_path,
        }
        if self.summary is not None:
            data["summary"] = self.summary
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Note":
        if not isinstance(data, dict):
            raise ValidationError(f"Note record must be an object, got {type(data).__name__}")
        try:
            note_id = data["id"]
            title = data["title"]
        except KeyError as e:
            raise ValidationError(f"Note record is missing {e}")

        tags = data.get("tags") or []
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise ValidationError(f"Note {note_id!r} has malformed tags")
        content = data.get("content")
        if content is not None and not isinstance(content, str):
            raise ValidationError(f"Note {note_id!r} has non-text content")
        summary = data.get("summary")
        if summary is not None and not isinstance(summary, str):
            raise ValidationError(f"Note {note_id!r} has a non-text summary")

        now = utc_now()
        return Note(
            id=str(note_id),
            title=str(title),
            content=content or "",
            tags=list(dict.fromkeys(tags)),
            created_at=data.get("createdAt") or now,
            updated_at=data.get("updatedAt") or now,
            summary=summary,
            folder_path=data.get("folderPath"),
        )
