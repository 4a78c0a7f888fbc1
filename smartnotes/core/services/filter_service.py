from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from smartnotes.core.domain import paths
from smartnotes.core.domain.note import Note


@dataclass(frozen=True)
class NoteFilter:
    """
    Criteria for the visible note list. Each criterion left empty matches
    every note; the ones that are set are combined with AND.
    """
    query: str = ""
    selected_tags: Tuple[str, ...] = field(default_factory=tuple)
    active_folder: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.query and not self.selected_tags and self.active_folder is None


def matches_query(note: Note, query: str) -> bool:
    """Case-insensitive substring match against title, content or any tag."""
    if not query:
        return True
    needle = query.lower()
    return (
        needle in note.title.lower()
        or needle in note.content.lower()
        or any(needle in tag.lower() for tag in note.tags)
    )


def has_all_tags(note: Note, selected_tags: Iterable[str]) -> bool:
    return all(tag in note.tags for tag in selected_tags)


def in_folder(note: Note, active_folder: Optional[str]) -> bool:
    """Direct children only; notes in subfolders belong to their own folder."""
    if active_folder is None:
        return True
    return note.folder_path == paths.to_folder_path(active_folder)


def filter_notes(notes: List[Note], criteria: NoteFilter) -> List[Note]:
    if criteria.is_empty:
        return list(notes)
    return [
        note for note in notes
        if matches_query(note, criteria.query)
        and has_all_tags(note, criteria.selected_tags)
        and in_folder(note, criteria.active_folder)
    ]


def all_tags(notes: Iterable[Note]) -> List[str]:
    """Distinct tags across the collection, in first-seen order."""
    seen = {}
    for note in notes:
        for tag in note.tags:
            seen.setdefault(tag, None)
    return list(seen)


def toggle_tag(selected_tags: Iterable[str], tag: str) -> Tuple[str, ...]:
    selected = list(selected_tags)
    if tag in selected:
        selected.remove(tag)
    else:
        selected.append(tag)
    return tuple(selected)
