"""
MoveEngine - rewrites folder paths when a note or a whole folder moves.

Every operation takes the current collection and returns a new list. The
input list and the notes in it are never modified, so a failed
precondition leaves the caller's collection exactly as it was.
"""

import dataclasses
import logging
from typing import Callable, Iterable, List, Optional

from smartnotes.core.domain import paths
from smartnotes.core.domain.errors import (
    CycleError,
    DuplicateError,
    NotFoundError,
    SelfMoveError,
    ValidationError,
)
from smartnotes.core.domain.note import Note, utc_now
from smartnotes.core.services.hierarchy_service import folder_exists

logger = logging.getLogger(__name__)


def in_subtree(note: Note, folder: str) -> bool:
    """Whether the note sits in folder or any of its subfolders."""
    if note.folder_path is None:
        return False
    return paths.is_within(note.folder_path, folder)


def subtree_members(notes: List[Note], folder: str) -> List[Note]:
    folder = paths.normalize(folder)
    return [note for note in notes if in_subtree(note, folder)]


def rewrite_subtree(
    notes: List[Note],
    source: str,
    new_root: str,
    timestamp: Optional[str] = None,
) -> List[Note]:
    """
    Moves the source prefix of every note in the source subtree to
    new_root, keeping the rest of each path. Notes outside the subtree are
    carried over as the same objects.
    """
    source = paths.normalize(source)
    new_root = paths.normalize(new_root)
    timestamp = timestamp or utc_now()

    result = []
    for note in notes:
        if in_subtree(note, source):
            note = dataclasses.replace(
                note,
                folder_path=paths.to_folder_path(paths.rebase(note.folder_path, source, new_root)),
                updated_at=timestamp,
            )
        result.append(note)
    return result


def check_folder_move(source: str, target: str) -> None:
    """Raises if moving source into target would be a self-move or a cycle."""
    source = paths.normalize(source)
    target = paths.normalize(target)
    if source == paths.ROOT:
        raise ValidationError("The root folder cannot be moved")
    if target == source:
        raise SelfMoveError(f"Cannot move {source} onto itself")
    if paths.is_descendant(target, source):
        raise CycleError(f"Cannot move {source} into its own subfolder {target}")


def subtree_destination(source: str, target: str) -> str:
    """Where the source folder ends up when dropped into target."""
    return paths.join(target, paths.last_segment(source))


class MoveEngine:
    def __init__(self, clock: Callable[[], str] = utc_now):
        self.clock = clock

    def move_note(self, notes: List[Note], note_id: str, target_path: str) -> List[Note]:
        """Places one note in target_path (None on the note for the root)."""
        folder_path = paths.to_folder_path(target_path)
        if not any(note.id == note_id for note in notes):
            raise NotFoundError(f"Note {note_id!r} not found")

        timestamp = self.clock()
        result = []
        for note in notes:
            if note.id == note_id:
                note = dataclasses.replace(note, folder_path=folder_path, updated_at=timestamp)
            result.append(note)

        logger.debug("Moved note %s to %s", note_id, paths.from_folder_path(folder_path))
        return result

    def move_folder(
        self,
        notes: List[Note],
        source_path: str,
        target_path: str,
        extra_folders: Iterable[str] = (),
    ) -> List[Note]:
        """
        Moves the folder at source_path, with everything below it, into
        target_path. Subfolder structure under the moved folder is kept.
        extra_folders are registered empty folders that count as existing.
        """
        check_folder_move(source_path, target_path)
        source = paths.normalize(source_path)
        if not folder_exists(source, notes, extra_folders):
            raise NotFoundError(f"Folder {source} not found")
        new_root = subtree_destination(source, target_path)

        if new_root == source:
            # Already directly inside target.
            return list(notes)

        result = rewrite_subtree(notes, source, new_root, timestamp=self.clock())
        logger.debug("Moved folder %s to %s", source, new_root)
        return result

    def rename_folder(
        self,
        notes: List[Note],
        source_path: str,
        new_name: str,
        extra_folders: Iterable[str] = (),
    ) -> List[Note]:
        """Renames the last segment of a folder, rewriting its whole subtree."""
        source = paths.normalize(source_path)
        if source == paths.ROOT:
            raise ValidationError("The root folder cannot be renamed")
        if not folder_exists(source, notes, extra_folders):
            raise NotFoundError(f"Folder {source} not found")
        new_name = (new_name or "").strip()
        parent = paths.parent_of(source) or paths.ROOT
        new_root = paths.join(parent, new_name)
        if new_root == source:
            return list(notes)
        if folder_exists(new_root, notes, extra_folders):
            raise DuplicateError(f"A folder named {new_name!r} already exists in {parent}")
        return rewrite_subtree(notes, source, new_root, timestamp=self.clock())
