"""
FolderOpsEngine - create and delete folders.

Creating a folder writes nothing into the note collection; the new path is
only remembered as a registered empty folder so the tree can show it until
a note lands there. Deleting a folder removes every note inside it.
"""

import logging
from typing import Iterable, List, Optional

from smartnotes.core.domain import paths
from smartnotes.core.domain.errors import DuplicateError, NotFoundError, ValidationError
from smartnotes.core.domain.note import Note
from smartnotes.core.services.hierarchy_service import folder_exists
from smartnotes.core.services.move_service import in_subtree

logger = logging.getLogger(__name__)


class FolderOpsEngine:
    def __init__(self, registered: Optional[Iterable[str]] = None):
        self._registered: List[str] = []
        for path in registered or ():
            self.register(path)

    @property
    def registered(self) -> List[str]:
        """Registered empty folders, in registration order."""
        return list(self._registered)

    def register(self, path: str) -> None:
        path = paths.normalize(path)
        if path == paths.ROOT:
            return
        if path not in self._registered:
            self._registered.append(path)

    def create_folder(self, notes: List[Note], name: str, parent_path: str = paths.ROOT) -> str:
        """
        Registers the folder name under parent_path and returns its path.
        Raises DuplicateError if that folder already exists.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Folder name is empty")
        candidate = paths.join(parent_path, name)

        if folder_exists(candidate, notes, self._registered):
            raise DuplicateError(f"Folder {candidate} already exists")

        self._registered.append(candidate)
        logger.info("Created folder %s", candidate)
        return candidate

    def delete_folder(self, notes: List[Note], path: str) -> List[Note]:
        """Returns the collection without the notes at or below path."""
        path = paths.normalize(path)
        if path == paths.ROOT:
            raise ValidationError("The root folder cannot be deleted")
        if not folder_exists(path, notes, self._registered):
            raise NotFoundError(f"Folder {path} not found")

        remaining = [note for note in notes if not in_subtree(note, path)]
        self._registered = [p for p in self._registered if not paths.is_within(p, path)]

        logger.info("Deleted folder %s (%d notes removed)", path, len(notes) - len(remaining))
        return remaining

    def rewrite_registered(self, source: str, new_root: str) -> None:
        """Follows a folder move or rename for the registered empty folders."""
        source = paths.normalize(source)
        rewritten = []
        for path in self._registered:
            if paths.is_within(path, source):
                path = paths.rebase(path, source, new_root)
            if path not in rewritten:
                rewritten.append(path)
        self._registered = rewritten

    def prune(self, notes: List[Note]) -> None:
        """Drops registrations that notes now make redundant."""
        occupied = {note.folder_path for note in notes if note.folder_path}
        self._registered = [
            p for p in self._registered
            if not any(paths.is_within(o, p) for o in occupied)
        ]
