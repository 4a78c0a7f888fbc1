"""
DragDropCoordinator - the drag-and-drop state machine.

    IDLE --start_drag--> DRAGGING --drag_over/drag_leave--> DRAGGING
    DRAGGING --drop--> IDLE        (move applied, or a silent no-op)
    DRAGGING --end_drag--> IDLE    (cancelled)

An invalid drop is not an error for the user: the coordinator returns to
IDLE and hands back the collection unchanged.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from smartnotes.core.domain import paths
from smartnotes.core.domain.errors import NoteOrganizerError
from smartnotes.core.domain.folder import DragItem, ItemKind
from smartnotes.core.domain.note import Note
from smartnotes.core.services.folder_service import FolderOpsEngine
from smartnotes.core.services.move_service import MoveEngine, subtree_destination

logger = logging.getLogger(__name__)


class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class DropTarget:
    """Where the pointer is: a folder (path is the folder) or a note."""
    kind: ItemKind
    path: str
    id: Optional[str] = None


@dataclass
class DropResult:
    notes: List[Note]
    moved: bool
    message: Optional[str] = None
    destination: Optional[str] = None


class DragDropCoordinator:
    def __init__(self, move_engine: MoveEngine, folder_ops: Optional[FolderOpsEngine] = None):
        self.move_engine = move_engine
        self.folder_ops = folder_ops
        self.state = DragState.IDLE
        self.item: Optional[DragItem] = None
        self.hovered: Optional[DropTarget] = None

    @property
    def is_dragging(self) -> bool:
        return self.state is DragState.DRAGGING

    def start_drag(self, item: DragItem) -> None:
        if item.kind is ItemKind.FOLDER:
            path = paths.normalize(item.path)
        else:
            path = paths.from_folder_path(paths.to_folder_path(item.path))
        self.item = DragItem(kind=item.kind, id=item.id, path=path)
        self.hovered = None
        self.state = DragState.DRAGGING

    def start_note_drag(self, note: Note) -> None:
        self.start_drag(DragItem(kind=ItemKind.NOTE, id=note.id, path=note.folder_id))

    def start_folder_drag(self, path: str) -> None:
        path = paths.normalize(path)
        self.start_drag(DragItem(kind=ItemKind.FOLDER, id=path, path=path))

    def drag_over(self, target: DropTarget) -> None:
        if self.is_dragging:
            self.hovered = target

    def drag_leave(self) -> None:
        self.hovered = None

    def end_drag(self) -> None:
        self._reset()

    def resolve_target(self, target: DropTarget, notes: List[Note]) -> str:
        """A drop onto a note means a drop into the folder holding that note."""
        if target.kind is ItemKind.NOTE and target.id is not None:
            for note in notes:
                if note.id == target.id:
                    return note.folder_id
        return paths.normalize(target.path)

    def validate(self, target_path: str) -> Optional[str]:
        """Returns why dropping the current item on target_path is refused, or None."""
        if self.item is None:
            return "Nothing is being dragged"
        if target_path == self.item.path:
            return "Dropped onto itself"
        if self.item.kind is ItemKind.FOLDER and paths.is_descendant(target_path, self.item.path):
            return "A folder cannot be moved into its own subfolder"
        return None

    def drop(self, target: Optional[DropTarget], notes: List[Note]) -> DropResult:
        """Validates and applies the drop, then returns to IDLE either way."""
        target = target or self.hovered
        item = self.item
        if not self.is_dragging or item is None or target is None:
            self._reset()
            return DropResult(notes=notes, moved=False)

        try:
            target_path = self.resolve_target(target, notes)
        except NoteOrganizerError as e:
            self._reset()
            return DropResult(notes=notes, moved=False, message=str(e))

        reason = self.validate(target_path)
        if reason is not None:
            logger.debug("Ignored drop of %s on %s: %s", item.path, target_path, reason)
            self._reset()
            return DropResult(notes=notes, moved=False, message=reason)

        try:
            if item.kind is ItemKind.FOLDER:
                destination = subtree_destination(item.path, target_path)
                if destination == item.path:
                    logger.debug("Ignored drop of %s on its own parent %s", item.path, target_path)
                    self._reset()
                    return DropResult(notes=notes, moved=False, message="Already in this folder")
                registered = self.folder_ops.registered if self.folder_ops is not None else ()
                updated = self.move_engine.move_folder(notes, item.path, target_path, extra_folders=registered)
                if self.folder_ops is not None:
                    self.folder_ops.rewrite_registered(item.path, destination)
                message = "Folder moved successfully"
            else:
                updated = self.move_engine.move_note(notes, item.id, target_path)
                destination = target_path
                message = "Note moved successfully"
        except NoteOrganizerError as e:
            logger.debug("Drop of %s on %s rejected: %s", item.path, target_path, e)
            self._reset()
            return DropResult(notes=notes, moved=False, message=str(e))

        self._reset()
        return DropResult(notes=updated, moved=True, message=message, destination=destination)

    def _reset(self) -> None:
        self.state = DragState.IDLE
        self.item = None
        self.hovered = None
