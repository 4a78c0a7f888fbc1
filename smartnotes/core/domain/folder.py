from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Tuple


@dataclass(frozen=True)
class Folder:
    """
    Derived view of a folder. Built fresh from the note collection and
    never persisted; id is the folder's path.
    """
    id: str
    name: str
    path: str
    parent_path: Optional[str]
    children: Tuple["Folder", ...] = field(default_factory=tuple)
    is_expanded: bool = False

    @property
    def is_root(self) -> bool:
        return self.parent_path is None

    def walk(self) -> Iterator["Folder"]:
        """Depth-first, pre-order traversal including this folder."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, path: str) -> Optional["Folder"]:
        for folder in self.walk():
            if folder.path == path:
                return folder
        return None

    def child_names(self) -> Tuple[str, ...]:
        return tuple(child.name for child in self.children)


class ItemKind(Enum):
    FOLDER = "FOLDER"
    NOTE = "NOTE"


@dataclass(frozen=True)
class DragItem:
    """The item being dragged: a folder (id == path) or a note (path == its folder)."""
    kind: ItemKind
    id: str
    path: str
