"""
HierarchyBuilder - derives the folder tree from the flat note collection.

Folders are never stored. A folder exists when it is the root, when some
note's folder path equals it or lies below it, or when it was registered
as an empty folder by create-folder. Every ancestor of an existing folder
exists too, so the tree never has gaps.
"""

import logging
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from smartnotes.core.domain import paths
from smartnotes.core.domain.folder import Folder
from smartnotes.core.domain.note import Note

logger = logging.getLogger(__name__)


def folder_sort_key(name: str) -> Tuple[str, str]:
    """Case-insensitive name order with the raw name as a stable tie-break."""
    return (name.casefold(), name)


def existing_folder_paths(notes: Iterable[Note], extra_folders: Iterable[str] = ()) -> Set[str]:
    """Every folder path that structurally exists, root included."""
    found = {paths.ROOT}
    referenced = [note.folder_path for note in notes if note.folder_path]
    referenced.extend(paths.normalize(p) for p in extra_folders)

    for path in referenced:
        if path in found:
            continue
        found.add(path)
        # Ancestors of a path already seen are already in the set.
        for ancestor in paths.ancestors(path):
            if ancestor in found:
                break
            found.add(ancestor)
    return found


def folder_exists(path: str, notes: Iterable[Note], extra_folders: Iterable[str] = ()) -> bool:
    path = paths.normalize(path)
    if path == paths.ROOT:
        return True
    if any(paths.normalize(p) == path or paths.is_descendant(p, path) for p in extra_folders):
        return True
    return any(
        note.folder_path is not None and paths.is_within(note.folder_path, path)
        for note in notes
    )


def notes_in_folder(notes: Iterable[Note], path: str) -> List[Note]:
    """Notes placed directly in the folder; subfolder notes are excluded."""
    folder_path = paths.to_folder_path(path)
    return [note for note in notes if note.folder_path == folder_path]


def build_hierarchy(
    notes: Iterable[Note],
    expanded: Iterable[str] = (),
    extra_folders: Iterable[str] = (),
) -> Folder:
    """
    Builds the folder tree and returns its root.

    The result depends only on the set of folder paths, the expansion set
    and the registered folders, never on note order or earlier calls.
    """
    expanded = {paths.normalize(p) for p in expanded}
    all_paths = existing_folder_paths(notes, extra_folders)

    children: Dict[str, List[str]] = {path: [] for path in all_paths}
    for path in all_paths:
        if path == paths.ROOT:
            continue
        parent = paths.parent_of(path) or paths.ROOT
        children[parent].append(path)

    def build(path: str, parent_path: Optional[str]) -> Folder:
        child_paths = sorted(
            children[path],
            key=lambda p: folder_sort_key(paths.last_segment(p)),
        )
        return Folder(
            id=path,
            name=paths.display_name(path),
            path=path,
            parent_path=parent_path,
            children=tuple(build(child, path) for child in child_paths),
            is_expanded=path in expanded,
        )

    return build(paths.ROOT, None)


class HierarchyBuilder:
    """
    Memoizing wrapper around build_hierarchy.

    Folder views are immutable, so the last tree can be handed out again
    whenever the folder paths, expansion set and registered folders match.
    """

    def __init__(self):
        self._last_key: Optional[Tuple[FrozenSet[str], FrozenSet[str], FrozenSet[str]]] = None
        self._last_tree: Optional[Folder] = None
        self.builds = 0

    def build(
        self,
        notes: Iterable[Note],
        expanded: Iterable[str] = (),
        extra_folders: Iterable[str] = (),
    ) -> Folder:
        notes = list(notes)
        key = (
            frozenset(note.folder_path for note in notes if note.folder_path),
            frozenset(paths.normalize(p) for p in expanded),
            frozenset(paths.normalize(p) for p in extra_folders),
        )
        if key == self._last_key and self._last_tree is not None:
            return self._last_tree

        tree = build_hierarchy(notes, expanded=key[1], extra_folders=key[2])
        self._last_key = key
        self._last_tree = tree
        self.builds += 1
        logger.debug("Built folder tree #%d (%d folders)", self.builds, sum(1 for _ in tree.walk()))
        return tree

    def invalidate(self) -> None:
        self._last_key = None
        self._last_tree = None
