"""
Path algebra for virtual folders.

A folder path is absolute and '/'-delimited, e.g. ``/academics/biology``.
The root folder is ``/``; a note stored at the root carries ``None`` as its
folder path instead.

Every comparison here works on normalized strings, so ``/abc`` is never
mistaken for an ancestor of ``/abcdef``.
"""

from typing import List, Optional

from smartnotes.core.domain.errors import ValidationError

ROOT = "/"
SEPARATOR = "/"
ROOT_DISPLAY_NAME = "My Notes"


def normalize(path: str) -> str:
    """Trims trailing slashes and validates the path, returning it in canonical form."""
    if not isinstance(path, str):
        raise ValidationError(f"Folder path must be a string, got {type(path).__name__}")
    if not path:
        raise ValidationError("Folder path is empty")
    if not path.startswith(SEPARATOR):
        raise ValidationError(f"Folder path must be absolute: {path!r}")

    trimmed = path.rstrip(SEPARATOR)
    if not trimmed:
        return ROOT

    parts = trimmed.split(SEPARATOR)[1:]
    for segment in parts:
        if not segment:
            raise ValidationError(f"Folder path has an empty segment: {path!r}")
    return trimmed


def is_root(path: str) -> bool:
    return normalize(path) == ROOT


def to_folder_path(path: Optional[str]) -> Optional[str]:
    """Converts a folder path into the value stored on a note (None for root)."""
    if path is None:
        return None
    path = normalize(path)
    return None if path == ROOT else path


def from_folder_path(folder_path: Optional[str]) -> str:
    """Inverse of to_folder_path: a note's folder path as a folder id."""
    return ROOT if folder_path is None else normalize(folder_path)


def segments(path: str) -> List[str]:
    path = normalize(path)
    if path == ROOT:
        return []
    return path.split(SEPARATOR)[1:]


def last_segment(path: str) -> str:
    parts = segments(path)
    if not parts:
        raise ValidationError("The root folder has no name segment")
    return parts[-1]


def parent_of(path: str) -> Optional[str]:
    """
    Parent of a folder path in note terms: None for the root and for
    top-level folders (their parent is the root), otherwise the path minus
    its last segment.
    """
    path = normalize(path)
    if path == ROOT:
        return None
    index = path.rfind(SEPARATOR)
    if index == 0:
        return None
    return path[:index]


def is_descendant(candidate: str, ancestor: str) -> bool:
    """True iff candidate lies strictly below ancestor."""
    candidate = normalize(candidate)
    ancestor = normalize(ancestor)
    if candidate == ancestor:
        return False
    if ancestor == ROOT:
        return True
    return candidate.startswith(ancestor + SEPARATOR)


def is_within(candidate: str, ancestor: str) -> bool:
    """True iff candidate is ancestor itself or lies below it."""
    return normalize(candidate) == normalize(ancestor) or is_descendant(candidate, ancestor)


def join(parent: str, segment: str) -> str:
    parent = normalize(parent)
    if not isinstance(segment, str) or not segment:
        raise ValidationError("Folder name is empty")
    if SEPARATOR in segment:
        raise ValidationError(f"Folder name may not contain '/': {segment!r}")
    if parent == ROOT:
        return SEPARATOR + segment
    return parent + SEPARATOR + segment


def display_name(path: str) -> str:
    path = normalize(path)
    if path == ROOT:
        return ROOT_DISPLAY_NAME
    return last_segment(path)


def ancestors(path: str) -> List[str]:
    """All proper ancestors of path, nearest first, ending with the root."""
    path = normalize(path)
    result = []
    while path != ROOT:
        parent = parent_of(path)
        path = ROOT if parent is None else parent
        result.append(path)
    return result


def rebase(path: str, old_prefix: str, new_prefix: str) -> str:
    """
    Replaces the old_prefix of path with new_prefix, keeping the remainder
    exactly. path must be old_prefix or lie below it.
    """
    path = normalize(path)
    old_prefix = normalize(old_prefix)
    new_prefix = normalize(new_prefix)
    if not is_within(path, old_prefix):
        raise ValidationError(f"{path!r} is not inside {old_prefix!r}")
    if old_prefix == ROOT:
        remainder = path if path != ROOT else ""
    else:
        remainder = path[len(old_prefix):]
    if new_prefix == ROOT:
        return remainder or ROOT
    return new_prefix + remainder
