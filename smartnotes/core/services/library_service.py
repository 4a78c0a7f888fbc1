"""
NoteLibrary - owner of the note collection.

Every user action goes through here: the engines validate and compute a
new collection, and the library swaps it in as one replacement. The
library also keeps the interaction state the engines leave to their
caller: the active note and folder, the view, the expanded folders, the
filter criteria and the last status message.
"""

import dataclasses
import logging
import os
from contextlib import contextmanager
from enum import Enum
from typing import Callable, List, Optional

from smartnotes.core.domain import paths
from smartnotes.core.domain.errors import (
    BusyError,
    DuplicateError,
    NoteOrganizerError,
    NotFoundError,
    ValidationError,
)
from smartnotes.core.domain.folder import Folder, ItemKind
from smartnotes.core.domain.note import Note, new_note_id, utc_now
from smartnotes.core.interfaces.ports import IDocumentExtractor, INoteRepository
from smartnotes.core.services import anki_export
from smartnotes.core.services.drag_drop_service import DragDropCoordinator, DropResult, DropTarget
from smartnotes.core.services.filter_service import NoteFilter, all_tags, filter_notes, toggle_tag
from smartnotes.core.services.folder_service import FolderOpsEngine
from smartnotes.core.services.hierarchy_service import HierarchyBuilder, folder_exists
from smartnotes.core.services.move_service import MoveEngine, in_subtree, subtree_destination
from smartnotes.core.services.summary_prompts import SummaryType
from smartnotes.core.services.summary_service import SummarizationService

logger = logging.getLogger(__name__)

NEW_NOTE_TITLE = "New Note"


class ViewMode(Enum):
    HOME = "home"
    FOLDERS = "folders"
    SEARCH = "search"


def title_from_filename(filename: str) -> str:
    """Display title for an imported file: its name without the last extension."""
    name = os.path.basename(filename)
    stem, ext = os.path.splitext(name)
    return stem if ext and stem else name


def create_summarizer(api_key: str, model: Optional[str] = None) -> SummarizationService:
    """Factory for the default OpenRouter-backed summarizer."""
    from smartnotes.infrastructure.llm.openrouter_provider import OpenRouterProvider

    return SummarizationService(OpenRouterProvider(api_key=api_key, model_name=model))


class NoteLibrary:
    def __init__(
        self,
        notes: Optional[List[Note]] = None,
        repo: Optional[INoteRepository] = None,
        autosave: bool = True,
        clock: Callable[[], str] = utc_now,
        summarizer_factory: Callable[[str, Optional[str]], SummarizationService] = create_summarizer,
        default_model: Optional[str] = None,
    ):
        self.notes: List[Note] = list(notes or [])
        self.repo = repo
        self.autosave = autosave
        self.clock = clock
        self.summarizer_factory = summarizer_factory

        self.move_engine = MoveEngine(clock=clock)
        self.folder_ops = FolderOpsEngine()
        self.hierarchy = HierarchyBuilder()
        self.drag_drop = DragDropCoordinator(self.move_engine, self.folder_ops)

        self.active_note_id: Optional[str] = None
        self.active_folder: str = paths.ROOT
        self.view = ViewMode.HOME
        self.expanded = {paths.ROOT}
        self.query = ""
        self.selected_tags = ()

        self.api_key = ""
        self.selected_model = default_model
        self.status_message: Optional[str] = None
        self._processing = False

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Loads saved state; anything unreadable keeps the current defaults."""
        if self.repo is None:
            return
        saved = self.repo.load_notes()
        if saved is not None:
            self.notes = saved
            self.hierarchy.invalidate()
            if self.notes and self.active_note_id is None:
                self.active_note_id = self.notes[0].id
        for path in self.repo.load_folders():
            self.folder_ops.register(path)

        settings = self.repo.load_settings()
        if settings.get("apiKey"):
            self.api_key = settings["apiKey"]
        if settings.get("selectedModel"):
            self.selected_model = settings["selectedModel"]
        logger.info("Loaded %d notes", len(self.notes))

    def save(self) -> None:
        if self.repo is None:
            return
        self.folder_ops.prune(self.notes)
        self.repo.save_notes(self.notes)
        self.repo.save_folders(self.folder_ops.registered)

    def save_settings(self, api_key: str, model: Optional[str]) -> None:
        self.api_key = api_key or ""
        self.selected_model = model
        if self.repo is not None:
            self.repo.save_settings({"apiKey": self.api_key, "selectedModel": model or ""})
        self._status("Settings saved successfully")

    def _set_notes(self, notes: List[Note]) -> None:
        self.notes = notes
        if self.autosave:
            self.save()

    def _status(self, message: Optional[str]) -> None:
        self.status_message = message
        if message:
            logger.info(message)

    def clear_status(self) -> None:
        self.status_message = None

    # ------------------------------------------------------------------
    # Operation-in-flight flag for external calls
    # ------------------------------------------------------------------

    @property
    def is_processing(self) -> bool:
        return self._processing

    @contextmanager
    def processing(self):
        if self._processing:
            raise BusyError("Another operation is still in progress")
        self._processing = True
        try:
            yield
        finally:
            self._processing = False

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    @property
    def active_note(self) -> Optional[Note]:
        if self.active_note_id is None:
            return None
        return self.get_note(self.active_note_id)

    def get_note(self, note_id: str) -> Optional[Note]:
        for note in self.notes:
            if note.id == note_id:
                return note
        return None

    def _require_note(self, note_id: Optional[str]) -> Note:
        note_id = note_id or self.active_note_id
        note = self.get_note(note_id) if note_id else None
        if note is None:
            raise NotFoundError("Please select a note first" if not note_id else f"Note {note_id!r} not found")
        return note

    def _replace_note(self, note_id: str, **changes) -> Note:
        changes.setdefault("updated_at", self.clock())
        updated = None
        result = []
        for note in self.notes:
            if note.id == note_id:
                note = updated = dataclasses.replace(note, **changes)
            result.append(note)
        if updated is None:
            raise NotFoundError(f"Note {note_id!r} not found")
        self._set_notes(result)
        return updated

    def select_note(self, note_id: str) -> Note:
        note = self._require_note(note_id)
        self.active_note_id = note.id
        return note

    def create_note(self, folder_path: Optional[str] = None, title: str = NEW_NOTE_TITLE, content: str = "") -> Note:
        folder_path = self.active_folder if folder_path is None else folder_path
        now = self.clock()
        note = Note(
            id=new_note_id(),
            title=title,
            content=content,
            created_at=now,
            updated_at=now,
            folder_path=paths.to_folder_path(folder_path),
        )
        self._set_notes([note] + self.notes)
        self.active_note_id = note.id
        return note

    def import_document(self, text: str, filename: str, folder_path: Optional[str] = None) -> Note:
        """Creates a note from extracted document text, titled after the file."""
        if not text or not text.strip():
            raise ValidationError(
                "No text could be extracted from this file. The file may be empty or contain only images."
            )
        note = self.create_note(folder_path=folder_path, title=title_from_filename(filename), content=text)
        self._status("Document imported successfully")
        return note

    def import_file(self, path: str, extractor: IDocumentExtractor, folder_path: Optional[str] = None) -> Note:
        if not extractor.supports(path):
            raise ValidationError(f"Unsupported file type: {os.path.basename(path)}")
        return self.import_document(extractor.extract_text(path), os.path.basename(path), folder_path)

    def save_note(self, note_id: Optional[str], content: str, title: str) -> Note:
        note = self._require_note(note_id)
        updated = self._replace_note(note.id, content=content, title=title)
        self._status("Note saved successfully")
        return updated

    def add_tag(self, tag: str, note_id: Optional[str] = None) -> Note:
        note = self._require_note(note_id)
        tag = (tag or "").strip()
        if not tag:
            raise ValidationError("Tag is empty")
        if tag in note.tags:
            return note
        return self._replace_note(note.id, tags=note.tags + [tag])

    def remove_tag(self, tag: str, note_id: Optional[str] = None) -> Note:
        note = self._require_note(note_id)
        return self._replace_note(note.id, tags=[t for t in note.tags if t != tag])

    def delete_note(self, note_id: Optional[str] = None) -> None:
        note = self._require_note(note_id)
        remaining = [n for n in self.notes if n.id != note.id]
        self._set_notes(remaining)
        if self.active_note_id == note.id:
            self.active_note_id = remaining[0].id if remaining else None
        self._status("Note deleted successfully")

    def move_note(self, note_id: str, target_path: str) -> Note:
        self._set_notes(self.move_engine.move_note(self.notes, note_id, target_path))
        self._status("Note moved successfully")
        return self.get_note(note_id)

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    def tree(self) -> Folder:
        return self.hierarchy.build(self.notes, self.expanded, self.folder_ops.registered)

    def folder_exists(self, path: str) -> bool:
        return folder_exists(path, self.notes, self.folder_ops.registered)

    def select_folder(self, path: str) -> None:
        path = paths.normalize(path)
        if not self.folder_exists(path):
            raise NotFoundError(f"Folder {path} not found")
        self.active_folder = path
        self.view = ViewMode.FOLDERS

    def toggle_folder(self, path: str) -> bool:
        """Flips the expanded flag of a folder and returns the new value."""
        path = paths.normalize(path)
        if path in self.expanded:
            self.expanded.discard(path)
            return False
        self.expanded.add(path)
        return True

    def add_folder(self, name: str, parent_path: Optional[str] = None) -> str:
        parent_path = self.active_folder if parent_path is None else parent_path
        try:
            path = self.folder_ops.create_folder(self.notes, name, parent_path)
        except NoteOrganizerError as e:
            self._status("Folder already exists" if isinstance(e, DuplicateError) else str(e))
            raise
        if self.autosave:
            self.save()
        self._status("Folder created successfully")
        return path

    def delete_folder(self, path: str) -> None:
        """Cascading delete; resets the selection if it was inside the folder."""
        path = paths.normalize(path)
        active = self.active_note
        try:
            remaining = self.folder_ops.delete_folder(self.notes, path)
        except NoteOrganizerError as e:
            self._status(str(e))
            raise
        self._set_notes(remaining)

        if active is not None and in_subtree(active, path):
            self.active_note_id = remaining[0].id if remaining else None
        if paths.is_within(self.active_folder, path):
            self.active_folder = paths.ROOT
        self.expanded = {p for p in self.expanded if not paths.is_within(p, path)}
        self._status("Folder deleted successfully")

    def move_folder(self, source_path: str, target_path: str) -> str:
        source = paths.normalize(source_path)
        try:
            updated = self.move_engine.move_folder(
                self.notes, source, target_path, extra_folders=self.folder_ops.registered
            )
        except NoteOrganizerError as e:
            self._status(str(e))
            raise
        new_root = subtree_destination(source, target_path)
        self.folder_ops.rewrite_registered(source, new_root)
        self._follow_folder(source, new_root)
        self._set_notes(updated)
        self._status("Folder moved successfully")
        return new_root

    def rename_folder(self, path: str, new_name: str) -> str:
        source = paths.normalize(path)
        try:
            updated = self.move_engine.rename_folder(
                self.notes, source, new_name, extra_folders=self.folder_ops.registered
            )
        except NoteOrganizerError as e:
            self._status(str(e))
            raise
        new_root = paths.join(paths.parent_of(source) or paths.ROOT, new_name.strip())
        self.folder_ops.rewrite_registered(source, new_root)
        self._follow_folder(source, new_root)
        self._set_notes(updated)
        self._status("Folder renamed successfully")
        return new_root

    def _follow_folder(self, source: str, new_root: str) -> None:
        """Keeps the active folder and expansion state on a moved subtree."""
        if paths.is_within(self.active_folder, source):
            self.active_folder = paths.rebase(self.active_folder, source, new_root)
        self.expanded = {
            paths.rebase(p, source, new_root) if paths.is_within(p, source) else p
            for p in self.expanded
        }

    # ------------------------------------------------------------------
    # Drag and drop
    # ------------------------------------------------------------------

    def begin_note_drag(self, note_id: str) -> None:
        self.drag_drop.start_note_drag(self._require_note(note_id))

    def begin_folder_drag(self, path: str) -> None:
        self.drag_drop.start_folder_drag(path)

    def drag_over(self, target: DropTarget) -> None:
        self.drag_drop.drag_over(target)

    def drag_leave(self) -> None:
        self.drag_drop.drag_leave()

    def end_drag(self) -> None:
        self.drag_drop.end_drag()

    def drop(self, target: Optional[DropTarget] = None) -> DropResult:
        item = self.drag_drop.item
        result = self.drag_drop.drop(target, self.notes)
        if not result.moved:
            return result

        if item.kind is ItemKind.FOLDER:
            self._follow_folder(item.path, result.destination)
        self._set_notes(result.notes)
        self._status(result.message)
        return result

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def set_view(self, view: ViewMode) -> None:
        self.view = view

    def set_query(self, query: str) -> None:
        self.query = query or ""

    def toggle_tag(self, tag: str) -> None:
        self.selected_tags = toggle_tag(self.selected_tags, tag)

    def all_tags(self) -> List[str]:
        return all_tags(self.notes)

    def current_filter(self) -> NoteFilter:
        return NoteFilter(
            query=self.query,
            selected_tags=tuple(self.selected_tags),
            active_folder=self.active_folder if self.view is ViewMode.FOLDERS else None,
        )

    def visible_notes(self) -> List[Note]:
        return filter_notes(self.notes, self.current_filter())

    # ------------------------------------------------------------------
    # Summaries, tags and export
    # ------------------------------------------------------------------

    def _summarizer(self) -> SummarizationService:
        if not self.api_key:
            self._status("Please add your OpenRouter API key in settings")
            raise ValidationError("Please add your OpenRouter API key in settings")
        return self.summarizer_factory(self.api_key, self.selected_model)

    def generate_summary(self, summary_type: SummaryType = SummaryType.BRIEF, model: Optional[str] = None) -> Note:
        note = self._require_note(None)
        summarizer = self._summarizer()
        with self.processing():
            self._status("Generating summary...")
            try:
                summary = summarizer.generate_summary(note.content, model or self.selected_model, summary_type)
            except NoteOrganizerError:
                self._status("Failed to generate summary")
                raise
        updated = self._replace_note(note.id, summary=summary)
        self._status("Summary generated successfully")
        return updated

    def suggest_tags(self, model: Optional[str] = None) -> Note:
        """Asks the model for tags and adds the new ones to the active note."""
        note = self._require_note(None)
        summarizer = self._summarizer()
        with self.processing():
            try:
                tags = summarizer.generate_tags(note.content, note.title, model or self.selected_model)
            except NoteOrganizerError:
                self._status("Failed to generate tags")
                raise
        merged = note.tags + [t for t in tags if t not in note.tags]
        updated = self._replace_note(note.id, tags=merged)
        self._status("Tags generated successfully")
        return updated

    def export_anki(self, directory: str, note_id: Optional[str] = None) -> str:
        note = self._require_note(note_id)
        path = anki_export.export_anki([note], directory)
        self._status("Note exported to Anki successfully")
        return path
