import json
import logging
from typing import Dict, List, Optional

from smartnotes.core.domain import paths
from smartnotes.core.domain.errors import ValidationError
from smartnotes.core.domain.note import Note
from smartnotes.core.interfaces.ports import IKeyValueStore, INoteRepository

logger = logging.getLogger(__name__)

NOTES_KEY = "smartNotes"
SETTINGS_KEY = "settings"
FOLDERS_KEY = "smartNotesFolders"


class JsonStateRepository(INoteRepository):
    """
    Stores the note collection, the settings and the registered empty
    folders as JSON blobs under fixed keys. Anything that fails to parse
    is reported as missing so the caller keeps its in-memory defaults.
    """

    def __init__(self, store: IKeyValueStore):
        self.store = store

    def _load_json(self, key: str):
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("Error parsing saved %s: %s", key, e)
            return None

    def load_notes(self) -> Optional[List[Note]]:
        data = self._load_json(NOTES_KEY)
        if data is None:
            return None
        if not isinstance(data, list):
            logger.error("Saved %s is not a list; ignoring it", NOTES_KEY)
            return None
        try:
            return [Note.from_dict(item) for item in data]
        except ValidationError as e:
            # All or nothing: a single bad record discards the blob
            logger.error("Saved %s has an invalid note: %s", NOTES_KEY, e)
            return None

    def save_notes(self, notes: List[Note]) -> None:
        self.store.set(NOTES_KEY, json.dumps([note.to_dict() for note in notes]))

    def load_settings(self) -> Dict[str, str]:
        data = self._load_json(SETTINGS_KEY)
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def save_settings(self, settings: Dict[str, str]) -> None:
        self.store.set(SETTINGS_KEY, json.dumps(settings))

    def load_folders(self) -> List[str]:
        data = self._load_json(FOLDERS_KEY)
        if not isinstance(data, list):
            return []
        folders = []
        for item in data:
            try:
                folders.append(paths.normalize(item))
            except ValidationError as e:
                logger.warning("Skipping saved folder %r: %s", item, e)
        return folders

    def save_folders(self, folders: List[str]) -> None:
        self.store.set(FOLDERS_KEY, json.dumps(list(folders)))
