from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from smartnotes.core.domain.note import Note

class ILLMProvider(ABC):
    """Interface for chat-completion model interactions."""

    @abstractmethod
    def generate(self, prompt: str, model: Optional[str] = None) -> str:
        """Generates text for the prompt, optionally overriding the model."""
        pass

class IKeyValueStore(ABC):
    """Interface for the blob store that holds persisted state."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Returns the stored blob, or None if the key was never written."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Stores a blob under key, replacing any previous value."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

class INoteRepository(ABC):
    """Interface for loading and saving the note collection and settings."""

    @abstractmethod
    def load_notes(self) -> Optional[List[Note]]:
        """Returns the saved collection, or None if nothing usable is stored."""
        pass

    @abstractmethod
    def save_notes(self, notes: List[Note]) -> None:
        """Writes the whole collection."""
        pass

    @abstractmethod
    def load_settings(self) -> Dict[str, str]:
        pass

    @abstractmethod
    def save_settings(self, settings: Dict[str, str]) -> None:
        pass

    @abstractmethod
    def load_folders(self) -> List[str]:
        """Returns the registered empty folder paths."""
        pass

    @abstractmethod
    def save_folders(self, folders: List[str]) -> None:
        pass

class IDocumentExtractor(ABC):
    """Interface for turning an imported file into plain text."""

    @abstractmethod
    def supports(self, path: str) -> bool:
        """Whether this extractor handles the given file."""
        pass

    @abstractmethod
    def extract_text(self, path: str) -> str:
        """Extracts the plain text of the file."""
        pass
