class NoteOrganizerError(Exception):
    """Base class for every failure raised by the folder engine."""


class ValidationError(NoteOrganizerError):
    """Malformed path, empty folder name or otherwise unusable input."""


class DuplicateError(NoteOrganizerError):
    """A folder with the requested path already exists."""


class SelfMoveError(NoteOrganizerError):
    """An item was dropped onto itself."""


class CycleError(NoteOrganizerError):
    """A folder was moved into its own subtree."""


class NotFoundError(NoteOrganizerError):
    """A referenced note or folder is absent."""


class BusyError(NoteOrganizerError):
    """Another external operation is still in flight."""


class ProviderError(NoteOrganizerError):
    """The summarization collaborator failed."""


class ExtractionError(NoteOrganizerError):
    """A document could not be read or converted to text."""
