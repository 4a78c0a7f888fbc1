from smartnotes.core.domain.note import Note

FIXED_TIME = "2023-05-10T00:00:00+00:00"
LATER_TIME = "2024-01-01T12:00:00+00:00"


def sample_notes():
    """Four notes spread over /academics (with two subfolders) and /personal."""
    return [
        Note(id="1", title="Introduction to Biology",
             content="Biology is the study of living organisms.",
             tags=["Biology", "Science"], created_at=FIXED_TIME, updated_at=FIXED_TIME,
             folder_path="/academics/biology"),
        Note(id="2", title="Quantum Physics Basics",
             content="Quantum physics deals with matter on atomic scales.",
             tags=["Physics", "Science"], created_at=FIXED_TIME, updated_at=FIXED_TIME,
             folder_path="/academics/physics"),
        Note(id="3", title="Literature Review Methods",
             content="A literature review surveys scholarly articles.",
             tags=["Research", "Academic"], created_at=FIXED_TIME, updated_at=FIXED_TIME,
             folder_path="/academics"),
        Note(id="4", title="Travel Plans",
             content="Ideas for summer vacation destinations.",
             tags=["Travel", "Planning"], created_at=FIXED_TIME, updated_at=FIXED_TIME,
             folder_path="/personal"),
    ]


def root_note(note_id="5", title="Loose Thoughts"):
    return Note(id=note_id, title=title, content="Nothing filed yet.",
                created_at=FIXED_TIME, updated_at=FIXED_TIME, folder_path=None)
