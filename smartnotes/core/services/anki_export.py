"""Anki-compatible deck export for notes."""

import json
import os
import re
from typing import Any, Dict, List

from smartnotes.core.domain.note import Note

DECK_NAME = "Smart Notes"
MODEL_NAME = "Basic"


def _card(front: str, back: str, tags: List[str]) -> Dict[str, Any]:
    return {
        "deckName": DECK_NAME,
        "modelName": MODEL_NAME,
        "fields": {"Front": front, "Back": back},
        "tags": tags,
    }


def note_to_anki_deck(note: Note) -> Dict[str, Any]:
    """Title/content card, plus a summary card when the note has a summary."""
    cards = [_card(note.title, note.content, list(note.tags))]
    if note.summary:
        cards.append(_card(
            "Summarize the key points of " + note.title,
            note.summary,
            list(note.tags) + ["summary"],
        ))
    return {"deckName": DECK_NAME, "notes": cards}


def notes_to_anki_deck(notes: List[Note]) -> Dict[str, Any]:
    combined = {"deckName": DECK_NAME, "notes": []}
    for note in notes:
        combined["notes"].extend(note_to_anki_deck(note)["notes"])
    return combined


def export_filename(note: Note) -> str:
    return "anki_" + re.sub(r"\s+", "_", note.title).lower() + ".json"


def export_anki(notes: List[Note], directory: str) -> str:
    """Writes the deck for one or more notes to directory and returns the file path."""
    if len(notes) == 1:
        deck = note_to_anki_deck(notes[0])
        filename = export_filename(notes[0])
    else:
        deck = notes_to_anki_deck(notes)
        filename = "anki_smart_notes.json"

    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, filename)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(deck, f, indent=2, ensure_ascii=False)
    return path
