#!/usr/bin/env python3
"""
Smart Notes CLI - organize notes into virtual folders.

Usage:
    # Show the folder tree
    python main.py tree

    # List notes directly in a folder, or search everywhere
    python main.py ls --folder /academics
    python main.py ls --query quantum --tag Science

    # Folders
    python main.py mkdir chemistry --parent /academics
    python main.py mv-folder /academics/biology /
    python main.py rename-folder /personal private
    python main.py rmdir /personal --yes

    # Notes
    python main.py new "Lecture 3" --folder /academics/physics
    python main.py mv-note <note-id> /academics
    python main.py import ~/Documents/notes --folder /inbox

    # Model features (needs an OpenRouter API key)
    python main.py settings --api-key sk-... --model openai/gpt-3.5-turbo
    python main.py summarize <note-id> --type bullets
    python main.py tags <note-id>
    python main.py export-anki <note-id> --out exports
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from dotenv import load_dotenv
from tqdm import tqdm

SCRIPT_DIR = Path(__file__).parent
load_dotenv(SCRIPT_DIR / ".env")

from smartnotes.core.domain import paths
from smartnotes.core.domain.errors import NoteOrganizerError, NotFoundError
from smartnotes.core.domain.folder import Folder
from smartnotes.core.services.hierarchy_service import notes_in_folder
from smartnotes.core.services.library_service import NoteLibrary, ViewMode
from smartnotes.core.services.summary_prompts import SummaryType
from smartnotes.infrastructure.extraction.registry import ExtractorRegistry
from smartnotes.infrastructure.llm.openrouter_provider import DEFAULT_MODEL, OPENROUTER_MODELS
from smartnotes.infrastructure.storage.sqlite_store import SQLiteKeyValueStore
from smartnotes.infrastructure.storage.state_repo import JsonStateRepository


def open_library(db_path: str) -> NoteLibrary:
    repo = JsonStateRepository(SQLiteKeyValueStore(db_path))
    library = NoteLibrary(repo=repo, default_model=os.getenv("OPENROUTER_MODEL", DEFAULT_MODEL))
    library.load()
    if not library.api_key:
        library.api_key = os.getenv("OPENROUTER_API_KEY", "")
    return library


def print_tree(library: NoteLibrary, folder: Folder, depth: int = 0):
    """Pretty print a folder and its subfolders with direct note counts."""
    count = len(notes_in_folder(library.notes, folder.path))
    indent = "  " * depth
    print(f"{indent}📁 {folder.name} ({count})")
    for child in folder.children:
        print_tree(library, child, depth + 1)


def print_notes(notes):
    if not notes:
        print("No notes found")
        return
    for note in notes:
        tags = f"  [{', '.join(note.tags)}]" if note.tags else ""
        print(f"📄 {note.id}  {note.title}  ({note.folder_id}){tags}")


def cmd_tree(library, args):
    print_tree(library, library.tree())


def cmd_ls(library, args):
    if args.folder:
        library.select_folder(args.folder)
    else:
        library.set_view(ViewMode.SEARCH if args.query else ViewMode.HOME)
    library.set_query(args.query or "")
    for tag in args.tag or []:
        library.toggle_tag(tag)
    print_notes(library.visible_notes())


def cmd_new(library, args):
    note = library.create_note(folder_path=args.folder or paths.ROOT, title=args.title, content=args.content or "")
    print(f"✅ Created note {note.id} in {note.folder_id}")


def cmd_mkdir(library, args):
    path = library.add_folder(args.name, args.parent)
    print(f"✅ Created folder {path}")


def cmd_mv_note(library, args):
    note = library.move_note(args.note_id, args.target)
    print(f"✅ Moved '{note.title}' to {note.folder_id}")


def cmd_mv_folder(library, args):
    new_path = library.move_folder(args.source, args.target)
    print(f"✅ Moved {args.source} to {new_path}")


def cmd_rename_folder(library, args):
    new_path = library.rename_folder(args.path, args.name)
    print(f"✅ Renamed {args.path} to {new_path}")


def cmd_rmdir(library, args):
    path = paths.normalize(args.path)
    if not library.folder_exists(path):
        raise NotFoundError(f"Folder {path} not found")
    doomed = [n for n in library.notes if n.folder_path and paths.is_within(n.folder_path, path)]
    if not args.yes:
        confirm = input(f"This will delete {path} and {len(doomed)} notes inside it. Are you sure? (y/n): ")
        if confirm.lower() != 'y':
            print("Operation cancelled.")
            return
    library.delete_folder(path)
    print(f"🗑️  Deleted {path} ({len(doomed)} notes)")


def cmd_import(library, args):
    registry = ExtractorRegistry()
    sources = []
    for source in args.paths:
        if os.path.isdir(source):
            sources.extend(registry.list_documents(source))
        else:
            sources.append(source)

    imported = 0
    for path in tqdm(sources, desc="Importing documents"):
        extractor = registry.extractor_for(path)
        if extractor is None:
            print(f"Skipping {path}: unsupported file type")
            continue
        try:
            library.import_file(path, extractor, folder_path=args.folder or paths.ROOT)
            imported += 1
        except (NoteOrganizerError, OSError) as e:
            print(f"Error importing {path}: {e}")
    print(f"✅ Imported {imported} of {len(sources)} documents")


def cmd_settings(library, args):
    if args.api_key is None and args.model is None:
        print(f"Model: {library.selected_model}")
        print(f"API key: {'set' if library.api_key else 'not set'}")
        print("\nAvailable models:")
        for model_id, name in OPENROUTER_MODELS:
            print(f" - {model_id}  ({name})")
        return
    library.save_settings(
        args.api_key if args.api_key is not None else library.api_key,
        args.model or library.selected_model,
    )
    print("✅ Settings saved")


def cmd_summarize(library, args):
    library.select_note(args.note_id)
    note = library.generate_summary(SummaryType(args.type), model=args.model)
    print(f"\n📝 Summary of '{note.title}':\n")
    print(note.summary)


def cmd_tags(library, args):
    library.select_note(args.note_id)
    note = library.suggest_tags(model=args.model)
    print(f"🏷️  {note.title}: {', '.join(note.tags)}")


def cmd_export_anki(library, args):
    path = library.export_anki(args.out, note_id=args.note_id)
    print(f"✅ Exported to {path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Organize notes into virtual folders",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument(
        "--db",
        type=str,
        default=os.getenv("SMARTNOTES_DB", "smartnotes.db"),
        help="State store file (default: $SMARTNOTES_DB or smartnotes.db)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("tree", help="Show the folder tree").set_defaults(func=cmd_tree)

    p = sub.add_parser("ls", help="List notes")
    p.add_argument("--folder", "-f", help="Only notes directly in this folder")
    p.add_argument("--query", "-q", help="Search title, content and tags")
    p.add_argument("--tag", "-t", action="append", help="Require this tag (repeatable)")
    p.set_defaults(func=cmd_ls)

    p = sub.add_parser("new", help="Create a note")
    p.add_argument("title")
    p.add_argument("--folder", "-f", help="Folder for the note (default: root)")
    p.add_argument("--content", "-c", help="Initial content")
    p.set_defaults(func=cmd_new)

    p = sub.add_parser("mkdir", help="Create an empty folder")
    p.add_argument("name")
    p.add_argument("--parent", "-p", default=paths.ROOT, help="Parent folder (default: root)")
    p.set_defaults(func=cmd_mkdir)

    p = sub.add_parser("mv-note", help="Move a note into a folder")
    p.add_argument("note_id")
    p.add_argument("target")
    p.set_defaults(func=cmd_mv_note)

    p = sub.add_parser("mv-folder", help="Move a folder with everything inside it")
    p.add_argument("source")
    p.add_argument("target")
    p.set_defaults(func=cmd_mv_folder)

    p = sub.add_parser("rename-folder", help="Rename a folder")
    p.add_argument("path")
    p.add_argument("name")
    p.set_defaults(func=cmd_rename_folder)

    p = sub.add_parser("rmdir", help="Delete a folder and every note inside it")
    p.add_argument("path")
    p.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")
    p.set_defaults(func=cmd_rmdir)

    p = sub.add_parser("import", help="Import text, Markdown, PDF, Word or image files as notes")
    p.add_argument("paths", nargs="+", help="Files or directories")
    p.add_argument("--folder", "-f", help="Folder for the imported notes (default: root)")
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("settings", help="Show or change the API key and model")
    p.add_argument("--api-key", help="OpenRouter API key")
    p.add_argument("--model", help="Default model id")
    p.set_defaults(func=cmd_settings)

    p = sub.add_parser("summarize", help="Generate a summary for a note")
    p.add_argument("note_id")
    p.add_argument("--type", choices=[t.value for t in SummaryType], default=SummaryType.BRIEF.value)
    p.add_argument("--model", help="Override the configured model")
    p.set_defaults(func=cmd_summarize)

    p = sub.add_parser("tags", help="Suggest tags for a note")
    p.add_argument("note_id")
    p.add_argument("--model", help="Override the configured model")
    p.set_defaults(func=cmd_tags)

    p = sub.add_parser("export-anki", help="Export a note as an Anki deck")
    p.add_argument("note_id")
    p.add_argument("--out", "-o", default=".", help="Output directory")
    p.set_defaults(func=cmd_export_anki)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    library = open_library(args.db)
    try:
        args.func(library, args)
    except NoteOrganizerError as e:
        print(f"[ERROR] {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
