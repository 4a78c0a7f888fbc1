import json
import os
import shutil
import tempfile
import unittest
from smartnotes.infrastructure.storage.sqlite_store import InMemoryKeyValueStore, SQLiteKeyValueStore
from smartnotes.infrastructure.storage.state_repo import FOLDERS_KEY, NOTES_KEY, SETTINGS_KEY, JsonStateRepository
from fixtures import sample_notes, root_note

class TestJsonStateRepository(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryKeyValueStore()
        self.repo = JsonStateRepository(self.store)

    def test_notes_roundtrip(self):
        notes = sample_notes() + [root_note()]
        self.repo.save_notes(notes)
        self.assertEqual(self.repo.load_notes(), notes)

        saved = json.loads(self.store.get(NOTES_KEY))
        self.assertEqual(saved[0]["folderPath"], "/academics/biology")
        self.assertIsNone(saved[4]["folderPath"])
        self.assertNotIn("summary", saved[0])

    def test_missing_state(self):
        self.assertIsNone(self.repo.load_notes())
        self.assertEqual(self.repo.load_settings(), {})
        self.assertEqual(self.repo.load_folders(), [])

    def test_malformed_json(self):
        self.store.set(NOTES_KEY, "[{")
        self.store.set(SETTINGS_KEY, "nope")
        self.assertIsNone(self.repo.load_notes())
        self.assertEqual(self.repo.load_settings(), {})

    def test_one_bad_note_discards_all(self):
        records = [note.to_dict() for note in sample_notes()]
        records[2]["folderPath"] = "relative/path"
        self.store.set(NOTES_KEY, json.dumps(records))
        self.assertIsNone(self.repo.load_notes())

    def test_non_text_content_discards_all(self):
        records = [note.to_dict() for note in sample_notes()]
        records[1]["content"] = 42
        self.store.set(NOTES_KEY, json.dumps(records))
        self.assertIsNone(self.repo.load_notes())

    def test_non_text_summary_discards_all(self):
        records = [note.to_dict() for note in sample_notes()]
        records[0]["summary"] = ["not", "text"]
        self.store.set(NOTES_KEY, json.dumps(records))
        self.assertIsNone(self.repo.load_notes())

    def test_null_content_and_summary_are_accepted(self):
        self.store.set(NOTES_KEY, json.dumps([{"id": "1", "title": "t", "content": None, "summary": None}]))
        notes = self.repo.load_notes()
        self.assertEqual(notes[0].content, "")
        self.assertIsNone(notes[0].summary)

    def test_notes_must_be_a_list(self):
        self.store.set(NOTES_KEY, json.dumps({"id": "1"}))
        self.assertIsNone(self.repo.load_notes())

    def test_legacy_records_without_optional_fields(self):
        self.store.set(NOTES_KEY, json.dumps([{"id": 7, "title": "Old", "folderPath": "/old/"}]))
        notes = self.repo.load_notes()
        self.assertEqual(notes[0].id, "7")
        self.assertEqual(notes[0].folder_path, "/old")
        self.assertEqual(notes[0].tags, [])

    def test_settings_keep_string_values(self):
        self.store.set(SETTINGS_KEY, json.dumps({"apiKey": "sk", "selectedModel": None, "other": 3}))
        self.assertEqual(self.repo.load_settings(), {"apiKey": "sk"})

    def test_folders_skip_invalid_entries(self):
        self.store.set(FOLDERS_KEY, json.dumps(["/a/", "b", 5, "/c"]))
        self.assertEqual(self.repo.load_folders(), ["/a", "/c"])

class TestSQLiteKeyValueStore(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.db_path = os.path.join(self.tmpdir, "state.db")
        self.store = SQLiteKeyValueStore(self.db_path)

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def test_set_get_delete(self):
        self.assertIsNone(self.store.get("k"))
        self.store.set("k", "one")
        self.store.set("k", "two")
        self.assertEqual(self.store.get("k"), "two")
        self.store.delete("k")
        self.assertIsNone(self.store.get("k"))

    def test_state_survives_reopen(self):
        JsonStateRepository(self.store).save_folders(["/academics/chemistry"])
        reopened = JsonStateRepository(SQLiteKeyValueStore(self.db_path))
        self.assertEqual(reopened.load_folders(), ["/academics/chemistry"])

if __name__ == '__main__':
    unittest.main()
