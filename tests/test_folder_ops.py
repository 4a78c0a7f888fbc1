import unittest
from smartnotes.core.domain.errors import DuplicateError, NotFoundError, ValidationError
from smartnotes.core.domain.note import Note
from smartnotes.core.services.folder_service import FolderOpsEngine
from smartnotes.core.services.hierarchy_service import build_hierarchy
from smartnotes.core.services.move_service import MoveEngine
from fixtures import LATER_TIME, sample_notes, root_note

class TestCreateFolder(unittest.TestCase):
    def setUp(self):
        self.engine = FolderOpsEngine()
        self.notes = sample_notes()

    def test_create_registers_without_creating_notes(self):
        path = self.engine.create_folder(self.notes, "chemistry", "/academics")

        self.assertEqual(path, "/academics/chemistry")
        self.assertEqual(self.engine.registered, ["/academics/chemistry"])
        self.assertEqual(len(self.notes), 4)

    def test_name_is_trimmed(self):
        self.assertEqual(self.engine.create_folder(self.notes, "  work  ", "/"), "/work")

    def test_existing_folder_is_duplicate(self):
        with self.assertRaises(DuplicateError):
            self.engine.create_folder(self.notes, "biology", "/academics")
        # An intermediate folder with no direct notes still exists
        with self.assertRaises(DuplicateError):
            self.engine.create_folder(self.notes, "academics", "/")
        self.assertEqual(self.engine.registered, [])

    def test_registered_folder_is_duplicate(self):
        self.engine.create_folder(self.notes, "chemistry", "/academics")
        with self.assertRaises(DuplicateError):
            self.engine.create_folder(self.notes, "chemistry", "/academics/")

    def test_bad_names(self):
        for name in ["", "   ", "a/b", None]:
            with self.subTest(name=name):
                with self.assertRaises(ValidationError):
                    self.engine.create_folder(self.notes, name, "/")

    def test_bad_parent(self):
        with self.assertRaises(ValidationError):
            self.engine.create_folder(self.notes, "x", "relative")

class TestDeleteFolder(unittest.TestCase):
    def setUp(self):
        self.engine = FolderOpsEngine()
        self.notes = sample_notes() + [root_note()]

    def test_cascade_removes_exactly_subtree(self):
        remaining = self.engine.delete_folder(self.notes, "/academics")
        self.assertEqual([n.id for n in remaining], ["4", "5"])
        self.assertEqual(len(self.notes), 5)

    def test_leaf_delete(self):
        remaining = self.engine.delete_folder(self.notes, "/academics/biology")
        self.assertEqual([n.id for n in remaining], ["2", "3", "4", "5"])

    def test_prefix_lookalike_survives(self):
        notes = [Note(id="a", title="a", folder_path="/abc"), Note(id="b", title="b", folder_path="/abcdef")]
        self.assertEqual([n.id for n in self.engine.delete_folder(notes, "/abc")], ["b"])

    def test_root_cannot_be_deleted(self):
        with self.assertRaises(ValidationError):
            self.engine.delete_folder(self.notes, "/")

    def test_registered_folders_below_are_dropped(self):
        self.engine.register("/academics/chemistry")
        self.engine.register("/work")
        self.engine.delete_folder(self.notes, "/academics")
        self.assertEqual(self.engine.registered, ["/work"])

    def test_missing_folder_is_not_found(self):
        with self.assertRaises(NotFoundError):
            self.engine.delete_folder(self.notes, "/nope")
        with self.assertRaises(NotFoundError):
            self.engine.delete_folder(self.notes, "/academic")

    def test_registered_empty_folder_can_be_deleted(self):
        self.engine.register("/work")
        remaining = self.engine.delete_folder(self.notes, "/work")
        self.assertEqual(len(remaining), 5)
        self.assertEqual(self.engine.registered, [])

class TestRegisteredFolders(unittest.TestCase):
    def test_rewrite_follows_move(self):
        engine = FolderOpsEngine(["/academics/chemistry", "/work"])
        engine.rewrite_registered("/academics", "/school")
        self.assertEqual(engine.registered, ["/school/chemistry", "/work"])

    def test_root_is_never_registered(self):
        engine = FolderOpsEngine(["/"])
        self.assertEqual(engine.registered, [])

    def test_prune_drops_folders_that_gained_notes(self):
        engine = FolderOpsEngine(["/academics/chemistry", "/work"])
        notes = sample_notes() + [Note(id="c", title="c", folder_path="/academics/chemistry/labs")]
        engine.prune(notes)
        self.assertEqual(engine.registered, ["/work"])

class TestWalkthrough(unittest.TestCase):
    def test_create_then_move(self):
        notes = [n for n in sample_notes() if n.id in ("1", "2")]
        folders = FolderOpsEngine()
        mover = MoveEngine(clock=lambda: LATER_TIME)

        folders.create_folder(notes, "chemistry", "/academics")
        root = build_hierarchy(notes, extra_folders=folders.registered)
        self.assertEqual(root.find("/academics").child_names(), ("biology", "chemistry", "physics"))

        moved = mover.move_folder(notes, "/academics/biology", "/")
        self.assertEqual(moved[0].folder_path, "/biology")
        self.assertIs(moved[1], notes[1])

        root = build_hierarchy(moved, extra_folders=folders.registered)
        self.assertEqual(root.child_names(), ("academics", "biology"))
        self.assertEqual(root.find("/academics").child_names(), ("chemistry", "physics"))

if __name__ == '__main__':
    unittest.main()
