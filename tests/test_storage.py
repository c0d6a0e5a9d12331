import tempfile
import unittest
from pathlib import Path

from gapto10.services.storage import JsonFileStorage, MemoryStorage, StorageError


class JsonFileStorageTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "nested" / "data.json"

    def tearDown(self):
        self._tmp.cleanup()

    def test_missing_file_loads_nothing(self):
        self.assertIsNone(JsonFileStorage(str(self.path)).load())

    def test_save_then_load(self):
        storage = JsonFileStorage(str(self.path))
        storage.save({"subjects": [], "subjectsOrder": ["a"]})
        self.assertEqual(storage.load(), {"subjects": [], "subjectsOrder": ["a"]})
        self.assertFalse(self.path.with_name("data.json.tmp").exists())

    def test_corrupt_file(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{oops", encoding="utf-8")
        with self.assertRaises(StorageError):
            JsonFileStorage(str(self.path)).load()

    def test_non_object_document(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("[1, 2]", encoding="utf-8")
        with self.assertRaises(StorageError):
            JsonFileStorage(str(self.path)).load()


class MemoryStorageTests(unittest.TestCase):
    def test_documents_are_copied(self):
        storage = MemoryStorage()
        self.assertIsNone(storage.load())
        document = {"subjects": [{"id": "a"}]}
        storage.save(document)
        document["subjects"].clear()
        self.assertEqual(storage.load(), {"subjects": [{"id": "a"}]})


if __name__ == "__main__":
    unittest.main()
