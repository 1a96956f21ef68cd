import os
import tempfile
import unittest

from PyCatalog.CatalogError import StructuralError
from PyCatalog.CatalogFile import (
    BackupFile,
    DeleteFieldFromCatalogFile,
    DeleteValueByPath,
    GetValueByPath,
    LoadCatalog,
    SaveCatalog,
    SetValueByPath,
)
from PyCatalog.Helpers.Tests import log_input_expected_result, log_test_name, read_catalog, write_catalog

class TestCatalogFile(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.workspace = self.temp_dir.name

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_LoadMissingCatalog(self):
        log_test_name("LoadMissingCatalog")
        result = LoadCatalog(os.path.join(self.workspace, "missing.json"))
        log_input_expected_result("missing.json", {}, result)
        self.assertEqual(result, {})

    def test_LoadMalformedCatalog(self):
        log_test_name("LoadMalformedCatalog")
        path = os.path.join(self.workspace, "broken.json")
        with open(path, 'w', encoding='utf-8') as f:
            f.write("{ not json")

        result = LoadCatalog(path)
        log_input_expected_result("lenient", {}, result)
        self.assertEqual(result, {})

        with self.assertRaises(StructuralError):
            LoadCatalog(path, strict=True)

    def test_LoadNonObjectCatalog(self):
        log_test_name("LoadNonObjectCatalog")
        path = os.path.join(self.workspace, "list.json")
        with open(path, 'w', encoding='utf-8') as f:
            f.write('["a", "b"]')

        self.assertEqual(LoadCatalog(path), {})
        with self.assertRaises(StructuralError):
            LoadCatalog(path, strict=True)

    def test_SaveAndLoad(self):
        log_test_name("SaveAndLoad")
        catalog = { "title": "你好", "common": { "ok": "确定" }, "count": 2 }
        path = os.path.join(self.workspace, "nested", "zh.json")
        SaveCatalog(path, catalog)

        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()

        self.assertIn("你好", text)
        result = LoadCatalog(path)
        log_input_expected_result(catalog, catalog, result)
        self.assertEqual(result, catalog)
        self.assertEqual(list(result.keys()), list(catalog.keys()))

    def test_ValueByPath(self):
        log_test_name("ValueByPath")
        catalog = { "common": { "ok": "OK" }, "title": "Welcome" }

        self.assertEqual(GetValueByPath(catalog, ["common", "ok"]), "OK")
        self.assertIsNone(GetValueByPath(catalog, ["common", "missing"]))
        self.assertIsNone(GetValueByPath(catalog, ["title", "ok"]))

        SetValueByPath(catalog, ["settings", "theme"], "Theme")
        self.assertEqual(catalog["settings"], { "theme": "Theme" })

        with self.assertRaises(ValueError):
            SetValueByPath(catalog, ["title", "sub"], "x")

        self.assertTrue(DeleteValueByPath(catalog, ["common", "ok"]))
        self.assertFalse(DeleteValueByPath(catalog, ["common", "ok"]))
        self.assertEqual(catalog["common"], {})

    def test_DeleteFieldFromCatalogFile(self):
        log_test_name("DeleteFieldFromCatalogFile")
        path = write_catalog(self.workspace, "fr", { "a": "1", "b": "2" })

        first = DeleteFieldFromCatalogFile(path, ["b"])
        second = DeleteFieldFromCatalogFile(path, ["b"])
        log_input_expected_result("deleted", (True, False), (first, second))
        self.assertTrue(first)
        self.assertFalse(second)
        self.assertEqual(read_catalog(path), { "a": "1" })

    def test_BackupFile(self):
        log_test_name("BackupFile")
        path = write_catalog(self.workspace, "en_old", { "a": "1" })
        backup_dir = os.path.join(self.workspace, "backups")

        backup_path = BackupFile(path, backup_dir)
        log_input_expected_result(path, True, bool(backup_path and os.path.exists(backup_path)))
        self.assertIsNotNone(backup_path)
        self.assertTrue(os.path.basename(backup_path).startswith("en_old_"))
        self.assertEqual(read_catalog(backup_path), { "a": "1" })

        self.assertIsNone(BackupFile(os.path.join(self.workspace, "missing.json"), backup_dir))

if __name__ == '__main__':
    unittest.main()
