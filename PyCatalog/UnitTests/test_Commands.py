import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

from PyCatalog.Helpers.Tests import log_info, log_input_expected_result, log_test_name, read_catalog, write_catalog
from scripts.entry_points import catalog_sync

class TestCatalogSyncCommand(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.workspace = os.path.join(self.temp_dir.name, "message")
        self.baseline_dir = os.path.join(self.workspace, "temp")
        write_catalog(self.workspace, "en", { "title": "Welcome", "common": { "ok": "OK", "cancel": "Cancel" } })
        write_catalog(self.workspace, "fr", { "title": "Bienvenue", "common": { "ok": "D'accord" } })
        write_catalog(self.workspace, "de", { "title": "Willkommen", "common": { "ok": "OK", "cancel": "Abbrechen" } })

        self.logger_patch = patch('scripts.sync_common.InitLogger')
        self.logger_patch.start()

    def tearDown(self):
        self.logger_patch.stop()
        self.temp_dir.cleanup()

    def _run(self, *argv : str) -> tuple[int, str]:
        output = io.StringIO()
        with redirect_stdout(output):
            status = catalog_sync([ argv[0], '-w', self.workspace, '--baseline-dir', self.baseline_dir, *argv[1:] ])
        log_info(output.getvalue())
        return status, output.getvalue()

    def test_Languages(self):
        log_test_name("catalog-sync languages")
        status, output = self._run("languages")
        self.assertEqual(status, 0)
        self.assertIn("Source: en", output)
        self.assertIn("Targets: 2", output)
        self.assertIn("fr (French)", output)

    def test_Validate(self):
        log_test_name("catalog-sync validate")
        status, output = self._run("validate")
        log_input_expected_result("status", 1, status)
        self.assertEqual(status, 1)
        self.assertIn("de: OK", output)
        self.assertIn("common.cancel", output)

    def test_Diff(self):
        log_test_name("catalog-sync diff")
        status, output = self._run("diff")
        self.assertEqual(status, 0)
        self.assertIn("first-run", output)

        write_catalog(self.baseline_dir, "en_old", { "title": "Welcome", "common": { "ok": "OK" }, "legacy": "Old" })
        status, output = self._run("diff")
        self.assertEqual(status, 0)
        self.assertIn("Changed: common", output)
        self.assertIn("Removed: legacy", output)

    def test_AutoDryRun(self):
        log_test_name("catalog-sync auto --dry-run")
        status, output = self._run("auto", "--dry-run")
        log_input_expected_result("status", 0, status)
        self.assertEqual(status, 0)
        self.assertEqual(read_catalog(os.path.join(self.workspace, "fr.json")), { "title": "Bienvenue", "common": { "ok": "D'accord" } })
        self.assertFalse(os.path.exists(os.path.join(self.baseline_dir, "en_old.json")))

    def test_MissingSource(self):
        log_test_name("catalog-sync without source")
        os.remove(os.path.join(self.workspace, "en.json"))
        status, output = self._run("languages")
        self.assertEqual(status, 1)
        self.assertIn("Error", output)

if __name__ == '__main__':
    unittest.main()
