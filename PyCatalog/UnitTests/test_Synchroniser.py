import os
import tempfile
import unittest

from PyCatalog.CatalogGroups import DEFAULT_GROUP
from PyCatalog.CatalogSynchroniser import CatalogSynchroniser, FormatSyncSummary, RunOutcome
from PyCatalog.Helpers.TestCases import DummyProvider
from PyCatalog.Helpers.Tests import log_info, log_input_expected_result, log_test_name, read_catalog, write_catalog
from PyCatalog.Options import Options
from PyCatalog.RunClassifier import RunKind

class TestSynchroniser(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.workspace = os.path.join(self.temp_dir.name, "message")
        self.baseline_dir = os.path.join(self.workspace, "temp")
        self.baseline_path = os.path.join(self.baseline_dir, "en_old.json")
        os.makedirs(self.workspace)

    def tearDown(self):
        self.temp_dir.cleanup()

    def _options(self, **kwargs) -> Options:
        return Options({
            'provider': "Dummy Provider",
            'workspace_dir': self.workspace,
            'baseline_dir': self.baseline_dir,
            'backup_dir': os.path.join(self.workspace, "backups"),
            'max_retries': 0,
            'backoff_time': 0.0,
            'rate_limit': None,
            **kwargs
        })

    def _synchronise(self, data : dict|None = None, **kwargs):
        provider = DummyProvider(data or {})
        synchroniser = CatalogSynchroniser(self._options(**kwargs), translation_provider=provider)
        result = synchroniser.Synchronise()
        log_info(FormatSyncSummary(result))
        return result, synchroniser

    def _catalog(self, code : str) -> dict:
        return read_catalog(os.path.join(self.workspace, f"{code}.json"))

    def test_FirstRun(self):
        log_test_name("Synchronise first run")
        write_catalog(self.workspace, "en", { "common": { "hello": "Hi" } })
        write_catalog(self.workspace, "fr", {})

        result, dummy = self._synchronise()

        log_input_expected_result("outcome", RunOutcome.TRANSLATED, result.outcome)
        self.assertEqual(result.outcome, RunOutcome.TRANSLATED)
        self.assertEqual(result.run_kind, RunKind.FIRST_RUN)
        self.assertTrue(result.success)
        self.assertEqual(result.translated_languages, ["fr"])
        self.assertEqual(self._catalog("fr"), { "common": { "hello": "[fr] Hi" } })
        self.assertTrue(result.baseline_saved)
        self.assertEqual(read_catalog(self.baseline_path), { "common": { "hello": "Hi" } })

    def test_SecondRunHasNoWork(self):
        log_test_name("Synchronise second run")
        write_catalog(self.workspace, "en", { "title": "Welcome", "common": { "hello": "Hi" } })
        write_catalog(self.workspace, "de", {})
        write_catalog(self.workspace, "fr", {})

        self._synchronise()
        result, dummy = self._synchronise()

        log_input_expected_result("outcome", RunOutcome.NO_WORK, result.outcome)
        self.assertEqual(result.outcome, RunOutcome.NO_WORK)
        self.assertEqual(result.run_kind, RunKind.NO_WORK)
        self.assertTrue(result.success)
        self.assertEqual(result.skipped_languages, ["de", "fr"])
        self.assertEqual(result.skipped_count, 2)
        self.assertEqual(result.translated_count, 0)

    def test_IncrementalRun(self):
        log_test_name("Synchronise incremental run")
        write_catalog(self.workspace, "en", { "title": "Welcome", "common": { "hello": "Hi" }, "profile": { "name": "Name" } })
        write_catalog(self.workspace, "fr", {})
        self._synchronise()

        # Hand-edited translation of an untouched group must survive
        fr = self._catalog("fr")
        fr["profile"]["name"] = "Nom"
        write_catalog(self.workspace, "fr", fr)

        write_catalog(self.workspace, "en", { "title": "Welcome", "common": { "hello": "Hello", "bye": "Bye" }, "profile": { "name": "Name" } })

        provider = DummyProvider()
        synchroniser = CatalogSynchroniser(self._options(), translation_provider=provider)
        result = synchroniser.Synchronise()

        self.assertEqual(result.run_kind, RunKind.INCREMENTAL)
        self.assertEqual(result.diff.changed, ["common"])
        requests = synchroniser.translator.client.requests
        log_input_expected_result("requests", [("fr", "common")], requests)
        self.assertEqual(requests, [("fr", "common")])

        expected = { "title": "[fr] Welcome", "common": { "hello": "[fr] Hello", "bye": "[fr] Bye" }, "profile": { "name": "Nom" } }
        self.assertEqual(self._catalog("fr"), expected)

    def test_DeletionOnly(self):
        log_test_name("Synchronise deletion only")
        write_catalog(self.workspace, "en", { "a": "1" })
        write_catalog(self.workspace, "fr", { "a": "un", "b": "deux" })
        write_catalog(self.baseline_dir, "en_old", { "a": "1", "b": "2" })

        provider = DummyProvider()
        synchroniser = CatalogSynchroniser(self._options(), translation_provider=provider)
        result = synchroniser.Synchronise()

        log_input_expected_result("missing", ["b"], result.diff.missing)
        self.assertEqual(result.run_kind, RunKind.DELETION_ONLY)
        self.assertEqual(result.diff.missing, ["b"])
        self.assertEqual(result.outcome, RunOutcome.NO_WORK)
        self.assertTrue(result.success)
        self.assertIsNone(synchroniser.translator)
        self.assertEqual(result.skipped_languages, ["fr"])
        self.assertEqual(self._catalog("fr"), { "a": "un" })
        self.assertEqual(read_catalog(self.baseline_path), { "a": "1" })
        self.assertTrue(result.deletion.success)

        # The next run finds nothing to do
        result, dummy = self._synchronise()
        self.assertEqual(result.run_kind, RunKind.NO_WORK)

    def test_BaselineUpdatedWhenSomeLanguagesSucceed(self):
        log_test_name("Synchronise partial success")
        write_catalog(self.workspace, "en", { "common": { "hello": "Hi" } })
        for code in [ "de", "fr", "ja" ]:
            write_catalog(self.workspace, code, {})

        result, dummy = self._synchronise({ 'fail': { 'fr': "*" } })

        log_input_expected_result("translated/errors", (2, 1), (result.translated_count, result.error_count))
        self.assertEqual(result.translated_count, 2)
        self.assertEqual(result.error_count, 1)
        self.assertEqual(result.translated_languages, ["de", "ja"])
        self.assertEqual(result.failed_languages, ["fr"])
        self.assertEqual(result.outcome, RunOutcome.TRANSLATED)
        self.assertFalse(result.success)
        self.assertTrue(result.baseline_saved)
        self.assertEqual(read_catalog(self.baseline_path), { "common": { "hello": "Hi" } })
        self.assertEqual(self._catalog("fr"), {})

    def test_BaselineNotUpdatedWhenAllLanguagesFail(self):
        log_test_name("Synchronise total failure")
        write_catalog(self.workspace, "en", { "common": { "hello": "Hi" } })
        write_catalog(self.workspace, "de", {})
        write_catalog(self.workspace, "fr", {})

        result, dummy = self._synchronise({ 'fail': { 'de': "*", 'fr': "*" } })

        log_input_expected_result("outcome", RunOutcome.FAILED, result.outcome)
        self.assertEqual(result.outcome, RunOutcome.FAILED)
        self.assertEqual(result.error_count, 2)
        self.assertFalse(result.baseline_saved)
        self.assertFalse(os.path.exists(self.baseline_path))

    def test_CircuitBreakerStopsRemainingLanguages(self):
        log_test_name("Synchronise circuit breaker")
        write_catalog(self.workspace, "en", { "a": { "x": "1" }, "b": { "y": "2" }, "c": { "z": "3" } })
        write_catalog(self.workspace, "de", {})
        write_catalog(self.workspace, "fr", {})

        provider = DummyProvider({ 'fail': { 'de': "*" } })
        synchroniser = CatalogSynchroniser(self._options(), translation_provider=provider)
        result = synchroniser.Synchronise()

        requests = synchroniser.translator.client.requests
        log_input_expected_result("requests", [("de", "a"), ("de", "b")], requests)
        self.assertEqual(requests, [("de", "a"), ("de", "b")])
        self.assertEqual(result.failed_languages, ["de"])
        self.assertEqual(result.skipped_languages, ["fr"])
        self.assertEqual(result.outcome, RunOutcome.FAILED)
        self.assertFalse(os.path.exists(self.baseline_path))

    def test_OccasionalGroupErrorsAreTolerated(self):
        log_test_name("Synchronise tolerates group errors")
        write_catalog(self.workspace, "en", { "a": { "x": "1" }, "b": { "y": "2" }, "c": { "z": "3" }, "d": { "w": "4" } })
        write_catalog(self.workspace, "de", {})

        result, dummy = self._synchronise({ 'fail': { 'de': ["b"] } })

        log_input_expected_result("translated", ["de"], result.translated_languages)
        self.assertEqual(result.translated_languages, ["de"])
        de = self._catalog("de")
        self.assertEqual(set(de.keys()), { "a", "c", "d" })

    def test_RejectedCredentialsStopRemainingLanguages(self):
        log_test_name("Synchronise provider refuses access")
        write_catalog(self.workspace, "en", { "common": { "hello": "Hi" } })
        write_catalog(self.workspace, "de", {})
        write_catalog(self.workspace, "fr", {})

        result, dummy = self._synchronise({ 'rejected': ["de"] })

        log_input_expected_result("skipped", ["fr"], result.skipped_languages)
        self.assertEqual(result.failed_languages, ["de"])
        self.assertEqual(result.skipped_languages, ["fr"])
        self.assertEqual(result.translated_count, 0)
        self.assertEqual(result.outcome, RunOutcome.FAILED)

    def test_UnreachableGroupIsCountedNotFatal(self):
        log_test_name("Synchronise single unreachable group")
        write_catalog(self.workspace, "en", { "a": { "x": "1" }, "b": { "y": "2" }, "c": { "z": "3" } })
        write_catalog(self.workspace, "de", {})
        write_catalog(self.workspace, "fr", {})

        provider = DummyProvider({ 'impossible': { 'de': ["a"] } })
        synchroniser = CatalogSynchroniser(self._options(), translation_provider=provider)
        result = synchroniser.Synchronise()

        log_input_expected_result("translated", ["de", "fr"], result.translated_languages)
        self.assertEqual(result.translated_languages, ["de", "fr"])
        self.assertEqual(result.failed_languages, [])
        self.assertEqual(result.skipped_languages, [])
        self.assertEqual(result.outcome, RunOutcome.TRANSLATED)
        self.assertTrue(result.baseline_saved)

        requests = synchroniser.translator.client.requests
        self.assertEqual(requests[:3], [("de", "a"), ("de", "b"), ("de", "c")])
        self.assertEqual(self._catalog("de"), { "b": { "y": "[de] 2" }, "c": { "z": "[de] 3" } })
        self.assertEqual(self._catalog("fr"), { "a": { "x": "[fr] 1" }, "b": { "y": "[fr] 2" }, "c": { "z": "[fr] 3" } })

    def test_RepeatedUnreachableGroupsTripTheBreaker(self):
        log_test_name("Synchronise repeatedly unreachable provider")
        write_catalog(self.workspace, "en", { "a": { "x": "1" }, "b": { "y": "2" }, "c": { "z": "3" } })
        write_catalog(self.workspace, "de", {})
        write_catalog(self.workspace, "fr", {})

        result, dummy = self._synchronise({ 'impossible': { 'de': "*" } })

        log_input_expected_result("skipped", ["fr"], result.skipped_languages)
        self.assertEqual(result.failed_languages, ["de"])
        self.assertEqual(result.skipped_languages, ["fr"])
        self.assertEqual(result.outcome, RunOutcome.FAILED)
        self.assertFalse(os.path.exists(self.baseline_path))

    def test_UnparseableResponseFailsTheGroup(self):
        log_test_name("Synchronise unparseable response")
        write_catalog(self.workspace, "en", { "title": "Welcome", "common": { "hello": "Hi" } })
        write_catalog(self.workspace, "fr", {})

        result, dummy = self._synchronise({ 'responses': { 'fr': { DEFAULT_GROUP: "Sorry, no." } } })

        self.assertEqual(result.translated_languages, ["fr"])
        self.assertEqual(self._catalog("fr"), { "common": { "hello": "[fr] Hi" } })

    def test_DryRun(self):
        log_test_name("Synchronise dry run")
        write_catalog(self.workspace, "en", { "a": "1", "common": { "hello": "Hi" } })
        write_catalog(self.workspace, "fr", { "a": "un", "b": "deux" })
        write_catalog(self.baseline_dir, "en_old", { "a": "1", "b": "2" })

        result, synchroniser = self._synchronise(dry_run=True)

        log_input_expected_result("outcome", RunOutcome.NO_WORK, result.outcome)
        self.assertTrue(result.dry_run)
        self.assertEqual(result.run_kind, RunKind.INCREMENTAL)
        self.assertIsNone(synchroniser.translator)
        self.assertIsNone(result.deletion)
        self.assertEqual(self._catalog("fr"), { "a": "un", "b": "deux" })
        self.assertEqual(read_catalog(self.baseline_path), { "a": "1", "b": "2" })

    def test_ForceRetranslatesEverything(self):
        log_test_name("Synchronise forced")
        write_catalog(self.workspace, "en", { "common": { "hello": "Hi" } })
        write_catalog(self.workspace, "fr", { "common": { "hello": "Salut" } })
        write_catalog(self.baseline_dir, "en_old", { "common": { "hello": "Hi" } })

        result, dummy = self._synchronise(force=True)

        self.assertEqual(result.run_kind, RunKind.FIRST_RUN)
        self.assertEqual(self._catalog("fr"), { "common": { "hello": "[fr] Hi" } })

    def test_BaselineBackup(self):
        log_test_name("Synchronise baseline backup")
        write_catalog(self.workspace, "en", { "common": { "hello": "Hello" } })
        write_catalog(self.workspace, "fr", {})
        write_catalog(self.baseline_dir, "en_old", { "common": { "hello": "Hi" } })

        result, dummy = self._synchronise(write_backup=True)

        backups = os.listdir(os.path.join(self.workspace, "backups"))
        log_input_expected_result("backups", 1, len(backups))
        self.assertEqual(len(backups), 1)
        self.assertTrue(backups[0].startswith("en_old_"))
        self.assertEqual(read_catalog(self.baseline_path), { "common": { "hello": "Hello" } })

    def test_BaselineInWorkspaceIsNotATarget(self):
        log_test_name("Synchronise with baseline beside the catalogs")
        write_catalog(self.workspace, "en", { "a": "1" })
        write_catalog(self.workspace, "fr", { "a": "un", "b": "deux" })
        write_catalog(self.workspace, "en_old", { "a": "1", "b": "2" })

        result, dummy = self._synchronise(baseline_dir=self.workspace)

        log_input_expected_result("targets", ["fr"], result.target_languages)
        self.assertEqual(result.target_languages, ["fr"])
        self.assertEqual(result.run_kind, RunKind.DELETION_ONLY)
        self.assertEqual(self._catalog("fr"), { "a": "un" })
        self.assertEqual(self._catalog("en_old"), { "a": "1" })

    def test_MissingSourceCatalog(self):
        log_test_name("Synchronise without source catalog")
        write_catalog(self.workspace, "fr", {})

        result, dummy = self._synchronise()

        log_input_expected_result("outcome", RunOutcome.FAILED, result.outcome)
        self.assertEqual(result.outcome, RunOutcome.FAILED)
        self.assertFalse(result.success)
        self.assertEqual(len(result.errors), 1)

    def test_UnknownProvider(self):
        log_test_name("Synchronise with unknown provider")
        write_catalog(self.workspace, "en", { "common": { "hello": "Hi" } })
        write_catalog(self.workspace, "fr", {})

        synchroniser = CatalogSynchroniser(self._options(provider="No Such Provider"))
        result = synchroniser.Synchronise()

        log_input_expected_result("outcome", RunOutcome.FAILED, result.outcome)
        self.assertEqual(result.outcome, RunOutcome.FAILED)
        self.assertEqual(len(result.errors), 1)
        self.assertFalse(os.path.exists(self.baseline_path))

    def test_GroupCallback(self):
        log_test_name("Synchronise progress callback")
        write_catalog(self.workspace, "en", { "title": "Welcome", "common": { "hello": "Hi" } })
        write_catalog(self.workspace, "de", {})
        write_catalog(self.workspace, "fr", {})

        progress : list[tuple[str, str]] = []
        synchroniser = CatalogSynchroniser(self._options(), translation_provider=DummyProvider(), on_group_translated=lambda language, group: progress.append((language, group)))
        synchroniser.Synchronise()

        expected = [ ("de", DEFAULT_GROUP), ("de", "common"), ("fr", DEFAULT_GROUP), ("fr", "common") ]
        log_input_expected_result("progress", expected, progress)
        self.assertEqual(progress, expected)

if __name__ == '__main__':
    unittest.main()
