"""Entry point functions for the catalog-sync command line tool."""

import os
import sys
import logging

# Add the parent directory to the sys path so that modules can be found
base_path = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.append(base_path)


def catalog_sync(argv : list[str]|None = None) -> int:
    """Entry point for the catalog-sync command."""
    from scripts.sync_common import InitLogger, CreateArgParser, CreateOptions
    from PyCatalog.CatalogError import CatalogError
    from PyCatalog.Helpers.Localization import initialize_localization
    from PyCatalog.Options import Options

    parser = CreateArgParser("Keeps per-language JSON translation catalogs in sync with the source catalog")
    args = parser.parse_args(argv)

    InitLogger("catalog-sync", args.debug)

    try:
        options : Options = CreateOptions(args)
        initialize_localization(options.get_str('ui_language'))

        commands = {
            'auto': RunAuto,
            'diff': RunDiff,
            'languages': RunLanguages,
            'validate': RunValidate,
        }

        return commands[args.command](options)

    except CatalogError as e:
        logging.error(str(e))
        print("Error:", e)
        return 1

def RunAuto(options) -> int:
    """ Synchronise the catalogs and print a summary """
    from PyCatalog.CatalogSynchroniser import CatalogSynchroniser, FormatSyncSummary, RunOutcome

    synchroniser = CatalogSynchroniser(options, on_group_translated=_report_group)

    try:
        result = synchroniser.Synchronise()

    except KeyboardInterrupt:
        logging.warning("Interrupted, stopping translation")
        synchroniser.StopTranslating()
        return 1

    print(FormatSyncSummary(result))

    return 0 if result.success or result.outcome == RunOutcome.NO_WORK else 1

def RunDiff(options) -> int:
    """ Print the changes in the source catalog since the baseline """
    from PyCatalog.CatalogDiscovery import GetLanguageFiles, GetSourceFile
    from PyCatalog.RunClassifier import ClassifyRun, RunKind

    files = GetLanguageFiles(options.workspace_dir, options.source_language, exclude=[options.baseline_path])
    source = GetSourceFile(files, options.source_language)
    plan = ClassifyRun(source.path, options.baseline_path)

    print(f"Run type: {plan.kind.value}")
    if plan.kind == RunKind.FIRST_RUN:
        print(f"No baseline at {options.baseline_path}, all {plan.entry_count} entries would be translated")
        return 0

    if plan.diff:
        print(f"Added: {', '.join(plan.diff.added) or '-'}")
        print(f"Changed: {', '.join(plan.diff.changed) or '-'}")
        print(f"Removed: {', '.join(plan.diff.missing) or '-'}")

    if plan.needs_translation:
        print(f"{plan.entry_count} entries in {len(plan.content)} groups would be translated")

    return 0

def RunLanguages(options) -> int:
    """ List the catalogs found in the workspace """
    from PyCatalog.CatalogDiscovery import GetLanguageFiles, GetSourceFile, GetTargetLanguages
    from PyCatalog.Helpers.Localization import GetLanguageName

    files = GetLanguageFiles(options.workspace_dir, options.source_language, exclude=[options.baseline_path])
    source = GetSourceFile(files, options.source_language)

    print(f"Source: {source.code} ({GetLanguageName(source.code)}) {source.path}")

    targets = GetTargetLanguages(files, options.source_language)
    print(f"Targets: {len(targets)}")
    for file in files:
        if file.code in targets:
            print(f"  {file.code} ({GetLanguageName(file.code)}) {file.path}")

    return 0

def RunValidate(options) -> int:
    """ Report keys missing from each target catalog """
    from PyCatalog.CatalogDiscovery import GetLanguageFiles, GetSourceFile
    from PyCatalog.CatalogFile import LoadCatalog
    from PyCatalog.CatalogValidator import ValidateCatalogStructure

    files = GetLanguageFiles(options.workspace_dir, options.source_language, exclude=[options.baseline_path])
    source_file = GetSourceFile(files, options.source_language)
    source = LoadCatalog(source_file.path, strict=True)

    valid = True
    for file in files:
        if file.code == source_file.code:
            continue

        issues = ValidateCatalogStructure(source, LoadCatalog(file.path))
        if issues:
            valid = False
            print(f"{file.code}: {len(issues)} issues")
            for issue in issues:
                print(f"  {issue}")
        else:
            print(f"{file.code}: OK")

    return 0 if valid else 1

def _report_group(language : str, group : str) -> None:
    logging.info(f"[{language}] {group} done")
