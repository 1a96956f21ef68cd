import os
import logging

from argparse import ArgumentParser, Namespace
from dataclasses import dataclass

from PyCatalog.Helpers.Resources import config_dir
from PyCatalog.Options import Options

@dataclass
class LoggerOptions():
    file_handler: logging.FileHandler|None
    log_path: str

def InitLogger(logfilename: str, debug: bool = False) -> LoggerOptions:
    """ Initialise the logger with a file handler and return the path to the log file """
    log_path = os.path.join(config_dir, f"{logfilename}.log")
    file_handler = None

    if debug:
        logging_level = logging.DEBUG
    else:
        level_name = os.getenv('LOG_LEVEL', 'INFO').upper()
        logging_level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(format='%(levelname)s: %(message)s', encoding='utf-8', level=logging_level)

    if debug:
        logging.debug("Debug logging enabled")

    # Create file handler with the same logging level
    try:
        os.makedirs(config_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8', mode='w')
        file_handler.setLevel(logging_level)
        formatter = logging.Formatter('%(asctime)s %(levelname)s: %(message)s')
        file_handler.setFormatter(formatter)
        logging.getLogger('').addHandler(file_handler)

    except OSError as e:
        logging.warning(f"Unable to create log file at {log_path}: {e}")

    return LoggerOptions(file_handler=file_handler, log_path=log_path)

def AddCommonArguments(parser : ArgumentParser) -> None:
    """
    Arguments shared by every subcommand
    """
    parser.add_argument('-w', '--workspace', type=str, default=None, help="Directory containing the <language>.json catalogs")
    parser.add_argument('--baseline-dir', dest='baseline_dir', type=str, default=None, help="Directory for the baseline snapshot of the source catalog")
    parser.add_argument('-s', '--source', type=str, default=None, help="Language code of the source catalog (default: en)")
    parser.add_argument('--debug', action='store_true', help="Run with DEBUG log level")

def CreateArgParser(description : str) -> ArgumentParser:
    """
    Create the argument parser with a subcommand for each operation
    """
    parser = ArgumentParser(description=description)
    subparsers = parser.add_subparsers(dest='command', required=True)

    auto = subparsers.add_parser('auto', help="Translate whatever changed in the source catalog since the last run")
    AddCommonArguments(auto)
    auto.add_argument('-f', '--force', action='store_true', help="Translate the whole source catalog, ignoring the baseline")
    auto.add_argument('--dry-run', dest='dry_run', action='store_true', help="Report what would be translated without changing any files")
    auto.add_argument('-p', '--provider', type=str, default=None, help="Translation provider to use (e.g. OpenAI, Custom Server)")
    auto.add_argument('-m', '--model', type=str, default=None, help="The model to use for translation")
    auto.add_argument('-k', '--apikey', type=str, default=None, help="API key for the provider")
    auto.add_argument('-b', '--apibase', type=str, default=None, help="API base address, for OpenAI-compatible services")
    auto.add_argument('--server', type=str, default=None, help="Server address for the Custom Server provider")
    auto.add_argument('--endpoint', type=str, default=None, help="Endpoint for the Custom Server provider")
    auto.add_argument('--instructionfile', type=str, default=None, help="Name/path of a file to load translation instructions from")
    auto.add_argument('--ratelimit', type=float, default=None, help="Maximum number of requests per minute")
    auto.add_argument('--temperature', type=float, default=None, help="A higher temperature increases the random variance of translations")
    auto.add_argument('--writebackup', action='store_true', default=None, help="Keep a timestamped copy of the baseline before it is replaced")

    diff = subparsers.add_parser('diff', help="Show what changed in the source catalog since the last run")
    AddCommonArguments(diff)

    languages = subparsers.add_parser('languages', help="List the language catalogs in the workspace")
    AddCommonArguments(languages)

    validate = subparsers.add_parser('validate', help="Report keys missing from the target catalogs")
    AddCommonArguments(validate)

    return parser

def LoadInstructions(filepath : str|None) -> str|None:
    if not filepath:
        return None

    with open(filepath, 'r', encoding='utf-8') as f:
        return f.read().strip() or None

def CreateOptions(args : Namespace, **kwargs) -> Options:
    """ Create options from the command line arguments """
    options = {
        'workspace_dir': args.workspace,
        'baseline_dir': args.baseline_dir,
        'source_language': args.source,
        'provider': getattr(args, 'provider', None),
        'model': getattr(args, 'model', None),
        'api_key': getattr(args, 'apikey', None),
        'api_base': getattr(args, 'apibase', None),
        'server_address': getattr(args, 'server', None),
        'endpoint': getattr(args, 'endpoint', None),
        'instructions': LoadInstructions(getattr(args, 'instructionfile', None)),
        'rate_limit': getattr(args, 'ratelimit', None),
        'temperature': getattr(args, 'temperature', None),
        'write_backup': getattr(args, 'writebackup', None),
        'force': getattr(args, 'force', None),
        'dry_run': getattr(args, 'dry_run', None),
    }

    # Adding optional new keys from kwargs
    for key, value in kwargs.items():
        options[key] = value

    return Options(options)
