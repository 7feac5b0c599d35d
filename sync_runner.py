# sync_runner.py
# -*- coding: utf-8 -*-
"""
Status-message layer over core_logic.

Every run_* function discovers the profile files fresh, calls the core and
returns (success, message). Nothing raises out of here: failures become a
short human-readable message for the status bar or the console.
"""

import argparse
import sys
import logging

import core_logic
import cod_path_finder
import config
import settings_manager
from errors import SyncError


def _current_settings(settings=None) -> dict:
    if settings is None:
        settings, _ = settings_manager.load_settings()
    return settings


def get_profile_files(settings=None):
    """Discovers profile files using the documents override from settings, if any."""
    settings = _current_settings(settings)
    documents_root = settings.get("documents_dir_override") or None
    return cod_path_finder.discover_profile_config_files(documents_root)


def _summarize_errors(errors) -> str:
    return "; ".join(f"{name}: {msg}" for name, msg in errors)


def run_export(output_path, settings=None):
    try:
        settings = _current_settings(settings)
        files = get_profile_files(settings)
        categories = settings.get("categories", config.DEFAULT_CATEGORIES)
        document = core_logic.export_settings(files, categories, output_path)
        total = sum(len(section) for section in document.values())
        return True, f"Exported {total} settings from {len(document)} files to '{output_path}'."
    except SyncError as e:
        logging.error(f"Export failed: {e}")
        return False, f"Export failed: {e}"
    except Exception as e:
        logging.exception("Unexpected error during export.")
        return False, f"Export failed: {e}"


def run_import(document_path, settings=None):
    try:
        settings = _current_settings(settings)
        files = get_profile_files(settings)
        report = core_logic.import_settings(files, document_path)
    except SyncError as e:
        logging.error(f"Import failed: {e}")
        return False, f"Import failed: {e}"
    except Exception as e:
        logging.exception("Unexpected error during import.")
        return False, f"Import failed: {e}"

    message = (f"Imported {report.changed_settings} settings into {len(report.updated_files)} files "
               f"({len(report.unchanged_files)} unchanged, {len(report.skipped_files)} not in document).")
    if report.failed_files:
        return False, f"{message} Errors: {_summarize_errors(report.failed_files)}"
    return True, message


def run_backup(settings=None):
    try:
        files = get_profile_files(_current_settings(settings))
        report = core_logic.backup_config_files(files)
    except SyncError as e:
        logging.error(f"Backup failed: {e}")
        return False, f"Backup failed: {e}"
    except Exception as e:
        logging.exception("Unexpected error during backup.")
        return False, f"Backup failed: {e}"

    message = f"Backed up {report.success_count} files"
    if report.errors:
        return False, f"{message}, {len(report.errors)} failed: {_summarize_errors(report.errors)}"
    return True, message


def list_profiles(settings=None):
    try:
        files = get_profile_files(settings)
    except SyncError as e:
        return False, str(e)
    lines = [f"{f.profile}/{f.basename}" for f in files]
    return True, "\n".join(lines)


def set_install_dir(candidate, settings):
    """Validates a picked folder and stores it in settings (and on disk)."""
    install_root = cod_path_finder.locate_install_root(candidate)
    if install_root is None:
        return False, f"{config.INSTALL_MARKER_EXE} not found in selected folder: {candidate}"
    settings["cod_install_dir"] = install_root
    if not settings_manager.save_settings(settings):
        return False, f"Game folder set to {install_root}, but settings could not be saved."
    return True, f"Game folder set to: {install_root}"


def resolve_install_dir(settings):
    """Saved folder first, then the default install path. None if neither is valid."""
    saved = settings.get("cod_install_dir")
    if saved and cod_path_finder.is_valid_install_dir(saved):
        return saved
    return cod_path_finder.locate_install_root()


def build_arg_parser():
    parser = argparse.ArgumentParser(description="Export, import or back up Call of Duty profile settings.")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--export", metavar="PATH", help="Export the filtered settings of every profile to a JSON file.")
    group.add_argument("--import", dest="import_path", metavar="PATH", help="Merge a previously exported JSON file into the profile configs.")
    group.add_argument("--backup", action="store_true", help="Create timestamped copies of every profile config file.")
    group.add_argument("--list", action="store_true", help="List the discovered profile config files.")
    return parser


def has_silent_action(args) -> bool:
    return bool(args.export or args.import_path or args.backup or args.list)


def run_from_args(args) -> int:
    """Runs the operation selected on the command line. Returns the exit code."""
    if args.export:
        success, message = run_export(args.export)
    elif args.import_path:
        success, message = run_import(args.import_path)
    elif args.backup:
        success, message = run_backup()
    elif args.list:
        success, message = list_profiles()
    else:
        logging.error("No operation requested.")
        return 2
    log_level = logging.INFO if success else logging.ERROR
    logging.log(log_level, message)
    return 0 if success else 1


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s', datefmt='%H:%M:%S')
    sys.exit(run_from_args(build_arg_parser().parse_args()))
