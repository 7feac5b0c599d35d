# core_logic.py
# -*- coding: utf-8 -*-
from datetime import datetime
import logging
import os
import json
import shutil
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

import config
from cod_path_finder import ProfileConfigFile
from config_parser import (
    format_config_line,
    parse_config_file,
    read_config_lines,
    write_config_lines,
    write_text_atomic,
)
from errors import ConfigIOError, MalformedDocumentError, SyncError
from settings_filter import filter_settings


# --- Reports ---

@dataclass
class ImportReport:
    """Outcome of import_settings, one entry per discovered file."""
    updated_files: List[str] = field(default_factory=list)
    unchanged_files: List[str] = field(default_factory=list)
    skipped_files: List[str] = field(default_factory=list)  # no section in the document
    failed_files: List[Tuple[str, str]] = field(default_factory=list)
    changed_settings: int = 0


@dataclass
class BackupReport:
    success_count: int = 0
    errors: List[Tuple[str, str]] = field(default_factory=list)
    backup_paths: List[str] = field(default_factory=list)


# --- Export ---

def build_export_document(files: Iterable[ProfileConfigFile], categories: Iterable[str]) -> Dict[str, Dict[str, str]]:
    """
    Parses and filters every file into {basename: {setting: value}}.

    Files that cannot be read are skipped. If two profiles share a basename
    the first one discovered is kept.
    """
    categories = list(categories)
    document: Dict[str, Dict[str, str]] = {}
    for cfg_file in files:
        if cfg_file.basename in document:
            logging.warning(f"Duplicate config name '{cfg_file.basename}' in profile '{cfg_file.profile}', skipped.")
            continue
        try:
            settings = parse_config_file(cfg_file.path)
        except ConfigIOError as e:
            logging.warning(f"Skipping '{cfg_file.path}' during export: {e}")
            continue
        filtered = filter_settings(settings, categories)
        logging.info(f"Export: {len(filtered)} of {len(settings)} settings selected from '{cfg_file.basename}' ({cfg_file.profile}).")
        document[cfg_file.basename] = filtered
    return document


def _write_json_atomic(output_path: str, data: dict) -> None:
    parent = os.path.dirname(os.path.abspath(output_path))
    try:
        os.makedirs(parent, exist_ok=True)
    except OSError as e:
        raise ConfigIOError(f"Unable to create folder '{parent}': {e}", path=output_path) from e
    text = json.dumps(data, indent=4, sort_keys=True, ensure_ascii=False) + "\n"
    write_text_atomic(output_path, text)


def export_settings(files: Iterable[ProfileConfigFile], categories: Iterable[str], output_path: str) -> Dict[str, Dict[str, str]]:
    """Writes the export document to output_path (overwriting it) and returns it."""
    document = build_export_document(files, categories)
    _write_json_atomic(output_path, document)
    logging.info(f"Exported {len(document)} config file(s) to '{output_path}'.")
    return document


# --- Import ---

def validate_export_document(data) -> Dict[str, Dict[str, str]]:
    """Checks the {str: {str: str}} shape, raising MalformedDocumentError."""
    if not isinstance(data, dict):
        raise MalformedDocumentError(f"Expected a JSON object at top level, got {type(data).__name__}")
    for section_name, section in data.items():
        if not isinstance(section, dict):
            raise MalformedDocumentError(f"Section '{section_name}' is not an object")
        for key, value in section.items():
            # Only names an export can produce: trimmed, single-line, no '='
            if not key or key != key.strip() or any(c in key for c in "=\r\n"):
                raise MalformedDocumentError(f"Invalid setting name {key!r} in section '{section_name}'")
            if not isinstance(value, str):
                raise MalformedDocumentError(
                    f"Value of '{key}' in section '{section_name}' must be a string, got {type(value).__name__}"
                )
            if "\r" in value or "\n" in value:
                raise MalformedDocumentError(f"Value of '{key}' in section '{section_name}' spans multiple lines")
    return data


def load_export_document(document_path: str) -> Dict[str, Dict[str, str]]:
    try:
        with open(document_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedDocumentError(f"'{os.path.basename(document_path)}' is not valid JSON: {e}", path=document_path) from e
    except OSError as e:
        raise ConfigIOError(f"Unable to read '{document_path}': {e}", path=document_path) from e
    try:
        return validate_export_document(data)
    except MalformedDocumentError as e:
        e.path = document_path
        raise


def find_setting_line(lines: List[str], key: str) -> Optional[int]:
    """
    Index of the first line that, once left-stripped, starts with key and
    contains '='. This is a prefix test: 'fov' also matches 'fovscale = 1'.
    """
    for index, line in enumerate(lines):
        stripped = line.lstrip()
        if stripped.startswith(key) and "=" in stripped:
            return index
    return None


def merge_settings_into_lines(lines: List[str], values: Dict[str, str]) -> Tuple[List[str], int]:
    """
    Applies values to a copy of lines. A matching line is replaced whole by
    'key = value' (trailing comments are dropped); a missing key is appended.
    Returns the new lines and the number of lines actually changed.
    """
    merged = list(lines)
    changed = 0
    for key, value in values.items():
        if not key:
            logging.warning("Ignoring setting with an empty name.")
            continue
        new_line = format_config_line(key, value)
        index = find_setting_line(merged, key)
        if index is None:
            merged.append(new_line)
            changed += 1
        elif merged[index] != new_line:
            merged[index] = new_line
            changed += 1
    return merged, changed


def import_settings(files: Iterable[ProfileConfigFile], document_path: str) -> ImportReport:
    """
    Merges each document section into the live file with the same basename.

    A malformed document aborts the whole import before any file is touched.
    Files without a section, or with nothing to change, are not rewritten.
    """
    document = load_export_document(document_path)
    report = ImportReport()

    for cfg_file in files:
        section = document.get(cfg_file.basename)
        if section is None:
            logging.info(f"No section for '{cfg_file.basename}' ({cfg_file.profile}), left untouched.")
            report.skipped_files.append(cfg_file.path)
            continue
        try:
            lines = read_config_lines(cfg_file.path)
            merged, changed = merge_settings_into_lines(lines, section)
            if changed:
                write_config_lines(cfg_file.path, merged)
                logging.info(f"Updated {changed} setting(s) in '{cfg_file.path}'.")
                report.updated_files.append(cfg_file.path)
                report.changed_settings += changed
            else:
                logging.info(f"'{cfg_file.path}' already up to date.")
                report.unchanged_files.append(cfg_file.path)
        except SyncError as e:
            logging.error(f"Import failed for '{cfg_file.path}': {e}")
            report.failed_files.append((cfg_file.basename, str(e)))

    return report


# --- Backup ---

def get_backup_path(source_path: str, timestamp: str) -> str:
    """<file>.bak_<timestamp>, with _1, _2... appended if that name is taken."""
    base = f"{source_path}{config.BACKUP_SUFFIX}{timestamp}"
    candidate = base
    counter = 1
    while os.path.exists(candidate):
        candidate = f"{base}_{counter}"
        counter += 1
    return candidate


def backup_config_files(files: Iterable[ProfileConfigFile], timestamp: Optional[str] = None) -> BackupReport:
    """Copies every file next to itself. Failures are collected, never fatal."""
    if timestamp is None:
        timestamp = datetime.now().strftime(config.BACKUP_TIMESTAMP_FORMAT)
    report = BackupReport()
    for cfg_file in files:
        try:
            destination = get_backup_path(cfg_file.path, timestamp)
            shutil.copy2(cfg_file.path, destination)
            report.success_count += 1
            report.backup_paths.append(destination)
            logging.info(f"Backup created: {destination}")
        except OSError as e:
            logging.error(f"Backup failed for '{cfg_file.path}': {e}")
            report.errors.append((cfg_file.basename, str(e)))
    return report
