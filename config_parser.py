# config_parser.py
# -*- coding: utf-8 -*-
"""
Reader/writer for the flat `key = value` profile config files.

Parsing never rewrites a file: comments, blank lines and malformed lines
are only skipped in the resulting mapping. Line-level helpers are used by
the import merge, which rewrites files wholesale; they split on '\\n' only
and round-trip bytes that are not valid UTF-8, so lines the merge does not
touch are written back unchanged.
"""

import os
import logging
from typing import Dict, List

from errors import ConfigIOError


def format_config_line(key: str, value: str) -> str:
    """Canonical form of an assignment line."""
    return f"{key} = {value}"


def split_config_lines(text: str) -> List[str]:
    """Splits on '\\n' only, dropping one trailing '\\r' per line and the empty tail."""
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def parse_config_text(text: str) -> Dict[str, str]:
    """Splits each line on the first '='. Later duplicates win."""
    settings: Dict[str, str] = {}
    for line in split_config_lines(text):
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        settings[key.strip()] = value.strip()
    return settings


def _read_text(path: str, errors: str = "replace") -> str:
    try:
        with open(path, "r", encoding="utf-8", errors=errors, newline="") as f:
            return f.read()
    except OSError as e:
        raise ConfigIOError(f"Unable to read '{path}': {e}", path=path) from e


def write_text_atomic(path: str, text: str, errors: str = "strict") -> None:
    """Writes text to path via a temp file and os.replace; the old file survives a failure."""
    temp_path = path + ".tmp"
    try:
        with open(temp_path, "w", encoding="utf-8", errors=errors, newline="") as f:
            f.write(text)
        os.replace(temp_path, path)
    except OSError as e:
        try:
            if os.path.exists(temp_path):
                os.remove(temp_path)
        except OSError:
            pass
        raise ConfigIOError(f"Unable to write '{path}': {e}", path=path) from e


def parse_config_file(path: str) -> Dict[str, str]:
    settings = parse_config_text(_read_text(path))
    logging.debug(f"Parsed {len(settings)} settings from '{path}'")
    return settings


def read_config_lines(path: str) -> List[str]:
    """Raw lines of the file, without line terminators."""
    return split_config_lines(_read_text(path, errors="surrogateescape"))


def write_config_lines(path: str, lines: List[str]) -> None:
    """Rewrites the whole file, lines joined by a single newline."""
    write_text_atomic(path, "\n".join(lines), errors="surrogateescape")
