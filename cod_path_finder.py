"""
cod_path_finder.py
Locates the game installation and the per-profile config files
(<Documents>/Call of Duty/players/<profile>/g.*.txt0|txt1).
"""

import os
import re
import logging
from typing import List, Optional
from dataclasses import dataclass

import config
from errors import NotFoundError


_PROFILE_FILE_RE = re.compile(config.PROFILE_FILE_PATTERN)


@dataclass(frozen=True)
class ProfileConfigFile:
    """A discovered profile config file. `basename` keys export documents."""
    path: str
    profile: str
    basename: str


def is_profile_config_name(filename: str) -> bool:
    """True for names like 'g.1.0.l.txt0' or 'g.something.txt1'."""
    return bool(_PROFILE_FILE_RE.match(filename))


def is_valid_install_dir(path: Optional[str]) -> bool:
    """Checks that the marker executable exists (as a regular file) in path."""
    if not path:
        return False
    marker = os.path.join(path, config.INSTALL_MARKER_EXE)
    return os.path.isfile(marker)


def locate_install_root(candidate: Optional[str] = None) -> Optional[str]:
    """
    Returns the installation folder if it contains the marker executable.

    With no candidate only the single default install path is tried; a
    candidate (e.g. the folder chosen in the picker) is validated the same way.
    """
    path = candidate if candidate else config.DEFAULT_INSTALL_DIR
    if is_valid_install_dir(path):
        logging.info(f"Game installation found: {path}")
        return os.path.abspath(path)
    if candidate:
        logging.warning(f"{config.INSTALL_MARKER_EXE} not found in selected folder: '{candidate}'")
    else:
        logging.info(f"Default game installation not found: '{path}'")
    return None


def require_install_root(candidate: Optional[str] = None) -> str:
    """Like locate_install_root, but raises NotFoundError instead of returning None."""
    install_root = locate_install_root(candidate)
    if install_root is None:
        raise NotFoundError(
            f"{config.INSTALL_MARKER_EXE} not found in '{candidate or config.DEFAULT_INSTALL_DIR}'",
            path=candidate or config.DEFAULT_INSTALL_DIR,
        )
    return install_root


def get_players_dir(documents_root: Optional[str] = None) -> str:
    """Returns <Documents>/Call of Duty/players, raising NotFoundError if Documents is unknown."""
    if documents_root is None:
        documents_root = config.get_documents_folder()
    if not documents_root:
        raise NotFoundError("Documents folder could not be resolved")
    return os.path.join(documents_root, config.PLAYERS_RELATIVE_DIR)


def discover_profile_config_files(documents_root: Optional[str] = None) -> List[ProfileConfigFile]:
    """
    Enumerates every profile folder under the players directory and collects
    the g.*.txt0 / g.*.txt1 files inside each one.

    The result follows directory enumeration order and is never empty:
    NotFoundError is raised when nothing matches.
    """
    players_dir = get_players_dir(documents_root)
    logging.debug(f"Scanning profile folders in: {players_dir}")

    found: List[ProfileConfigFile] = []
    try:
        profile_entries = list(os.scandir(players_dir))
    except OSError as e:
        raise NotFoundError(f"Players folder not accessible: {e}", path=players_dir) from e

    for profile_entry in profile_entries:
        if not profile_entry.is_dir():
            continue
        try:
            file_entries = list(os.scandir(profile_entry.path))
        except OSError as e:
            logging.warning(f"Unable to list profile folder '{profile_entry.path}': {e}")
            continue
        for file_entry in file_entries:
            if file_entry.is_file() and is_profile_config_name(file_entry.name):
                found.append(ProfileConfigFile(
                    path=os.path.abspath(file_entry.path),
                    profile=profile_entry.name,
                    basename=file_entry.name,
                ))

    if not found:
        raise NotFoundError(f"No profile config files found in '{players_dir}'", path=players_dir)

    logging.info(f"Found {len(found)} profile config file(s) in '{players_dir}'.")
    return found
