from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

import config


@pytest.fixture
def documents_root(tmp_path: Path) -> Path:
    root = tmp_path / "Documents"
    (root / config.PLAYERS_RELATIVE_DIR).mkdir(parents=True)
    return root


@pytest.fixture
def make_profile_file(documents_root: Path) -> Callable[[str, str, str], Path]:
    """Creates <players>/<profile>/<name> with the given text."""

    def _make(profile: str, name: str, text: str) -> Path:
        profile_dir = documents_root / config.PLAYERS_RELATIVE_DIR / profile
        profile_dir.mkdir(parents=True, exist_ok=True)
        path = profile_dir / name
        path.write_text(text, encoding="utf-8")
        return path

    return _make


@pytest.fixture
def app_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    folder = tmp_path / "appdata"
    folder.mkdir()
    monkeypatch.setattr(config, "get_app_data_folder", lambda: str(folder))
    return folder
