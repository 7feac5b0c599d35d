from __future__ import annotations

import json
import os
import re
import sys
from pathlib import Path

import pytest

import core_logic
from cod_path_finder import ProfileConfigFile
from errors import MalformedDocumentError


def _profile_file(path: Path, profile: str = "111") -> ProfileConfigFile:
    return ProfileConfigFile(path=str(path), profile=profile, basename=path.name)


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


# --- Export ---

def test_export_keys_sections_by_basename(tmp_path: Path) -> None:
    a = _write(tmp_path / "111" / "g.1.0.l.txt0", "fov = 90\nVoiceVolume = 5\nMouseSensitivity = 1.5\n")
    b = _write(tmp_path / "111" / "g.1.0.l.txt1", "Brightness = 60\n")
    output = tmp_path / "export.json"

    document = core_logic.export_settings(
        [_profile_file(a), _profile_file(b)], ["fov", "mouse", "brightness"], str(output)
    )

    expected = {
        "g.1.0.l.txt0": {"fov": "90", "MouseSensitivity": "1.5"},
        "g.1.0.l.txt1": {"Brightness": "60"},
    }
    assert document == expected
    assert json.loads(output.read_text(encoding="utf-8")) == expected
    assert not (tmp_path / "export.json.tmp").exists()


def test_export_is_deterministic(tmp_path: Path) -> None:
    a = _write(tmp_path / "g.a.txt0", "zfov = 1\nafov = 2\n")
    first = tmp_path / "one.json"
    second = tmp_path / "two.json"
    core_logic.export_settings([_profile_file(a)], ["fov"], str(first))
    core_logic.export_settings([_profile_file(a)], ["fov"], str(second))
    assert first.read_bytes() == second.read_bytes()
    assert first.read_text(encoding="utf-8").index("afov") < first.read_text(encoding="utf-8").index("zfov")


def test_export_skips_unreadable_files(tmp_path: Path) -> None:
    good = _write(tmp_path / "g.good.txt0", "fov = 90\n")
    missing = tmp_path / "g.missing.txt0"
    output = tmp_path / "export.json"

    document = core_logic.export_settings([_profile_file(missing), _profile_file(good)], ["fov"], str(output))

    assert document == {"g.good.txt0": {"fov": "90"}}


def test_export_with_all_files_failing_writes_empty_document(tmp_path: Path) -> None:
    output = tmp_path / "export.json"
    output.write_text("old content", encoding="utf-8")
    core_logic.export_settings([_profile_file(tmp_path / "g.gone.txt0")], ["fov"], str(output))
    assert json.loads(output.read_text(encoding="utf-8")) == {}


def test_export_keeps_first_file_for_duplicate_basename(tmp_path: Path) -> None:
    first = _write(tmp_path / "111" / "g.1.txt0", "fov = 1\n")
    second = _write(tmp_path / "222" / "g.1.txt0", "fov = 2\n")
    document = core_logic.build_export_document(
        [_profile_file(first, "111"), _profile_file(second, "222")], ["fov"]
    )
    assert document == {"g.1.txt0": {"fov": "1"}}


# --- Import ---

def test_export_import_round_trip_restores_exported_values(tmp_path: Path) -> None:
    original = _write(tmp_path / "111" / "g.1.0.l.txt0", "fov_scale=1.0\nbrightness=5\nunrelated_key=keep\n")
    export_path = tmp_path / "export.json"
    core_logic.export_settings([_profile_file(original)], ["fov", "brightness"], str(export_path))

    copy = _write(tmp_path / "copy" / "g.1.0.l.txt0", "fov_scale=2.0\nbrightness=9\nunrelated_key=keep\n")
    report = core_logic.import_settings([_profile_file(copy)], str(export_path))

    assert report.updated_files == [str(copy)]
    assert copy.read_text(encoding="utf-8").splitlines() == [
        "fov_scale = 1.0",
        "brightness = 5",
        "unrelated_key=keep",
    ]


def test_import_twice_is_idempotent(tmp_path: Path) -> None:
    target = _write(tmp_path / "g.1.txt0", "// header\nfov = 80\n")
    document = _write(tmp_path / "doc.json", json.dumps({"g.1.txt0": {"fov": "100", "hdr": "1"}}))

    core_logic.import_settings([_profile_file(target)], str(document))
    after_first = target.read_bytes()
    second = core_logic.import_settings([_profile_file(target)], str(document))

    assert target.read_bytes() == after_first
    assert second.updated_files == []
    assert second.unchanged_files == [str(target)]
    assert target.read_text(encoding="utf-8").count("hdr = 1") == 1


def test_import_appends_missing_key_once(tmp_path: Path) -> None:
    target = _write(tmp_path / "g.1.txt0", "// header\nfov = 100\nVoiceVolume = 3")
    document = _write(tmp_path / "doc.json", json.dumps({"g.1.txt0": {"fov": "100", "MouseSensitivity": "2"}}))

    report = core_logic.import_settings([_profile_file(target)], str(document))

    assert report.changed_settings == 1
    assert target.read_text(encoding="utf-8").splitlines() == [
        "// header",
        "fov = 100",
        "VoiceVolume = 3",
        "MouseSensitivity = 2",
    ]


def test_import_replaces_whole_line_dropping_trailing_comment(tmp_path: Path) -> None:
    target = _write(tmp_path / "g.1.txt0", "    fov = 80 // default\n")
    document = _write(tmp_path / "doc.json", json.dumps({"g.1.txt0": {"fov": "95"}}))
    core_logic.import_settings([_profile_file(target)], str(document))
    assert target.read_text(encoding="utf-8") == "fov = 95"


def test_import_matches_key_as_line_prefix(tmp_path: Path) -> None:
    target = _write(tmp_path / "g.1.txt0", "fovscale = 1.0\nfov = 80\n")
    document = _write(tmp_path / "doc.json", json.dumps({"g.1.txt0": {"fov": "95"}}))
    core_logic.import_settings([_profile_file(target)], str(document))
    # the first line starting with "fov" wins, even though it is a different key
    assert target.read_text(encoding="utf-8").splitlines() == ["fov = 95", "fov = 80"]


def test_import_without_changes_does_not_rewrite(tmp_path: Path) -> None:
    text = "fov = 90\r\nbrightness = 5\r\n"
    target = tmp_path / "g.1.txt0"
    target.write_bytes(text.encode("utf-8"))
    document = _write(tmp_path / "doc.json", json.dumps({"g.1.txt0": {"fov": "90"}}))

    report = core_logic.import_settings([_profile_file(target)], str(document))

    assert report.updated_files == []
    assert target.read_bytes() == text.encode("utf-8")


def test_import_keeps_unrelated_lines_byte_for_byte(tmp_path: Path) -> None:
    target = tmp_path / "g.1.txt0"
    target.write_bytes(b"ProfileName = J\xe4ger\nnote = a\x0cb\x1cc\xc2\x85d\nfov = 80\n")
    document = _write(tmp_path / "doc.json", json.dumps({"g.1.txt0": {"fov": "95"}}))

    core_logic.import_settings([_profile_file(target)], str(document))

    assert target.read_bytes() == b"ProfileName = J\xe4ger\nnote = a\x0cb\x1cc\xc2\x85d\nfov = 95"


def test_import_failed_write_keeps_original_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    original = b"// header\r\nfov = 80\r\n"
    target = tmp_path / "g.1.txt0"
    target.write_bytes(original)
    document = _write(tmp_path / "doc.json", json.dumps({"g.1.txt0": {"fov": "95"}}))

    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", fail_replace)
    report = core_logic.import_settings([_profile_file(target)], str(document))

    assert [name for name, _ in report.failed_files] == ["g.1.txt0"]
    assert target.read_bytes() == original
    assert not (tmp_path / "g.1.txt0.tmp").exists()


def test_import_leaves_files_without_section_untouched(tmp_path: Path) -> None:
    listed = _write(tmp_path / "g.1.txt0", "fov = 80\n")
    other = _write(tmp_path / "g.2.txt0", "fov = 80\n")
    document = _write(tmp_path / "doc.json", json.dumps({"g.1.txt0": {"fov": "99"}}))

    report = core_logic.import_settings([_profile_file(listed), _profile_file(other)], str(document))

    assert report.skipped_files == [str(other)]
    assert other.read_text(encoding="utf-8") == "fov = 80\n"
    assert listed.read_text(encoding="utf-8") == "fov = 99"


def test_import_writes_section_into_every_profile_with_that_name(tmp_path: Path) -> None:
    first = _write(tmp_path / "111" / "g.1.txt0", "fov = 80\n")
    second = _write(tmp_path / "222" / "g.1.txt0", "fov = 70\n")
    document = _write(tmp_path / "doc.json", json.dumps({"g.1.txt0": {"fov": "99"}}))

    report = core_logic.import_settings([_profile_file(first, "111"), _profile_file(second, "222")], str(document))

    assert len(report.updated_files) == 2
    assert first.read_text(encoding="utf-8") == second.read_text(encoding="utf-8") == "fov = 99"


def test_import_collects_per_file_failures(tmp_path: Path) -> None:
    good = _write(tmp_path / "111" / "g.1.txt0", "fov = 80\n")
    gone = tmp_path / "222" / "g.1.txt0"
    document = _write(tmp_path / "doc.json", json.dumps({"g.1.txt0": {"fov": "99"}}))

    report = core_logic.import_settings([_profile_file(gone, "222"), _profile_file(good)], str(document))

    assert [name for name, _ in report.failed_files] == ["g.1.txt0"]
    assert report.updated_files == [str(good)]


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[1, 2, 3]",
        '{"g.1.txt0": ["fov"]}',
        '{"g.1.txt0": {"fov": 90}}',
        '{"g.1.txt0": {" fov": "95"}}',
        '{"g.1.txt0": {"": "95"}}',
        '{"g.1.txt0": {"fov = 1": "95"}}',
        '{"g.1.txt0": {"fo\\nv": "95"}}',
        '{"g.1.txt0": {"fov": "95\\nhdr = 1"}}',
        '{"g.1.txt0": {"fov": "95\\r"}}',
    ],
)
def test_malformed_document_aborts_import(tmp_path: Path, content: str) -> None:
    target = _write(tmp_path / "g.1.txt0", "fov = 80\n")
    document = _write(tmp_path / "doc.json", content)

    with pytest.raises(MalformedDocumentError):
        core_logic.import_settings([_profile_file(target)], str(document))
    assert target.read_text(encoding="utf-8") == "fov = 80\n"


def test_merge_ignores_empty_key() -> None:
    lines, changed = core_logic.merge_settings_into_lines(["a = 1"], {"": "x"})
    assert lines == ["a = 1"]
    assert changed == 0


# --- Backup ---

def test_backup_copies_next_to_original(tmp_path: Path) -> None:
    source = _write(tmp_path / "111" / "g.1.txt0", "fov = 80\n")
    report = core_logic.backup_config_files([_profile_file(source)])

    assert report.success_count == 1
    assert report.errors == []
    backup = Path(report.backup_paths[0])
    assert backup.parent == source.parent
    assert re.fullmatch(r"g\.1\.txt0\.bak_\d{8}_\d{6}", backup.name)
    assert backup.read_bytes() == source.read_bytes()


def test_backup_collects_failures_and_keeps_originals(tmp_path: Path) -> None:
    good = _write(tmp_path / "111" / "g.1.txt0", "fov = 80\n")
    unreadable = tmp_path / "222" / "g.2.txt0"
    before = good.read_bytes()

    report = core_logic.backup_config_files([_profile_file(unreadable, "222"), _profile_file(good)])

    assert report.success_count == 1
    assert len(report.errors) == 1
    assert report.errors[0][0] == "g.2.txt0"
    assert good.read_bytes() == before
    assert not unreadable.exists()


def test_backup_never_overwrites_existing_backup(tmp_path: Path) -> None:
    source = _write(tmp_path / "g.1.txt0", "fov = 80\n")
    existing = _write(tmp_path / "g.1.txt0.bak_20260101_120000", "older backup")

    report = core_logic.backup_config_files([_profile_file(source)], timestamp="20260101_120000")

    assert existing.read_text(encoding="utf-8") == "older backup"
    assert report.backup_paths == [str(tmp_path / "g.1.txt0.bak_20260101_120000_1")]


@pytest.mark.skipif(
    sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
    reason="needs POSIX permissions and a non-root user",
)
def test_backup_reports_unreadable_file_and_leaves_it_intact(tmp_path: Path) -> None:
    good = _write(tmp_path / "111" / "g.1.txt0", "fov = 80\n")
    locked = _write(tmp_path / "222" / "g.2.txt0", "fov = 70\n")
    good_before = good.read_bytes()
    locked_before = locked.read_bytes()
    locked.chmod(0)
    try:
        report = core_logic.backup_config_files([_profile_file(good), _profile_file(locked, "222")])
    finally:
        locked.chmod(0o644)

    assert report.success_count == 1
    assert [name for name, _ in report.errors] == ["g.2.txt0"]
    assert good.read_bytes() == good_before
    assert locked.read_bytes() == locked_before
