from pathlib import Path

import pytest

from context_bundle.filters import (
    LOCK_FILE_PATTERNS,
    classify,
    drop_lock_files,
    drop_non_text,
    filter_paths,
    is_lock_file,
    is_textual,
)

LOCK_NAMES = [
    "bun.lockb",
    "flake.lock",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yml",
    "pnpm-lock.yaml",
    "composer.lock",
    "Gemfile.lock",
    "Cargo.lock",
    "Pipfile.lock",
    "poetry.lock",
    "pubspec.lock",
    "Podfile.lock",
    "build.gradle.lockfile",
    "mix.lock",
]


def test_every_pattern_has_a_sample_name():
    assert len(LOCK_FILE_PATTERNS) == len(LOCK_NAMES)


@pytest.mark.parametrize("name", LOCK_NAMES)
def test_lock_files_are_dropped_regardless_of_case(name):
    assert is_lock_file(name)
    assert is_lock_file(name.upper())
    assert is_lock_file(name.lower())
    assert is_lock_file(f"nested/dir/{name.swapcase()}")


@pytest.mark.parametrize(
    "name",
    ["lock.py", "package.json", "Cargo.toml", "src/locked.txt", "lockfile.md", "yarn.lock.d/notes.txt"],
)
def test_ordinary_files_are_not_lock_files(name):
    assert not is_lock_file(name)


def test_drop_lock_files_keeps_order():
    paths = ["z.txt", "b/yarn.lock", "a.txt", "Cargo.LOCK", "m/n.py"]

    assert drop_lock_files(paths) == ["z.txt", "a.txt", "m/n.py"]


@pytest.mark.parametrize(
    "media_type",
    [
        "text/plain",
        "text/x-python",
        "TEXT/HTML",
        "application/json",
        "application/json; charset=utf-8",
        "application/xml",
        "application/javascript",
        "application/typescript;charset=UTF-8",
    ],
)
def test_textual_media_types(media_type):
    assert is_textual(media_type)


@pytest.mark.parametrize(
    "media_type",
    [None, "", "image/png", "application/octet-stream", "application/pdf", "application/jsonx"],
)
def test_non_textual_media_types(media_type):
    assert not is_textual(media_type)


def test_classify_by_name(tmp_path):
    assert classify(tmp_path / "data.json") == "application/json"
    assert classify(tmp_path / "logo.png") == "image/png"
    assert classify(tmp_path / "index.ts") == "application/typescript"
    assert classify(tmp_path / "run.sh") == "text/x-sh"
    assert classify(tmp_path / "config.yaml") == "text/yaml"
    assert classify(tmp_path / "notes.txt.gz") == "application/x-gzip"


def test_classify_probes_files_without_a_known_extension(tmp_path):
    dockerfile = tmp_path / "Dockerfile"
    dockerfile.write_text("FROM python:3.12\n", encoding="utf-8")
    blob = tmp_path / "blob"
    blob.write_bytes(b"\x89ELF\x00\x01\x02")
    latin = tmp_path / "legacy"
    latin.write_bytes("caf\xe9 cr\xe8me".encode("latin-1"))

    assert classify(dockerfile) == "text/plain"
    assert classify(blob) == "application/octet-stream"
    assert classify(latin) is None
    assert classify(tmp_path / "missing") is None


def test_classify_tolerates_character_split_at_probe_boundary(tmp_path):
    path = tmp_path / "LICENSE"
    path.write_bytes(b"a" * 8191 + "é".encode("utf-8") + b"tail")

    assert classify(path) == "text/plain"


def test_drop_non_text_uses_classifier():
    types = {"a.json": "application/json; charset=utf-8", "b.png": "image/png", "c": None}

    kept = drop_non_text(Path("/r"), ["a.json", "b.png", "c"], lambda p: types[p.name])

    assert kept == ["a.json"]


def test_filter_paths_applies_content_stage_only_when_asked(tmp_path):
    (tmp_path / "a.txt").write_text("hello", encoding="utf-8")
    (tmp_path / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00")
    paths = ["a.txt", "logo.png", "yarn.lock"]

    assert filter_paths(tmp_path, paths) == ["a.txt", "logo.png"]
    assert filter_paths(tmp_path, paths, text_only=True) == ["a.txt"]
