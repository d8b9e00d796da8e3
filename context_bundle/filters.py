from __future__ import annotations

import codecs
import fnmatch
import logging
import mimetypes
from pathlib import Path, PurePosixPath
from typing import Callable, Iterable, Optional

logger = logging.getLogger(__name__)

# Matched case-insensitively against the base name only.
LOCK_FILE_PATTERNS = (
    "*.lockb",
    "*.lock",
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
)

TEXTUAL_APPLICATION_TYPES = {
    "application/json",
    "application/xml",
    "application/javascript",
    "application/typescript",
}

# Source extensions the stock mimetypes table omits or files under application/*.
EXTENSION_TYPES = {
    ".ts": "application/typescript",
    ".tsx": "application/typescript",
    ".mts": "application/typescript",
    ".cts": "application/typescript",
    ".js": "application/javascript",
    ".mjs": "application/javascript",
    ".cjs": "application/javascript",
    ".jsx": "application/javascript",
    ".json": "application/json",
    ".xml": "application/xml",
    ".md": "text/markdown",
    ".sh": "text/x-sh",
    ".bash": "text/x-sh",
    ".zsh": "text/x-sh",
    ".yaml": "text/yaml",
    ".yml": "text/yaml",
    ".toml": "text/x-toml",
    ".ini": "text/plain",
    ".cfg": "text/plain",
    ".sql": "text/x-sql",
    ".tex": "text/x-tex",
    ".rs": "text/x-rust",
    ".go": "text/x-go",
}

SNIFF_BYTES = 8192

Classifier = Callable[[Path], Optional[str]]


def _build_mime_table() -> mimetypes.MimeTypes:
    # A fresh MimeTypes only knows the built-in defaults, not /etc/mime.types.
    table = mimetypes.MimeTypes()
    for ext, media_type in EXTENSION_TYPES.items():
        table.add_type(media_type, ext)
    return table


_MIME_TABLE = _build_mime_table()


def is_lock_file(name: str) -> bool:
    base = PurePosixPath(name).name.lower()
    return any(fnmatch.fnmatchcase(base, pattern.lower()) for pattern in LOCK_FILE_PATTERNS)


def drop_lock_files(paths: Iterable[str]) -> list[str]:
    kept = []
    for rel in paths:
        if is_lock_file(rel):
            logger.info("Skipping lock file: %s", rel)
            continue
        kept.append(rel)
    return kept


def _sniff(path: Path) -> Optional[str]:
    try:
        with path.open("rb") as fh:
            head = fh.read(SNIFF_BYTES)
    except OSError:
        return None
    if b"\0" in head:
        return "application/octet-stream"
    try:
        # final=False tolerates a multi-byte character cut off at the boundary
        codecs.getincrementaldecoder("utf-8")().decode(head, final=False)
    except UnicodeDecodeError:
        return None
    return "text/plain"


def classify(path: Path) -> Optional[str]:
    """
    Report a media type for path: from its name first, then by probing its head.
    Returns None when neither gives an answer.
    """
    path = Path(path)
    media_type, encoding = _MIME_TABLE.guess_type(path.name, strict=False)
    if encoding is not None:
        # report.txt.gz is compressed, whatever is inside
        return f"application/x-{encoding}"
    if media_type is not None:
        return media_type
    return _sniff(path)


def is_textual(media_type: Optional[str]) -> bool:
    if not media_type:
        return False
    essence = media_type.split(";", 1)[0].strip().lower()
    return essence.startswith("text/") or essence in TEXTUAL_APPLICATION_TYPES


def drop_non_text(root: Path, paths: Iterable[str], classifier: Classifier = classify) -> list[str]:
    kept = []
    for rel in paths:
        media_type = classifier(Path(root) / rel)
        if not is_textual(media_type):
            logger.info("Skipping non-text file: %s (%s)", rel, media_type or "unknown type")
            continue
        kept.append(rel)
    return kept


def filter_paths(root: Path, paths: Iterable[str], text_only: bool = False,
                 classifier: Classifier = classify) -> list[str]:
    """Lock files always go; non-text content goes only when text_only is set."""
    paths = list(paths)
    logger.info("Number of files discovered (before filtering lock files): %d", len(paths))
    paths = drop_lock_files(paths)
    logger.info("Number of files discovered (after filtering lock files): %d", len(paths))
    if text_only:
        paths = drop_non_text(root, paths, classifier)
        logger.info("Number of files discovered (after filtering non-text files): %d", len(paths))
    return paths
