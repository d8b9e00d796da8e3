from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from .errors import ReadError, WriteError

logger = logging.getLogger(__name__)

RECORD_TEMPLATE = "File: {path}\n\n{contents}\n\n"


def format_record(path: Path, contents: str) -> str:
    return RECORD_TEMPLATE.format(path=path, contents=contents)


def _read_text(path: Path) -> str:
    try:
        with path.open("r", encoding="utf-8", newline="") as fh:
            return fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ReadError(f"Could not read {path}: {exc}") from exc


def aggregate(root: Path, paths: Iterable[str]) -> str:
    """
    Concatenate the files at paths (relative to root) into one bundle.

    Every record is the absolute path header, a blank line, the full contents
    and two newlines. Any unreadable file aborts the whole bundle.
    """
    parts = []
    for rel in paths:
        resolved = Path(root) / rel
        logger.info("Adding to context: %s", resolved)
        parts.append(format_record(resolved, _read_text(resolved)))
    return "".join(parts)


def write_bundle(text: str, output: Path, dry_run: bool = False) -> None:
    output = Path(output)
    if dry_run:
        logger.info(
            "Dry run mode is enabled. The context file %s (%d characters) will NOT be created.",
            output.resolve(), len(text),
        )
        return
    try:
        # file names that are not valid UTF-8 keep their original bytes in the headers
        data = text.encode("utf-8", errors="surrogateescape")
    except UnicodeEncodeError as exc:
        raise WriteError(f"Could not encode bundle for {output}: {exc}") from exc
    try:
        output.write_bytes(data)
    except OSError as exc:
        raise WriteError(f"Could not write {output}: {exc}") from exc
    logger.info("Contents saved to %s (%d characters).", output.resolve(), len(text))
