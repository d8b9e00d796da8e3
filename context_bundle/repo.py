from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Callable, Optional

from .errors import EnumerationError, RootNotFoundError

logger = logging.getLogger(__name__)

GIT = "git"
METADATA_DIR = ".git"
STRATEGIES = ("git", "walk")

RootProbe = Callable[[Path], Optional[Path]]


def _run_git(args: list[str], cwd: Path) -> subprocess.CompletedProcess:
    command = [GIT, *args]
    try:
        return subprocess.run(command, cwd=str(cwd), capture_output=True, encoding="utf-8",
                              errors="surrogateescape")
    except FileNotFoundError as exc:
        raise EnumerationError(f"Could not run {' '.join(command)!r} in {cwd}: {exc}") from exc


def git_toplevel(directory: Path) -> Optional[Path]:
    """Ask git for the work tree containing directory, or None when there is none."""
    if not directory.is_dir():
        return None
    result = _run_git(["rev-parse", "--show-toplevel"], directory)
    if result.returncode != 0:
        logger.debug("No work tree at %s: %s", directory, result.stderr.strip())
        return None
    top = result.stdout.strip()
    return Path(top).resolve() if top else None


def marker_toplevel(directory: Path) -> Optional[Path]:
    # .git is a file in worktrees and submodules
    if (directory / METADATA_DIR).exists():
        return directory
    return None


def locate_root(start: Path, probe: RootProbe = git_toplevel) -> Path:
    """
    Walk up from start until probe reports a repository root.

    Raises RootNotFoundError once the filesystem root has been tried without success.
    """
    current = Path(start).resolve()
    logger.info("Searching for repository root. Starting at: %s", current)
    while True:
        logger.debug("Probing %s", current)
        root = probe(current)
        if root is not None:
            logger.info("Found repository root: %s", root)
            return root
        parent = current.parent
        if parent == current:
            raise RootNotFoundError(
                f"Could not find a repository above {start}. Last attempt was {current}."
            )
        current = parent


def _relative_subdir(root: Path, subdir: Path) -> str:
    rel = os.path.relpath(Path(subdir).resolve(), root)
    return Path(rel).as_posix() if rel != os.curdir else "."


def git_ls_files(root: Path, subdir: Path) -> list[str]:
    """Tracked plus untracked-but-not-ignored files under subdir, relative to root."""
    rel = _relative_subdir(root, subdir)
    args = ["ls-files", "-z", "--cached", "--others", "--exclude-standard", "--", rel]
    logger.info("Running: git %s (from %s)", " ".join(args), root)
    result = _run_git(args, root)
    if result.returncode != 0:
        raise EnumerationError(
            f"'git {' '.join(args)}' failed in {root}: {result.stderr.strip()}"
        )
    files = set()
    for name in result.stdout.split("\0"):
        if not name:
            continue
        # nested repositories and submodules are listed as directories
        if name.endswith("/") or (Path(root) / name).is_dir():
            logger.info("Skipping non-file entry: %s", name)
            continue
        files.add(name)
    return sorted(files)


def walk_files(root: Path, subdir: Path) -> list[str]:
    """Every file below subdir, relative to root. Ignore rules are not consulted."""
    root = Path(root).resolve()
    files = set()
    for dirpath, dirs, names in os.walk(Path(subdir).resolve()):
        dirs[:] = [d for d in dirs if d != METADATA_DIR]
        for name in names:
            path = Path(dirpath) / name
            if path.is_file():
                files.add(path.relative_to(root).as_posix())
    return sorted(files)


def list_files(root: Path, subdir: Path, strategy: str = "git") -> list[str]:
    if strategy == "git":
        return git_ls_files(root, subdir)
    if strategy == "walk":
        return walk_files(root, subdir)
    raise ValueError(f"Unknown enumeration strategy: {strategy!r}")
