import shutil
import subprocess
from pathlib import Path

import pytest


def _git(repo: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=str(repo), check=True, capture_output=True)


@pytest.fixture
def git_repo(tmp_path):
    """An empty git work tree at tmp_path/r. Skips when git is not installed."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    root = (tmp_path / "r").resolve()
    root.mkdir()
    _git(root, "init", "-q")
    return root


@pytest.fixture
def track():
    def _track(repo: Path, *names: str) -> None:
        _git(repo, "add", "--", *names)

    return _track


@pytest.fixture
def marker_repo(tmp_path):
    """A directory that only looks like a repository: it has a .git folder."""
    root = (tmp_path / "r").resolve()
    (root / ".git").mkdir(parents=True)
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n", encoding="utf-8")
    return root


def write(path: Path, text: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path
