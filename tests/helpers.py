"""Helpers for building real git repositories in tests."""

import os
import subprocess
from pathlib import Path

GIT_IDENTITY = {
    "GIT_AUTHOR_NAME": "test", "GIT_AUTHOR_EMAIL": "t@t",
    "GIT_COMMITTER_NAME": "test", "GIT_COMMITTER_EMAIL": "t@t",
}


def git(repo: Path, *args: str) -> str:
    """Run git directly (bypassing gitconverge) and return stripped stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=repo, capture_output=True, text=True, check=True,
        env={**os.environ, **GIT_IDENTITY},
    )
    return result.stdout.strip()


def commit_file(repo: Path, name: str, content: str) -> str:
    """Write a file, commit it, and return the new HEAD hash."""
    (repo / name).write_text(content)
    git(repo, "add", name)
    git(repo, "commit", "-m", f"update {name}")
    return git(repo, "rev-parse", "HEAD")
