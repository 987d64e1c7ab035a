"""Shared test fixtures for gitconverge."""

import pytest

from gitconverge.checkout import runner
from gitconverge.checkout.spec import CheckoutSpec

from tests.helpers import commit_file, git


@pytest.fixture
def upstream(tmp_path):
    """An upstream repository on branch main with one commit."""
    repo = tmp_path / "upstream"
    repo.mkdir()
    git(repo, "init", "-b", "main")
    commit_file(repo, "README.md", "v1\n")
    return repo


@pytest.fixture
def parent(tmp_path):
    """Parent directory the checkout is cloned into."""
    srv = tmp_path / "srv"
    srv.mkdir()
    return srv


@pytest.fixture
def make_spec(upstream, parent):
    def _make(**overrides) -> CheckoutSpec:
        fields = {
            "parent_directory": parent,
            "checkout_name": "app",
            "repository_url": str(upstream),
            "ref": "origin/main",
        }
        fields.update(overrides)
        return CheckoutSpec(**fields)

    return _make


@pytest.fixture
def git_calls(monkeypatch):
    """Record the argument list of every git command gitconverge runs."""
    calls: list[list[str]] = []
    real_run_git = runner.run_git

    def recording(args, cwd, user=None, timeout=None):
        calls.append(list(args))
        return real_run_git(args, cwd, user=user, timeout=timeout)

    monkeypatch.setattr(runner, "run_git", recording)
    return calls


@pytest.fixture
def fail_git(monkeypatch):
    """Make git commands starting with the given arguments fail."""

    def _fail(*prefix: str) -> None:
        real_run_git = runner.run_git

        def failing(args, cwd, user=None, timeout=None):
            if list(args[: len(prefix)]) == list(prefix):
                return runner.CommandResult(
                    command=["git", *args], returncode=1,
                    stdout="", stderr="error: simulated failure",
                )
            return real_run_git(args, cwd, user=user, timeout=timeout)

        monkeypatch.setattr(runner, "run_git", failing)

    return _fail
