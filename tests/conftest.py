"""
Shared test configuration.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from sandbox import Git


@pytest.fixture
def sandbox_git(tmp_path: Path) -> Git:
    """A repository with a first commit on main and a bare `origin` remote."""
    remotes = tmp_path / "remotes"
    remotes.mkdir()
    git = Git(tmp_path / "repo", remote_root=remotes)
    git.init()
    return git
