"""
Pytest configuration and shared fixtures for test suite.

Provides a builder for small throwaway git repositories, an in-memory
repository handle for unit tests, and environment isolation.
"""

import os
import pytest
from unittest.mock import MagicMock
from git import Actor, Repo

TEST_ACTOR = Actor("Test User", "test@example.com")

_ENV_VARS = [
    'BRANCH_NAME',
    'LOG_LEVEL',
    'GIT_VERSION_PREFIX',
    'GIT_VERSION_FALLBACK_TO_BRANCH_NAME_ENV',
    'GIT_VERSION_FALLBACK_VERSION',
    'GIT_VERSION_BRANCH_NAME_ENV',
    'GIT_VERSION_BRANCH_POSTFIX',
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep CI variables such as BRANCH_NAME from leaking into tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class RepoBuilder:
    """Helper for building repository states in a temp directory."""
    
    def __init__(self, path):
        self.path = str(path)
        self.repo = Repo.init(self.path)
        # Independent of the init.defaultBranch setting of the machine
        self.repo.git.symbolic_ref('HEAD', 'refs/heads/main')
        with self.repo.config_writer() as writer:
            writer.set_value('user', 'name', TEST_ACTOR.name)
            writer.set_value('user', 'email', TEST_ACTOR.email)
            writer.set_value('tag', 'gpgSign', 'false')
        self._counter = 0
    
    def commit(self, message: str = None):
        """Create a commit on whatever HEAD points at."""
        self._counter += 1
        message = message or f"Commit {self._counter}"
        file_path = os.path.join(self.path, 'file.txt')
        with open(file_path, 'a', encoding='utf-8') as f:
            f.write(f"{message}\n")
        self.repo.index.add([file_path])
        return self.repo.index.commit(message, author=TEST_ACTOR, committer=TEST_ACTOR)
    
    def checkout_branch(self, name: str):
        """Create a branch at HEAD and point HEAD at it."""
        head = self.repo.create_head(name)
        self.repo.head.reference = head
        return head
    
    def detach(self, commit=None):
        """Detach HEAD at commit (default: current HEAD commit)."""
        self.repo.head.reference = commit or self.repo.head.commit
    
    def tag(self, name: str, ref='HEAD', message: str = None):
        if message:
            return self.repo.create_tag(name, ref=ref, message=message)
        return self.repo.create_tag(name, ref=ref)
    
    def close(self):
        self.repo.close()


@pytest.fixture
def repo_builder(tmp_path):
    """Create an empty repository with HEAD on an unborn main branch."""
    builder = RepoBuilder(tmp_path / "repo")
    yield builder
    builder.close()


@pytest.fixture
def fake_repository():
    """Create an in-memory repository handle on branch main with one commit."""
    repository = MagicMock()
    repository.resolve.return_value = "a" * 40
    repository.current_branch.return_value = "main"
    repository.is_detached = False
    repository.tags.return_value = []
    repository.local_branches.return_value = []
    repository.is_ancestor.return_value = False
    return repository
