"""
Read-only access to git repository metadata.

Wraps GitPython so the version resolver only sees commit ids, tag names and
branch names. Nothing in this module writes to the repository.
"""

from typing import List, Tuple
from git import Repo
from git.exc import BadName, BadObject, GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from loguru import logger


class RepositoryAccessError(Exception):
    """
    Exception raised when repository metadata cannot be read.

    Covers a path that is missing or is not a git repository, corrupt
    metadata, and a HEAD that does not resolve to a commit (a repository
    without any commits).
    """
    pass


class GitRepository:
    """Read-only handle to a repository opened with GitPython."""

    def __init__(self, repo: Repo):
        self.repo = repo

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def close(self) -> None:
        """Release file handles and git helper processes held by the repo."""
        self.repo.close()

    def resolve(self, revision: str = 'HEAD') -> str:
        """
        Resolve a revision to a full commit id.

        Args:
            revision: Any revision git understands (e.g. "HEAD", "main")

        Returns:
            str: 40 character hex commit id

        Raises:
            RepositoryAccessError: If the revision does not name a commit
        """
        try:
            return self.repo.commit(revision).hexsha
        except (ValueError, BadName, BadObject) as e:
            raise RepositoryAccessError(f"Cannot resolve {revision} in {self.repo.git_dir}: {e}") from e

    def tags(self) -> List[Tuple[str, str]]:
        """
        List tags with the commit each one points at.

        Annotated tags are peeled to their commit. Tags pointing at
        anything other than a commit are left out.

        Returns:
            list: (tag name, commit id) pairs in ref name order
        """
        tags = []
        for tag in self.repo.tags:
            try:
                tags.append((tag.name, tag.commit.hexsha))
            except ValueError as e:
                logger.debug(f"Skipping tag {tag.name}: {e}")
        return tags

    @property
    def is_detached(self) -> bool:
        return self.repo.head.is_detached

    def current_branch(self) -> str:
        """
        Get the checked-out branch name.

        Returns:
            str: Branch short name, or the raw HEAD commit id when detached
        """
        if self.is_detached:
            return self.resolve('HEAD')
        return self.repo.head.reference.name

    def local_branches(self) -> List[Tuple[str, str]]:
        """
        List local branches (refs/heads/*) with their tip commits.

        Returns:
            list: (short name, commit id) pairs in ref name order
        """
        branches = []
        for head in self.repo.heads:
            try:
                branches.append((head.name, head.commit.hexsha))
            except ValueError as e:
                logger.debug(f"Skipping branch {head.name}: {e}")
        return branches

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        """
        Check whether one commit is merged into another.

        Args:
            ancestor: Commit id that may be part of the history
            descendant: Commit id whose history is searched

        Returns:
            bool: True if ancestor is reachable from descendant
        """
        try:
            return self.repo.is_ancestor(ancestor, descendant)
        except GitCommandError as e:
            logger.debug(f"Ancestry check {ancestor[:7]}..{descendant[:7]} failed: {e}")
            return False


def open_repository(path) -> GitRepository:
    """
    Open the git repository whose working copy is at path.

    Parent directories are not searched, so path must be the repository
    root (or a bare metadata directory).

    Args:
        path: Filesystem path to the repository root

    Returns:
        GitRepository: Handle to close once done (usable as a context manager)

    Raises:
        RepositoryAccessError: If path is missing or not a readable repository
    """
    try:
        repo = Repo(path, search_parent_directories=False)
    except NoSuchPathError as e:
        raise RepositoryAccessError(f"Repository path does not exist: {path}") from e
    except InvalidGitRepositoryError as e:
        raise RepositoryAccessError(f"Not a git repository: {path}") from e
    except OSError as e:
        raise RepositoryAccessError(f"Cannot read repository metadata in {path}: {e}") from e

    logger.debug(f"Opened repository: {repo.git_dir}")
    return GitRepository(repo)
