"""
Version resolution from git metadata.

Rules, evaluated in order:
1. HEAD carries a tag starting with the version prefix: the tag name with
   the prefix removed is the version.
2. HEAD is on a branch: the sanitized branch name plus the branch postfix.
3. HEAD is detached: the branch name comes from an environment variable
   (Jenkins sets BRANCH_NAME), or failing that from the first local branch
   the commit is merged into.
4. Otherwise the fallback version.
"""

import os
import re
from typing import Callable, Optional
from loguru import logger

from .config import VersionOptions
from .repository import GitRepository, open_repository

EnvLookup = Callable[[str], Optional[str]]

_BRANCH_UNSAFE_CHARS = re.compile(r'[/-]')


def strip_first_prefix_occurrence(tag_name: str, prefix: str) -> str:
    """
    Remove the first occurrence of prefix from a tag name.

    The match is not anchored: "av1.0" with prefix "v" gives "a1.0".
    Tags reaching this point already start with the prefix, so in practice
    the leading prefix is the one removed.
    """
    return tag_name.replace(prefix, '', 1)


def format_branch_version(branch_name: str, options: VersionOptions) -> str:
    """Turn a branch name into a version, e.g. "feature/foo" -> "feature_foo-SNAPSHOT"."""
    version_safe_name = _BRANCH_UNSAFE_CHARS.sub('_', branch_name)
    return f"{version_safe_name}{options.version_from_branch_name_postfix}"


class VersionResolver:
    """
    Derives a version string from one repository.

    The repository handle is borrowed; the caller opens and closes it.
    """

    def __init__(self, repository: GitRepository, options: VersionOptions = None, getenv: EnvLookup = None):
        self.repository = repository
        self.options = options or VersionOptions()
        self.getenv = getenv or os.environ.get

    def determine_version(self) -> str:
        head = self.repository.resolve('HEAD')
        current_branch_name = self.branch_name(head)
        version_tag_on_head = self.version_tag_on_commit(head)

        if version_tag_on_head is not None:
            version = strip_first_prefix_occurrence(version_tag_on_head, self.options.version_prefix)
            logger.debug(f"Version {version} from tag {version_tag_on_head}")
            return version

        if current_branch_name is not None:
            version = format_branch_version(current_branch_name, self.options)
            logger.debug(f"Version {version} from branch {current_branch_name}")
            return version

        logger.debug(f"No version tag or branch for {head[:7]}, using fallback {self.options.fallback_version}")
        return self.options.fallback_version

    def version_tag_on_commit(self, commit: str) -> Optional[str]:
        """
        Find a version tag pointing at commit.

        Args:
            commit: Full commit id

        Returns:
            str: First matching tag name in enumeration order, or None
        """
        for tag_name, tag_commit in self.repository.tags():
            if tag_commit == commit and tag_name.startswith(self.options.version_prefix):
                return tag_name
        return None

    def branch_name(self, head: str) -> Optional[str]:
        """
        Get the branch HEAD is on, inferring it when HEAD is detached.

        A detached HEAD reports its commit id as the current branch, so
        equality with head is a detachment signal alongside the explicit
        predicate.
        """
        current_branch_name = self.repository.current_branch()
        is_detached = self.repository.is_detached or current_branch_name == head
        if not is_detached:
            return current_branch_name

        logger.debug(f"HEAD is detached at {head[:7]}")
        return self.branch_name_from_detached_head(head)

    def branch_name_from_detached_head(self, commit: str) -> Optional[str]:
        """
        Infer a branch name for a detached HEAD.

        Checks the configured environment variable first (CI servers such as
        Jenkins check out a detached commit and export the branch name).
        Without it, the first local branch containing the commit wins.

        Args:
            commit: Full commit id of HEAD

        Returns:
            str: Branch name, or None if no hint and no containing branch
        """
        if self.options.fallback_to_branch_name_env:
            env_name = self.options.fallback_branch_name_env_name
            branch_name_from_env = self.getenv(env_name)
            if branch_name_from_env is not None:
                logger.debug(f"Branch name {branch_name_from_env} from ${env_name}")
                return branch_name_from_env

        for branch_name, tip in self.repository.local_branches():
            if self.repository.is_ancestor(commit, tip):
                logger.debug(f"Commit {commit[:7]} is merged into branch {branch_name}")
                return branch_name

        return None


def determine_version(repository_path, options: VersionOptions = None, getenv: EnvLookup = None) -> str:
    """
    Determine the version of the code checked out at repository_path.
    
    Args:
        repository_path: Root of the working copy
        options: Resolution options (defaults to VersionOptions())
        getenv: Environment lookup (defaults to os.environ.get)
        
    Returns:
        str: Version string
        
    Raises:
        RepositoryAccessError: If the repository cannot be opened or has no commits
    """
    with open_repository(repository_path) as repository:
        return VersionResolver(repository, options, getenv).determine_version()
