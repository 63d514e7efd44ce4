"""
Git Version Resolver

Derives a version string for build and release pipelines from the tags,
branch and HEAD of a local git repository.
"""

from ._version import __version__
from .config import VersionOptions
from .repository import RepositoryAccessError
from .resolver import VersionResolver, determine_version

__description__ = "Derive a build version from git tags and branches"

# Library use stays silent; the CLI re-enables these records
from loguru import logger
logger.disable("git_version_resolver")
