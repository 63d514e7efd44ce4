"""
Command-line interface for Git Version Resolver.

Prints the version of the repository at PATH on stdout so build scripts can
capture it, e.g. VERSION=$(git-version).
"""

import sys
import argparse
from dotenv import find_dotenv, load_dotenv
from loguru import logger
from rich.console import Console

from ._version import __version__
from .config import get_config_value_str, load_options
from .logging_config import setup_logging
from .repository import RepositoryAccessError
from .resolver import determine_version

# Logs share stderr with any other diagnostics; stdout is reserved for the version
console = Console(stderr=True)


def parse_arguments(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog='git-version',
        description='Derive a build version from the tags and branch of a git repository'
    )
    
    parser.add_argument('path', nargs='?', default='.', help='Root of the git working copy (default: current directory)')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    
    # Version options
    parser.add_argument('--version-prefix', help='Prefix identifying version tags, removed from the version (default: v)')
    parser.add_argument('--fallback-version', help='Version used when no tag or branch is found (default: unknown)')
    parser.add_argument('--branch-name-env', help='Environment variable holding the branch name for a detached HEAD (default: BRANCH_NAME)')
    parser.add_argument('--no-branch-name-env', dest='branch_name_env_fallback', action='store_false', default=None,
                        help='Do not read the branch name from the environment for a detached HEAD')
    parser.add_argument('--branch-postfix', help='Suffix appended to versions derived from a branch name (default: -SNAPSHOT)')
    
    # Output
    parser.add_argument('--output', help='Also write the version to this file')
    
    # Logging
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL', 'debug', 'info', 'warning', 'error', 'critical'], help='Logging level (default: WARNING)')
    
    return parser.parse_args(argv)


def write_version_file(path: str, version: str) -> None:
    """Write the version followed by a newline to path."""
    with open(path, 'w', encoding='utf-8') as f:
        f.write(f'{version}\n')
    logger.debug(f"Wrote version to {path}")


def main(argv=None) -> None:
    """Main entry point for the application."""
    # .env is looked up from the directory the command runs in
    load_dotenv(find_dotenv(usecwd=True))
    logger.enable('git_version_resolver')
    
    args = parse_arguments(argv)
    
    log_level = get_config_value_str(args, 'log_level', 'LOG_LEVEL', 'WARNING').upper()
    valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    if log_level not in valid_log_levels:
        setup_logging(console=console)
        logger.error(f"LOG_LEVEL must be one of {valid_log_levels} (got: {log_level})")
        sys.exit(1)
    setup_logging(log_level, console=console)
    
    options = load_options(args)
    if options is None:
        sys.exit(1)
    
    try:
        version = determine_version(args.path, options)
    except RepositoryAccessError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)
    
    if args.output:
        try:
            write_version_file(args.output, version)
        except OSError as e:
            logger.error(f"Failed to write version file {args.output}: {e}")
            sys.exit(1)
    
    print(version)


if __name__ == '__main__':
    main()
