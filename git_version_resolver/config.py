"""
Configuration management for Git Version Resolver.

Handles environment variable loading, validation, and provides the
immutable options object that controls version resolution.
"""

import os
from dataclasses import dataclass
from typing import Optional
from loguru import logger


def get_config_value(cli_args, field_name: str, env_key: str, default, value_type: type = str):
    """
    Get configuration value with proper precedence: CLI args > env vars > defaults.
    
    Args:
        cli_args: CLI arguments object or None
        field_name: Name of the CLI argument field
        env_key: Environment variable key
        default: Default value if neither CLI nor env var is set
        value_type: Type to convert the value to (str, bool)
        
    Returns:
        The configuration value converted to the specified type
    """
    cli_value = getattr(cli_args, field_name, None) if cli_args else None
    if cli_value is not None:
        return cli_value
    
    env_value = os.environ.get(env_key, '')
    
    # Handle boolean conversion specially
    if value_type == bool:
        if env_value.strip().lower() in ('true', '1', 'yes'):
            return True
        elif env_value.strip().lower() in ('false', '0', 'no'):
            return False
        return default
    
    if not env_value:
        return default
    
    try:
        return value_type(env_value)
    except (ValueError, TypeError):
        return default


def get_config_value_str(cli_args, field_name: str, env_key: str, default: str = '') -> str:
    """Get string configuration value."""
    return get_config_value(cli_args, field_name, env_key, default, str)


def get_config_value_bool(cli_args, field_name: str, env_key: str, default: bool = False) -> bool:
    """Get boolean configuration value."""
    return get_config_value(cli_args, field_name, env_key, default, bool)


@dataclass(frozen=True)
class VersionOptions:
    """Settings that control how a version is derived from git metadata."""
    
    # Tags must start with this to count as version tags
    version_prefix: str = 'v'
    
    # Detached HEAD: consult an environment variable before searching branches
    fallback_to_branch_name_env: bool = True
    fallback_branch_name_env_name: str = 'BRANCH_NAME'
    
    # Appended to sanitized branch names
    version_from_branch_name_postfix: str = '-SNAPSHOT'
    
    # Used when neither a tag nor a branch can be found
    fallback_version: str = 'unknown'


def _validate_options(fallback_to_branch_name_env: bool, fallback_branch_name_env_name: str,
                      fallback_version: str, validation_errors: list) -> None:
    """
    Validate version options.
    
    Args:
        fallback_to_branch_name_env: Whether the branch name env var is consulted
        fallback_branch_name_env_name: Name of that env var
        fallback_version: Version used when nothing else matches
        validation_errors: List to append validation errors
    """
    if fallback_to_branch_name_env and not fallback_branch_name_env_name.strip():
        validation_errors.append('GIT_VERSION_BRANCH_NAME_ENV must not be empty '
                                 '(use --no-branch-name-env to disable the environment fallback)')
    
    if not fallback_version:
        validation_errors.append('GIT_VERSION_FALLBACK_VERSION must not be empty')


def load_options(cli_args=None) -> Optional[VersionOptions]:
    """
    Load and validate version options from CLI arguments and environment variables.
    CLI arguments take precedence over environment variables.
    
    Args:
        cli_args: Parsed CLI arguments or None
        
    Returns:
        VersionOptions: Validated options, or None if validation failed
    """
    defaults = VersionOptions()
    
    version_prefix = get_config_value_str(cli_args, 'version_prefix', 'GIT_VERSION_PREFIX', defaults.version_prefix)
    fallback_version = get_config_value_str(cli_args, 'fallback_version', 'GIT_VERSION_FALLBACK_VERSION', defaults.fallback_version)
    fallback_branch_name_env_name = get_config_value_str(cli_args, 'branch_name_env', 'GIT_VERSION_BRANCH_NAME_ENV',
                                                         defaults.fallback_branch_name_env_name)
    version_from_branch_name_postfix = get_config_value_str(cli_args, 'branch_postfix', 'GIT_VERSION_BRANCH_POSTFIX',
                                                            defaults.version_from_branch_name_postfix)
    
    # --no-branch-name-env is a store_false flag, None when not given
    fallback_to_branch_name_env = get_config_value_bool(cli_args, 'branch_name_env_fallback',
                                                        'GIT_VERSION_FALLBACK_TO_BRANCH_NAME_ENV',
                                                        defaults.fallback_to_branch_name_env)
    
    validation_errors = []
    _validate_options(fallback_to_branch_name_env, fallback_branch_name_env_name, fallback_version, validation_errors)
    
    if validation_errors:
        logger.error('❌ Configuration Error:')
        for i, error_msg in enumerate(validation_errors, 1):
            logger.error(f'   {i}. {error_msg}')
        return None
    
    options = VersionOptions(
        version_prefix=version_prefix,
        fallback_to_branch_name_env=fallback_to_branch_name_env,
        fallback_branch_name_env_name=fallback_branch_name_env_name,
        version_from_branch_name_postfix=version_from_branch_name_postfix,
        fallback_version=fallback_version
    )
    
    logger.debug(f'GIT_VERSION_PREFIX = {options.version_prefix}')
    logger.debug(f'GIT_VERSION_FALLBACK_TO_BRANCH_NAME_ENV = {options.fallback_to_branch_name_env}')
    logger.debug(f'GIT_VERSION_BRANCH_NAME_ENV = {options.fallback_branch_name_env_name}')
    logger.debug(f'GIT_VERSION_BRANCH_POSTFIX = {options.version_from_branch_name_postfix}')
    logger.debug(f'GIT_VERSION_FALLBACK_VERSION = {options.fallback_version}')
    
    return options
