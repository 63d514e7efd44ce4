"""
Logging configuration for Git Version Resolver.

Log records go to stderr so stdout carries nothing but the version.
"""

import sys
from loguru import logger
from rich.console import Console


def setup_logging(log_level: str = 'INFO', console: Console = None) -> None:
    """
    Set up logging configuration.
    
    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console: Rich Console writing to stderr (optional)
    """
    logger.remove()
    
    if console:
        logger.add(
            lambda msg: console.print(msg, end='', markup=False, highlight=False),
            level=log_level,
            format='{time:YYYY/MM/DD HH:mm:ss} | {level: <8} - {message}'
        )
    else:
        logger.add(
            sys.stderr,
            level=log_level,
            format='<green>{time:YYYY/MM/DD HH:mm:ss}</green> | <level>{level: <8}</level> - <level>{message}</level>',
            colorize=True
        )
