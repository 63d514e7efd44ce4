"""
Entry point for python -m git_version_resolver

Allows running the package as a module:
    python -m git_version_resolver
"""

from .cli import main

if __name__ == '__main__':
    main()
