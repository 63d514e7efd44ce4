"""Version file - managed by setuptools-scm.

This file serves as a placeholder for development and is overwritten during builds.

- Tagged commit (e.g., v1.1.0) → version is "1.1.0"
- Commits after tag → dev version like "1.1.1.dev3+g1234abc"
- No tags → fallback_version from pyproject.toml
"""

from typing import Tuple

# Placeholder values - overwritten by setuptools-scm during package build
__version__ = "0.0.0+unknown"
__version_tuple__: Tuple[int, int, int] = (0, 0, 0)
