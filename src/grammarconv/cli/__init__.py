"""CLI package.

The ``cli`` sub-package contains the Click application. It imports the
converters and loaders through their package-level APIs only.
"""
from __future__ import annotations
