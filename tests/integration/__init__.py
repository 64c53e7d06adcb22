"""Integration tests.

Integration tests exercise the full stack on real files: grammar text
and catalog files are read from disk, converted, and written back.
They are kept in a separate directory so they can be excluded from the
fast unit-test run with ``pytest tests/unit/``.
"""
from __future__ import annotations
