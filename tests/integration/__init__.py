"""Integration tests.

End-to-end flows across the decorator engine: extract, compile, and
re-apply against whole models.  Run only the unit tests with
``pytest tests/unit/``.
"""
from __future__ import annotations
