"""Utility helper package for shared script helpers.

Submodules
----------
cli
    Shared argparse configuration helpers for CLI scripts.
io
    JSON/JSONL loaders for plot point and collaborator exports and writers
    for reports and matrices.
schema
    Field-name constants for input and report payloads.
"""

from __future__ import annotations

__all__ = [
    "cli",
    "io",
    "schema",
]
