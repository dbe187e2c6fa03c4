"""Coverage and agreement analytics for collaborator-tagged plot points.

Submodules
----------
models
    Frozen input records and boundary validation.
assignment_matrix
    Weighted plot point by category matrices.
agreement_matrix
    Raw and cosine-normalised plot point similarity.
coverage
    Completion and per-collaborator coverage statistics.
jaccard
    Pairwise collaborator agreement via Jaccard similarity.
aggregator
    Combined variant insight report.
matrix_provider
    One-call access to both matrices for consolidation runs.
formatting
    Rounding helpers and labelled DataFrame views.
commands
    ``variant_insights`` command-line entry point.
"""

from __future__ import annotations

__all__ = [
    "aggregator",
    "agreement_matrix",
    "assignment_matrix",
    "commands",
    "coverage",
    "formatting",
    "jaccard",
    "matrix_provider",
    "models",
]
