"""Shared numeric formatting helpers for insight reports.

This module centralises rounding for percentages and averages so that every
report value uses the same half-away-from-zero convention, plus small
helpers that wrap matrix results in labelled pandas DataFrames for export.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Sequence

import numpy as np
import pandas as pd

if TYPE_CHECKING:
    from insights.agreement_matrix import AgreementMatrixResult
    from insights.assignment_matrix import AssignmentMatrixResult
    from insights.jaccard import JaccardReport


def round1(value: float) -> float:
    """Return ``value`` rounded half away from zero to one decimal place.

    Python's built-in :func:`round` rounds ties to even, which would turn
    ``12.25`` into ``12.2``; report values instead follow ``12.3``.

    Parameters
    ----------
    value:
        Floating-point value to round.

    Returns
    -------
    float
        ``value`` rounded to one decimal place.
    """

    scaled = abs(value) * 10
    rounded = math.floor(scaled + 0.5) / 10
    return math.copysign(rounded, value) if rounded else 0.0


def capped_percentage(numerator: float, denominator: float) -> float:
    """Return ``numerator / denominator`` as a rounded percentage capped at 100.

    A zero denominator yields ``0.0`` rather than a division error.
    """

    if not denominator:
        return 0.0
    return min(100.0, round1(numerator / denominator * 100))


def assignment_matrix_frame(result: "AssignmentMatrixResult") -> pd.DataFrame:
    """Return the assignment matrix labelled by plot point and category ids."""

    return pd.DataFrame(
        result.matrix.copy(),
        index=pd.Index(list(result.plot_point_ids), name="plot_point_id"),
        columns=list(result.category_ids),
    )


def agreement_matrix_frame(result: "AgreementMatrixResult") -> pd.DataFrame:
    """Return the plot point similarity matrix labelled on both axes."""

    ids = list(result.plot_point_ids)
    return pd.DataFrame(
        result.matrix.copy(),
        index=pd.Index(ids, name="plot_point_id"),
        columns=ids,
    )


def collaborator_agreement_frame(
    collaborator_emails: Sequence[str], matrix: Sequence[Sequence[float]]
) -> pd.DataFrame:
    """Return a collaborator by collaborator matrix labelled by e-mail."""

    emails = list(collaborator_emails)
    return pd.DataFrame(
        np.array(matrix, dtype=float),
        index=pd.Index(emails, name="collaborator_email"),
        columns=emails,
    )


def jaccard_matrix_frame(report: "JaccardReport") -> pd.DataFrame:
    """Return the Jaccard agreement matrix labelled by e-mail."""

    return collaborator_agreement_frame(report.collaborator_emails, report.matrix)


__all__ = [
    "agreement_matrix_frame",
    "assignment_matrix_frame",
    "capped_percentage",
    "collaborator_agreement_frame",
    "jaccard_matrix_frame",
    "round1",
]
