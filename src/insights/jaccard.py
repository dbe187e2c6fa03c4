"""Pairwise collaborator agreement via Jaccard similarity.

Each collaborator is represented by the set of plot points they tagged at
least once. Agreement between two collaborators is the size of the overlap
of those sets divided by the size of their union. Self-agreement is always
``1``, even for a collaborator who has tagged nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from insights.formatting import capped_percentage
from insights.models import (
    Collaborator,
    PlotPoint,
    build_roster,
    touched_plot_points,
    validate_plot_point_batch,
)

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class AgreementPair:
    """Two collaborators and their Jaccard agreement score."""

    pair: Tuple[str, str]
    score: float


@dataclass(frozen=True)
class JaccardReport:
    """Collaborator agreement matrix and its summary.

    Parameters
    ----------
    collaborator_emails:
        Sorted e-mails labelling both matrix axes.
    matrix:
        Read-only symmetric array of Jaccard scores in ``[0, 1]`` with a
        diagonal of ones.
    average_agreement:
        Mean of the strict upper triangle as a percentage rounded to one
        decimal, ``0`` with fewer than two collaborators.
    highest_agreement_pair:
        Pair with the highest score, the first one in row-major order on
        ties; ``None`` with fewer than two collaborators.
    """

    collaborator_emails: Tuple[str, ...]
    matrix: np.ndarray
    average_agreement: float
    highest_agreement_pair: Optional[AgreementPair]

    def to_lists(self) -> List[List[float]]:
        """Return the matrix as nested Python lists."""

        return self.matrix.tolist()


def jaccard_similarity(first: set, second: set) -> float:
    """Return ``|first & second| / |first | second|`` or ``0`` for empty sets."""

    union = len(first | second)
    if not union:
        return 0.0
    return len(first & second) / union


def compute_jaccard_agreement(
    plot_points: Sequence[PlotPoint],
    collaborators: Sequence[Collaborator],
) -> JaccardReport:
    """Return pairwise Jaccard agreement between roster collaborators.

    Parameters
    ----------
    plot_points:
        Plot points with their assignments.
    collaborators:
        Collaborator roster; sorted by e-mail to fix matrix indexing.

    Returns
    -------
    JaccardReport
        Symmetric matrix plus average and highest-pair summary.
    """

    validate_plot_point_batch(plot_points)
    roster = build_roster(collaborators)
    _, touched = touched_plot_points(plot_points, roster)
    emails = roster.emails
    size = len(emails)

    matrix = np.eye(size, dtype=float)
    total = 0.0
    comparisons = 0
    highest: Optional[AgreementPair] = None
    for i in range(size):
        for j in range(i + 1, size):
            score = jaccard_similarity(touched[emails[i]], touched[emails[j]])
            matrix[i, j] = score
            matrix[j, i] = score
            total += score
            comparisons += 1
            if highest is None or score > highest.score:
                highest = AgreementPair(pair=(emails[i], emails[j]), score=score)

    matrix.setflags(write=False)
    average = capped_percentage(total, comparisons)
    LOGGER.debug(
        "Jaccard agreement over %d collaborators: average %.1f%%", size, average
    )
    return JaccardReport(
        collaborator_emails=emails,
        matrix=matrix,
        average_agreement=average,
        highest_agreement_pair=highest,
    )


__all__ = [
    "AgreementPair",
    "JaccardReport",
    "compute_jaccard_agreement",
    "jaccard_similarity",
]
