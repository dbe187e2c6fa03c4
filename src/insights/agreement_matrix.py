"""Plot point similarity from assignment matrices.

Two plot points agree to the extent that collaborators tagged them with the
same categories. The raw similarity is the dot product of their assignment
rows; the optional cosine form divides by the row magnitudes so values fall
in ``[0, 1]``. A plot point without assignments has zero similarity to every
plot point, itself included.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from insights.assignment_matrix import AssignmentMatrixResult

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class AgreementMatrixOptions:
    """Configuration for :func:`build_agreement_matrix`.

    Parameters
    ----------
    normalize:
        When True, return cosine-normalised similarities instead of raw dot
        products.
    """

    normalize: bool = False


@dataclass(frozen=True)
class AgreementMatrixResult:
    """Square, symmetric plot point similarity matrix.

    Parameters
    ----------
    matrix:
        Read-only ``n x n`` float array where ``n`` is the number of plot
        points.
    plot_point_ids:
        Labels shared by rows and columns.
    """

    matrix: np.ndarray
    plot_point_ids: Tuple[str, ...]

    def to_lists(self) -> List[List[float]]:
        """Return the matrix as nested Python lists."""

        return self.matrix.tolist()


def _symmetric_gram(matrix: np.ndarray) -> np.ndarray:
    # Mirror the upper triangle so [i, j] and [j, i] are bit-identical.
    gram = matrix @ matrix.T
    upper = np.triu(gram)
    return upper + np.triu(gram, k=1).T


def cosine_normalize(raw: np.ndarray) -> np.ndarray:
    """Return the cosine-normalised form of a raw dot-product matrix.

    Parameters
    ----------
    raw:
        Square, symmetric matrix whose diagonal holds squared row magnitudes.

    Returns
    -------
    np.ndarray
        New array with ``raw[i, j] / sqrt(raw[i, i] * raw[j, j])`` where both
        diagonal terms are positive and ``0`` elsewhere. Non-empty diagonal
        entries are exactly ``1`` and all values are clipped into ``[0, 1]``.
    """

    diagonal = np.diag(raw).copy()
    present = diagonal > 0
    normalized = np.zeros_like(raw, dtype=float)
    if not present.any():
        return normalized

    magnitudes = np.sqrt(diagonal[present])
    block = raw[np.ix_(present, present)] / np.outer(magnitudes, magnitudes)
    normalized[np.ix_(present, present)] = np.clip(block, 0.0, 1.0)
    indices = np.flatnonzero(present)
    normalized[indices, indices] = 1.0
    return normalized


def build_agreement_matrix(
    assignment: AssignmentMatrixResult,
    options: Optional[AgreementMatrixOptions] = None,
) -> AgreementMatrixResult:
    """Return the plot point by plot point similarity matrix.

    Parameters
    ----------
    assignment:
        Result of :func:`insights.assignment_matrix.build_assignment_matrix`.
    options:
        Normalisation settings. Defaults to raw dot products.

    Returns
    -------
    AgreementMatrixResult
        Freshly allocated, read-only, exactly symmetric matrix.
    """

    options = options or AgreementMatrixOptions()
    rows = np.asarray(assignment.matrix, dtype=float)
    if rows.ndim != 2:
        raise ValueError(f"Assignment matrix must be 2-dimensional, got {rows.ndim}")

    raw = _symmetric_gram(rows)
    result = cosine_normalize(raw) if options.normalize else raw
    result.setflags(write=False)
    LOGGER.debug(
        "Built %s agreement matrix for %d plot points",
        "cosine" if options.normalize else "raw",
        result.shape[0],
    )
    return AgreementMatrixResult(
        matrix=result,
        plot_point_ids=tuple(assignment.plot_point_ids),
    )


__all__ = [
    "AgreementMatrixOptions",
    "AgreementMatrixResult",
    "build_agreement_matrix",
    "cosine_normalize",
]
