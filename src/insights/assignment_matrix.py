"""Plot point by category assignment matrices.

Rows follow the input order of plot points and columns follow either an
explicit category order or the order in which categories first appear in
the assignments. Each cell holds the weighted number of times the row's plot
point was tagged with the column's category.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from insights.models import (
    CollaboratorCategory,
    InsightsValidationError,
    PlotPoint,
    normalize_email,
    validate_plot_point_batch,
    validate_weight,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_COLLABORATOR_WEIGHT = 1.0

CategoryRef = Union[str, CollaboratorCategory]


@dataclass(frozen=True)
class AssignmentMatrixOptions:
    """Configuration for :func:`build_assignment_matrix`.

    Parameters
    ----------
    category_order:
        Optional explicit column order, given as category ids or
        :class:`~insights.models.CollaboratorCategory` records. Categories
        that no plot point uses remain as all-zero columns.
    collaborator_weights:
        Optional mapping from collaborator e-mail to a non-negative weight.
        Keys are case-normalised; unmapped collaborators weigh ``1.0``.
    normalize_within_plot_point:
        When True, each non-empty row is divided by its sum so that the row
        totals exactly one.

    Raises
    ------
    InsightsValidationError
        If a weight is negative, non-finite or non-numeric, if two weight
        keys normalise to the same e-mail with different weights, or if the
        category order is a bare string, holds anything other than ids or
        category records, or repeats an id.
    """

    category_order: Optional[Sequence[CategoryRef]] = None
    collaborator_weights: Mapping[str, float] = field(default_factory=dict)
    normalize_within_plot_point: bool = False

    def __post_init__(self) -> None:
        if self.category_order is not None:
            if isinstance(self.category_order, str):
                raise InsightsValidationError(
                    "Category order must be a sequence of ids, not a single "
                    f"string: {self.category_order!r}"
                )
            order = tuple(_category_id(ref) for ref in self.category_order)
            if len(set(order)) != len(order):
                raise InsightsValidationError(
                    f"Category order contains duplicate ids: {list(order)}"
                )
            object.__setattr__(self, "category_order", order)

        weights: Dict[str, float] = {}
        for raw_email, raw_weight in (self.collaborator_weights or {}).items():
            email = normalize_email(raw_email)
            weight = validate_weight(raw_weight, label=f"collaborator {email!r}")
            if email in weights and weights[email] != weight:
                raise InsightsValidationError(
                    f"Conflicting weights for collaborator {email!r}: "
                    f"{weights[email]} and {weight}"
                )
            weights[email] = weight
        object.__setattr__(self, "collaborator_weights", weights)

    def weight_for(self, email: str) -> float:
        """Return the configured weight for ``email`` (default ``1.0``)."""

        return self.collaborator_weights.get(
            email.strip().lower(), DEFAULT_COLLABORATOR_WEIGHT
        )


@dataclass(frozen=True)
class AssignmentMatrixResult:
    """Weighted assignment matrix with its row and column labels.

    Parameters
    ----------
    matrix:
        Read-only ``len(plot_point_ids) x len(category_ids)`` float array.
    plot_point_ids:
        Row labels in input order.
    category_ids:
        Column labels.
    """

    matrix: np.ndarray
    plot_point_ids: Tuple[str, ...]
    category_ids: Tuple[str, ...]

    def to_lists(self) -> List[List[float]]:
        """Return the matrix as nested Python lists."""

        return self.matrix.tolist()


def _category_id(ref: CategoryRef) -> str:
    if isinstance(ref, CollaboratorCategory):
        return ref.id
    if not isinstance(ref, str):
        raise InsightsValidationError(
            f"Category order entries must be ids or CollaboratorCategory "
            f"records: {ref!r}"
        )
    return ref


def resolve_category_ids(
    plot_points: Sequence[PlotPoint], category_order: Optional[Sequence[str]] = None
) -> Tuple[str, ...]:
    """Return the column order for an assignment matrix.

    Parameters
    ----------
    plot_points:
        Plot points in input order.
    category_order:
        Explicit column order. When given it is returned unchanged.

    Returns
    -------
    Tuple[str, ...]
        The explicit order, or category ids in order of first appearance
        scanning plot points and then their assignments.
    """

    if category_order is not None:
        return tuple(category_order)
    seen: Dict[str, None] = {}
    for point in plot_points:
        for assignment in point.assignments:
            seen.setdefault(assignment.category_id, None)
    return tuple(seen)


def build_assignment_matrix(
    plot_points: Sequence[PlotPoint],
    options: Optional[AssignmentMatrixOptions] = None,
) -> AssignmentMatrixResult:
    """Build the weighted plot point by category matrix.

    Parameters
    ----------
    plot_points:
        Plot points in the order rows should appear.
    options:
        Column order, collaborator weights and row normalisation settings.
        Defaults to :class:`AssignmentMatrixOptions` with no overrides.

    Returns
    -------
    AssignmentMatrixResult
        Freshly allocated, read-only matrix and labels. Cell ``[i, k]`` is
        the sum of ``assignment.weight * collaborator_weight`` over every
        assignment on plot point ``i`` with category ``k``.
    """

    options = options or AssignmentMatrixOptions()
    validate_plot_point_batch(plot_points)

    category_ids = resolve_category_ids(plot_points, options.category_order)
    column_index = {category_id: idx for idx, category_id in enumerate(category_ids)}

    matrix = np.zeros((len(plot_points), len(category_ids)), dtype=float)
    skipped = 0
    for row, point in enumerate(plot_points):
        for assignment in point.assignments:
            col = column_index.get(assignment.category_id)
            if col is None:
                skipped += 1
                continue
            matrix[row, col] += assignment.weight * options.weight_for(
                assignment.collaborator_email
            )

    if skipped:
        LOGGER.debug(
            "Skipped %d assignments whose category is not in the column order",
            skipped,
        )

    if options.normalize_within_plot_point and matrix.size:
        row_sums = matrix.sum(axis=1)
        positive = row_sums > 0
        matrix[positive] = matrix[positive] / row_sums[positive][:, np.newaxis]

    matrix.setflags(write=False)
    LOGGER.debug(
        "Built assignment matrix with %d plot points and %d categories",
        matrix.shape[0],
        matrix.shape[1],
    )
    return AssignmentMatrixResult(
        matrix=matrix,
        plot_point_ids=tuple(point.id for point in plot_points),
        category_ids=category_ids,
    )


__all__ = [
    "AssignmentMatrixOptions",
    "AssignmentMatrixResult",
    "DEFAULT_COLLABORATOR_WEIGHT",
    "build_assignment_matrix",
    "resolve_category_ids",
]
