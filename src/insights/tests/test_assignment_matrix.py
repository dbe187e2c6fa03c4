"""
Tests for weighted plot point by category assignment matrices.
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from insights.assignment_matrix import (
    AssignmentMatrixOptions,
    build_assignment_matrix,
    resolve_category_ids,
)
from insights.models import (
    CategoryAssignment,
    CollaboratorCategory,
    InsightsValidationError,
    PlotPoint,
)


def _assign(
    point_id: str, category_id: str, email: str, weight: float = 1.0
) -> CategoryAssignment:
    """Return a CategoryAssignment with a generated category name."""

    return CategoryAssignment(
        plot_point_id=point_id,
        category_id=category_id,
        collaborator_email=email,
        category_name=f"name-{category_id}",
        weight=weight,
    )


def _base_plot_points() -> list[PlotPoint]:
    """Return two plot points tagged by alpha, beta and gamma."""

    return [
        PlotPoint(
            id="p1",
            order=1,
            category="Intro",
            assignments=(
                _assign("p1", "cat-a", "alpha@example.com"),
                _assign("p1", "cat-b", "beta@example.com"),
            ),
        ),
        PlotPoint(
            id="p2",
            order=2,
            category="Conflict",
            assignments=(
                _assign("p2", "cat-a", "alpha@example.com"),
                _assign("p2", "cat-c", "gamma@example.com"),
            ),
        ),
    ]


def test_weighted_matrix_with_explicit_category_order() -> None:
    """Collaborator weights scale that collaborator's cells."""

    options = AssignmentMatrixOptions(
        category_order=("cat-a", "cat-b", "cat-c"),
        collaborator_weights={"alpha@example.com": 2},
    )
    result = build_assignment_matrix(_base_plot_points(), options)

    assert result.category_ids == ("cat-a", "cat-b", "cat-c")
    assert result.plot_point_ids == ("p1", "p2")
    assert result.to_lists() == [[2.0, 1.0, 0.0], [2.0, 0.0, 1.0]]


def test_normalize_within_plot_point_splits_single_collaborator() -> None:
    """Two tags by one collaborator on one point share the row mass."""

    points = [
        PlotPoint(
            id="p1",
            order=1,
            assignments=(
                _assign("p1", "cat-a", "alpha@example.com"),
                _assign("p1", "cat-b", "alpha@example.com"),
            ),
        )
    ]
    result = build_assignment_matrix(
        points, AssignmentMatrixOptions(normalize_within_plot_point=True)
    )

    assert result.to_lists()[0] == [0.5, 0.5]


def test_normalization_makes_weighted_rows_sum_to_one() -> None:
    """Rows with mixed weights still total exactly one after normalisation."""

    options = AssignmentMatrixOptions(
        collaborator_weights={"alpha@example.com": 3},
        normalize_within_plot_point=True,
    )
    result = build_assignment_matrix(_base_plot_points(), options)

    for row in result.matrix:
        assert math.isclose(float(row.sum()), 1.0)
    assert result.matrix[0, 0] == pytest.approx(0.75)


def test_normalization_leaves_empty_rows_at_zero() -> None:
    """A plot point without assignments stays all zeros."""

    points = _base_plot_points() + [PlotPoint(id="p3", order=3)]
    result = build_assignment_matrix(
        points, AssignmentMatrixOptions(normalize_within_plot_point=True)
    )

    assert result.to_lists()[2] == [0.0, 0.0, 0.0]
    assert np.isfinite(result.matrix).all()


def test_first_appearance_order_is_not_alphabetical() -> None:
    """Derived column order follows the scan order of assignments."""

    points = [
        PlotPoint(
            id="p1",
            order=1,
            assignments=(
                _assign("p1", "zeta", "alpha@example.com"),
                _assign("p1", "alpha", "beta@example.com"),
            ),
        ),
        PlotPoint(
            id="p2",
            order=2,
            assignments=(
                _assign("p2", "mu", "alpha@example.com"),
                _assign("p2", "zeta", "beta@example.com"),
            ),
        ),
    ]

    assert resolve_category_ids(points) == ("zeta", "alpha", "mu")
    assert build_assignment_matrix(points).category_ids == ("zeta", "alpha", "mu")


def test_explicit_order_keeps_unused_categories_and_skips_unknown() -> None:
    """Unused explicit columns stay zero and unknown categories are ignored."""

    options = AssignmentMatrixOptions(category_order=("cat-unused", "cat-a"))
    result = build_assignment_matrix(_base_plot_points(), options)

    assert result.category_ids == ("cat-unused", "cat-a")
    assert result.to_lists() == [[0.0, 1.0], [0.0, 1.0]]


def test_category_order_accepts_collaborator_categories() -> None:
    """CollaboratorCategory records can define the column order."""

    categories = [
        CollaboratorCategory(id="cat-c", collaborator_email="gamma", name="Journey"),
        CollaboratorCategory(id="cat-a", collaborator_email="alpha", name="Opening"),
    ]
    result = build_assignment_matrix(
        _base_plot_points(), AssignmentMatrixOptions(category_order=categories)
    )

    assert result.category_ids == ("cat-c", "cat-a")


def test_weight_keys_are_case_normalised() -> None:
    """Weight lookups ignore e-mail case and surrounding whitespace."""

    options = AssignmentMatrixOptions(
        collaborator_weights={"  ALPHA@Example.com ": 4.0},
    )
    result = build_assignment_matrix(_base_plot_points(), options)

    assert result.matrix[0, 0] == 4.0
    assert options.weight_for("Alpha@Example.COM") == 4.0
    assert options.weight_for("nobody@example.com") == 1.0


def test_per_assignment_weight_multiplies_collaborator_weight() -> None:
    """Assignment weights combine multiplicatively with collaborator weights."""

    points = [
        PlotPoint(
            id="p1",
            order=1,
            assignments=(_assign("p1", "cat-a", "alpha@example.com", weight=0.5),),
        )
    ]
    options = AssignmentMatrixOptions(collaborator_weights={"alpha@example.com": 3})

    assert build_assignment_matrix(points, options).to_lists() == [[1.5]]


@pytest.mark.parametrize("bad_weight", [-1.0, float("nan"), float("inf"), "2", True])
def test_invalid_collaborator_weights_are_rejected(bad_weight: object) -> None:
    """Negative, non-finite and non-numeric weights fail at configuration."""

    with pytest.raises(InsightsValidationError):
        AssignmentMatrixOptions(collaborator_weights={"alpha@example.com": bad_weight})


def test_conflicting_weight_keys_are_rejected() -> None:
    """Two keys that normalise to one e-mail must agree on the weight."""

    with pytest.raises(InsightsValidationError, match="Conflicting"):
        AssignmentMatrixOptions(
            collaborator_weights={"alpha@example.com": 1, "ALPHA@example.com": 2}
        )


def test_duplicate_category_order_is_rejected() -> None:
    """An explicit order cannot repeat a category id."""

    with pytest.raises(InsightsValidationError, match="duplicate"):
        AssignmentMatrixOptions(category_order=("cat-a", "cat-a"))


@pytest.mark.parametrize("order", ["cat-a", ("cat-a", None), ("cat-a", 3)])
def test_malformed_category_order_is_rejected(order: object) -> None:
    """Orders must be sequences of ids or CollaboratorCategory records."""

    with pytest.raises(InsightsValidationError, match="Category order"):
        AssignmentMatrixOptions(category_order=order)  # type: ignore[arg-type]


def test_duplicate_plot_point_ids_are_rejected() -> None:
    """Each plot point id may only appear once per batch."""

    points = [PlotPoint(id="p1", order=1), PlotPoint(id="p1", order=2)]

    with pytest.raises(InsightsValidationError, match="Duplicate plot point"):
        build_assignment_matrix(points)


def test_result_is_read_only_and_inputs_unchanged() -> None:
    """Results cannot be mutated and repeated builds are identical."""

    points = _base_plot_points()
    snapshot = list(points)
    first = build_assignment_matrix(points)
    second = build_assignment_matrix(points)

    with pytest.raises(ValueError):
        first.matrix[0, 0] = 10.0
    assert np.array_equal(first.matrix, second.matrix)
    assert first.matrix is not second.matrix
    assert points == snapshot


def test_empty_input_yields_empty_matrix() -> None:
    """No plot points produce a 0 x 0 matrix."""

    result = build_assignment_matrix(
        [], AssignmentMatrixOptions(normalize_within_plot_point=True)
    )

    assert result.matrix.shape == (0, 0)
    assert result.category_ids == ()
