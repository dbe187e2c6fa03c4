"""Single entry point for the matrices consumed by consolidation runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from insights.agreement_matrix import (
    AgreementMatrixOptions,
    AgreementMatrixResult,
    build_agreement_matrix,
)
from insights.assignment_matrix import (
    AssignmentMatrixOptions,
    AssignmentMatrixResult,
    build_assignment_matrix,
)
from insights.models import PlotPoint


@dataclass(frozen=True)
class MatrixProviderResult:
    """Assignment matrix plus the optional agreement matrix derived from it."""

    assignment: AssignmentMatrixResult
    agreement: Optional[AgreementMatrixResult] = None


class MatrixProvider:
    """Build assignment and agreement matrices with one fixed configuration.

    Parameters
    ----------
    plot_points:
        Plot points of the variant being consolidated.
    assignment_options:
        Options forwarded to :func:`build_assignment_matrix`.
    agreement_options:
        Options forwarded to :func:`build_agreement_matrix`.
    """

    def __init__(
        self,
        plot_points: Sequence[PlotPoint],
        assignment_options: Optional[AssignmentMatrixOptions] = None,
        agreement_options: Optional[AgreementMatrixOptions] = None,
    ) -> None:
        self._plot_points = tuple(plot_points)
        self._assignment_options = assignment_options or AssignmentMatrixOptions()
        self._agreement_options = agreement_options or AgreementMatrixOptions()

    def prepare(self, with_agreement: bool = False) -> MatrixProviderResult:
        """Return the assignment matrix and, when requested, its agreement matrix."""

        assignment = build_assignment_matrix(
            self._plot_points, self._assignment_options
        )
        agreement = (
            build_agreement_matrix(assignment, self._agreement_options)
            if with_agreement
            else None
        )
        return MatrixProviderResult(assignment=assignment, agreement=agreement)


__all__ = ["MatrixProvider", "MatrixProviderResult"]
