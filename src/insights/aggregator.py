"""Combined variant insight report.

:func:`compute_variant_insight_metrics` runs the coverage and Jaccard
calculators over the same inputs and packages their results into a single
frozen :class:`VariantInsightMetrics` record for the presentation layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from insights.coverage import CollaboratorCoverage, compute_coverage
from insights.jaccard import AgreementPair, compute_jaccard_agreement
from insights.models import Collaborator, PlotPoint
from utils.schema import (
    COVERAGE_FIELD_COMPLETED,
    COVERAGE_FIELD_DISPLAY_NAME,
    COVERAGE_FIELD_EMAIL,
    COVERAGE_FIELD_PERCENTAGE,
    COVERAGE_FIELD_ROLE,
    REPORT_FIELD_AGREEMENT_SUMMARY,
    REPORT_FIELD_AVERAGE_ASSIGNMENTS,
    REPORT_FIELD_COLLABORATOR_EMAILS,
    REPORT_FIELD_COMPLETION_PERCENTAGE,
    REPORT_FIELD_COVERAGE_BY_COLLABORATOR,
    REPORT_FIELD_PAIRWISE_AGREEMENTS,
    REPORT_FIELD_TOTAL_ASSIGNMENTS,
    REPORT_FIELD_TOTAL_CAPACITY,
    REPORT_FIELD_TOTAL_CONTRIBUTORS,
    REPORT_FIELD_TOTAL_PLOT_POINTS,
    SUMMARY_FIELD_AVERAGE,
    SUMMARY_FIELD_HIGHEST,
    SUMMARY_FIELD_PAIR,
    SUMMARY_FIELD_SCORE,
)


@dataclass(frozen=True)
class AgreementSummary:
    """Average pairwise agreement and the best-agreeing pair."""

    average: float
    highest: Optional[AgreementPair]


@dataclass(frozen=True)
class VariantInsightMetrics:
    """Immutable coverage and agreement report for one variant.

    Parameters
    ----------
    total_plot_points:
        Number of plot points in the batch.
    collaborator_emails:
        Sorted, deduplicated roster e-mails.
    total_assignments:
        Distinct (plot point, collaborator) pairs with at least one tag.
    total_contributors:
        Roster size.
    total_capacity:
        ``total_plot_points * total_contributors``.
    completion_percentage:
        Filled share of the capacity as a percentage.
    average_assignments_per_plot_point:
        ``total_assignments / total_plot_points`` rounded to one decimal.
    coverage_by_collaborator:
        Per-collaborator coverage in roster order.
    pairwise_agreements:
        Jaccard matrix as nested tuples in roster order.
    agreement_summary:
        Average and highest pairwise agreement.
    """

    total_plot_points: int
    collaborator_emails: Tuple[str, ...]
    total_assignments: int
    total_contributors: int
    total_capacity: int
    completion_percentage: float
    average_assignments_per_plot_point: float
    coverage_by_collaborator: Tuple[CollaboratorCoverage, ...]
    pairwise_agreements: Tuple[Tuple[float, ...], ...]
    agreement_summary: AgreementSummary

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-ready mapping of the report."""

        highest = self.agreement_summary.highest
        highest_payload: Optional[Dict[str, object]] = None
        if highest is not None:
            highest_payload = {
                SUMMARY_FIELD_PAIR: list(highest.pair),
                SUMMARY_FIELD_SCORE: highest.score,
            }
        coverage: List[Dict[str, object]] = [
            {
                COVERAGE_FIELD_EMAIL: item.email,
                COVERAGE_FIELD_COMPLETED: item.completed,
                COVERAGE_FIELD_PERCENTAGE: item.percentage,
                COVERAGE_FIELD_ROLE: item.role,
                COVERAGE_FIELD_DISPLAY_NAME: item.display_name,
            }
            for item in self.coverage_by_collaborator
        ]
        return {
            REPORT_FIELD_TOTAL_PLOT_POINTS: self.total_plot_points,
            REPORT_FIELD_COLLABORATOR_EMAILS: list(self.collaborator_emails),
            REPORT_FIELD_TOTAL_ASSIGNMENTS: self.total_assignments,
            REPORT_FIELD_TOTAL_CONTRIBUTORS: self.total_contributors,
            REPORT_FIELD_TOTAL_CAPACITY: self.total_capacity,
            REPORT_FIELD_COMPLETION_PERCENTAGE: self.completion_percentage,
            REPORT_FIELD_AVERAGE_ASSIGNMENTS: self.average_assignments_per_plot_point,
            REPORT_FIELD_COVERAGE_BY_COLLABORATOR: coverage,
            REPORT_FIELD_PAIRWISE_AGREEMENTS: [
                list(row) for row in self.pairwise_agreements
            ],
            REPORT_FIELD_AGREEMENT_SUMMARY: {
                SUMMARY_FIELD_AVERAGE: self.agreement_summary.average,
                SUMMARY_FIELD_HIGHEST: highest_payload,
            },
        }


def compute_variant_insight_metrics(
    plot_points: Sequence[PlotPoint],
    collaborators: Sequence[Collaborator],
) -> VariantInsightMetrics:
    """Return the combined coverage and agreement report.

    Parameters
    ----------
    plot_points:
        Plot points of one variant with their assignments.
    collaborators:
        Collaborator roster of the owning myth.

    Returns
    -------
    VariantInsightMetrics
        Report built only from the arguments; repeated calls with equal
        inputs return equal reports.
    """

    coverage = compute_coverage(plot_points, collaborators)
    jaccard = compute_jaccard_agreement(plot_points, collaborators)
    pairwise = tuple(tuple(float(value) for value in row) for row in jaccard.to_lists())
    return VariantInsightMetrics(
        total_plot_points=coverage.total_plot_points,
        collaborator_emails=coverage.collaborator_emails,
        total_assignments=coverage.total_assignments,
        total_contributors=coverage.total_contributors,
        total_capacity=coverage.total_capacity,
        completion_percentage=coverage.completion_percentage,
        average_assignments_per_plot_point=coverage.average_assignments_per_plot_point,
        coverage_by_collaborator=coverage.coverage_by_collaborator,
        pairwise_agreements=pairwise,
        agreement_summary=AgreementSummary(
            average=jaccard.average_agreement,
            highest=jaccard.highest_agreement_pair,
        ),
    )


__all__ = [
    "AgreementSummary",
    "VariantInsightMetrics",
    "compute_variant_insight_metrics",
]
