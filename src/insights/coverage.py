"""Coverage and completion statistics for a variant's plot points."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from insights.formatting import capped_percentage, round1
from insights.models import (
    Collaborator,
    PlotPoint,
    build_roster,
    touched_plot_points,
    validate_plot_point_batch,
)

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollaboratorCoverage:
    """Coverage of one roster collaborator.

    Parameters
    ----------
    email:
        Normalised collaborator e-mail.
    completed:
        Number of distinct plot points the collaborator tagged.
    percentage:
        ``completed`` as a percentage of all plot points, rounded to one
        decimal and capped at 100.
    role:
        Roster role, when known.
    display_name:
        Roster display name, when known.
    """

    email: str
    completed: int
    percentage: float
    role: Optional[str] = None
    display_name: Optional[str] = None


@dataclass(frozen=True)
class CoverageReport:
    """Overall and per-collaborator coverage for one batch of plot points."""

    total_plot_points: int
    collaborator_emails: Tuple[str, ...]
    total_assignments: int
    total_contributors: int
    total_capacity: int
    completion_percentage: float
    average_assignments_per_plot_point: float
    coverage_by_collaborator: Tuple[CollaboratorCoverage, ...]


def compute_coverage(
    plot_points: Sequence[PlotPoint],
    collaborators: Sequence[Collaborator],
) -> CoverageReport:
    """Return completion statistics for ``plot_points`` against a roster.

    Parameters
    ----------
    plot_points:
        Plot points with their assignments.
    collaborators:
        Collaborator roster. Duplicate e-mails are merged and collaborators
        without assignments still count towards capacity.

    Returns
    -------
    CoverageReport
        ``total_assignments`` counts distinct (plot point, collaborator)
        pairs, so repeat tags by one collaborator on one plot point count
        once. Every ratio with a zero denominator is reported as ``0``.
    """

    validate_plot_point_batch(plot_points)
    roster = build_roster(collaborators)
    per_point, per_email = touched_plot_points(plot_points, roster)

    total_plot_points = len(plot_points)
    total_assignments = sum(len(emails) for emails in per_point)
    total_contributors = len(roster.emails)
    total_capacity = total_plot_points * total_contributors

    completion_percentage = capped_percentage(total_assignments, total_capacity)
    average = (
        round1(total_assignments / total_plot_points) if total_plot_points else 0.0
    )

    completed: Dict[str, int] = {
        email: len(per_email[email]) for email in roster.emails
    }
    coverage = tuple(
        CollaboratorCoverage(
            email=email,
            completed=completed[email],
            percentage=capped_percentage(completed[email], total_plot_points),
            role=role,
            display_name=display_name,
        )
        for email, role, display_name in zip(
            roster.emails, roster.roles, roster.display_names
        )
    )

    LOGGER.debug(
        "Coverage: %d/%d slots filled across %d plot points",
        total_assignments,
        total_capacity,
        total_plot_points,
    )
    return CoverageReport(
        total_plot_points=total_plot_points,
        collaborator_emails=roster.emails,
        total_assignments=total_assignments,
        total_contributors=total_contributors,
        total_capacity=total_capacity,
        completion_percentage=completion_percentage,
        average_assignments_per_plot_point=average,
        coverage_by_collaborator=coverage,
    )


__all__ = [
    "CollaboratorCoverage",
    "CoverageReport",
    "compute_coverage",
]
