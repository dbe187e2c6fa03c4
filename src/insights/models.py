"""Input records for variant insight calculations.

The records in this module mirror the payloads exported by the collaboration
backend: plot points carrying collaborator category assignments, the
collaborator roster for a myth, and the collaborator-owned categories that
assignments reference. All records are frozen so calculators can share them
without copying, and construction validates the boundary contract so that
malformed data is rejected before it reaches any matrix or ratio.
"""

from __future__ import annotations

import logging
import math
import numbers
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence, Tuple

LOGGER = logging.getLogger(__name__)

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+$")


class InsightsValidationError(ValueError):
    """Raised when input records or options violate the input contract."""


def normalize_email(email: object) -> str:
    """Return a stripped, lower-cased collaborator e-mail.

    Parameters
    ----------
    email:
        Raw e-mail value as supplied by the caller.

    Returns
    -------
    str
        Normalised e-mail address.

    Raises
    ------
    InsightsValidationError
        If ``email`` is not a string, is empty after trimming, or is not of
        the form ``local@domain``.
    """

    if not isinstance(email, str):
        raise InsightsValidationError(
            f"Collaborator email must be a string, got {type(email).__name__}"
        )
    normalized = email.strip().lower()
    if not normalized:
        raise InsightsValidationError("Collaborator email must be non-empty")
    if not _EMAIL_PATTERN.match(normalized):
        raise InsightsValidationError(f"Malformed collaborator email: {email!r}")
    return normalized


def validate_weight(value: object, *, label: str) -> float:
    """Return ``value`` as a finite, non-negative float.

    Parameters
    ----------
    value:
        Raw weight value.
    label:
        Human-readable description used in error messages.

    Raises
    ------
    InsightsValidationError
        If the value is not numeric, not finite, or negative.
    """

    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InsightsValidationError(f"Weight for {label} must be numeric: {value!r}")
    weight = float(value)
    if not math.isfinite(weight):
        raise InsightsValidationError(f"Weight for {label} must be finite: {value!r}")
    if weight < 0:
        raise InsightsValidationError(
            f"Weight for {label} must be non-negative: {value!r}"
        )
    return weight


@dataclass(frozen=True)
class CategoryAssignment:
    """A single collaborator category placed on a plot point.

    Parameters
    ----------
    plot_point_id:
        Identifier of the plot point carrying the assignment.
    category_id:
        Identifier of the collaborator-owned category.
    collaborator_email:
        E-mail of the collaborator who made the assignment. Normalised on
        construction.
    category_name:
        Display name of the category.
    weight:
        Per-assignment multiplier applied on top of the collaborator weight
        when building assignment matrices. Defaults to ``1.0``.
    """

    plot_point_id: str
    category_id: str
    collaborator_email: str
    category_name: str = ""
    weight: float = 1.0

    def __post_init__(self) -> None:
        if not isinstance(self.category_id, str) or not self.category_id.strip():
            raise InsightsValidationError(
                f"Assignment on plot point {self.plot_point_id!r} needs a category "
                f"id: {self.category_id!r}"
            )
        object.__setattr__(
            self, "collaborator_email", normalize_email(self.collaborator_email)
        )
        object.__setattr__(
            self,
            "weight",
            validate_weight(
                self.weight,
                label=f"assignment {self.category_id!r} on {self.plot_point_id!r}",
            ),
        )


@dataclass(frozen=True)
class PlotPoint:
    """A narrative beat within a variant together with its assignments.

    Parameters
    ----------
    id:
        Opaque plot point identifier.
    order:
        One-based position within the owning variant.
    category:
        Current display label of the plot point.
    assignments:
        Ordered collaborator category assignments. Every assignment must
        reference this plot point.
    text:
        Optional narrative text.
    canonical_category_id:
        Optional identifier of the canonical category chosen by an earlier
        consolidation run.
    """

    id: str
    order: int
    category: str = ""
    assignments: Tuple[CategoryAssignment, ...] = ()
    text: str = ""
    canonical_category_id: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.order, bool) or not isinstance(self.order, numbers.Integral):
            raise InsightsValidationError(
                f"Plot point {self.id!r} order must be an integer: {self.order!r}"
            )
        if self.order < 1:
            raise InsightsValidationError(
                f"Plot point {self.id!r} order must be one-based: {self.order!r}"
            )
        assignments = tuple(self.assignments)
        for assignment in assignments:
            if assignment.plot_point_id != self.id:
                raise InsightsValidationError(
                    f"Assignment {assignment.category_id!r} references plot point "
                    f"{assignment.plot_point_id!r} but is attached to {self.id!r}"
                )
        object.__setattr__(self, "assignments", assignments)


@dataclass(frozen=True)
class Collaborator:
    """A member of the collaborator roster for a myth."""

    email: str
    role: Optional[str] = None
    display_name: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "email", normalize_email(self.email))


@dataclass(frozen=True)
class CollaboratorCategory:
    """A category owned by one collaborator and referenced by assignments."""

    id: str
    collaborator_email: str
    name: str = ""
    myth_id: Optional[str] = None


@dataclass(frozen=True)
class Roster:
    """Deduplicated collaborator roster.

    Parameters
    ----------
    emails:
        Lexicographically sorted, normalised e-mails.
    roles:
        Role per e-mail in ``emails`` order (``None`` when unknown).
    display_names:
        Display name per e-mail in ``emails`` order (``None`` when unknown).
    """

    emails: Tuple[str, ...]
    roles: Tuple[Optional[str], ...] = field(default=())
    display_names: Tuple[Optional[str], ...] = field(default=())


def build_roster(collaborators: Iterable[Collaborator]) -> Roster:
    """Return a sorted, deduplicated roster for ``collaborators``.

    When the same e-mail appears more than once the later entry supplies the
    role and display name.
    """

    roles: dict[str, Optional[str]] = {}
    names: dict[str, Optional[str]] = {}
    for collaborator in collaborators:
        roles[collaborator.email] = collaborator.role
        names[collaborator.email] = collaborator.display_name
    emails = tuple(sorted(roles))
    return Roster(
        emails=emails,
        roles=tuple(roles[email] for email in emails),
        display_names=tuple(names[email] for email in emails),
    )


def validate_plot_point_batch(plot_points: Sequence[PlotPoint]) -> None:
    """Reject batches in which two plot points share an identifier.

    Raises
    ------
    InsightsValidationError
        If a plot point id appears more than once.
    """

    seen: set[str] = set()
    for point in plot_points:
        if point.id in seen:
            raise InsightsValidationError(f"Duplicate plot point id: {point.id!r}")
        seen.add(point.id)


def touched_plot_points(
    plot_points: Sequence[PlotPoint], roster: Roster
) -> Tuple[list[set[str]], dict[str, set[str]]]:
    """Return distinct roster collaborators per plot point and per e-mail.

    Parameters
    ----------
    plot_points:
        Plot points in input order.
    roster:
        Roster restricting which collaborators are counted.

    Returns
    -------
    Tuple[list[set[str]], dict[str, set[str]]]
        A list aligned with ``plot_points`` holding the e-mails that touched
        each point, and a mapping from every roster e-mail to the set of plot
        point ids that collaborator touched. Assignments by collaborators
        outside the roster are not counted.
    """

    roster_emails = set(roster.emails)
    by_point: list[set[str]] = []
    by_email: dict[str, set[str]] = {email: set() for email in roster.emails}
    for point in plot_points:
        seen: set[str] = set()
        for assignment in point.assignments:
            email = assignment.collaborator_email
            if email not in roster_emails:
                LOGGER.debug(
                    "Ignoring assignment on %s by %s (not in roster)", point.id, email
                )
                continue
            seen.add(email)
            by_email[email].add(point.id)
        by_point.append(seen)
    return by_point, by_email


__all__ = [
    "CategoryAssignment",
    "Collaborator",
    "CollaboratorCategory",
    "InsightsValidationError",
    "PlotPoint",
    "Roster",
    "build_roster",
    "normalize_email",
    "touched_plot_points",
    "validate_plot_point_batch",
    "validate_weight",
]
