"""CLI helper utilities for shared argparse patterns.

This module centralizes command-line argument definitions used by the
insight scripts so that input, output and logging flags stay consistent
across tools, and converts flag values into validated option objects.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Dict, Optional, Sequence


def add_insight_input_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the shared ``--plot-points`` and ``--collaborators`` arguments.

    Parameters
    ----------
    parser:
        Target argument parser.
    """

    parser.add_argument(
        "--plot-points",
        "-p",
        type=Path,
        required=True,
        help="JSON array or JSONL file of plot points with collaborator categories.",
    )
    parser.add_argument(
        "--collaborators",
        "-c",
        type=Path,
        required=True,
        help="JSON array or JSONL file describing the collaborator roster.",
    )


def add_output_path_argument(
    parser: argparse.ArgumentParser,
    *,
    help_text: str,
) -> None:
    """Add a shared optional ``--output/-o`` path argument.

    Parameters
    ----------
    parser:
        Target argument parser.
    help_text:
        Help string describing the output target.
    """

    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help=help_text,
    )


def add_collaborator_weight_argument(parser: argparse.ArgumentParser) -> None:
    """Add a repeatable ``--collaborator-weight EMAIL=WEIGHT`` argument."""

    parser.add_argument(
        "--collaborator-weight",
        action="append",
        default=[],
        dest="collaborator_weights",
        metavar="EMAIL=WEIGHT",
        help=(
            "Weight applied to one collaborator's assignments in the "
            "assignment matrix (repeatable, only used with --matrix-dir). "
            "Unlisted collaborators weigh 1."
        ),
    )


def add_log_level_argument(parser: argparse.ArgumentParser) -> None:
    """Add a shared ``--log-level`` argument for logging verbosity.

    Parameters
    ----------
    parser:
        Target argument parser.
    """

    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity.",
    )


def parse_weight_assignments(values: Optional[Sequence[str]]) -> Dict[str, float]:
    """Return a weight mapping parsed from ``EMAIL=WEIGHT`` strings.

    Parameters
    ----------
    values:
        Raw values collected by :func:`add_collaborator_weight_argument`.

    Returns
    -------
    Dict[str, float]
        Mapping from the e-mail text to the parsed weight. Range checks are
        left to :class:`insights.assignment_matrix.AssignmentMatrixOptions`.

    Raises
    ------
    ValueError
        If a value lacks ``=`` or its weight is not a number.
    """

    weights: Dict[str, float] = {}
    for raw in values or []:
        email, sep, weight_text = raw.rpartition("=")
        if not sep or not email.strip():
            raise ValueError(
                f"Invalid collaborator weight {raw!r}; expected EMAIL=WEIGHT"
            )
        try:
            weights[email.strip()] = float(weight_text)
        except ValueError as err:
            raise ValueError(
                f"Invalid weight {weight_text!r} for collaborator {email.strip()!r}"
            ) from err
    return weights


__all__ = [
    "add_collaborator_weight_argument",
    "add_insight_input_arguments",
    "add_log_level_argument",
    "add_output_path_argument",
    "parse_weight_assignments",
]
