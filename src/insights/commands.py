"""Command-line entry point for variant insight reports.

Reads exported plot points and a collaborator roster, writes the combined
coverage and agreement report as JSON, and optionally exports the assignment,
plot point agreement and collaborator agreement matrices as CSV for a
downstream consolidation run.

Example
-------

   variant_insights \
     --plot-points exports/variant_plot_points.json \
     --collaborators exports/myth_collaborators.json \
     --collaborator-weight owner@example.com=2 \
     --cosine \
     --matrix-dir analysis/variant_matrices
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, Tuple

from insights.aggregator import (
    VariantInsightMetrics,
    compute_variant_insight_metrics,
)
from insights.agreement_matrix import AgreementMatrixOptions
from insights.assignment_matrix import AssignmentMatrixOptions
from insights.formatting import (
    agreement_matrix_frame,
    assignment_matrix_frame,
    collaborator_agreement_frame,
)
from insights.matrix_provider import MatrixProvider
from insights.models import PlotPoint
from utils.cli import (
    add_collaborator_weight_argument,
    add_insight_input_arguments,
    add_log_level_argument,
    add_output_path_argument,
    parse_weight_assignments,
)
from utils.io import load_collaborators, load_plot_points, write_frame_csv, write_json
from utils.schema import (
    AGREEMENT_MATRIX_FILENAME,
    ASSIGNMENT_MATRIX_FILENAME,
    JACCARD_MATRIX_FILENAME,
)

LOGGER = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for insight computation."""

    parser = argparse.ArgumentParser(
        prog="variant_insights",
        description=(
            "Compute collaborator coverage and agreement metrics for a "
            "variant's plot points."
        ),
    )
    add_insight_input_arguments(parser)
    add_output_path_argument(
        parser,
        help_text="Path for the JSON report (default: print to stdout).",
    )
    parser.add_argument(
        "--matrix-dir",
        type=Path,
        default=None,
        help=(
            "Optional directory where assignment, plot point agreement and "
            "collaborator agreement matrices are written as CSV."
        ),
    )
    add_collaborator_weight_argument(parser)
    parser.add_argument(
        "--normalize-within-plot-point",
        action="store_true",
        help=(
            "Scale each assignment-matrix row so it sums to one "
            "(only used with --matrix-dir)."
        ),
    )
    parser.add_argument(
        "--cosine",
        action="store_true",
        help=(
            "Cosine-normalise the plot point agreement matrix "
            "(only used with --matrix-dir)."
        ),
    )
    add_log_level_argument(parser)
    return parser.parse_args(argv)


def _matrix_options(
    args: argparse.Namespace,
) -> Tuple[AssignmentMatrixOptions, AgreementMatrixOptions]:
    """Return validated matrix options built from the command-line flags."""

    assignment_options = AssignmentMatrixOptions(
        collaborator_weights=parse_weight_assignments(args.collaborator_weights),
        normalize_within_plot_point=args.normalize_within_plot_point,
    )
    if args.matrix_dir is None and (
        args.collaborator_weights or args.normalize_within_plot_point or args.cosine
    ):
        LOGGER.warning(
            "Matrix options only affect --matrix-dir exports and are ignored"
        )
    return assignment_options, AgreementMatrixOptions(normalize=args.cosine)


def _write_matrices(
    matrix_dir: Path,
    plot_points: Sequence[PlotPoint],
    report: VariantInsightMetrics,
    assignment_options: AssignmentMatrixOptions,
    agreement_options: AgreementMatrixOptions,
) -> None:
    provider = MatrixProvider(
        plot_points,
        assignment_options=assignment_options,
        agreement_options=agreement_options,
    )
    matrices = provider.prepare(with_agreement=True)

    write_frame_csv(
        matrix_dir / ASSIGNMENT_MATRIX_FILENAME,
        assignment_matrix_frame(matrices.assignment),
    )
    if matrices.agreement is not None:
        write_frame_csv(
            matrix_dir / AGREEMENT_MATRIX_FILENAME,
            agreement_matrix_frame(matrices.agreement),
        )
    write_frame_csv(
        matrix_dir / JACCARD_MATRIX_FILENAME,
        collaborator_agreement_frame(
            report.collaborator_emails, report.pairwise_agreements
        ),
    )
    LOGGER.info("Wrote matrices to %s", matrix_dir)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point used by the command-line interface."""

    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        assignment_options, agreement_options = _matrix_options(args)
        plot_points = load_plot_points(args.plot_points)
        collaborators = load_collaborators(args.collaborators)
        report = compute_variant_insight_metrics(plot_points, collaborators)
        if args.matrix_dir is not None:
            _write_matrices(
                args.matrix_dir,
                plot_points,
                report,
                assignment_options,
                agreement_options,
            )
    except ValueError as err:
        LOGGER.error("%s", err)
        return 2
    except OSError as err:
        LOGGER.error("Failed to write outputs: %s", err)
        return 2

    payload = report.to_dict()
    if args.output is None:
        json.dump(payload, sys.stdout, indent=2, ensure_ascii=False)
        sys.stdout.write("\n")
    else:
        try:
            write_json(args.output, payload)
        except OSError as err:
            LOGGER.error("Failed to write report to %s: %s", args.output, err)
            return 2
        LOGGER.info("Wrote variant insights to %s", args.output)

    LOGGER.info(
        "%d plot points, %d collaborators, %.1f%% complete",
        report.total_plot_points,
        report.total_contributors,
        report.completion_percentage,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
