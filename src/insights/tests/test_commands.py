"""
Tests for the variant_insights command-line entry point.
"""

from __future__ import annotations

import json
from pathlib import Path

import pandas as pd

from insights.commands import main


def _write_inputs(tmp_path: Path) -> tuple[Path, Path]:
    """Write a small plot point export and roster and return their paths."""

    plot_points = [
        {
            "id": "p1",
            "order": 1,
            "collaboratorCategories": [
                {
                    "collaboratorCategoryId": "cat-a",
                    "collaboratorEmail": "alpha@example.com",
                },
                {
                    "collaboratorCategoryId": "cat-b",
                    "collaboratorEmail": "beta@example.com",
                },
            ],
        },
        {
            "id": "p2",
            "order": 2,
            "collaboratorCategories": [
                {
                    "collaboratorCategoryId": "cat-a",
                    "collaboratorEmail": "alpha@example.com",
                },
                {
                    "collaboratorCategoryId": "cat-c",
                    "collaboratorEmail": "gamma@example.com",
                },
            ],
        },
    ]
    collaborators = [
        {"email": "alpha@example.com", "role": "owner"},
        {"email": "beta@example.com"},
        {"email": "gamma@example.com"},
    ]
    points_path = tmp_path / "plot_points.json"
    roster_path = tmp_path / "collaborators.json"
    points_path.write_text(json.dumps(plot_points), encoding="utf-8")
    roster_path.write_text(json.dumps(collaborators), encoding="utf-8")
    return points_path, roster_path


def test_main_writes_report_and_matrices(tmp_path: Path) -> None:
    """main writes the JSON report and the three CSV matrices."""

    points_path, roster_path = _write_inputs(tmp_path)
    output = tmp_path / "out" / "report.json"
    matrix_dir = tmp_path / "matrices"

    status = main(
        [
            "--plot-points",
            str(points_path),
            "--collaborators",
            str(roster_path),
            "--output",
            str(output),
            "--matrix-dir",
            str(matrix_dir),
            "--collaborator-weight",
            "ALPHA@example.com=2",
            "--log-level",
            "WARNING",
        ]
    )

    assert status == 0
    report = json.loads(output.read_text(encoding="utf-8"))
    assert report["total_assignments"] == 4
    assert report["completion_percentage"] == 66.7
    assert report["agreement_summary"]["average"] == 33.3

    assignment = pd.read_csv(matrix_dir / "assignment_matrix.csv", index_col=0)
    assert list(assignment.columns) == ["cat-a", "cat-b", "cat-c"]
    assert assignment.loc["p1"].tolist() == [2.0, 1.0, 0.0]

    agreement = pd.read_csv(matrix_dir / "agreement_matrix.csv", index_col=0)
    assert agreement.loc["p1", "p2"] == 4.0

    jaccard = pd.read_csv(matrix_dir / "collaborator_agreement.csv", index_col=0)
    assert jaccard.loc["alpha@example.com", "beta@example.com"] == 0.5


def test_main_prints_report_to_stdout(tmp_path: Path, capsys) -> None:
    """Without --output the report is printed as JSON."""

    points_path, roster_path = _write_inputs(tmp_path)

    status = main(
        ["--plot-points", str(points_path), "--collaborators", str(roster_path)]
    )

    assert status == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["collaborator_emails"] == [
        "alpha@example.com",
        "beta@example.com",
        "gamma@example.com",
    ]


def test_main_returns_2_on_invalid_weight(tmp_path: Path) -> None:
    """Negative weights are reported as an input error."""

    points_path, roster_path = _write_inputs(tmp_path)

    status = main(
        [
            "--plot-points",
            str(points_path),
            "--collaborators",
            str(roster_path),
            "--matrix-dir",
            str(tmp_path / "matrices"),
            "--collaborator-weight",
            "alpha@example.com=-1",
        ]
    )

    assert status == 2
    assert not (tmp_path / "matrices").exists()


def test_main_returns_2_on_missing_input(tmp_path: Path) -> None:
    """A missing plot point file is reported rather than raised."""

    _, roster_path = _write_inputs(tmp_path)

    status = main(
        [
            "--plot-points",
            str(tmp_path / "missing.json"),
            "--collaborators",
            str(roster_path),
        ]
    )

    assert status == 2


def test_main_rejects_invalid_weight_without_matrix_dir(tmp_path: Path) -> None:
    """Weights are validated even when no matrices are exported."""

    points_path, roster_path = _write_inputs(tmp_path)
    output = tmp_path / "report.json"

    status = main(
        [
            "-p",
            str(points_path),
            "-c",
            str(roster_path),
            "-o",
            str(output),
            "--collaborator-weight",
            "alpha@example.com=-5",
        ]
    )

    assert status == 2
    assert not output.exists()


def test_main_reuses_report_agreement_for_jaccard_csv(tmp_path: Path) -> None:
    """The collaborator agreement CSV matches the report's pairwise matrix."""

    points_path, roster_path = _write_inputs(tmp_path)
    output = tmp_path / "report.json"
    matrix_dir = tmp_path / "matrices"

    status = main(
        [
            "-p",
            str(points_path),
            "-c",
            str(roster_path),
            "-o",
            str(output),
            "--matrix-dir",
            str(matrix_dir),
        ]
    )

    assert status == 0
    report = json.loads(output.read_text(encoding="utf-8"))
    jaccard = pd.read_csv(matrix_dir / "collaborator_agreement.csv", index_col=0)
    assert list(jaccard.index) == report["collaborator_emails"]
    assert jaccard.values.tolist() == report["pairwise_agreements"]
