"""Shared I/O helpers for plot point and collaborator exports.

This module centralizes common routines for:

- Reading JSON arrays or forgiving JSONL files as dictionaries.
- Turning exported plot point and collaborator payloads into the frozen
  records consumed by :mod:`insights`.
- Writing insight reports and labelled matrices to disk.

Loader functions raise ``ValueError`` with the offending path in the message
so scripts can log a single error line and exit.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

import pandas as pd

from insights.models import CategoryAssignment, Collaborator, PlotPoint
from utils.schema import (
    ASSIGNMENT_CATEGORY_ID,
    ASSIGNMENT_CATEGORY_NAME,
    ASSIGNMENT_COLLABORATOR_EMAIL,
    ASSIGNMENT_PLOT_POINT_ID,
    ASSIGNMENT_WEIGHT,
    COLLABORATOR_DISPLAY_NAME,
    COLLABORATOR_EMAIL,
    COLLABORATOR_ROLE,
    PLOT_POINT_ASSIGNMENTS,
    PLOT_POINT_CANONICAL_CATEGORY_ID,
    PLOT_POINT_CATEGORY,
    PLOT_POINT_ID,
    PLOT_POINT_ORDER,
    PLOT_POINT_TEXT,
)

LOGGER = logging.getLogger(__name__)


def iter_jsonl_dicts(path: Path) -> Iterable[dict]:
    """Yield JSON objects from a newline-delimited JSONL file.

    Lines that are empty, fail JSON parsing, or do not decode to dicts are
    skipped with a warning so one bad row does not abort a whole export.

    Parameters
    ----------
    path:
        JSONL file path to read.

    Returns
    -------
    Iterable[dict]
        Iterator of parsed JSON objects.
    """

    try:
        with path.open("r", encoding="utf-8") as handle:
            for line_number, line in enumerate(handle, start=1):
                line_stripped = line.strip()
                if not line_stripped:
                    continue
                try:
                    obj = json.loads(line_stripped)
                except json.JSONDecodeError:
                    LOGGER.warning("Skipping invalid JSON at %s:%d", path, line_number)
                    continue
                if isinstance(obj, dict):
                    yield obj
    except OSError as err:
        raise OSError(f"Failed to read {path}: {err}") from err


def load_json_records(path: Path) -> List[dict]:
    """Return the dictionaries stored in a JSON array or JSONL file.

    Files ending in ``.jsonl`` are read line by line with
    :func:`iter_jsonl_dicts`; any other file must contain a JSON array of
    objects.

    Raises
    ------
    ValueError
        If the file cannot be read, is not valid JSON, or does not contain a
        list of objects.
    """

    resolved = path.expanduser()
    if resolved.suffix == ".jsonl":
        try:
            return list(iter_jsonl_dicts(resolved))
        except OSError as err:
            raise ValueError(str(err)) from err

    try:
        payload = json.loads(resolved.read_text(encoding="utf-8"))
    except OSError as err:
        raise ValueError(f"Failed to read {resolved}: {err}") from err
    except json.JSONDecodeError as err:
        raise ValueError(f"Invalid JSON in {resolved}: {err}") from err
    if not isinstance(payload, list) or not all(
        isinstance(item, dict) for item in payload
    ):
        raise ValueError(f"Expected a JSON array of objects in {resolved}")
    return payload


def _optional_str(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def assignment_from_dict(
    obj: Mapping[str, object], plot_point_id: str
) -> CategoryAssignment:
    """Return a :class:`CategoryAssignment` from an exported mapping.

    A missing ``plotPointId`` defaults to the owning plot point so nested
    exports do not need to repeat it; an explicit, different value is kept
    and rejected by :class:`~insights.models.PlotPoint` validation.
    Assignments without a ``collaboratorCategoryId`` raise ``ValueError``.
    """

    category_id = _optional_str(obj.get(ASSIGNMENT_CATEGORY_ID))
    if category_id is None:
        raise ValueError(
            f"Assignment on plot point {plot_point_id!r} is missing a "
            f"collaborator category id: {dict(obj)!r}"
        )
    raw_plot_point_id = obj.get(ASSIGNMENT_PLOT_POINT_ID)
    return CategoryAssignment(
        plot_point_id=(
            plot_point_id if raw_plot_point_id is None else str(raw_plot_point_id)
        ),
        category_id=category_id,
        collaborator_email=obj.get(ASSIGNMENT_COLLABORATOR_EMAIL),  # type: ignore
        category_name=str(obj.get(ASSIGNMENT_CATEGORY_NAME) or ""),
        weight=obj.get(ASSIGNMENT_WEIGHT, 1.0),  # type: ignore[arg-type]
    )


def plot_point_from_dict(obj: Mapping[str, object]) -> PlotPoint:
    """Return a :class:`PlotPoint` from an exported mapping.

    Raises
    ------
    ValueError
        If the id or order is missing, the order is not an integer, or any
        nested assignment is malformed.
    """

    point_id = _optional_str(obj.get(PLOT_POINT_ID))
    if point_id is None:
        raise ValueError(f"Plot point is missing an id: {dict(obj)!r}")
    raw_order = obj.get(PLOT_POINT_ORDER)
    if raw_order is None:
        raise ValueError(f"Plot point {point_id!r} is missing an order")
    try:
        order = int(raw_order)  # type: ignore[arg-type]
    except (TypeError, ValueError) as err:
        raise ValueError(f"Plot point {point_id!r} has an invalid order") from err

    raw_assignments = obj.get(PLOT_POINT_ASSIGNMENTS) or []
    if not isinstance(raw_assignments, list):
        raise ValueError(f"Plot point {point_id!r} assignments must be a list")
    assignments = tuple(
        assignment_from_dict(item, point_id)
        for item in raw_assignments
        if isinstance(item, dict)
    )
    return PlotPoint(
        id=point_id,
        order=order,
        category=str(obj.get(PLOT_POINT_CATEGORY) or ""),
        assignments=assignments,
        text=str(obj.get(PLOT_POINT_TEXT) or ""),
        canonical_category_id=_optional_str(obj.get(PLOT_POINT_CANONICAL_CATEGORY_ID)),
    )


def collaborator_from_dict(obj: Mapping[str, object]) -> Collaborator:
    """Return a :class:`Collaborator` from an exported roster entry."""

    return Collaborator(
        email=obj.get(COLLABORATOR_EMAIL),  # type: ignore[arg-type]
        role=_optional_str(obj.get(COLLABORATOR_ROLE)),
        display_name=_optional_str(obj.get(COLLABORATOR_DISPLAY_NAME)),
    )


def load_plot_points(path: Path) -> List[PlotPoint]:
    """Return plot points read from a JSON or JSONL export at ``path``."""

    records = load_json_records(path)
    try:
        return [plot_point_from_dict(record) for record in records]
    except ValueError as err:
        raise ValueError(f"Invalid plot point in {path}: {err}") from err


def load_collaborators(path: Path) -> List[Collaborator]:
    """Return the collaborator roster read from a JSON or JSONL export."""

    records = load_json_records(path)
    try:
        return [collaborator_from_dict(record) for record in records]
    except ValueError as err:
        raise ValueError(f"Invalid collaborator in {path}: {err}") from err


def write_json(output_path: Path, payload: object) -> None:
    """Write ``payload`` as indented UTF-8 JSON, creating parent directories."""

    resolved = output_path.expanduser().resolve()
    resolved.parent.mkdir(parents=True, exist_ok=True)
    with resolved.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, ensure_ascii=False)
        handle.write("\n")


def write_frame_csv(output_path: Path, frame: pd.DataFrame) -> None:
    """Write a labelled matrix DataFrame to CSV, creating parent directories."""

    resolved = output_path.expanduser().resolve()
    resolved.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(resolved, encoding="utf-8")


__all__ = [
    "assignment_from_dict",
    "collaborator_from_dict",
    "iter_jsonl_dicts",
    "load_collaborators",
    "load_json_records",
    "load_plot_points",
    "plot_point_from_dict",
    "write_frame_csv",
    "write_json",
]
