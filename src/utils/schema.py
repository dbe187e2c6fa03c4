"""Centralized domain schema constants for JSON payloads.

This module defines the field names used when reading plot point and
collaborator exports and when writing variant insight reports. Import these
constants instead of repeating string literals across modules and scripts so
that the input and report schemas stay consistent.
"""

from __future__ import annotations

# Plot point export schema --------------------------------------------------

PLOT_POINT_ID = "id"
PLOT_POINT_ORDER = "order"
PLOT_POINT_CATEGORY = "category"
PLOT_POINT_TEXT = "text"
PLOT_POINT_CANONICAL_CATEGORY_ID = "canonicalCategoryId"
PLOT_POINT_ASSIGNMENTS = "collaboratorCategories"


# Category assignment schema ------------------------------------------------

ASSIGNMENT_PLOT_POINT_ID = "plotPointId"
ASSIGNMENT_CATEGORY_ID = "collaboratorCategoryId"
ASSIGNMENT_COLLABORATOR_EMAIL = "collaboratorEmail"
ASSIGNMENT_CATEGORY_NAME = "categoryName"
ASSIGNMENT_WEIGHT = "weight"


# Collaborator roster schema ------------------------------------------------

COLLABORATOR_EMAIL = "email"
COLLABORATOR_ROLE = "role"
COLLABORATOR_DISPLAY_NAME = "displayName"


# Variant insight report schema ----------------------------------------------

REPORT_FIELD_TOTAL_PLOT_POINTS = "total_plot_points"
REPORT_FIELD_COLLABORATOR_EMAILS = "collaborator_emails"
REPORT_FIELD_TOTAL_ASSIGNMENTS = "total_assignments"
REPORT_FIELD_TOTAL_CONTRIBUTORS = "total_contributors"
REPORT_FIELD_TOTAL_CAPACITY = "total_capacity"
REPORT_FIELD_COMPLETION_PERCENTAGE = "completion_percentage"
REPORT_FIELD_AVERAGE_ASSIGNMENTS = "average_assignments_per_plot_point"
REPORT_FIELD_COVERAGE_BY_COLLABORATOR = "coverage_by_collaborator"
REPORT_FIELD_PAIRWISE_AGREEMENTS = "pairwise_agreements"
REPORT_FIELD_AGREEMENT_SUMMARY = "agreement_summary"

COVERAGE_FIELD_EMAIL = "email"
COVERAGE_FIELD_COMPLETED = "completed"
COVERAGE_FIELD_PERCENTAGE = "percentage"
COVERAGE_FIELD_ROLE = "role"
COVERAGE_FIELD_DISPLAY_NAME = "display_name"

SUMMARY_FIELD_AVERAGE = "average"
SUMMARY_FIELD_HIGHEST = "highest"
SUMMARY_FIELD_PAIR = "pair"
SUMMARY_FIELD_SCORE = "score"


# Matrix export file names ----------------------------------------------------

ASSIGNMENT_MATRIX_FILENAME = "assignment_matrix.csv"
AGREEMENT_MATRIX_FILENAME = "agreement_matrix.csv"
JACCARD_MATRIX_FILENAME = "collaborator_agreement.csv"
