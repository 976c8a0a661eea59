"""
CSV and JSON export of the studies, outcomes and comparisons views.

CSV is written with pandas, which quotes a value only when it contains a
comma, a double quote or a line break and doubles any inner quotes. Missing
values become empty cells. An empty view exports as an empty string, without
a header row.
"""

import json
import os
from dataclasses import asdict, fields
from datetime import datetime

import pandas as pd

from trials_query.exceptions import ExportError
from trials_query.models import StudyRow
from trials_query.utils.paths import get_exports_dir

STUDY_COLUMNS = [f.name for f in fields(StudyRow)]

OUTCOME_COLUMNS = ["NCT ID", "Conditions", "Outcome Type", "Endpoint", "Time Frame", "Unit of Measure"]

COMPARISON_COLUMNS = [
    "NCT ID", "Conditions", "Outcome Type", "Endpoint", "Time Frame",
    "Group 1", "Group 2", "Difference Estimate", "Difference SE", "P Value",
    "Statistical Method", "CI Lower", "CI Upper", "CI %"
]

MIME_TYPES = {
    "csv": "text/csv",
    "json": "application/json",
}


def rows_to_csv(records, columns):
    """Render a list of value lists as CSV text with the given header."""
    if not records:
        return ""
    # object dtype keeps integers next to missing values from turning into floats
    df = pd.DataFrame(records, columns=columns, dtype=object)
    return df.to_csv(index=False, lineterminator="\n")


def studies_to_csv(studies):
    """Studies view as CSV, one column per StudyRow field."""
    records = [[getattr(study, column) for column in STUDY_COLUMNS] for study in studies]
    return rows_to_csv(records, STUDY_COLUMNS)


def outcome_group_columns(group_count):
    """Header cells for group_count groups of an outcome measure."""
    columns = []
    for i in range(1, group_count + 1):
        columns.extend([f"Group {i} Name", f"Group {i} N", f"Group {i} Estimate", f"Group {i} SE"])
    return columns


def outcome_measures_to_csv(outcomes):
    """
    Outcome measures view as CSV.

    The group columns are repeated for the largest group count in the
    export; rows with fewer groups are padded with empty cells.
    """
    if not outcomes:
        return ""

    max_groups = max(len(outcome.groups) for outcome in outcomes)
    columns = OUTCOME_COLUMNS + outcome_group_columns(max_groups)

    records = []
    for outcome in outcomes:
        record = [
            outcome.nct_id,
            outcome.conditions,
            outcome.outcome_type,
            outcome.endpoint,
            outcome.time_frame,
            outcome.unit_of_measure,
        ]
        for group in outcome.groups:
            record.extend([group.name, group.n, group.estimate, group.se])
        record.extend([None] * (len(columns) - len(record)))
        records.append(record)

    return rows_to_csv(records, columns)


def comparisons_to_csv(comparisons):
    """Comparisons view as CSV with the fixed 14-column header."""
    records = [
        [
            comparison.nct_id,
            comparison.conditions,
            comparison.outcome_type,
            comparison.endpoint,
            comparison.time_frame,
            comparison.group1_name,
            comparison.group2_name,
            comparison.difference_estimate,
            comparison.difference_se,
            comparison.p_value,
            comparison.statistical_method,
            comparison.ci_lower_limit,
            comparison.ci_upper_limit,
            comparison.ci_pct_value,
        ]
        for comparison in comparisons
    ]
    return rows_to_csv(records, COMPARISON_COLUMNS)


def rows_to_json(rows):
    """Any view as pretty-printed JSON."""
    return json.dumps([asdict(row) for row in rows], indent=2, ensure_ascii=False)


CSV_EXPORTERS = {
    "studies": studies_to_csv,
    "outcomes": outcome_measures_to_csv,
    "comparisons": comparisons_to_csv,
}


def generate_filename(view, fmt, now=None):
    """
    Build an export filename.

    Args:
        view: "studies", "outcomes" or "comparisons"
        fmt: "csv" or "json"
        now: Timestamp to use (defaults to the current local time)

    Returns:
        Filename like clinical-trials-studies-2025-01-31-142501.csv
    """
    now = now or datetime.now()
    return f"clinical-trials-{view}-{now:%Y-%m-%d-%H%M%S}.{fmt}"


def export_view(view, rows, fmt="csv", now=None):
    """
    Render a view for download.

    Args:
        view: "studies", "outcomes" or "comparisons"
        rows: Rows of that view
        fmt: "csv" or "json"
        now: Timestamp for the filename

    Returns:
        Tuple of (content, filename, mime_type)

    Raises:
        ExportError: For an unknown view or format
    """
    if view not in CSV_EXPORTERS:
        raise ExportError(f"Unknown view: {view}")
    if fmt not in MIME_TYPES:
        raise ExportError(f"Unknown export format: {fmt}")

    content = CSV_EXPORTERS[view](rows) if fmt == "csv" else rows_to_json(rows)
    return content, generate_filename(view, fmt, now), MIME_TYPES[fmt]


def save_export(view, rows, fmt="csv", output_dir=None, now=None):
    """
    Write a view export to disk.

    Returns:
        Path of the written file
    """
    content, filename, _ = export_view(view, rows, fmt, now)

    output_dir = output_dir or get_exports_dir()
    os.makedirs(output_dir, exist_ok=True)

    save_path = os.path.join(output_dir, filename)
    with open(save_path, 'w', encoding='utf-8', newline='') as f:
        f.write(content)

    return save_path
