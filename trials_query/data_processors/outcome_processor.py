"""
Outcome measure processor for the Clinical Trials Query pipeline.

Turns the outcome measures of studies with posted results into one row per
measure, with one headline measurement per reporting group.

Only the first denominator and the first category of the first class are
read. The registry allows further denominators (e.g. units other than
participants) and further classes/categories (subgroup breakdowns); those are ignored,
so each group contributes a single headline value.
"""

import logging
from typing import Dict, List

from trials_query.data_processors.common import iter_result_measures
from trials_query.models import GroupMeasurement, OutcomeMeasureRow

logger = logging.getLogger(__name__)


def _participant_counts(measure):
    """Map group id to participant count using the first denominator only."""
    counts = {}

    denoms = measure.get('denoms') or []
    if not denoms:
        return counts

    for count in denoms[0].get('counts') or []:
        counts[count.get('groupId')] = count.get('value')

    return counts


def _headline_measurements(measure):
    """Map group id to (estimate, se) from the first class's first category."""
    measurements = {}

    classes = measure.get('classes') or []
    if not classes:
        return measurements

    categories = classes[0].get('categories') or []
    if not categories:
        return measurements

    for measurement in categories[0].get('measurements') or []:
        measurements[measurement.get('groupId')] = (measurement.get('value'), measurement.get('spread'))

    return measurements


def extract_group_measurements(measure: Dict) -> List[GroupMeasurement]:
    """
    Combine group names, participant counts, estimates and standard errors.

    Groups, denominators and measurements are joined by group id, never by
    position. Every group of the measure gets an entry, in the measure's own
    order, even when no count or measurement is reported for it.

    Args:
        measure: Outcome measure from resultsSection.outcomeMeasuresModule

    Returns:
        List of GroupMeasurement, empty when the measure lists no groups
    """
    groups = measure.get('groups') or []
    if not groups:
        return []

    participant_counts = _participant_counts(measure)
    measurements = _headline_measurements(measure)

    group_measurements = []
    for group in groups:
        group_id = group.get('id')
        estimate, se = measurements.get(group_id, (None, None))
        group_measurements.append(GroupMeasurement(
            name=group.get('title'),
            n=participant_counts.get(group_id),
            estimate=estimate,
            se=se,
        ))

    return group_measurements


def transform_to_outcome_measures(studies: List[Dict], include_empty_groups: bool = True) -> List[OutcomeMeasureRow]:
    """
    Flatten the outcome measures of studies with posted results.

    Args:
        studies: Raw study records (normally already filtered)
        include_empty_groups: Emit rows for measures that list no groups

    Returns:
        One OutcomeMeasureRow per outcome measure, studies in input order and
        measures in registry order
    """
    rows = []

    for nct_id, conditions, measure in iter_result_measures(studies):
        groups = extract_group_measurements(measure)
        if not groups and not include_empty_groups:
            logger.debug(f"Skipping outcome measure without groups in {nct_id}: {measure.get('title')}")
            continue

        rows.append(OutcomeMeasureRow(
            nct_id=nct_id,
            conditions=conditions,
            outcome_type=measure.get('type'),
            endpoint=measure.get('title'),
            time_frame=measure.get('timeFrame'),
            unit_of_measure=measure.get('unitOfMeasure'),
            groups=groups,
        ))

    return rows
