"""
Comparison processor for the Clinical Trials Query pipeline.

Each statistical analysis of an outcome measure that contrasts exactly two
reporting groups becomes one comparison row. Group names follow the order in
which the analysis lists its group ids; no sorting and no de-duplication is
applied, so A-vs-B and B-vs-A from two separate analyses both appear.
"""

import logging
from decimal import Decimal
from typing import Dict, List

from trials_query.data_processors.common import iter_result_measures
from trials_query.models import ComparisonRow

logger = logging.getLogger(__name__)


def format_decimal(value):
    """
    Render a numeric analysis value as its canonical decimal string.

    Integral floats drop the trailing ".0" (5.0 -> "5"). Other floats use
    the shortest representation that round-trips, written positionally for
    magnitudes from 1e-6 up to 1e21 (0.00001 -> "0.00001") and with a
    signed exponent outside that range (2.5e-07 -> "2.5e-7"). Strings are
    returned untouched and None stays None.
    """
    if value is None or isinstance(value, str):
        return value
    if not isinstance(value, float):
        return str(value)

    magnitude = abs(value)
    if value.is_integer() and magnitude < 1e21:
        return str(int(value))

    text = repr(value)
    if 1e-6 <= magnitude < 1e21:
        return format(Decimal(text), 'f')
    if 'e' not in text:
        return text

    mantissa, exponent = text.split('e')
    return f"{mantissa}e{int(exponent):+d}"


def extract_comparisons(nct_id: str, conditions: str, measure: Dict) -> List[ComparisonRow]:
    """
    Extract the pairwise comparisons of a single outcome measure.

    Analyses that do not reference exactly two groups, or whose group ids
    are not among the measure's groups, are skipped.

    Args:
        nct_id: Registry identifier of the owning study
        conditions: Display conditions of the owning study
        measure: Outcome measure from resultsSection.outcomeMeasuresModule

    Returns:
        List of ComparisonRow in analysis order
    """
    analyses = measure.get('analyses') or []
    groups = measure.get('groups') or []
    if not analyses or not groups:
        return []

    group_names = {group.get('id'): group.get('title') for group in groups}

    comparisons = []
    for analysis in analyses:
        group_ids = analysis.get('groupIds') or []
        if len(group_ids) != 2:
            logger.debug(f"Skipping analysis with {len(group_ids)} groups in {nct_id}")
            continue

        group1_name = group_names.get(group_ids[0])
        group2_name = group_names.get(group_ids[1])
        if not group1_name or not group2_name:
            logger.debug(f"Skipping analysis with unknown group ids {group_ids} in {nct_id}")
            continue

        comparisons.append(ComparisonRow(
            nct_id=nct_id,
            conditions=conditions,
            outcome_type=measure.get('type'),
            endpoint=measure.get('title'),
            time_frame=measure.get('timeFrame'),
            group1_name=group1_name,
            group2_name=group2_name,
            difference_estimate=format_decimal(analysis.get('paramValue')),
            difference_se=format_decimal(analysis.get('dispersionValue')),
            p_value=analysis.get('pValue'),
            statistical_method=analysis.get('statisticalMethod'),
            ci_lower_limit=analysis.get('ciLowerLimit'),
            ci_upper_limit=analysis.get('ciUpperLimit'),
            ci_pct_value=analysis.get('ciPctValue'),
        ))

    return comparisons


def transform_to_comparisons(studies: List[Dict]) -> List[ComparisonRow]:
    """
    Flatten the two-group analyses of studies with posted results.

    Args:
        studies: Raw study records (normally already filtered)

    Returns:
        One ComparisonRow per valid analysis, in study, measure and analysis
        order
    """
    comparisons = []
    for nct_id, conditions, measure in iter_result_measures(studies):
        comparisons.extend(extract_comparisons(nct_id, conditions, measure))
    return comparisons
