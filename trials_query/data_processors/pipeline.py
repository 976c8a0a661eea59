"""
Builds all three table views from one registry response.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from trials_query.data_processors.comparison_processor import transform_to_comparisons
from trials_query.data_processors.outcome_processor import transform_to_outcome_measures
from trials_query.data_processors.study_filter import apply_filters
from trials_query.data_processors.study_processor import transform_studies
from trials_query.models import ComparisonRow, OutcomeMeasureRow, QueryParams, StudyRow

VIEWS = ("studies", "outcomes", "comparisons")


@dataclass
class QueryViews:
    """Raw and filtered studies plus the rows of every view."""
    raw_studies: List[Dict] = field(default_factory=list)
    filtered_studies: List[Dict] = field(default_factory=list)
    studies: List[StudyRow] = field(default_factory=list)
    outcomes: List[OutcomeMeasureRow] = field(default_factory=list)
    comparisons: List[ComparisonRow] = field(default_factory=list)

    def rows(self, view):
        """Return the rows of a view by name ("studies", "outcomes" or "comparisons")."""
        if view not in VIEWS:
            raise KeyError(view)
        return getattr(self, view)


def build_views(studies: List[Dict], params: QueryParams) -> QueryViews:
    """
    Filter raw studies and derive the studies, outcomes and comparisons rows.

    The outcome and comparison rows come from the filtered raw studies, so
    they only cover studies that are also shown in the studies view.

    Args:
        studies: Raw study records returned by the registry
        params: Query parameters holding the client-side filters

    Returns:
        QueryViews for the query
    """
    filtered = apply_filters(
        studies,
        description_search=params.description_search,
        phases=params.phases,
        has_results=params.has_results,
    )

    return QueryViews(
        raw_studies=studies,
        filtered_studies=filtered,
        studies=transform_studies(filtered),
        outcomes=transform_to_outcome_measures(filtered),
        comparisons=transform_to_comparisons(filtered),
    )
