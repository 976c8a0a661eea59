"""
Transformers that flatten raw ClinicalTrials.gov studies into table rows.
"""

from trials_query.data_processors.comparison_processor import transform_to_comparisons
from trials_query.data_processors.outcome_processor import extract_group_measurements, transform_to_outcome_measures
from trials_query.data_processors.pipeline import QueryViews, build_views
from trials_query.data_processors.study_filter import (
    apply_filters,
    filter_by_description,
    filter_by_has_results,
    filter_by_phases,
)
from trials_query.data_processors.study_processor import format_phase, transform_studies, transform_study

__all__ = [
    'QueryViews',
    'apply_filters',
    'build_views',
    'extract_group_measurements',
    'filter_by_description',
    'filter_by_has_results',
    'filter_by_phases',
    'format_phase',
    'transform_studies',
    'transform_study',
    'transform_to_comparisons',
    'transform_to_outcome_measures',
]
