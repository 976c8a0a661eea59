"""
Registry access: request building, fetching and query orchestration.
"""

from trials_query.data_fetchers.clinicaltrials_fetcher import (
    CancellationToken,
    ClinicalTrialsFetcher,
    build_query_params,
    build_query_url,
)
from trials_query.data_fetchers.study_query import StudyQuery

__all__ = [
    'CancellationToken',
    'ClinicalTrialsFetcher',
    'StudyQuery',
    'build_query_params',
    'build_query_url',
]
