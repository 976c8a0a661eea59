"""
Data models for the Clinical Trials Query pipeline.

Raw studies stay plain dictionaries exactly as the registry returns them.
Everything derived from them is a dataclass so that the three table views
have a fixed shape for display and export.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class QueryParams:
    """Parameters for one registry query."""
    condition: Optional[str] = None
    description_search: Optional[str] = None
    status: Optional[str] = None
    has_results: bool = False
    phases: List[str] = field(default_factory=list)
    result_limit: int = 100


@dataclass
class StudyRow:
    """One row of the studies view."""
    nct_id: str
    title: str
    sponsor: Optional[str]
    sponsor_class: Optional[str]
    phase: str
    status: Optional[str]
    location_count: int
    has_results: bool
    conditions: str
    start_date: Optional[str] = None
    completion_date: Optional[str] = None
    enrollment_count: Optional[int] = None
    primary_outcomes: Optional[str] = None
    interventions: Optional[str] = None


@dataclass
class GroupMeasurement:
    """Headline measurement of one group within an outcome measure."""
    name: str
    n: Optional[int] = None
    estimate: Optional[str] = None
    se: Optional[str] = None


@dataclass
class OutcomeMeasureRow:
    """One row of the outcome measures view."""
    nct_id: str
    conditions: str
    outcome_type: Optional[str]
    endpoint: Optional[str]
    time_frame: Optional[str]
    unit_of_measure: Optional[str] = None
    groups: List[GroupMeasurement] = field(default_factory=list)


@dataclass
class ComparisonRow:
    """One row of the comparisons view (a single two-group analysis)."""
    nct_id: str
    conditions: str
    outcome_type: Optional[str]
    endpoint: Optional[str]
    time_frame: Optional[str]
    group1_name: str
    group2_name: str
    difference_estimate: Optional[str] = None
    difference_se: Optional[str] = None
    p_value: Optional[str] = None
    statistical_method: Optional[str] = None
    ci_lower_limit: Optional[str] = None
    ci_upper_limit: Optional[str] = None
    ci_pct_value: Optional[str] = None
