"""
Clinical Trials Query.

Queries the ClinicalTrials.gov v2 API, filters the returned studies on the
client side and flattens them into studies, outcome measures and pairwise
comparison tables.
"""

__version__ = "0.1.0"
