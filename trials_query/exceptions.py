"""
Exceptions raised by the Clinical Trials Query pipeline.
"""


class TrialsQueryError(Exception):
    """Base class for all pipeline errors."""


class StudyFetchError(TrialsQueryError):
    """The registry request failed (network error or non-2xx response)."""


class QueryCancelledError(TrialsQueryError):
    """The registry request was cancelled before it completed."""


class ExportError(TrialsQueryError):
    """An export was requested for an unknown view or format."""
