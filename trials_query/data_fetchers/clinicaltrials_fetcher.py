"""
ClinicalTrials.gov API Fetcher.

This module builds the registry query from the query form parameters and
fetches the matching studies from the ClinicalTrials.gov API v2. A fetch can
be cancelled from another thread through a CancellationToken; cancellation is
reported as QueryCancelledError, never as a fetch failure.
"""

import json
import logging
import threading
from typing import Dict, List, Optional

import requests

from trials_query.exceptions import QueryCancelledError, StudyFetchError
from trials_query.models import QueryParams

logger = logging.getLogger(__name__)


class CancellationToken:
    """Thread-safe cancellation flag for one in-flight fetch."""

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks = []

    @property
    def cancelled(self):
        return self._event.is_set()

    def cancel(self):
        """Mark the token cancelled and run the registered abort callbacks."""
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks = list(self._callbacks)
            self._callbacks.clear()

        for callback in callbacks:
            callback()

    def add_callback(self, callback):
        """Register a callback for cancel(); runs immediately if already cancelled."""
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback()

    def remove_callback(self, callback):
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def raise_if_cancelled(self):
        if self.cancelled:
            raise QueryCancelledError("Query was cancelled")


def build_query_params(params: QueryParams) -> Dict[str, str]:
    """
    Translate query form parameters into registry request parameters.

    Only the condition, status and result limit are sent to the API. The
    description search, phases and has-results flag are applied client-side
    by the study filters.

    Args:
        params: Query parameters from the form, CLI or API

    Returns:
        Dictionary of request parameters
    """
    query = {
        "format": "json",
        "pageSize": str(params.result_limit),
    }

    if params.condition:
        query["query.cond"] = params.condition

    if params.status:
        query["filter.overallStatus"] = params.status

    return query


def build_query_url(params: QueryParams, base_url: Optional[str] = None) -> str:
    """Return the full request URL for display purposes."""
    request = requests.Request("GET", base_url or ClinicalTrialsFetcher.BASE_URL, params=build_query_params(params))
    return request.prepare().url


class ClinicalTrialsFetcher:
    """Fetch clinical trial data from ClinicalTrials.gov API v2."""

    BASE_URL = "https://clinicaltrials.gov/api/v2/studies"

    def __init__(self, base_url=None, timeout=30, chunk_size=65536, session=None):
        """
        Initialize the fetcher.

        Args:
            base_url: Studies endpoint (defaults to BASE_URL)
            timeout: Request timeout in seconds
            chunk_size: Bytes read between cancellation checks
            session: Optional requests.Session to reuse; a new one is opened
                for every fetch otherwise
        """
        self.base_url = base_url or self.BASE_URL
        self.timeout = timeout
        self.chunk_size = chunk_size
        self.session = session

    @classmethod
    def from_config(cls, config):
        """Create a fetcher from the "clinicaltrials" config section."""
        ct_config = config.get("clinicaltrials", {})
        return cls(
            base_url=ct_config.get("api_url"),
            timeout=ct_config.get("timeout", 30),
            chunk_size=ct_config.get("chunk_size", 65536),
        )

    def fetch_studies(self, params: QueryParams, token: Optional[CancellationToken] = None) -> List[Dict]:
        """
        Fetch the studies matching the query parameters.

        Args:
            params: Query parameters
            token: Optional cancellation token

        Returns:
            List of raw study records

        Raises:
            StudyFetchError: On network errors, non-2xx responses or invalid JSON
            QueryCancelledError: When the token is cancelled before completion
        """
        token = token or CancellationToken()
        token.raise_if_cancelled()

        session = self.session or requests.Session()
        token.add_callback(session.close)

        query = build_query_params(params)
        logger.info(f"Fetching studies with parameters: {query}")

        try:
            body = self._read_body(session, query, token)
        except requests.exceptions.RequestException as e:
            # Closing the session on cancel surfaces as a transport error
            if token.cancelled:
                raise QueryCancelledError("Query was cancelled") from e
            logger.error(f"Error fetching clinical trials: {e}")
            raise StudyFetchError(str(e)) from e
        finally:
            token.remove_callback(session.close)
            if session is not self.session:
                session.close()

        try:
            data = json.loads(body)
        except ValueError as e:
            raise StudyFetchError(f"Invalid JSON in API response: {e}") from e

        studies = data.get("studies") or []
        logger.info(f"Found {len(studies)} studies.")
        return studies

    def _read_body(self, session, query, token):
        """Send the request and read the response body, checking the token between chunks."""
        response = session.get(self.base_url, params=query, stream=True, timeout=self.timeout)
        try:
            if not response.ok:
                logger.error(f"URL attempted: {response.url}")
                raise StudyFetchError(f"API request failed: {response.status_code} {response.reason}")

            chunks = []
            for chunk in response.iter_content(chunk_size=self.chunk_size):
                token.raise_if_cancelled()
                chunks.append(chunk)
            token.raise_if_cancelled()
        finally:
            response.close()

        return b"".join(chunks)
