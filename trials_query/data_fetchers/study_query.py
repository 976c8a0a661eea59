"""
Query orchestration: one registry request in flight at a time.
"""

import logging
import threading
from typing import Optional

from trials_query.data_fetchers.clinicaltrials_fetcher import CancellationToken, ClinicalTrialsFetcher
from trials_query.data_processors.pipeline import QueryViews, build_views
from trials_query.exceptions import QueryCancelledError, StudyFetchError
from trials_query.models import QueryParams

logger = logging.getLogger(__name__)


class StudyQuery:
    """
    Runs queries against the registry and keeps the latest results.

    Starting a query cancels the one still in flight. A cancelled query
    leaves error unset, and a query that has been superseded never writes
    its results over those of the newer query.
    """

    def __init__(self, fetcher: Optional[ClinicalTrialsFetcher] = None):
        self.fetcher = fetcher or ClinicalTrialsFetcher()
        self.is_loading = False
        self.error = None
        self.views = QueryViews()
        self._token = None
        self._lock = threading.Lock()

    @property
    def results(self):
        """Raw studies returned by the last completed query."""
        return self.views.raw_studies

    @property
    def filtered_results(self):
        """Studies rows of the last completed query."""
        return self.views.studies

    def _activate(self):
        """Make a fresh token current and cancel the one it replaces."""
        token = CancellationToken()
        with self._lock:
            previous = self._token
            self._token = token
            self.is_loading = True
            self.error = None

        if previous is not None:
            previous.cancel()
        return token

    def execute_query(self, params: QueryParams) -> QueryViews:
        """
        Fetch, filter and transform the studies for a query.

        Args:
            params: Query parameters

        Returns:
            The views held after the query finished (the previous views when
            the query was cancelled or failed)
        """
        return self._run(params, self._activate())

    def start_query(self, params: QueryParams) -> threading.Thread:
        """
        Run a query on a background thread.

        The query is current, and is_loading set, before this returns, so
        cancel_query() can abort it right away.

        Returns:
            The started worker thread
        """
        token = self._activate()
        worker = threading.Thread(target=self._run, args=(params, token), daemon=True)
        worker.start()
        return worker

    def _run(self, params, token):
        try:
            studies = self.fetcher.fetch_studies(params, token=token)
            views = build_views(studies, params)
        except QueryCancelledError:
            logger.info("Query cancelled")
            return self.views
        except StudyFetchError as e:
            with self._lock:
                if self._token is token:
                    self.error = str(e)
            return self.views
        finally:
            with self._lock:
                if self._token is token:
                    self.is_loading = False

        with self._lock:
            if self._token is token and not token.cancelled:
                self.views = views
        return self.views

    def cancel_query(self):
        """
        Abort the outstanding request, if any.

        Returns:
            True when a query was still in flight
        """
        with self._lock:
            token = self._token
            in_flight = token is not None and self.is_loading
            self._token = None
            self.is_loading = False

        if token is not None:
            token.cancel()
        return in_flight
