"""
FastAPI backend for Clinical Trials Query.

Every view endpoint runs a fresh registry query; nothing is cached between
requests.
"""

import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from trials_query.config import load_config
from trials_query.data_fetchers.clinicaltrials_fetcher import ClinicalTrialsFetcher, build_query_url
from trials_query.data_processors.pipeline import QueryViews, build_views
from trials_query.exceptions import StudyFetchError
from trials_query.models import QueryParams
from trials_query.utils.export import export_view, rows_to_json

logger = logging.getLogger(__name__)

config = load_config()

# Create FastAPI app
app = FastAPI(title="Clinical Trials Query API",
              description="Studies, outcome measures and comparisons from ClinicalTrials.gov")

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # For development - restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_fetcher():
    """Fetcher dependency, configured from config/config.json and the environment."""
    return ClinicalTrialsFetcher.from_config(config)


def get_query_params(
    condition: Optional[str] = None,
    description_search: Optional[str] = None,
    status: Optional[str] = None,
    has_results: bool = False,
    phases: Optional[List[str]] = Query(None),
    result_limit: int = Query(config["clinicaltrials"]["default_result_limit"], ge=1, le=1000),
):
    """Collect the query parameters shared by all view endpoints."""
    return QueryParams(
        condition=condition or None,
        description_search=description_search or None,
        status=None if status in (None, "", "ALL") else status,
        has_results=has_results,
        phases=phases or [],
        result_limit=result_limit,
    )


def run_query(params: QueryParams, fetcher: ClinicalTrialsFetcher) -> QueryViews:
    """Fetch and build the views, turning fetch failures into 502 responses."""
    try:
        studies = fetcher.fetch_studies(params)
    except StudyFetchError as e:
        logger.error(f"Registry query failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    return build_views(studies, params)


def json_rows(rows):
    return Response(content=rows_to_json(rows), media_type="application/json")


# API routes
@app.get("/")
def read_root():
    return {"message": "Welcome to the Clinical Trials Query API"}

@app.get("/health")
def health_check():
    """Check that the API is up."""
    return {"status": "healthy", "registry_url": config["clinicaltrials"]["api_url"]}

@app.get("/query-url")
def get_query_url(params: QueryParams = Depends(get_query_params)):
    """Return the registry URL a query would request."""
    return {"url": build_query_url(params, config["clinicaltrials"]["api_url"])}

@app.get("/studies")
def get_studies(params: QueryParams = Depends(get_query_params),
                fetcher: ClinicalTrialsFetcher = Depends(get_fetcher)):
    """Get the studies view for a query."""
    return json_rows(run_query(params, fetcher).studies)

@app.get("/outcomes")
def get_outcomes(params: QueryParams = Depends(get_query_params),
                 fetcher: ClinicalTrialsFetcher = Depends(get_fetcher)):
    """Get the outcome measures view for a query."""
    return json_rows(run_query(params, fetcher).outcomes)

@app.get("/comparisons")
def get_comparisons(params: QueryParams = Depends(get_query_params),
                    fetcher: ClinicalTrialsFetcher = Depends(get_fetcher)):
    """Get the comparisons view for a query."""
    return json_rows(run_query(params, fetcher).comparisons)

@app.get("/export/{view}")
def export(view: str,
           format: str = Query("csv", pattern="^(csv|json)$"),
           params: QueryParams = Depends(get_query_params),
           fetcher: ClinicalTrialsFetcher = Depends(get_fetcher)):
    """Download a view as CSV or JSON."""
    if view not in ("studies", "outcomes", "comparisons"):
        raise HTTPException(status_code=404, detail=f"Unknown view: {view}")

    views = run_query(params, fetcher)
    content, filename, mime_type = export_view(view, views.rows(view), format)
    return Response(
        content=content,
        media_type=mime_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

# Run with: uvicorn trials_query.api.main:app --reload
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("trials_query.api.main:app", host="0.0.0.0", port=8000, reload=True)
