"""
Main entry point for the Clinical Trials Query pipeline.

Queries ClinicalTrials.gov, applies the client-side filters and writes the
requested table views to the exports directory.
"""

import argparse
import sys

from trials_query.config import load_config
from trials_query.data_fetchers.clinicaltrials_fetcher import ClinicalTrialsFetcher, build_query_url
from trials_query.data_processors.pipeline import VIEWS, build_views
from trials_query.exceptions import StudyFetchError
from trials_query.models import QueryParams
from trials_query.utils.export import save_export
from trials_query.utils.logging_setup import setup_logging


def parse_args(argv=None, config=None):
    """Parse command line arguments."""
    config = config or {}
    default_limit = config.get("clinicaltrials", {}).get("default_result_limit", 100)

    parser = argparse.ArgumentParser(description="Query ClinicalTrials.gov and export flattened tables")
    parser.add_argument("--condition", help="Condition or disease to search for")
    parser.add_argument("--search", dest="description_search",
                        help="Text to find in descriptions and outcome measures")
    parser.add_argument("--status", help="Overall status code, e.g. COMPLETED (ALL for any)")
    parser.add_argument("--has-results", action="store_true",
                        help="Keep only studies with posted results")
    parser.add_argument("--phase", dest="phases", action="append", default=[],
                        help="Phase code such as PHASE2; repeat for several phases")
    parser.add_argument("--limit", dest="result_limit", type=int, default=default_limit,
                        help="Maximum number of studies to request")
    parser.add_argument("--view", dest="views", action="append", choices=VIEWS,
                        help="View to export; repeat for several (default: all)")
    parser.add_argument("--format", dest="fmt", choices=["csv", "json"], default="csv",
                        help="Export format")
    parser.add_argument("--output-dir", help="Directory for the exported files")
    return parser.parse_args(argv)


def params_from_args(args):
    """Build QueryParams from parsed arguments."""
    return QueryParams(
        condition=args.condition or None,
        description_search=args.description_search or None,
        status=None if args.status in (None, "", "ALL") else args.status,
        has_results=args.has_results,
        phases=args.phases,
        result_limit=args.result_limit,
    )


def main(argv=None):
    """Main entry point for the pipeline."""
    config = load_config()
    setup_logging(config)

    args = parse_args(argv, config)
    params = params_from_args(args)

    fetcher = ClinicalTrialsFetcher.from_config(config)
    print(f"Querying {build_query_url(params, fetcher.base_url)}")

    try:
        studies = fetcher.fetch_studies(params)
    except StudyFetchError as e:
        print(f"Error fetching clinical trials: {e}", file=sys.stderr)
        return 1

    views = build_views(studies, params)
    print(f"Retrieved {len(views.raw_studies)} studies, {len(views.filtered_studies)} after filters.")
    print(f"Derived {len(views.outcomes)} outcome measures and {len(views.comparisons)} comparisons.")

    output_dir = args.output_dir or config["exports"]["output_dir"]
    for view in args.views or VIEWS:
        rows = views.rows(view)
        if not rows:
            print(f"   No {view} rows to export.")
            continue
        save_path = save_export(view, rows, args.fmt, output_dir=output_dir)
        print(f"   Saved {len(rows)} {view} rows to {save_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
