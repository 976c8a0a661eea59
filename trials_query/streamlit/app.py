"""
Streamlit frontend for Clinical Trials Query.

Run with: streamlit run trials_query/streamlit/app.py
"""

import time
from dataclasses import asdict

import pandas as pd
import streamlit as st

from trials_query.config import load_config
from trials_query.data_fetchers.clinicaltrials_fetcher import ClinicalTrialsFetcher, build_query_url
from trials_query.data_fetchers.study_query import StudyQuery
from trials_query.models import QueryParams
from trials_query.utils.export import export_view
from trials_query.utils.logging_setup import setup_logging

PHASE_OPTIONS = {
    "EARLY_PHASE1": "Early Phase 1",
    "PHASE1": "Phase 1",
    "PHASE2": "Phase 2",
    "PHASE3": "Phase 3",
    "PHASE4": "Phase 4",
    "NA": "N/A",
}

STATUS_OPTIONS = {
    "ALL": "All",
    "RECRUITING": "Recruiting",
    "ACTIVE_NOT_RECRUITING": "Active, not recruiting",
    "COMPLETED": "Completed",
    "TERMINATED": "Terminated",
    "SUSPENDED": "Suspended",
    "WITHDRAWN": "Withdrawn",
}

RESULT_LIMIT_OPTIONS = [100, 500, 1000]

VIEW_LABELS = {
    "studies": "Studies",
    "outcomes": "Outcome Measures",
    "comparisons": "Comparisons",
}

config = load_config()
setup_logging(config)

# ---- THEME CONFIGURATION ----
st.set_page_config(
    page_title="Clinical Trials Query",
    page_icon="🔬",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        color: #1E88E5;
        font-weight: 700;
    }

    .section-header {
        font-size: 1.5rem;
        font-weight: 600;
        color: #1565C0;
        margin-top: 1rem;
        margin-bottom: 1rem;
        padding-bottom: 0.5rem;
        border-bottom: 1px solid #E0E0E0;
    }

    .metric-label {
        font-size: 1rem;
        color: #555;
        font-weight: 400;
    }

    .metric-value {
        font-size: 2.2rem;
        font-weight: 700;
        color: #1E88E5;
    }
</style>
""", unsafe_allow_html=True)

# ---- HELPER FUNCTIONS ----

def get_study_query():
    """One StudyQuery per browser session, so a new query cancels the previous one."""
    if "study_query" not in st.session_state:
        st.session_state.study_query = StudyQuery(ClinicalTrialsFetcher.from_config(config))
    return st.session_state.study_query

def format_groups(groups):
    """Render group measurements as one readable cell."""
    parts = []
    for group in groups:
        text = group.name or ""
        if group.n is not None:
            text += f" (n={group.n})"
        if group.estimate is not None:
            text += f": {group.estimate}"
            if group.se is not None:
                text += f" ± {group.se}"
        parts.append(text)
    return "; ".join(parts)

def view_dataframe(view, rows):
    """Convert the rows of a view into a DataFrame for display."""
    if view != "outcomes":
        return pd.DataFrame([asdict(row) for row in rows])

    records = []
    for row in rows:
        record = asdict(row)
        record["groups"] = format_groups(row.groups)
        records.append(record)
    return pd.DataFrame(records)

def metric_card(column, label, value):
    with column:
        st.markdown(f"<div class='metric-label'>{label}</div>", unsafe_allow_html=True)
        st.markdown(f"<div class='metric-value'>{value}</div>", unsafe_allow_html=True)

# ---- SIDEBAR & QUERY FORM ----
study_query = get_study_query()

with st.sidebar:
    st.markdown("<h1 style='text-align: center;'>Query Parameters</h1>", unsafe_allow_html=True)
    st.markdown("---")

    with st.form("query_form"):
        condition = st.text_input("Condition", placeholder="e.g. Multiple System Atrophy")
        description_search = st.text_input(
            "Description search",
            help="Matched against summaries, descriptions and outcome measures"
        )
        status = st.selectbox(
            "Status",
            list(STATUS_OPTIONS),
            format_func=lambda code: STATUS_OPTIONS[code]
        )
        has_results = st.checkbox("Only studies with results", value=False)
        phases = st.multiselect(
            "Phases",
            list(PHASE_OPTIONS),
            format_func=lambda code: PHASE_OPTIONS[code]
        )
        result_limit = st.selectbox("Result limit", RESULT_LIMIT_OPTIONS, index=0)
        submitted = st.form_submit_button("Run Query")

    if st.button("Cancel Query"):
        if study_query.cancel_query():
            st.info("Query cancelled.")
        else:
            st.info("No query in progress.")

if submitted:
    params = QueryParams(
        condition=condition or None,
        description_search=description_search or None,
        status=None if status == "ALL" else status,
        has_results=has_results,
        phases=phases,
        result_limit=result_limit,
    )
    st.session_state.last_params = params
    st.session_state.last_query_url = build_query_url(params, config["clinicaltrials"]["api_url"])

    # The worker thread is polled at the end of the script
    study_query.start_query(params)

# ---- MAIN CONTENT ----
st.markdown("<h1 class='main-header'>Clinical Trials Query</h1>", unsafe_allow_html=True)
st.markdown("<p>Search and analyze clinical trial data from ClinicalTrials.gov</p>", unsafe_allow_html=True)

if st.session_state.get("last_query_url"):
    with st.expander("Show API Query"):
        st.code(st.session_state.last_query_url, language=None)

if study_query.is_loading:
    st.info("⏳ Querying ClinicalTrials.gov... Use Cancel Query in the sidebar to stop.")

if study_query.error:
    st.error(f"❌ {study_query.error}")

views = study_query.views
last_params = st.session_state.get("last_params")

if last_params is None:
    st.info("ℹ️ Enter query parameters in the sidebar and run a query.")
else:
    st.markdown("<h2 class='section-header'>Key Metrics</h2>", unsafe_allow_html=True)
    col1, col2, col3, col4 = st.columns(4)
    metric_card(col1, "Studies Returned", len(views.raw_studies))
    metric_card(col2, "After Filters", len(views.studies))
    metric_card(col3, "Outcome Measures", len(views.outcomes))
    metric_card(col4, "Comparisons", len(views.comparisons))

    # Outcome and comparison tables are offered for results-only queries
    available_views = ["studies", "outcomes", "comparisons"] if last_params.has_results else ["studies"]
    view = st.radio(
        "Table view",
        available_views,
        format_func=lambda v: VIEW_LABELS[v],
        horizontal=True
    )

    rows = views.rows(view)
    st.markdown(f"<h2 class='section-header'>{VIEW_LABELS[view]}</h2>", unsafe_allow_html=True)

    if rows:
        st.dataframe(view_dataframe(view, rows), use_container_width=True, hide_index=True)
    else:
        st.warning("⚠️ No rows for this view.")

    col1, col2 = st.columns(2)
    for column, fmt in ((col1, "csv"), (col2, "json")):
        content, filename, mime_type = export_view(view, rows, fmt)
        with column:
            st.download_button(
                label=f"Download {fmt.upper()}",
                data=content.encode('utf-8'),
                file_name=filename,
                mime=mime_type,
                disabled=not rows
            )

# Rerun until the background query finishes or is cancelled
if study_query.is_loading:
    time.sleep(0.5)
    st.rerun()
