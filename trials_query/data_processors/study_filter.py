"""
Client-side study filters.

The registry cannot search descriptions and outcome text, match on phase
lists or restrict to studies with posted results in the way the query form
offers, so those filters run here on the raw studies. Each filter keeps the
relative order of the studies it is given and passes everything through when
its parameter is empty.
"""

from typing import Dict, Iterable, List, Optional


def _description_texts(study):
    """Yield every text the description search looks at."""
    protocol = study.get('protocolSection', {})

    description_module = protocol.get('descriptionModule', {})
    yield description_module.get('briefSummary') or ''
    yield description_module.get('detailedDescription') or ''

    outcomes_module = protocol.get('outcomesModule', {})
    outcomes = (outcomes_module.get('primaryOutcomes') or []) + (outcomes_module.get('secondaryOutcomes') or [])
    for outcome in outcomes:
        yield outcome.get('measure') or ''
        yield outcome.get('description') or ''


def filter_by_description(studies: List[Dict], search_term: Optional[str]) -> List[Dict]:
    """
    Keep studies whose summary, description or outcome text contains a term.

    Args:
        studies: Raw study records
        search_term: Text to look for, matched case-insensitively

    Returns:
        Matching studies in their original order
    """
    if not search_term:
        return studies

    term = search_term.lower()
    return [
        study for study in studies
        if any(term in text.lower() for text in _description_texts(study))
    ]


def filter_by_phases(studies: List[Dict], selected_phases: Optional[Iterable[str]]) -> List[Dict]:
    """
    Keep studies that list at least one of the selected phase codes.

    Args:
        studies: Raw study records
        selected_phases: Phase codes such as "PHASE2"; empty keeps everything

    Returns:
        Matching studies in their original order
    """
    selected = set(selected_phases or [])
    if not selected:
        return studies

    filtered_studies = []
    for study in studies:
        phases = study.get('protocolSection', {}).get('designModule', {}).get('phases') or []
        if selected.intersection(phases):
            filtered_studies.append(study)

    return filtered_studies


def filter_by_has_results(studies: List[Dict], require_results: bool) -> List[Dict]:
    """Keep only studies with posted results when require_results is set."""
    if not require_results:
        return studies
    return [study for study in studies if study.get('hasResults') is True]


def apply_filters(
    studies: List[Dict],
    description_search: Optional[str] = None,
    phases: Optional[Iterable[str]] = None,
    has_results: bool = False,
) -> List[Dict]:
    """
    Run the description, phase and has-results filters in that order.

    Args:
        studies: Raw study records returned by the registry
        description_search: Free-text term for filter_by_description
        phases: Phase codes for filter_by_phases
        has_results: Flag for filter_by_has_results

    Returns:
        Studies that pass every active filter
    """
    filtered = filter_by_description(studies, description_search)
    filtered = filter_by_phases(filtered, phases)
    filtered = filter_by_has_results(filtered, has_results)
    return filtered
