"""
Field access shared by the study, outcome and comparison processors.
"""

from typing import Dict, Iterator, List, Tuple

NOT_AVAILABLE = "N/A"


def get_nct_id(study):
    """Return the registry identifier of a raw study."""
    protocol = study.get('protocolSection', {})
    return protocol.get('identificationModule', {}).get('nctId')


def join_conditions(study):
    """
    Join a study's conditions into one display string.

    Args:
        study: Raw study record

    Returns:
        Conditions joined with ", ", or "N/A" when the conditions module is
        missing or lists nothing
    """
    protocol = study.get('protocolSection', {})
    conditions = protocol.get('conditionsModule', {}).get('conditions') or []
    return ", ".join(conditions) or NOT_AVAILABLE


def iter_result_measures(studies: List[Dict]) -> Iterator[Tuple[str, str, Dict]]:
    """
    Walk the published outcome measures of every qualifying study.

    A study qualifies when it reports hasResults and carries a results
    section with an outcome measures module. Studies are visited in the
    order given and measures in the order the registry lists them.

    Yields:
        (nct_id, conditions, outcome_measure) tuples
    """
    for study in studies:
        if study.get('hasResults') is not True:
            continue

        results_section = study.get('resultsSection')
        if not results_section:
            continue

        outcome_module = results_section.get('outcomeMeasuresModule')
        if not outcome_module:
            continue

        nct_id = get_nct_id(study)
        conditions = join_conditions(study)

        for measure in outcome_module.get('outcomeMeasures', []):
            yield nct_id, conditions, measure
