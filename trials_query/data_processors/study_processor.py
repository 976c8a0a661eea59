"""
Study processor for the Clinical Trials Query pipeline.

Flattens one raw ClinicalTrials.gov study into one row of the studies view.
Every optional module falls back to a fixed value ("N/A", None or 0) so the
transform never fails on a structurally valid study.
"""

import re
from typing import Dict, List

from trials_query.data_processors.common import NOT_AVAILABLE, get_nct_id, join_conditions
from trials_query.models import StudyRow

PHASE_PATTERN = re.compile(r'PHASE(\d+)')


def format_phase(phase):
    """
    Convert a registry phase code into its display label.

    Args:
        phase: Phase code such as "PHASE2", "EARLY_PHASE1" or "NA"

    Returns:
        "Phase 2", "Early Phase 1", "N/A", or the code unchanged when it is
        not recognized
    """
    if phase == 'EARLY_PHASE1':
        return 'Early Phase 1'
    if phase == 'NA':
        return NOT_AVAILABLE

    match = PHASE_PATTERN.fullmatch(phase)
    if match:
        return f"Phase {match.group(1)}"

    return phase


def transform_study(study: Dict) -> StudyRow:
    """
    Transform a raw study into a studies row.

    Args:
        study: Raw study record from the registry

    Returns:
        StudyRow with the documented fallbacks applied
    """
    protocol = study.get('protocolSection', {})

    id_module = protocol.get('identificationModule', {})
    title = id_module.get('officialTitle') or id_module.get('briefTitle') or NOT_AVAILABLE

    lead_sponsor = protocol.get('sponsorCollaboratorsModule', {}).get('leadSponsor', {})

    design_module = protocol.get('designModule', {})
    phases = design_module.get('phases') or []
    phase = ", ".join(format_phase(p) for p in phases) if phases else NOT_AVAILABLE

    status_module = protocol.get('statusModule', {})

    locations = protocol.get('contactsLocationsModule', {}).get('locations') or []

    enrollment_count = design_module.get('enrollmentInfo', {}).get('count')

    # None when the module does not list primary outcomes at all
    primary_outcomes = protocol.get('outcomesModule', {}).get('primaryOutcomes')
    if primary_outcomes is not None:
        primary_outcomes = "; ".join(o.get('measure', '') for o in primary_outcomes)

    interventions = protocol.get('armsInterventionsModule', {}).get('interventions')
    if interventions is not None:
        interventions = "; ".join(i.get('name', '') for i in interventions)

    return StudyRow(
        nct_id=get_nct_id(study),
        title=title,
        sponsor=lead_sponsor.get('name'),
        sponsor_class=lead_sponsor.get('class'),
        phase=phase,
        status=status_module.get('overallStatus'),
        location_count=len(locations),
        has_results=study.get('hasResults') is True,
        conditions=join_conditions(study),
        start_date=status_module.get('startDateStruct', {}).get('date'),
        completion_date=status_module.get('completionDateStruct', {}).get('date'),
        enrollment_count=enrollment_count,
        primary_outcomes=primary_outcomes,
        interventions=interventions,
    )


def transform_studies(studies: List[Dict]) -> List[StudyRow]:
    """Transform raw studies into studies rows, keeping their order."""
    return [transform_study(study) for study in studies]
