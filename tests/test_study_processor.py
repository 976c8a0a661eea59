"""
Unit tests for the study processor.
"""

import pytest

from trials_query.data_processors.study_processor import format_phase, transform_studies, transform_study
from trials_query.models import StudyRow


class TestFormatPhase:

    @pytest.mark.parametrize("code, label", [
        ("PHASE1", "Phase 1"),
        ("PHASE2", "Phase 2"),
        ("PHASE4", "Phase 4"),
        ("EARLY_PHASE1", "Early Phase 1"),
        ("NA", "N/A"),
    ])
    def test_known_codes(self, code, label):
        assert format_phase(code) == label

    def test_unknown_code_passes_through(self):
        assert format_phase("PHASE_X") == "PHASE_X"
        assert format_phase("") == ""


class TestTransformStudy:

    def test_full_study(self, make_study):
        study = make_study(
            nct_id="NCT12345678",
            has_results=True,
            conditions=["Multiple System Atrophy", "Parkinson Disease"],
            identificationModule={
                "nctId": "NCT12345678",
                "briefTitle": "Short",
                "officialTitle": "A Randomized Trial of Drug X",
            },
            statusModule={
                "overallStatus": "COMPLETED",
                "startDateStruct": {"date": "2019-03", "type": "ACTUAL"},
                "completionDateStruct": {"date": "2021-11-30", "type": "ACTUAL"},
            },
            designModule={
                "studyType": "INTERVENTIONAL",
                "phases": ["PHASE2", "PHASE3"],
                "enrollmentInfo": {"count": 120, "type": "ACTUAL"},
            },
            contactsLocationsModule={"locations": [{"city": "Boston"}, {"city": "Vienna"}, {"city": "Paris"}]},
            outcomesModule={
                "primaryOutcomes": [{"measure": "UMSARS"}, {"measure": "Safety"}],
            },
            armsInterventionsModule={
                "interventions": [{"type": "DRUG", "name": "Drug X"}, {"type": "DRUG", "name": "Placebo"}],
            },
        )

        assert transform_study(study) == StudyRow(
            nct_id="NCT12345678",
            title="A Randomized Trial of Drug X",
            sponsor="Test Sponsor",
            sponsor_class="OTHER",
            phase="Phase 2, Phase 3",
            status="COMPLETED",
            location_count=3,
            has_results=True,
            conditions="Multiple System Atrophy, Parkinson Disease",
            start_date="2019-03",
            completion_date="2021-11-30",
            enrollment_count=120,
            primary_outcomes="UMSARS; Safety",
            interventions="Drug X; Placebo",
        )

    def test_missing_optional_modules_use_fallbacks(self, make_study):
        study = make_study(nct_id="NCT00000002")
        del study["protocolSection"]["identificationModule"]["briefTitle"]

        row = transform_study(study)

        assert row.nct_id == "NCT00000002"
        assert row.title == "N/A"
        assert row.phase == "N/A"
        assert row.location_count == 0
        assert row.conditions == "N/A"
        assert row.has_results is False
        assert row.start_date is None
        assert row.completion_date is None
        assert row.enrollment_count is None
        assert row.primary_outcomes is None
        assert row.interventions is None

    def test_missing_conditions_module(self, make_study):
        """A missing conditions module gives "N/A"."""
        assert transform_study(make_study()).conditions == "N/A"

    def test_empty_conditions_list(self, make_study):
        assert transform_study(make_study(conditions=[])).conditions == "N/A"

    def test_brief_title_used_without_official_title(self, make_study):
        assert transform_study(make_study(nct_id="NCT1")).title == "Brief title NCT1"

    def test_empty_official_title_falls_through(self, make_study):
        study = make_study(identificationModule={"nctId": "NCT1", "officialTitle": "", "briefTitle": "Brief"})
        assert transform_study(study).title == "Brief"

    def test_phase_list(self, make_study):
        """Two phases are formatted and joined."""
        assert transform_study(make_study(phases=["PHASE2", "PHASE3"])).phase == "Phase 2, Phase 3"

    def test_empty_phase_list(self, make_study):
        assert transform_study(make_study(phases=[])).phase == "N/A"

    def test_early_phase_and_na(self, make_study):
        assert transform_study(make_study(phases=["EARLY_PHASE1", "NA"])).phase == "Early Phase 1, N/A"

    def test_locations_module_without_locations(self, make_study):
        study = make_study(contactsLocationsModule={"centralContacts": [{"name": "Dr. Who"}]})
        assert transform_study(study).location_count == 0

    def test_design_module_without_enrollment(self, make_study):
        assert transform_study(make_study(phases=["PHASE1"])).enrollment_count is None

    def test_outcomes_module_without_primary_outcomes(self, make_study):
        study = make_study(outcomesModule={"secondaryOutcomes": [{"measure": "QoL"}]})
        assert transform_study(study).primary_outcomes is None

    def test_missing_has_results_is_false(self, make_study):
        study = make_study()
        del study["hasResults"]
        assert transform_study(study).has_results is False


class TestTransformStudies:

    def test_preserves_order(self, make_study):
        studies = [make_study(nct_id=f"NCT0000000{i}") for i in range(3)]
        assert [row.nct_id for row in transform_studies(studies)] == ["NCT00000000", "NCT00000001", "NCT00000002"]

    def test_empty_input(self):
        assert transform_studies([]) == []

    def test_idempotent(self, make_study):
        studies = [make_study(conditions=["MSA"], phases=["PHASE3"])]
        assert transform_studies(studies) == transform_studies(studies)
