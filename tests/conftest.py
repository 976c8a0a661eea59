"""Shared pytest fixtures for the Clinical Trials Query test suite."""

import pytest


def _make_study(nct_id="NCT00000001", has_results=False, conditions=None, phases=None,
                outcome_measures=None, results_section=None, **modules):
    """Build a minimal raw study; extra keyword arguments become protocol modules."""
    protocol = {
        "identificationModule": {"nctId": nct_id, "briefTitle": f"Brief title {nct_id}"},
        "statusModule": {"overallStatus": "COMPLETED"},
        "sponsorCollaboratorsModule": {"leadSponsor": {"name": "Test Sponsor", "class": "OTHER"}},
    }
    if conditions is not None:
        protocol["conditionsModule"] = {"conditions": conditions}
    if phases is not None:
        protocol["designModule"] = {"studyType": "INTERVENTIONAL", "phases": phases}
    protocol.update(modules)

    study = {"protocolSection": protocol, "hasResults": has_results}
    if outcome_measures is not None:
        study["resultsSection"] = {"outcomeMeasuresModule": {"outcomeMeasures": outcome_measures}}
    elif results_section is not None:
        study["resultsSection"] = results_section
    return study


@pytest.fixture
def make_study():
    """Factory for raw study records."""
    return _make_study


@pytest.fixture(autouse=True)
def clear_env_overrides(monkeypatch):
    """Keep a developer's .env or shell settings out of the tests."""
    for name in ("CT_API_URL", "CT_REQUEST_TIMEOUT", "LOG_LEVEL", "CT_EXPORT_DIR"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("trials_query.config.load_dotenv", lambda *args, **kwargs: False)


@pytest.fixture
def three_arm_measure():
    """Primary outcome of a three-arm trial with two contrasts against placebo."""
    return {
        "type": "PRIMARY",
        "title": "Change in UMSARS",
        "timeFrame": "12 weeks",
        "unitOfMeasure": "points",
        "groups": [
            {"id": "OG000", "title": "Low Dose"},
            {"id": "OG001", "title": "High Dose"},
            {"id": "OG002", "title": "Placebo"},
        ],
        "denoms": [
            {
                "units": "Participants",
                "counts": [
                    {"groupId": "OG000", "value": 50},
                    {"groupId": "OG001", "value": 49},
                    {"groupId": "OG002", "value": 48},
                ],
            },
        ],
        "classes": [
            {
                "categories": [
                    {
                        "measurements": [
                            {"groupId": "OG000", "value": "-4.1", "spread": "1.2"},
                            {"groupId": "OG001", "value": "-5.2", "spread": "1.1"},
                            {"groupId": "OG002", "value": "-1.3", "spread": "1.0"},
                        ],
                    },
                ],
            },
        ],
        "analyses": [
            {
                "groupIds": ["OG000", "OG002"],
                "paramValue": -2.8,
                "dispersionValue": 1.4,
                "pValue": "0.04",
                "statisticalMethod": "ANCOVA",
                "ciLowerLimit": "-5.5",
                "ciUpperLimit": "-0.1",
                "ciPctValue": "95",
            },
            {
                "groupIds": ["OG001", "OG002"],
                "paramValue": -3.9,
                "dispersionValue": 1.5,
                "pValue": "0.009",
                "statisticalMethod": "ANCOVA",
                "ciLowerLimit": "-6.8",
                "ciUpperLimit": "-1.0",
                "ciPctValue": "95",
            },
        ],
    }
