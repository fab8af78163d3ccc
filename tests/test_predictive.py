"""Tests for the hand-tuned conversion-probability model."""

from datetime import timedelta

import pytest

from leadintel.models import FactorCategory, Lead, Level
from leadintel.scoring.predictive import (
    calculate_predictive_score,
    get_leads_by_action,
    get_top_predicted_leads,
    score_all_leads_predictive,
    summarize_predictive_insights,
)
from tests.helpers import NOW


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def rich_lead():
    return Lead(
        id=1,
        institution_name="Harris County",
        institution_type="county",
        state="TX",
        email="cio@harriscounty.gov",
        phone_number="+1 713 555 0100",
        website="https://harriscounty.gov",
        population=600_000,
        tech_maturity_score=5,
        enrichment_score=80,
        pain_points=["Permit backlog", "Paper records"],
        buying_signals=["RFP for records management"],
        decision_makers=[
            {"name": "Ana Ruiz", "title": "CIO"},
            {"name": "Tom Lee", "title": "IT Director"},
            {"name": "Sam Park", "title": "Clerk"},
        ],
        recent_news=[{"title": "County approves IT budget"}],
        competitor_analysis=[{"name": "Tyler Technologies"}],
    )


@pytest.fixture
def mid_lead():
    return Lead(
        id=2,
        institution_name="Pueblo",
        institution_type="city",
        state="CO",
        email="it@pueblo.us",
        phone_number="+1 719 555 0100",
        population=200_000,
        tech_maturity_score=5,
    )


@pytest.fixture
def bare_lead():
    return Lead(id=3, institution_name="Quiet Township", institution_type="city", state="OH")


def _factor(score, name):
    return next(f for f in score.score_factors if f.name == name)


# ---------------------------------------------------------------------------
# Single lead
# ---------------------------------------------------------------------------

class TestCalculatePredictiveScore:
    def test_bare_lead(self, bare_lead):
        score = calculate_predictive_score(bare_lead, now=NOW)
        assert score.lead_id == 3
        # base 30 minus the missing decision maker
        assert score.predicted_conversion_probability == 20
        assert [f.name for f in score.score_factors] == ["No Decision Maker"]
        assert score.confidence_level == Level.low
        assert score.predicted_value == Level.low
        assert score.recommended_action == "Low priority: Review and potentially archive"
        assert score.next_best_action == "Verify data accuracy"

    def test_rich_lead_clamps_to_100(self, rich_lead):
        score = calculate_predictive_score(rich_lead, now=NOW)
        assert score.predicted_conversion_probability == 100
        assert score.confidence_level == Level.high
        assert score.predicted_value == Level.high
        assert score.recommended_action == "High Priority: Call immediately"
        assert score.next_best_action == "Send personalized intro email before call"

    def test_rich_lead_factors(self, rich_lead):
        score = calculate_predictive_score(rich_lead, now=NOW)
        assert _factor(score, "Decision Maker Identified").impact == 15
        assert _factor(score, "Multiple Contacts").impact == 12
        assert _factor(score, "Population Size").impact == 20
        assert _factor(score, "Tech Maturity Sweet Spot").impact == 12
        assert _factor(score, "Known Pain Points").impact == 16
        assert _factor(score, "Data Enrichment Quality").impact == 16
        assert _factor(score, "High Data Completeness").description == "100% of key fields populated"

        buying = _factor(score, "Buying Signals Detected")
        assert buying.impact == 20
        assert buying.category == FactorCategory.timing

    def test_factors_sorted_by_absolute_impact(self, rich_lead):
        impacts = [abs(f.impact) for f in calculate_predictive_score(rich_lead, now=NOW).score_factors]
        assert impacts == sorted(impacts, reverse=True)

    def test_medium_confidence(self, mid_lead):
        score = calculate_predictive_score(mid_lead, now=NOW)
        # 30 - 10 + 10 + 8 + 15 + 12
        assert score.predicted_conversion_probability == 65
        assert score.confidence_level == Level.medium
        assert score.predicted_value == Level.medium
        assert score.recommended_action == "Enrich data, then call"

    def test_not_interested_clamps_to_zero(self, bare_lead):
        bare_lead.last_contacted_at = NOW - timedelta(days=30)
        bare_lead.last_call_outcome = "not_interested"
        score = calculate_predictive_score(bare_lead, now=NOW)
        assert score.predicted_conversion_probability == 0
        assert _factor(score, "Previously Not Interested").impact == -25

    def test_positive_prior_contact(self, bare_lead):
        bare_lead.last_contacted_at = NOW - timedelta(days=12)
        bare_lead.last_call_outcome = "callback_scheduled"
        score = calculate_predictive_score(bare_lead, now=NOW)
        assert score.predicted_conversion_probability == 40
        assert _factor(score, "Positive Prior Contact").description == "Showed interest 12 days ago"
        assert score.recommended_action == "Queue for batch outreach"

    def test_recent_contact_penalized(self, bare_lead):
        bare_lead.last_contacted_at = NOW - timedelta(days=3)
        bare_lead.last_call_outcome = "voicemail"
        assert calculate_predictive_score(bare_lead, now=NOW).predicted_conversion_probability == 15

    def test_older_neutral_contact_ignored(self, bare_lead):
        bare_lead.last_contacted_at = NOW - timedelta(days=10)
        bare_lead.last_call_outcome = "voicemail"
        assert calculate_predictive_score(bare_lead, now=NOW).predicted_conversion_probability == 20

    @pytest.mark.parametrize("population, impact", [
        (600_000, 20),
        (500_000, 15),
        (150_000, 15),
        (75_000, 10),
        (50_000, 5),
        (1_200, 5),
    ])
    def test_population_tiers(self, bare_lead, population, impact):
        bare_lead.population = population
        score = calculate_predictive_score(bare_lead, now=NOW)
        assert _factor(score, "Population Size").impact == impact

    @pytest.mark.parametrize("maturity, name, impact", [
        (2, "Low Tech Maturity", -5),
        (4, "Tech Maturity Sweet Spot", 12),
        (6, "Tech Maturity Sweet Spot", 12),
        (8, "High Tech Maturity", -3),
    ])
    def test_tech_maturity(self, bare_lead, maturity, name, impact):
        bare_lead.tech_maturity_score = maturity
        assert _factor(calculate_predictive_score(bare_lead, now=NOW), name).impact == impact

    def test_smallest_population_tier_label(self, bare_lead):
        bare_lead.population = 1_200
        factor = _factor(calculate_predictive_score(bare_lead, now=NOW), "Population Size")
        assert factor.description == "verySmall population (1,200)"

    def test_pain_point_bonus_capped(self, bare_lead):
        bare_lead.pain_points = [f"pain {i}" for i in range(10)]
        assert _factor(calculate_predictive_score(bare_lead, now=NOW), "Known Pain Points").impact == 25

    def test_enrichment_rounds(self, bare_lead):
        bare_lead.enrichment_score = 57
        assert _factor(calculate_predictive_score(bare_lead, now=NOW), "Data Enrichment Quality").impact == 11

    def test_probability_always_in_range(self, rich_lead, bare_lead):
        for lead in (rich_lead, bare_lead):
            for outcome in ("interested", "not_interested", None):
                lead.last_contacted_at = NOW - timedelta(days=1)
                lead.last_call_outcome = outcome
                p = calculate_predictive_score(lead, now=NOW).predicted_conversion_probability
                assert 0 <= p <= 100

    def test_population_arguments_do_not_change_result(self, rich_lead, bare_lead):
        alone = calculate_predictive_score(rich_lead, now=NOW)
        with_population = calculate_predictive_score(rich_lead, {"name": "RLTX"}, [rich_lead, bare_lead], NOW)
        assert alone == with_population


# ---------------------------------------------------------------------------
# Batch
# ---------------------------------------------------------------------------

class TestBatch:
    def test_sorted_descending(self, rich_lead, mid_lead, bare_lead):
        scores = score_all_leads_predictive([bare_lead, rich_lead, mid_lead])
        assert [s.lead_id for s in scores] == [1, 2, 3]

    def test_top_limit(self, rich_lead, mid_lead, bare_lead):
        top = get_top_predicted_leads([bare_lead, rich_lead, mid_lead], limit=2)
        assert [s.lead_id for s in top] == [1, 2]

    def test_grouped_by_action(self, rich_lead, mid_lead, bare_lead):
        grouped = get_leads_by_action([bare_lead, rich_lead, mid_lead])
        assert list(grouped) == ["High Priority", "Enrich First", "Batch Outreach", "Low Priority"]
        assert [s.lead_id for s in grouped["High Priority"]] == [1]
        assert [s.lead_id for s in grouped["Enrich First"]] == [2]
        assert grouped["Batch Outreach"] == []
        assert [s.lead_id for s in grouped["Low Priority"]] == [3]


class TestInsights:
    def test_summary(self, rich_lead, mid_lead, bare_lead):
        insights = summarize_predictive_insights(score_all_leads_predictive([rich_lead, mid_lead, bare_lead]))

        assert insights["total_leads"] == 3
        assert insights["average_score"] == 62
        assert insights["distribution"] == {"high": 1, "medium": 1, "low": 1}
        assert insights["by_confidence"]["counts"] == {"high": 1, "medium": 1, "low": 1}
        assert insights["by_confidence"]["averages"]["high"] == 100
        assert insights["recommendations"] == {
            "call_immediately": 1,
            "enrich_first": 1,
            "needs_more_data": 1,
        }

        no_dm = next(f for f in insights["top_factors"] if f["name"] == "No Decision Maker")
        assert no_dm == {"name": "No Decision Maker", "frequency": 67, "avg_impact": -10}

    def test_halves_round_up(self, mid_lead, bare_lead):
        insights = summarize_predictive_insights(score_all_leads_predictive([mid_lead, bare_lead]))
        # (65 + 20) / 2 = 42.5
        assert insights["average_score"] == 43

        big = Lead(id=10, institution_name="Big", population=600_000)
        tiny = Lead(id=11, institution_name="Tiny", population=1_200)
        insights = summarize_predictive_insights(score_all_leads_predictive([big, tiny]))
        population = next(f for f in insights["top_factors"] if f["name"] == "Population Size")
        # (20 + 5) / 2 = 12.5
        assert population["avg_impact"] == 13
        # (40 + 25) / 2 = 32.5
        assert insights["average_score"] == 33
        assert insights["by_confidence"]["averages"]["low"] == 33

    def test_empty(self):
        insights = summarize_predictive_insights([])
        assert insights["total_leads"] == 0
        assert insights["average_score"] == 0
        assert insights["top_factors"] == []
