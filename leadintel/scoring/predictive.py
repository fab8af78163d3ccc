"""Hand-tuned conversion-probability model.

Not a learned model: a base score plus fixed, signed contributions across four
categories (engagement, fit, timing, data quality). Every contribution is
kept as a ScoreFactor so the result explains itself.

Confidence is driven by how many factors we know about, not by the score, so
a lucky high score on thin data still reports low confidence.
"""

from collections import defaultdict
from datetime import datetime
from typing import Any, Iterable

from leadintel.models import (
    FactorCategory,
    Lead,
    Level,
    PredictiveScore,
    ScoreFactor,
    as_utc,
    utcnow,
)
from leadintel.scoring.signals import round_half_up

BASE_SCORE = 30

# Engagement
DECISION_MAKER = 15
NO_DECISION_MAKER = -10
MULTIPLE_CONTACTS_CAP = 12
PER_EXTRA_CONTACT = 4
HAS_EMAIL = 10
HAS_PHONE = 8
POSITIVE_PRIOR_CONTACT = 20
NOT_INTERESTED = -25
CONTACTED_RECENTLY = -5  # don't double-touch inside a week

# Fit
POPULATION_TIERS = [  # (exclusive lower bound, tier, impact)
    (500_000, "large", 20),
    (100_000, "medium", 15),
    (50_000, "small", 10),
]
POPULATION_FLOOR = ("verySmall", 5)
TECH_SWEET_SPOT = 12  # maturity 4-6: can integrate, hasn't solved it yet
TECH_TOO_LOW = -5
TECH_TOO_HIGH = -3
HAS_PAIN_POINTS = 10
PER_PAIN_POINT = 3
HAS_BUYING_SIGNALS = 15
PER_BUYING_SIGNAL = 5
COUNT_BONUS_CAP = 15

# Timing
RECENT_NEWS = 8
COMPETITOR_PRESENCE = 5  # they already spend on the category

# Data quality
ENRICHMENT_WEIGHT = 0.2
DATA_COMPLETENESS = 10
COMPLETENESS_THRESHOLD = 0.7

POSITIVE_OUTCOMES = {"interested", "callback_scheduled"}

ACTION_BUCKETS = [  # (min score, group, recommended action, next best action)
    (70, "High Priority", "High Priority: Call immediately", "Send personalized intro email before call"),
    (50, "Enrich First", "Enrich data, then call", "Run additional research on pain points"),
    (30, "Batch Outreach", "Queue for batch outreach", "Add to email sequence"),
    (0, "Low Priority", "Low priority: Review and potentially archive", "Verify data accuracy"),
]


def _bucket(score: int) -> tuple:
    for bucket in ACTION_BUCKETS:
        if score >= bucket[0]:
            return bucket
    return ACTION_BUCKETS[-1]


def calculate_predictive_score(
    lead: Lead,
    company_profile: Any = None,
    all_leads: Iterable[Lead] | None = None,
    now: datetime | None = None,
) -> PredictiveScore:
    """Estimate conversion probability (0-100) for a single lead.

    company_profile and all_leads are accepted so callers can hand over the
    whole population; the fixed weighting doesn't use them.
    """
    now = as_utc(now) if now else utcnow()
    factors: list[ScoreFactor] = []

    def add(name: str, impact: int, description: str, category: FactorCategory) -> None:
        factors.append(ScoreFactor(name=name, impact=impact, description=description, category=category))

    # --- Engagement ---
    decision_makers = lead.decision_makers or []
    if decision_makers:
        add("Decision Maker Identified", DECISION_MAKER,
            f"{len(decision_makers)} decision maker(s) known", FactorCategory.engagement)
        if len(decision_makers) > 1:
            bonus = min(MULTIPLE_CONTACTS_CAP, len(decision_makers) * PER_EXTRA_CONTACT)
            add("Multiple Contacts", bonus,
                f"{len(decision_makers)} contacts provide multiple entry points", FactorCategory.engagement)
    else:
        add("No Decision Maker", NO_DECISION_MAKER,
            "Decision maker not yet identified", FactorCategory.engagement)

    if lead.email:
        add("Email Available", HAS_EMAIL, "Direct email contact available", FactorCategory.engagement)
    if lead.phone_number:
        add("Phone Available", HAS_PHONE, "Direct phone contact available", FactorCategory.engagement)

    if lead.last_contacted_at:
        days_since = (now - as_utc(lead.last_contacted_at)).days
        if lead.last_call_outcome in POSITIVE_OUTCOMES:
            add("Positive Prior Contact", POSITIVE_PRIOR_CONTACT,
                f"Showed interest {days_since} days ago", FactorCategory.engagement)
        elif lead.last_call_outcome == "not_interested":
            add("Previously Not Interested", NOT_INTERESTED,
                "Previously expressed disinterest", FactorCategory.engagement)
        elif days_since < 7:
            add("Recently Contacted", CONTACTED_RECENTLY,
                "Already contacted this week", FactorCategory.engagement)

    # --- Fit ---
    if lead.population:
        tier, impact = POPULATION_FLOOR
        for lower_bound, tier_name, tier_impact in POPULATION_TIERS:
            if lead.population > lower_bound:
                tier, impact = tier_name, tier_impact
                break
        add("Population Size", impact, f"{tier} population ({lead.population:,})", FactorCategory.fit)

    maturity = lead.tech_maturity_score
    if maturity:
        if 4 <= maturity <= 6:
            add("Tech Maturity Sweet Spot", TECH_SWEET_SPOT,
                f"Score {maturity}/10 - ready for modernization", FactorCategory.fit)
        elif maturity < 4:
            add("Low Tech Maturity", TECH_TOO_LOW,
                "May lack infrastructure for AI adoption", FactorCategory.fit)
        else:
            add("High Tech Maturity", TECH_TOO_HIGH,
                "May already have solutions in place", FactorCategory.fit)

    pain_points = lead.pain_points or []
    if pain_points:
        impact = HAS_PAIN_POINTS + min(COUNT_BONUS_CAP, len(pain_points) * PER_PAIN_POINT)
        add("Known Pain Points", impact, f"{len(pain_points)} pain points identified", FactorCategory.fit)

    buying_signals = lead.buying_signals or []
    if buying_signals:
        impact = HAS_BUYING_SIGNALS + min(COUNT_BONUS_CAP, len(buying_signals) * PER_BUYING_SIGNAL)
        add("Buying Signals Detected", impact,
            f"{len(buying_signals)} buying signals identified", FactorCategory.timing)

    # --- Timing ---
    if lead.recent_news:
        add("Recent News Activity", RECENT_NEWS,
            f"{len(lead.recent_news)} recent news items", FactorCategory.timing)
    if lead.competitor_analysis:
        add("Competitor Presence", COMPETITOR_PRESENCE,
            "Has budget for technology solutions", FactorCategory.timing)

    # --- Data quality ---
    if lead.enrichment_score:
        impact = int(round_half_up(lead.enrichment_score * ENRICHMENT_WEIGHT))
        add("Data Enrichment Quality", impact,
            f"Enrichment score: {lead.enrichment_score}/100", FactorCategory.data_quality)

    key_fields = [
        lead.email,
        lead.phone_number,
        lead.website,
        lead.population,
        lead.tech_maturity_score,
        pain_points,
        decision_makers,
    ]
    completeness = sum(1 for f in key_fields if f) / len(key_fields)
    if completeness >= COMPLETENESS_THRESHOLD:
        add("High Data Completeness", DATA_COMPLETENESS,
            f"{int(round_half_up(completeness * 100))}% of key fields populated", FactorCategory.data_quality)

    total = max(0, min(100, BASE_SCORE + sum(f.impact for f in factors)))

    positive = sum(1 for f in factors if f.impact > 0)
    if positive >= 5 and len(factors) >= 8:
        confidence = Level.high
    elif positive >= 3 and len(factors) >= 5:
        confidence = Level.medium
    else:
        confidence = Level.low

    if lead.population and lead.population > 300_000:
        predicted_value = Level.high
    elif lead.population and lead.population > 100_000:
        predicted_value = Level.medium
    else:
        predicted_value = Level.low

    _, _, recommended, next_best = _bucket(total)

    return PredictiveScore(
        lead_id=lead.id,
        predicted_conversion_probability=total,
        confidence_level=confidence,
        score_factors=sorted(factors, key=lambda f: abs(f.impact), reverse=True),
        recommended_action=recommended,
        next_best_action=next_best,
        predicted_value=predicted_value,
    )


def score_all_leads_predictive(
    leads: Iterable[Lead],
    company_profile: Any = None,
    now: datetime | None = None,
) -> list[PredictiveScore]:
    """Score every lead, highest predicted conversion first."""
    leads = list(leads)
    scores = [calculate_predictive_score(lead, company_profile, leads, now) for lead in leads]
    scores.sort(key=lambda s: s.predicted_conversion_probability, reverse=True)
    return scores


def get_top_predicted_leads(
    leads: Iterable[Lead],
    limit: int = 10,
    company_profile: Any = None,
) -> list[PredictiveScore]:
    return score_all_leads_predictive(leads, company_profile)[:limit]


def get_leads_by_action(
    leads: Iterable[Lead],
    company_profile: Any = None,
) -> dict[str, list[PredictiveScore]]:
    grouped: dict[str, list[PredictiveScore]] = {bucket[1]: [] for bucket in ACTION_BUCKETS}
    for score in score_all_leads_predictive(leads, company_profile):
        grouped[_bucket(score.predicted_conversion_probability)[1]].append(score)
    return grouped


def summarize_predictive_insights(scores: list[PredictiveScore]) -> dict:
    """Aggregate view over a batch of predictive scores."""
    total = len(scores)
    probabilities = [s.predicted_conversion_probability for s in scores]

    by_confidence: dict[Level, list[int]] = {level: [] for level in Level}
    for s in scores:
        by_confidence[s.confidence_level].append(s.predicted_conversion_probability)

    factor_impacts: dict[str, list[int]] = defaultdict(list)
    for s in scores:
        for factor in s.score_factors:
            factor_impacts[factor.name].append(factor.impact)

    top_factors = sorted(
        (
            {
                "name": name,
                "frequency": int(round_half_up(len(impacts) / total * 100)),
                "avg_impact": int(round_half_up(sum(impacts) / len(impacts))),
            }
            for name, impacts in factor_impacts.items()
        ),
        key=lambda f: abs(f["avg_impact"]),
        reverse=True,
    )[:10]

    return {
        "total_leads": total,
        "average_score": int(round_half_up(sum(probabilities) / total)) if total else 0,
        "distribution": {
            "high": sum(1 for p in probabilities if p >= 70),
            "medium": sum(1 for p in probabilities if 40 <= p < 70),
            "low": sum(1 for p in probabilities if p < 40),
        },
        "by_confidence": {
            "counts": {level.value: len(v) for level, v in by_confidence.items()},
            "averages": {
                level.value: int(round_half_up(sum(v) / len(v))) if v else 0
                for level, v in by_confidence.items()
            },
        },
        "top_factors": top_factors,
        "recommendations": {
            "call_immediately": sum(1 for p in probabilities if p >= 70),
            "enrich_first": sum(
                1 for s in scores
                if 40 <= s.predicted_conversion_probability < 70 and s.confidence_level != Level.high
            ),
            "needs_more_data": len(by_confidence[Level.low]),
        },
    }
