"""Score intent signals and roll them up into a 1-10 composite urgency score.

score_signal() = type weight × relevance × recency × hot-pattern bonus × strength/10

The composite aggregates every scored signal with a 1/(i+1) positional weight,
so corroborating signals add up but a long tail of stale ones can't dominate.
"""

import math
import re
from datetime import datetime
from typing import Iterable

from leadintel.models import (
    MAX_TOP_SIGNALS,
    Classification,
    CompositeScoreResult,
    IntentSignal,
    Lead,
    Relevance,
    ScoredSignal,
    SignalType,
    Urgency,
    UrgencyResult,
    as_utc,
    utcnow,
)

_TYPE_WEIGHTS = {
    SignalType.reddit_post: 10,
    SignalType.g2_review: 9,
    SignalType.job_posting: 7,
    SignalType.news: 6,
    SignalType.tech_change: 5,
}
_DEFAULT_TYPE_WEIGHT = 5

_RELEVANCE_MULTIPLIERS = {
    Relevance.direct: 1.5,
    Relevance.adjacent: 1.0,
    Relevance.weak: 0.5,
}
_DEFAULT_RELEVANCE_MULTIPLIER = 1.0

# (max age in days, multiplier)
_RECENCY_BRACKETS = [
    (1, 2.0),     # same day / yesterday
    (3, 1.8),
    (7, 1.5),
    (14, 1.2),
    (30, 1.0),
    (60, 0.7),
]
_STALE_MULTIPLIER = 0.5

_HOT_BONUS = 1.5

# Explicit evaluation / switching intent
_HOT_PATTERNS = [
    re.compile(r"looking for (recommendations|alternatives|suggestions)", re.IGNORECASE),
    re.compile(r"frustrated with", re.IGNORECASE),
    re.compile(r"\balternatives?\b.*\?", re.IGNORECASE),
    re.compile(r"anyone (using|tried|recommend)", re.IGNORECASE),
    re.compile(r"hate (my|our|this) current", re.IGNORECASE),
    re.compile(r"switching from", re.IGNORECASE),
    re.compile(r"evaluating (options|tools|vendors)", re.IGNORECASE),
    re.compile(r"budget (approved|allocated)", re.IGNORECASE),
    re.compile(r"starting (a|the) search", re.IGNORECASE),
    re.compile(r"RFP", re.IGNORECASE),
    re.compile(r"vendor (selection|evaluation)", re.IGNORECASE),
]

HOT_THRESHOLD = 8
WARM_THRESHOLD = 5


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def type_weight(signal_type: SignalType) -> int:
    return _TYPE_WEIGHTS.get(SignalType.coerce(signal_type), _DEFAULT_TYPE_WEIGHT)


def relevance_multiplier(relevance: Relevance) -> float:
    return _RELEVANCE_MULTIPLIERS.get(Relevance.coerce(relevance), _DEFAULT_RELEVANCE_MULTIPLIER)


def recency_multiplier(signal_date: datetime, now: datetime | None = None) -> float:
    now = as_utc(now) if now else utcnow()
    days_old = (now - as_utc(signal_date)).days
    for max_days, multiplier in _RECENCY_BRACKETS:
        if days_old <= max_days:
            return multiplier
    return _STALE_MULTIPLIER


def is_hot_signal(content: str) -> bool:
    return any(p.search(content or "") for p in _HOT_PATTERNS)


def score_signal(signal: IntentSignal, now: datetime | None = None) -> float:
    """Score a single signal, rounded to one decimal."""
    hot_bonus = _HOT_BONUS if is_hot_signal(signal.signal_content) else 1.0
    score = (
        type_weight(signal.signal_type)
        * relevance_multiplier(signal.relevance_to_us)
        * recency_multiplier(signal.signal_date, now)
        * hot_bonus
        * (signal.signal_strength / 10)
    )
    return round_half_up(score, 1)


def classify(score: int) -> Classification:
    if score >= HOT_THRESHOLD:
        return Classification.hot
    if score >= WARM_THRESHOLD:
        return Classification.warm
    return Classification.nurture


def calculate_composite_score(
    signals: Iterable[IntentSignal] | None,
    now: datetime | None = None,
) -> CompositeScoreResult:
    signals = list(signals or [])
    if not signals:
        return CompositeScoreResult(
            score=1,
            classification=Classification.nurture,
            top_signals=[],
            reasoning="No intent signals detected",
        )

    scored = sorted(
        (ScoredSignal(signal=s, score=score_signal(s, now)) for s in signals),
        key=lambda s: s.score,
        reverse=True,
    )
    top_signals = scored[:MAX_TOP_SIGNALS]

    # Diminishing returns over the full list, not just the top 3
    total = sum(s.score / (i + 1) for i, s in enumerate(scored))
    score = int(min(10, max(1, round_half_up(total / 3))))
    classification = classify(score)

    top_type = top_signals[0].signal.signal_type.value.replace("_", " ", 1)
    if classification == Classification.hot:
        reasoning = f"High-priority: {top_type} detected within last 7 days with direct relevance"
    elif classification == Classification.warm:
        reasoning = f"Good timing: {top_type} indicates potential interest"
    else:
        reasoning = "Monitoring: Signals are weak or outdated"

    return CompositeScoreResult(
        score=score,
        classification=classification,
        top_signals=top_signals,
        reasoning=reasoning,
    )


def get_signal_urgency(
    signals: Iterable[IntentSignal] | None,
    now: datetime | None = None,
) -> UrgencyResult:
    result = calculate_composite_score(signals, now)

    has_critical_signal = any(
        is_hot_signal(s.signal.signal_content)
        and recency_multiplier(s.signal.signal_date, now) >= 1.5
        for s in result.top_signals
    )

    if has_critical_signal or result.score >= 9:
        return UrgencyResult(urgency=Urgency.critical, action="Call within 24 hours", deadline="Tomorrow")
    if result.classification == Classification.hot or result.score >= 7:
        return UrgencyResult(
            urgency=Urgency.high,
            action="Call within 48 hours, email immediately",
            deadline="2 days",
        )
    if result.classification == Classification.warm or result.score >= 4:
        return UrgencyResult(
            urgency=Urgency.medium,
            action="Email this week, call next week",
            deadline="1 week",
        )
    return UrgencyResult(
        urgency=Urgency.low,
        action="Add to nurture sequence",
        deadline="Monitor for new signals",
    )


def score_leads_signals(leads: Iterable[Lead], now: datetime | None = None) -> dict[int, dict]:
    """Batch composite scoring: {lead_id: {"score", "classification"}}."""
    results = {}
    for lead in leads:
        composite = calculate_composite_score(lead.signals(), now)
        results[lead.id] = {
            "score": composite.score,
            "classification": composite.classification,
        }
    return results
