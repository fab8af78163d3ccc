"""Deterministic lead scoring: intent-signal urgency and predictive conversion."""

from leadintel.scoring.predictive import (
    calculate_predictive_score,
    get_leads_by_action,
    get_top_predicted_leads,
    score_all_leads_predictive,
    summarize_predictive_insights,
)
from leadintel.scoring.signals import (
    calculate_composite_score,
    get_signal_urgency,
    score_leads_signals,
    score_signal,
)

__all__ = [
    "score_signal",
    "calculate_composite_score",
    "get_signal_urgency",
    "score_leads_signals",
    "calculate_predictive_score",
    "score_all_leads_predictive",
    "get_top_predicted_leads",
    "get_leads_by_action",
    "summarize_predictive_insights",
]
