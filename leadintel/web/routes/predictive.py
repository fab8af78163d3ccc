from fastapi import APIRouter, Depends

from leadintel.scoring.predictive import (
    calculate_predictive_score,
    get_leads_by_action,
    get_top_predicted_leads,
    score_all_leads_predictive,
    summarize_predictive_insights,
)
from leadintel.store import LeadStore
from leadintel.web.deps import get_store, require_lead

router = APIRouter()

GROUP_LIMIT = 20


@router.get("/scores")
def all_scores(store: LeadStore = Depends(get_store)):
    scores = score_all_leads_predictive(store.get_all_leads())
    return {"total": len(scores), "scores": scores}


@router.get("/top")
def top_leads(limit: int = 10, store: LeadStore = Depends(get_store)):
    leads = store.get_all_leads()
    names = {lead.id: lead.institution_name for lead in leads}
    return {
        "leads": [
            {"institutionName": names.get(score.lead_id), "score": score}
            for score in get_top_predicted_leads(leads, limit)
        ],
    }


@router.get("/lead/{lead_id}")
def lead_score(lead_id: int, store: LeadStore = Depends(get_store)):
    lead = require_lead(store, lead_id)
    return calculate_predictive_score(lead, None, store.get_all_leads())


@router.get("/by-action")
def by_action(store: LeadStore = Depends(get_store)):
    grouped = get_leads_by_action(store.get_all_leads())
    return {
        "summary": {
            **{group: len(scores) for group, scores in grouped.items()},
            "total": sum(len(scores) for scores in grouped.values()),
        },
        "groups": {
            group: [
                {
                    "leadId": s.lead_id,
                    "probability": s.predicted_conversion_probability,
                    "confidence": s.confidence_level,
                    "predictedValue": s.predicted_value,
                    "nextBestAction": s.next_best_action,
                }
                for s in scores[:GROUP_LIMIT]
            ]
            for group, scores in grouped.items()
        },
    }


@router.get("/insights")
def insights(store: LeadStore = Depends(get_store)):
    return summarize_predictive_insights(score_all_leads_predictive(store.get_all_leads()))
