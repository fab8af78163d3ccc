from fastapi import APIRouter, Depends
from pydantic import Field

from leadintel.ai.synthesis import SynthesisEngine
from leadintel.models import CamelModel, IntentSignal, Lead, as_utc
from leadintel.scoring.signals import calculate_composite_score, get_signal_urgency
from leadintel.store import LeadStore
from leadintel.web.deps import get_store, get_synthesis_engine, require_lead

router = APIRouter()


class SynthesizeBatchRequest(CamelModel):
    lead_ids: list[int] = Field(min_length=1, max_length=20)


def _lead_summary(lead: Lead) -> dict:
    synthesis = lead.synthesized_context or {}
    return {
        "id": lead.id,
        "institutionName": lead.institution_name,
        "department": lead.department,
        "state": lead.state,
        "status": lead.status,
        "outreachScore": lead.outreach_score,
        "whyNow": synthesis.get("why_reach_out_now"),
        "topHook": (synthesis.get("personalization_hooks") or [None])[0],
        "signalCount": len(lead.intent_signals or []),
        "lastSignalDate": as_utc(lead.last_signal_date) if lead.last_signal_date else None,
    }


@router.post("/synthesize/{lead_id}")
async def synthesize(lead_id: int, engine: SynthesisEngine = Depends(get_synthesis_engine)):
    synthesis = await engine.synthesize_lead(lead_id)
    return {"success": True, "leadId": lead_id, "synthesis": synthesis}


@router.post("/synthesize-batch")
async def synthesize_batch(
    body: SynthesizeBatchRequest,
    engine: SynthesisEngine = Depends(get_synthesis_engine),
):
    results = await engine.synthesize_leads_batch(body.lead_ids)
    successful = [{"id": i, "synthesis": s} for i, s in results.items() if s is not None]
    failed = [i for i, s in results.items() if s is None]
    return {
        "success": True,
        "processed": len(body.lead_ids),
        "successful": len(successful),
        "failed": len(failed),
        "results": successful,
        "failedIds": failed,
    }


@router.get("/outreach-ready")
def outreach_ready(
    min_score: int = 6,
    limit: int = 20,
    engine: SynthesisEngine = Depends(get_synthesis_engine),
):
    leads = engine.get_outreach_ready_leads(min_score)
    return {
        "total": len(leads),
        "returned": min(len(leads), limit),
        "minScore": min_score,
        "leads": [_lead_summary(lead) for lead in leads[:limit]],
    }


@router.get("/hot-leads")
def hot_leads(limit: int = 10, engine: SynthesisEngine = Depends(get_synthesis_engine)):
    leads = engine.get_hot_leads(limit)
    return {"count": len(leads), "leads": [_lead_summary(lead) for lead in leads]}


@router.get("/score/{lead_id}")
def signal_score(lead_id: int, store: LeadStore = Depends(get_store)):
    lead = require_lead(store, lead_id)
    signals = lead.signals()
    composite = calculate_composite_score(signals)
    return {
        "leadId": lead_id,
        "institutionName": lead.institution_name,
        "signalCount": len(signals),
        "score": composite.score,
        "classification": composite.classification,
        "reasoning": composite.reasoning,
        "urgency": get_signal_urgency(signals),
        "topSignals": [
            {
                "type": s.signal.signal_type,
                "date": s.signal.signal_date,
                "strength": s.signal.signal_strength,
                "relevance": s.signal.relevance_to_us,
                "score": s.score,
                "content": s.signal.signal_content[:200],
            }
            for s in composite.top_signals
        ],
    }


@router.post("/signals/{lead_id}")
def add_signal(lead_id: int, signal: IntentSignal, store: LeadStore = Depends(get_store)):
    lead, composite = store.add_intent_signal(lead_id, signal)
    return {
        "success": True,
        "leadId": lead_id,
        "signalCount": len(lead.intent_signals),
        "newScore": composite.score,
        "classification": composite.classification,
    }
