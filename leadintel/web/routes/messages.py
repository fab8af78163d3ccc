from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import Field

from leadintel.ai.composer import MessageGenerator
from leadintel.ai.slop import analyze_message_for_slop
from leadintel.ai.synthesis import SynthesisEngine
from leadintel.models import CamelModel, MessageRequest, MessageType
from leadintel.store import LeadStore
from leadintel.web.deps import get_message_generator, get_store, get_synthesis_engine, require_lead

router = APIRouter()


class GenerateBody(CamelModel):
    message_type: MessageType
    custom_context: Optional[str] = None
    use_synthesis: bool = True


class RegenerateBody(GenerateBody):
    feedback: str = Field(min_length=1)


class AnalyzeBody(CamelModel):
    message: str = Field(min_length=1)


def _build_request(store: LeadStore, lead_id: int, body: GenerateBody) -> MessageRequest:
    lead = require_lead(store, lead_id)
    return MessageRequest(
        lead=lead,
        message_type=body.message_type,
        synthesis=lead.synthesis() if body.use_synthesis else None,
        custom_context=body.custom_context,
    )


@router.post("/generate/{lead_id}")
async def generate(
    lead_id: int,
    body: GenerateBody,
    store: LeadStore = Depends(get_store),
    generator: MessageGenerator = Depends(get_message_generator),
):
    return await generator.generate_message(_build_request(store, lead_id, body))


@router.post("/regenerate/{lead_id}")
async def regenerate(
    lead_id: int,
    body: RegenerateBody,
    store: LeadStore = Depends(get_store),
    generator: MessageGenerator = Depends(get_message_generator),
):
    return await generator.regenerate_message(_build_request(store, lead_id, body), body.feedback)


@router.post("/analyze")
def analyze(body: AnalyzeBody):
    analysis = analyze_message_for_slop(body.message)
    return {
        "slopScore": analysis.score,
        "issues": analysis.issues,
        "improvements": analysis.improvements,
        "rating": analysis.rating,
        "isGood": analysis.score < 20,
        "isAcceptable": analysis.score < 40,
    }


@router.get("/pending-review")
def pending_review(limit: int = 20, engine: SynthesisEngine = Depends(get_synthesis_engine)):
    leads = engine.get_pending_review(limit)
    return {
        "total": len(leads),
        "leads": [
            {
                "id": lead.id,
                "institutionName": lead.institution_name,
                "institutionType": lead.institution_type,
                "state": lead.state,
                "department": lead.department,
                "outreachScore": lead.outreach_score,
                "whyNow": lead.synthesized_context.get("why_reach_out_now"),
                "hooks": lead.synthesized_context.get("personalization_hooks", []),
                "recommendedAngle": lead.synthesized_context.get("recommended_angle"),
                "email": lead.email,
                "phone": lead.phone_number,
                "signalCount": len(lead.intent_signals or []),
            }
            for lead in leads
        ],
    }
