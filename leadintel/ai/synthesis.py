"""Turn a lead's intent signals into structured outreach intelligence via Claude.

synthesize_lead() → NOT READY short-circuit → prompt → parse JSON → anti-slop
check → persist outreach_score / synthesized_context / last_signal_date.
"""

import asyncio
import json
import logging
import re

from pydantic import ValidationError

from leadintel.ai.client import LLMClient
from leadintel.ai.prompts import SYNTHESIS_PROMPT
from leadintel.ai.slop import find_banned_phrases
from leadintel.config import settings
from leadintel.exceptions import IntelligenceError, LeadNotFoundError, SynthesisError
from leadintel.models import Lead, LeadStatus, SynthesizedContext, as_utc
from leadintel.scoring.signals import calculate_composite_score
from leadintel.store import LeadStore

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)

NOT_READY_CONTEXT = SynthesizedContext(
    why_reach_out_now=(
        "NOT READY: No intent signals detected. "
        "Need Reddit posts, job postings, or news events."
    ),
    personalization_hooks=[],
    recommended_angle=None,
    predicted_objections=[],
    counter_to_objections={},
    do_not_mention=[],
    outreach_score=2,
    score_reasoning="Insufficient signals for personalized outreach",
)


def has_synthesis_inputs(lead: Lead) -> bool:
    return bool(lead.intent_signals or lead.recent_news or lead.buying_signals)


def _lead_data(lead: Lead) -> dict:
    return {
        "institutionName": lead.institution_name,
        "institutionType": lead.institution_type,
        "department": lead.department,
        "state": lead.state,
        "email": lead.email,
        "decisionMakers": lead.decision_makers or [],
        "techStack": lead.tech_stack or [],
        "painPoints": lead.pain_points or [],
        "buyingSignals": lead.buying_signals or [],
        "recentNews": lead.recent_news or [],
        "status": lead.status.value if isinstance(lead.status, LeadStatus) else lead.status,
    }


def build_synthesis_prompt(lead: Lead) -> str:
    signals = lead.signals()
    composite = calculate_composite_score(signals)
    return SYNTHESIS_PROMPT.format(
        lead_data=json.dumps(_lead_data(lead), indent=2, default=str),
        intent_signals=json.dumps(
            [s.model_dump(mode="json", by_alias=True) for s in signals], indent=2
        ),
        signal_score=composite.score,
        classification=composite.classification.value,
    )


def parse_synthesis(text: str) -> SynthesizedContext:
    """Pull the first {...} span out of a model response and validate it."""
    match = _JSON_OBJECT.search(text or "")
    if not match:
        raise SynthesisError("No JSON found in response")
    try:
        return SynthesizedContext.model_validate(json.loads(match.group(0)))
    except json.JSONDecodeError as e:
        raise SynthesisError(f"Malformed JSON in response: {e}") from e
    except ValidationError as e:
        raise SynthesisError(f"Response JSON has the wrong shape: {e}") from e


class SynthesisEngine:
    def __init__(
        self,
        store: LeadStore,
        llm: LLMClient,
        max_tokens: int | None = None,
        batch_delay: float | None = None,
    ):
        self.store = store
        self.llm = llm
        self.max_tokens = max_tokens or settings.synthesis_max_tokens
        self.batch_delay = settings.synthesis_batch_delay if batch_delay is None else batch_delay

    async def synthesize_lead(self, lead_id: int) -> SynthesizedContext:
        """Synthesize outreach context for one lead and persist it.

        Raises LeadNotFoundError, LLMError or SynthesisError; nothing is
        written back unless a valid synthesis was parsed.
        """
        lead = self.store.get_lead(lead_id)
        if lead is None:
            raise LeadNotFoundError(lead_id)

        if not has_synthesis_inputs(lead):
            logger.info("Lead %d has no signals, news or buying signals: NOT READY", lead_id)
            return NOT_READY_CONTEXT.model_copy(deep=True)

        prompt = build_synthesis_prompt(lead)
        response = await self.llm.generate(prompt, max_tokens=self.max_tokens)

        try:
            synthesis = parse_synthesis(response)
        except SynthesisError as e:
            logger.error("Could not parse synthesis for lead %d: %s", lead_id, e)
            raise

        # Violations are logged, not corrected
        free_text = " ".join([
            synthesis.why_reach_out_now,
            *synthesis.personalization_hooks,
            synthesis.recommended_angle or "",
        ])
        banned = find_banned_phrases(free_text)
        if banned:
            logger.warning("Anti-slop violation in synthesis for lead %d: %s", lead_id, ", ".join(banned))

        fields = {
            "synthesized_context": synthesis,
            "outreach_score": synthesis.outreach_score,
        }
        signals = lead.signals()
        if signals:
            fields["last_signal_date"] = max(as_utc(s.signal_date) for s in signals)
        self.store.update_lead(lead_id, **fields)

        logger.info("Synthesized lead %d: outreach score %d", lead_id, synthesis.outreach_score)
        return synthesis

    async def _synthesize_or_none(self, lead_id: int) -> SynthesizedContext | None:
        try:
            return await self.synthesize_lead(lead_id)
        except IntelligenceError as e:
            logger.error("Synthesis failed for lead %d: %s", lead_id, e)
            return None
        except Exception:
            # Bad stored data or a store failure for one lead must not sink the batch
            logger.exception("Unexpected error synthesizing lead %d", lead_id)
            return None

    async def synthesize_leads_batch(
        self,
        lead_ids: list[int],
        max_concurrent: int | None = None,
    ) -> dict[int, SynthesizedContext | None]:
        """Synthesize in fixed-size chunks with a pause between chunks.

        At most max_concurrent model calls are in flight at once. A failed
        lead maps to None and the batch carries on.
        """
        max_concurrent = settings.synthesis_max_concurrent if max_concurrent is None else max_concurrent
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")

        results: dict[int, SynthesizedContext | None] = {}
        for start in range(0, len(lead_ids), max_concurrent):
            chunk = lead_ids[start:start + max_concurrent]
            chunk_results = await asyncio.gather(*(self._synthesize_or_none(i) for i in chunk))
            results.update(zip(chunk, chunk_results))

            if start + max_concurrent < len(lead_ids):
                await asyncio.sleep(self.batch_delay)

        failed = sum(1 for r in results.values() if r is None)
        logger.info("Batch synthesis complete: %d leads, %d failed", len(results), failed)
        return results

    def get_outreach_ready_leads(self, min_score: int | None = None) -> list[Lead]:
        """Leads at or above min_score, highest outreach score first."""
        min_score = settings.outreach_ready_min_score if min_score is None else min_score
        leads = [lead for lead in self.store.get_all_leads() if (lead.outreach_score or 0) >= min_score]
        return sorted(leads, key=lambda lead: lead.outreach_score or 0, reverse=True)

    def get_hot_leads(self, limit: int = 10) -> list[Lead]:
        return self.get_outreach_ready_leads(settings.hot_lead_min_score)[:limit]

    def get_pending_review(self, limit: int = 20) -> list[Lead]:
        """Hot, never-contacted leads that already have a synthesis to draft from."""
        return [
            lead for lead in self.get_outreach_ready_leads(settings.hot_lead_min_score)
            if lead.status == LeadStatus.not_contacted
            and (lead.synthesized_context or {}).get("why_reach_out_now")
        ][:limit]
