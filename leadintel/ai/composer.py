"""AI-powered outreach message drafting under anti-slop constraints."""

import logging
import re

from pydantic import BaseModel

from leadintel.ai.client import LLMClient
from leadintel.ai.prompts import (
    GENERATION_PROMPT,
    OUTPUT_FORMAT_EMAIL,
    OUTPUT_FORMAT_PLAIN,
    REGENERATION_PROMPT,
    TYPE_INSTRUCTIONS,
)
from leadintel.ai.slop import BANNED_PHRASES, analyze_message_for_slop
from leadintel.config import settings
from leadintel.exceptions import IntelligenceError, MessageGenerationError
from leadintel.models import (
    GeneratedMessage,
    Lead,
    MessageRequest,
    MessageType,
    SynthesizedContext,
)

logger = logging.getLogger(__name__)


class MessageConstraints(BaseModel):
    max_sentences: int
    require_specific_opener: bool
    require_clear_ask: bool
    max_characters: int | None = None


CONSTRAINTS = {
    MessageType.cold_email: MessageConstraints(
        max_sentences=4, require_specific_opener=True, require_clear_ask=True,
    ),
    MessageType.linkedin: MessageConstraints(
        max_sentences=3, require_specific_opener=True, require_clear_ask=True, max_characters=300,
    ),
    MessageType.follow_up_email: MessageConstraints(
        max_sentences=3, require_specific_opener=False, require_clear_ask=True,
    ),
}

_LABEL_LINES = re.compile(r"^(SUBJECT|HOOK_USED|SIGNAL_REFERENCED):.*\n?", re.IGNORECASE | re.MULTILINE)


def build_lead_context(lead: Lead, synthesis: SynthesizedContext | None = None) -> str:
    parts = [
        f"Organization: {lead.institution_name}",
        f"Type: {lead.institution_type}",
        f"Location: {lead.city or ''}, {lead.county or ''} County, {lead.state}",
    ]
    if lead.department:
        parts.append(f"Department: {lead.department}")
    if lead.population:
        parts.append(f"Population served: {lead.population:,}")
    if lead.pain_points:
        parts.append(f"Known pain points: {', '.join(lead.pain_points)}")
    if lead.tech_stack:
        parts.append(f"Tech stack: {', '.join(lead.tech_stack)}")
    if lead.buying_signals:
        parts.append(f"Buying signals: {', '.join(lead.buying_signals)}")

    if synthesis:
        if synthesis.why_reach_out_now:
            parts.append(f"Why reach out now: {synthesis.why_reach_out_now}")
        if synthesis.personalization_hooks:
            parts.append(f"Personalization hooks: {'; '.join(synthesis.personalization_hooks)}")
        if synthesis.recommended_angle:
            parts.append(f"Recommended angle: {synthesis.recommended_angle}")
        if synthesis.do_not_mention:
            parts.append(f"DO NOT MENTION: {', '.join(synthesis.do_not_mention)}")

    signals = lead.signals()[:3]
    if signals:
        parts.append("Recent signals:")
        for signal in signals:
            parts.append(f"  - [{signal.signal_type.value}] {signal.signal_content[:100]}...")

    return "\n".join(parts)


def _constraint_lines(constraints: MessageConstraints) -> str:
    lines = [f"Maximum {constraints.max_sentences} sentences in the body"]
    if constraints.max_characters:
        lines.append(f"Keep the whole message under {constraints.max_characters} characters")
    if constraints.require_specific_opener:
        lines.append(
            "First sentence MUST reference something specific about them (a signal, quote, or data point)"
        )
    if constraints.require_clear_ask:
        lines.append("End with a specific, clear ask (not 'let me know if interested')")
    lines += [
        f"NEVER use these phrases: {', '.join(BANNED_PHRASES[:10])}...",
        "Write like you would speak - if it sounds weird to say out loud, rewrite it",
        "One insight per message - save others for follow-ups",
        "No generic company compliments",
        "Be direct and specific, not vague and salesy",
    ]
    return "\n".join(f"{i}. {line}" for i, line in enumerate(lines, start=1))


def _format_kwargs(request: MessageRequest) -> dict:
    message_type = request.message_type
    return {
        "sender_company": settings.sender_company,
        "lead_context": build_lead_context(request.lead, request.synthesis),
        "custom_context": (
            f"\nADDITIONAL CONTEXT: {request.custom_context}\n" if request.custom_context else ""
        ),
        "task": TYPE_INSTRUCTIONS[message_type.value],
        "constraints": _constraint_lines(CONSTRAINTS[message_type]),
        "output_format": OUTPUT_FORMAT_EMAIL if message_type.is_email else OUTPUT_FORMAT_PLAIN,
    }


def build_generation_prompt(request: MessageRequest) -> str:
    return GENERATION_PROMPT.format(**_format_kwargs(request))


def build_regeneration_prompt(request: MessageRequest, feedback: str) -> str:
    return REGENERATION_PROMPT.format(
        feedback=feedback,
        message_label=request.message_type.value.replace("_", " "),
        **_format_kwargs(request),
    )


def _label_value(line: str, label: str) -> str | None:
    value = line[len(label):].strip()
    return None if value.lower() == "none" else value


def parse_generated_message(text: str) -> dict:
    """Parse SUBJECT: / BODY: / HOOK_USED: / SIGNAL_REFERENCED: sections.

    Falls back to the whole response minus label lines when no BODY is found.
    """
    subject = None
    hook_used = None
    signal_referenced = None
    body_lines: list[str] = []
    in_body = False

    for line in text.strip().split("\n"):
        if line.startswith("SUBJECT:"):
            subject = line[len("SUBJECT:"):].strip()
        elif line.startswith("BODY:"):
            in_body = True
            inline = line[len("BODY:"):].strip()
            if inline:
                body_lines.append(inline)
        elif line.startswith("HOOK_USED:"):
            hook_used = _label_value(line, "HOOK_USED:")
            in_body = False
        elif line.startswith("SIGNAL_REFERENCED:"):
            signal_referenced = _label_value(line, "SIGNAL_REFERENCED:")
            in_body = False
        elif in_body:
            body_lines.append(line)

    body = "\n".join(body_lines).strip()
    if not body:
        body = _LABEL_LINES.sub("", text).strip()

    return {
        "subject": subject,
        "body": body,
        "hook_used": hook_used,
        "signal_referenced": signal_referenced,
    }


class MessageGenerator:
    def __init__(self, llm: LLMClient, max_tokens: int | None = None):
        self.llm = llm
        self.max_tokens = max_tokens or settings.message_max_tokens

    async def _complete(self, prompt: str) -> GeneratedMessage:
        text = await self.llm.generate(prompt, max_tokens=self.max_tokens)
        parsed = parse_generated_message(text)
        analysis = analyze_message_for_slop(parsed["body"])
        return GeneratedMessage(
            subject=parsed["subject"],
            body=parsed["body"],
            slop_score=analysis.score,
            slop_issues=analysis.issues,
            suggested_improvements=analysis.improvements,
            hook_used=parsed["hook_used"],
            signal_referenced=parsed["signal_referenced"],
        )

    async def generate_message(self, request: MessageRequest) -> GeneratedMessage:
        prompt = build_generation_prompt(request)
        try:
            message = await self._complete(prompt)
        except IntelligenceError as e:
            logger.error("Message generation failed for lead %s: %s", request.lead.id, e)
            raise MessageGenerationError("Failed to generate message") from e

        logger.info(
            "Generated %s for lead %s: slop score %d (%d chars)",
            request.message_type.value, request.lead.id, message.slop_score, len(message.body),
        )
        return message

    async def regenerate_message(self, request: MessageRequest, feedback: str) -> GeneratedMessage:
        """Redraft with the user's feedback; the previous draft isn't remembered."""
        prompt = build_regeneration_prompt(request, feedback)
        try:
            message = await self._complete(prompt)
        except IntelligenceError as e:
            logger.error("Message regeneration failed for lead %s: %s", request.lead.id, e)
            raise MessageGenerationError("Failed to regenerate message") from e

        logger.info(
            "Regenerated %s for lead %s: slop score %d",
            request.message_type.value, request.lead.id, message.slop_score,
        )
        return message
