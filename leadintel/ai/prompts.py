"""Prompt templates for outreach synthesis and message generation."""

SYNTHESIS_PROMPT = """You are an elite B2B sales intelligence analyst. Your job is to synthesize raw data \
about a prospect into actionable outreach intelligence.

CRITICAL ANTI-SLOP RULES:
1. NEVER use generic opener phrases like "I hope this finds you well", "reaching out", "touch base"
2. NEVER use corporate buzzwords like "leverage", "synergy", "circle back"
3. Every insight must be SPECIFIC and reference actual data
4. If you can't find a genuine reason to reach out NOW, say "NOT READY"
5. First line of any recommended opener MUST reference something specific (a post, quote, data point)

LEAD DATA:
{lead_data}

INTENT SIGNALS:
{intent_signals}

SIGNAL SCORE: {signal_score}/10 ({classification})

YOUR TASK:
Analyze this data and generate:

1. WHY REACH OUT NOW (1-2 sentences)
   - What specific trigger makes this the RIGHT moment?
   - If there's no clear trigger, output "NOT READY: [what signal we'd need]"

2. PERSONALIZATION HOOKS (top 3)
   - Each must reference specific data from the signals
   - Format: "[hook description] - SOURCE: [where this came from]"

3. RECOMMENDED ANGLE
   - What approach best fits their situation?
   - Based on signals, not assumptions

4. PREDICTED OBJECTIONS (top 2-3)
   - What they're likely to say
   - Counter for each objection

5. DO NOT MENTION (warning list)
   - Things that would be creepy to mention
   - Things that would be forced or irrelevant
   - Things they might be sensitive about

6. OUTREACH SCORE (1-10)
   - 1-3: Not ready, need more signals
   - 4-6: Could reach out, but weak timing
   - 7-8: Good signals, clear reason
   - 9-10: Urgent/hot, reach out immediately
   - Include 1-sentence reasoning

Respond ONLY with JSON matching this structure:
{{
  "whyReachOutNow": "string or NOT READY: [reason]",
  "personalizationHooks": ["hook1 - SOURCE: x", "hook2 - SOURCE: y", "hook3 - SOURCE: z"],
  "recommendedAngle": "string",
  "predictedObjections": ["objection1", "objection2"],
  "counterToObjections": {{"objection1": "counter1", "objection2": "counter2"}},
  "doNotMention": ["thing1", "thing2"],
  "outreachScore": number,
  "scoreReasoning": "string"
}}"""


TYPE_INSTRUCTIONS = {
    "cold_email": "Write a cold email. Include a subject line.",
    "linkedin": (
        "Write a LinkedIn connection request message. No subject needed. "
        "Keep it under 300 characters."
    ),
    "follow_up_email": (
        "Write a follow-up email. Include a subject line. Reference the previous outreach."
    ),
}


GENERATION_PROMPT = """You are writing outreach for {sender_company}.

LEAD CONTEXT:
{lead_context}
{custom_context}
TASK: {task}

HARD CONSTRAINTS (MUST FOLLOW):
{constraints}

OUTPUT FORMAT:
{output_format}"""


REGENERATION_PROMPT = """You are writing outreach for {sender_company}.

LEAD CONTEXT:
{lead_context}
{custom_context}
USER FEEDBACK ON PREVIOUS VERSION:
{feedback}

TASK: Regenerate the {message_label} incorporating this feedback. {task}

CONSTRAINTS:
{constraints}

OUTPUT FORMAT:
{output_format}"""


OUTPUT_FORMAT_EMAIL = """SUBJECT: [subject line]
BODY:
[message body]

HOOK_USED: [which personalization hook you used, or "none"]
SIGNAL_REFERENCED: [which specific signal you referenced, or "none"]"""


OUTPUT_FORMAT_PLAIN = """BODY:
[message body]

HOOK_USED: [which personalization hook you used, or "none"]
SIGNAL_REFERENCED: [which specific signal you referenced, or "none"]"""
