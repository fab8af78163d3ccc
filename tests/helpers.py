"""Shared builders and test doubles."""

import asyncio
from datetime import datetime, timedelta, timezone

from leadintel.models import IntentSignal

NOW = datetime(2026, 3, 2, 12, 0, 0, tzinfo=timezone.utc)

SYNTHESIS_JSON = {
    "whyReachOutNow": "Their IT director posted on r/govtech asking for permit software alternatives on Monday.",
    "personalizationHooks": [
        "Permit backlog complaint - SOURCE: reddit post",
        "Hiring a GIS analyst - SOURCE: job posting",
    ],
    "recommendedAngle": "Lead with backlog reduction numbers from a similar county",
    "predictedObjections": ["We just renewed our contract"],
    "counterToObjections": {"We just renewed our contract": "Pilot runs alongside the current tool"},
    "doNotMention": ["The audit finding from 2024"],
    "outreachScore": 8,
    "scoreReasoning": "Direct, recent evaluation intent",
}


def make_signal(days_ago: float = 0, now: datetime = NOW, **overrides) -> IntentSignal:
    data = {
        "signal_type": "news",
        "signal_date": now - timedelta(days=days_ago),
        "signal_content": "County announced a records modernization initiative",
        "signal_strength": 5,
        "relevance_to_us": "adjacent",
    }
    data.update(overrides)
    return IntentSignal(**data)


class ConcurrencyTrackingLLM:
    """Records how many generate() calls overlap."""

    def __init__(self, response: str, delay: float = 0.01):
        self.response = response
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self.calls = 0

    async def generate(self, prompt, max_tokens=2048, system=None, temperature=0.7):
        self.calls += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            return self.response
        finally:
            self.in_flight -= 1
