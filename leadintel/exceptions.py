"""Errors raised by the scoring and outreach-synthesis core."""


class IntelligenceError(Exception):
    """Base class for every failure surfaced by an LLM-backed operation."""


class LeadNotFoundError(IntelligenceError, LookupError):
    def __init__(self, lead_id: int):
        super().__init__(f"Lead {lead_id} not found")
        self.lead_id = lead_id


class LLMError(IntelligenceError):
    """The language model call itself failed (network, auth, rate limit...)."""


class SynthesisError(IntelligenceError):
    """The model answered but no usable synthesis could be parsed from it."""


class MessageGenerationError(IntelligenceError):
    pass
