"""LLM-backed outreach synthesis and message drafting, plus the slop linter."""

from leadintel.ai.client import LLMClient, build_llm_client
from leadintel.ai.composer import MessageGenerator
from leadintel.ai.slop import analyze_message_for_slop
from leadintel.ai.synthesis import SynthesisEngine

__all__ = [
    "LLMClient",
    "build_llm_client",
    "MessageGenerator",
    "SynthesisEngine",
    "analyze_message_for_slop",
]
