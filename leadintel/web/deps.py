from functools import lru_cache

from fastapi import Depends

from leadintel.ai.client import LLMClient, build_llm_client
from leadintel.ai.composer import MessageGenerator
from leadintel.ai.synthesis import SynthesisEngine
from leadintel.exceptions import LeadNotFoundError
from leadintel.models import Lead
from leadintel.store import LeadStore


@lru_cache
def get_store() -> LeadStore:
    return LeadStore()


@lru_cache
def get_llm() -> LLMClient:
    return build_llm_client()


def get_synthesis_engine(
    store: LeadStore = Depends(get_store),
    llm: LLMClient = Depends(get_llm),
) -> SynthesisEngine:
    return SynthesisEngine(store, llm)


def get_message_generator(llm: LLMClient = Depends(get_llm)) -> MessageGenerator:
    return MessageGenerator(llm)


def require_lead(store: LeadStore, lead_id: int) -> Lead:
    lead = store.get_lead(lead_id)
    if lead is None:
        raise LeadNotFoundError(lead_id)
    return lead
