"""Print signal and predictive scores for every stored lead, optionally synthesizing.

Usage:
    python scripts/score_leads.py
    python scripts/score_leads.py --refresh            # persist composite signal scores
    python scripts/score_leads.py --synthesize --min-score 6
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from leadintel.ai.client import build_llm_client
from leadintel.ai.synthesis import SynthesisEngine
from leadintel.config import settings
from leadintel.database import init_db
from leadintel.scoring.predictive import score_all_leads_predictive
from leadintel.scoring.signals import calculate_composite_score, get_signal_urgency
from leadintel.store import LeadStore


def print_scores(store: LeadStore, refresh: bool) -> None:
    leads = store.get_all_leads()
    if not leads:
        print("No leads stored.")
        return

    predictive = {s.lead_id: s for s in score_all_leads_predictive(leads)}
    print(f"{'ID':>4}  {'Lead':<36} {'Signal':>6}  {'Tier':<8} {'Urgency':<9} {'Conv%':>5}  Action")
    for lead in leads:
        signals = lead.signals()
        composite = calculate_composite_score(signals)
        urgency = get_signal_urgency(signals)
        p = predictive[lead.id]
        print(
            f"{lead.id:>4}  {lead.institution_name[:36]:<36} {composite.score:>6}  "
            f"{composite.classification.value:<8} {urgency.urgency.value:<9} "
            f"{p.predicted_conversion_probability:>5}  {p.recommended_action}"
        )
        if refresh:
            store.refresh_signal_score(lead.id)


async def synthesize_ready(store: LeadStore, min_score: int) -> None:
    if not settings.anthropic_api_key:
        print("ANTHROPIC_API_KEY not set, skipping synthesis.")
        return

    engine = SynthesisEngine(store, build_llm_client())
    ready = engine.get_outreach_ready_leads(min_score)
    print(f"\nSynthesizing {len(ready)} leads with outreach score >= {min_score}...")
    results = await engine.synthesize_leads_batch([lead.id for lead in ready])
    for lead_id, synthesis in results.items():
        if synthesis is None:
            print(f"  [{lead_id}] FAILED (see logs)")
        else:
            print(f"  [{lead_id}] {synthesis.outreach_score}/10  {synthesis.why_reach_out_now}")


def main():
    parser = argparse.ArgumentParser(description="Score stored leads")
    parser.add_argument("--refresh", action="store_true", help="Persist composite signal scores")
    parser.add_argument("--synthesize", action="store_true", help="Synthesize outreach-ready leads")
    parser.add_argument("--min-score", type=int, default=settings.outreach_ready_min_score)
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level.upper())
    init_db()
    store = LeadStore()

    print_scores(store, args.refresh)
    if args.synthesize:
        asyncio.run(synthesize_ready(store, args.min_score))


if __name__ == "__main__":
    main()
