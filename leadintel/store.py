"""Lead persistence on SQLModel.

Reads and writes are plain read-modify-write with no locking: two concurrent
writers to the same lead race and the last one wins.
"""

import logging
from datetime import datetime
from typing import Any

from pydantic import BaseModel
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from leadintel.database import get_session
from leadintel.exceptions import LeadNotFoundError
from leadintel.models import CompositeScoreResult, IntentSignal, Lead, as_utc, utcnow
from leadintel.scoring.signals import calculate_composite_score

logger = logging.getLogger(__name__)

_DATETIME_FIELDS = ("last_contacted_at", "last_signal_date", "created_at", "updated_at")


def _to_column(value: Any) -> Any:
    """Pydantic values (or lists of them) become JSON-ready dicts; datetimes become aware UTC."""
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_to_column(v) for v in value]
    return value


class LeadStore:
    def __init__(self, engine: Engine | None = None):
        self.engine = engine

    def _session(self) -> Session:
        return get_session(self.engine)

    def get_lead(self, lead_id: int) -> Lead | None:
        with self._session() as session:
            return session.get(Lead, lead_id)

    def get_all_leads(self) -> list[Lead]:
        with self._session() as session:
            return list(session.exec(select(Lead)).all())

    def add_lead(self, lead: Lead) -> Lead:
        for name in _DATETIME_FIELDS:
            value = getattr(lead, name)
            if value is not None:
                setattr(lead, name, as_utc(value))
        with self._session() as session:
            session.add(lead)
            session.commit()
            session.refresh(lead)
        logger.info("Stored lead %d: %s", lead.id, lead.institution_name)
        return lead

    def update_lead(self, lead_id: int, **fields: Any) -> Lead:
        with self._session() as session:
            lead = session.get(Lead, lead_id)
            if lead is None:
                raise LeadNotFoundError(lead_id)
            for name, value in fields.items():
                if not hasattr(lead, name):
                    raise AttributeError(f"Lead has no field {name!r}")
                setattr(lead, name, _to_column(value))
            lead.updated_at = utcnow()
            session.add(lead)
            session.commit()
            session.refresh(lead)
        return lead

    def add_intent_signal(self, lead_id: int, signal: IntentSignal) -> tuple[Lead, CompositeScoreResult]:
        """Append a signal and re-score the lead from its full signal list."""
        lead = self.get_lead(lead_id)
        if lead is None:
            raise LeadNotFoundError(lead_id)

        signals = lead.signals() + [signal]
        composite = calculate_composite_score(signals)
        lead = self.update_lead(
            lead_id,
            intent_signals=signals,
            signal_score=composite.score,
            signal_classification=composite.classification,
            outreach_score=composite.score,
            last_signal_date=max(as_utc(s.signal_date) for s in signals),
        )
        logger.info(
            "Added %s signal to lead %d: %d signals, score %d (%s)",
            signal.signal_type.value, lead_id, len(signals), composite.score, composite.classification.value,
        )
        return lead, composite

    def refresh_signal_score(self, lead_id: int) -> CompositeScoreResult:
        """Recompute the composite signal score and persist score + classification."""
        lead = self.get_lead(lead_id)
        if lead is None:
            raise LeadNotFoundError(lead_id)
        composite = calculate_composite_score(lead.signals())
        self.update_lead(
            lead_id,
            signal_score=composite.score,
            signal_classification=composite.classification,
        )
        return composite
