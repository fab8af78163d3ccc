import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from leadintel.models import Lead, utcnow
from leadintel.store import LeadStore
from tests.helpers import SYNTHESIS_JSON, make_signal


@pytest.fixture
def engine():
    """In-memory SQLite shared across threads (TestClient runs sync routes in a pool)."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return LeadStore(engine)


@pytest.fixture
def llm():
    client = MagicMock()
    client.generate = AsyncMock(return_value=json.dumps(SYNTHESIS_JSON))
    return client


@pytest.fixture
def signal_lead(store):
    now = utcnow()
    return store.add_lead(Lead(
        institution_name="Travis County",
        institution_type="county",
        department="IT",
        state="TX",
        city="Austin",
        county="Travis",
        email="it@traviscounty.gov",
        pain_points=["Permit backlog"],
        intent_signals=[
            make_signal(days_ago=3, now=now, signal_type="reddit_post",
                        signal_content="Looking for alternatives to our permit system").model_dump(mode="json"),
            make_signal(days_ago=10, now=now, signal_type="job_posting",
                        signal_content="Hiring GIS analyst").model_dump(mode="json"),
        ],
    ))


@pytest.fixture
def empty_lead(store):
    return store.add_lead(Lead(institution_name="Quiet Township", institution_type="city", state="OH"))
