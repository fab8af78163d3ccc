from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import Field as PydanticField
from pydantic.alias_generators import to_camel
from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel

MAX_TOP_SIGNALS = 3
MAX_PERSONALIZATION_HOOKS = 3
NOT_READY_PREFIX = "NOT READY"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Timezone-aware UTC; naive values (SQLite hands them back that way) are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# --- Enums ---

class SignalType(str, Enum):
    reddit_post = "reddit_post"    # direct intent expression
    g2_review = "g2_review"        # active evaluation
    job_posting = "job_posting"    # growth/change signal
    news = "news"                  # company event
    tech_change = "tech_change"    # technical indicator
    other = "other"                # anything a provider sends that we don't know

    @classmethod
    def coerce(cls, value: Any) -> "SignalType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.other


class Relevance(str, Enum):
    direct = "direct"          # mentions our category or competitors
    adjacent = "adjacent"      # related problem area
    weak = "weak"              # tangential
    unspecified = "unspecified"

    @classmethod
    def coerce(cls, value: Any) -> "Relevance":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.unspecified


class Classification(str, Enum):
    hot = "hot"
    warm = "warm"
    nurture = "nurture"


class Urgency(str, Enum):
    critical = "critical"
    high = "high"
    medium = "medium"
    low = "low"


class Level(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


class FactorCategory(str, Enum):
    engagement = "engagement"
    fit = "fit"
    timing = "timing"
    data_quality = "data_quality"


class MessageType(str, Enum):
    cold_email = "cold_email"
    linkedin = "linkedin"
    follow_up_email = "follow_up_email"

    @property
    def is_email(self) -> bool:
        return self in (MessageType.cold_email, MessageType.follow_up_email)


class LeadStatus(str, Enum):
    not_contacted = "not_contacted"
    contacted = "contacted"
    follow_up = "follow_up"
    qualified = "qualified"
    closed_won = "closed_won"
    closed_lost = "closed_lost"


# --- Value objects ---

class CamelModel(BaseModel):
    """Serializes as camelCase for API consumers, accepts either casing."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IntentSignal(CamelModel):
    model_config = ConfigDict(frozen=True)

    signal_type: SignalType = SignalType.other
    signal_date: datetime
    signal_content: str = ""
    signal_strength: int = PydanticField(default=5, ge=1, le=10)
    relevance_to_us: Relevance = Relevance.unspecified
    source_url: Optional[str] = None

    @field_validator("signal_type", mode="before")
    @classmethod
    def _coerce_signal_type(cls, value: Any) -> SignalType:
        return SignalType.coerce(value)

    @field_validator("relevance_to_us", mode="before")
    @classmethod
    def _coerce_relevance(cls, value: Any) -> Relevance:
        return Relevance.coerce(value)

    @field_validator("signal_date", mode="after")
    @classmethod
    def _utc_date(cls, value: datetime) -> datetime:
        return as_utc(value)


class ScoredSignal(CamelModel):
    signal: IntentSignal
    score: float


class CompositeScoreResult(CamelModel):
    score: int
    classification: Classification
    top_signals: list[ScoredSignal] = PydanticField(default_factory=list)
    reasoning: str


class UrgencyResult(CamelModel):
    urgency: Urgency
    action: str
    deadline: str


class ScoreFactor(CamelModel):
    name: str
    impact: int = PydanticField(ge=-100, le=100)
    description: str
    category: FactorCategory


class PredictiveScore(CamelModel):
    lead_id: Optional[int]
    predicted_conversion_probability: int = PydanticField(ge=0, le=100)
    confidence_level: Level
    score_factors: list[ScoreFactor] = PydanticField(default_factory=list)
    recommended_action: str
    next_best_action: str
    predicted_value: Level


class SlopAnalysis(CamelModel):
    score: int = PydanticField(ge=0, le=100)
    issues: list[str] = PydanticField(default_factory=list)
    improvements: list[str] = PydanticField(default_factory=list)

    @property
    def rating(self) -> str:
        if self.score < 20:
            return "great"
        if self.score < 40:
            return "acceptable"
        return "needs_work"


class SynthesizedContext(CamelModel):
    why_reach_out_now: str
    personalization_hooks: list[str] = PydanticField(default_factory=list)
    recommended_angle: Optional[str] = None
    predicted_objections: list[str] = PydanticField(default_factory=list)
    counter_to_objections: dict[str, str] = PydanticField(default_factory=dict)
    do_not_mention: list[str] = PydanticField(default_factory=list)
    outreach_score: int = 1
    score_reasoning: str = ""

    @field_validator("personalization_hooks", mode="after")
    @classmethod
    def _cap_hooks(cls, hooks: list[str]) -> list[str]:
        return hooks[:MAX_PERSONALIZATION_HOOKS]

    @field_validator("outreach_score", mode="before")
    @classmethod
    def _clamp_score(cls, value: Any) -> int:
        try:
            score = int(float(value) + 0.5)
        except (TypeError, ValueError, OverflowError):
            return 1
        return max(1, min(10, score))

    @property
    def is_ready(self) -> bool:
        return not self.why_reach_out_now.strip().upper().startswith(NOT_READY_PREFIX)


class GeneratedMessage(CamelModel):
    subject: Optional[str] = None
    body: str
    slop_score: int
    slop_issues: list[str] = PydanticField(default_factory=list)
    suggested_improvements: list[str] = PydanticField(default_factory=list)
    hook_used: Optional[str] = None
    signal_referenced: Optional[str] = None


# --- Tables ---

class Lead(SQLModel, table=True):
    __tablename__ = "leads"

    id: Optional[int] = Field(default=None, primary_key=True)
    institution_name: str = Field(index=True)
    institution_type: str = ""  # county, city, district, department
    department: Optional[str] = None
    state: str = ""
    county: Optional[str] = None
    city: Optional[str] = None

    # Contact
    email: Optional[str] = None
    phone_number: Optional[str] = None
    website: Optional[str] = None

    # Fit
    population: Optional[int] = None
    tech_maturity_score: Optional[int] = None  # 1-10
    enrichment_score: Optional[int] = None  # 1-100

    # Enrichment (JSON columns)
    pain_points: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    tech_stack: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    buying_signals: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    decision_makers: list[dict] = Field(default_factory=list, sa_column=Column(JSON))  # {name, title, email, phone}
    recent_news: list[dict] = Field(default_factory=list, sa_column=Column(JSON))  # {title, url, date, summary}
    competitor_analysis: list[dict] = Field(default_factory=list, sa_column=Column(JSON))
    intent_signals: list[dict] = Field(default_factory=list, sa_column=Column(JSON))  # IntentSignal dumps

    # Contact history
    status: LeadStatus = LeadStatus.not_contacted
    last_contacted_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    last_call_outcome: Optional[str] = None  # interested, callback_scheduled, not_interested, voicemail...

    # Scores written back by the core
    signal_score: Optional[int] = None  # composite 1-10
    signal_classification: Optional[Classification] = None
    outreach_score: Optional[int] = None  # 1-10, from signals or synthesis
    synthesized_context: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    last_signal_date: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    def signals(self) -> list[IntentSignal]:
        """Intent signals parsed from the JSON column."""
        return [
            s if isinstance(s, IntentSignal) else IntentSignal.model_validate(s)
            for s in self.intent_signals or []
        ]

    def synthesis(self) -> Optional[SynthesizedContext]:
        if not self.synthesized_context:
            return None
        return SynthesizedContext.model_validate(self.synthesized_context)


class MessageRequest(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    lead: Lead
    message_type: MessageType
    synthesis: Optional[SynthesizedContext] = None
    custom_context: Optional[str] = None
