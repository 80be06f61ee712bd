"""
Pydantic Models for the Matching Engine
Immutable snapshots of the demand side, the supply side, and the ranked output
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import List, Optional, Dict, Any
from datetime import date, timedelta
from enum import Enum


# ============================================================================
# Enums for Type Safety
# ============================================================================

class SkillLevel(str, Enum):
    """Ordinal proficiency scale: junior < mid < senior < lead"""
    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"
    LEAD = "lead"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized == "expert":
                return cls.LEAD
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @property
    def rank(self) -> int:
        return _LEVEL_RANKS[self]


_LEVEL_RANKS = {
    SkillLevel.JUNIOR: 1,
    SkillLevel.MID: 2,
    SkillLevel.SENIOR: 3,
    SkillLevel.LEAD: 4,
}


class LocationMode(str, Enum):
    REMOTE = "remote"
    HYBRID = "hybrid"
    ONSITE = "onsite"


class Urgency(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class CompanySize(str, Enum):
    STARTUP = "startup"
    SMALL = "small"
    MEDIUM = "medium"
    ENTERPRISE = "enterprise"


class WorkStyle(str, Enum):
    AGILE = "agile"
    WATERFALL = "waterfall"
    HYBRID = "hybrid"


class CommunicationStyle(str, Enum):
    FORMAL = "formal"
    CASUAL = "casual"
    MIXED = "mixed"


class _Snapshot(BaseModel):
    """Frozen base: the engine never mutates its inputs"""
    model_config = ConfigDict(frozen=True, extra="ignore", use_enum_values=False)


# ============================================================================
# Skills
# ============================================================================

class SkillRequirement(_Snapshot):
    """A skill demand on a project"""
    name: str = Field(..., min_length=1, max_length=100)
    level: SkillLevel = SkillLevel.JUNIOR
    weight: float = Field(default=1.0, ge=0, description="How critical this skill is")
    is_required: bool = True

    @field_validator('level', mode='before')
    @classmethod
    def parse_level(cls, v: Any) -> Any:
        return SkillLevel(v) if isinstance(v, str) else v

    @field_validator('name')
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Skill name must not be blank')
        return v


class CandidateSkill(_Snapshot):
    """A skill a candidate possesses"""
    name: str = Field(..., min_length=1, max_length=100)
    level: SkillLevel = SkillLevel.JUNIOR
    years_of_experience: float = Field(default=0, ge=0, le=70)
    category: str = Field(default="other")

    @field_validator('level', mode='before')
    @classmethod
    def parse_level(cls, v: Any) -> Any:
        return SkillLevel(v) if isinstance(v, str) else v

    @field_validator('name')
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Skill name must not be blank')
        return v


# ============================================================================
# Availability, rate and budget
# ============================================================================

class AvailabilityWindow(_Snapshot):
    """A contiguous period of candidate capacity"""
    start_date: date
    end_date: date
    capacity: float = Field(default=100, ge=0, le=100, description="Capacity percentage")
    timezone: str = "UTC"

    @model_validator(mode='after')
    def check_order(self):
        if self.end_date < self.start_date:
            raise ValueError('end_date must not be before start_date')
        return self


class RateExpectation(_Snapshot):
    """Candidate's pricing"""
    hourly_rate: float = Field(..., ge=0)
    minimum_rate: Optional[float] = Field(default=None, ge=0)
    preferred_rate: Optional[float] = Field(default=None, ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)

    @model_validator(mode='before')
    @classmethod
    def fill_defaults(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            if data.get('preferred_rate') is None:
                data['preferred_rate'] = data.get('hourly_rate')
            if data.get('minimum_rate') is None:
                data['minimum_rate'] = data.get('preferred_rate')
        return data

    @model_validator(mode='after')
    def check_order(self):
        if self.minimum_rate > self.preferred_rate:
            raise ValueError('minimum_rate must not exceed preferred_rate')
        return self

    @field_validator('currency')
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()


class BudgetRange(_Snapshot):
    """Project hourly budget"""
    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)

    @model_validator(mode='after')
    def check_order(self):
        if self.min > self.max:
            raise ValueError('budget min must not exceed max')
        return self

    @field_validator('currency')
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()


# ============================================================================
# Demand side
# ============================================================================

class LocationRequirement(_Snapshot):
    mode: LocationMode = LocationMode.REMOTE
    timezone: Optional[str] = None
    country: Optional[str] = None


class ProjectRequirement(_Snapshot):
    """The demand side of a match"""
    id: str = Field(..., min_length=1)
    title: str = ""
    required_skills: List[SkillRequirement] = Field(default_factory=list)
    preferred_skills: List[SkillRequirement] = Field(default_factory=list)
    budget: BudgetRange
    start_date: date
    duration_weeks: float = Field(..., gt=0)
    location: LocationRequirement = Field(default_factory=LocationRequirement)
    urgency: Urgency = Urgency.MEDIUM
    client_industry: Optional[str] = None
    company_size: Optional[CompanySize] = None
    work_style: Optional[WorkStyle] = None
    communication_style: Optional[CommunicationStyle] = None

    @field_validator('duration_weeks')
    @classmethod
    def at_least_one_day(cls, v: float) -> float:
        if v * 7 < 1:
            raise ValueError('duration must cover at least one day')
        return v

    @property
    def end_date(self) -> date:
        return self.start_date + timedelta(days=7 * self.duration_weeks)


# ============================================================================
# Supply side
# ============================================================================

class TalentPreferences(_Snapshot):
    company_size: Optional[CompanySize] = None
    work_style: Optional[WorkStyle] = None
    communication_style: Optional[CommunicationStyle] = None


class TalentProfile(_Snapshot):
    """The supply side of a match"""
    id: str = Field(..., min_length=1)
    name: str = ""
    skills: List[CandidateSkill] = Field(default_factory=list)
    availability: List[AvailabilityWindow] = Field(default_factory=list)
    rate: RateExpectation
    remote_preference: LocationMode = LocationMode.REMOTE
    timezone: str = "UTC"
    country: Optional[str] = None
    languages: List[str] = Field(default_factory=list)
    industries: List[str] = Field(default_factory=list)
    rating: float = Field(default=0, ge=0, le=5)
    review_count: int = Field(default=0, ge=0)
    preferences: TalentPreferences = Field(default_factory=TalentPreferences)
    is_available: bool = True


# ============================================================================
# Options and output
# ============================================================================

class ScoringWeights(_Snapshot):
    """
    Named, overridable scoring weights.
    Each blend is normalised to sum to 1 before use.
    """
    skill: float = Field(default=0.6, ge=0)
    availability_rate: float = Field(default=0.3, ge=0)
    contextual: float = Field(default=0.1, ge=0)
    required_share: float = Field(default=0.7, ge=0)
    preferred_share: float = Field(default=0.3, ge=0)
    availability_share: float = Field(default=0.5, ge=0)
    rate_share: float = Field(default=0.5, ge=0)
    synonym_match_factor: float = Field(default=0.8, ge=0, le=1)

    @model_validator(mode='after')
    def check_blends(self):
        blends = {
            'skill/availability_rate/contextual': self.skill + self.availability_rate + self.contextual,
            'required_share/preferred_share': self.required_share + self.preferred_share,
            'availability_share/rate_share': self.availability_share + self.rate_share,
        }
        for name, total in blends.items():
            if total <= 0:
                raise ValueError(f'{name} weights must not all be zero')
        return self


class MatchOptions(_Snapshot):
    """Caller-supplied tuning"""
    min_score: Optional[float] = Field(default=None, ge=0, le=100)
    max_results: Optional[int] = Field(default=None, ge=1)
    include_reasons: bool = True
    custom_weights: Optional[ScoringWeights] = None
    dynamic_weights: bool = False
    recommended_limits: bool = False
    max_workers: Optional[int] = Field(default=None, ge=1)


class MatchResult(_Snapshot):
    """Output of one scoring pass for one candidate"""
    talent_id: str
    total_score: float = Field(ge=0, le=100)
    skill_score: float = Field(ge=0, le=100)
    availability_rate_score: float = Field(ge=0, le=100)
    contextual_score: float = Field(ge=0, le=100)
    availability_score: float = Field(default=0, ge=0, le=100)
    rate_score: float = Field(default=0, ge=0, le=100)
    reputation_score: float = Field(default=0, ge=0, le=100)
    relevant_years: float = 0
    rank: int = 0
    fit_label: str = ""
    matched_skills: List[str] = Field(default_factory=list)
    missing_required_skills: List[str] = Field(default_factory=list)
    reasons: List[str] = Field(default_factory=list)
    concerns: List[str] = Field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
