"""
Matching Engine Configuration with Type Safety and Validation
Following 12-factor app principles
"""
from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """
    Matching engine settings with environment variable support.
    Every value can be overridden with a MATCHING_ prefixed variable,
    e.g. MATCHING_SKILL_WEIGHT=0.5
    """

    # Logging
    log_level: str = Field(default="INFO", description="Log level of the talent_matching logger")
    log_json: bool = Field(default=False, description="Emit JSON formatted logs")
    log_file: Optional[str] = Field(default=None, description="Optional log file path")

    # Aggregate blend (normalised to 1 at scoring time)
    skill_weight: float = Field(default=0.6, ge=0, description="Weight of the skill sub-score")
    availability_rate_weight: float = Field(default=0.3, ge=0, description="Weight of the availability/rate sub-score")
    contextual_weight: float = Field(default=0.1, ge=0, description="Weight of the contextual sub-score")

    # Skill blend
    required_skill_share: float = Field(default=0.7, ge=0, description="Share of required skills in the skill score")
    preferred_skill_share: float = Field(default=0.3, ge=0, description="Share of preferred skills in the skill score")
    synonym_match_factor: float = Field(default=0.8, ge=0, le=1, description="Credit for a synonym-only skill match")

    # Availability / rate blend
    availability_share: float = Field(default=0.5, ge=0, description="Share of availability in the availability/rate score")
    rate_share: float = Field(default=0.5, ge=0, description="Share of rate fit in the availability/rate score")

    # Rate scoring
    negotiable_rate_score: float = Field(default=80.0, ge=0, le=100, description="Score when preferred rate exceeds budget but minimum fits")
    rate_overshoot_span: float = Field(default=0.5, gt=0, description="Relative overshoot of budget.max at which rate score reaches 0")
    rate_undershoot_span: float = Field(default=1.0, gt=0, description="Relative undershoot of budget.min at which rate score reaches 0")
    currency_mismatch_score: float = Field(default=50.0, ge=0, le=100, description="Neutral rate score when currencies differ")

    # Contextual points
    location_exact_points: float = Field(default=30.0, description="Location mode exact match")
    location_partial_points: float = Field(default=15.0, description="Location mode partially compatible")
    location_mismatch_points: float = Field(default=-10.0, description="Location incompatible with on-site requirement")
    work_style_points: float = Field(default=10.0, description="Work style preference match")
    company_size_points: float = Field(default=10.0, description="Company size preference match")
    communication_style_points: float = Field(default=5.0, description="Communication style match")
    industry_points: float = Field(default=5.0, description="Client industry experience")
    reputation_points: float = Field(default=30.0, ge=0, description="Maximum reputation contribution")
    reputation_damping: float = Field(default=10.0, gt=0, description="Review count at which rating confidence reaches 50%")

    # Performance
    max_workers: int = Field(default=1, ge=1, description="Worker threads for candidate scoring")
    parallel_threshold: int = Field(default=200, ge=1, description="Minimum pool size before scoring in parallel")
    slow_match_threshold_ms: float = Field(default=250.0, ge=0, description="Log a warning when a call is slower")

    class Config:
        env_prefix = "MATCHING_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached engine settings.
    Uses lru_cache to ensure singleton pattern.
    """
    return Settings()


# Convenience alias
settings = get_settings()
