"""
Talent Matching Engine
Scores and ranks candidate talent profiles against a project requirement.
"""
from .core.exceptions import AppException, MatchingCancelledError, ValidationError
from .models.schemas import (
    AvailabilityWindow,
    BudgetRange,
    CandidateSkill,
    LocationRequirement,
    MatchOptions,
    MatchResult,
    ProjectRequirement,
    RateExpectation,
    ScoringWeights,
    SkillLevel,
    SkillRequirement,
    TalentPreferences,
    TalentProfile,
)
from .services.matching_engine import MatchingEngine, find_matches

__version__ = "1.0.0"

__all__ = [
    'AppException',
    'MatchingCancelledError',
    'ValidationError',
    'AvailabilityWindow',
    'BudgetRange',
    'CandidateSkill',
    'LocationRequirement',
    'MatchOptions',
    'MatchResult',
    'ProjectRequirement',
    'RateExpectation',
    'ScoringWeights',
    'SkillLevel',
    'SkillRequirement',
    'TalentPreferences',
    'TalentProfile',
    'MatchingEngine',
    'find_matches',
]
