from .schemas import (
    AvailabilityWindow,
    BudgetRange,
    CandidateSkill,
    CommunicationStyle,
    CompanySize,
    LocationMode,
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
    Urgency,
    WorkStyle,
)
