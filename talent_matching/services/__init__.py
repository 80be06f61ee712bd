"""
Initialize services package

Available services:
- SkillCompatibilityScorer: Weighted required/preferred skill matching
- AvailabilityRateScorer: Calendar overlap and rate/budget fit
- ContextualFitScorer: Location, preferences and reputation
- MatchingEngine: Aggregation, hard filters and deterministic ranking
"""
