"""
Scoring Weights
Builds the default ScoringWeights from settings and applies the
urgency and industry adjustments used when dynamic weighting is requested.
Also suggests min_score and max_results defaults per project.
"""
from typing import Dict, Optional

from ..core.config import Settings, get_settings
from ..models.schemas import ProjectRequirement, ScoringWeights, Urgency

# Urgent projects care more about who can start on time
URGENCY_MULTIPLIERS: Dict[Urgency, float] = {
    Urgency.LOW: 1.0,
    Urgency.MEDIUM: 1.2,
    Urgency.HIGH: 1.5,
    Urgency.CRITICAL: 2.0,
}

# Per-industry multipliers on the top-level blend
INDUSTRY_MULTIPLIERS: Dict[str, Dict[str, float]] = {
    'healthcare': {'skill': 1.3, 'contextual': 1.3},
    'finance': {'skill': 1.3, 'contextual': 1.4},
    'ecommerce': {'skill': 1.2, 'availability_rate': 1.1},
    'saas': {'skill': 1.3, 'contextual': 1.1},
    'startup': {'availability_rate': 1.2},
    'enterprise': {'skill': 1.3, 'contextual': 1.3},
}

# Industries where a higher bar is recommended
STRICT_INDUSTRIES = {'healthcare', 'finance'}


def weights_from_settings(settings: Optional[Settings] = None) -> ScoringWeights:
    """Default weights as configured through MATCHING_* variables"""
    settings = settings or get_settings()
    return ScoringWeights(
        skill=settings.skill_weight,
        availability_rate=settings.availability_rate_weight,
        contextual=settings.contextual_weight,
        required_share=settings.required_skill_share,
        preferred_share=settings.preferred_skill_share,
        availability_share=settings.availability_share,
        rate_share=settings.rate_share,
        synonym_match_factor=settings.synonym_match_factor,
    )


def aggregate_blend(weights: ScoringWeights) -> Dict[str, float]:
    """Top-level blend normalised to sum to 1"""
    total = weights.skill + weights.availability_rate + weights.contextual
    return {
        'skill': weights.skill / total,
        'availability_rate': weights.availability_rate / total,
        'contextual': weights.contextual / total,
    }


def _renormalised(weights: ScoringWeights, skill: float, availability_rate: float, contextual: float) -> ScoringWeights:
    total = skill + availability_rate + contextual
    return weights.model_copy(update={
        'skill': skill / total,
        'availability_rate': availability_rate / total,
        'contextual': contextual / total,
    })


def adjusted_for_urgency(weights: ScoringWeights, urgency: Urgency) -> ScoringWeights:
    """
    Boost the availability/rate weight by the project's urgency and
    renormalise the top-level blend.
    """
    multiplier = URGENCY_MULTIPLIERS.get(urgency, 1.0)
    return _renormalised(
        weights,
        weights.skill,
        weights.availability_rate * multiplier,
        weights.contextual,
    )


def adjusted_for_industry(weights: ScoringWeights, industry: Optional[str]) -> ScoringWeights:
    """Apply the client industry's multipliers; unknown industries leave weights as they are"""
    multipliers = INDUSTRY_MULTIPLIERS.get((industry or '').strip().lower())
    if not multipliers:
        return weights
    return _renormalised(
        weights,
        weights.skill * multipliers.get('skill', 1.0),
        weights.availability_rate * multipliers.get('availability_rate', 1.0),
        weights.contextual * multipliers.get('contextual', 1.0),
    )


def adjusted_for_project(weights: ScoringWeights, project: ProjectRequirement) -> ScoringWeights:
    """Urgency, then industry adjustment, as used for dynamic weighting"""
    return adjusted_for_industry(adjusted_for_urgency(weights, project.urgency), project.client_industry)


def recommended_min_score(project: ProjectRequirement) -> float:
    """
    Suggested min_score for a project: 60 by default, stricter for urgent
    projects and regulated industries, never above 80.
    """
    score = {Urgency.CRITICAL: 70.0, Urgency.HIGH: 65.0}.get(project.urgency, 60.0)
    if (project.client_industry or '').strip().lower() in STRICT_INDUSTRIES:
        score += 5.0
    return min(score, 80.0)


def recommended_max_results(project: ProjectRequirement) -> int:
    """Suggested shortlist length: longer for urgent and enterprise projects, at most 50"""
    count = {Urgency.CRITICAL: 30, Urgency.HIGH: 25}.get(project.urgency, 20)
    if (project.client_industry or '').strip().lower() == 'enterprise':
        count += 5
    return min(count, 50)
