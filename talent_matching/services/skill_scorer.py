"""
Skill Compatibility Scorer
Compares required and preferred skill demands against a candidate's skills.

A candidate that satisfies none of the required skills is ineligible.
Unmet required skills otherwise only lower the required-skill ratio.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..models.schemas import CandidateSkill, ScoringWeights, SkillRequirement
from .skill_taxonomy import match_skill_name


@dataclass
class SkillScore:
    """Skill dimension of one candidate"""
    score: float
    satisfies_required: bool
    required_ratio: float
    preferred_ratio: float
    matched_required: List[str] = field(default_factory=list)
    matched_preferred: List[str] = field(default_factory=list)
    missing_required: List[str] = field(default_factory=list)
    synonym_matches: Dict[str, str] = field(default_factory=dict)
    relevant_years: float = 0.0


class SkillCompatibilityScorer:
    """
    Weighted skill matching.

    Each satisfied demand contributes weight x level factor, where the factor
    is 1.0 for an exact name at or above the minimum level and
    `synonym_match_factor` for a synonym at or above it.
    """

    def __init__(self, weights: Optional[ScoringWeights] = None):
        self.weights = weights or ScoringWeights()

    def score(
        self,
        required_skills: Sequence[SkillRequirement],
        preferred_skills: Sequence[SkillRequirement],
        candidate_skills: Sequence[CandidateSkill],
    ) -> SkillScore:
        used: Dict[int, CandidateSkill] = {}

        required_ratio, matched_required, missing_required, req_synonyms = self._ratio(
            required_skills, candidate_skills, used
        )
        preferred_ratio, matched_preferred, _, pref_synonyms = self._ratio(
            preferred_skills, candidate_skills, used
        )

        # No required skills declared counts as fully satisfied
        satisfies_required = not required_skills or bool(matched_required)

        required_share = self.weights.required_share
        preferred_share = self.weights.preferred_share
        blended = (
            required_share * required_ratio + preferred_share * preferred_ratio
        ) / (required_share + preferred_share)

        return SkillScore(
            score=_clamp(blended * 100),
            satisfies_required=satisfies_required,
            required_ratio=required_ratio,
            preferred_ratio=preferred_ratio,
            matched_required=matched_required,
            matched_preferred=matched_preferred,
            missing_required=missing_required,
            synonym_matches={**pref_synonyms, **req_synonyms},
            relevant_years=sum(skill.years_of_experience for skill in used.values()),
        )

    def _ratio(
        self,
        demands: Sequence[SkillRequirement],
        candidate_skills: Sequence[CandidateSkill],
        used: Dict[int, CandidateSkill],
    ) -> Tuple[float, List[str], List[str], Dict[str, str]]:
        """Weighted share of satisfied demands; 1.0 when no weight is declared"""
        total_weight = sum(demand.weight for demand in demands)
        earned = 0.0
        matched: List[str] = []
        missing: List[str] = []
        synonyms: Dict[str, str] = {}

        for demand in demands:
            best = self._best_match(demand, candidate_skills)
            if best is None:
                missing.append(demand.name)
                continue

            factor, index, exact = best
            earned += demand.weight * factor
            matched.append(demand.name)
            used[index] = candidate_skills[index]
            if not exact:
                synonyms[demand.name] = candidate_skills[index].name

        if total_weight <= 0:
            return 1.0, matched, missing, synonyms

        return min(1.0, earned / total_weight), matched, missing, synonyms

    def _best_match(
        self,
        demand: SkillRequirement,
        candidate_skills: Sequence[CandidateSkill],
    ) -> Optional[Tuple[float, int, bool]]:
        """Best (factor, index, exact) among skills at or above the minimum level"""
        best: Optional[Tuple[float, bool, float, int]] = None

        for index, skill in enumerate(candidate_skills):
            matched, exact = match_skill_name(demand.name, skill.name)
            if not matched or skill.level.rank < demand.level.rank:
                continue

            factor = 1.0 if exact else self.weights.synonym_match_factor
            # Earlier skills win full ties so the choice is stable
            candidate = (factor, exact, skill.years_of_experience, -index)
            if best is None or candidate > best:
                best = candidate

        if best is None:
            return None
        return best[0], -best[3], best[1]


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))
