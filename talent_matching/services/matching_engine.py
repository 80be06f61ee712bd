"""
Candidate Matching Engine
=========================
Scores a pre-selected pool of talent profiles against a project requirement
and returns a deterministically ranked, filtered list.

Pipeline per call:
1. Validate and coerce inputs (models or plain mappings)
2. Score every candidate independently (skills, availability/rate, context)
3. Drop candidates failing a hard filter, then apply min_score
4. Sort by total score with reputation, relevant years and id as tie-breakers

The engine holds configuration only, so one instance can serve concurrent
calls and constructing a new one is cheap.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.config import Settings, get_settings
from ..core.exceptions import MatchingCancelledError, ValidationError
from ..core.logging import PerformanceLogger
from ..models.schemas import (
    MatchOptions,
    MatchResult,
    ProjectRequirement,
    ScoringWeights,
    TalentProfile,
)
from .availability_scorer import (
    ABOVE_BUDGET,
    BELOW_BUDGET,
    CURRENCY_MISMATCH,
    NEGOTIABLE,
    WITHIN_BUDGET,
    AvailabilityRateScore,
    AvailabilityRateScorer,
)
from .contextual_scorer import ContextualFitScorer, ContextualScore
from .skill_scorer import SkillCompatibilityScorer, SkillScore
from .weights import (
    adjusted_for_project,
    aggregate_blend,
    recommended_max_results,
    recommended_min_score,
    weights_from_settings,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_CANCELLED = object()


@dataclass
class _ScoredCandidate:
    """Intermediate per-candidate result before ranking"""
    candidate: TalentProfile
    total_score: float
    skill: SkillScore
    availability: AvailabilityRateScore
    context: ContextualScore
    reasons: List[str]
    concerns: List[str]

    def sort_key(self) -> Tuple[float, float, float, str]:
        return (
            -self.total_score,
            -self.context.reputation_score,
            -self.skill.relevant_years,
            self.candidate.id,
        )

    def to_result(self, rank: int) -> MatchResult:
        return MatchResult(
            talent_id=self.candidate.id,
            total_score=self.total_score,
            skill_score=round(self.skill.score, 2),
            availability_rate_score=round(self.availability.score, 2),
            contextual_score=round(self.context.score, 2),
            availability_score=round(self.availability.availability_score, 2),
            rate_score=round(self.availability.rate_score, 2),
            reputation_score=round(self.context.reputation_score, 2),
            relevant_years=self.skill.relevant_years,
            rank=rank,
            fit_label=fit_label(self.total_score),
            matched_skills=self.skill.matched_required + self.skill.matched_preferred,
            missing_required_skills=list(self.skill.missing_required),
            reasons=list(self.reasons),
            concerns=list(self.concerns),
        )


def fit_label(score: float) -> str:
    """Get fit label for a score"""
    if score >= 85:
        return "Excellent Match"
    elif score >= 70:
        return "Strong Match"
    elif score >= 55:
        return "Good Match"
    elif score >= 40:
        return "Partial Match"
    else:
        return "Low Match"


class MatchingEngine:
    """
    Multi-dimensional talent matching.

    Combines three sub-scores into a 0-100 total:
    1. Skill compatibility (dominant)
    2. Availability overlap and rate/budget fit
    3. Contextual fit (location, preferences, reputation)
    """

    def __init__(self, weights: Optional[ScoringWeights] = None, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.weights = weights or weights_from_settings(self.settings)

    def find_matches(
        self,
        project: Union[ProjectRequirement, Mapping[str, Any]],
        candidates: Iterable[Union[TalentProfile, Mapping[str, Any]]],
        options: Optional[Union[MatchOptions, Mapping[str, Any]]] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[MatchResult]:
        """
        Rank candidates for a project.

        Raises ValidationError for malformed input and MatchingCancelledError
        when `cancel_event` is set before every candidate was scored.
        """
        project, pool, options = self._validate(project, candidates, options)
        if options.recommended_limits:
            options = _with_recommended_limits(project, options)

        if not pool:
            logger.info(f"No candidates supplied for project {project.id}")
            return []

        weights = self._resolve_weights(project, options)

        with PerformanceLogger(
            logger,
            "find_matches",
            threshold_ms=self.settings.slow_match_threshold_ms,
            project_id=project.id,
            candidates=len(pool),
        ):
            scored = self._score_pool(project, pool, weights, options, cancel_event)
            eligible = [entry for entry in scored if entry is not None]

            ranked = eligible
            if options.min_score is not None:
                ranked = [entry for entry in ranked if entry.total_score >= options.min_score]

            ranked.sort(key=_ScoredCandidate.sort_key)

            if options.max_results is not None:
                ranked = ranked[:options.max_results]

            results = [entry.to_result(rank) for rank, entry in enumerate(ranked, start=1)]

        logger.info(
            f"🎯 Project {project.id}: {len(pool)} candidates, {len(eligible)} eligible, "
            f"{len(results)} returned",
            extra={
                "project_id": project.id,
                "candidates": len(pool),
                "eligible": len(eligible),
                "returned": len(results),
            },
        )
        return results

    def evaluate_candidate(
        self,
        project: Union[ProjectRequirement, Mapping[str, Any]],
        candidate: Union[TalentProfile, Mapping[str, Any]],
        options: Optional[Union[MatchOptions, Mapping[str, Any]]] = None,
    ) -> Optional[MatchResult]:
        """
        Score a single candidate without ranking or min_score filtering.
        Returns None when a hard filter excludes the candidate.
        """
        project, pool, options = self._validate(project, [candidate], options)
        weights = self._resolve_weights(project, options)
        entry = self._score_candidate(project, pool[0], weights, options.include_reasons)
        return entry.to_result(rank=0) if entry else None

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate(
        self,
        project: Any,
        candidates: Any,
        options: Any,
    ) -> Tuple[ProjectRequirement, List[TalentProfile], MatchOptions]:
        project = _coerce(ProjectRequirement, project, "project")
        options = _coerce(MatchOptions, options if options is not None else {}, "options")

        if candidates is None or isinstance(candidates, (str, bytes, Mapping)):
            raise ValidationError("candidates must be a list of talent profiles", field="candidates")
        try:
            candidates = iter(candidates)
        except TypeError as exc:
            raise ValidationError("candidates must be a list of talent profiles", field="candidates") from exc

        pool: List[TalentProfile] = []
        seen = {}
        for index, raw in enumerate(candidates):
            candidate = _coerce(TalentProfile, raw, f"candidates.{index}")
            if candidate.id in seen:
                raise ValidationError(
                    f"Duplicate talent id {candidate.id!r} (also at index {seen[candidate.id]})",
                    field=f"candidates.{index}.id",
                )
            seen[candidate.id] = index
            pool.append(candidate)

        return project, pool, options

    def _resolve_weights(self, project: ProjectRequirement, options: MatchOptions) -> ScoringWeights:
        weights = options.custom_weights or self.weights
        if options.dynamic_weights:
            weights = adjusted_for_project(weights, project)
        return weights

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def _score_pool(
        self,
        project: ProjectRequirement,
        pool: Sequence[TalentProfile],
        weights: ScoringWeights,
        options: MatchOptions,
        cancel_event: Optional[threading.Event],
    ) -> List[Optional[_ScoredCandidate]]:
        max_workers = options.max_workers or self.settings.max_workers
        include_reasons = options.include_reasons

        if max_workers > 1 and len(pool) >= self.settings.parallel_threshold:
            def score_one(candidate: TalentProfile):
                if cancel_event is not None and cancel_event.is_set():
                    return _CANCELLED
                return self._score_candidate(project, candidate, weights, include_reasons)

            logger.debug(f"Scoring {len(pool)} candidates on {max_workers} workers")
            with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="match_worker") as executor:
                # map() yields in input order regardless of completion order
                outcomes = list(executor.map(score_one, pool))

            cancelled = sum(1 for outcome in outcomes if outcome is _CANCELLED)
            if cancelled:
                raise MatchingCancelledError(scored=len(pool) - cancelled, total=len(pool))
            return outcomes

        scored: List[Optional[_ScoredCandidate]] = []
        for index, candidate in enumerate(pool):
            if cancel_event is not None and cancel_event.is_set():
                raise MatchingCancelledError(scored=index, total=len(pool))
            scored.append(self._score_candidate(project, candidate, weights, include_reasons))
        return scored

    def _score_candidate(
        self,
        project: ProjectRequirement,
        candidate: TalentProfile,
        weights: ScoringWeights,
        include_reasons: bool = True,
    ) -> Optional[_ScoredCandidate]:
        """Score one candidate; None when a hard filter excludes it"""
        skill = SkillCompatibilityScorer(weights).score(
            project.required_skills, project.preferred_skills, candidate.skills
        )
        if not skill.satisfies_required:
            logger.debug(f"Excluded talent {candidate.id}: no required skill satisfied")
            return None

        availability = AvailabilityRateScorer(weights, self.settings).score(project, candidate)
        if not availability.is_eligible:
            logger.debug(f"Excluded talent {candidate.id}: {availability.exclusion_reason}")
            return None

        context = ContextualFitScorer(self.settings).score(project, candidate)

        blend = aggregate_blend(weights)
        total = (
            blend['skill'] * skill.score
            + blend['availability_rate'] * availability.score
            + blend['contextual'] * context.score
        )
        total = round(max(0.0, min(100.0, total)), 2)

        reasons: List[str] = []
        concerns: List[str] = []
        if include_reasons:
            reasons, concerns = _explain(project, candidate, skill, availability, context)

        return _ScoredCandidate(
            candidate=candidate,
            total_score=total,
            skill=skill,
            availability=availability,
            context=context,
            reasons=reasons,
            concerns=concerns,
        )


def find_matches(
    project: Union[ProjectRequirement, Mapping[str, Any]],
    candidates: Iterable[Union[TalentProfile, Mapping[str, Any]]],
    options: Optional[Union[MatchOptions, Mapping[str, Any]]] = None,
) -> List[MatchResult]:
    """Rank candidates with a freshly configured engine"""
    return MatchingEngine().find_matches(project, candidates, options)


def _with_recommended_limits(project: ProjectRequirement, options: MatchOptions) -> MatchOptions:
    """Fill min_score and max_results the caller left unset with per-project suggestions"""
    return options.model_copy(update={
        'min_score': options.min_score if options.min_score is not None else recommended_min_score(project),
        'max_results': options.max_results if options.max_results is not None else recommended_max_results(project),
    })


def _coerce(model: Type[ModelT], value: Any, field: str) -> ModelT:
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc, prefix=field) from exc


def _explain(
    project: ProjectRequirement,
    candidate: TalentProfile,
    skill: SkillScore,
    availability: AvailabilityRateScore,
    context: ContextualScore,
) -> Tuple[List[str], List[str]]:
    """Human-readable reasons and concerns for one match"""
    reasons: List[str] = []
    concerns: List[str] = []

    if skill.matched_required:
        reasons.append(f"Meets required skills: {', '.join(skill.matched_required)}")
    if skill.matched_preferred:
        reasons.append(f"Brings preferred skills: {', '.join(skill.matched_preferred)}")
    for demand, actual in skill.synonym_matches.items():
        reasons.append(f"{actual} counted as related experience for {demand}")
    if skill.missing_required:
        concerns.append(f"Missing required skills: {', '.join(skill.missing_required)}")

    if availability.coverage >= 0.999:
        reasons.append("Available for the full project window")
    else:
        concerns.append(f"Covers {availability.coverage:.0%} of the project window")

    budget, rate = project.budget, candidate.rate
    status = availability.rate_status
    if status == WITHIN_BUDGET:
        reasons.append("Preferred rate within budget")
    elif status == NEGOTIABLE:
        concerns.append("Preferred rate above budget, minimum rate fits")
    elif status == ABOVE_BUDGET:
        concerns.append(f"Minimum rate {rate.minimum_rate:g} exceeds budget max {budget.max:g}")
    elif status == BELOW_BUDGET:
        concerns.append(f"Preferred rate {rate.preferred_rate:g} below budget min {budget.min:g}")
    elif status == CURRENCY_MISMATCH:
        concerns.append(f"Rate quoted in {rate.currency}, budget in {budget.currency}")

    if context.reputation_score >= 60:
        reasons.append(
            f"Strong reputation ({candidate.rating:.1f}/5 from {candidate.review_count} reviews)"
        )
    if context.aligned_preferences:
        reasons.append(f"Aligned on {', '.join(context.aligned_preferences)}")
    if not context.location_compatible:
        concerns.append(
            f"Location preference {candidate.remote_preference.value} does not fit "
            f"{project.location.mode.value} requirement"
        )
    if context.timezone_gap_hours is not None and context.timezone_gap_hours > 6:
        concerns.append(f"{context.timezone_gap_hours:g}h timezone difference")

    return reasons, concerns
