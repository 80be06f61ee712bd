"""
Availability & Rate Scorer
Checks temporal overlap with the project window and rate/budget compatibility.

Unavailable candidates, and candidates without a window overlapping the
project with positive capacity, are ineligible. Rate mismatch only lowers
the score.
"""
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Sequence, Tuple

from ..core.config import Settings, get_settings
from ..models.schemas import (
    AvailabilityWindow,
    BudgetRange,
    ProjectRequirement,
    RateExpectation,
    ScoringWeights,
    TalentProfile,
)

# Rate fit statuses
WITHIN_BUDGET = "within_budget"
NEGOTIABLE = "negotiable"
ABOVE_BUDGET = "above_budget"
BELOW_BUDGET = "below_budget"
CURRENCY_MISMATCH = "currency_mismatch"


@dataclass
class AvailabilityRateScore:
    """Availability/rate dimension of one candidate"""
    score: float
    is_eligible: bool
    availability_score: float
    rate_score: float
    coverage: float
    rate_status: Optional[str] = None
    exclusion_reason: Optional[str] = None


def overlap_days(window: AvailabilityWindow, start: date, end: date) -> int:
    """
    Days shared by a window and the project range [start, end).

    A window includes both of its own dates, so a one-day window has
    start_date == end_date.
    """
    overlap_start = max(start, window.start_date)
    overlap_end = min(end, window.end_date + timedelta(days=1))
    if overlap_end <= overlap_start:
        return 0
    return (overlap_end - overlap_start).days


class AvailabilityRateScorer:
    """Scores how well a candidate's calendar and pricing fit a project"""

    def __init__(self, weights: Optional[ScoringWeights] = None, settings: Optional[Settings] = None):
        self.weights = weights or ScoringWeights()
        self.settings = settings or get_settings()

    def score(self, project: ProjectRequirement, candidate: TalentProfile) -> AvailabilityRateScore:
        if not candidate.is_available:
            return AvailabilityRateScore(
                score=0.0,
                is_eligible=False,
                availability_score=0.0,
                rate_score=0.0,
                coverage=0.0,
                exclusion_reason="marked unavailable",
            )

        coverage, has_overlap = self.coverage(project, candidate.availability)
        if not has_overlap:
            return AvailabilityRateScore(
                score=0.0,
                is_eligible=False,
                availability_score=0.0,
                rate_score=0.0,
                coverage=0.0,
                exclusion_reason="no availability overlapping the project window",
            )

        rate_score, rate_status = self.rate_score(project.budget, candidate.rate)
        availability_score = coverage * 100
        availability_share = self.weights.availability_share
        rate_share = self.weights.rate_share
        combined = (
            availability_share * availability_score + rate_share * rate_score
        ) / (availability_share + rate_share)

        return AvailabilityRateScore(
            score=max(0.0, min(100.0, combined)),
            is_eligible=True,
            availability_score=availability_score,
            rate_score=rate_score,
            coverage=coverage,
            rate_status=rate_status,
        )

    def coverage(
        self,
        project: ProjectRequirement,
        windows: Sequence[AvailabilityWindow],
    ) -> Tuple[float, bool]:
        """
        Capacity-weighted fraction of the project window that is covered.

        Returns (coverage in [0, 1], whether any window overlaps with capacity > 0).
        """
        start, end = project.start_date, project.end_date
        project_days = (end - start).days
        covered = 0.0
        has_overlap = False

        for window in windows:
            days = overlap_days(window, start, end)
            if days > 0 and window.capacity > 0:
                has_overlap = True
                covered += days * window.capacity / 100

        if project_days <= 0:
            return (1.0 if has_overlap else 0.0), has_overlap

        # Overlapping windows may double count; coverage saturates at 1
        return min(1.0, covered / project_days), has_overlap

    def rate_score(self, budget: BudgetRange, rate: RateExpectation) -> Tuple[float, str]:
        """Score the candidate's rate expectation against the budget range"""
        settings = self.settings

        if rate.currency != budget.currency:
            return settings.currency_mismatch_score, CURRENCY_MISMATCH

        preferred = rate.preferred_rate
        minimum = rate.minimum_rate

        if budget.min <= preferred <= budget.max:
            return 100.0, WITHIN_BUDGET

        if preferred > budget.max:
            if minimum <= budget.max:
                return settings.negotiable_rate_score, NEGOTIABLE
            if budget.max <= 0:
                return 0.0, ABOVE_BUDGET
            overshoot = (minimum - budget.max) / budget.max
            decay = max(0.0, 1 - overshoot / settings.rate_overshoot_span)
            return settings.negotiable_rate_score * decay, ABOVE_BUDGET

        # preferred < budget.min, so budget.min > 0
        undershoot = (budget.min - preferred) / budget.min
        decay = max(0.0, 1 - undershoot / settings.rate_undershoot_span)
        return 100.0 * decay, BELOW_BUDGET
