"""
Contextual Fit Scorer
Soft-preference dimensions: location mode, timezone, work style,
company size, communication style, industry and reputation.

Every dimension adds bounded points; the sum is clamped to [0, 100].
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.config import Settings, get_settings
from ..models.schemas import LocationMode, ProjectRequirement, TalentProfile

logger = logging.getLogger(__name__)

# Common abbreviations, hours from UTC
TIMEZONE_OFFSETS: Dict[str, float] = {
    'UTC': 0, 'GMT': 0, 'WET': 0,
    'EST': -5, 'EDT': -4, 'CST': -6, 'CDT': -5,
    'MST': -7, 'MDT': -6, 'PST': -8, 'PDT': -7,
    'BST': 1, 'CET': 1, 'CEST': 2, 'EET': 2, 'EEST': 3,
    'MSK': 3, 'GST': 4, 'IST': 5.5, 'SGT': 8,
    'JST': 9, 'KST': 9, 'AEST': 10, 'AEDT': 11, 'NZST': 12,
}

# (hour difference ceiling, points)
TIMEZONE_BANDS = [(2, 10.0), (4, 6.0), (6, 3.0)]


@dataclass
class ContextualScore:
    """Contextual dimension of one candidate"""
    score: float
    reputation_score: float
    location_points: float
    timezone_points: float
    timezone_gap_hours: Optional[float] = None
    location_compatible: bool = True
    aligned_preferences: List[str] = field(default_factory=list)


def timezone_offset(name: Optional[str], on: Optional[date] = None) -> Optional[float]:
    """UTC offset in hours for an abbreviation or IANA zone name, None if unknown"""
    if not name:
        return None

    key = name.strip()
    if key.upper() in TIMEZONE_OFFSETS:
        return TIMEZONE_OFFSETS[key.upper()]

    try:
        zone = ZoneInfo(key)
    except (ZoneInfoNotFoundError, ValueError):
        return None

    moment = datetime.combine(on or date(2000, 1, 1), time(12), tzinfo=zone)
    offset = moment.utcoffset()
    return offset.total_seconds() / 3600 if offset is not None else None


def reputation_score(rating: float, review_count: int, damping: float) -> float:
    """
    Confidence-weighted rating on a 0-100 scale.

    Confidence is reviews / (reviews + damping), so a perfect rating from a
    single review stays well below a good rating from many reviews.
    """
    confidence = review_count / (review_count + damping)
    return max(0.0, min(100.0, (rating / 5.0) * confidence * 100))


class ContextualFitScorer:
    """Sums soft-preference points into a 0-100 contextual score"""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def score(self, project: ProjectRequirement, candidate: TalentProfile) -> ContextualScore:
        settings = self.settings

        location_points, location_compatible = self._location_points(project, candidate)
        gap = self._timezone_gap(project, candidate)
        timezone_points = self._timezone_points(gap)

        aligned: List[str] = []
        preference_points = 0.0
        prefs = candidate.preferences

        if project.work_style and prefs.work_style == project.work_style:
            preference_points += settings.work_style_points
            aligned.append("work style")
        if project.company_size and prefs.company_size == project.company_size:
            preference_points += settings.company_size_points
            aligned.append("company size")
        if project.communication_style and prefs.communication_style == project.communication_style:
            preference_points += settings.communication_style_points
            aligned.append("communication style")
        if project.client_industry:
            industry = project.client_industry.strip().lower()
            if any(industry == known.strip().lower() for known in candidate.industries):
                preference_points += settings.industry_points
                aligned.append("industry")

        reputation = reputation_score(candidate.rating, candidate.review_count, settings.reputation_damping)
        reputation_points = reputation / 100 * settings.reputation_points

        total = location_points + timezone_points + preference_points + reputation_points

        return ContextualScore(
            score=max(0.0, min(100.0, total)),
            reputation_score=reputation,
            location_points=location_points,
            timezone_points=timezone_points,
            timezone_gap_hours=gap,
            location_compatible=location_compatible,
            aligned_preferences=aligned,
        )

    def _location_points(self, project: ProjectRequirement, candidate: TalentProfile) -> Tuple[float, bool]:
        settings = self.settings
        required = project.location.mode
        preferred = candidate.remote_preference

        if required != LocationMode.REMOTE and project.location.country and candidate.country:
            if project.location.country.strip().lower() != candidate.country.strip().lower():
                return settings.location_mismatch_points, False

        if required == preferred:
            return settings.location_exact_points, True
        if LocationMode.HYBRID in (required, preferred):
            return settings.location_partial_points, True
        if required == LocationMode.ONSITE:
            # Remote-only talent cannot meet an on-site requirement
            return settings.location_mismatch_points, False
        return 0.0, True

    def _timezone_gap(self, project: ProjectRequirement, candidate: TalentProfile) -> Optional[float]:
        project_offset = timezone_offset(project.location.timezone, project.start_date)
        talent_offset = timezone_offset(candidate.timezone, project.start_date)
        if project_offset is None or talent_offset is None:
            if project.location.timezone:
                logger.debug(
                    f"Unknown timezone pair {project.location.timezone!r}/{candidate.timezone!r} "
                    f"for talent {candidate.id}"
                )
            return None
        gap = abs(project_offset - talent_offset) % 24
        return min(gap, 24 - gap)

    @staticmethod
    def _timezone_points(gap: Optional[float]) -> float:
        if gap is None:
            return 0.0
        for ceiling, points in TIMEZONE_BANDS:
            if gap <= ceiling:
                return points
        return 0.0
