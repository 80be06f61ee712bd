"""
Pytest Configuration and Shared Fixtures

Builders for project requirements and talent profiles shaped like the
payloads the request-handling layer hands to the engine.

Fixtures:
---------
- settings: Settings with defaults, isolated from .env and MATCHING_* variables
- engine: MatchingEngine built from those settings
- make_project: factory for ProjectRequirement
- make_talent: factory for TalentProfile
- react_project / senior_react_talent / midlevel_talent: the ranked-match scenario
"""

import os
from datetime import date

import pytest

from talent_matching.core.config import Settings
from talent_matching.models.schemas import ProjectRequirement, TalentProfile
from talent_matching.services.matching_engine import MatchingEngine


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host MATCHING_* variables out of the tests."""
    for key in list(os.environ):
        if key.startswith("MATCHING_"):
            monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def engine(settings):
    return MatchingEngine(settings=settings)


def _project_payload(**overrides):
    payload = {
        'id': 'project-1',
        'title': 'React Developer Needed',
        'required_skills': [
            {'name': 'React', 'level': 'senior', 'weight': 10, 'is_required': True},
            {'name': 'TypeScript', 'level': 'mid', 'weight': 8, 'is_required': True},
        ],
        'preferred_skills': [
            {'name': 'Node.js', 'level': 'mid', 'weight': 5, 'is_required': False},
        ],
        'budget': {'min': 80, 'max': 120, 'currency': 'USD'},
        'start_date': date(2024, 3, 1),
        'duration_weeks': 12,
        'location': {'mode': 'remote'},
        'urgency': 'medium',
        'client_industry': 'technology',
        'company_size': 'startup',
        'work_style': 'agile',
    }
    payload.update(overrides)
    return payload


def _talent_payload(talent_id, **overrides):
    payload = {
        'id': talent_id,
        'name': f'Talent {talent_id}',
        'skills': [
            {'name': 'React', 'level': 'senior', 'years_of_experience': 5, 'category': 'frontend'},
            {'name': 'TypeScript', 'level': 'senior', 'years_of_experience': 4, 'category': 'frontend'},
        ],
        'availability': [
            {'start_date': date(2024, 2, 1), 'end_date': date(2024, 6, 1), 'capacity': 100, 'timezone': 'EST'},
        ],
        'rate': {'hourly_rate': 100, 'minimum_rate': 80, 'preferred_rate': 100, 'currency': 'USD'},
        'remote_preference': 'remote',
        'timezone': 'EST',
        'country': 'US',
        'languages': ['English'],
        'rating': 4.8,
        'review_count': 15,
        'preferences': {'company_size': 'startup', 'work_style': 'agile', 'communication_style': 'casual'},
        'is_available': True,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_project():
    """Factory: make_project(**overrides) -> ProjectRequirement"""
    def _make(**overrides):
        return ProjectRequirement.model_validate(_project_payload(**overrides))
    return _make


@pytest.fixture
def make_talent():
    """Factory: make_talent(talent_id, **overrides) -> TalentProfile"""
    def _make(talent_id='talent-1', **overrides):
        return TalentProfile.model_validate(_talent_payload(talent_id, **overrides))
    return _make


@pytest.fixture
def project_payload():
    """Raw mapping, as a request handler would pass it through"""
    return _project_payload()


@pytest.fixture
def talent_payload():
    def _make(talent_id='talent-1', **overrides):
        return _talent_payload(talent_id, **overrides)
    return _make


@pytest.fixture
def react_project(make_project):
    return make_project()


@pytest.fixture
def senior_react_talent(make_talent):
    return make_talent('talent-1')


@pytest.fixture
def midlevel_talent(make_talent):
    return make_talent(
        'talent-2',
        skills=[
            {'name': 'React', 'level': 'mid', 'years_of_experience': 3, 'category': 'frontend'},
            {'name': 'JavaScript', 'level': 'senior', 'years_of_experience': 5, 'category': 'frontend'},
        ],
        availability=[
            {'start_date': date(2024, 2, 1), 'end_date': date(2024, 6, 1), 'capacity': 80, 'timezone': 'PST'},
        ],
        rate={'hourly_rate': 70, 'minimum_rate': 60, 'preferred_rate': 70, 'currency': 'USD'},
        timezone='PST',
        rating=4.2,
        review_count=8,
        preferences={'company_size': 'medium', 'work_style': 'agile', 'communication_style': 'formal'},
    )
