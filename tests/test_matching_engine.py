"""
Tests for the Matching Engine

Covers the ranked-match scenarios, hard filters, thresholds, ordering
and the invariants that must hold for any candidate pool.
"""

import random
import threading
from datetime import date, timedelta

import pytest

from talent_matching import find_matches
from talent_matching.core.config import Settings
from talent_matching.core.exceptions import MatchingCancelledError
from talent_matching.models.schemas import MatchOptions, ScoringWeights
from talent_matching.services.matching_engine import MatchingEngine, fit_label


# Scenarios

def test_ranked_matches_for_valid_input(engine, react_project, senior_react_talent, midlevel_talent):
    matches = engine.find_matches(react_project, [midlevel_talent, senior_react_talent])

    assert [m.talent_id for m in matches] == ['talent-1', 'talent-2']
    assert matches[0].total_score > matches[1].total_score
    assert matches[0].total_score > 30
    assert [m.rank for m in matches] == [1, 2]


def test_breakdown_of_top_match(engine, react_project, senior_react_talent):
    match = engine.find_matches(react_project, [senior_react_talent])[0]

    reputation = 4.8 / 5 * 15 / 25 * 100
    contextual = 30 + 10 + 10 + reputation * 0.3
    assert match.skill_score == pytest.approx(70.0)
    assert match.availability_rate_score == pytest.approx(100.0)
    assert match.contextual_score == pytest.approx(contextual, abs=0.01)
    assert match.total_score == pytest.approx(0.6 * 70 + 0.3 * 100 + 0.1 * contextual, abs=0.01)
    assert match.matched_skills == ['React', 'TypeScript']
    assert match.fit_label == 'Strong Match'


def test_partial_required_skills_still_included(engine, react_project, midlevel_talent):
    match = engine.find_matches(react_project, [midlevel_talent])[0]
    assert match.missing_required_skills == ['React']
    assert any('Missing required skills: React' in c for c in match.concerns)
    assert any('JavaScript counted as related experience for TypeScript' in r for r in match.reasons)


def test_no_required_skill_overlap_returns_empty(engine, make_project, make_talent):
    project = make_project(
        required_skills=[{'name': 'React', 'level': 'senior', 'weight': 10}],
        preferred_skills=[],
    )
    python_dev = make_talent(
        'talent-3',
        skills=[{'name': 'Python', 'level': 'senior', 'years_of_experience': 5}],
        rate={'hourly_rate': 150, 'minimum_rate': 120},
    )
    assert engine.find_matches(project, [python_dev]) == []


def test_min_score_is_an_additional_filter(engine, make_project, make_talent):
    project = make_project(
        required_skills=[{'name': 'React', 'level': 'senior', 'weight': 10}],
        preferred_skills=[],
    )
    python_dev = make_talent(
        'talent-3',
        skills=[{'name': 'Python', 'level': 'senior', 'years_of_experience': 5}],
    )
    assert engine.find_matches(project, [python_dev], MatchOptions(min_score=70)) == []
    assert engine.find_matches(project, [python_dev], MatchOptions(min_score=0)) == []


def test_no_availability_windows_excluded(engine, react_project, make_talent):
    assert engine.find_matches(react_project, [make_talent(availability=[])]) == []


def test_unavailable_talent_excluded(engine, react_project, make_talent):
    assert engine.find_matches(react_project, [make_talent(is_available=False)]) == []


def test_empty_pool_returns_empty_list(engine, react_project):
    assert engine.find_matches(react_project, []) == []


def test_project_without_required_skills_keeps_everyone(engine, make_project, make_talent):
    project = make_project(required_skills=[], preferred_skills=[])
    talent = make_talent(skills=[])
    matches = engine.find_matches(project, [talent])
    assert len(matches) == 1
    assert matches[0].skill_score == pytest.approx(100.0)


# Options

def test_min_score_threshold(engine, react_project, senior_react_talent, midlevel_talent):
    everyone = engine.find_matches(react_project, [senior_react_talent, midlevel_talent])
    cutoff = (everyone[0].total_score + everyone[1].total_score) / 2

    filtered = engine.find_matches(react_project, [senior_react_talent, midlevel_talent], {'min_score': cutoff})
    assert [m.talent_id for m in filtered] == ['talent-1']
    assert all(m.total_score >= cutoff for m in filtered)


def test_max_results_truncates_after_sorting(engine, react_project, senior_react_talent, midlevel_talent):
    matches = engine.find_matches(
        react_project, [midlevel_talent, senior_react_talent], MatchOptions(max_results=1)
    )
    assert [m.talent_id for m in matches] == ['talent-1']
    assert matches[0].rank == 1


def test_reasons_can_be_disabled(engine, react_project, senior_react_talent):
    match = engine.find_matches(react_project, [senior_react_talent], {'include_reasons': False})[0]
    assert match.reasons == []
    assert match.concerns == []


def test_reasons_describe_strengths(engine, react_project, senior_react_talent):
    match = engine.find_matches(react_project, [senior_react_talent])[0]
    assert 'Meets required skills: React, TypeScript' in match.reasons
    assert 'Available for the full project window' in match.reasons
    assert 'Preferred rate within budget' in match.reasons


def test_custom_weights_change_ranking_inputs(engine, react_project, senior_react_talent):
    skill_only = MatchOptions(custom_weights=ScoringWeights(skill=1, availability_rate=0, contextual=0))
    match = engine.find_matches(react_project, [senior_react_talent], skill_only)[0]
    assert match.total_score == pytest.approx(match.skill_score)


def test_unnormalised_custom_weights_stay_in_bounds(engine, react_project, senior_react_talent):
    heavy = MatchOptions(custom_weights=ScoringWeights(skill=6, availability_rate=3, contextual=1))
    default = engine.find_matches(react_project, [senior_react_talent])[0]
    match = engine.find_matches(react_project, [senior_react_talent], heavy)[0]
    assert match.total_score == pytest.approx(default.total_score)


def test_dynamic_weights_favour_availability_when_urgent(engine, make_project, make_talent):
    project = make_project(urgency='critical')
    talent = make_talent(rate={'hourly_rate': 400, 'minimum_rate': 350})
    static = engine.find_matches(project, [talent])[0]
    dynamic = engine.find_matches(project, [talent], {'dynamic_weights': True})[0]
    assert dynamic.availability_rate_score == static.availability_rate_score
    assert dynamic.total_score != static.total_score


def test_engine_level_weights(settings, react_project, senior_react_talent):
    engine = MatchingEngine(weights=ScoringWeights(skill=0, availability_rate=1, contextual=0), settings=settings)
    match = engine.find_matches(react_project, [senior_react_talent])[0]
    assert match.total_score == pytest.approx(100.0)


# Ordering

def test_ties_broken_by_talent_id(engine, react_project, make_talent):
    matches = engine.find_matches(react_project, [make_talent('b'), make_talent('c'), make_talent('a')])
    assert [m.talent_id for m in matches] == ['a', 'b', 'c']
    assert len({m.total_score for m in matches}) == 1


def test_ties_broken_by_reputation_first(engine, react_project, make_talent):
    no_context = MatchOptions(custom_weights=ScoringWeights(contextual=0))
    low = make_talent('a', rating=3.0, review_count=40)
    high = make_talent('z', rating=4.9, review_count=40)
    matches = engine.find_matches(react_project, [low, high], no_context)
    assert matches[0].total_score == matches[1].total_score
    assert [m.talent_id for m in matches] == ['z', 'a']


def test_ties_broken_by_relevant_years_second(engine, react_project, make_talent):
    junior = make_talent('a', skills=[
        {'name': 'React', 'level': 'senior', 'years_of_experience': 2},
        {'name': 'TypeScript', 'level': 'senior', 'years_of_experience': 1},
    ])
    veteran = make_talent('z', skills=[
        {'name': 'React', 'level': 'senior', 'years_of_experience': 9},
        {'name': 'TypeScript', 'level': 'senior', 'years_of_experience': 7},
    ])
    matches = engine.find_matches(react_project, [junior, veteran])
    assert matches[0].total_score == matches[1].total_score
    assert [m.talent_id for m in matches] == ['z', 'a']
    assert matches[0].relevant_years == 16


# Payloads and helpers

def test_accepts_plain_mappings(engine, project_payload, talent_payload):
    matches = engine.find_matches(project_payload, [talent_payload('talent-1')], {'min_score': 10})
    assert [m.talent_id for m in matches] == ['talent-1']


def test_accepts_generators(engine, react_project, make_talent):
    matches = engine.find_matches(react_project, (make_talent(f't{i}') for i in range(3)))
    assert len(matches) == 3


def test_result_serialises_to_dict(engine, react_project, senior_react_talent):
    payload = engine.find_matches(react_project, [senior_react_talent])[0].to_dict()
    assert payload['talent_id'] == 'talent-1'
    assert set(payload) >= {'total_score', 'skill_score', 'availability_rate_score', 'contextual_score'}


def test_evaluate_candidate(engine, react_project, senior_react_talent, make_talent):
    result = engine.evaluate_candidate(react_project, senior_react_talent, {'min_score': 99})
    assert result is not None
    assert result.rank == 0
    assert engine.evaluate_candidate(react_project, make_talent(is_available=False)) is None


def test_module_level_find_matches(react_project, senior_react_talent):
    assert find_matches(react_project, [senior_react_talent])[0].talent_id == 'talent-1'


def test_inputs_are_not_mutated(engine, react_project, senior_react_talent):
    before = (react_project.model_dump(), senior_react_talent.model_dump())
    engine.find_matches(react_project, [senior_react_talent])
    assert (react_project.model_dump(), senior_react_talent.model_dump()) == before


@pytest.mark.parametrize("score, label", [
    (90, "Excellent Match"), (75, "Strong Match"), (60, "Good Match"),
    (45, "Partial Match"), (10, "Low Match"),
])
def test_fit_label(score, label):
    assert fit_label(score) == label


# Cancellation and parallel scoring

def test_cancelled_before_start(engine, react_project, senior_react_talent):
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(MatchingCancelledError) as exc_info:
        engine.find_matches(react_project, [senior_react_talent], cancel_event=cancel)
    assert exc_info.value.details == {'scored': 0, 'total': 1}
    assert exc_info.value.to_dict()['error_code'] == 'MATCHING_CANCELLED'


def test_parallel_scoring_matches_sequential(react_project, random_pool):
    sequential = MatchingEngine(settings=Settings(_env_file=None))
    parallel = MatchingEngine(settings=Settings(_env_file=None, max_workers=4, parallel_threshold=1))

    expected = [m.to_dict() for m in sequential.find_matches(react_project, random_pool)]
    actual = [m.to_dict() for m in parallel.find_matches(react_project, random_pool)]
    assert actual == expected


def test_parallel_cancellation(react_project, random_pool):
    engine = MatchingEngine(settings=Settings(_env_file=None, max_workers=4, parallel_threshold=1))
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(MatchingCancelledError):
        engine.find_matches(react_project, random_pool, cancel_event=cancel)


# Invariants over a random pool

LEVELS = ['junior', 'mid', 'senior', 'lead']
SKILLS = ['React', 'TypeScript', 'JavaScript', 'Node.js', 'Python', 'Go', 'ReactJS', 'SQL']


@pytest.fixture
def random_pool(make_talent):
    rng = random.Random(42)
    pool = []
    for i in range(60):
        skills = [
            {'name': name, 'level': rng.choice(LEVELS), 'years_of_experience': rng.randint(0, 12)}
            for name in rng.sample(SKILLS, rng.randint(0, 4))
        ]
        start = date(2024, 1, 1) + timedelta(days=rng.randint(0, 150))
        windows = [
            {'start_date': start, 'end_date': start + timedelta(days=rng.randint(0, 120)),
             'capacity': rng.choice([0, 25, 50, 100])}
            for _ in range(rng.randint(0, 2))
        ]
        preferred = rng.randint(20, 200)
        pool.append(make_talent(
            f'talent-{i:02d}',
            skills=skills,
            availability=windows,
            rate={'hourly_rate': preferred, 'minimum_rate': rng.randint(10, preferred)},
            remote_preference=rng.choice(['remote', 'hybrid', 'onsite']),
            timezone=rng.choice(['UTC', 'EST', 'PST', 'IST', 'JST']),
            rating=round(rng.uniform(0, 5), 1),
            review_count=rng.randint(0, 80),
            is_available=rng.random() > 0.2,
        ))
    return pool


def test_invariants_hold_for_random_pool(engine, react_project, random_pool):
    matches = engine.find_matches(react_project, random_pool)
    by_id = {t.id: t for t in random_pool}

    assert matches
    for match in matches:
        talent = by_id[match.talent_id]
        assert talent.is_available
        assert 0 <= match.total_score <= 100
        assert any(skill in match.matched_skills for skill in ('React', 'TypeScript'))

    for current, following in zip(matches, matches[1:]):
        assert current.total_score >= following.total_score


def test_threshold_invariant_for_random_pool(engine, react_project, random_pool):
    matches = engine.find_matches(react_project, random_pool, MatchOptions(min_score=55))
    assert all(m.total_score >= 55 for m in matches)


def test_identical_input_gives_identical_output(engine, react_project, random_pool):
    first = [m.to_dict() for m in engine.find_matches(react_project, random_pool)]
    second = [m.to_dict() for m in engine.find_matches(react_project, list(reversed(random_pool)))]
    assert first == second


def test_dynamic_weights_use_client_industry(engine, make_project, make_talent):
    talent = make_talent(rate={'hourly_rate': 400, 'minimum_rate': 350})
    technology = engine.find_matches(make_project(), [talent], {'dynamic_weights': True})[0]
    finance = engine.find_matches(make_project(client_industry='finance'), [talent], {'dynamic_weights': True})[0]
    assert finance.total_score != technology.total_score


def test_recommended_limits_fill_unset_options(engine, react_project, senior_react_talent, midlevel_talent):
    pool = [senior_react_talent, midlevel_talent]
    matches = engine.find_matches(react_project, pool, {'recommended_limits': True})
    assert [m.talent_id for m in matches] == ['talent-1']
    assert all(m.total_score >= 60 for m in matches)

    explicit = engine.find_matches(react_project, pool, {'recommended_limits': True, 'min_score': 0})
    assert len(explicit) == 2
