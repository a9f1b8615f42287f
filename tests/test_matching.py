"""
Tests for AI candidate matching and profile summaries
"""
import json
from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from talentbridge.exceptions import ExternalServiceError, ValidationError
from talentbridge.matching.service import (
    calculate_match_score,
    generate_profile_summary,
    match_by_requirements,
    match_reason,
    PLACEHOLDER_SUMMARY,
)


def llm_returning(payload):
    llm = Mock()
    llm.generate.return_value = payload if isinstance(payload, str) else json.dumps(payload)
    return llm


def fake_candidate(skills=(), years=0, score=0):
    return SimpleNamespace(skill_names=list(skills), total_experience_years=years, profile_score=score)


class TestMatchScore:

    def test_full_match(self):
        candidate = fake_candidate(['Python', 'Django'], years=6, score=100)
        requirements = {'skills': ['python', 'django'], 'min_experience': 5}
        assert calculate_match_score(candidate, requirements) == 100

    def test_partial_experience_is_proportional(self):
        candidate = fake_candidate(['Python'], years=2, score=50)
        requirements = {'skills': ['python', 'go'], 'min_experience': 4}
        # 20 + 15 + 15
        assert calculate_match_score(candidate, requirements) == 50

    def test_no_requirements_uses_profile_score_only(self):
        assert calculate_match_score(fake_candidate(score=70), {'skills': [], 'min_experience': None}) == 21

    @pytest.mark.parametrize('skills,years,score', [
        (['Java', 'JavaScript', 'Java EE'], 0, 0),
        (['Java', 'JavaScript', 'Java EE'], 50, 100),
        ([], 0, 100),
        (['x'] * 20, 3, 37),
    ])
    def test_score_is_bounded(self, skills, years, score):
        result = calculate_match_score(fake_candidate(skills, years, score), {'skills': ['java'], 'min_experience': 5})
        assert 0 <= result <= 100

    def test_reasons(self):
        candidate = fake_candidate(['React', 'Redux'], years=4, score=85)
        assert match_reason(candidate, {'skills': ['react'], 'min_experience': 3}) == \
            'Matches 1 required skills, 4 years experience, High profile score'

    def test_fallback_reason(self):
        candidate = fake_candidate(['Go'], years=1, score=20)
        assert match_reason(candidate, {'skills': ['rust'], 'min_experience': 5}) == 'Good overall match'


class TestMatchByRequirements:

    def test_ranks_by_match_score(self, make_candidate):
        strong = make_candidate(skills=['Python', 'Django'], experience=[{'role': 'Dev', 'company': 'A', 'years': 6}])
        weak = make_candidate(skills=['Python'], bio='x', linkedin_url='l', github_url='g')
        make_candidate(skills=['Rust'], experience=[{'role': 'Dev', 'company': 'B', 'years': 9}])

        llm = llm_returning({'skills': ['python', 'django'], 'minExperience': 5, 'location': None, 'mustHaveSkills': []})
        matches = match_by_requirements('Senior Python/Django developer, 5+ years', llm)

        # weak has no experience rows, so the minimum filters it out
        assert [m['candidate'].id for m in matches] == [strong.id]
        assert weak.id not in [m['candidate'].id for m in matches]
        assert matches[0]['match_score'] == calculate_match_score(
            strong, {'skills': ['python', 'django'], 'min_experience': 5}
        )

    def test_returns_at_most_ten(self, make_candidate):
        for _ in range(15):
            make_candidate(skills=['Python'])
        llm = llm_returning('```json\n{"skills": ["python"], "minExperience": 0}\n```')
        matches = match_by_requirements('python dev', llm)
        assert len(matches) == 10
        scores = [m['match_score'] for m in matches]
        assert scores == sorted(scores, reverse=True)

    @pytest.mark.parametrize('llm', [
        None,
        Mock(generate=Mock(side_effect=ExternalServiceError('timeout'))),
        Mock(generate=Mock(return_value='not json at all')),
        Mock(generate=Mock(return_value='{"skills": "python"}')),
    ])
    def test_fallback_is_top_ten_by_profile_score(self, make_candidate, llm):
        profiles = [make_candidate(profile_score=score) for score in range(20, 80, 5)]
        make_candidate(profile_score=99, is_open_to_work=False)

        matches = match_by_requirements('anything', llm)

        expected = sorted(profiles, key=lambda p: -p.profile_score)[:10]
        assert [m['candidate'].id for m in matches] == [p.id for p in expected]
        assert all(m['match_score'] == m['candidate'].profile_score for m in matches)
        assert all(m['match_reason'] == 'High profile score' for m in matches)

    def test_requirements_text_required(self, app):
        with pytest.raises(ValidationError):
            match_by_requirements('   ', None)


class TestProfileSummary:

    def test_summary_is_stored_and_rescored(self, make_candidate):
        profile = make_candidate(skills=['Go'])
        before = profile.profile_score
        llm = llm_returning({
            'skillExtraction': ['Go'],
            'experienceSummary': 'Gopher',
            'strengths': ['Concurrency'],
            'weakAreas': ['Frontend'],
            'overallSummary': 'Solid backend engineer',
        })

        summary = generate_profile_summary(profile.id, llm)

        assert summary['overallSummary'] == 'Solid backend engineer'
        assert profile.ai_summary['experienceSummary'] == 'Gopher'
        assert 'generatedAt' in profile.ai_summary
        assert profile.profile_score == before + 2

    def test_unparseable_summary_uses_placeholder(self, make_candidate):
        profile = make_candidate()
        summary = generate_profile_summary(profile.id, llm_returning('Sorry, I cannot help with that.'))
        assert summary == PLACEHOLDER_SUMMARY
        assert profile.ai_summary['overallSummary'] == 'Profile under development'

    def test_unavailable_service_gives_mock_summary(self, make_candidate):
        profile = make_candidate(skills=['Python', 'Flask', 'SQL', 'Docker'], projects=[{'name': 'P'}],
                                 experience=[{'role': 'Dev', 'company': 'A', 'years': 3}])
        llm = Mock(generate=Mock(side_effect=ExternalServiceError('down')))

        summary = generate_profile_summary(profile.id, llm)

        assert summary['experienceSummary'] == 'Professional with 3 years of experience in Python.'
        assert summary['strengths'] == ['3+ years of experience', '4 technical skills', '1 completed projects']
        assert summary['overallSummary'] == 'Skilled professional with expertise in Python, Flask, SQL.'
        assert profile.ai_summary is None

    def test_invalid_candidate_id(self, app):
        with pytest.raises(ValidationError):
            generate_profile_summary('undefined', None)
