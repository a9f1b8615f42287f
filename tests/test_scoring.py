"""
Tests for profile completeness scoring and improvement suggestions
"""
from types import SimpleNamespace

import pytest

from talentbridge.candidates.scoring import compute_profile_score, build_suggestions, potential_score


def make_profile(**overrides):
    fields = dict(
        cv_url=None, skills=[], experience=[], education=[], projects=[],
        bio=None, linkedin_url=None, github_url=None, portfolio_url=None, ai_summary=None,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


class TestComputeProfileScore:

    def test_empty_profile_has_base_score(self):
        assert compute_profile_score(make_profile()) == 10

    def test_scenario_cv_skills_bio(self):
        profile = make_profile()
        assert compute_profile_score(profile) == 10

        profile.cv_url = '/uploads/cvs/cv.pdf'
        assert compute_profile_score(profile) == 30

        profile.skills = ['a', 'b', 'c', 'd', 'e', 'f']
        assert compute_profile_score(profile) == 42

        profile.bio = 'Engineer'
        assert compute_profile_score(profile) == 47

    def test_terms_are_capped(self):
        profile = make_profile(
            skills=list(range(30)), experience=list(range(5)),
            education=list(range(4)), projects=list(range(6)),
        )
        assert compute_profile_score(profile) == 10 + 20 + 20 + 15 + 10

    def test_single_education_entry_is_truncated(self):
        # 10 + 7.5
        assert compute_profile_score(make_profile(education=['BSc'])) == 17

    def test_full_profile_is_capped_at_100(self):
        profile = make_profile(
            cv_url='x', skills=list(range(10)), experience=[1, 2], education=[1, 2], projects=[1, 2],
            bio='bio', linkedin_url='l', github_url='g', portfolio_url='p', ai_summary={'overallSummary': 's'},
        )
        assert compute_profile_score(profile) == 100

    @pytest.mark.parametrize('field_name,max_count', [
        ('skills', 15), ('experience', 4), ('education', 4), ('projects', 4),
    ])
    def test_adding_entries_never_lowers_score(self, field_name, max_count):
        previous = compute_profile_score(make_profile())
        for count in range(1, max_count + 1):
            score = compute_profile_score(make_profile(**{field_name: list(range(count))}))
            assert score >= previous
            assert 0 <= score <= 100
            previous = score


class TestSuggestions:

    def test_empty_profile_gets_every_suggestion(self):
        suggestions = build_suggestions(make_profile())
        messages = [s['message'] for s in suggestions]
        assert messages == [
            'Upload your CV to increase profile visibility',
            'Add more skills to your profile (target: 10+ skills)',
            'Add your work experience',
            'Add projects to showcase your work',
            'Write a professional bio/summary',
            'Add your LinkedIn or GitHub profile',
        ]
        assert [s['impact'] for s in suggestions] == [20, 10, 20, 10, 5, 3]
        assert suggestions[0]['impact_label'] == '+20 points'

    def test_github_alone_satisfies_social_link(self):
        suggestions = build_suggestions(make_profile(github_url='https://github.com/x'))
        assert all(s['type'] != 'low' for s in suggestions)

    def test_potential_score_is_capped(self):
        suggestions = build_suggestions(make_profile())
        assert potential_score(10, suggestions) == 78
        assert potential_score(90, suggestions) == 100
