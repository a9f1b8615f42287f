"""
Profile completeness scoring.

The score is a pure function of the profile's own fields; services call
``compute_profile_score`` after every mutation of a scored field and store
the result, it is never written from client input.
"""
from typing import Any, Dict, List

BASE_SCORE = 10
MAX_SCORE = 100


def _count(value) -> int:
    return len(value) if value else 0


def compute_profile_score(profile) -> int:
    """Score a profile in [0, 100].

    ``profile`` is any object exposing ``cv_url``, ``skills``, ``experience``,
    ``education``, ``projects``, ``bio``, ``linkedin_url``, ``github_url``,
    ``portfolio_url`` and ``ai_summary``.
    """
    score = BASE_SCORE

    if profile.cv_url:
        score += 20

    score += min(_count(profile.skills) * 2, 20)
    score += min(_count(profile.experience) * 10, 20)
    score += min(_count(profile.education) * 7.5, 15)
    score += min(_count(profile.projects) * 5, 10)

    if profile.bio:
        score += 5
    if profile.linkedin_url:
        score += 3
    if profile.github_url:
        score += 3
    if profile.portfolio_url:
        score += 2
    if profile.ai_summary:
        score += 2

    # education can contribute a half point; truncate after capping
    return int(min(score, MAX_SCORE))


def build_suggestions(profile) -> List[Dict[str, Any]]:
    """Improvement suggestions for the fields a profile is missing"""
    suggestions = []

    if not profile.cv_url:
        suggestions.append(_suggestion('critical', 'Upload your CV to increase profile visibility', 20))

    if _count(profile.skills) < 5:
        suggestions.append(_suggestion('high', 'Add more skills to your profile (target: 10+ skills)', 10))

    if not _count(profile.experience):
        suggestions.append(_suggestion('critical', 'Add your work experience', 20))

    if not _count(profile.projects):
        suggestions.append(_suggestion('medium', 'Add projects to showcase your work', 10))

    if not profile.bio:
        suggestions.append(_suggestion('medium', 'Write a professional bio/summary', 5))

    if not profile.linkedin_url and not profile.github_url:
        suggestions.append(_suggestion('low', 'Add your LinkedIn or GitHub profile', 3))

    return suggestions


def potential_score(current_score: int, suggestions: List[Dict[str, Any]]) -> int:
    return min(current_score + sum(item['impact'] for item in suggestions), MAX_SCORE)


def _suggestion(kind: str, message: str, impact: int) -> Dict[str, Any]:
    return {
        'type': kind,
        'message': message,
        'impact': impact,
        'impact_label': f'+{impact} points'
    }
