"""
Job-seeker profile service: read, update, view counting and suggestions
"""
from datetime import datetime

from talentbridge.db import db
from talentbridge.exceptions import ResourceNotFoundError, ValidationError
from talentbridge.models import (
    CandidateProfile,
    CandidateSkill,
    CandidateExperience,
    CandidateEducation,
    CandidateProject,
    CandidateJobType,
    BASE_PROFILE_SCORE,
)
from talentbridge.simple_logger import get_logger
from talentbridge.utils import parse_id
from .scoring import compute_profile_score, build_suggestions, potential_score

logger = get_logger("candidates")

SCALAR_FIELDS = (
    'bio', 'location', 'phone', 'linkedin_url', 'github_url', 'portfolio_url',
)
JSON_LIST_FIELDS = ('certifications', 'languages')


def refresh_profile(profile):
    """Recompute derived fields after a mutation"""
    profile.profile_score = compute_profile_score(profile)
    profile.last_updated = datetime.utcnow()
    return profile


def create_profile(user_id):
    profile = CandidateProfile(
        user_id=user_id,
        certifications=[],
        languages=[],
        total_experience_years=0,
        profile_score=BASE_PROFILE_SCORE,
        is_open_to_work=True,
        profile_views=0,
    )
    db.session.add(profile)
    return profile


def get_profile_for_user(user_id):
    """Get the caller's profile, creating an empty one if it is missing"""
    profile = CandidateProfile.query.filter_by(user_id=user_id).first()
    if profile is None:
        logger.warning(f"No candidate profile for user {user_id}, creating one")
        profile = create_profile(user_id)
        db.session.commit()
    return profile


def update_profile(user_id, data):
    """Apply a partial update; list fields given in ``data`` replace the stored lists"""
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    profile = CandidateProfile.query.filter_by(user_id=user_id).first()
    if profile is None:
        raise ResourceNotFoundError("Job seeker profile not found")

    for name in SCALAR_FIELDS:
        if name in data:
            value = data[name]
            if value is not None and not isinstance(value, str):
                raise ValidationError(f"'{name}' must be a string")
            setattr(profile, name, value)

    for name in JSON_LIST_FIELDS:
        if name in data:
            setattr(profile, name, _string_list(data[name], name))

    if 'expected_salary' in data:
        profile.expected_salary = _optional_number(data['expected_salary'], 'expected_salary')

    if 'is_open_to_work' in data:
        if not isinstance(data['is_open_to_work'], bool):
            raise ValidationError("'is_open_to_work' must be a boolean")
        profile.is_open_to_work = data['is_open_to_work']

    if 'skills' in data:
        names = []
        seen = set()
        for name in _string_list(data['skills'], 'skills'):
            key = name.strip().lower()
            if key and key not in seen:
                seen.add(key)
                names.append(name.strip())
        profile.skills = [CandidateSkill(name=name) for name in names]

    if 'preferred_job_types' in data:
        profile.preferred_job_types = [
            CandidateJobType(name=name.strip().lower())
            for name in _string_list(data['preferred_job_types'], 'preferred_job_types') if name.strip()
        ]

    if 'experience' in data:
        profile.experience = [_experience_row(item) for item in _dict_list(data['experience'], 'experience')]
        # derived from the rows, never taken from the client
        profile.total_experience_years = sum(exp.years for exp in profile.experience)

    if 'education' in data:
        profile.education = [_education_row(item) for item in _dict_list(data['education'], 'education')]

    if 'projects' in data:
        profile.projects = [_project_row(item) for item in _dict_list(data['projects'], 'projects')]

    refresh_profile(profile)
    db.session.commit()
    logger.info(f"Updated profile {profile.id}, score {profile.profile_score}")
    return profile


def list_open_profiles(limit=100):
    return (
        CandidateProfile.query
        .filter(CandidateProfile.is_open_to_work.is_(True))
        .order_by(CandidateProfile.profile_score.desc(), CandidateProfile.id.asc())
        .limit(limit)
        .all()
    )


def get_profile(candidate_id):
    candidate_id = parse_id(candidate_id, 'candidate ID')
    profile = db.session.get(CandidateProfile, candidate_id)
    if profile is None:
        raise ResourceNotFoundError("Job seeker not found")
    return profile


def view_profile(candidate_id, viewer_user_id):
    """Fetch a profile for display, counting the view when the viewer is not the owner"""
    profile = get_profile(candidate_id)
    if profile.user_id != viewer_user_id:
        profile.profile_views = (profile.profile_views or 0) + 1
        db.session.commit()
    return profile


def suggest_improvements(candidate_id):
    profile = get_profile(candidate_id)
    suggestions = build_suggestions(profile)
    return {
        'current_score': profile.profile_score,
        'potential_score': potential_score(profile.profile_score, suggestions),
        'suggestions': suggestions
    }


def _string_list(value, name):
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValidationError(f"'{name}' must be a list of strings")
    return value


def _dict_list(value, name):
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise ValidationError(f"'{name}' must be a list of objects")
    return value


def _optional_number(value, name):
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"'{name}' must be a number")
    return float(value)


def _experience_row(item):
    years = _optional_number(item.get('years'), 'years') or 0
    if years < 0:
        raise ValidationError("'years' must be >= 0")
    return CandidateExperience(
        company=item.get('company') or '',
        role=item.get('role') or '',
        years=years,
        description=item.get('description'),
        start_date=item.get('start_date'),
        end_date=item.get('end_date'),
        is_current=bool(item.get('is_current', False)),
    )


def _education_row(item):
    year = item.get('graduation_year')
    if year is not None and (isinstance(year, bool) or not isinstance(year, int)):
        raise ValidationError("'graduation_year' must be an integer")
    return CandidateEducation(
        institution=item.get('institution') or '',
        degree=item.get('degree') or '',
        field=item.get('field'),
        graduation_year=year,
        grade=item.get('grade'),
    )


def _project_row(item):
    name = item.get('name') or item.get('title')
    if not name:
        raise ValidationError("Each project needs a name")
    return CandidateProject(
        name=name,
        description=item.get('description'),
        technologies=_string_list(item.get('technologies') or [], 'technologies'),
        url=item.get('url'),
        github_url=item.get('github_url'),
    )
