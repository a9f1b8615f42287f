"""
Non-destructive merge of extracted CV data into a candidate profile.

Existing entries are never replaced or removed. List entries are appended
only when their dedup key is new, so merging the same data twice is a no-op
the second time.
"""
from typing import Any, Dict

from talentbridge.models import (
    CandidateSkill,
    CandidateExperience,
    CandidateEducation,
    CandidateProject,
)

# String column widths in models
TEXT_LENGTH = 255
PHONE_LENGTH = 50


def _key(*values) -> tuple:
    return tuple((value or '').strip().lower() for value in values)


def _clip(value, length=TEXT_LENGTH) -> str:
    """Stripped text cut to a column width"""
    return (value or '').strip()[:length].strip()


def merge_profile_data(profile, data) -> Dict[str, Any]:
    """Merge ``ProfileData`` into ``profile`` in place.

    Returns what was added, for the upload response. The caller commits and
    recomputes the profile score.
    """
    added = {
        'skills': 0,
        'experience': 0,
        'education': 0,
        'projects': 0,
        'bio_added': False,
        'location_added': False,
        'phone_added': False,
    }

    known_skills = {_key(skill.name) for skill in profile.skills}
    for name in data.skills:
        name = _clip(name)
        if name and _key(name) not in known_skills:
            profile.skills.append(CandidateSkill(name=name))
            known_skills.add(_key(name))
            added['skills'] += 1

    known_roles = {_key(exp.role, exp.company) for exp in profile.experience}
    for entry in data.experience:
        role = _clip(entry.get('role'))
        company = _clip(entry.get('company'))
        if not role or not company or _key(role, company) in known_roles:
            continue
        profile.experience.append(CandidateExperience(
            role=role,
            company=company,
            years=max(float(entry.get('years') or 0), 0),
            description=entry.get('description') or '',
            is_current=False,
        ))
        known_roles.add(_key(role, company))
        added['experience'] += 1

    known_degrees = {_key(edu.degree, edu.institution) for edu in profile.education}
    for entry in data.education:
        degree = _clip(entry.get('degree'))
        institution = _clip(entry.get('institution'))
        if not degree or not institution or _key(degree, institution) in known_degrees:
            continue
        profile.education.append(CandidateEducation(
            degree=degree,
            institution=institution,
            field=_clip(entry.get('field')),
            graduation_year=entry.get('graduation_year'),
        ))
        known_degrees.add(_key(degree, institution))
        added['education'] += 1

    known_projects = {_key(project.name) for project in profile.projects}
    for entry in data.projects:
        name = _clip(entry.get('name'))
        if not name or _key(name) in known_projects:
            continue
        profile.projects.append(CandidateProject(
            name=name,
            description=entry.get('description') or '',
            technologies=list(entry.get('technologies') or []),
        ))
        known_projects.add(_key(name))
        added['projects'] += 1

    if data.bio and not profile.bio:
        profile.bio = data.bio
        added['bio_added'] = True
    if data.location and not profile.location:
        profile.location = _clip(data.location)
        added['location_added'] = True
    if data.phone and not profile.phone:
        profile.phone = _clip(data.phone, PHONE_LENGTH)
        added['phone_added'] = True

    profile.total_experience_years = max(
        profile.total_experience_years or 0,
        data.total_experience_years or 0
    )

    return added
