from talentbridge.db import db
from talentbridge.exceptions import ResourceNotFoundError, ValidationError
from talentbridge.models import (
    CandidateProfile,
    RecruiterProfile,
    RecruiterSearchHistory,
    SavedCandidate,
)
from talentbridge.simple_logger import get_logger
from talentbridge.utils import parse_id

logger = get_logger("recruiters")

MAX_SEARCH_HISTORY = 50
UPDATABLE_FIELDS = ('company_name', 'company_website', 'company_size', 'industry', 'designation', 'company_logo')


def get_profile(user_id):
    profile = RecruiterProfile.query.filter_by(user_id=user_id).first()
    if profile is None:
        raise ResourceNotFoundError("Recruiter profile not found")
    return profile


def update_profile(user_id, data):
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    profile = get_profile(user_id)
    for name in UPDATABLE_FIELDS:
        if name not in data:
            continue
        value = data[name]
        if value is not None and not isinstance(value, str):
            raise ValidationError(f"'{name}' must be a string")
        if name == 'company_name' and not (value or '').strip():
            raise ValidationError("Company name cannot be empty")
        setattr(profile, name, value)

    db.session.commit()
    return profile


def save_candidate(user_id, candidate_id, notes=None, tags=None):
    """Save a candidate, or update notes/tags if already saved"""
    candidate_id = parse_id(candidate_id, 'candidate ID')
    if tags is not None and (not isinstance(tags, list) or not all(isinstance(t, str) for t in tags)):
        raise ValidationError("'tags' must be a list of strings")
    if notes is not None and not isinstance(notes, str):
        raise ValidationError("'notes' must be a string")

    profile = get_profile(user_id)
    if db.session.get(CandidateProfile, candidate_id) is None:
        raise ResourceNotFoundError("Candidate not found")

    saved = next((item for item in profile.saved_candidates if item.candidate_id == candidate_id), None)
    if saved is None:
        saved = SavedCandidate(candidate_id=candidate_id)
        profile.saved_candidates.append(saved)
        logger.info(f"Recruiter {profile.id} saved candidate {candidate_id}")

    saved.notes = notes or ''
    saved.tags = tags or []
    db.session.commit()
    return profile


def remove_saved_candidate(user_id, candidate_id):
    candidate_id = parse_id(candidate_id, 'candidate ID')
    profile = get_profile(user_id)
    for saved in list(profile.saved_candidates):
        if saved.candidate_id == candidate_id:
            profile.saved_candidates.remove(saved)
    db.session.commit()
    return profile


def get_saved_candidates(user_id):
    """Saved entries joined with their profiles; entries whose profile is gone are skipped"""
    profile = get_profile(user_id)
    results = []
    for saved in profile.saved_candidates:
        candidate = saved.candidate
        if candidate is None:
            continue
        entry = saved.to_dict()
        entry['candidate'] = candidate.to_dict()
        results.append(entry)
    return results


def add_search_history(user_id, query, filters, results_count):
    """Record a search; keeps the newest 50 entries and counts every search"""
    profile = RecruiterProfile.query.filter_by(user_id=user_id).first()
    if profile is None:
        return

    profile.search_history.append(RecruiterSearchHistory(
        search_query=query,
        filters=filters,
        results_count=results_count,
    ))

    overflow = len(profile.search_history) - MAX_SEARCH_HISTORY
    if overflow > 0:
        for entry in list(profile.search_history[:overflow]):
            profile.search_history.remove(entry)

    profile.total_searches = (profile.total_searches or 0) + 1
    db.session.commit()


def get_search_history(user_id):
    profile = get_profile(user_id)
    return (
        RecruiterSearchHistory.query
        .filter_by(recruiter_id=profile.id)
        .order_by(RecruiterSearchHistory.searched_at.desc(), RecruiterSearchHistory.id.desc())
        .all()
    )
