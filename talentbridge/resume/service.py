"""
CV upload flow: store the file, enrich the profile from its text, rescore.

Text conversion and extraction failures never fail the upload; the CV
metadata is kept and the profile is rescored from what it already has.
"""
from flask import current_app

from talentbridge.candidates.service import get_profile_for_user, refresh_profile
from talentbridge.db import db
from talentbridge.exceptions import ResourceNotFoundError, ValidationError
from talentbridge.models import CandidateProfile
from talentbridge.simple_logger import get_logger
from .extractor import build_extractor
from .merge import merge_profile_data
from .storage import LocalFileStorage, allowed_file, file_extension
from .text import extract_pdf_text

logger = get_logger("resume")

CV_FILE_NAME_LENGTH = 255


def get_storage():
    return LocalFileStorage(current_app.config['UPLOAD_FOLDER'])


def get_extractor():
    return build_extractor(current_app.extensions.get('llm_client'))


def extract_and_merge_profile(user_id, cv_text, extractor=None):
    """Extract profile data from CV text and merge it into the user's profile.

    Returns the counts reported to the client. Does not commit.
    """
    profile = CandidateProfile.query.filter_by(user_id=user_id).first()
    if profile is None:
        raise ResourceNotFoundError("Job seeker profile not found")

    extractor = extractor or get_extractor()
    data = extractor.extract(cv_text)
    added = merge_profile_data(profile, data)
    refresh_profile(profile)

    logger.info(
        f"Merged CV data into profile {profile.id}: +{added['skills']} skills, "
        f"+{added['experience']} experience, +{added['education']} education, +{added['projects']} projects"
    )
    return {
        'skills_count': len(profile.skills),
        'experience_count': len(profile.experience),
        'education_count': len(profile.education),
        'projects_count': len(profile.projects),
        'bio_added': added['bio_added'],
        'location_added': added['location_added'],
        'phone_added': added['phone_added'],
        'total_experience_years': profile.total_experience_years,
    }


def upload_cv(user_id, file):
    """Store an uploaded CV (werkzeug ``FileStorage``) for a job seeker"""
    if file is None or not file.filename:
        raise ValidationError("No file uploaded")

    allowed = current_app.config['ALLOWED_CV_EXTENSIONS']
    if not allowed_file(file.filename, allowed):
        raise ValidationError(f"File type not allowed. Allowed types: {', '.join(sorted(allowed))}")

    content = file.read()
    if not content:
        raise ValidationError("Uploaded file is empty")
    if len(content) > current_app.config['MAX_CONTENT_LENGTH']:
        raise ValidationError("File too large (max 10MB)")

    profile = get_profile_for_user(user_id)
    storage = get_storage()

    # the previous file stays on disk until the new one is committed
    previous_url = profile.cv_url
    new_url = storage.save(file.filename, content)
    profile.cv_url = new_url
    profile.cv_file_name = file.filename[:CV_FILE_NAME_LENGTH]

    extracted = None
    if file_extension(file.filename) == 'pdf':
        try:
            text = extract_pdf_text(content)
            extracted = extract_and_merge_profile(user_id, text)
        except Exception as e:
            logger.warning(f"CV extraction skipped for user {user_id}: {e}")

    refresh_profile(profile)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        storage.delete(new_url)
        raise

    if previous_url:
        storage.delete(previous_url)
    logger.info(f"CV uploaded for user {user_id}, profile score {profile.profile_score}")

    return {
        'message': 'CV uploaded successfully',
        'cv_url': profile.cv_url,
        'file_name': profile.cv_file_name,
        'profile_score': profile.profile_score,
        'extracted_data': extracted
    }


def delete_cv(user_id):
    profile = CandidateProfile.query.filter_by(user_id=user_id).first()
    if profile is None:
        raise ResourceNotFoundError("Job seeker profile not found")
    if not profile.cv_url:
        raise ResourceNotFoundError("No CV uploaded")

    get_storage().delete(profile.cv_url)
    profile.cv_url = None
    profile.cv_file_name = None
    refresh_profile(profile)
    db.session.commit()
    logger.info(f"CV deleted for user {user_id}")
    return profile
