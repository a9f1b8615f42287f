import pytest
from flask_jwt_extended import create_access_token

from talentbridge import create_app
from talentbridge.db import db
from talentbridge.models import (
    User,
    CandidateProfile,
    CandidateSkill,
    CandidateExperience,
    CandidateEducation,
    CandidateProject,
    CandidateJobType,
    RecruiterProfile,
)
from talentbridge.candidates.scoring import compute_profile_score


@pytest.fixture
def app(tmp_path):
    """Create test application"""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'UPLOAD_FOLDER': str(tmp_path / 'uploads'),
        'OPENAI_API_KEY': '',
        'JWT_SECRET_KEY': 'test-secret-key-with-enough-length-for-hs256',
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()


_counter = {'n': 0}


def _unique_email(prefix):
    _counter['n'] += 1
    return f"{prefix}{_counter['n']}@example.com"


@pytest.fixture
def make_candidate(app):
    """Factory for persisted job-seeker profiles"""
    def _make(skills=(), experience=(), education=(), projects=(), job_types=(), **fields):
        user = User(name=fields.pop('name', 'Candidate'), email=_unique_email('candidate'), role='job_seeker')
        user.set_password('secret123')
        db.session.add(user)
        db.session.flush()

        profile = CandidateProfile(user_id=user.id, certifications=[], languages=[], **fields)
        profile.skills = [CandidateSkill(name=name) for name in skills]
        profile.experience = [CandidateExperience(**item) for item in experience]
        profile.education = [CandidateEducation(**item) for item in education]
        profile.projects = [CandidateProject(**item) for item in projects]
        profile.preferred_job_types = [CandidateJobType(name=name) for name in job_types]
        if 'total_experience_years' not in fields:
            profile.total_experience_years = sum(item.get('years', 0) for item in experience)
        if 'profile_score' not in fields:
            profile.profile_score = compute_profile_score(profile)
        db.session.add(profile)
        db.session.commit()
        return profile
    return _make


@pytest.fixture
def make_recruiter(app):
    def _make(company_name='Acme'):
        user = User(name='Recruiter', email=_unique_email('recruiter'), role='recruiter')
        user.set_password('secret123')
        db.session.add(user)
        db.session.flush()
        profile = RecruiterProfile(user_id=user.id, company_name=company_name)
        db.session.add(profile)
        db.session.commit()
        return profile
    return _make


@pytest.fixture
def auth_headers(app):
    """Bearer headers for a user id and role"""
    def _headers(user_id, role):
        token = create_access_token(identity=str(user_id), additional_claims={'role': role})
        return {'Authorization': f'Bearer {token}'}
    return _headers
