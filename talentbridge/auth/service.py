import re
from datetime import datetime

from flask_jwt_extended import create_access_token

from talentbridge.candidates.service import create_profile
from talentbridge.db import db
from talentbridge.exceptions import AuthenticationError, ConflictError, ValidationError
from talentbridge.models import User, RecruiterProfile
from talentbridge.simple_logger import get_logger

logger = get_logger("auth")

EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
MIN_PASSWORD_LENGTH = 6
REGISTRATION_ROLES = ('job_seeker', 'recruiter')


def _required_text(data, name):
    value = data.get(name)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"'{name}' is required")
    return value.strip()


def issue_token(user):
    return create_access_token(identity=str(user.id), additional_claims={'role': user.role, 'email': user.email})


def _auth_response(user):
    return {
        'access_token': issue_token(user),
        'user': {
            'id': user.id,
            'name': user.name,
            'email': user.email,
            'role': user.role
        }
    }


def register(data):
    """Create an account and its role-specific profile, return a token"""
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    name = _required_text(data, 'name')
    email = _required_text(data, 'email').lower()
    password = data.get('password')
    role = data.get('role')

    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email address")
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if role not in REGISTRATION_ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(REGISTRATION_ROLES)}")

    company_name = (data.get('company_name') or '').strip() if isinstance(data.get('company_name'), str) else ''
    if role == 'recruiter' and not company_name:
        raise ValidationError("Company name is required for recruiters")

    if User.query.filter_by(email=email).first():
        raise ConflictError("User with this email already exists")

    user = User(name=name, email=email, role=role, phone=data.get('phone'))
    user.set_password(password)
    db.session.add(user)
    db.session.flush()

    if role == 'job_seeker':
        create_profile(user.id)
    else:
        db.session.add(RecruiterProfile(
            user_id=user.id,
            company_name=company_name,
            designation=data.get('designation') or 'Recruiter',
            is_verified=False,
        ))

    db.session.commit()
    logger.info(f"Registered {role} account {user.id}")
    return _auth_response(user)


def login(data):
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    email = _required_text(data, 'email').lower()
    password = data.get('password') or ''

    user = User.query.filter_by(email=email).first()
    if user is None or not user.check_password(password):
        logger.warning(f"Failed login for {email}")
        raise AuthenticationError("Invalid credentials")
    if not user.is_active:
        raise AuthenticationError("Account is deactivated")

    user.last_login = datetime.utcnow()
    db.session.commit()
    return _auth_response(user)


def get_active_user(user_id):
    user = db.session.get(User, user_id)
    if user is None or not user.is_active:
        raise AuthenticationError("User not found or inactive")
    return user
