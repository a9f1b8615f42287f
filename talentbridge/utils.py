from functools import wraps

from flask_jwt_extended import verify_jwt_in_request, get_jwt, get_jwt_identity

from talentbridge.exceptions import AuthorizationError, ValidationError
from talentbridge.simple_logger import get_logger

logger = get_logger("security")

INVALID_ID_SENTINELS = ('', 'undefined', 'null', 'none')


def parse_id(value, label='ID'):
    """Validate a path/body id; sentinel strings and non-numeric ids are rejected"""
    if value is None:
        raise ValidationError(f"Invalid {label}")
    if isinstance(value, int) and not isinstance(value, bool):
        if value < 1:
            raise ValidationError(f"Invalid {label}")
        return value

    text = str(value).strip()
    if text.lower() in INVALID_ID_SENTINELS or not text.isdigit() or int(text) < 1:
        raise ValidationError(f"Invalid {label}")
    return int(text)


def get_current_user_id():
    """User id from the verified access token"""
    return int(get_jwt_identity())


def get_current_role():
    return get_jwt().get('role')


def role_required(*roles):
    """Require a valid access token whose role claim is one of ``roles``"""
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            role = get_current_role()
            if role not in roles:
                logger.warning(f"Role '{role}' denied for {f.__name__}, requires one of {roles}")
                raise AuthorizationError("Forbidden: insufficient role", details={'required': list(roles)})
            return f(*args, **kwargs)
        return wrapper
    return decorator
