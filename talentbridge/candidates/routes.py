from flask import Blueprint, request, jsonify

from talentbridge.utils import role_required, get_current_user_id
from . import service

job_seekers_bp = Blueprint('job_seekers', __name__, url_prefix='/job-seekers')


@job_seekers_bp.route('/profile', methods=['GET'])
@role_required('job_seeker')
def get_own_profile():
    profile = service.get_profile_for_user(get_current_user_id())
    return jsonify(profile.to_dict()), 200


@job_seekers_bp.route('/profile', methods=['PATCH'])
@role_required('job_seeker')
def update_own_profile():
    profile = service.update_profile(get_current_user_id(), request.get_json(silent=True))
    return jsonify(profile.to_dict()), 200


@job_seekers_bp.route('/all', methods=['GET'])
@role_required('recruiter', 'admin')
def list_job_seekers():
    limit = request.args.get('limit', 100, type=int)
    profiles = service.list_open_profiles(limit=max(1, min(limit, 100)))
    return jsonify([profile.to_dict() for profile in profiles]), 200


@job_seekers_bp.route('/<candidate_id>', methods=['GET'])
@role_required('recruiter', 'admin')
def get_job_seeker(candidate_id):
    profile = service.view_profile(candidate_id, get_current_user_id())
    return jsonify(profile.to_dict()), 200
