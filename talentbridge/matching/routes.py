"""
AI routes: candidate matching, profile summaries and improvement suggestions
"""
from flask import Blueprint, request, jsonify, current_app

from talentbridge.candidates.service import suggest_improvements, get_profile
from talentbridge.exceptions import AuthorizationError
from talentbridge.utils import role_required, get_current_user_id, get_current_role
from . import service

ai_bp = Blueprint('ai', __name__, url_prefix='/ai')


def _llm_client():
    return current_app.extensions.get('llm_client')


@ai_bp.route('/match-candidates', methods=['POST'])
@role_required('recruiter', 'admin')
def match_candidates():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    matches = service.match_by_requirements(data.get('requirements'), _llm_client())
    return jsonify([
        {
            'candidate': match['candidate'].to_dict(),
            'match_score': match['match_score'],
            'match_reason': match['match_reason']
        }
        for match in matches
    ]), 200


@ai_bp.route('/generate-summary/<candidate_id>', methods=['POST'])
@role_required('recruiter', 'admin')
def generate_summary(candidate_id):
    return jsonify(service.generate_profile_summary(candidate_id, _llm_client())), 200


@ai_bp.route('/profile-suggestions/<candidate_id>', methods=['GET'])
@role_required('job_seeker', 'admin')
def profile_suggestions(candidate_id):
    if get_current_role() == 'job_seeker' and get_profile(candidate_id).user_id != get_current_user_id():
        raise AuthorizationError("Job seekers can only view suggestions for their own profile")
    return jsonify(suggest_improvements(candidate_id)), 200
