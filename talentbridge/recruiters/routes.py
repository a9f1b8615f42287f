from flask import Blueprint, request, jsonify

from talentbridge.exceptions import ValidationError
from talentbridge.utils import role_required, get_current_user_id
from . import service

recruiters_bp = Blueprint('recruiters', __name__, url_prefix='/recruiters')


@recruiters_bp.route('/profile', methods=['GET'])
@role_required('recruiter')
def get_profile():
    return jsonify(service.get_profile(get_current_user_id()).to_dict()), 200


@recruiters_bp.route('/profile', methods=['PATCH'])
@role_required('recruiter')
def update_profile():
    profile = service.update_profile(get_current_user_id(), request.get_json(silent=True))
    return jsonify(profile.to_dict()), 200


@recruiters_bp.route('/save-candidate', methods=['POST'])
@role_required('recruiter')
def save_candidate():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    service.save_candidate(
        get_current_user_id(),
        data.get('candidate_id'),
        notes=data.get('notes'),
        tags=data.get('tags')
    )
    return jsonify({'message': 'Candidate saved successfully'}), 200


@recruiters_bp.route('/save-candidate/<candidate_id>', methods=['DELETE'])
@role_required('recruiter')
def remove_saved_candidate(candidate_id):
    service.remove_saved_candidate(get_current_user_id(), candidate_id)
    return jsonify({'message': 'Candidate removed from saved list'}), 200


@recruiters_bp.route('/saved-candidates', methods=['GET'])
@role_required('recruiter')
def saved_candidates():
    return jsonify(service.get_saved_candidates(get_current_user_id())), 200


@recruiters_bp.route('/search-history', methods=['GET'])
@role_required('recruiter')
def search_history():
    entries = service.get_search_history(get_current_user_id())
    return jsonify([entry.to_dict() for entry in entries]), 200
