from flask import Blueprint, request, jsonify

from talentbridge.utils import role_required, get_current_user_id
from . import service

upload_bp = Blueprint('upload', __name__, url_prefix='/upload')


@upload_bp.route('/cv', methods=['POST'])
@role_required('job_seeker')
def upload_cv():
    result = service.upload_cv(get_current_user_id(), request.files.get('file'))
    return jsonify(result), 201


@upload_bp.route('/cv', methods=['DELETE'])
@role_required('job_seeker')
def delete_cv():
    profile = service.delete_cv(get_current_user_id())
    return jsonify({
        'message': 'CV deleted successfully',
        'profile_score': profile.profile_score
    }), 200
