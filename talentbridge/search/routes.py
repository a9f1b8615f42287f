from flask import Blueprint, request, jsonify

from talentbridge.db import db
from talentbridge.recruiters import service as recruiter_service
from talentbridge.simple_logger import get_logger
from talentbridge.utils import role_required, get_current_user_id
from .service import CandidateSearchEngine, SearchCriteria

logger = get_logger("api")

search_bp = Blueprint('search', __name__, url_prefix='/search')

search_engine = CandidateSearchEngine()


@search_bp.route('/candidates', methods=['POST'])
@role_required('recruiter', 'admin')
def search_candidates():
    user_id = get_current_user_id()
    data = request.get_json(silent=True) or {}

    try:
        criteria = SearchCriteria.from_dict(data)
        result = search_engine.search(criteria)
    except Exception:
        # failed searches are recorded too
        db.session.rollback()
        raw_query = data.get('query') if isinstance(data, dict) else None
        recruiter_service.add_search_history(
            user_id,
            raw_query if isinstance(raw_query, str) and raw_query.strip() else 'Advanced search',
            data if isinstance(data, dict) else {},
            0
        )
        raise

    recruiter_service.add_search_history(
        user_id,
        criteria.query or 'Advanced search',
        criteria.to_dict(),
        result['pagination']['total']
    )
    logger.info(f"User {user_id} searched candidates: {result['pagination']['total']} results")

    return jsonify({
        'candidates': [profile.to_dict() for profile in result['candidates']],
        'pagination': result['pagination']
    }), 200


@search_bp.route('/top-candidates', methods=['GET'])
@role_required('recruiter', 'admin')
def top_candidates():
    limit = max(1, min(request.args.get('limit', 10, type=int), 100))
    return jsonify([profile.to_dict() for profile in search_engine.top_candidates(limit)]), 200


@search_bp.route('/by-skills', methods=['GET'])
@role_required('recruiter', 'admin')
def candidates_by_skills():
    skills = [skill.strip() for skill in request.args.get('skills', '').split(',') if skill.strip()]
    limit = max(1, min(request.args.get('limit', 20, type=int), 100))
    return jsonify([profile.to_dict() for profile in search_engine.by_skills(skills, limit)]), 200


@search_bp.route('/statistics', methods=['GET'])
@role_required('recruiter', 'admin')
def statistics():
    return jsonify(search_engine.statistics()), 200
