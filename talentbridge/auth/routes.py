from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from talentbridge.utils import get_current_user_id
from . import service

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')


@auth_bp.route('/register', methods=['POST'])
def register():
    return jsonify(service.register(request.get_json(silent=True))), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    return jsonify(service.login(request.get_json(silent=True))), 200


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
def me():
    user = service.get_active_user(get_current_user_id())
    return jsonify(user.to_dict()), 200
