import os
from dotenv import load_dotenv

# Load environment variables from the project root before Config is read
load_dotenv(os.path.join(os.path.dirname(__file__), '..', '.env'))

from datetime import datetime

from flask import Flask, jsonify, send_from_directory
from flask_cors import CORS
from flask_jwt_extended import JWTManager

from .config import Config
from .db import db
from .errors import register_error_handlers, register_jwt_handlers
from .llm.client import build_llm_client
from .simple_logger import get_logger


def create_app(config_overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    app.debug = app.config.get('DEBUG', False)

    logger = get_logger('app')
    logger.info("TalentBridge backend application starting up")

    CORS(app,
         supports_credentials=True,
         origins=app.config['CORS_ORIGINS'],
         methods=['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS', 'PATCH'],
         allow_headers=['Content-Type', 'Authorization', 'X-Requested-With'],
         max_age=3600
    )

    db.init_app(app)
    jwt = JWTManager(app)
    register_error_handlers(app)
    register_jwt_handlers(jwt)

    # Shared, read-only after startup
    app.extensions['llm_client'] = build_llm_client(app.config)

    from .auth.routes import auth_bp
    from .candidates.routes import job_seekers_bp
    from .resume.routes import upload_bp
    from .search.routes import search_bp
    from .recruiters.routes import recruiters_bp
    from .matching.routes import ai_bp

    for blueprint in (auth_bp, job_seekers_bp, upload_bp, search_bp, recruiters_bp, ai_bp):
        app.register_blueprint(blueprint)
        logger.info(f"Registered blueprint {blueprint.name} at {blueprint.url_prefix}")

    @app.route('/uploads/<path:filename>')
    def uploaded_file(filename):
        return send_from_directory(app.config['UPLOAD_FOLDER'], filename)

    @app.route('/health')
    def health():
        return jsonify({
            'status': 'ok',
            'ai_enabled': app.extensions['llm_client'] is not None,
            'timestamp': datetime.utcnow().isoformat()
        }), 200

    with app.app_context():
        from . import models  # noqa: F401
        db.create_all()

    return app
