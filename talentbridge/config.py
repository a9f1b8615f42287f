import os


def _flag(name, default='0'):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev')
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY', 'change-me-in-production')
    JWT_TOKEN_LOCATION = ['headers']
    JWT_ALGORITHM = 'HS256'

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        'sqlite:///talentbridge.db'
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,     # Verify connections before use
    }

    # Generative-language service. No key means the AI paths are disabled
    # and the heuristic / score-based fallbacks are used.
    OPENAI_API_KEY = os.environ.get('OPENAI_API_KEY') or os.environ.get('CHATGPT_API_KEY', '')
    OPENAI_MODEL = os.environ.get('OPENAI_MODEL', 'gpt-4o-mini')
    OPENAI_TIMEOUT = float(os.environ.get('OPENAI_TIMEOUT', '30'))
    OPENAI_TEMPERATURE = 0.2
    OPENAI_MAX_TOKENS = 2048

    # CV storage
    UPLOAD_FOLDER = os.environ.get(
        'UPLOAD_FOLDER',
        os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'uploads')
    )
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024  # 10MB
    ALLOWED_CV_EXTENSIONS = {'pdf', 'doc', 'docx'}

    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            'CORS_ORIGINS', 'http://localhost:3000,http://localhost:5173'
        ).split(',')
        if origin.strip()
    ]

    DEBUG = _flag('FLASK_DEBUG')
    TESTING = _flag('FLASK_TESTING')
