from flask import Flask
import os
import logging
from datetime import timedelta

# Database and models
from models import db
from flask_migrate import Migrate

# Extensions
from flask_cors import CORS

from sessions import build_session_store
from routes import api

BASE_DIR = os.path.abspath(os.path.dirname(__file__))
DEV_SECRET_KEY = 'letterly-dev-secret-change-me'

migrate = Migrate()


def _env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _database_uri():
    uri = os.environ.get('DATABASE_URL')
    if uri:
        if uri.startswith("postgres://"):
            uri = uri.replace("postgres://", "postgresql://", 1)
        return uri
    return f'sqlite:///{os.path.join(BASE_DIR, "letterly.db")}'


def _default_config():
    return {
        'SQLALCHEMY_DATABASE_URI': _database_uri(),
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'SECRET_KEY': os.environ.get('SECRET_KEY'),
        'SESSION_COOKIE_NAME': 'letterly_sid',
        'SESSION_COOKIE_SECURE': _env_flag('SESSION_COOKIE_SECURE'),
        'SESSION_LIFETIME': timedelta(hours=int(os.environ.get('SESSION_LIFETIME_HOURS', '24'))),
        'SESSION_BACKEND': os.environ.get('SESSION_BACKEND', 'database'),
        'CORS_ORIGINS': [
            origin.strip()
            for origin in os.environ.get(
                'CORS_ORIGINS', 'http://localhost:5173,http://localhost:3000'
            ).split(',')
            if origin.strip()
        ],
        'LOG_LEVEL': os.environ.get('LOG_LEVEL', 'INFO').upper(),
    }


def create_app(test_config=None, session_store=None):
    """
    Build the Letterly API. ``test_config`` overrides the environment-derived
    settings; ``session_store`` replaces the store chosen by SESSION_BACKEND
    and keeps the lifetime it was built with.
    """
    app = Flask(__name__)
    app.config.from_mapping(_default_config())
    if test_config:
        app.config.from_mapping(test_config)

    logging.basicConfig(format='%(asctime)s %(levelname)s [%(name)s] %(message)s')
    app.logger.setLevel(app.config['LOG_LEVEL'])
    logging.getLogger('storage').setLevel(app.config['LOG_LEVEL'])
    logging.getLogger('sessions').setLevel(app.config['LOG_LEVEL'])

    if not app.config['SECRET_KEY']:
        app.logger.warning("SECRET_KEY not set. Using the development key; sessions are not secure.")
        app.config['SECRET_KEY'] = DEV_SECRET_KEY

    CORS(app,
         resources={r"/api/*": {
             "origins": app.config['CORS_ORIGINS'],
             "methods": ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
             "allow_headers": ["Content-Type"]
         }},
         supports_credentials=True
    )

    # --- Database Configuration ---
    db.init_app(app)
    migrate.init_app(app, db)

    if session_store is None:
        session_store = build_session_store(app.config['SESSION_BACKEND'], app.config['SESSION_LIFETIME'])
    app.extensions['session_store'] = session_store

    app.register_blueprint(api)

    @app.route("/ping")
    def ping():
        return "pong", 200

    return app


app = create_app()

if __name__ == '__main__':
    with app.app_context():
        db.create_all()
    app.run(debug=_env_flag('FLASK_DEBUG'), port=int(os.environ.get('PORT', '5000')))
