import os
import logging
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from dotenv import load_dotenv

from .config import DevConfig, ProdConfig, TestConfig

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()


def create_app(config_name: str | None = None) -> Flask:
    """Application factory with environment based configuration."""
    load_dotenv()

    app = Flask(__name__, instance_relative_config=True)
    os.makedirs(app.instance_path, exist_ok=True)

    # Pick configuration
    env = config_name or os.getenv('ENV') or os.getenv('FLASK_ENV') or 'production'
    cfg_cls = {'development': DevConfig, 'testing': TestConfig}.get(env, ProdConfig)
    app.config.from_object(cfg_cls)
    app.config.setdefault(
        'DRAFT_UPLOAD_DIR', os.path.join(app.instance_path, 'drafts')
    )

    # Initialise logging
    logging.basicConfig(level=logging.DEBUG if app.debug else logging.INFO)

    db.init_app(app)
    migrate.init_app(app, db)

    # Ensure models loaded so tables can be created
    from brixxo import models  # noqa
    with app.app_context():
        db.create_all()

    from brixxo.errors import AccessDenied

    @app.route('/')
    def index():
        return jsonify(service='brixxo', status='ok')

    @app.errorhandler(AccessDenied)
    def access_denied(err):
        return jsonify(success=False, message=err.message), 403

    @app.errorhandler(404)
    def not_found(_):
        return jsonify(success=False, message='Not found'), 404

    @app.errorhandler(500)
    def server_error(_):
        return jsonify(success=False, message='Internal server error'), 500

    from brixxo.auth.routes import bp as auth_bp
    from brixxo.requirements.routes import bp as requirements_bp
    from brixxo.quotes.routes import bp as quotes_bp
    from brixxo.inquiries.routes import bp as inquiries_bp
    from brixxo.profiles.routes import bp as profiles_bp
    from brixxo.uploads.routes import bp as uploads_bp
    from brixxo.projects.routes import bp as projects_bp
    from brixxo.messages.routes import bp as messages_bp
    from brixxo.requirements.cli import drafts_cli

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(requirements_bp, url_prefix='/requirements')
    app.register_blueprint(quotes_bp, url_prefix='/quotes')
    app.register_blueprint(inquiries_bp, url_prefix='/inquiries')
    app.register_blueprint(profiles_bp, url_prefix='/profiles')
    app.register_blueprint(uploads_bp, url_prefix='/uploads')
    app.register_blueprint(projects_bp, url_prefix='/projects')
    app.register_blueprint(messages_bp, url_prefix='/messages')
    app.cli.add_command(drafts_cli)

    return app
