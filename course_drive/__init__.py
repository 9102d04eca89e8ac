import os
import uuid

import sentry_sdk
from dotenv import load_dotenv
from flask import Flask, g, jsonify, request

from .config import load_config
from .extensions import init_extensions
from .logging_config import configure_logging


def _register_request_hooks(app, config):
    def apply_cors_headers(response):
        origin = str(request.headers.get('Origin', '') or '').strip()
        if not origin or not request.path.startswith('/api/'):
            return response
        if origin.lower() not in config.cors_allowed_origins:
            return response
        response.headers['Access-Control-Allow-Origin'] = origin
        response.headers['Vary'] = 'Origin'
        response.headers['Access-Control-Allow-Headers'] = 'Authorization, Content-Type'
        response.headers['Access-Control-Allow-Methods'] = 'GET, POST, OPTIONS'
        return response

    @app.before_request
    def handle_api_options_preflight():
        if request.method == 'OPTIONS' and request.path.startswith('/api/'):
            return apply_cors_headers(app.make_default_options_response())

    @app.before_request
    def attach_request_context():
        request_id = str(request.headers.get('X-Request-ID', '') or '').strip()[:120] or uuid.uuid4().hex
        g.request_id = request_id
        if config.sentry_dsn:
            sentry_sdk.set_tag('request.id', request_id)
            sentry_sdk.set_tag('route.path', request.path)
            sentry_sdk.set_tag('route.method', request.method)

    @app.after_request
    def attach_response_context(response):
        request_id = str(getattr(g, 'request_id', '') or '').strip()
        if request_id:
            response.headers['X-Request-ID'] = request_id
        return apply_cors_headers(response)

    @app.errorhandler(404)
    def handle_not_found(_error):
        if request.path.startswith('/api/'):
            return jsonify({'error': 'Not found'}), 404
        return _error


def create_app(config=None, tree_sync=None, db=None, testing=False):
    """App factory entrypoint.

    ``tree_sync`` and ``db`` may be injected so tests run against a fresh
    cache and fake collaborators instead of Google Drive and Firestore.
    """
    load_dotenv()
    config = config or load_config()
    configure_logging(config.log_level)

    app = Flask(__name__)
    app.secret_key = config.flask_secret_key or os.urandom(32).hex()
    app.config['TESTING'] = testing

    init_extensions(app, config, tree_sync=tree_sync, db=db)
    _register_request_hooks(app, config)

    from .blueprints import admin_bp, drive_bp

    app.register_blueprint(drive_bp)
    app.register_blueprint(admin_bp)
    return app
