"""Flask application factory."""
import logging

from flask import Flask, jsonify
from flask_cors import CORS

from .config import Settings
from .errors import QrisError
from .gateway import MutationGateway
from .rendering import render_qr_png
from .routes import bp
from .upload import PixhostUploader

logger = logging.getLogger(__name__)


def create_app(settings=None, renderer=None, uploader=None, gateway=None) -> Flask:
    settings = settings or Settings.from_env()

    app = Flask(__name__)
    CORS(app)

    app.extensions['qris'] = {
        'settings': settings,
        'renderer': renderer or render_qr_png,
        'uploader': uploader or PixhostUploader(settings.upload_url, timeout=settings.http_timeout),
        'gateway': gateway or MutationGateway(settings.gateway_url, timeout=settings.http_timeout),
    }

    @app.errorhandler(QrisError)
    def handle_qris_error(exc):
        if exc.status_code >= 500:
            logger.error("%s: %s", exc.error, exc)
        return jsonify({'status': False, 'error': exc.error, 'message': str(exc)}), exc.status_code

    app.register_blueprint(bp)
    return app
