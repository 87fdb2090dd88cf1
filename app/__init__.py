"""
Flask application factory for the workbridge translation service.

This module creates and configures the Flask application with:
- The translation service (and its model gateway) attached to the app
- Permissive CORS headers on every response
- JSON error handlers mapping service errors to HTTP status codes
- Blueprint registration for routes

Requires: TRANSLATE_API_KEY environment variable to reach the model gateway
"""

from flask import Flask, jsonify
import logging
from werkzeug.exceptions import HTTPException

from workbridge.config import get_config
from workbridge.services.errors import TranslationServiceError
from workbridge.services.translation_service import TranslationService

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'authorization, x-client-info, apikey, content-type',
}


def create_app(config=None, translation_service=None):
    """
    Create and configure the Flask application.

    Args:
        config: Optional configuration dictionary to override defaults
        translation_service: Optional TranslationService (tests inject one
            backed by a fake gateway)

    Returns:
        Flask: Configured Flask application instance
    """
    app = Flask(__name__)

    # Configure logging
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if config:
        app.config.update(config)

    if translation_service is None:
        translation_service = TranslationService(get_config())
    app.extensions['translation_service'] = translation_service
    app.logger.info("Translation service configured")

    # ------------------------------------------------------------------
    # Error handlers (JSON bodies: {"error": "..."})
    # ------------------------------------------------------------------

    @app.errorhandler(TranslationServiceError)
    def handle_translation_error(err):
        if err.status_code >= 500:
            app.logger.error("Translation error: %s", err.message)
        else:
            app.logger.warning("Translation request rejected: %s", err.message)
        return jsonify({'error': err.message}), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        return jsonify({'error': err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        app.logger.error("Unhandled server error", exc_info=err)
        return jsonify({'error': str(err) or 'Translation failed'}), 500

    from . import routes
    app.register_blueprint(routes.bp)

    @app.after_request
    def add_cors_headers(response):
        """Attach the same CORS headers to every response."""
        for name, value in CORS_HEADERS.items():
            response.headers[name] = value
        return response

    return app
