"""
Flask routes for the workbridge translation service.

- OPTIONS on any path: CORS preflight
- POST /translate: detect and translate a batch of text fields
- GET /health: liveness check
"""

from flask import Blueprint, Response, current_app, jsonify, request
import logging

logger = logging.getLogger(__name__)

# Create blueprint for main routes
bp = Blueprint('main', __name__)


def _preflight():
    return Response(status=200)


@bp.route('/', defaults={'path': ''}, methods=['OPTIONS'])
@bp.route('/<path:path>', methods=['OPTIONS'])
def preflight(path):
    """CORS preflight for any path; headers are added in after_request."""
    return _preflight()


@bp.route('/health')
def health():
    """
    Health check endpoint for load balancers.

    Returns 200 OK without contacting the model gateway.
    """
    return jsonify({'status': 'ok'})


@bp.route('/translate', methods=['POST', 'OPTIONS'])
def translate():
    """
    Detect language and translate a batch of free-text fields.

    Body:
        {"texts": [{"field": "bio", "value": "..."}, ...]}

    Returns:
        200 {"results": [...]} on success (including an all-blank batch)
        400 / 402 / 429 / 500 {"error": "..."} via the app's error handlers
    """
    if request.method == 'OPTIONS':
        return _preflight()

    data = request.get_json(silent=True)
    texts = data.get('texts') if isinstance(data, dict) else None

    service = current_app.extensions['translation_service']
    results = service.translate(texts)

    logger.info("Translated %d field(s)", len(results))
    return jsonify({'results': [result.to_dict() for result in results]})
