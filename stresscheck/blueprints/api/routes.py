"""API routes for StressCheck."""

import logging

from flask import jsonify

from . import api_bp
from stresscheck import __version__

logger = logging.getLogger(__name__)


@api_bp.route('/health')
def health_check():
    """Health check endpoint.

    Returns:
        JSON response with status and version
    """
    return jsonify({
        'status': 'ok',
        'version': __version__,
    }), 200
