"""History API endpoints.

GET    /api/diagnostic/history        stored diagnostics, most recent first
GET    /api/diagnostic/history/<id>   one diagnostic
DELETE /api/diagnostic/history/<id>   idempotent delete
GET    /api/diagnostic/stats          statistics of the stored history
"""

import logging

from flask import jsonify

from . import api_bp
from stresscheck.core.analysis.statistics import get_statistics_analyzer
from stresscheck.models.errors import HISTORY_DELETE_FAILED, HISTORY_UNAVAILABLE
from stresscheck.services.history_store import get_history_store

logger = logging.getLogger(__name__)


@api_bp.route('/diagnostic/history', methods=['GET'])
def list_history():
    """List stored diagnostics.

    Returns:
        JSON response with the diagnostics and their count
    """
    logger.debug("GET /api/diagnostic/history called")

    try:
        records = get_history_store().list_records()
    except (OSError, ValueError) as e:
        logger.error(f"Error listing history (error={str(e)})")
        return jsonify({
            "success": False,
            "error": {
                "code": HISTORY_UNAVAILABLE,
                "message": f"Erreur: {str(e)}",
                "details": {},
            },
        }), 500

    diagnostics = [r.to_dict() for r in records]
    return jsonify({
        "success": True,
        "result": {
            "diagnostics": diagnostics,
            "count": len(diagnostics),
        },
        "diagnostics": diagnostics,
    }), 200


@api_bp.route('/diagnostic/history/<int:record_id>', methods=['GET'])
def get_history_record(record_id):
    """Return one stored diagnostic.

    Returns:
        200: Diagnostic found
        404: Unknown id
    """
    logger.debug(f"GET /api/diagnostic/history/{record_id} called")

    record = get_history_store().get(record_id)
    if record is None:
        return jsonify({
            "success": False,
            "error": {
                "code": "HISTORY_NOT_FOUND",
                "message": f"Diagnostic '{record_id}' non trouve",
                "details": {},
            },
        }), 404

    return jsonify({
        "success": True,
        "result": record.to_dict(),
    }), 200


@api_bp.route('/diagnostic/history/<int:record_id>', methods=['DELETE'])
def delete_history_record(record_id):
    """Delete a stored diagnostic.

    Deleting an id that is already gone answers 200 with deleted=false.

    Returns:
        200: Deleted, or already gone
        500: Store error
    """
    logger.debug(f"DELETE /api/diagnostic/history/{record_id} called")

    try:
        removed = get_history_store().delete(record_id)
    except (OSError, ValueError) as e:
        logger.error(f"Error deleting diagnostic (id={record_id}, error={str(e)})")
        return jsonify({
            "success": False,
            "error": {
                "code": HISTORY_DELETE_FAILED,
                "message": f"Erreur: {str(e)}",
                "details": {"id": record_id},
            },
        }), 500

    return jsonify({
        "success": True,
        "result": {"id": record_id, "deleted": removed is not None},
        "deleted": removed is not None,
    }), 200


@api_bp.route('/diagnostic/stats', methods=['GET'])
def get_stats():
    """Return the statistics of the stored history.

    Returns:
        JSON response with the StatsSnapshot
    """
    logger.debug("GET /api/diagnostic/stats called")

    records = get_history_store().list_records()
    snapshot = get_statistics_analyzer().analyze(records)

    return jsonify({
        "success": True,
        "result": {
            **snapshot.to_dict(),
            "levelPercentages": {
                level.value: pct for level, pct in snapshot.level_percentages().items()
            },
        },
    }), 200
