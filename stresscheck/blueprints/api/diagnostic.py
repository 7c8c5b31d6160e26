"""Diagnostic API endpoints.

GET  /api/diagnostic/questions   event catalog
POST /api/diagnostic/configure   replace the event catalog
POST /api/diagnostic/submit      score, classify, store

Standard response format: {"success": bool, "result": {...}, "error": {...}}.
The payload keys read by bare consumers (events, score, stressLevel,
interpretation) are also kept at the top level.
"""

import logging

from flask import jsonify, request

from . import api_bp
from stresscheck.core.analysis.engine import get_diagnostic_engine
from stresscheck.models.errors import (
    CATALOG_INVALID,
    CATALOG_SAVE_FAILED,
    DIAGNOSTIC_EMPTY_SELECTION,
    DIAGNOSTIC_INVALID_SELECTION,
    SUBMISSION_FAILED,
)
from stresscheck.services.catalog_store import get_catalog_store
from stresscheck.services.history_store import get_history_store

logger = logging.getLogger(__name__)


def _error(code, message, status, details=None):
    return jsonify({
        "success": False,
        "error": {
            "code": code,
            "message": message,
            "details": details or {},
        },
    }), status


def _parse_selection(data):
    """Return the list of selected ids, or None if the body is invalid."""
    if not isinstance(data, dict):
        return None
    ids = data.get("selectedEventIds")
    if not isinstance(ids, list):
        return None
    # bool is an int subclass
    if not all(isinstance(i, int) and not isinstance(i, bool) for i in ids):
        return None
    return ids


@api_bp.route('/diagnostic/questions', methods=['GET'])
def get_questions():
    """Return the event catalog.

    Returns:
        JSON response with events and categories
    """
    logger.debug("GET /api/diagnostic/questions called")

    catalog = get_catalog_store().get_catalog()
    payload = catalog.to_dict()

    return jsonify({
        "success": True,
        "result": {
            **payload,
            "count": len(catalog),
        },
        "events": payload["events"],
    }), 200


@api_bp.route('/diagnostic/configure', methods=['POST'])
def configure_questions():
    """Replace the event catalog.

    Request Body:
        {"events": [{"id": 1, "title": "...", "points": 50, "category": "..."}, ...]}

    Returns:
        200: Catalog replaced
        400: No event list, or no valid event in it
        500: Catalog file could not be written
    """
    logger.debug("POST /api/diagnostic/configure called")

    data = request.get_json(silent=True)
    try:
        catalog = get_catalog_store().replace(data)
    except ValueError as e:
        return _error(CATALOG_INVALID, str(e), 400)
    except OSError as e:
        logger.error(f"Error saving catalog (error={str(e)})")
        return _error(CATALOG_SAVE_FAILED, f"Erreur: {str(e)}", 500)

    payload = catalog.to_dict()
    return jsonify({
        "success": True,
        "result": {
            **payload,
            "count": len(catalog),
        },
        "events": payload["events"],
    }), 200


@api_bp.route('/diagnostic/submit', methods=['POST'])
def submit_diagnostic():
    """Score a selection and store the diagnostic.

    Request Body:
        {"selectedEventIds": [1, 4, 9]}

    Returns:
        201: Diagnostic computed and stored
        400: Missing, malformed or empty selection (or no known event)
        500: Diagnostic could not be stored
    """
    logger.debug("POST /api/diagnostic/submit called")

    selection = _parse_selection(request.get_json(silent=True))
    if selection is None:
        return _error(
            DIAGNOSTIC_INVALID_SELECTION,
            "Champ 'selectedEventIds' requis (liste d'entiers)",
            400,
        )
    if not selection:
        return _error(
            DIAGNOSTIC_EMPTY_SELECTION,
            "Veuillez sélectionner au moins un événement pour continuer.",
            400,
        )

    catalog = get_catalog_store().get_catalog()
    known = [i for i in selection if i in catalog]
    unknown = sorted({i for i in selection if i not in catalog})
    if unknown:
        logger.info(f"Unknown event ids ignored (ids={unknown})")
    if not known:
        return _error(
            DIAGNOSTIC_EMPTY_SELECTION,
            "Aucun des evenements selectionnes n'existe dans le questionnaire.",
            400,
            details={"unknownEventIds": unknown},
        )

    result = get_diagnostic_engine().evaluate(catalog.events, selection)

    try:
        record = get_history_store().add(
            result,
            selected_event_ids=known,
        )
    except (OSError, ValueError) as e:
        logger.error(f"Error storing diagnostic (error={str(e)})")
        return _error(SUBMISSION_FAILED, f"Erreur: {str(e)}", 500)

    body = {
        **result.to_dict(),
        "id": record.id,
        "createdAt": record.created_at.isoformat(),
    }
    return jsonify({
        "success": True,
        "result": body,
        **body,
    }), 201
