"""API Blueprint for StressCheck REST endpoints."""

from flask import Blueprint

api_bp = Blueprint('api', __name__)

from stresscheck.blueprints.api import routes  # noqa: E402, F401
from stresscheck.blueprints.api import diagnostic  # noqa: E402, F401
from stresscheck.blueprints.api import history  # noqa: E402, F401
