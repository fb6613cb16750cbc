"""
routes/health.py — Health probe Blueprint

Registers routes:
  GET  /health/live   — liveness (always 200)
  GET  /health/ready  — readiness (200 or 503)

The checker is read from app.extensions['health_checker'], set by create_app().
"""

from flask import Blueprint, current_app, jsonify

health_bp = Blueprint('health', __name__)


def _checker():
    return current_app.extensions['health_checker']


@health_bp.route('/health/live', methods=['GET'])
def health_live():
    """Liveness probe — is the process running?"""
    result = _checker().liveness()
    return jsonify({"healthy": result.healthy, "message": result.message, "details": result.details}), 200


@health_bp.route('/health/ready', methods=['GET'])
def health_ready():
    """Readiness probe — render backend configured and cache reachable?"""
    result = _checker().readiness()
    code = 200 if result.healthy else 503
    return jsonify({"healthy": result.healthy, "message": result.message, "details": result.details}), code
