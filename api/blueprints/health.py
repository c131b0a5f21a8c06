"""
api/blueprints/health.py
Blueprint de saúde da aplicação.

Endpoints:
    GET /health/ping — liveness check
"""

from __future__ import annotations

from flask import Blueprint, jsonify

health_bp = Blueprint("health", __name__)


@health_bp.get("/ping")
def ping():
    """Liveness check da aplicação."""
    return jsonify({"status": "ok"})
