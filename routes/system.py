"""Operational endpoints: liveness and configuration status."""

from flask import Blueprint, jsonify

from config.database import mongodb
from middleware.errors import DatabaseConnectionError
from services.sheets_service import check_environment

system_bp = Blueprint("system", __name__)


@system_bp.get("/health")
def health():
    """Always 200 while the process is up; ``database`` reports Mongo reachability."""
    try:
        mongodb.ping()
        database = "ok"
    except DatabaseConnectionError as err:
        database = f"error: {err.message}"
    return jsonify({"status": "ok", "database": database}), 200


@system_bp.get("/api/check-env")
def check_env():
    """Spreadsheet credentials / id status, secrets masked."""
    return jsonify(check_environment()), 200
