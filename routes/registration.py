"""API routes for registration data, check-in and logistics views."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from werkzeug.utils import secure_filename

from middleware.errors import BaseAppError, ValidationError
from repositories.registration_repository import RegistrationRepository
from services.grid_loader import load_grid
from services.registration_service import (
    build_family_groups,
    check_in_summary,
    import_grid,
    load_state,
    meal_counts,
    set_checked_in,
    set_family_checked_in,
    toggle_check_in,
    transportation_roster,
    update_participant,
)
from services.sheets_service import fetch_sheet_values
from utils.answers import parse_yes_no

registration_bp = Blueprint("registration", __name__, url_prefix="/api")


def _repo() -> RegistrationRepository:
    return RegistrationRepository()


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


@registration_bp.get("/update-data")
def update_data():
    """Raw form-response grid straight from the spreadsheet."""
    return jsonify({"data": fetch_sheet_values()})


@registration_bp.post("/refresh")
def refresh():
    """Fetch the sheet, parse it and replace the stored state."""
    try:
        counts = import_grid(fetch_sheet_values(), _repo())
    except BaseAppError:
        current_app.logger.exception("Registration refresh failed")
        raise
    return jsonify({"status": "ok", **counts})


@registration_bp.post("/import-file")
def import_file():
    """Parse an uploaded .csv/.xlsx export instead of the live sheet."""
    upload = request.files.get("file")
    if upload is None or not upload.filename:
        raise ValidationError("No file uploaded")

    filename = secure_filename(upload.filename)
    grid = load_grid(upload.stream, filename=filename)
    try:
        counts = import_grid(grid, _repo())
    except BaseAppError:
        current_app.logger.exception("Import of %s failed", filename)
        raise
    return jsonify({"status": "ok", "filename": filename, **counts})


@registration_bp.get("/participants")
def list_participants():
    repo = _repo()
    participants = repo.get_participants() or []
    last_updated = repo.get_last_updated()
    return jsonify({
        "participants": [p.to_dict() for p in participants],
        "lastUpdated": last_updated.isoformat() if last_updated else None,
    })


@registration_bp.get("/families")
def list_families():
    repo = _repo()
    families = repo.get_families() or []
    last_updated = repo.get_last_updated()
    return jsonify({
        "families": [f.to_dict() for f in families],
        "lastUpdated": last_updated.isoformat() if last_updated else None,
    })


@registration_bp.get("/checkin")
def checkin_overview():
    participants, families = load_state(_repo())
    groups = build_family_groups(participants, families)
    return jsonify({
        "families": [g.to_dict() for g in groups],
        "summary": check_in_summary(participants),
    })


@registration_bp.post("/checkin/<participant_id>")
def checkin(participant_id: str):
    """Toggle check-in, or set it explicitly with ``{"checkedIn": true|false}``."""
    payload = request.get_json(silent=True) or {}
    repo = _repo()
    if "checkedIn" in payload:
        value = parse_yes_no(payload["checkedIn"])
        if value is None:
            raise ValidationError("checkedIn must be true or false")
        participant = set_checked_in(participant_id, value, repo)
    else:
        participant = toggle_check_in(participant_id, repo)
    return jsonify({"status": "ok", "participant": participant.to_dict()})


@registration_bp.post("/checkin/family/<int:family_id>")
def checkin_family(family_id: int):
    """Check every member of a family in or out: ``{"checkedIn": true|false}``."""
    value = parse_yes_no(_json_body().get("checkedIn"))
    if value is None:
        raise ValidationError("checkedIn must be true or false")
    members = set_family_checked_in(family_id, value, _repo())
    return jsonify({
        "status": "ok",
        "familyId": family_id,
        "participants": [p.to_dict() for p in members],
    })


@registration_bp.post("/update-participant")
def update_participant_route():
    payload = _json_body()
    participant_id = payload.get("id")
    if not participant_id:
        raise ValidationError("Invalid participant data")
    participant = update_participant(str(participant_id), payload, _repo())
    return jsonify({
        "success": True,
        "message": "Participant updated successfully",
        "participant": participant.to_dict(),
    })


@registration_bp.get("/meals")
def meals():
    participants, _ = load_state(_repo())
    return jsonify({"counts": meal_counts(participants)})


@registration_bp.get("/transportation")
def transportation():
    participants, families = load_state(_repo())
    roster = transportation_roster(participants, families)
    return jsonify({
        "families": roster,
        "total": sum(entry["count"] for entry in roster),
    })


@registration_bp.delete("/data")
def clear_data():
    removed = _repo().clear()
    return jsonify({"status": "ok", "removed": removed})
