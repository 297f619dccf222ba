import csv
import io

import pytest

import routes.registration as registration_routes
from app import create_app
from config import settings
from middleware.errors import SheetAccessError


@pytest.fixture
def grid(headers, party_row):
    return [
        headers,
        party_row([("Ann", "Lee", "Adult"), ("Bo", "Lee", "Infant")], transport="Bus"),
        party_row([("Cy", "Ray", "")]),
    ]


@pytest.fixture
def client(monkeypatch, repo, grid):
    monkeypatch.setattr(registration_routes, "_repo", lambda: repo)
    monkeypatch.setattr(registration_routes, "fetch_sheet_values", lambda: grid)
    app = create_app()
    app.config["TESTING"] = True
    return app.test_client()


def test_update_data_returns_raw_grid(client, grid):
    resp = client.get("/api/update-data")
    assert resp.status_code == 200
    assert resp.get_json() == {"data": grid}


def test_refresh_then_list(client):
    resp = client.post("/api/refresh")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok", "rows": 2, "participants": 3, "families": 2}

    participants = client.get("/api/participants").get_json()
    assert [p["id"] for p in participants["participants"]] == ["p1_1", "p1_2", "p2_1"]
    assert participants["lastUpdated"] is not None

    families = client.get("/api/families").get_json()["families"]
    assert [f["name"] for f in families] == ["Lee Family", "Cy Ray"]


def test_lists_are_empty_before_first_import(client):
    body = client.get("/api/participants").get_json()
    assert body == {"participants": [], "lastUpdated": None}


def test_refresh_failure_is_json_error(client, monkeypatch):
    def fail():
        raise SheetAccessError("Permission denied", code=403)

    monkeypatch.setattr(registration_routes, "fetch_sheet_values", fail)

    resp = client.post("/api/refresh")

    assert resp.status_code == 403
    assert resp.get_json() == {
        "status": "error",
        "error": "SheetAccessError",
        "message": "Permission denied",
        "details": {},
    }


def test_import_file_upload(client, headers, grid):
    buffer = io.StringIO()
    csv.writer(buffer).writerows(r + [""] * (len(headers) - len(r)) for r in grid)
    data = {"file": (io.BytesIO(buffer.getvalue().encode("utf-8")), "responses export.csv")}

    resp = client.post("/api/import-file", data=data, content_type="multipart/form-data")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["filename"] == "responses_export.csv"
    assert body["participants"] == 3


def test_import_file_rejects_missing_and_unsupported(client):
    assert client.post("/api/import-file", data={}).status_code == 400

    data = {"file": (io.BytesIO(b"x"), "notes.txt")}
    resp = client.post("/api/import-file", data=data, content_type="multipart/form-data")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "UnsupportedFileError"


def test_checkin_flow(client):
    client.post("/api/refresh")

    toggled = client.post("/api/checkin/p1_2").get_json()
    assert toggled["participant"]["checkedIn"] is True

    explicit = client.post("/api/checkin/p1_2", json={"checkedIn": "no"}).get_json()
    assert explicit["participant"]["checkedIn"] is False

    client.post("/api/checkin/p2_1", json={"checkedIn": True})
    overview = client.get("/api/checkin").get_json()
    assert overview["summary"] == {"total": 3, "checkedIn": 1, "remaining": 2}
    assert overview["families"][1]["members"] == [
        {"id": "p2_1", "name": "Cy Ray", "checkedIn": True}
    ]


def test_family_checkin_route(client):
    client.post("/api/refresh")

    resp = client.post("/api/checkin/family/1", json={"checkedIn": True})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["familyId"] == 1
    assert [(p["id"], p["checkedIn"]) for p in body["participants"]] == [
        ("p1_1", True),
        ("p1_2", True),
    ]
    summary = client.get("/api/checkin").get_json()["summary"]
    assert summary == {"total": 3, "checkedIn": 2, "remaining": 1}

    client.post("/api/checkin/family/1", json={"checkedIn": False})
    assert client.get("/api/checkin").get_json()["summary"]["checkedIn"] == 0


def test_family_checkin_route_errors(client):
    client.post("/api/refresh")

    unknown = client.post("/api/checkin/family/42", json={"checkedIn": True})
    assert unknown.status_code == 404
    assert unknown.get_json()["error"] == "RecordNotFoundError"

    assert client.post("/api/checkin/family/1", json={}).status_code == 400
    assert client.post("/api/checkin/family/1", json={"checkedIn": "maybe"}).status_code == 400

def test_checkin_errors(client):
    client.post("/api/refresh")

    missing = client.post("/api/checkin/p9_9")
    assert missing.status_code == 404
    assert missing.get_json()["error"] == "RecordNotFoundError"

    bad = client.post("/api/checkin/p1_1", json={"checkedIn": "maybe"})
    assert bad.status_code == 400


def test_update_participant_route(client):
    client.post("/api/refresh")

    resp = client.post(
        "/api/update-participant",
        json={"id": "p1_1", "roles": ["food-crew"], "comments": "Vegetarian"},
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["participant"]["roles"] == ["food-crew"]
    assert body["participant"]["comments"] == "Vegetarian"


@pytest.mark.parametrize(
    "payload, status",
    [
        ({"roles": ["food-crew"]}, 400),
        ({"id": "p1_1", "name": "Renamed"}, 400),
        ({"id": "p8_1", "comments": "x"}, 404),
    ],
)
def test_update_participant_route_errors(client, payload, status):
    client.post("/api/refresh")
    assert client.post("/api/update-participant", json=payload).status_code == status


def test_update_participant_requires_json_object(client):
    resp = client.post("/api/update-participant", data="[]", content_type="application/json")
    assert resp.status_code == 400


def test_meals_and_transportation(client):
    client.post("/api/refresh")

    meals = client.get("/api/meals").get_json()["counts"]
    assert meals["adult"] == 2
    assert meals["infant-0-2"] == 1
    assert meals["total"] == 3

    transport = client.get("/api/transportation").get_json()
    assert transport["total"] == 2
    assert transport["families"][0]["family"] == "Lee Family"


def test_clear_data(client):
    client.post("/api/refresh")

    assert client.delete("/api/data").get_json() == {"status": "ok", "removed": 3}
    assert client.get("/api/families").get_json()["families"] == []


def test_unknown_route_is_json(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "NotFound"


def test_check_env_route(client, monkeypatch):
    monkeypatch.setattr(settings, "GOOGLE_SERVICE_ACCOUNT_JSON", "")
    monkeypatch.setattr(settings, "SPREADSHEET_ID", "sheet")

    body = client.get("/api/check-env").get_json()

    assert body["GOOGLE_SERVICE_ACCOUNT_JSON"]["set"] is False
    assert body["SPREADSHEET_ID"] == {"set": True, "value": "sheet"}


def test_health_reports_database_failure(client, monkeypatch):
    from config.database import mongodb
    from middleware.errors import DatabaseConnectionError

    def down():
        raise DatabaseConnectionError("MongoDB is not configured")

    monkeypatch.setattr(mongodb, "ping", down)

    body = client.get("/health").get_json()

    assert body == {"status": "ok", "database": "error: MongoDB is not configured"}


def test_import_file_with_ragged_csv_is_json_422(client):
    data = {"file": (io.BytesIO(b"Timestamp,Party\n2024-05-01,2,extra\n"), "export.csv")}

    resp = client.post("/api/import-file", data=data, content_type="multipart/form-data")

    assert resp.status_code == 422
    assert resp.get_json()["error"] == "ImportParsingError"
