"""Google Sheets access for the registration form responses.

Only the raw ``values`` grid leaves this module; parsing happens in
:mod:`services.registration_parser`.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from config import settings
from middleware.errors import ConfigurationError, RecordNotFoundError, SheetAccessError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def _load_service_account_info(credentials_json: str) -> Dict[str, Any]:
    """Parse the service account JSON and check the fields the JWT flow needs."""
    try:
        info = json.loads(credentials_json)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            "Invalid Google Service Account credentials format",
            details={"reason": str(exc)},
        ) from exc
    if not isinstance(info, dict) or not info.get("client_email") or not info.get("private_key"):
        raise ConfigurationError("Invalid Google Service Account credentials format")
    return info


def _sheets_client(info: Dict[str, Any]):
    credentials = Credentials.from_service_account_info(info, scopes=SCOPES)
    return build("sheets", "v4", credentials=credentials, cache_discovery=False)


def _http_status(err: HttpError) -> int:
    return getattr(getattr(err, "resp", None), "status", 0) or 0


def fetch_sheet_values(
    spreadsheet_id: Optional[str] = None,
    credentials_json: Optional[str] = None,
    *,
    cell_range: Optional[str] = None,
    client=None,
) -> List[List[str]]:
    """
    Return the values of the first sheet of the registration spreadsheet.

    Raises ``ConfigurationError`` when credentials or the spreadsheet id are
    missing/invalid, ``RecordNotFoundError`` when the spreadsheet holds no
    sheet or no data, and ``SheetAccessError`` for API failures (403/404 keep
    their status code).
    """
    spreadsheet_id = spreadsheet_id or settings.SPREADSHEET_ID
    credentials_json = credentials_json or settings.GOOGLE_SERVICE_ACCOUNT_JSON
    cell_range = cell_range or settings.SHEET_RANGE

    if client is None:
        if not credentials_json:
            raise ConfigurationError("Google Service Account credentials not configured")
        if not spreadsheet_id:
            raise ConfigurationError("Spreadsheet ID not configured")
        info = _load_service_account_info(credentials_json)
        logger.info("Creating Sheets client for %s", info["client_email"])
        client = _sheets_client(info)
    elif not spreadsheet_id:
        raise ConfigurationError("Spreadsheet ID not configured")

    try:
        meta = client.spreadsheets().get(spreadsheetId=spreadsheet_id).execute()
        titles = [
            (sheet.get("properties") or {}).get("title")
            for sheet in meta.get("sheets", [])
        ]
        titles = [t for t in titles if t]
        if not titles:
            raise RecordNotFoundError("No sheets found in the spreadsheet")

        sheet_range = f"{titles[0]}!{cell_range}"
        logger.info("Fetching data from sheet %s, range %s", titles[0], sheet_range)
        response = (
            client.spreadsheets()
            .values()
            .get(spreadsheetId=spreadsheet_id, range=sheet_range)
            .execute()
        )
    except HttpError as err:
        status = _http_status(err)
        if status == 404:
            raise SheetAccessError(
                "Spreadsheet not found. Check your SPREADSHEET_ID.", code=404
            ) from err
        if status == 403:
            raise SheetAccessError(
                "Permission denied. Make sure your service account has access to the spreadsheet.",
                code=403,
            ) from err
        raise SheetAccessError(
            f"Failed to fetch spreadsheet data: {err}", details={"status": status}
        ) from err

    values = response.get("values") or []
    if not values:
        raise RecordNotFoundError("No data found in the spreadsheet")

    logger.info("Data fetched: %d rows, %d columns", len(values), len(values[0]))
    return values


def _mask_email(email: str) -> str:
    if len(email) > 15:
        return f"{email[:5]}...{email[-10:]}"
    return "too_short"


def check_environment() -> Dict[str, Any]:
    """Report the Sheets configuration without exposing secret values."""
    raw_credentials = settings.GOOGLE_SERVICE_ACCOUNT_JSON or ""
    credentials_status: Dict[str, Any] = {
        "set": bool(raw_credentials),
        "valid": False,
        "length": len(raw_credentials),
    }
    if raw_credentials:
        try:
            info = json.loads(raw_credentials)
        except ValueError:
            credentials_status["error"] = "Invalid JSON format"
        else:
            if not isinstance(info, dict):
                info = {}
            credentials_status["valid"] = bool(info.get("client_email") and info.get("private_key"))
            if info.get("client_email"):
                credentials_status["email"] = _mask_email(str(info["client_email"]))

    return {
        "GOOGLE_SERVICE_ACCOUNT_JSON": credentials_status,
        "SPREADSHEET_ID": {
            "set": bool(settings.SPREADSHEET_ID),
            "value": settings.SPREADSHEET_ID or "",
        },
    }
