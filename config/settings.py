import os


def env_bool(key, default=False):
    return os.getenv(key, str(default)).lower() in ("1", "true", "yes", "on")


# Verbose parser/locator logging
DEBUG_PRINT = env_bool("DEBUG_PRINT")

# Google Sheets holding the registration form responses
SPREADSHEET_ID = os.getenv("SPREADSHEET_ID", "")
GOOGLE_SERVICE_ACCOUNT_JSON = os.getenv("GOOGLE_SERVICE_ACCOUNT_JSON", "")
SHEET_RANGE = os.getenv("SHEET_RANGE", "A1:CZ1000")

# Mongo collection with one document per stored key
STATE_COLLECTION = os.getenv("STATE_COLLECTION", "registration_state")

# Upper bound for uploaded .csv/.xlsx exports
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", 10 * 1024 * 1024))
