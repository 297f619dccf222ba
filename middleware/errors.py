"""
Exceptions raised by the retreat dashboard.

They all extend ``BaseAppError`` (a werkzeug ``HTTPException``) so a route can
simply let them propagate: ``middleware.handlers`` turns them into JSON with
the status code declared on the class.

    400  bad requests and uploads
    404  unknown participant / empty spreadsheet
    422  registration grid that cannot be parsed
    403/404/502  spreadsheet API failures
    500/503  configuration and database availability
"""

from werkzeug.exceptions import HTTPException


class BaseAppError(HTTPException):
    """Application error carrying a message and JSON-safe ``details``."""
    code = 500
    description = "Application error"

    def __init__(self, message=None, details=None, code=None):
        super().__init__(description=message or self.description)
        self.message = message or self.description
        self.details = details or {}
        if code:
            self.code = code

    def to_dict(self):
        return {
            "status": "error",
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# ---- Request errors ----------------------------------------------------------

class ValidationError(BaseAppError):
    code = 400
    description = "Invalid request"


class UnsupportedFileError(ValidationError):
    description = "Unsupported export file type"


class RecordNotFoundError(BaseAppError):
    code = 404
    description = "Record not found"


# ---- Registration data -------------------------------------------------------

class ImportParsingError(BaseAppError):
    code = 422
    description = "Could not parse imported data"


class RegistrationParseError(ImportParsingError):
    """
    A registration grid could not be turned into participants or families.
    The message names the failing operation and the underlying cause.
    """
    description = "Failed to parse registration data"


class SheetAccessError(BaseAppError):
    """The spreadsheet API refused or failed the request."""
    code = 502
    description = "Failed to fetch spreadsheet data"


# ---- Environment -------------------------------------------------------------

class ConfigurationError(BaseAppError):
    code = 500
    description = "Configuration missing or invalid"


class DatabaseConnectionError(BaseAppError):
    code = 503
    description = "Database unavailable"
