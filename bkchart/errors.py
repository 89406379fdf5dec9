# bkchart/errors.py


class ChartError(Exception):
    """Base class for chart domain errors."""

    status_code = 500
    message = "Server error"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class RecordReferenceError(ChartError):
    """Upsert referenced a member or point that does not exist."""

    status_code = 400
    message = "Unknown member or point"


class InvalidEffort(ChartError):
    """Effort is not an integer the effort column can hold."""

    status_code = 400
    message = "effort must be an integer"


class StorageUnavailable(ChartError):
    """The database could not be reached or failed mid-operation."""

    status_code = 503
    message = "Storage unavailable"
