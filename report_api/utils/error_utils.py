import logging
from typing import Optional

logger = logging.getLogger(__name__)


class ReportError(Exception):
    """Base error for failures that map onto a specific HTTP status."""
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(ReportError):
    """Missing or invalid fields in the client payload."""
    status_code = 400


class NotFoundError(ReportError):
    """The requested record, bill or sheet does not exist."""
    status_code = 404


class ConfigurationError(ReportError):
    """Server-side configuration (credentials) is missing or unusable."""
    status_code = 500


# Basic error logging (can be expanded)
def log_error(message: str, action: str | None = None, sheet_id: str | None = None, exc_info=False):
    """Logs an error message, optionally including the action and target sheet."""
    log_message = f"ERROR: {message}"
    if action:
        log_message += f" | Action: {action}"
    if sheet_id:
        log_message += f" | Sheet ID: {sheet_id}"

    # Use logger.error which handles exc_info automatically if True
    logger.error(log_message, exc_info=exc_info)
