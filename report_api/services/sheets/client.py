"""Handles Google Sheets client authentication."""

import logging
import json
import gspread
from google.oauth2 import service_account

# Project imports
from report_api.config.config_loader import AppConfig
from report_api.utils.error_utils import ConfigurationError

logger = logging.getLogger(__name__)


def get_gspread_client(config: AppConfig) -> gspread.Client:
    """Authenticates and returns a gspread Client for the configured service account.

    A new client is built on every call; requests share no state.
    Raises:
        ConfigurationError: If the service account JSON is missing or not valid JSON.
        ValueError: If google-auth rejects the key material.
    """
    if not config.service_account_json_string:
        logger.critical("Service account JSON string not available in config!")
        raise ConfigurationError("Missing service account credentials in configuration")

    try:
        service_account_info = json.loads(config.service_account_json_string)
    except json.JSONDecodeError as e:
        logger.critical(f"Failed to parse service account JSON from config: {e}")
        raise ConfigurationError(f"Invalid service account JSON: {e}") from e

    if not isinstance(service_account_info, dict):
        logger.critical(f"Service account JSON must be an object, got {type(service_account_info).__name__}")
        raise ConfigurationError("Invalid service account JSON: expected an object")

    creds = service_account.Credentials.from_service_account_info(
        service_account_info,
        scopes=config.scopes
    )
    client = gspread.authorize(creds)
    logger.info(f"Authorized gspread client for {service_account_info.get('client_email', 'unknown service account')}.")
    return client
