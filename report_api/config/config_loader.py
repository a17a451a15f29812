import os
import logging
from typing import Optional

from report_api.utils.error_utils import ConfigurationError

from .config import SERVICE_ACCOUNT_ENV_VAR, SERVICE_ACCOUNT_FILE_ENV_VAR, SCOPES

logger = logging.getLogger(__name__)


class AppConfig:
    """Holds the per-request application configuration.

    Loaded fresh for every invocation; nothing is cached between requests.
    """
    def __init__(self):
        logger.debug("Initializing AppConfig instance...")
        self.service_account_json_string: Optional[str] = None
        self.scopes = list(SCOPES)

    def _load_service_account(self):
        """Loads the service account key content.

        Priority: GOOGLE_SERVICE_ACCOUNT_JSON (content), then
        GOOGLE_APPLICATION_CREDENTIALS (file path).
        """
        sa_json_env = os.environ.get(SERVICE_ACCOUNT_ENV_VAR)
        gac_path = os.environ.get(SERVICE_ACCOUNT_FILE_ENV_VAR)

        if sa_json_env:
            logger.debug(f"Using {SERVICE_ACCOUNT_ENV_VAR} environment variable for service account key.")
            self.service_account_json_string = sa_json_env
        elif gac_path:
            logger.info(f"{SERVICE_ACCOUNT_FILE_ENV_VAR} path found: {gac_path}")
            try:
                with open(gac_path, 'r') as f:
                    self.service_account_json_string = f.read()
                logger.info(f"Successfully loaded service account JSON from file: {gac_path}")
            except FileNotFoundError:
                logger.error(f"Service account file specified by {SERVICE_ACCOUNT_FILE_ENV_VAR} not found: {gac_path}")
                raise ConfigurationError(f"Service account file not found: {gac_path}")
            except OSError as e:
                logger.error(f"Error reading service account file {gac_path}: {e}", exc_info=True)
                raise ConfigurationError(f"Error reading service account file: {gac_path}") from e

        if not self.service_account_json_string:
            logger.error(f"Service Account credentials not found. Set {SERVICE_ACCOUNT_ENV_VAR} (content).")
            raise ConfigurationError(f"Missing {SERVICE_ACCOUNT_ENV_VAR}")

    def load(self):
        """Load all configuration."""
        self._load_service_account()
        return self


def load_config() -> AppConfig:
    """Builds and loads a fresh AppConfig from the current environment.

    Raises:
        ConfigurationError: If no service account credentials are available.
    """
    return AppConfig().load()
