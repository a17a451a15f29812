"""Google Cloud Functions entry point for the Sheet Report API.

Deploy with `--entry-point report`; the function shares all logic with the
FastAPI app through report_api.services.report.handle_request.
"""

import json
import logging

import functions_framework

from report_api.config.config import LOG_LEVEL, LOG_FORMAT
from report_api.services.report import handle_request

# --- Logging Setup ---
logging.basicConfig(
    format=LOG_FORMAT,
    level=LOG_LEVEL
)
logging.getLogger("urllib3").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


@functions_framework.http
def report(request):
    """HTTP Cloud Function entry point for report actions."""
    body = None
    if request.method != "OPTIONS":
        # silent=True: malformed or missing JSON yields None, handled as an empty body
        body = request.get_json(force=True, silent=True)

    result = handle_request(request.method, body)
    if result.body is None:
        return '', result.status_code, result.headers

    headers = {**result.headers, 'Content-Type': 'application/json'}
    return json.dumps(result.body, ensure_ascii=False), result.status_code, headers
