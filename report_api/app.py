import logging
import json

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from report_api.config.config import LOG_LEVEL, LOG_FORMAT
from report_api.services.report import handle_request, ReportResponse

# --- Logging Setup ---
logging.basicConfig(
    format=LOG_FORMAT,
    level=LOG_LEVEL,
    # Ensure logs are in a format that Cloud Logging can parse
    datefmt='%Y-%m-%dT%H:%M:%S'
)

# Set higher logging level for noisy libraries
logging.getLogger("urllib3").setLevel(logging.WARNING)
logging.getLogger("google.auth").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

# --- FastAPI App Instance ---
app = FastAPI(
    title="Sheet Report API",
    description="Upserts, deletes and bill status updates over a header-addressed Google Sheet",
    version="1.0.0",
)


def _to_http(result: ReportResponse) -> Response:
    if result.body is None:
        return Response(status_code=result.status_code, headers=result.headers)
    return JSONResponse(result.body, status_code=result.status_code, headers=result.headers)


async def _read_body(request: Request):
    raw = await request.body()
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Report endpoint: request body is not valid JSON, treating as empty.")
        return {}


@app.api_route("/api/report", methods=["POST", "DELETE", "OPTIONS"])
async def report(request: Request):
    """Dispatches a report action. See report_api.services.report."""
    body = await _read_body(request) if request.method != "OPTIONS" else None
    # gspread calls block; keep them off the event loop
    result = await run_in_threadpool(handle_request, request.method, body)
    return _to_http(result)


# Health check endpoint
@app.get("/health")
async def health_check():
    return {"status": "healthy"}


# --- Main execution for local testing (using uvicorn) ---
if __name__ == "__main__":
    import uvicorn
    logger.info("Starting Uvicorn server for local development...")
    uvicorn.run(app, host="0.0.0.0", port=8000)
