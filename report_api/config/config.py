"""Configuration settings for the Sheet Report API."""

import os
from dotenv import load_dotenv

load_dotenv() # Local development only; deployed functions read real env vars

# --- Google Sheets Configuration ---
# Environment variable holding the full service account key (JSON content)
SERVICE_ACCOUNT_ENV_VAR = 'GOOGLE_SERVICE_ACCOUNT_JSON'
# Fallback: path to a service account key file
SERVICE_ACCOUNT_FILE_ENV_VAR = 'GOOGLE_APPLICATION_CREDENTIALS'
# Google API Scopes needed
SCOPES = [
    'https://www.googleapis.com/auth/spreadsheets',
]
# How written values are interpreted by Sheets (formulas, dates, numbers parsed)
VALUE_INPUT_OPTION = 'USER_ENTERED'

# --- Logging ---
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# --- CORS --- #
CORS_ALLOW_ORIGIN = {'Access-Control-Allow-Origin': '*'}
CORS_PREFLIGHT_HEADERS = {
    **CORS_ALLOW_ORIGIN,
    'Access-Control-Allow-Methods': 'POST,DELETE,OPTIONS',
    'Access-Control-Allow-Headers': 'Content-Type',
}

# --- Sheet Layout --- #
ID_COL_IDX = 0        # Column A holds the record identifier
HEADER_ROW_IDX = 0    # Row 1 holds the header names

# --- Bill Status Mappings --- #
# Keys of each item in the `bills` list sent with updateAllSTT
BILL_FIELD = 'Số Bill'
STATUS_FIELD = 'STT'
# Normalized header names used to locate the bill and status columns
STATUS_HEADER_KEY = 'stt'
BILL_HEADER_KEY = 'so_bill'     # Exact normalized match, preferred
BILL_HEADER_FRAGMENT = 'bill'   # Substring fallback, must be unambiguous
