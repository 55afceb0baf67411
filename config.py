"""Configuration settings for the subject mark-entry client."""

import os
import logging
from typing import Final

# Debug flag: 1 = debug mode (verbose logging), 0 = production mode
DEBUG: Final[int] = int(os.environ.get("MARKENTRY_DEBUG", "0"))

# --- Remote API Settings ---

# Single task-dispatch endpoint; every call is POST {API_BASE_URL}?task=<name>
API_BASE_URL: Final[str] = os.environ.get("MARKENTRY_API_URL", "https://rmpublicschool.org/binex/api.php")

# Timeouts in seconds for the HTTP client
REQUEST_TIMEOUT: Final[float] = float(os.environ.get("MARKENTRY_TIMEOUT", "30"))
CONNECT_TIMEOUT: Final[float] = float(os.environ.get("MARKENTRY_CONNECT_TIMEOUT", "10"))

# Envelope value the server uses for a successful call
SUCCESS_STATUS: Final[str] = "success"

# --- Session Settings ---
# Teacher (employee) id and branch id are opaque strings owned by the login flow.
# Environment variables win over the session file.
SESSION_FILE: Final[str] = os.environ.get("MARKENTRY_SESSION_FILE", "session.json")
SESSION_EMP_ID: Final[str | None] = os.environ.get("MARKENTRY_EMP_ID")
SESSION_BRANCH_ID: Final[str | None] = os.environ.get("MARKENTRY_BRANCH_ID")

# --- Grading Settings ---

# Max score for a component the schema does not declare one for
DEFAULT_MAX_SCORE: Final[float] = 100

# --- File Paths ---
LOG_DIR: Final[str] = "logs"
LOG_FILE: Final[str] = os.path.join(LOG_DIR, "mark_entry.log")

# --- Logging Configuration ---
# LOG_LEVEL is used for file logging, console logging is only enabled in DEBUG mode
LOG_LEVEL = logging.DEBUG if DEBUG else logging.INFO
# Structured log format: timestamp, level, logger, module.function:line, message
LOG_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(module)s.%(funcName)s:%(lineno)d | %(message)s'

# Basic check
if __name__ == "__main__":
    print(f"Debug Mode: {'On' if DEBUG else 'Off'}")
    print(f"Log Level: {logging.getLevelName(LOG_LEVEL)}")
    print(f"API URL: {API_BASE_URL}")
    print(f"Timeouts: {REQUEST_TIMEOUT}s (connect {CONNECT_TIMEOUT}s)")
    print(f"Session File: {SESSION_FILE}")
    print(f"Log File: {LOG_FILE}")
    print(f"Default Max Score: {DEFAULT_MAX_SCORE}")
