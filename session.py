"""Reads the logged-in teacher and active branch from the local session store."""

import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import config
from utils.logger import get_logger
from utils.error_handler import SessionError

logger = get_logger()

@dataclass(frozen=True)
class SessionContext:
    """Opaque identifiers of the current login. Never interpreted by the engine."""
    emp_id: str
    branch_id: str

def _read_session_file(path: str) -> Dict[str, Any]:
    if not os.path.exists(path):
        logger.debug(f"No session file at {path}")
        return {}
    try:
        with open(path, "r", encoding="utf-8") as session_file:
            data = json.load(session_file)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to read session file {path}: {e}", exc_info=config.DEBUG)
        raise SessionError(f"Session file {path} could not be read. Please log in again.") from e
    if not isinstance(data, dict):
        raise SessionError(f"Session file {path} is malformed. Please log in again.")
    return data

def load_session(
    session_file: Optional[str] = None,
    emp_id: Optional[str] = None,
    branch_id: Optional[str] = None,
) -> SessionContext:
    """Resolves the teacher id and branch id for this run.

    Explicit arguments win, then the MARKENTRY_EMP_ID / MARKENTRY_BRANCH_ID
    environment variables, then the JSON session file.

    Returns:
        SessionContext: The active session.

    Raises:
        SessionError: If either identifier is missing or the file is unreadable.
    """
    emp_id = emp_id or config.SESSION_EMP_ID
    branch_id = branch_id or config.SESSION_BRANCH_ID

    if not emp_id or not branch_id:
        stored = _read_session_file(session_file or config.SESSION_FILE)
        emp_id = emp_id or stored.get("emp_id")
        branch_id = branch_id or stored.get("branch_id")

    if not emp_id:
        raise SessionError("No logged-in teacher found (emp_id missing).")
    if not branch_id:
        raise SessionError("No active branch found (branch_id missing).")

    logger.info(f"Session loaded for teacher {emp_id} on branch {branch_id}.")
    return SessionContext(emp_id=str(emp_id), branch_id=str(branch_id))
