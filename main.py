"""Main execution script for subject mark entry."""

import asyncio
import functools
import sys
import os
from typing import Optional, Set

from dotenv import load_dotenv

# Environment must be loaded before config reads it
load_dotenv()

# Ensure the project root directory is in the Python path
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import config
from utils.logger import setup_logger
from utils.error_handler import APIError, ConfigError, SessionError, UserCancelledError
from api_clients import build_http_client
from session import load_session
from services.school_api import SchoolApiService
from core.mark_entry import MarkEntryEngine, MarkEntrySession
from core.models import AssignedSubject, ExamDescriptor
import ui.cli as cli

# Initialize logger as early as possible after config is loaded
logger = setup_logger()

def _report_commit(session: MarkEntrySession, edit: cli.CellEdit, pending: Set[asyncio.Task], task: asyncio.Task):
    pending.discard(task)
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error(f"Commit of {edit} crashed: {error}", exc_info=error)
        cli.display_error(f"Could not save: {error}")
        return
    cli.display_commit_result(session, edit, task.result())

async def _ask(func, *args):
    """Runs a blocking prompt on a worker thread so saves keep progressing."""
    return await asyncio.to_thread(func, *args)

async def _choose_subject(engine: MarkEntryEngine) -> AssignedSubject:
    subject = await _ask(cli.prompt_for_selection, engine.subjects, cli.format_subject_for_display, "Select a subject:")
    if subject is None:
        raise UserCancelledError("No subjects are assigned to you.")
    return subject

async def _choose_exam(engine: MarkEntryEngine) -> ExamDescriptor:
    exam = await _ask(cli.prompt_for_selection, engine.exams, cli.format_exam_for_display, "Select an exam:")
    if exam is None:
        raise UserCancelledError("No exams are defined for this branch.")
    return exam

async def edit_loop(engine: MarkEntryEngine, subject: AssignedSubject, exam: ExamDescriptor):
    """Reads commands until the user quits. Each save runs as its own task."""
    pending: Set[asyncio.Task] = set()
    current: Optional[MarkEntrySession] = await engine.select(subject, exam)

    while True:
        if current is not None:
            cli.render_grid(current)
        command = (await _ask(cli.prompt_command)).strip()
        lowered = command.lower()

        if not command:
            continue
        if lowered == "q":
            break
        if lowered in ("e", "s", "r"):
            try:
                if lowered == "e":
                    exam = await _choose_exam(engine)
                elif lowered == "s":
                    subject = await _choose_subject(engine)
            except UserCancelledError:
                continue
            # The previous session is dropped; its outstanding saves finish on their own
            current = await engine.select(subject, exam)
            continue
        if current is None:
            continue

        try:
            edit = cli.parse_cell_edit(command, current)
        except ValueError as e:
            cli.display_warning(str(e))
            continue
        if current.controller.is_pending(edit.student_id, edit.component):
            cli.display_warning("That cell is still saving. Try again in a moment.")
            continue

        task = asyncio.create_task(current.commit(edit.student_id, edit.component, edit.value))
        pending.add(task)
        task.add_done_callback(functools.partial(_report_commit, current, edit, pending))

    if pending:
        cli.display_warning(f"Waiting for {len(pending)} outstanding save(s)...")
        await asyncio.gather(*pending, return_exceptions=True)

async def run_workflow():
    """Loads the session and catalog, then runs the interactive grid."""
    cli.display_step(1, "Loading session...")
    session_context = load_session()
    cli.display_success(f"Logged in as teacher {session_context.emp_id} (branch {session_context.branch_id}).")

    async with build_http_client() as client:
        api = SchoolApiService(client)
        engine = MarkEntryEngine(api, session_context, notify=cli.display_error)

        cli.display_step(2, "Fetching exams and assigned subjects...")
        try:
            await engine.bootstrap()
        except APIError as e:
            logger.error(f"Catalog load failed: {e}", exc_info=config.DEBUG)
            cli.display_error("Failed to load exam list")
            return
        if not engine.can_edit:
            cli.display_warning("You do not have permission to edit marks. View only mode.")
        if not engine.subjects:
            cli.display_error("No subjects are assigned to you. Exiting.")
            return
        if not engine.exams:
            cli.display_error("No exams found for this branch. Exiting.")
            return

        cli.display_step(3, "Select subject and exam")
        subject = await _choose_subject(engine)
        exam = await _choose_exam(engine)
        logger.info(f"User selected {subject} / {exam}")

        cli.display_step(4, "Enter marks")
        await edit_loop(engine, subject, exam)

def main():
    """Entry point of the mark-entry console."""
    logger.info("Starting mark entry.")
    cli.display_welcome()
    try:
        asyncio.run(run_workflow())
    except (SessionError, ConfigError) as e:
        logger.critical(f"Setup Error: {e}", exc_info=config.DEBUG)
        cli.display_error(f"Setup Error: {e}")
    except APIError as e:
        logger.error(f"API Error: {e}", exc_info=config.DEBUG)
        cli.display_error(f"API Error ({e.task or 'Unknown'}): {e}")
    except UserCancelledError as e:
        logger.info(f"Operation cancelled by user: {e}")
        cli.display_warning(f"Operation cancelled: {e}")
    except KeyboardInterrupt:
        logger.info("Operation interrupted by user (Ctrl+C).")
        cli.display_warning("Operation interrupted.")
    except Exception as e:
        # Catch-all for unexpected errors
        logger.critical(f"An unexpected error occurred: {e}", exc_info=True)
        cli.display_error(f"An unexpected error occurred: {e}. Check logs for details.")
    finally:
        cli.display_farewell()

if __name__ == "__main__":
    main()
