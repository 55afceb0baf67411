"""Command Line Interface (CLI) for user interaction."""

from dataclasses import dataclass
from typing import Callable, List, Optional, TypeVar

from rich.console import Console
from rich.table import Table
from rich.prompt import Prompt, IntPrompt
from rich.panel import Panel
from rich.text import Text

import config
from core.mark_entry import MarkEntrySession
from core.models import AssignedSubject, CellSaveStatus, CommitOutcome, CommitResult, ExamDescriptor
from utils.logger import get_logger
from utils.error_handler import UserCancelledError

logger = get_logger()
console = Console()

T = TypeVar('T') # Generic type for selection items

COMMAND_HELP = (
    "[dim]<roll> <component> <value>[/dim] save a mark ([dim]-[/dim] clears)  "
    "[dim]e[/dim] exam  [dim]s[/dim] subject  [dim]r[/dim] reload  [dim]q[/dim] quit"
)

def display_welcome():
    """Displays a welcome message."""
    console.print(Panel(
        "[bold green]Subject Mark Entry[/bold green]",
        title="Welcome",
        border_style="blue"
    ))
    console.print("Enter and save exam marks for the subjects assigned to you.")
    console.rule()

def display_farewell():
    """Displays a farewell message."""
    console.rule()
    console.print("[bold cyan]Mark entry closed.[/bold cyan]")

def display_error(message: str):
    """Displays an error message in a standard format."""
    console.print(Panel(f"[bold red]Error:[/bold red] {message}", title="Error", border_style="red"))

def display_warning(message: str):
    """Displays a warning message."""
    console.print(f"[yellow]Warning:[/yellow] {message}")

def display_success(message: str):
    """Displays a success message."""
    console.print(f"[green]Success:[/green] {message}")

def display_step(step_number: int, description: str):
    """Displays the current step in the process."""
    console.print(f"\n[bold blue]Step {step_number}:[/bold blue] {description}")
    console.rule()

def prompt_for_selection(items: List[T], display_func: Callable[[T], str], prompt_message: str) -> Optional[T]:
    """Prompts the user to select an item from a list.

    Args:
        items: The list of items to choose from.
        display_func: A function that takes an item and returns a string representation for display.
        prompt_message: The message to display before the list.

    Returns:
        The selected item, or None if no items are available.

    Raises:
        UserCancelledError: If the user explicitly cancels (e.g., by entering 0).
    """
    if not items:
        console.print("[yellow]No items available for selection.[/yellow]")
        return None

    console.print(prompt_message)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", width=4)
    table.add_column("Item Details", style="cyan")

    choices = []
    for i, item in enumerate(items):
        table.add_row(str(i + 1), display_func(item))
        choices.append(str(i + 1))

    console.print(table)
    console.print("Enter 0 to cancel.")

    choice = IntPrompt.ask("Select item number", choices=choices + ["0"], show_choices=False)
    if choice == 0:
        raise UserCancelledError("User cancelled selection.")
    return items[choice - 1]

def prompt_command() -> str:
    """Reads one grid command. Blocking; run it off the event loop."""
    return Prompt.ask("[bold]mark[/bold]", default="", show_default=False)

# --- Grid rendering ---

_STATUS_STYLE = {
    CellSaveStatus.PENDING: "yellow",
    CellSaveStatus.ERROR: "bold red",
}

def render_grid(session: MarkEntrySession):
    """Prints the mark grid of a session with per-cell save markers."""
    schema = session.schema
    subject = session.subject
    title = f"{subject.subject_name} | {subject.class_name}-{subject.section_name} | {session.exam.display_name} ({session.term})"

    if session.roster_error:
        display_warning(f"No students to show: {session.roster_error}")
        return
    if not schema.components:
        display_warning(f"No mark columns are defined for '{session.exam.display_name}' in class {subject.class_name}.")

    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Roll", style="dim", width=5)
    table.add_column("Adm. No", style="dim")
    table.add_column("Name", style="cyan")
    for component in schema.components:
        table.add_column(f"{schema.label_for(component)}\n({schema.max_score_for(component):g})\n[dim]{component}[/dim]", justify="right")

    rows = session.grid.rows()
    for student in session.grid.students:
        cells = []
        for component in schema.components:
            value = rows[student.id][component] or "-"
            status = session.status(student.id, component)
            if status is CellSaveStatus.PENDING:
                value = f"{value} …"
            elif status is CellSaveStatus.ERROR:
                value = f"{value} !"
            cells.append(Text(value, style=_STATUS_STYLE.get(status, "")))
        table.add_row(student.roll_number, student.admission_number, student.name, *cells)

    console.print(table)
    if not session.controller.can_edit:
        console.print("[yellow]View only mode.[/yellow]")
    console.print(COMMAND_HELP)

# --- Command parsing ---

@dataclass(frozen=True)
class CellEdit:
    student_id: str
    component: str
    value: str

def parse_cell_edit(command: str, session: MarkEntrySession) -> CellEdit:
    """Parses '<roll> <component> <value>'. Component may be the key or its label.

    Raises:
        ValueError: With a user-facing message when the command is not usable.
    """
    parts = command.split()
    if len(parts) < 3:
        raise ValueError("Use: <roll> <component> <value>")
    roll, value = parts[0], parts[-1]
    wanted = " ".join(parts[1:-1]).lower()

    student = session.grid.find_by_roll(roll)
    if student is None:
        raise ValueError(f"No student with roll number {roll}")

    schema = session.schema
    for component in schema.components:
        if wanted in (component.lower(), schema.label_for(component).lower()):
            break
    else:
        raise ValueError(f"Unknown component '{wanted}'. Columns: {', '.join(schema.components) or 'none'}")

    return CellEdit(student.id, component, "" if value == "-" else value)

def display_commit_result(session: MarkEntrySession, edit: CellEdit, result: CommitResult):
    """Reports outcomes that the controller does not already raise as notices."""
    student = session.grid.student(edit.student_id)
    label = session.schema.label_for(edit.component)
    if result.outcome is CommitOutcome.SAVED:
        display_success(f"Saved {label} for {student.name}.")
    elif result.outcome in (CommitOutcome.BUSY, CommitOutcome.READ_ONLY):
        display_warning(result.message or result.outcome.value)
    elif result.outcome is CommitOutcome.UNCHANGED and config.DEBUG:
        console.print(f"[dim]{label} for {student.name} unchanged.[/dim]")

# --- Display functions for specific items ---

def format_subject_for_display(subject: AssignedSubject) -> str:
    """Formats an assigned subject for display in selection prompts."""
    return f"{subject.subject_name} (Class {subject.class_name}-{subject.section_name})"

def format_exam_for_display(exam: ExamDescriptor) -> str:
    """Formats an exam for display in selection prompts."""
    return exam.display_name
