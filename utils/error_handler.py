"""Custom exception classes for the application."""

class MarkEntryError(Exception):
    """Base exception for all application-specific errors."""
    pass

class ConfigError(MarkEntryError):
    """Error related to configuration loading or values."""
    pass

class SessionError(MarkEntryError):
    """The logged-in teacher or active branch could not be determined."""
    pass

class APIError(MarkEntryError):
    """Error talking to the school's task-dispatch endpoint."""
    def __init__(self, message: str, status_code: int | None = None, task: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.task = task

    def __str__(self) -> str:
        base = super().__str__()
        details = []
        if self.task:
            details.append(f"Task: {self.task}")
        if self.status_code:
            details.append(f"Status Code: {self.status_code}")
        if details:
            return f"{base} ({', '.join(details)})"
        return base

class RosterLoadFailed(APIError):
    """The student list for a class/section could not be loaded."""
    pass

class MarkFetchFailed(APIError):
    """Existing marks could not be fetched. Treated as 'nothing graded yet'."""
    pass

class SaveFailed(APIError):
    """A single mark could not be persisted."""
    pass

class UserCancelledError(MarkEntryError):
    """Error raised when the user cancels an operation."""
    pass
