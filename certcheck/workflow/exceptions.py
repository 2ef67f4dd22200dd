class WorkflowError(Exception):
    """Base exception for user-facing workflow problems."""


class InputValidationError(WorkflowError):
    """Raised when user input cannot start a transition (blank field, no file)."""


class UploadRejectedError(InputValidationError):
    """Raised when none of the offered files is a Word (.docx) document."""
