import click


class TkError(click.ClickException):
    """Base error for the tk workflow, click prints it and exits with status 1."""


class ValidationError(TkError):
    """Raised when the command input is missing or malformed."""


class CommandError(TkError):
    """Raised when an external command fails, is missing, or runs past the deadline."""

    def __init__(self, message: str, cmd: list | None = None, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.cmd = cmd or []
        self.returncode = returncode
        self.stderr = stderr


class ProvisionError(TkError):
    """Raised when credentials could not be generated or stored."""


class ApplyError(TkError):
    """Raised when the source could not be applied or did not become ready."""
