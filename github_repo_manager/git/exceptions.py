"""Custom exceptions for the git command wrapper."""


class GitCommandError(Exception):
    """Raised when a git command exits non-zero."""

    def __init__(self, command: list[str], returncode: int, stderr: str) -> None:
        """Initializes the exception with the (redacted) command, exit code and stderr."""
        detail = stderr.strip() or "no output"
        super().__init__(f"git {' '.join(command)} failed with exit code {returncode}: {detail}")
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class GitExecutableNotFoundError(Exception):
    """Raised when the git executable is not available on PATH."""

    pass
