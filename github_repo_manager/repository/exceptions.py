"""Custom exceptions for repository clone operations."""


class DestinationExistsError(Exception):
    """Raised when the clone destination already exists and overwriting was not requested."""

    def __init__(self, destination: str) -> None:
        """Initializes the exception with the existing destination."""
        super().__init__(f"Directory '{destination}' already exists. Use --overwrite to replace it.")
        self.destination = destination


class CloneError(Exception):
    """Raised when git fails to clone a repository."""

    pass
