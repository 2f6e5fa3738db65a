"""Domain exception hierarchy for FabricUI."""

from typing import List, Optional


class FabricUIError(RuntimeError):
    """Base class for all FabricUI errors."""


class ConfigValidationError(FabricUIError):
    """Raised when configuration cannot be validated."""


class CatalogUnavailable(FabricUIError):
    """Raised when the pattern directory or model list cannot be read."""


class InvalidSelection(FabricUIError):
    """Raised when a pattern, model or URL cannot be passed to the tool."""


class InvocationFailure(FabricUIError):
    """Raised when the external process exits non-zero or cannot be spawned."""

    def __init__(
        self,
        message: str,
        details: str = "",
        returncode: Optional[int] = None,
        argv: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        self.returncode = returncode
        self.argv = list(argv or [])

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class InvocationTimeout(FabricUIError):
    """Raised when the external process outlives the configured timeout."""

    def __init__(self, timeout: float, argv: Optional[List[str]] = None):
        super().__init__(f"Command timed out after {timeout:g} seconds")
        self.timeout = timeout
        self.argv = list(argv or [])


class PersistenceCorrupt(FabricUIError):
    """Raised when the persisted session record cannot be parsed."""


class MalformedResponse(FabricUIError):
    """Raised when a request or response cannot be interpreted."""


class UploadRejected(FabricUIError):
    """Raised when an uploaded file is too large or is not text."""


class SubmissionRejected(FabricUIError):
    """Raised when a submission arrives while another one is in flight."""
