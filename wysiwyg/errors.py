"""Error kinds raised by the project core.

Every failure is surfaced to the caller once, as one of these, with a message
suitable for display by the shell.
"""

from pathlib import Path
from typing import Optional


class DesignerError(Exception):
    """Base exception for all project core errors."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class ValidationError(DesignerError):
    """A precondition on a user supplied path or on the app state failed."""

    pass


class IoError(DesignerError):
    """Filesystem read, write or metadata failure."""

    pass


class ParseError(DesignerError):
    """Manifest content could not be parsed."""

    pass


class ToolInvocationError(DesignerError):
    """External build tool missing, exited non-zero or was killed."""

    pass


class NotFoundError(DesignerError):
    """An expected marker is absent from the manifest text."""

    pass
