import logging
import os
from pathlib import Path

from wysiwyg.errors import ValidationError

logger = logging.getLogger(__name__)


def validate_new_project_path(path: Path) -> None:
    """Check that a new project can be created in `path`.

    Checks run in order and stop at the first failure: the path exists, is a
    directory, is writable, and is empty.

    Raises:
        ValidationError: With a message describing the first failed check
    """
    path = Path(path)
    try:
        path.stat()
    except OSError as e:
        raise ValidationError(
            f"Project path does not exist or you lack the permissions to access it ({e})",
            path,
        ) from e

    if not path.is_dir():
        raise ValidationError("Project path is not a directory", path)

    if not os.access(path, os.W_OK):
        raise ValidationError("You do not have write access to the project path", path)

    try:
        has_entries = any(path.iterdir())
    except OSError as e:
        raise ValidationError(
            f"Project path must be empty, but its content could not be read ({e})",
            path,
        ) from e
    if has_entries:
        raise ValidationError("Project path must be empty", path)

    logger.debug(f"{path} is a valid new project path")
