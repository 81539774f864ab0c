"""Locate the repository root of the current checkout."""

import logging
from pathlib import Path
from typing import Optional, Union

from localci.errors import RootNotFound

logger = logging.getLogger(__name__)

GIT_MARKER = ".git"


def find_project_root(
    start: Optional[Union[str, Path]] = None,
    marker: str = GIT_MARKER,
) -> Path:
    """Walk up from ``start`` until a directory containing ``marker`` is found.

    ``.git`` is a file in worktrees and submodules, so any entry counts.
    The filesystem root is never treated as a project root.
    """
    origin = Path(start) if start is not None else Path.cwd()
    current = origin.resolve()

    while current != current.parent:
        if (current / marker).exists():
            logger.debug(f"Project root: {current}")
            return current
        current = current.parent

    raise RootNotFound(origin, marker)
