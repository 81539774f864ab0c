"""Look up companion tool binaries on the executable search path."""

import logging
import os
import sys
from typing import Mapping, Optional

from localci.models import ResolvedTool, ToolSource

logger = logging.getLogger(__name__)


def _candidates(name: str) -> list[str]:
    if sys.platform == "win32":
        return [name, f"{name}.exe"]
    return [name]


def _is_executable(path: str) -> bool:
    return os.path.isfile(path) and os.access(path, os.X_OK)


def find_in_path(name: str, env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Return the absolute path of the first executable ``name`` on PATH.

    Directories are searched in PATH order, so the first installation wins.
    Returns None when PATH is unset or nothing matches.
    """
    environ = os.environ if env is None else env
    search_path = environ.get("PATH")
    if search_path is None:
        return None

    for directory in search_path.split(os.pathsep):
        if not directory:
            continue
        for candidate in _candidates(name):
            path = os.path.join(directory, candidate)
            if _is_executable(path):
                return os.path.abspath(path)
    return None


def resolve_tool(name: str, env: Optional[Mapping[str, str]] = None) -> ResolvedTool:
    """Resolve ``name`` on PATH, recording where it came from."""
    path = find_in_path(name, env)
    if path is None:
        logger.debug(f"{name} not found on PATH")
        return ResolvedTool(name=name)
    logger.debug(f"Resolved {name} to {path}")
    return ResolvedTool(name=name, path=path, source=ToolSource.PATH)
