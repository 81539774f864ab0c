"""Run a tool binary on the host with inherited standard streams."""

import logging
import subprocess
from pathlib import Path
from typing import Sequence, Union

from localci.errors import LaunchFailed

logger = logging.getLogger(__name__)


def run_direct(
    executable: str,
    args: Sequence[str],
    cwd: Union[str, Path],
) -> int:
    """Run ``executable`` with ``args`` in ``cwd`` and return its exit code.

    stdin, stdout and stderr are the host's own, so prompts, colors and
    progress output behave as if the tool was started from the shell.
    """
    command = [executable, *args]
    logger.info(f"Running {command} in {cwd}")

    try:
        completed = subprocess.run(command, cwd=str(cwd))
    except OSError as e:
        raise LaunchFailed(executable, e) from e

    logger.info(f"{executable} exited with {completed.returncode}")
    return completed.returncode
