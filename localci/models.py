"""Internal models for the CI runner."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

DOCKER_SOCKET = "/var/run/docker.sock"


class ToolSource(str, Enum):
    """Where a companion tool was found."""
    PATH = "path"
    NONE = "none"


class ExecutionPath(str, Enum):
    """How a run was executed."""
    DIRECT = "direct"  # Tool binary from PATH
    CONTAINER = "container"  # Tool inside the runner image


@dataclass(frozen=True)
class RunRequest:
    """A single run, built from CLI input."""
    tool: str
    args: tuple[str, ...] = ()
    project_root: Optional[Path] = None  # None: discover from cwd
    force_container: bool = False


@dataclass(frozen=True)
class ResolvedTool:
    """Result of looking a tool up on PATH."""
    name: str
    path: Optional[str] = None
    source: ToolSource = ToolSource.NONE

    @property
    def found(self) -> bool:
        return self.source is ToolSource.PATH


@dataclass(frozen=True)
class ContainerSpec:
    """Everything needed to create the runner container.

    The host Docker socket is mounted so the tool can start sibling
    containers; that mount only works with ``privileged`` set.
    """
    name: str
    image: str
    command: tuple[str, ...]
    project_root: Path
    working_dir: str = "/workspace"
    project_mount: str = "/input"
    socket_path: str = DOCKER_SOCKET
    host_socket_path: str = DOCKER_SOCKET
    tmpfs: dict[str, str] = field(default_factory=lambda: {"/workspace": "rw"})
    privileged: bool = True
    auto_remove: bool = True
    userns_mode: str = "host"

    def volumes(self) -> dict[str, dict[str, str]]:
        """Bind mounts in docker-py ``volumes=`` form."""
        return {
            self.host_socket_path: {"bind": self.socket_path, "mode": "rw"},
            str(self.project_root): {"bind": self.project_mount, "mode": "rw"},
        }


@dataclass
class RunOutcome:
    """Result of one orchestrated run."""
    exit_code: int
    path: ExecutionPath
    command: tuple[str, ...] = ()
