"""
localci - Run GitHub Actions and GitLab CI pipelines locally.

Uses act or gitlab-ci-local from PATH when installed, otherwise runs them in
a throwaway Docker container with the project mounted.
"""

__version__ = "0.1.0"

from localci.container_runner import ContainerRunner
from localci.errors import EngineUnavailable, LaunchFailed, LocalCIError, RootNotFound
from localci.flavors import Flavor, github_flavor, gitlab_flavor
from localci.models import ContainerSpec, ExecutionPath, ResolvedTool, RunOutcome, RunRequest
from localci.orchestrator import Orchestrator
from localci.process import run_direct
from localci.project import find_project_root
from localci.toolpath import find_in_path, resolve_tool

__all__ = [
    "Orchestrator",
    "ContainerRunner",
    "ContainerSpec",
    "RunRequest",
    "RunOutcome",
    "ResolvedTool",
    "ExecutionPath",
    "Flavor",
    "github_flavor",
    "gitlab_flavor",
    "find_project_root",
    "find_in_path",
    "resolve_tool",
    "run_direct",
    "LocalCIError",
    "RootNotFound",
    "EngineUnavailable",
    "LaunchFailed",
]
