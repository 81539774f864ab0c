"""Decide between running a CI tool from PATH or inside a container."""

import logging
from typing import Callable, Optional, Protocol

from localci.container_runner import ContainerRunner
from localci.flavors import Flavor
from localci.models import ContainerSpec, ExecutionPath, RunOutcome, RunRequest
from localci.process import run_direct
from localci.project import find_project_root
from localci.toolpath import resolve_tool

logger = logging.getLogger(__name__)


class SupportsContainerRun(Protocol):
    def run(self, spec: ContainerSpec) -> int: ...


class Orchestrator:
    """Runs one flavor's tool against the current repository.

    The tool from PATH is preferred. When it is missing, or when the request
    forces it, the same command runs in the flavor's runner container.
    Missing project roots and direct launch failures are not handled here.
    """

    def __init__(
        self,
        flavor: Flavor,
        container_runner: Optional[SupportsContainerRun] = None,
        find_root: Callable = find_project_root,
        resolve: Callable = resolve_tool,
        direct_runner: Callable = run_direct,
    ):
        self.flavor = flavor
        self.container_runner = container_runner or ContainerRunner()
        self.find_root = find_root
        self.resolve = resolve
        self.direct_runner = direct_runner

    def run(self, request: RunRequest) -> int:
        return self.execute(request).exit_code

    def execute(self, request: RunRequest) -> RunOutcome:
        project_root = self.find_root(request.project_root)
        tool_args = self.flavor.build_args(request.args)

        if not request.force_container:
            tool = self.resolve(request.tool)
            if tool.found:
                print(f"Using {request.tool} from PATH: {tool.path}")
                exit_code = self.direct_runner(tool.path, tool_args, project_root)
                return RunOutcome(
                    exit_code=exit_code,
                    path=ExecutionPath.DIRECT,
                    command=(tool.path, *tool_args),
                )
            logger.info(f"{request.tool} not on PATH, falling back to Docker")

        print(f"Using {request.tool} via Docker...")
        if self.flavor.container_notice:
            print(self.flavor.container_notice)

        spec = ContainerSpec(
            name=self.flavor.container_name,
            image=self.flavor.image,
            command=(request.tool, *tool_args),
            project_root=project_root,
        )
        exit_code = self.container_runner.run(spec)
        return RunOutcome(
            exit_code=exit_code,
            path=ExecutionPath.CONTAINER,
            command=spec.command,
        )
