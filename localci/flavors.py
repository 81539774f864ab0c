"""Per-CI-flavor settings: tool name, argument convention and runner image."""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

from localci.models import RunRequest

ACT = "act"
GITLAB_CI_LOCAL = "gitlab-ci-local"

DEFAULT_ACT_IMAGE = "localci-act:latest"
DEFAULT_GITLAB_IMAGE = "localci-gitlab-ci-local:latest"

# Fixed so that a rerun can find and replace the previous container
ACT_CONTAINER_NAME = "localci-act-runner"
GITLAB_CONTAINER_NAME = "localci-gitlab-ci-local-runner"

ACT_DEFAULT_ARGS = ("-j", "build")


def act_args(args: Sequence[str]) -> list[str]:
    """Pass ``args`` to act verbatim, or run the ``build`` job when empty."""
    if not args:
        return list(ACT_DEFAULT_ARGS)
    return list(args)


def gitlab_job_args(job_names: Sequence[str]) -> list[str]:
    """Turn job names into ``--job NAME`` pairs. No names runs every job."""
    command = []
    for job_name in job_names:
        command.extend(["--job", job_name])
    return command


@dataclass(frozen=True)
class Flavor:
    """Describes one CI flavor the orchestrator can run."""
    name: str
    tool: str
    container_name: str
    image: str
    build_args: Callable[[Sequence[str]], list[str]]
    container_notice: Optional[str] = None  # Extra line printed on the Docker path

    def request(
        self,
        args: Sequence[str] = (),
        force_container: bool = False,
        project_root: Optional[Path] = None,
    ) -> RunRequest:
        return RunRequest(
            tool=self.tool,
            args=tuple(args),
            project_root=project_root,
            force_container=force_container,
        )


def github_flavor(image: str = DEFAULT_ACT_IMAGE) -> Flavor:
    return Flavor(
        name="github",
        tool=ACT,
        container_name=ACT_CONTAINER_NAME,
        image=image,
        build_args=act_args,
    )


def gitlab_flavor(image: str = DEFAULT_GITLAB_IMAGE) -> Flavor:
    return Flavor(
        name="gitlab",
        tool=GITLAB_CI_LOCAL,
        container_name=GITLAB_CONTAINER_NAME,
        image=image,
        build_args=gitlab_job_args,
        container_notice="Running gitlab-ci-local in Docker container...",
    )
