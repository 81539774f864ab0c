"""Command line entry point.

Usage:
    localci github run-workflow [--use-docker] [ACT_ARGS ...]
    localci gitlab run-pipeline [--use-docker] [JOB_NAME ...]

Arguments the runner does not know are handed to the tool unchanged and in
order, so ``localci github run-workflow -l`` runs ``act -l``.
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from localci import __version__
from localci.config import Settings
from localci.container_runner import ContainerRunner
from localci.errors import InvalidSetting, LocalCIError
from localci.flavors import Flavor, github_flavor, gitlab_flavor
from localci.orchestrator import Orchestrator

logger = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130


def _add_run_options(parser: argparse.ArgumentParser, tool: str) -> None:
    parser.add_argument(
        "--use-docker",
        action="store_true",
        help=f"Force using Docker even if {tool} is available in PATH.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="localci", description="Run CI pipelines locally.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ci = parser.add_subparsers(dest="ci", metavar="{github,gitlab}")
    ci.required = True

    github = ci.add_parser("github", help="GitHub Actions workflows")
    github_commands = github.add_subparsers(dest="command", metavar="{run-workflow}")
    github_commands.required = True
    run_workflow = github_commands.add_parser(
        "run-workflow",
        help="Run GitHub Action workflow locally using act.",
        description="Run GitHub Action workflow locally using act.",
        usage="%(prog)s [-h] [--use-docker] [ACT_ARGS ...]",
        epilog="ACT_ARGS are passed to act (e.g., -l, -n, -W workflow.yml). "
        "Without ACT_ARGS the build job runs (-j build).",
        allow_abbrev=False,
    )
    _add_run_options(run_workflow, "act")
    run_workflow.set_defaults(flavor="github")

    gitlab = ci.add_parser("gitlab", help="GitLab CI pipelines")
    gitlab_commands = gitlab.add_subparsers(dest="command", metavar="{run-pipeline}")
    gitlab_commands.required = True
    run_pipeline = gitlab_commands.add_parser(
        "run-pipeline",
        help="Run GitLab CI pipeline locally using gitlab-ci-local.",
        description="Run GitLab CI pipeline locally using gitlab-ci-local.",
        usage="%(prog)s [-h] [--use-docker] [JOB_NAME ...]",
        epilog="JOB_NAME selects a job to run (default: runs all jobs).",
        allow_abbrev=False,
    )
    _add_run_options(run_pipeline, "gitlab-ci-local")
    run_pipeline.set_defaults(flavor="gitlab")

    return parser


def _flavor(name: str, settings: Settings) -> Flavor:
    if name == "github":
        return github_flavor(settings.act_image)
    return gitlab_flavor(settings.gitlab_image)


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        settings = Settings.from_env()
    except InvalidSetting as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code

    logging.basicConfig(
        level=settings.log_level_number,
        format="%(levelname)s %(name)s: %(message)s",
    )

    args, passthrough = build_parser().parse_known_args(argv)
    # The first "--" only separates our options from the tool's
    if "--" in passthrough:
        passthrough.remove("--")

    flavor = _flavor(args.flavor, settings)
    orchestrator = Orchestrator(
        flavor,
        container_runner=ContainerRunner(timeout=settings.docker_timeout),
    )
    request = flavor.request(passthrough, force_container=args.use_docker)

    try:
        return orchestrator.run(request)
    except LocalCIError as e:
        logger.debug(f"{flavor.name} run failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
