"""Tests for the command line surface."""

import pytest

from localci import cli
from localci.cli import build_parser, main
from localci.errors import EXIT_SOFTWARE, EXIT_USAGE, RootNotFound


class FakeOrchestrator:
    """Records what the CLI asked for instead of running anything."""

    instances = []

    def __init__(self, flavor, container_runner=None):
        self.flavor = flavor
        self.container_runner = container_runner
        self.requests = []
        self.result = 0
        FakeOrchestrator.instances.append(self)

    def run(self, request):
        self.requests.append(request)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


@pytest.fixture
def fake_orchestrator(monkeypatch):
    FakeOrchestrator.instances = []
    monkeypatch.setattr(cli, "Orchestrator", FakeOrchestrator)
    return FakeOrchestrator


class TestParser:
    """Pass-through arguments keep their order."""

    def test_act_flags(self):
        args, extra = build_parser().parse_known_args(
            ["github", "run-workflow", "-l", "-W", "ci.yml"]
        )
        assert args.flavor == "github"
        assert not args.use_docker
        assert extra == ["-l", "-W", "ci.yml"]

    def test_use_docker_after_tool_args(self):
        args, extra = build_parser().parse_known_args(["github", "run-workflow", "-n", "--use-docker"])
        assert args.use_docker
        assert extra == ["-n"]

    def test_gitlab_job_names(self):
        args, extra = build_parser().parse_known_args(["gitlab", "run-pipeline", "build", "test"])
        assert args.flavor == "gitlab"
        assert extra == ["build", "test"]

    def test_no_args(self):
        args, extra = build_parser().parse_known_args(["gitlab", "run-pipeline"])
        assert extra == []

    def test_missing_subcommand(self):
        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_known_args(["github"])
        assert excinfo.value.code == EXIT_USAGE

    def test_help(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_known_args(["github", "run-workflow", "--help"])
        assert excinfo.value.code == 0
        assert "--use-docker" in capsys.readouterr().out


class TestMain:
    def test_github_request(self, fake_orchestrator, monkeypatch):
        monkeypatch.setenv("LOCALCI_ACT_IMAGE", "mirror/act:2")
        assert main(["github", "run-workflow", "-l"]) == 0

        orchestrator = fake_orchestrator.instances[0]
        assert orchestrator.flavor.tool == "act"
        assert orchestrator.flavor.image == "mirror/act:2"
        (request,) = orchestrator.requests
        assert request.tool == "act"
        assert request.args == ("-l",)
        assert not request.force_container

    def test_gitlab_forced(self, fake_orchestrator):
        main(["gitlab", "run-pipeline", "--use-docker", "build"])
        (request,) = fake_orchestrator.instances[0].requests
        assert request.tool == "gitlab-ci-local"
        assert request.args == ("build",)
        assert request.force_container

    def test_separator_is_dropped(self, fake_orchestrator):
        main(["github", "run-workflow", "--", "-j", "test"])
        (request,) = fake_orchestrator.instances[0].requests
        assert request.args == ("-j", "test")

    def test_tool_exit_code(self, fake_orchestrator, monkeypatch):
        monkeypatch.setattr(FakeOrchestrator, "run", lambda self, request: 9)
        assert main(["github", "run-workflow"]) == 9

    def test_orchestration_error(self, fake_orchestrator, monkeypatch, capsys):
        def fail(self, request):
            raise RootNotFound("/tmp/elsewhere")

        monkeypatch.setattr(FakeOrchestrator, "run", fail)
        assert main(["github", "run-workflow"]) == EXIT_SOFTWARE
        assert "Could not find project root" in capsys.readouterr().err

    def test_separator_after_tool_args(self, fake_orchestrator):
        """A "--" between tool arguments is consumed, not passed on."""
        main(["github", "run-workflow", "-n", "--", "-j", "test"])
        (request,) = fake_orchestrator.instances[0].requests
        assert request.args == ("-n", "-j", "test")

    def test_invalid_setting(self, fake_orchestrator, monkeypatch, capsys):
        """A bad environment value is a usage error, not a traceback."""
        monkeypatch.setenv("LOCALCI_DOCKER_TIMEOUT", "abc")
        assert main(["github", "run-workflow"]) == EXIT_USAGE
        assert "Invalid LOCALCI_DOCKER_TIMEOUT='abc'" in capsys.readouterr().err
        assert fake_orchestrator.instances == []
