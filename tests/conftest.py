"""Shared fixtures."""

import os
import stat
from unittest.mock import MagicMock

import pytest


@pytest.fixture
def repo(tmp_path):
    """A checkout with a .git directory and a nested source tree."""
    root = tmp_path / "project"
    (root / ".git").mkdir(parents=True)
    (root / "src" / "main").mkdir(parents=True)
    return root


@pytest.fixture
def make_tool():
    """Create an executable (or not) file standing in for a tool binary."""

    def _make(directory, name, executable=True):
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text("#!/bin/sh\nexit 0\n")
        mode = stat.S_IRUSR | stat.S_IWUSR
        if executable:
            mode |= stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH
        os.chmod(path, mode)
        return path

    return _make


@pytest.fixture
def docker_client():
    """A docker client double whose container exits with status 0."""
    client = MagicMock(name="DockerClient")
    container = MagicMock(name="Container")
    container.name = "localci-act-runner"
    container.short_id = "abc123"
    container.attach.return_value = iter([b"hello ", b"world\n"])
    container.wait.return_value = {"StatusCode": 0, "Error": None}
    client.containers.create.return_value = container
    return client
