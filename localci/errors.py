"""Errors raised while orchestrating a run.

Every error carries the process exit code the CLI should return for it.
"""

# EXIT_USAGE is what argparse exits with; EXIT_SOFTWARE is EX_SOFTWARE from
# sysexits.h (os.EX_* is missing on Windows)
EXIT_USAGE = 2
EXIT_SOFTWARE = 70


class LocalCIError(Exception):
    """Base class for orchestration failures."""

    exit_code = EXIT_SOFTWARE


class RootNotFound(LocalCIError):
    """No repository root above the starting directory."""

    def __init__(self, start, marker: str = ".git"):
        self.start = start
        self.marker = marker
        super().__init__(
            f"Could not find project root ({marker} not found above {start})"
        )


class EngineUnavailable(LocalCIError):
    """The Docker engine could not be reached."""

    def __init__(self, reason):
        self.reason = reason
        super().__init__(
            f"Cannot connect to the Docker engine, is it installed and running? ({reason})"
        )


class LaunchFailed(LocalCIError):
    """A tool binary could not be started."""

    def __init__(self, executable: str, reason):
        self.executable = executable
        self.reason = reason
        super().__init__(f"Failed to launch {executable}: {reason}")


class InvalidSetting(LocalCIError):
    """An environment setting has a value that cannot be used."""

    exit_code = EXIT_USAGE

    def __init__(self, variable: str, value: str, expected: str):
        self.variable = variable
        self.value = value
        super().__init__(f"Invalid {variable}={value!r}: expected {expected}")
