"""Run a CI tool inside a throwaway Docker container.

The container gets a fixed name per CI flavor, so a container left over from
a crashed run is force-removed before a new one is created. Containers are
created with auto-remove, which makes the name reusable on the next run.
"""

import logging
import os
import sys
import threading
from contextlib import contextmanager, nullcontext
from typing import BinaryIO, Callable, Iterable, Iterator, Optional, TextIO

import docker
import requests
from docker.errors import APIError, DockerException, NotFound
from docker.models.containers import Container

from localci.errors import EXIT_SOFTWARE, EngineUnavailable
from localci.models import ContainerSpec

if sys.platform != "win32":
    import termios
    import tty
else:
    termios = tty = None

logger = logging.getLogger(__name__)

# Seconds to wait for the output pump after the container has exited
PUMP_JOIN_TIMEOUT = 5.0
STDIN_CHUNK_SIZE = 4096


def remove_existing_container(client: docker.DockerClient, name: str) -> None:
    """Force-remove the container called ``name`` if there is one.

    A missing container counts as success. Other API and transport errors
    are reported and creation is attempted anyway.
    """
    try:
        container = client.containers.get(name)
        container.remove(force=True)
        print(f"Removed existing container: {name}")
        logger.info(f"Removed stale container {name}")
    except NotFound:
        logger.debug(f"No existing container named {name}")
    except (APIError, requests.exceptions.RequestException) as e:
        logger.error(f"Failed to remove container {name}: {e}")
        print(f"Error removing container: {e}", file=sys.stderr)


@contextmanager
def raw_terminal(stream: TextIO) -> Iterator[None]:
    """Put the terminal behind ``stream`` in raw mode, restoring it on exit.

    Keystrokes then reach the container TTY unbuffered and are echoed once,
    by the container. No-op on Windows.
    """
    if termios is None:
        yield
        return

    fd = stream.fileno()
    saved = termios.tcgetattr(fd)
    tty.setraw(fd)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


class _ExitWaiter(threading.Thread):
    """Blocks on ``wait`` for the next exit of a container.

    Started before the container so a command that exits at once, and is
    auto-removed, still reports its status.
    """

    def __init__(self, container: Container):
        super().__init__(name=f"{container.name}-wait", daemon=True)
        self.container = container
        self.result: Optional[dict] = None
        self.error: Optional[BaseException] = None

    def run(self) -> None:
        try:
            self.result = self.container.wait(condition="next-exit")
        except Exception as e:
            self.error = e

    def status(self) -> dict:
        self.join()
        if self.error is not None:
            raise self.error
        return self.result


class ContainerRunner:
    """Runs a command in a privileged, auto-removing container.

    Args:
        client_factory: Returns a connected ``docker.DockerClient``.
            Defaults to ``docker.from_env``.
        stdout: Binary stream receiving container output. Defaults to the
            host's stdout at run time.
        stdin: Stream forwarded into the container when interactive.
            Defaults to the host's stdin at run time.
        interactive: Forward stdin into the container with the terminal in
            raw mode. Defaults to whether stdin is a terminal.
        timeout: Docker API request timeout in seconds, None for no timeout.
    """

    def __init__(
        self,
        client_factory: Optional[Callable[[], docker.DockerClient]] = None,
        stdout: Optional[BinaryIO] = None,
        stdin: Optional[TextIO] = None,
        interactive: Optional[bool] = None,
        timeout: Optional[float] = None,
    ):
        self.client_factory = client_factory or (lambda: docker.from_env(timeout=timeout))
        self.stdout = stdout
        self.stdin = stdin
        self.interactive = interactive

    def run(self, spec: ContainerSpec) -> int:
        """Run ``spec`` to completion and return the container's exit status.

        Never raises: any failure is printed as ``Docker error: ...`` and
        turned into ``EXIT_SOFTWARE``.
        """
        client = None
        try:
            client = self._connect()
            remove_existing_container(client, spec.name)

            container = self._create_container(client, spec)
            return self._run_attached(client, container, spec)
        except Exception as e:
            logger.debug(f"Container run for {spec.name} failed", exc_info=True)
            print(f"Docker error: {e}", file=sys.stderr)
            return EXIT_SOFTWARE
        finally:
            if client is not None:
                client.close()

    def _connect(self) -> docker.DockerClient:
        """Open a client and make sure the engine answers."""
        try:
            client = self.client_factory()
        except DockerException as e:
            raise EngineUnavailable(e) from e

        try:
            client.ping()
        except (DockerException, requests.exceptions.RequestException) as e:
            client.close()
            raise EngineUnavailable(e) from e
        return client

    def _create_container(self, client: docker.DockerClient, spec: ContainerSpec) -> Container:
        return client.containers.create(
            spec.image,
            command=list(spec.command),
            name=spec.name,
            working_dir=spec.working_dir,
            # Interactive TTY with stdin/stdout/stderr attached
            tty=True,
            stdin_open=True,
            # Host config
            privileged=spec.privileged,
            userns_mode=spec.userns_mode,
            auto_remove=spec.auto_remove,
            tmpfs=dict(spec.tmpfs),
            volumes=spec.volumes(),
        )

    def _run_attached(self, client: docker.DockerClient, container: Container, spec: ContainerSpec) -> int:
        """Attach, start and copy output to the host until the container exits.

        Attaching and waiting happen before ``start`` so that output and exit
        status are not lost when an auto-removed container exits quickly.
        """
        interactive = self._is_interactive()
        output = container.attach(stdout=True, stderr=True, stream=True, logs=True)
        stdin_sock = None
        if interactive:
            stdin_sock = client.api.attach_socket(container.id, params={"stdin": 1, "stream": 1})

        waiter = _ExitWaiter(container)
        waiter.start()
        pump = threading.Thread(
            target=self._pump_output,
            args=(output,),
            name=f"{container.name}-output",
            daemon=True,
        )
        pump.start()

        terminal = raw_terminal(self._stdin()) if interactive else nullcontext()
        with terminal:
            container.start()
            logger.info(f"Started container {spec.name} ({container.short_id}) from {spec.image}")
            if interactive:
                forwarder = threading.Thread(
                    target=self._forward_stdin,
                    args=(stdin_sock,),
                    name=f"{container.name}-stdin",
                    daemon=True,
                )
                forwarder.start()
            return self._collect_status(container, waiter, pump)

    def _collect_status(self, container: Container, waiter: _ExitWaiter, pump: threading.Thread) -> int:
        result = waiter.status()
        pump.join(timeout=PUMP_JOIN_TIMEOUT)

        error = result.get("Error")
        if error:
            logger.warning(f"Container {container.name} reported: {error}")

        status = int(result["StatusCode"])
        logger.info(f"Container {container.name} exited with {status}")
        return status

    def _pump_output(self, chunks: Iterable[bytes]) -> None:
        """Write each output chunk to the host as soon as it arrives."""
        out = self.stdout if self.stdout is not None else sys.stdout.buffer
        try:
            for chunk in chunks:
                out.write(chunk)
                out.flush()
        except Exception as e:
            logger.error(f"Output stream error: {e}")

    def _stdin(self) -> TextIO:
        return self.stdin if self.stdin is not None else sys.stdin

    def _is_interactive(self) -> bool:
        if self.interactive is not None:
            return self.interactive
        stdin = self._stdin()
        try:
            return stdin is not None and stdin.isatty()
        except ValueError:
            # stdin already closed
            return False

    def _forward_stdin(self, sock) -> None:
        """Copy host stdin into the container until EOF."""
        raw = getattr(sock, "_sock", sock)
        fd = self._stdin().fileno()
        try:
            while True:
                data = os.read(fd, STDIN_CHUNK_SIZE)
                if not data:
                    break
                raw.sendall(data)
        except OSError as e:
            logger.debug(f"Stopped forwarding stdin: {e}")
