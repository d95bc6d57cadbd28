"""
Lifecycle of a local OSRM route server.

The router only needs to know whether the local server is up and to ask for
it to be started; how that happens lives here.
"""

from __future__ import annotations

import atexit
import logging
import subprocess
import threading
from pathlib import Path
from typing import IO, List, Optional, Protocol, Union

import httpx

logger = logging.getLogger(__name__)
server_logger = logging.getLogger("georesolve.osrm")


class ServerSupervisor(Protocol):
    def is_running(self) -> bool:
        ...

    def ensure_running(self) -> None:
        ...


class NullSupervisor:
    """For deployments without a local server: reports running, does nothing."""

    def is_running(self) -> bool:
        return True

    def ensure_running(self) -> None:
        pass


class OSRMServerSupervisor:
    """
    Starts ``osrm-routed`` on demand and stops it when the interpreter exits.

    Args:
        executable: Path to the osrm-routed binary
        data_file: Prepared .osrm dataset, relative to the executable's directory
        host: Interface to bind
        port: Port to listen on
        algorithm: OSRM algorithm (MLD or CH)
        check_timeout: Timeout for the liveness check (seconds)
        verbose: Forward server output at INFO instead of DEBUG
    """

    def __init__(
        self,
        executable: Union[str, Path],
        data_file: str,
        host: str = "127.0.0.1",
        port: int = 7880,
        algorithm: str = "MLD",
        check_timeout: float = 1.0,
        verbose: bool = False,
    ):
        self.executable = Path(executable)
        self.data_file = data_file
        self.host = host
        self.port = port
        self.algorithm = algorithm
        self.check_timeout = check_timeout
        self.verbose = verbose
        self._process: Optional[subprocess.Popen] = None
        self._lock = threading.Lock()
        self._exit_hook_registered = False

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def command(self) -> List[str]:
        return [
            str(self.executable),
            self.data_file,
            "-i", self.host,
            "-p", str(self.port),
            "-a", self.algorithm,
        ]

    def is_running(self) -> bool:
        """True if our child is alive or anything answers HTTP on the server port."""
        if self._process is not None and self._process.poll() is None:
            return True
        try:
            httpx.get(f"{self.base_url}/", timeout=self.check_timeout)
        except httpx.HTTPError:
            return False
        return True

    def ensure_running(self) -> None:
        """
        Start the server unless it is already up.

        Raises:
            FileNotFoundError: If the executable does not exist
            OSError: If the process cannot be spawned
        """
        with self._lock:
            if self.is_running():
                logger.debug(f"OSRM route server already running at {self.base_url}, not starting it again")
                return

            if not self.executable.is_file():
                raise FileNotFoundError(f"OSRM executable not found: {self.executable}")

            logger.info(f"Starting OSRM route server: {' '.join(self.command())}")
            self._process = subprocess.Popen(
                self.command(),
                cwd=str(self.executable.parent),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
            for stream in (self._process.stdout, self._process.stderr):
                threading.Thread(target=self._drain, args=(stream,), daemon=True).start()

            if not self._exit_hook_registered:
                atexit.register(self.stop)
                self._exit_hook_registered = True

    def _drain(self, stream: IO[str]) -> None:
        level = logging.INFO if self.verbose else logging.DEBUG
        with stream:
            for line in stream:
                server_logger.log(level, f"[OSRM-Route-Server] {line.rstrip()}")

    def stop(self, timeout: float = 5.0) -> None:
        """Terminate the server process if we started it."""
        process, self._process = self._process, None
        if process is None or process.poll() is not None:
            return
        process.terminate()
        try:
            process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning("OSRM route server did not stop in time, killing it")
            process.kill()
            process.wait()
