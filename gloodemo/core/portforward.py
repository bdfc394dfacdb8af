"""Background kubectl port-forward tracked through a PID file."""

import os
import signal
from pathlib import Path
from typing import Optional

from ..k8s.client import K8sClient
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_PID_FILE = Path("proxy_pf.pid")


class PortForward:
    """Forwards a local port to a cluster service until stopped."""

    def __init__(
        self,
        client: K8sClient,
        target: str,
        ports: str,
        namespace: Optional[str] = None,
        pid_file: Path = DEFAULT_PID_FILE,
    ):
        self.client = client
        self.target = target
        self.ports = ports
        self.namespace = namespace
        self.pid_file = Path(pid_file)

    def read_pid(self) -> Optional[int]:
        if not self.pid_file.exists():
            return None
        content = self.pid_file.read_text().strip()
        try:
            pid = int(content)
        except ValueError:
            pid = 0
        # 0 and negative PIDs would signal a process group or every process we own
        if pid <= 0:
            logger.warning(f"Ignoring malformed PID file {self.pid_file}: {content!r}")
            return None
        return pid

    def stop(self) -> bool:
        """Kill a previously started forward, if any, and remove its PID file."""
        if not self.pid_file.exists():
            return False

        pid = self.read_pid()
        stopped = False
        if pid is not None:
            try:
                os.kill(pid, signal.SIGTERM)
                logger.info(f"Stopped port-forward process {pid}")
                stopped = True
            except ProcessLookupError:
                logger.debug(f"Port-forward process {pid} already exited")
            except PermissionError:
                logger.warning(f"Not allowed to stop process {pid}")

        self.pid_file.unlink()
        return stopped

    def start(self) -> Optional[int]:
        """Restart the forward in the background and record its PID."""
        self.stop()

        command = self.client.port_forward_command(self.target, self.ports, self.namespace)
        pid = self.client.runner.spawn(command)
        if pid is not None:
            self.pid_file.write_text(f"{pid}\n")
            logger.info(f"Forwarding {self.ports} to {self.target} (pid {pid})")
        return pid
