"""Kubernetes client wrapper."""

import time
from pathlib import Path
from typing import List, Optional, Tuple

from ..errors import MetricsServerTimeout
from ..tools.runner import CommandRunner
from ..utils.logger import get_logger

logger = get_logger(__name__)


class K8sClient:
    """Wrapper for kubectl commands."""

    def __init__(
        self,
        runner: CommandRunner,
        context: Optional[str] = None,
        kubeconfig: Optional[str] = None,
    ):
        self.runner = runner
        self.context = context
        self.kubeconfig = kubeconfig

    def _build_command(self, args: List[str], namespace: Optional[str] = None) -> List[str]:
        """Build kubectl command with kubeconfig, context and namespace."""
        cmd = ["kubectl"]

        if self.kubeconfig:
            cmd.append(f"--kubeconfig={self.kubeconfig}")

        if self.context:
            cmd.append(f"--context={self.context}")

        if namespace:
            cmd.append(f"--namespace={namespace}")

        cmd.extend(args)
        return cmd

    def run(self, args: List[str], namespace: Optional[str] = None, input: Optional[str] = None) -> str:
        """Run kubectl, raising CommandError on failure."""
        return self.runner.run(self._build_command(args, namespace), input=input)

    def execute(self, args: List[str], namespace: Optional[str] = None) -> Tuple[bool, str]:
        """Run kubectl and return success status and output."""
        return self.runner.execute(self._build_command(args, namespace))

    def apply_file(self, path: Path, namespace: Optional[str] = None) -> str:
        logger.info(f"Applying {path}")
        return self.run(["apply", f"--filename={path}"], namespace=namespace)

    def apply_manifest(self, manifest: str, namespace: Optional[str] = None) -> str:
        """Apply a manifest passed on stdin."""
        return self.run(["apply", "--filename", "-"], namespace=namespace, input=manifest)

    def delete_ignoring_errors(
        self, resources: List[str], namespace: Optional[str] = None, ignore_not_found: bool = False
    ) -> bool:
        """Delete resources, tolerating any failure including missing CRDs."""
        args = ["delete"]
        if ignore_not_found:
            args.append("--ignore-not-found=true")
        args.extend(resources)
        return self.runner.run_ignoring_errors(self._build_command(args, namespace))

    def delete_file(self, path: Path, namespace: Optional[str] = None) -> str:
        logger.info(f"Deleting resources in {path}")
        return self.run(
            ["delete", "--ignore-not-found=true", f"--filename={path}"], namespace=namespace
        )

    def rollout_status(self, target: str, namespace: Optional[str] = None) -> str:
        """Block until a rollout such as deployment/petstore completes."""
        logger.info(f"Waiting for rollout of {target}")
        return self.run(["rollout", "status", target, "--watch=true"], namespace=namespace)

    def current_context(self) -> str:
        return self.run(["config", "current-context"]).strip()

    def create_clusterrolebinding(self, name: str, clusterrole: str, user: str) -> str:
        return self.run(
            [
                "create",
                "clusterrolebinding",
                name,
                f"--clusterrole={clusterrole}",
                f"--user={user}",
            ]
        )

    def port_forward_command(self, target: str, ports: str, namespace: Optional[str] = None) -> List[str]:
        """kubectl command line forwarding local:remote ports to a target."""
        return self._build_command(["port-forward", target, ports], namespace)

    def wait_for_metrics_server(self, timeout: float = 300, interval: float = 5) -> None:
        """Poll until the metrics API answers, which Helm needs before installing."""
        if self.runner.dry_run:
            self.execute(["top", "nodes"])
            return

        deadline = time.monotonic() + timeout
        while True:
            success, _ = self.execute(["top", "nodes"])
            if success:
                logger.info("Metrics server is available")
                return
            if time.monotonic() >= deadline:
                raise MetricsServerTimeout(
                    f"Metrics server not available after {timeout:g} seconds"
                )
            logger.info("Waiting for metrics server...")
            time.sleep(interval)
