"""Base cluster provisioner."""

import re
from abc import ABC, abstractmethod
from typing import Dict, List

from ..k8s.client import K8sClient
from ..model.cluster import ClusterSettings
from ..tools.runner import CommandRunner
from ..utils.logger import get_logger

logger = get_logger(__name__)

EXPORT_PATTERN = re.compile(r'^export\s+([A-Za-z_][A-Za-z0-9_]*)=(["\']?)(.*)\2$')


def parse_docker_env(output: str) -> Dict[str, str]:
    """Extract the variables a `docker-env` command would export to a shell."""
    env = {}
    for line in output.splitlines():
        match = EXPORT_PATTERN.match(line.strip())
        if match:
            env[match.group(1)] = match.group(3)
    return env


class ClusterProvisioner(ABC):
    """Deletes any previous cluster of the same name and creates a fresh one."""

    required_tools: List[str] = []

    def __init__(
        self, settings: ClusterSettings, runner: CommandRunner, client: K8sClient, user: str
    ):
        self.settings = settings
        self.runner = runner
        self.client = client
        self.user = user

    @property
    def name(self) -> str:
        return self.settings.name

    def provision(self):
        """Restart the cluster: delete, create, then configure."""
        logger.info(f"Provisioning {self.settings.tool.value} cluster {self.name}")
        self.check_tools()
        self.delete_existing()
        self.create()
        self.post_create()
        logger.info(f"Cluster {self.name} is ready")

    def teardown(self):
        """Delete the cluster if it exists."""
        logger.info(f"Deleting {self.settings.tool.value} cluster {self.name}")
        self.check_tools()
        self.delete_existing()

    def check_tools(self):
        if self.runner.dry_run:
            return
        for tool in self.required_tools:
            self.runner.which(tool)

    @abstractmethod
    def delete_existing(self):
        """Remove a previous cluster with the same name."""
        pass

    @abstractmethod
    def create(self):
        """Create the cluster."""
        pass

    def post_create(self):
        """Configure access to the new cluster."""
        pass

    def use_kubeconfig(self, path: str):
        """Point later kubectl calls at a cluster specific kubeconfig."""
        self.runner.update_env({"KUBECONFIG": path})
        self.client.kubeconfig = path

    def apply_docker_env(self, args: List[str]):
        """Use the cluster's docker daemon for later commands."""
        output = self.runner.run(args)
        self.runner.update_env(parse_docker_env(output))

    def configure_skaffold(self):
        """Tell skaffold the current context is a local cluster so images are not pushed."""
        context = self.client.current_context()
        self.runner.run(
            ["skaffold", "config", "set", f"--kube-context={context}", "local-cluster", "true"]
        )


class CustomProvisioner(ClusterProvisioner):
    """A cluster managed outside of this tool."""

    def delete_existing(self):
        logger.info("Custom cluster: nothing to delete")

    def create(self):
        logger.info("Custom cluster: using the current kubectl context")
