"""Gloo Enterprise web application firewall demo.

Deploys the petstore sample app, routes to it through a virtual service with
the ModSecurity core rule set enabled, forwards the gateway proxy to a local
port and checks that malicious requests are rejected.
"""

import time
from pathlib import Path
from typing import Callable, List, Optional

from ..config import DemoEnvironment
from ..core.portforward import DEFAULT_PID_FILE, PortForward
from ..core.smoke import DEFAULT_BASE_URL, SmokeTester
from ..k8s.client import K8sClient
from ..model.cluster import K8sTool
from ..model.gateway import VirtualService, petstore_virtual_service
from ..model.smoke import SmokeResult, default_waf_checks
from ..utils.logger import get_logger

logger = get_logger(__name__)

APP_NAMESPACE = "default"
PETSTORE_DEPLOYMENT = "deployment/petstore"
GATEWAY_PROXY_DEPLOYMENT = "deployment/gateway-proxy-v2"
GATEWAY_PROXY_SERVICE = "service/gateway-proxy-v2"
GATEWAY_PORTS = "8080:80"


class WafDemo:
    """Runs and cleans up the WAF demo against the current cluster."""

    def __init__(
        self,
        env: DemoEnvironment,
        client: K8sClient,
        pid_file: Path = DEFAULT_PID_FILE,
        settle_seconds: float = 10,
        base_url: str = DEFAULT_BASE_URL,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.env = env
        self.client = client
        self.runner = client.runner
        self.settle_seconds = settle_seconds
        self.base_url = base_url
        self.sleep = sleep
        self.port_forward = PortForward(
            client,
            GATEWAY_PROXY_SERVICE,
            GATEWAY_PORTS,
            namespace=env.gloo_namespace,
            pid_file=pid_file,
        )

    @property
    def virtual_service(self) -> VirtualService:
        return petstore_virtual_service(self.env.gloo_namespace)

    def use_kind_kubeconfig(self):
        """Point kubectl at the kind cluster unless a kubeconfig was given."""
        if self.env.k8s_tool != K8sTool.KIND or self.env.kubeconfig:
            return

        name = self.env.cluster_settings().name
        success, output = self.runner.execute(
            ["kind", "get", "kubeconfig-path", f"--name={name}"]
        )
        if success and output.strip():
            path = output.strip()
            self.runner.update_env({"KUBECONFIG": path})
            self.client.kubeconfig = path
        else:
            # kind 0.6+ dropped kubeconfig-path and merges into the default kubeconfig
            self.runner.run(["kind", "export", "kubeconfig", f"--name={name}"])

    def deploy(self):
        """Install petstore and replace the default virtual service."""
        self.use_kind_kubeconfig()

        self.client.apply_file(self.env.petstore_manifest, namespace=APP_NAMESPACE)

        # Cleanup old examples
        self.client.delete_ignoring_errors(
            ["virtualservice/default"], namespace=self.env.gloo_namespace
        )

        logger.info("Applying WAF virtual service")
        self.client.apply_manifest(self.virtual_service.to_yaml())
        self.settle()

        self.client.rollout_status(PETSTORE_DEPLOYMENT, namespace=APP_NAMESPACE)
        self.client.rollout_status(GATEWAY_PROXY_DEPLOYMENT, namespace=self.env.gloo_namespace)

        self.port_forward.start()
        self.settle()

    def smoke_test(self, tester: Optional[SmokeTester] = None) -> List[SmokeResult]:
        if self.runner.dry_run:
            logger.info("[dry-run] skipping smoke tests")
            return []

        tester = tester or SmokeTester(self.base_url)
        try:
            return tester.run(default_waf_checks())
        finally:
            tester.close()

    def run(self, skip_smoke: bool = False) -> List[SmokeResult]:
        """Deploy the demo and return the smoke test results."""
        self.deploy()
        if skip_smoke:
            return []
        return self.smoke_test()

    def cleanup(self):
        """Stop forwarding and remove everything the demo created."""
        self.port_forward.stop()

        # Gloo CRDs may already be gone, which --ignore-not-found does not cover
        self.client.delete_ignoring_errors(
            ["virtualservice/default", "upstream/auth0"],
            namespace=self.env.gloo_namespace,
            ignore_not_found=True,
        )
        self.client.delete_file(self.env.petstore_manifest, namespace=APP_NAMESPACE)
        logger.info("Demo resources removed")

    def settle(self):
        if self.runner.dry_run or not self.settle_seconds:
            return
        logger.debug(f"Waiting {self.settle_seconds:g}s for the gateway to pick up changes")
        self.sleep(self.settle_seconds)
