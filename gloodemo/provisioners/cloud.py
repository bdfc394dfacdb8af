"""Provisioners for managed cloud clusters."""

from .base import ClusterProvisioner


class GkeProvisioner(ClusterProvisioner):
    """Google Kubernetes Engine."""

    required_tools = ["gcloud", "kubectl"]

    machine_type = "n1-standard-4"
    num_nodes = "3"
    metrics_timeout = 600.0

    def delete_existing(self):
        self.runner.run_ignoring_errors(
            ["gcloud", "container", "clusters", "delete", self.name, "--quiet"]
        )

    def create(self):
        self.runner.run(
            [
                "gcloud",
                "beta",
                "container",
                "clusters",
                "create",
                self.name,
                "--release-channel=regular",
                f"--machine-type={self.machine_type}",
                f"--num-nodes={self.num_nodes}",
                "--no-enable-basic-auth",
                "--enable-ip-alias",
                "--enable-stackdriver-kubernetes",
                "--addons=HorizontalPodAutoscaling,HttpLoadBalancing",
                "--metadata=disable-legacy-endpoints=true",
                f"--labels=creator={self.user}",
            ]
        )

    def post_create(self):
        self.runner.run(["gcloud", "container", "clusters", "get-credentials", self.name])

        account = self.runner.run(["gcloud", "config", "get-value", "account"]).strip()
        self.client.create_clusterrolebinding(
            "cluster-admin-binding", clusterrole="cluster-admin", user=account
        )

        # Helm requires the metrics API, and GKE can be slow to start it
        self.client.wait_for_metrics_server(timeout=self.metrics_timeout)


class EksProvisioner(ClusterProvisioner):
    """Amazon Elastic Kubernetes Service via eksctl."""

    required_tools = ["eksctl", "kubectl"]

    nodes = "3"

    def delete_existing(self):
        self.runner.run_ignoring_errors(["eksctl", "delete", "cluster", f"--name={self.name}"])

    def create(self):
        self.runner.run(
            [
                "eksctl",
                "create",
                "cluster",
                f"--name={self.name}",
                f"--tags=creator={self.user}",
                f"--nodes={self.nodes}",
            ]
        )
