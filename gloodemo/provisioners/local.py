"""Provisioners for clusters running on the local machine."""

from typing import List

from .base import ClusterProvisioner

MINISHIFT_ANYUID_SERVICE_ACCOUNTS = [
    "glooe-prometheus-server",
    "glooe-prometheus-kube-state-metrics",
    "glooe-grafana",
    "default",
]


def _listed(output: str, name: str) -> bool:
    """Check whether a cluster listing mentions the cluster name as a word."""
    return any(name in line.split() for line in output.splitlines())


class KindProvisioner(ClusterProvisioner):
    """Kubernetes IN Docker."""

    required_tools = ["kind", "kubectl", "skaffold"]

    def delete_existing(self):
        clusters = self.runner.run(["kind", "get", "clusters"])
        if _listed(clusters, self.name):
            self.runner.run(["kind", "delete", "cluster", f"--name={self.name}"])

    def create(self):
        args = ["kind", "create", "cluster", f"--name={self.name}"]
        if self.settings.pinned_version:
            args.append(f"--image=kindest/node:{self.settings.pinned_version}")
        args.append("--wait=60s")
        self.runner.run(args)

    def post_create(self):
        self.configure_skaffold()


class MinikubeProvisioner(ClusterProvisioner):
    """Single node cluster in a minikube VM."""

    required_tools = ["minikube", "kubectl", "skaffold"]

    cpus = "4"
    memory = "8192mb"

    def delete_existing(self):
        self.runner.run_ignoring_errors(["minikube", "delete", f"--profile={self.name}"])

    def create(self):
        args: List[str] = [
            "minikube",
            "start",
            f"--profile={self.name}",
            f"--cpus={self.cpus}",
            f"--memory={self.memory}",
            "--wait=true",
        ]
        if self.settings.pinned_version:
            args.append(f"--kubernetes-version={self.settings.pinned_version}")
        self.runner.run(args)

    def post_create(self):
        self.apply_docker_env(["minikube", "docker-env", f"--profile={self.name}"])
        self.configure_skaffold()


class K3dProvisioner(ClusterProvisioner):
    """k3s in Docker."""

    required_tools = ["k3d", "kubectl", "skaffold"]

    def delete_existing(self):
        clusters = self.runner.run(["k3d", "list"])
        if _listed(clusters, self.name):
            self.runner.run(["k3d", "delete", f"--name={self.name}"])

    def create(self):
        args = ["k3d", "create", f"--name={self.name}"]
        if self.settings.pinned_version:
            args.append(f"--image=docker.io/rancher/k3s:{self.settings.pinned_version}")
        args.append("--wait=60")
        self.runner.run(args)

    def post_create(self):
        kubeconfig = self.runner.run(["k3d", "get-kubeconfig", f"--name={self.name}"]).strip()
        if kubeconfig:
            self.use_kubeconfig(kubeconfig)
        self.configure_skaffold()


class MinishiftProvisioner(ClusterProvisioner):
    """OpenShift Origin in a minishift VM."""

    required_tools = ["minishift", "oc", "kubectl", "skaffold"]

    def delete_existing(self):
        self.runner.run_ignoring_errors(
            ["minishift", "delete", "--profile", self.name, "--force"]
        )

    def create(self):
        self.runner.run(["minishift", "start", "--profile", self.name])

    def post_create(self):
        self.runner.run(["minishift", "addons", "install", "--defaults"])
        self.runner.run(["minishift", "addons", "apply", "admin-user"])

        self.runner.run(["oc", "login", "--username=system:admin"])

        # Gloo's monitoring pods run as fixed users, which OpenShift forbids by default
        namespace = self.settings.gloo_namespace
        for service_account in MINISHIFT_ANYUID_SERVICE_ACCOUNTS:
            self.runner.run(
                [
                    "oc",
                    "--namespace",
                    namespace,
                    "adm",
                    "policy",
                    "add-scc-to-user",
                    "anyuid",
                    f"--serviceaccount={service_account}",
                ]
            )

        self.apply_docker_env(["minishift", "docker-env", "--profile", self.name])
        self.configure_skaffold()
