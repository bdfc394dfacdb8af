"""Cluster provisioners, one per cluster tool."""

from typing import Dict, Type

from ..k8s.client import K8sClient
from ..model.cluster import ClusterSettings, K8sTool
from ..tools.runner import CommandRunner
from .base import ClusterProvisioner, CustomProvisioner, parse_docker_env
from .cloud import EksProvisioner, GkeProvisioner
from .local import K3dProvisioner, KindProvisioner, MinikubeProvisioner, MinishiftProvisioner

PROVISIONERS: Dict[K8sTool, Type[ClusterProvisioner]] = {
    K8sTool.KIND: KindProvisioner,
    K8sTool.MINIKUBE: MinikubeProvisioner,
    K8sTool.K3D: K3dProvisioner,
    K8sTool.MINISHIFT: MinishiftProvisioner,
    K8sTool.GKE: GkeProvisioner,
    K8sTool.EKS: EksProvisioner,
    K8sTool.CUSTOM: CustomProvisioner,
}


def get_provisioner(
    settings: ClusterSettings, runner: CommandRunner, client: K8sClient, user: str
) -> ClusterProvisioner:
    """Select the provisioner for the configured cluster tool."""
    provisioner_class = PROVISIONERS[settings.tool]
    return provisioner_class(settings, runner, client, user)


__all__ = [
    "ClusterProvisioner",
    "CustomProvisioner",
    "KindProvisioner",
    "MinikubeProvisioner",
    "K3dProvisioner",
    "MinishiftProvisioner",
    "GkeProvisioner",
    "EksProvisioner",
    "PROVISIONERS",
    "get_provisioner",
    "parse_docker_env",
]
