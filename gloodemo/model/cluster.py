"""Cluster-related models."""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel


class K8sTool(str, Enum):
    """Supported cluster runners."""

    KIND = "kind"
    MINIKUBE = "minikube"
    K3D = "k3d"
    MINISHIFT = "minishift"
    GKE = "gke"
    EKS = "eks"
    CUSTOM = "custom"


DEFAULT_CLUSTER_NAMES: Dict[K8sTool, str] = {
    K8sTool.KIND: "kind",
    K8sTool.MINIKUBE: "minikube",
    K8sTool.K3D: "k3s-default",
    K8sTool.MINISHIFT: "minishift",
    K8sTool.GKE: "gke-gloo",
    K8sTool.EKS: "eks-gloo",
    K8sTool.CUSTOM: "custom",
}

# Cloud clusters are shared, so their names carry the creator
USER_PREFIXED_TOOLS = {K8sTool.GKE, K8sTool.EKS}

LATEST_VERSION = "latest"


class ClusterSettings(BaseModel):
    """Resolved settings for a single cluster."""

    tool: K8sTool
    name: str
    k8s_version: str = LATEST_VERSION
    gloo_namespace: str = "gloo-system"

    @property
    def pinned_version(self) -> Optional[str]:
        """Kubernetes version to request, or None for the tool's default."""
        if self.k8s_version == LATEST_VERSION:
            return None
        return self.k8s_version


def resolve_cluster_name(tool: K8sTool, name: Optional[str], user: str) -> str:
    """Apply the per-tool default name and the user prefix for cloud clusters."""
    resolved = name or DEFAULT_CLUSTER_NAMES[tool]
    if tool in USER_PREFIXED_TOOLS:
        return f"{user}-{resolved}"
    return resolved
