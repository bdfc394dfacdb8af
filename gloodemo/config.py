"""Demo environment configuration."""

import getpass
import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, ValidationError

from .errors import ConfigError
from .model.cluster import LATEST_VERSION, ClusterSettings, K8sTool, resolve_cluster_name
from .utils.logger import get_logger

logger = get_logger(__name__)

PACKAGED_RESOURCES = Path(__file__).parent / "resources"

TRUTHY = {"1", "true", "yes", "on"}


class DemoEnvironment(BaseModel):
    """Settings shared by the cluster and demo commands."""

    k8s_tool: K8sTool = K8sTool.KIND
    cluster_name: Optional[str] = None
    gloo_namespace: str = "gloo-system"
    kubeconfig: Optional[str] = None
    k8s_version: str = LATEST_VERSION
    resources_home: Path = PACKAGED_RESOURCES
    dry_run: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DemoEnvironment":
        """Read settings from environment variables."""
        environ = os.environ if environ is None else environ

        values = {
            "k8s_tool": environ.get("K8S_TOOL") or K8sTool.KIND.value,
            "cluster_name": environ.get("DEMO_CLUSTER_NAME") or None,
            "gloo_namespace": environ.get("GLOO_NAMESPACE") or "gloo-system",
            "kubeconfig": environ.get("KUBECONFIG") or None,
            "k8s_version": environ.get("K8S_VERSION") or LATEST_VERSION,
            "dry_run": environ.get("GLOO_DEMO_DRY_RUN", "").lower() in TRUTHY,
        }
        if environ.get("GLOO_DEMO_RESOURCES_HOME"):
            values["resources_home"] = environ["GLOO_DEMO_RESOURCES_HOME"]

        return cls.build(**values)

    @classmethod
    def build(cls, **values) -> "DemoEnvironment":
        """Validate values, reporting problems as ConfigError."""
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid demo environment: {e}") from e

    def override(self, **values) -> "DemoEnvironment":
        """Return a copy with the non-None values replaced."""
        updates = {key: value for key, value in values.items() if value is not None}
        if not updates:
            return self
        return self.build(**{**self.model_dump(), **updates})

    def cluster_settings(self, user: Optional[str] = None) -> ClusterSettings:
        """Resolve the cluster name for the selected tool."""
        name = resolve_cluster_name(self.k8s_tool, self.cluster_name, user or current_user())
        return ClusterSettings(
            tool=self.k8s_tool,
            name=name,
            k8s_version=self.k8s_version,
            gloo_namespace=self.gloo_namespace,
        )

    @property
    def petstore_manifest(self) -> Path:
        return Path(self.resources_home) / "petstore.yaml"


def current_user() -> str:
    """Name used to prefix and label cloud clusters."""
    return getpass.getuser()
