"""Gloo gateway resource models."""

from typing import Any, Dict, List

import yaml
from pydantic import BaseModel, Field

DEFAULT_RESTRICTED_HEADERS = ["proxy", "lock-token", "content-range", "translate", "if", "bar"]


class WafSettings(BaseModel):
    """ModSecurity core rule set settings for a virtual host."""

    rule_engine: bool = True
    request_body_access: bool = True
    deny_status: int = 403
    paranoia_level: int = 1
    restricted_headers: List[str] = Field(
        default_factory=lambda: list(DEFAULT_RESTRICTED_HEADERS)
    )
    crs_setup_version: int = 310

    def custom_settings_string(self) -> str:
        """Render the coreRuleSet customSettingsString."""
        engine = "On" if self.rule_engine else "Off"
        body_access = "On" if self.request_body_access else "Off"
        headers = " ".join(f"/{header}/" for header in self.restricted_headers)
        lines = [
            "# default rules section",
            f"SecRuleEngine {engine}",
            f"SecRequestBodyAccess {body_access}",
            "# CRS section",
            f'SecDefaultAction "phase:1,log,auditlog,deny,status:{self.deny_status}"',
            f'SecDefaultAction "phase:2,log,auditlog,deny,status:{self.deny_status}"',
            f'SecAction "id:900000,phase:1,pass,nolog,setvar:tx.paranoia_level={self.paranoia_level}"',
            f"SecAction \"id:900250,phase:1,nolog,pass,t:none,setvar:'tx.restricted_headers={headers}'\"",
            f'SecAction "id:900990,phase:1,nolog,pass,t:none,setvar:tx.crs_setup_version={self.crs_setup_version}"',
        ]
        return "\n".join(lines) + "\n"


class UpstreamRef(BaseModel):
    """Reference to a Gloo upstream."""

    name: str
    namespace: str


class VirtualService(BaseModel):
    """A gateway.solo.io/v1 VirtualService routing a prefix to one upstream."""

    name: str = "default"
    namespace: str = "gloo-system"
    domains: List[str] = Field(default_factory=lambda: ["*"])
    prefix: str = "/"
    upstream: UpstreamRef
    waf: WafSettings = Field(default_factory=WafSettings)

    def to_manifest(self) -> Dict[str, Any]:
        """Build the Kubernetes object for this virtual service."""
        return {
            "apiVersion": "gateway.solo.io/v1",
            "kind": "VirtualService",
            "metadata": {"name": self.name, "namespace": self.namespace},
            "spec": {
                "displayName": self.name,
                "virtualHost": {
                    "domains": list(self.domains),
                    "routes": [
                        {
                            "matcher": {"prefix": self.prefix},
                            "routeAction": {
                                "single": {
                                    "upstream": {
                                        "name": self.upstream.name,
                                        "namespace": self.upstream.namespace,
                                    }
                                }
                            },
                        }
                    ],
                    "virtualHostPlugins": {
                        "extensions": {
                            "configs": {
                                "waf": {
                                    "settings": {
                                        "coreRuleSet": {
                                            "customSettingsString": self.waf.custom_settings_string()
                                        }
                                    }
                                }
                            }
                        }
                    },
                },
            },
        }

    def to_yaml(self) -> str:
        """Render the manifest as YAML, keeping multi-line strings as literal blocks."""
        return yaml.dump(
            self.to_manifest(), Dumper=_LiteralDumper, default_flow_style=False, sort_keys=False
        )


def petstore_virtual_service(gloo_namespace: str) -> VirtualService:
    """The WAF-protected virtual service in front of the petstore demo app."""
    return VirtualService(
        namespace=gloo_namespace,
        upstream=UpstreamRef(name="default-petstore-8080", namespace=gloo_namespace),
    )


class _LiteralDumper(yaml.SafeDumper):
    pass


def _represent_str(dumper: yaml.SafeDumper, data: str):
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_LiteralDumper.add_representer(str, _represent_str)
