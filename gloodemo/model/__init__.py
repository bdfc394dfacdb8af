"""Data models for gloo-demos."""

from .cluster import ClusterSettings, K8sTool, resolve_cluster_name
from .gateway import VirtualService, WafSettings, UpstreamRef, petstore_virtual_service
from .smoke import SmokeCheck, SmokeResult, default_waf_checks

__all__ = [
    "ClusterSettings",
    "K8sTool",
    "resolve_cluster_name",
    "VirtualService",
    "WafSettings",
    "UpstreamRef",
    "petstore_virtual_service",
    "SmokeCheck",
    "SmokeResult",
    "default_waf_checks",
]
