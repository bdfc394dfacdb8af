"""Provision demo Kubernetes clusters and run the Gloo Enterprise WAF demo."""

__version__ = "0.1.0"
