"""Demo scenarios."""

from .waf import WafDemo

__all__ = ["WafDemo"]
