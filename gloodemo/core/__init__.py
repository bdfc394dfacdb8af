"""Core demo building blocks."""

from .portforward import PortForward
from .smoke import SmokeTester

__all__ = ["PortForward", "SmokeTester"]
