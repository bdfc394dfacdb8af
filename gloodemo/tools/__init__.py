"""External tool invocation."""

from .runner import CommandRunner

__all__ = ["CommandRunner"]
