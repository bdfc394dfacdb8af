"""Exceptions raised by the demo tooling."""

from typing import List, Optional


class DemoError(Exception):
    """Base class for all demo errors."""


class ConfigError(DemoError):
    """Invalid demo environment settings."""


class ToolNotFoundError(DemoError):
    """A required command line tool is not installed."""

    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(f"{tool} command not found. Please install {tool}.")


class CommandError(DemoError):
    """An external command exited with a non-zero status."""

    def __init__(self, command: List[str], returncode: int, stderr: Optional[str] = None):
        self.command = command
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        message = f"Command failed with exit code {returncode}: {self.command_line}"
        if self.stderr:
            message += f"\n{self.stderr}"
        super().__init__(message)

    @property
    def command_line(self) -> str:
        return " ".join(self.command)


class MetricsServerTimeout(DemoError):
    """The cluster metrics API did not become available in time."""
