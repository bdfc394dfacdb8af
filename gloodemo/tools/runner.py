"""Runner for external command line tools."""

import os
import shutil
import subprocess
from typing import Dict, List, Mapping, Optional, Tuple

from ..errors import CommandError, ToolNotFoundError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class CommandRunner:
    """Executes external commands sequentially, failing fast by default."""

    def __init__(self, dry_run: bool = False, env: Optional[Mapping[str, str]] = None):
        self.dry_run = dry_run
        self.env: Dict[str, str] = dict(os.environ if env is None else env)
        self.history: List[List[str]] = []

    def update_env(self, values: Mapping[str, str]):
        """Merge variables into the environment of subsequent commands."""
        for key, value in values.items():
            logger.debug(f"Setting {key}={value}")
            self.env[key] = value

    def which(self, tool: str) -> str:
        """Return the path of a tool, raising if it is not installed."""
        path = shutil.which(tool, path=self.env.get("PATH"))
        if not path:
            raise ToolNotFoundError(tool)
        return path

    def run(self, args: List[str], input: Optional[str] = None) -> str:
        """Run a command and return its stdout, raising CommandError on failure."""
        self.history.append(list(args))
        logger.debug(f"Executing: {' '.join(args)}")

        if self.dry_run:
            logger.info(f"[dry-run] {' '.join(args)}")
            return ""

        try:
            result = subprocess.run(
                args,
                input=input,
                capture_output=True,
                text=True,
                check=True,
                env=self.env,
            )
        except FileNotFoundError:
            raise ToolNotFoundError(args[0])
        except subprocess.CalledProcessError as e:
            raise CommandError(args, e.returncode, e.stderr)

        return result.stdout

    def execute(self, args: List[str], input: Optional[str] = None) -> Tuple[bool, str]:
        """Run a command and return success status and output."""
        try:
            return True, self.run(args, input=input)
        except CommandError as e:
            logger.debug(f"Command failed: {e.stderr}")
            return False, e.stderr

    def run_ignoring_errors(self, args: List[str]) -> bool:
        """Run a command whose failure is expected and harmless."""
        success, output = self.execute(args)
        if not success:
            logger.warning(f"Ignoring failure of: {' '.join(args)}")
        return success

    def spawn(self, args: List[str]) -> Optional[int]:
        """Start a detached background process with output discarded and return its PID."""
        self.history.append(list(args))
        logger.debug(f"Spawning: {' '.join(args)}")

        if self.dry_run:
            logger.info(f"[dry-run] {' '.join(args)} &")
            return None

        try:
            process = subprocess.Popen(
                args,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                env=self.env,
                start_new_session=True,
            )
        except FileNotFoundError:
            raise ToolNotFoundError(args[0])

        return process.pid
