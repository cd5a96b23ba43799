from __future__ import annotations

import logging
import shutil
import subprocess
from typing import Protocol

from result import Err, Ok, Result

log = logging.getLogger(__name__)


class ToolRunner(Protocol):
    def available(self, tool: str) -> bool: ...

    def run(self, args: list[str], timeout: float | None = None) -> Result[str, str]: ...


class SubprocessToolRunner:
    """Runs read-only helper commands such as ``brew --cache``."""

    def available(self, tool: str) -> bool:
        return shutil.which(tool) is not None

    def run(self, args: list[str], timeout: float | None = 30.0) -> Result[str, str]:
        if not args or not self.available(args[0]):
            return Err(f"{args[0] if args else '<empty>'} is not installed")
        try:
            completed = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            log.warning("%s timed out after %ss", " ".join(args), timeout)
            return Err(f"{args[0]} timed out")
        except OSError as exc:
            log.debug("cannot run %s: %s", args[0], exc)
            return Err(f"cannot run {args[0]}: {exc}")
        if completed.returncode != 0:
            return Err(completed.stderr.strip() or f"{args[0]} exited with {completed.returncode}")
        return Ok(completed.stdout)


DEFAULT_TOOLS: ToolRunner = SubprocessToolRunner()
