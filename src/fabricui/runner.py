"""Concrete implementations for process runners."""

import logging
import subprocess
import time
from abc import ABC, abstractmethod
from typing import Optional

from .exceptions import InvocationFailure, InvocationTimeout
from .models import ExecutionResult, Invocation, Stage

logger = logging.getLogger(__name__)


class Runner(ABC):
    """Interface for executing an invocation and collecting its output."""

    @abstractmethod
    def run(self, invocation: Invocation) -> str:
        """Runs the invocation to completion and returns its standard output.

        Raises
        ------
        InvocationFailure
            If a stage cannot be spawned or exits with a non-zero code.
        InvocationTimeout
            If the invocation does not finish within the runner's timeout.
        """
        pass


class Subprocess(Runner):
    """Runs each stage as a child process, without a shell.

    Stages run one after the other; the captured output of a stage is fed to
    the next one. A single deadline covers the whole invocation.

    Parameters
    ----------
    timeout : float, optional
        Upper bound in seconds for the whole invocation. ``None`` waits
        forever.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    def run(self, invocation: Invocation) -> str:
        if not invocation.stages:
            raise InvocationFailure("Failed to execute command", "empty invocation")

        logger.info("Executing command: %s", invocation.describe())
        deadline = None if self.timeout is None else time.monotonic() + self.timeout

        data = invocation.stdin
        for stage in invocation.stages:
            result = self._run_stage(stage, data, deadline)
            logger.debug(
                "%s exited with %s after %.2fs", stage.program, result.returncode, result.duration
            )
            if result.stderr:
                logger.warning("Command stderr from %s: %s", stage.program, result.stderr)
            if result.returncode != 0:
                raise InvocationFailure(
                    "Failed to execute command",
                    details=result.stderr.strip()
                    or f"{stage.program} exited with status {result.returncode}",
                    returncode=result.returncode,
                    argv=stage.argv,
                )
            data = result.stdout

        logger.debug("Command output: %s", data)
        return data

    def _run_stage(
        self, stage: Stage, stdin: Optional[str], deadline: Optional[float]
    ) -> ExecutionResult:
        remaining = None
        if deadline is not None:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise InvocationTimeout(self.timeout, stage.argv)

        started = time.monotonic()
        try:
            completed = subprocess.run(
                stage.argv,
                input=stdin,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=remaining,
                shell=False,
            )
        except subprocess.TimeoutExpired as exc:
            logger.error("Command timed out: %s", " ".join(stage.argv))
            raise InvocationTimeout(self.timeout, stage.argv) from exc
        except OSError as exc:
            logger.error("Error executing command %s: %s", stage.program, exc)
            raise InvocationFailure(
                "Failed to execute command", details=str(exc), argv=stage.argv
            ) from exc

        return ExecutionResult(
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            returncode=completed.returncode,
            duration=time.monotonic() - started,
        )


class Echo(Runner):
    """A runner that spawns nothing and echoes the invocation back."""

    def __init__(self, delay: float = 0.0):
        self.delay = delay

    def run(self, invocation: Invocation) -> str:
        if self.delay:
            time.sleep(self.delay)
        fabric = invocation.stages[-1]
        payload = invocation.stdin
        if payload is None:
            payload = " ".join(invocation.stages[0].args)
        return (
            "**Echo runner - static response for testing**\n\n"
            f"_Command:_ `{' '.join(fabric.argv)}`\n\n{payload}"
        )
