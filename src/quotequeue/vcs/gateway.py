"""Async git gateway for the working copy that holds the quote files."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
import logging
from pathlib import Path


DEFAULT_GIT_EXECUTABLE = "git"
DEFAULT_GIT_TIMEOUT_SECONDS = 60.0

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GitCommandError(RuntimeError):
    """Raised when a git command exits non-zero or times out."""

    command: str
    message: str
    returncode: int | None = None

    def __str__(self) -> str:
        return f"{self.message} (command={self.command}, returncode={self.returncode})"


class GitGateway:
    """Sequential pull/add/commit/push against one working copy."""

    def __init__(
        self,
        working_copy: str | Path,
        *,
        git_executable: str = DEFAULT_GIT_EXECUTABLE,
        timeout_seconds: float = DEFAULT_GIT_TIMEOUT_SECONDS,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self._working_copy = Path(working_copy)
        self._git_executable = git_executable
        self._timeout_seconds = timeout_seconds

    @property
    def working_copy(self) -> Path:
        return self._working_copy

    async def _run(self, *args: str) -> str:
        command = " ".join((self._git_executable, *args))
        logger.debug("Running %s in %s", command, self._working_copy)

        try:
            proc = await asyncio.create_subprocess_exec(
                self._git_executable,
                *args,
                cwd=str(self._working_copy),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise GitCommandError(command=command, message=f"Failed to start git: {exc}") from exc

        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(proc.communicate(), timeout=self._timeout_seconds)
        except asyncio.TimeoutError as exc:
            proc.kill()
            await proc.communicate()
            raise GitCommandError(
                command=command,
                message=f"Timed out after {int(self._timeout_seconds)}s",
            ) from exc

        stdout_text = stdout_bytes.decode("utf-8", errors="replace")
        stderr_text = stderr_bytes.decode("utf-8", errors="replace").strip()

        if proc.returncode != 0:
            raise GitCommandError(
                command=command,
                message=stderr_text or stdout_text.strip() or "git command failed",
                returncode=proc.returncode,
            )
        return stdout_text

    async def pull(self, remote: str, branch: str) -> None:
        await self._run("pull", "--ff-only", remote, branch)

    async def add(self, paths: Sequence[str]) -> None:
        if not paths:
            raise ValueError("paths cannot be empty")
        await self._run("add", "--", *paths)

    async def commit(self, message: str) -> None:
        if not message.strip():
            raise ValueError("commit message cannot be empty")
        await self._run("commit", "-m", message)

    async def push(self, remote: str, branch: str) -> None:
        await self._run("push", remote, branch)

    async def head(self) -> str:
        return (await self._run("rev-parse", "HEAD")).strip()

    async def reset_hard(self, revision: str) -> None:
        await self._run("reset", "--hard", revision)


@dataclass(frozen=True, slots=True)
class GatewayStatus:
    """Outcome of opening the git working copy at startup."""

    gateway: GitGateway | None
    error: str | None = None

    @property
    def available(self) -> bool:
        return self.gateway is not None


def open_gateway(
    working_copy: str | Path,
    *,
    git_executable: str = DEFAULT_GIT_EXECUTABLE,
    timeout_seconds: float = DEFAULT_GIT_TIMEOUT_SECONDS,
) -> GatewayStatus:
    """Check the working copy once and report success or failure as a value."""

    path = Path(working_copy)
    if not path.is_dir():
        error = f"Working copy does not exist or is not a directory: {path}"
        logger.error("Failed to initialize git: %s", error)
        return GatewayStatus(gateway=None, error=error)
    if not (path / ".git").exists():
        error = f"Not a git working copy: {path}"
        logger.error("Failed to initialize git: %s", error)
        return GatewayStatus(gateway=None, error=error)

    try:
        gateway = GitGateway(path, git_executable=git_executable, timeout_seconds=timeout_seconds)
    except ValueError as exc:
        logger.error("Failed to initialize git: %s", exc)
        return GatewayStatus(gateway=None, error=str(exc))
    return GatewayStatus(gateway=gateway)
