from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from quotequeue.vcs.gateway import GitCommandError, GitGateway, open_gateway


class _DummyProc:
    def __init__(
        self,
        *,
        stdout: bytes = b"",
        stderr: bytes = b"",
        returncode: int = 0,
        delay_seconds: float = 0.0,
    ) -> None:
        self._stdout = stdout
        self._stderr = stderr
        self.returncode = returncode
        self._delay_seconds = delay_seconds
        self.killed = False

    async def communicate(self) -> tuple[bytes, bytes]:
        if self._delay_seconds > 0 and not self.killed:
            await asyncio.sleep(self._delay_seconds)
        return self._stdout, self._stderr

    def kill(self) -> None:
        self.killed = True


def _patch_exec(procs: list[_DummyProc], calls: list[tuple[tuple[Any, ...], dict[str, Any]]]):
    async def _fake_exec(*args, **kwargs):
        calls.append((args, kwargs))
        return procs.pop(0)

    return patch(
        "quotequeue.vcs.gateway.asyncio.create_subprocess_exec",
        new=AsyncMock(side_effect=_fake_exec),
    )


@pytest.mark.asyncio
async def test_publish_sequence_runs_git_in_working_copy(tmp_path: Path) -> None:
    calls: list[tuple[tuple[Any, ...], dict[str, Any]]] = []
    procs = [_DummyProc() for _ in range(4)]
    gateway = GitGateway(tmp_path)

    with _patch_exec(procs, calls):
        await gateway.pull("upstream", "master")
        await gateway.add(["frontend/static/quotes/english.json"])
        await gateway.commit("Added quote to english.json")
        await gateway.push("origin", "master")

    assert [args for args, _ in calls] == [
        ("git", "pull", "--ff-only", "upstream", "master"),
        ("git", "add", "--", "frontend/static/quotes/english.json"),
        ("git", "commit", "-m", "Added quote to english.json"),
        ("git", "push", "origin", "master"),
    ]
    assert all(kwargs["cwd"] == str(tmp_path) for _, kwargs in calls)


@pytest.mark.asyncio
async def test_head_returns_stripped_revision(tmp_path: Path) -> None:
    calls: list[tuple[tuple[Any, ...], dict[str, Any]]] = []
    procs = [_DummyProc(stdout=b"0123abcd\n"), _DummyProc()]
    gateway = GitGateway(tmp_path, git_executable="/usr/bin/git")

    with _patch_exec(procs, calls):
        revision = await gateway.head()
        await gateway.reset_hard(revision)

    assert revision == "0123abcd"
    assert calls[0][0] == ("/usr/bin/git", "rev-parse", "HEAD")
    assert calls[1][0] == ("/usr/bin/git", "reset", "--hard", "0123abcd")


@pytest.mark.asyncio
async def test_non_zero_exit_raises_with_stderr(tmp_path: Path) -> None:
    calls: list[tuple[tuple[Any, ...], dict[str, Any]]] = []
    procs = [_DummyProc(stderr=b"! [rejected] master -> master (fetch first)\n", returncode=1)]
    gateway = GitGateway(tmp_path)

    with _patch_exec(procs, calls):
        with pytest.raises(GitCommandError) as exc_info:
            await gateway.push("origin", "master")

    assert exc_info.value.returncode == 1
    assert "rejected" in exc_info.value.message
    assert exc_info.value.command == "git push origin master"


@pytest.mark.asyncio
async def test_timeout_kills_process_and_raises(tmp_path: Path) -> None:
    calls: list[tuple[tuple[Any, ...], dict[str, Any]]] = []
    proc = _DummyProc(delay_seconds=1.0)
    gateway = GitGateway(tmp_path, timeout_seconds=0.01)

    with _patch_exec([proc], calls):
        with pytest.raises(GitCommandError, match="Timed out"):
            await gateway.pull("upstream", "master")

    assert proc.killed is True


@pytest.mark.asyncio
async def test_missing_git_binary_raises_command_error(tmp_path: Path) -> None:
    gateway = GitGateway(tmp_path, git_executable="git-does-not-exist")

    with patch(
        "quotequeue.vcs.gateway.asyncio.create_subprocess_exec",
        new=AsyncMock(side_effect=FileNotFoundError("git-does-not-exist")),
    ):
        with pytest.raises(GitCommandError, match="Failed to start git"):
            await gateway.pull("upstream", "master")


@pytest.mark.asyncio
async def test_add_and_commit_validate_arguments(tmp_path: Path) -> None:
    gateway = GitGateway(tmp_path)

    with pytest.raises(ValueError):
        await gateway.add([])
    with pytest.raises(ValueError):
        await gateway.commit("   ")


def test_open_gateway_reports_missing_working_copy(tmp_path: Path) -> None:
    status = open_gateway(tmp_path / "missing")

    assert status.available is False
    assert status.gateway is None
    assert status.error is not None and "does not exist" in status.error


def test_open_gateway_requires_git_metadata(tmp_path: Path) -> None:
    status = open_gateway(tmp_path)

    assert status.available is False
    assert status.error is not None and "Not a git working copy" in status.error


def test_open_gateway_succeeds_for_working_copy(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()

    status = open_gateway(tmp_path, timeout_seconds=5.0)

    assert status.available is True
    assert status.error is None
    assert status.gateway is not None
    assert status.gateway.working_copy == tmp_path


def test_open_gateway_reports_invalid_timeout(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()

    status = open_gateway(tmp_path, timeout_seconds=0)

    assert status.available is False
    assert status.error == "timeout_seconds must be positive"
