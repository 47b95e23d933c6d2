"""Tests for RepomixPackager — subprocess calls are mocked."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from codescribe.collaborators.errors import PackagingError
from codescribe.collaborators.models import PackOptions
from codescribe.collaborators.repomix import RepomixPackager


def _process(returncode: int = 0, stderr: bytes = b"") -> MagicMock:
    proc = MagicMock()
    proc.returncode = returncode
    proc.pid = 4242
    proc.communicate = AsyncMock(return_value=(b"", stderr))
    proc.wait = AsyncMock(return_value=returncode)
    return proc


def _writing_exec(content: str, proc: MagicMock) -> AsyncMock:
    """Fake ``create_subprocess_exec`` that writes *content* to the ``--output`` path."""

    async def fake(*argv: str, **kwargs: Any) -> MagicMock:
        output = Path(argv[argv.index("--output") + 1])
        output.write_text(content, encoding="utf-8")
        return proc

    return AsyncMock(side_effect=fake)


@pytest.fixture
async def packager(tmp_path: Path) -> RepomixPackager:
    packer = RepomixPackager(["repomix"], temp_dir=tmp_path / "scratch")
    await packer.initialize()
    return packer


class TestBuildArgs:
    def test_defaults(self, tmp_path: Path) -> None:
        packer = RepomixPackager(temp_dir=tmp_path)
        args = packer.build_args(["--remote", "o/r"], PackOptions(), tmp_path / "out")

        assert args == [
            "--remote",
            "o/r",
            "--output",
            str(tmp_path / "out"),
            "--style",
            "markdown",
            "--no-security-check",
        ]

    def test_security_and_ignores(self, tmp_path: Path) -> None:
        packer = RepomixPackager(temp_dir=tmp_path)
        options = PackOptions(style="xml", security_check=True, ignore_patterns=["dist", "*.log"])
        args = packer.build_args(["/src"], options, tmp_path / "out")

        assert "--no-security-check" not in args
        assert args[-2:] == ["--ignore", "dist,*.log"]
        assert args[args.index("--style") + 1] == "xml"


class TestPackaging:
    async def test_remote_reads_and_removes_output(self, packager: RepomixPackager) -> None:
        exec_mock = _writing_exec("packed!", _process())
        with patch("asyncio.create_subprocess_exec", exec_mock):
            content = await packager.package_remote("owner/repo", PackOptions())

        assert content == "packed!"
        argv = exec_mock.await_args.args
        assert argv[:3] == ("repomix", "--remote", "owner/repo")
        assert list(packager.temp_dir.iterdir()) == []

    async def test_local_forces_security(self, packager: RepomixPackager) -> None:
        exec_mock = _writing_exec("secure", _process())
        with patch("asyncio.create_subprocess_exec", exec_mock):
            content = await packager.package_local_with_security("/src", PackOptions(security_check=False))

        assert content == "secure"
        argv = exec_mock.await_args.args
        assert argv[1] == "/src"
        assert "--no-security-check" not in argv

    async def test_nonzero_exit(self, packager: RepomixPackager) -> None:
        exec_mock = AsyncMock(return_value=_process(returncode=2, stderr=b"repository not found"))
        with patch("asyncio.create_subprocess_exec", exec_mock):
            with pytest.raises(PackagingError) as exc_info:
                await packager.package_remote("owner/missing", PackOptions())

        assert exc_info.value.exit_code == 2
        assert str(exc_info.value) == "Repomix exited with code 2: repository not found"

    async def test_failed_run_removes_partial_output(self, packager: RepomixPackager) -> None:
        exec_mock = _writing_exec("half written", _process(returncode=3, stderr=b"clone failed"))
        with patch("asyncio.create_subprocess_exec", exec_mock):
            with pytest.raises(PackagingError, match="code 3"):
                await packager.package_remote("owner/repo", PackOptions())

        assert list(packager.temp_dir.iterdir()) == []

    async def test_cancelled_run_removes_partial_output(self, packager: RepomixPackager) -> None:
        proc = _process()
        proc.returncode = None
        proc.communicate = AsyncMock(side_effect=asyncio.CancelledError)
        with patch("asyncio.create_subprocess_exec", _writing_exec("partial", proc)):
            with pytest.raises(asyncio.CancelledError):
                await packager.package_local_with_security("/src", PackOptions())

        assert list(packager.temp_dir.iterdir()) == []

    async def test_missing_output(self, packager: RepomixPackager) -> None:
        exec_mock = AsyncMock(return_value=_process())
        with patch("asyncio.create_subprocess_exec", exec_mock):
            with pytest.raises(PackagingError, match="Output file not created"):
                await packager.package_remote("owner/repo", PackOptions())

    async def test_spawn_failure(self, packager: RepomixPackager) -> None:
        exec_mock = AsyncMock(side_effect=FileNotFoundError("npx"))
        with patch("asyncio.create_subprocess_exec", exec_mock):
            with pytest.raises(PackagingError, match="npx"):
                await packager.package_remote("owner/repo", PackOptions())

    async def test_cancel_kills_process(self, packager: RepomixPackager) -> None:
        proc = _process()
        proc.returncode = None
        proc.communicate = AsyncMock(side_effect=asyncio.CancelledError)
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
            with pytest.raises(asyncio.CancelledError):
                await packager.package_remote("owner/repo", PackOptions())

        proc.kill.assert_called_once()
        proc.wait.assert_awaited_once()


class TestLifecycle:
    async def test_initialize_creates_temp_dir(self, tmp_path: Path) -> None:
        packer = RepomixPackager(temp_dir=tmp_path / "a" / "b")
        await packer.initialize()
        assert packer.temp_dir.is_dir()

    async def test_initialize_failure(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("")
        packer = RepomixPackager(temp_dir=blocker / "sub")
        with pytest.raises(PackagingError, match="Cannot create"):
            await packer.initialize()

    async def test_close_terminates_running(self, packager: RepomixPackager) -> None:
        release = asyncio.Event()
        proc = _process()
        proc.returncode = None

        async def communicate() -> tuple[bytes, bytes]:
            await release.wait()
            return b"", b""

        proc.communicate = AsyncMock(side_effect=communicate)

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
            task = asyncio.create_task(packager.package_remote("owner/repo", PackOptions()))
            await asyncio.sleep(0.01)
            await packager.close()

        proc.terminate.assert_called_once()
        proc.wait.assert_awaited()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
