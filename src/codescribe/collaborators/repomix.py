"""RepomixPackager — delegates repository packing to the ``repomix`` CLI.

Each call spawns one subprocess that writes its output to a scratch file,
which is read back and removed. Running processes are tracked so
:meth:`RepomixPackager.close` can terminate them when the server stops.
"""

from __future__ import annotations

import asyncio
import logging
import tempfile
from collections.abc import Sequence
from pathlib import Path
from uuid import uuid4

from codescribe.collaborators.errors import PackagingError
from codescribe.collaborators.models import PackOptions

logger = logging.getLogger(__name__)

DEFAULT_COMMAND: tuple[str, ...] = ("npx", "--yes", "repomix")


class RepomixPackager:
    """Runs repomix as a subprocess.

    Usage::

        packager = RepomixPackager()
        await packager.initialize()
        text = await packager.package_remote("owner/repo", PackOptions(style="xml"))
        await packager.close()
    """

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_COMMAND,
        *,
        temp_dir: Path | None = None,
        env: dict[str, str] | None = None,
    ) -> None:
        self._command = list(command)
        self._temp_dir = temp_dir or Path(tempfile.gettempdir()) / "codescribe-repomix"
        self._env = env
        self._processes: set[asyncio.subprocess.Process] = set()

    @property
    def temp_dir(self) -> Path:
        return self._temp_dir

    async def initialize(self) -> None:
        """Create the scratch directory."""
        try:
            self._temp_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PackagingError(f"Cannot create {self._temp_dir}: {exc}") from exc

    async def package_remote(self, url: str, options: PackOptions) -> str:
        """Pack a remote repository (``owner/repo`` or a full URL)."""
        logger.info("Packing remote repository %s", url)
        return await self._pack(["--remote", url], options, prefix="repo")

    async def package_local_with_security(self, path: str, options: PackOptions) -> str:
        """Pack a local directory with repomix's secret scanning enabled."""
        logger.info("Packing %s with security checks", path)
        secured = options.model_copy(update={"security_check": True})
        return await self._pack([path], secured, prefix="local")

    async def close(self) -> None:
        """Terminate any repomix process still running."""
        for proc in list(self._processes):
            if proc.returncode is None:
                logger.warning("Terminating repomix process %s", proc.pid)
                proc.terminate()
                await proc.wait()
        self._processes.clear()

    def build_args(self, target: list[str], options: PackOptions, output: Path) -> list[str]:
        args = [*target, "--output", str(output), "--style", options.style]
        if not options.security_check:
            args.append("--no-security-check")
        if options.ignore_patterns:
            args.extend(["--ignore", ",".join(options.ignore_patterns)])
        return args

    async def _pack(self, target: list[str], options: PackOptions, *, prefix: str) -> str:
        output = self._temp_dir / f"{prefix}-{uuid4().hex}.out"
        try:
            await self._run(self.build_args(target, options, output))
            try:
                return output.read_text(encoding="utf-8")
            except FileNotFoundError as exc:
                msg = "Output file not created. Repomix may have failed silently."
                raise PackagingError(msg) from exc
            except OSError as exc:
                raise PackagingError(f"Cannot read repomix output: {exc}") from exc
        finally:
            try:
                output.unlink(missing_ok=True)
            except OSError as exc:
                logger.warning("Failed to clean up %s: %s", output, exc)

    async def _run(self, args: list[str]) -> str:
        logger.debug("Running repomix with args %s", args)
        try:
            proc = await asyncio.create_subprocess_exec(
                *self._command,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=self._env,
            )
        except OSError as exc:
            raise PackagingError(str(exc)) from exc

        self._processes.add(proc)
        try:
            stdout, stderr = await proc.communicate()
        except asyncio.CancelledError:
            # The request was abandoned; the process is ours to reap.
            if proc.returncode is None:
                proc.kill()
                await proc.wait()
            raise
        finally:
            self._processes.discard(proc)

        err_text = stderr.decode(errors="replace").strip() if stderr else ""
        if proc.returncode != 0:
            raise PackagingError(err_text, exit_code=proc.returncode)
        if err_text:
            logger.warning("repomix stderr: %s", err_text)
        return stdout.decode(errors="replace") if stdout else ""
