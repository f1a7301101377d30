"""The YARD documentation server — a process-wide singleton found by its port.

:class:`YardServer` starts ``yard server --daemon`` when nothing listens on
the configured port, discovers the owning processes (and their working
directory) through ``psutil``, and terminates them on request.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import psutil

from open_gemdocs.config.models import YardSettings
from open_gemdocs.errors import CommandError, DocServerError
from open_gemdocs.utils.process import run_command

logger = logging.getLogger(__name__)

_TERMINATE_GRACE = 3.0


@runtime_checkable
class DocServer(Protocol):
    """Lifecycle of the external documentation server."""

    @property
    def port(self) -> int: ...

    async def is_listening(self) -> bool: ...
    def owning_pids(self) -> list[int]: ...
    def working_directory(self, pid: int) -> Path | None: ...
    async def start(self, directory: Path) -> None: ...
    async def wait_until_listening(self) -> bool: ...
    async def stop(self, pids: list[int]) -> None: ...
    def docs_url(self, gem_name: str, object_path: str | None = None) -> str: ...


class YardServer:
    """Drives ``yard server`` on the configured port.

    Satisfies the :class:`DocServer` protocol.
    """

    def __init__(self, settings: YardSettings | None = None) -> None:
        self._settings = settings or YardSettings()

    @property
    def port(self) -> int:
        return self._settings.port

    async def is_listening(self) -> bool:
        """Return ``True`` if something accepts connections on the port."""
        try:
            _reader, writer = await asyncio.wait_for(
                asyncio.open_connection(self._settings.host, self.port),
                timeout=self._settings.poll_interval * 4,
            )
        except (OSError, TimeoutError):
            return False
        writer.close()
        with contextlib.suppress(OSError):
            await writer.wait_closed()
        return True

    def owning_pids(self) -> list[int]:
        """PIDs of the processes listening on the port."""
        try:
            connections = psutil.net_connections(kind="tcp")
        except psutil.AccessDenied:
            return self._scan_processes()
        return sorted({
            conn.pid
            for conn in connections
            if conn.pid and self._is_listener(conn)
        })

    def working_directory(self, pid: int) -> Path | None:
        try:
            return Path(psutil.Process(pid).cwd())
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            return None

    async def start(self, directory: Path) -> None:
        """Launch ``yard server --daemon`` from *directory*.

        Serves the bundle when *directory* holds a ``Gemfile.lock``, otherwise
        every installed gem.
        """
        mode = "--gemfile" if (directory / "Gemfile.lock").exists() else "--gems"
        command = [self._settings.command, "server", "--daemon", "--port", str(self.port), mode]
        logger.info("Starting YARD server on port %d (%s) in %s", self.port, mode, directory)
        try:
            await run_command(
                command,
                cwd=directory,
                timeout=self._settings.startup_timeout,
                check=True,
            )
        except CommandError as exc:
            raise DocServerError(str(exc)) from exc

    async def wait_until_listening(self) -> bool:
        """Poll the port until it accepts connections or the startup timeout expires."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._settings.startup_timeout
        while True:
            if await self.is_listening():
                return True
            if loop.time() >= deadline:
                logger.warning(
                    "YARD server did not listen on port %d within %ss",
                    self.port,
                    self._settings.startup_timeout,
                )
                return False
            await asyncio.sleep(self._settings.poll_interval)

    async def stop(self, pids: list[int]) -> None:
        """Terminate *pids*, killing any that outlive the grace period."""
        procs: list[psutil.Process] = []
        for pid in pids:
            try:
                proc = psutil.Process(pid)
                proc.terminate()
                procs.append(proc)
            except psutil.NoSuchProcess:
                continue
            except psutil.AccessDenied as exc:
                raise DocServerError(f"Not allowed to stop process {pid}") from exc

        logger.info("Stopping YARD server processes: %s", ", ".join(str(p) for p in pids))
        _gone, alive = await asyncio.to_thread(psutil.wait_procs, procs, timeout=_TERMINATE_GRACE)
        for proc in alive:
            logger.warning("Killing unresponsive YARD server process %d", proc.pid)
            try:
                proc.kill()
            except psutil.NoSuchProcess:
                continue

    def docs_url(self, gem_name: str, object_path: str | None = None) -> str:
        url = f"{self._settings.base_url}/docs/{gem_name}"
        if object_path:
            url += "/" + object_path.replace("::", "/")
        return url

    def _is_listener(self, conn: Any) -> bool:
        return bool(conn.laddr) and conn.laddr.port == self.port and conn.status == psutil.CONN_LISTEN

    def _scan_processes(self) -> list[int]:
        pids: set[int] = set()
        for proc in psutil.process_iter(["pid"]):
            try:
                connections = proc.net_connections(kind="tcp")
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue
            if any(self._is_listener(conn) for conn in connections):
                pids.add(proc.pid)
        return sorted(pids)
