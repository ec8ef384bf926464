"""Run one command while streaming both of its output pipes."""

import asyncio
import logging
import time
from collections.abc import Callable
from pathlib import Path

from watchrun_engine.models import (
    CommandResult,
    CommandSpec,
    OutputLine,
    RunStatus,
    Severity,
    Stream,
)
from watchrun_engine.shell import UserShell, build_argv

logger = logging.getLogger(__name__)

# Markers that flag a stdout line as an error in build-tool mode
ERROR_MARKERS = ("error:", "warning:")

# Read buffer size in bytes; longer lines are joined from several reads
LINE_LIMIT = 1024 * 1024


def classify_line(text: str, stream: Stream, build_tool_mode: bool = False) -> Severity:
    """Classify a line of output for display.

    Args:
        text: Line content
        stream: Stream the line came from
        build_tool_mode: Whether content markers also flag errors

    Returns:
        ERROR for stderr lines (and marked lines in build-tool mode), NORMAL otherwise
    """
    if stream is Stream.STDERR:
        return Severity.ERROR
    if build_tool_mode and any(marker in text for marker in ERROR_MARKERS):
        return Severity.ERROR
    return Severity.NORMAL


class CommandSupervisor:
    """Spawns a command and drains stdout and stderr concurrently.

    Each pipe has its own drain task, so a full pipe on one side can never
    block the child while the other side is being read. Both drains reach
    end-of-stream before the process is waited on, so no output arrives
    after the termination report.
    """

    def __init__(
        self,
        on_line: Callable[[OutputLine], None] | None = None,
        build_tool_mode: bool = False,
        shell: UserShell | None = None,
        line_limit: int = LINE_LIMIT,
    ):
        """Initialize supervisor.

        Args:
            on_line: Called with each output line as it arrives
            build_tool_mode: Flag stdout lines containing error/warning markers
            shell: Shell for shell-line commands (discovered when omitted)
            line_limit: Read buffer size for each pipe in bytes
        """
        self.on_line = on_line
        self.build_tool_mode = build_tool_mode
        self.shell = shell
        self.line_limit = line_limit

    async def run(self, spec: CommandSpec, working_dir: str | Path) -> CommandResult:
        """Run a command to completion.

        Args:
            spec: Command to run
            working_dir: Working directory of the child process

        Returns:
            CommandResult describing the outcome. Never raises for spawn,
            wait or exit failures.
        """
        argv = build_argv(spec, self.shell)
        started = time.monotonic()
        logger.debug(f"Spawning {argv!r} in {working_dir}")

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                cwd=str(working_dir),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                limit=self.line_limit,
            )
        except (OSError, ValueError) as e:
            # ValueError: argv or cwd contains a NUL byte
            logger.debug(f"Failed to spawn {argv[0]!r}: {e}")
            return CommandResult(
                status=RunStatus.SPAWN_FAILED,
                spawn_error=e,
                duration=time.monotonic() - started,
            )

        result = CommandResult(status=RunStatus.UNKNOWN)
        try:
            await asyncio.gather(
                self._drain(process.stdout, Stream.STDOUT, result.stdout_lines),
                self._drain(process.stderr, Stream.STDERR, result.stderr_lines),
            )
        except asyncio.CancelledError:
            if process.returncode is None:
                process.kill()
                await asyncio.shield(process.wait())
            raise

        try:
            returncode = await process.wait()
        except (OSError, ChildProcessError) as e:
            logger.debug(f"Failed to wait for pid {process.pid}: {e}")
            result.wait_error = e
            returncode = None

        if returncode is not None:
            result.status = RunStatus.SUCCESS if returncode == 0 else RunStatus.FAILED
            if returncode < 0:
                result.signal = -returncode
            else:
                result.exit_code = returncode

        result.duration = time.monotonic() - started
        logger.debug(f"pid {process.pid} finished: {result.status.value} in {result.duration:.2f}s")
        return result

    async def _drain(self, reader: asyncio.StreamReader, stream: Stream, sink: list[str]) -> None:
        """Read one pipe line by line until end-of-stream.

        Args:
            reader: Pipe to drain
            stream: Which stream the pipe carries
            sink: List collecting the decoded lines
        """
        pending = bytearray()
        while True:
            try:
                pending += await reader.readuntil(b"\n")
            except asyncio.LimitOverrunError as e:
                # Line longer than the buffer: take what is buffered and keep reading
                pending += await reader.readexactly(e.consumed)
                continue
            except asyncio.IncompleteReadError as e:
                # End-of-stream; a final line may lack its terminator
                pending += e.partial
                if not pending:
                    break

            raw = bytes(pending)
            pending.clear()
            text = raw.decode("utf-8", errors="replace").rstrip("\r\n")
            sink.append(text)
            line = OutputLine(text, stream, classify_line(text, stream, self.build_tool_mode))

            if self.on_line is None:
                continue
            try:
                self.on_line(line)
            except Exception as e:
                logger.exception(f"Error in output callback for {stream.value}: {e}")
