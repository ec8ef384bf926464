"""Shared data models for watchrun_engine."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class EventKind(Enum):
    """Normalized kind of a raw filesystem change."""

    CREATED = "created"
    DATA_MODIFIED = "data_modified"
    NAME_MODIFIED = "name_modified"
    REMOVED = "removed"
    DIRECTORY = "directory"
    METADATA = "metadata"
    ACCESS = "access"
    OTHER = "other"


@dataclass(frozen=True)
class ChangeEvent:
    """A raw change notification produced by an event source."""

    kind: EventKind
    """What happened to the paths."""

    paths: tuple[Path, ...]
    """Affected paths, in the order the source reported them (source first for renames)."""

    timestamp: float
    """Monotonic clock reading taken when the event was received."""


@dataclass(frozen=True)
class ShellLine:
    """A command line run through the user's login shell."""

    line: str

    def __str__(self) -> str:
        return self.line


@dataclass(frozen=True)
class Argv:
    """A pre-tokenized program and argument list, run without a shell."""

    program: str
    args: tuple[str, ...] = ()

    def __str__(self) -> str:
        return " ".join((self.program, *self.args))


CommandSpec = ShellLine | Argv


@dataclass(frozen=True)
class WatchConfig:
    """Resolved watch configuration. Immutable for the process lifetime."""

    directory: Path
    """Directory to watch (recursively); also the command's working directory."""

    command: CommandSpec
    """Command to execute when changes settle."""

    extensions: frozenset[str] = frozenset()
    """Allowed extensions without leading dot. Empty means every path matches."""

    quiet_period_ms: int = 500
    """Silence required after the last qualifying event before firing."""

    window_ms: int = 1000
    """Trailing window of retained event timestamps."""

    tick_ms: int = 100
    """Poll interval for the fire condition."""

    build_tool_mode: bool = False
    """Also flag stdout lines containing ``error:``/``warning:`` as errors."""

    run_on_start: bool = False
    """Run the command once before waiting for the first change."""

    @property
    def quiet_period(self) -> float:
        return self.quiet_period_ms / 1000.0

    @property
    def window(self) -> float:
        return self.window_ms / 1000.0

    @property
    def tick(self) -> float:
        return self.tick_ms / 1000.0


class Stream(Enum):
    """Output channel of a child process."""

    STDOUT = "stdout"
    STDERR = "stderr"


class Severity(Enum):
    """Display severity of a line of command output."""

    NORMAL = "normal"
    ERROR = "error"


@dataclass(frozen=True)
class OutputLine:
    """One line of command output, terminator stripped."""

    text: str
    stream: Stream
    severity: Severity = Severity.NORMAL

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR


class RunStatus(Enum):
    """Terminal status of one command invocation."""

    SUCCESS = "success"
    FAILED = "failed"
    UNKNOWN = "unknown"
    SPAWN_FAILED = "spawn_failed"


@dataclass
class CommandResult:
    """Outcome of one command invocation. Consumed for printing, then discarded."""

    status: RunStatus
    """Terminal status."""

    exit_code: int | None = None
    """Process exit code, when the process exited normally."""

    signal: int | None = None
    """Signal number, when the process was killed by a signal."""

    stdout_lines: list[str] = field(default_factory=list)
    """Captured stdout lines in arrival order."""

    stderr_lines: list[str] = field(default_factory=list)
    """Captured stderr lines in arrival order."""

    spawn_error: Exception | None = None
    """Why the command could not be started."""

    wait_error: BaseException | None = None
    """Why the exit status could not be determined."""

    duration: float = 0.0
    """Wall time of the invocation in seconds."""

    @property
    def succeeded(self) -> bool:
        return self.status is RunStatus.SUCCESS

    def describe(self) -> str:
        """Get a one-line human-readable summary of the outcome.

        Returns:
            Summary such as "Command completed successfully" or
            "Command failed with exit code 2".
        """
        if self.status is RunStatus.SUCCESS:
            return "Command completed successfully"
        if self.status is RunStatus.SPAWN_FAILED:
            return f"Command could not be started: {self.spawn_error}"
        if self.status is RunStatus.UNKNOWN:
            return f"Could not determine command exit status: {self.wait_error}"
        if self.signal is not None:
            return f"Command failed: killed by signal {self.signal}"
        if self.exit_code is not None:
            return f"Command failed with exit code {self.exit_code}"
        return "Command failed"
