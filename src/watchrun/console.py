"""Terminal rendering of watch-loop notifications using rich."""

from rich.console import Console
from rich.text import Text

from watchrun_engine.models import CommandResult, OutputLine, WatchConfig

ERROR_STYLE = "red"
SUCCESS_STYLE = "green"


def render_line(line: OutputLine) -> Text:
    """Render a line of command output. Content is never interpreted as markup."""
    return Text(line.text, style=ERROR_STYLE if line.is_error else "")


def render_result(result: CommandResult) -> Text:
    """Render the terminal status line of a run."""
    style = SUCCESS_STYLE if result.succeeded else ERROR_STYLE
    return Text(f"{result.describe()} ({result.duration:.2f}s)", style=style)


class ConsoleNotifier:
    """Prints notifications to the terminal.

    Normal output goes to stdout; error-severity lines and failures go to
    stderr, highlighted in red.
    """

    def __init__(self, out: Console | None = None, err: Console | None = None):
        """Initialize notifier.

        Args:
            out: Console for normal output (stdout by default)
            err: Console for errors (stderr by default)
        """
        self.out = out or Console(highlight=False)
        self.err = err or Console(stderr=True, highlight=False)

    def watching(self, config: WatchConfig, shell: str | None) -> None:
        extensions = ", ".join(sorted(config.extensions)) or "(all files)"
        self.out.print(f"Watching directory: {config.directory}", markup=False)
        self.out.print(f"Filtering for extensions: {extensions}", markup=False)
        if shell:
            self.out.print(f"Using shell: {shell}", markup=False)
        self.out.print(f"Will execute command: {config.command}", markup=False)

    def change_detected(self) -> None:
        self.out.print()
        self.out.print(Text("File change detected!", style="bold"))
        self.out.print("Executing command...", markup=False)
        self.out.print()

    def output(self, line: OutputLine) -> None:
        console = self.err if line.is_error else self.out
        console.print(render_line(line), soft_wrap=True)

    def finished(self, result: CommandResult) -> None:
        console = self.out if result.succeeded else self.err
        console.print()
        console.print(render_result(result), soft_wrap=True)

    def waiting(self) -> None:
        self.out.print()
        self.out.print("Waiting for file changes...", markup=False)
