"""Terminal reporting for the providerci CLI."""

from __future__ import annotations

import sys
from typing import Optional


class Console:
    """
    Everything the CLI prints goes through here.

    Progress goes to stdout; errors and debug lines go to stderr.
    """

    def __init__(self, debug: bool = False):
        self.debug = debug

    def print_generation_started(self, provider: str, file_count: int, out_dir: str) -> None:
        print(f"\nPROVIDER: {provider}")
        print(f"Files: {file_count}")
        print(f"Output: {out_dir}")

    def print_file_written(self, path: str) -> None:
        print(f"  wrote {path}")

    def print_check_passed(self, workflow: str, stages: int) -> None:
        """Report a dependency check; silent unless --debug."""
        self.print_debug(f"{workflow}: needs resolve in {stages} stage(s)")

    def print_results(self, results: dict[str, str]) -> None:
        """Print one status line per provider, then a count of failures."""
        print("\n" + "=" * 40)
        print("RESULTS")
        print("=" * 40)
        for provider, status in results.items():
            label = "SUCCESS" if status == "ok" else status.upper()
            print(f"  {provider}: {label}")
        failed = sum(1 for s in results.values() if s != "ok")
        if failed:
            print(f"\n{failed} of {len(results)} provider(s) failed")

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print a structured error to stderr.

        Args:
            title: Short heading, e.g. "Unknown provider"
            message: The error itself
            details: Extra lines, indented under the message
            suggestion: A command or hint shown last
        """
        out = sys.stderr
        print(f"\nERROR: {title}", file=out)
        print(message, file=out)
        for line in details or []:
            print(f"  {line}", file=out)
        if suggestion:
            print(f"\n{suggestion}", file=out)

    def print_validation_errors(self, provider: str, errors: list[dict]) -> None:
        """List every offending config field, not only the first."""
        for err in errors:
            print(f"  {provider}: {err['field']}: {err['reason']}", file=sys.stderr)

    def print_exception(self, exc: Exception) -> None:
        if self.debug:
            import traceback
            traceback.print_exc()
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_info(self, message: str) -> None:
        print(message)

    def print_debug(self, message: str) -> None:
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


# Set by the CLI group callback
_console: Optional[Console] = None


def get_console() -> Console:
    """Return the shared console, creating a non-debug one on first use."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    global _console
    _console = console
