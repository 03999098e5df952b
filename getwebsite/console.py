"""Info/debug/error lines for the CLI. Written via tqdm so progress bars stay intact."""

import sys

from tqdm import tqdm

_BLUE = "\033[34m"
_RESET = "\033[0m"


class Console:
    """Diagnostic side channel: info to stdout, debug and errors to stderr."""

    def __init__(self, *, quiet: bool = False, debug: bool = False) -> None:
        self.quiet = quiet
        self.debug_enabled = debug

    def info(self, msg: str) -> None:
        """Printed unless quiet."""
        if not self.quiet:
            tqdm.write(msg, file=sys.stdout)

    def debug(self, msg: str) -> None:
        """Printed only with --debug; blue on a terminal."""
        if not self.debug_enabled:
            return
        line = f"DEBUG: {msg}"
        if sys.stderr.isatty():
            line = f"{_BLUE}{line}{_RESET}"
        tqdm.write(line, file=sys.stderr)

    def error(self, msg: str) -> None:
        tqdm.write(msg, file=sys.stderr)


# Default for library callers and tests: nothing but errors
SILENT = Console(quiet=True)
