# kubeNav/core/output.py
"""
Output sink handed to every command invocation.
"""
import sys
from typing import IO, List, Optional


class OutputWriter:
    """
    Writes command output and user-visible errors.

    The dispatcher creates a fresh writer for each invocation, so ``lines`` only ever
    holds the output of a single command.
    """

    def __init__(self, out: Optional[IO[str]] = None, err: Optional[IO[str]] = None):
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.lines: List[str] = []
        self.errors: List[str] = []

    def write(self, text: str = ""):
        """Writes one or more lines to the output stream."""
        for line in text.splitlines() or [""]:
            self.lines.append(line)
        self.out.write(text if text.endswith("\n") else text + "\n")
        self.out.flush()

    def info(self, message: str):
        self.write(f"ℹ️ {message}")

    def success(self, message: str):
        self.write(f"✅ {message}")

    def warning(self, message: str):
        self._write_err(f"⚠️ {message}")

    def error(self, message: str):
        self._write_err(f"❌ {message}")

    def _write_err(self, text: str):
        self.errors.append(text)
        self.err.write(text + "\n")
        self.err.flush()
