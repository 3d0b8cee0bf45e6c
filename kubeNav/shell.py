# kubeNav/shell.py
"""
Runs the KubeNav interactive shell, or a single scripted command line.
Both go through the same Dispatcher.
"""
import logging
import readline
from typing import List, Optional

from kubeNav.completion.completer import Completer
from kubeNav.constants import HISTORY_LENGTH
from kubeNav.core.environment import Environment
from kubeNav.core.output import OutputWriter
from kubeNav.dispatch.command_registry import CommandRegistry
from kubeNav.dispatch.dispatcher import Dispatcher

logger = logging.getLogger(__name__)


class Shell:
    def __init__(self, registry: CommandRegistry, env: Environment, dispatcher: Optional[Dispatcher] = None):
        self.registry = registry
        self.env = env
        self.dispatcher = dispatcher or Dispatcher(registry, env)
        self.completer = Completer(registry, env, self.dispatcher)
        self._matches: List[str] = []

    # --- readline integration ---
    def _readline_complete(self, text: str, state: int) -> Optional[str]:
        if state == 0:
            try:
                self._matches = self.completer.complete(readline.get_line_buffer(), readline.get_endidx())
            except Exception as e:
                logger.debug(f"Completion failed: {type(e).__name__} - {e}")
                self._matches = []
        return self._matches[state] if state < len(self._matches) else None

    def _setup_readline(self, writer: OutputWriter):
        readline.set_completer(self._readline_complete)
        readline.set_completer_delims(" \t\n")
        readline.parse_and_bind("tab: complete")
        readline.set_history_length(HISTORY_LENGTH)
        try:
            readline.read_history_file(str(self.env.history_path))
        except FileNotFoundError:
            logger.debug(f"No history file at '{self.env.history_path}' yet")
        except OSError as e:
            writer.warning(f"Could not load history from '{self.env.history_path}': {e}")

    def _write_history(self, writer: OutputWriter):
        try:
            self.env.history_path.parent.mkdir(parents=True, exist_ok=True)
            readline.write_history_file(str(self.env.history_path))
        except OSError as e:
            writer.warning(f"Could not save history to '{self.env.history_path}': {e}")

    # --- modes ---
    def run_once(self, line: str) -> bool:
        """Scripted mode: one command line, then return."""
        try:
            return self.dispatcher.dispatch(line)
        finally:
            self.env.close()

    def run(self):
        """Interactive mode: read-eval-print until quit or end of input."""
        writer = self.dispatcher.new_writer()
        self._setup_readline(writer)
        writer.write("KubeNav - interactive shell for Kubernetes clusters.")
        writer.write("Type 'help' to list the commands, 'quit' or Ctrl-D to leave.")
        try:
            while not self.env.exit_requested:
                try:
                    line = input(self.env.prompt())
                except EOFError:
                    writer.write("")
                    break
                except KeyboardInterrupt:
                    # Ctrl-C at the prompt drops the current line.
                    writer.write("")
                    continue
                if not line.strip():
                    continue
                self.dispatcher.dispatch(line)
        finally:
            self.shutdown(writer)

    def shutdown(self, writer: OutputWriter):
        self._write_history(writer)
        self.env.save_settings(writer)
        self.env.close()
        writer.write("👋 Goodbye!")
