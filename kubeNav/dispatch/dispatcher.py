# kubeNav/dispatch/dispatcher.py
"""
Turns one typed line into exactly one command invocation.
"""
import argparse
import logging
from typing import IO, List, Optional, Tuple

from kubeNav.core.environment import Environment
from kubeNav.core.errors import KubeNavError, UnknownCommandError
from kubeNav.core.output import OutputWriter
from kubeNav.dispatch.command import Command
from kubeNav.dispatch.command_registry import CommandRegistry
from kubeNav.parser.line_parser import tokenize

logger = logging.getLogger(__name__)

SELECT_COMMAND = "select"


class Dispatcher:
    """
    Resolves a line against the registry and runs the matching command.

    At most one command runs at a time; ``busy`` is true while it does, and the
    completion engine uses it to stay away from the cluster client.
    """

    def __init__(self, registry: CommandRegistry, env: Environment,
                 out: Optional[IO[str]] = None, err: Optional[IO[str]] = None):
        self.registry = registry
        self.env = env
        self.out = out
        self.err = err
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    def new_writer(self) -> OutputWriter:
        return OutputWriter(self.out, self.err)

    def expand_aliases(self, words: List[str]) -> List[str]:
        """Replaces a user alias in first position by its (tokenized) expansion."""
        if not words:
            return words
        expansion = self.env.settings.aliases.get(words[0])
        if expansion is None or self.registry.lookup(words[0]) is not None:
            return words
        return tokenize(expansion) + words[1:]

    def resolve(self, line: str) -> Tuple[Optional[Command], Optional[argparse.Namespace]]:
        """
        Tokenizes ``line`` and parses it against the matching command.

        Returns:
            (None, None) for an empty line, else the command and its parsed arguments.

        Raises:
            UsageError: on a tokenizer or argument error.
            UnknownCommandError: if no command or alias matches.
        """
        words = self.expand_aliases(tokenize(line))
        if not words:
            return None, None
        command = self.registry.lookup(words[0])
        if command is None and words[0].isdigit() and self.registry.lookup(SELECT_COMMAND):
            command = self.registry.lookup(SELECT_COMMAND)
            words = [SELECT_COMMAND] + words
        if command is None:
            raise UnknownCommandError(words[0])
        return command, command.parse(words[1:])

    def dispatch(self, line: str, writer: Optional[OutputWriter] = None) -> bool:
        """
        Executes one command line.

        Every error is reported through the writer; nothing propagates to the caller.

        Returns:
            True if the command ran to completion, False otherwise.
        """
        writer = writer or self.new_writer()
        try:
            command, args = self.resolve(line)
        except KubeNavError as e:
            writer.error(str(e))
            return False
        if command is None:
            return True
        if args.help:
            writer.write(command.help_text())
            return True

        self._busy = True
        try:
            logger.debug(f"Executing '{command.name}' with {vars(args)}")
            command.executor(args, self.env, writer)
            return True
        except KubeNavError as e:
            writer.error(str(e))
        except KeyboardInterrupt:
            writer.error("Interrupted")
        except Exception as e:
            logger.error(f"Error executing command '{line}': {e}", exc_info=True)
            writer.error(f"Unexpected error executing '{command.name}': {type(e).__name__} - {e}")
        finally:
            self._busy = False
        return False
