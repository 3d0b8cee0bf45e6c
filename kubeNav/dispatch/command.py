# kubeNav/dispatch/command.py
"""
Declarative description of one shell command.

Every command, built-in or resource plug-in, is a ``Command``: a name, aliases, an
argparse argument spec, optional dynamic completers and an executor called as
``executor(args, env, writer)``.
"""
import argparse
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from kubeNav.core.errors import UsageError
from kubeNav.core.k8s_api import RequestContext

Executor = Callable[[argparse.Namespace, Any, Any], None]
# Live candidates for one argument, computed against the active context from the
# flags typed so far.
DynamicCompleter = Callable[[RequestContext, argparse.Namespace], Iterable[str]]
# Candidates computed from local state only (kubeconfig, settings).
LocalCompleter = Callable[[Any], Iterable[str]]


def arg(*flags: str, **kwargs) -> Tuple[Tuple[str, ...], Dict[str, Any]]:
    """Argument spec, same signature as ``ArgumentParser.add_argument``."""
    return flags, kwargs


class CommandArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of printing and exiting."""

    def error(self, message):
        raise UsageError(f"{self.prog}: {message}", self.format_usage())

    def exit(self, status=0, message=None):
        raise UsageError(message or f"{self.prog}: exited with status {status}", self.format_usage())


@dataclass
class Command:
    name: str
    about: str
    executor: Executor
    aliases: Sequence[str] = ()
    arguments: Sequence[Tuple[Tuple[str, ...], Dict[str, Any]]] = ()
    completers: Dict[str, DynamicCompleter] = field(default_factory=dict)
    local_completers: Dict[str, LocalCompleter] = field(default_factory=dict)
    parser: CommandArgumentParser = field(init=False, repr=False)

    def __post_init__(self):
        self.aliases = tuple(self.aliases)
        self.parser = CommandArgumentParser(prog=self.name, description=self.about, add_help=False)
        self.parser.add_argument("-h", "--help", action="store_true", help="Show this help and exit")
        for flags, kwargs in self.arguments:
            self.parser.add_argument(*flags, **kwargs)

    @property
    def names(self) -> Tuple[str, ...]:
        return (self.name,) + self.aliases

    def parse(self, words: List[str]) -> argparse.Namespace:
        """
        Parses the words following the command name.

        Raises:
            UsageError: on any argument error.
        """
        return self.parser.parse_args(words)

    def help_text(self) -> str:
        text = self.parser.format_help()
        if self.aliases:
            text += f"\nAliases: {', '.join(self.aliases)}\n"
        return text

    # --- Introspection used by the completion engine ---
    def option_strings(self) -> List[str]:
        return [s for action in self.parser._actions for s in action.option_strings]

    def option_action(self, option: str) -> Optional[argparse.Action]:
        for action in self.parser._actions:
            if option in action.option_strings:
                return action
        return None

    def positional_actions(self) -> List[argparse.Action]:
        return [action for action in self.parser._actions if not action.option_strings]

    def defaults(self) -> argparse.Namespace:
        return argparse.Namespace(**{action.dest: action.default for action in self.parser._actions})
