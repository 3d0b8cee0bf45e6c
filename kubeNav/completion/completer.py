# kubeNav/completion/completer.py
"""
Completion engine: static candidates declared at registration time, followed by live
candidates looked up on the cluster for the active context.
"""
import argparse
import logging
from typing import Iterable, List, Optional, Tuple

from kubeNav.core.environment import Environment
from kubeNav.dispatch.command import Command
from kubeNav.dispatch.command_registry import CommandRegistry
from kubeNav.parser.line_parser import tokenize_partial

logger = logging.getLogger(__name__)


def _takes_value(action: argparse.Action) -> bool:
    return action.nargs != 0


def _merge(*sources: Iterable[str]) -> List[str]:
    seen = set()
    merged = []
    for source in sources:
        for candidate in source:
            if candidate not in seen:
                seen.add(candidate)
                merged.append(candidate)
    return merged


class Completer:
    """
    Produces completion candidates for a partially typed line.

    Never changes the Environment. Cluster lookups are skipped while a command is
    running and are bounded by the ``completion_timeout`` setting; a slow or failing
    lookup simply contributes nothing.
    """

    def __init__(self, registry: CommandRegistry, env: Environment, dispatcher=None):
        self.registry = registry
        self.env = env
        self.dispatcher = dispatcher

    def complete(self, line: str, cursor: Optional[int] = None) -> List[str]:
        cursor = len(line) if cursor is None else cursor
        words = tokenize_partial(line[:cursor])
        current = words[-1]
        if len(words) == 1:
            names = _merge(self.registry.names(), sorted(self.env.settings.aliases))
            return [n for n in names if n.startswith(current)]

        command = self._command_for(words[0])
        if command is None:
            return []
        static, dest = self._static_candidates(command, words[1:-1], current)
        dynamic = self._dynamic_candidates(command, dest, words[1:-1]) if dest else []
        return [c for c in _merge(static, dynamic) if c.startswith(current)]

    def _command_for(self, word: str) -> Optional[Command]:
        command = self.registry.lookup(word)
        if command is None and word in self.env.settings.aliases:
            expansion = tokenize_partial(self.env.settings.aliases[word])
            command = self.registry.lookup(expansion[0]) if expansion and expansion[0] else None
        return command

    def _static_candidates(self, command: Command, previous: List[str],
                           current: str) -> Tuple[List[str], Optional[str]]:
        """Static candidates and the dest of the argument being completed."""
        if current.startswith("-"):
            return sorted(command.option_strings()), None

        if previous:
            action = command.option_action(previous[-1])
            if action is not None and _takes_value(action):
                return self._declared_values(command, action), action.dest

        positionals = command.positional_actions()
        index = self._positional_index(command, previous)
        if index < len(positionals):
            action = positionals[index]
            return self._declared_values(command, action), action.dest
        return [], None

    def _positional_index(self, command: Command, previous: List[str]) -> int:
        index = 0
        skip_value = False
        for word in previous:
            if skip_value:
                skip_value = False
                continue
            if word.startswith("-"):
                action = command.option_action(word)
                skip_value = action is not None and _takes_value(action)
                continue
            index += 1
        return index

    def _declared_values(self, command: Command, action: argparse.Action) -> List[str]:
        values = [str(c) for c in (action.choices or [])]
        local = command.local_completers.get(action.dest)
        if local is not None:
            values.extend(local(self.env))
        return values

    def _typed_flags(self, command: Command, previous: List[str]) -> argparse.Namespace:
        """Argument defaults, with the value-less flags already typed switched on."""
        args = command.defaults()
        for word in previous:
            action = command.option_action(word)
            if action is not None and not _takes_value(action) and action.const is not None:
                setattr(args, action.dest, action.const)
        return args

    def _dynamic_candidates(self, command: Command, dest: str, previous: List[str]) -> List[str]:
        lookup = command.completers.get(dest)
        if lookup is None:
            return []
        if self.dispatcher is not None and self.dispatcher.busy:
            logger.debug("Command in progress, completing from static candidates only")
            return []
        args = self._typed_flags(command, previous)
        result = self.env.lookup_for_completion(lambda ctx: list(lookup(ctx, args)))
        return sorted(result) if result else []
