# kubeNav/dispatch/command_registry.py
"""
Command Registry.

Built once at startup from the command modules, then frozen: after ``freeze()`` no
command can be added and lookups are read-only.
"""
import logging
from typing import Dict, Iterable, List, Optional

from kubeNav.core.errors import DuplicateCommandError, RegistryFrozenError
from kubeNav.dispatch.command import Command

logger = logging.getLogger(__name__)


class CommandRegistry:
    """
    Maps every command name and alias to its Command.
    """

    def __init__(self):
        self._by_name: Dict[str, Command] = {}
        self._commands: List[Command] = []
        self._frozen = False

    def register(self, command: Command):
        """
        Registers ``command`` under its name and all of its aliases.

        Raises:
            DuplicateCommandError: if any of its names is already taken.
            RegistryFrozenError: if the registry has been frozen.
        """
        if self._frozen:
            raise RegistryFrozenError(command.name)
        for name in command.names:
            existing = self._by_name.get(name)
            if existing is not None:
                raise DuplicateCommandError(name, existing.name, command.name)
        if len(set(command.names)) != len(command.names):
            raise DuplicateCommandError(command.name, command.name, command.name)
        for name in command.names:
            self._by_name[name] = command
        self._commands.append(command)
        logger.debug(f"Registered command '{command.name}' (aliases: {list(command.aliases)})")

    def register_all(self, commands: Iterable[Command]):
        for command in commands:
            self.register(command)

    def freeze(self):
        self._frozen = True
        logger.debug(f"Command registry frozen with {len(self._commands)} commands")

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lookup(self, name: str) -> Optional[Command]:
        return self._by_name.get(name)

    def names(self) -> List[str]:
        """Every name and alias, sorted."""
        return sorted(self._by_name)

    def commands(self) -> List[Command]:
        """Each command once, in registration order."""
        return list(self._commands)
