# kubeNav/modules/__init__.py
"""
Command modules. Each sub-package exposes ``COMMANDS`` in its ``commands`` module;
``build_registry`` collects them all into one frozen CommandRegistry.
"""
import importlib
import logging
import pkgutil
from typing import List, Optional

from kubeNav.dispatch.command import Command
from kubeNav.dispatch.command_registry import CommandRegistry

logger = logging.getLogger(__name__)

_registry: Optional[CommandRegistry] = None


def load_all_command_modules() -> List[Command]:
    """Imports every ``kubeNav.modules.<name>.commands`` and returns their commands."""
    commands: List[Command] = []
    for _finder, name, ispkg in sorted(pkgutil.iter_modules(__path__), key=lambda m: m[1]):
        if not ispkg:
            continue
        full_module_name = f"{__name__}.{name}.commands"
        module = importlib.import_module(full_module_name)
        module_commands = getattr(module, "COMMANDS", [])
        logger.debug(f"Loaded {len(module_commands)} commands from '{full_module_name}'")
        commands.extend(module_commands)
    return commands


def build_registry() -> CommandRegistry:
    """
    Returns the process-wide registry, building and freezing it on first call.

    Raises:
        DuplicateCommandError: if two commands claim the same name or alias.
    """
    global _registry
    if _registry is None:
        registry = CommandRegistry()
        registry.register_all(load_all_command_modules())
        registry.freeze()
        _registry = registry
    return _registry
