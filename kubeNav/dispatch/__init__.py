# kubeNav/dispatch/__init__.py
"""
KubeNav Dispatch Module

Command descriptors, the command registry and the dispatcher.
"""

from .command import Command, arg
from .command_registry import CommandRegistry
from .dispatcher import Dispatcher

__all__ = ['Command', 'arg', 'CommandRegistry', 'Dispatcher']
