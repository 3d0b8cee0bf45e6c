# kubeNav/modules/core/commands.py
"""
Registration of the built-in commands.
"""
import argparse

from kubeNav.dispatch.command import Command, arg
from kubeNav.modules.core import handlers


def _context_names(env):
    return env.config.context_names()


COMMANDS = [
    Command(
        name="context",
        aliases=["ctx"],
        about="Switch to another context, or list contexts when no name is given",
        arguments=[arg("context", nargs="?", help="Context to switch to")],
        local_completers={"context": _context_names},
        executor=handlers.handle_context,
    ),
    Command(
        name="contexts",
        about="List the contexts defined in the kubernetes configuration",
        executor=handlers.handle_contexts,
    ),
    Command(
        name="namespace",
        aliases=["ns"],
        about="Switch namespace, or go back to the context's default namespace",
        arguments=[arg("name", nargs="?", help="Namespace to switch to")],
        completers={"name": handlers.list_namespace_names},
        executor=handlers.handle_namespace,
    ),
    Command(
        name="select",
        about="Select an object by its row number in the last listing",
        arguments=[arg("index", type=int, help="Row number (1-based)")],
        executor=handlers.handle_select,
    ),
    Command(
        name="clear",
        about="Clear the current selection",
        executor=handlers.handle_clear,
    ),
    Command(
        name="env",
        about="Show the current environment",
        executor=handlers.handle_env,
    ),
    Command(
        name="alias",
        about="Define an alias (alias NAME COMMAND [ARGS...]), or list aliases",
        arguments=[
            arg("name", nargs="?", help="Alias name"),
            arg("expansion", nargs=argparse.REMAINDER, help="Command line the alias expands to"),
        ],
        executor=handlers.handle_alias,
    ),
    Command(
        name="unalias",
        about="Remove an alias",
        arguments=[arg("name", help="Alias to remove")],
        local_completers={"name": lambda env: sorted(env.settings.aliases)},
        executor=handlers.handle_unalias,
    ),
    Command(
        name="help",
        aliases=["?"],
        about="List commands, or show the options of one command",
        arguments=[arg("command", nargs="?", help="Command to describe")],
        executor=handlers.handle_help,
    ),
    Command(
        name="quit",
        aliases=["exit", "q"],
        about="Leave the shell",
        executor=handlers.handle_quit,
    ),
]
