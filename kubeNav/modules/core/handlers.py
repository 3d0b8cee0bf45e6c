# kubeNav/modules/core/handlers.py
"""
Handlers for the built-in commands: moving between contexts and namespaces,
selecting rows, aliases and session control.
"""
import shlex

from tabulate import tabulate

from kubeNav.core.errors import UsageError
from kubeNav.engine.table import list_items


def handle_context(args, env, writer):
    """context [NAME]: switch context, or list contexts when no name is given."""
    if not args.context:
        handle_contexts(args, env, writer)
        return
    env.set_context(args.context)
    writer.info(f"Context set to '{env.active_context}' (namespace '{env.active_namespace}').")


def handle_contexts(args, env, writer):
    table_data = []
    for name in env.config.context_names():
        table_data.append([
            "*" if name == env.active_context else "",
            name,
            env.config.cluster_of(name) or "",
            env.config.user_of(name) or "",
            env.config.default_namespace(name),
        ])
    headers = ["", "Context", "Cluster", "User", "Namespace"]
    writer.write(tabulate(table_data, headers=headers, tablefmt=env.settings.table_format))


def list_namespace_names(ctx, args=None):
    return [ns.metadata.name for ns in list_items(ctx.core_v1().list_namespace(**ctx.request_kwargs))]


def handle_namespace(args, env, writer):
    """namespace [NAME]: switch namespace, or go back to the context default."""
    if not args.name:
        env.set_namespace(env.config.default_namespace(env.active_context))
        writer.info(f"Namespace reset to '{env.active_namespace}'.")
        return

    known = env.run_on_context(list_namespace_names, writer, "Could not list namespaces")
    if known is None:
        writer.warning(f"Could not verify that namespace '{args.name}' exists, switching anyway.")
    env.set_namespace(args.name, known)
    writer.info(f"Namespace set to '{env.active_namespace}'.")


def handle_select(args, env, writer):
    handle = env.select_row(args.index)
    writer.info(f"Selected {handle}")


def handle_clear(args, env, writer):
    env.clear_selection()


def handle_env(args, env, writer):
    writer.write(str(env))


def handle_alias(args, env, writer):
    """alias [NAME EXPANSION...]: define an alias, or list them."""
    from kubeNav.modules import build_registry

    if not args.name:
        aliases = sorted(env.settings.aliases.items())
        if not aliases:
            writer.info("No aliases defined.")
            return
        writer.write(tabulate(aliases, headers=["Alias", "Expands to"], tablefmt=env.settings.table_format))
        return
    if not args.expansion:
        raise UsageError("alias: an expansion is required", "usage: alias NAME COMMAND [ARGS...]")
    if build_registry().lookup(args.name) is not None:
        raise UsageError(f"alias: '{args.name}' is a command name and cannot be aliased")
    env.settings.aliases[args.name] = shlex.join(args.expansion)
    env.save_settings(writer)
    writer.success(f"Alias '{args.name}' -> '{env.settings.aliases[args.name]}'")


def handle_unalias(args, env, writer):
    if env.settings.aliases.pop(args.name, None) is None:
        raise UsageError(f"unalias: no alias named '{args.name}'")
    env.save_settings(writer)
    writer.success(f"Alias '{args.name}' removed.")


def handle_help(args, env, writer):
    from kubeNav.modules import build_registry

    registry = build_registry()
    if args.command:
        command = registry.lookup(args.command)
        if command is None:
            raise UsageError(f"help: unknown command '{args.command}'")
        writer.write(command.help_text())
        return
    table_data = [[c.name, ", ".join(c.aliases), c.about] for c in registry.commands()]
    writer.write(tabulate(table_data, headers=["Command", "Aliases", "Description"], tablefmt="plain"))
    writer.write("\nType a row number to select that row. '<command> -h' shows a command's options.")


def handle_quit(args, env, writer):
    env.exit_requested = True
