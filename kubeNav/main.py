# kubeNav/main.py
"""
KubeNav Main Entry Point

Parses the startup flags, loads the kubeconfig and the application settings, builds
the command registry and the Environment, then starts the interactive shell or runs
the ``--exec`` command line.
"""
import argparse
import logging
import sys
from typing import List, Optional

from kubeNav import __version__
from kubeNav.constants import EXIT_CONFIG_ERROR, EXIT_NO_CONFIG_DIR, EXIT_OK, SETTINGS_FILE_NAME
from kubeNav.core.config import AppSettings, ClusterConfig, kubeconfig_paths, resolve_config_dir
from kubeNav.core.environment import Environment
from kubeNav.core.errors import ConfigurationError, KubeNavError
from kubeNav.modules import build_registry
from kubeNav.shell import Shell

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kubenav",
        description="Interactive shell for exploring and operating Kubernetes clusters",
    )
    parser.add_argument("-c", "--config-dir", metavar="DIR",
                        help="Directory holding the kubernetes and kubenav configuration (default: ~/.kube)")
    parser.add_argument("--exec", metavar="COMMAND", help="Execute the specified command then exit")
    parser.add_argument("-C", "--context", help="Start in the specified context")
    parser.add_argument("-n", "--namespace", help="Start in the specified namespace")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for KubeNav.

    Returns:
        The process exit code.
    """
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    try:
        config_dir = resolve_config_dir(args.config_dir)
    except ConfigurationError as e:
        print(f"🚨 {e}")
        return EXIT_NO_CONFIG_DIR

    settings = AppSettings.load_or_default(config_dir / SETTINGS_FILE_NAME)

    paths = kubeconfig_paths(config_dir)
    try:
        cluster_config = ClusterConfig.from_files(paths)
    except ConfigurationError as e:
        print(f"🚨 Could not load kubernetes config. Cannot continue. Error was: {e}")
        return EXIT_CONFIG_ERROR

    try:
        registry = build_registry()
    except ConfigurationError as e:
        print(f"🚨 Invalid command configuration: {e}")
        return EXIT_CONFIG_ERROR

    env = Environment(cluster_config, settings, config_dir)
    try:
        if args.context:
            env.set_context(args.context)
        if args.namespace:
            env.set_namespace(args.namespace)
    except KubeNavError as e:
        print(f"❌ {e}")

    shell = Shell(registry, env)
    if args.exec:
        shell.run_once(args.exec)
    else:
        shell.run()
    return EXIT_OK


def entrypoint():
    sys.exit(main())


if __name__ == "__main__":
    entrypoint()
