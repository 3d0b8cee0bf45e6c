# kubeNav/core/config.py
"""
Configuration for KubeNav: where the configuration directory lives, which kubeconfig
files are in play, which contexts they define, and the persisted application settings.
"""
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from kubernetes import config

from kubeNav.constants import (
    DEFAULT_COMPLETION_TIMEOUT,
    DEFAULT_CONFIG_DIR_NAME,
    DEFAULT_KUBECONFIG_NAME,
    DEFAULT_NAMESPACE,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TABLE_FORMAT,
    ENV_KUBECONFIG,
)
from kubeNav.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


def resolve_config_dir(override: Optional[str] = None) -> Path:
    """
    Returns the configuration directory: the override if given, else ``~/.kube``.

    Raises:
        ConfigurationError: if no override is given and the home directory is unknown.
    """
    if override:
        return Path(override).expanduser()
    try:
        return Path.home() / DEFAULT_CONFIG_DIR_NAME
    except RuntimeError as e:
        raise ConfigurationError(f"Can't get your home dir, please specify --config-dir ({e})")


def kubeconfig_paths(config_dir: Path, environ: Optional[Dict[str, str]] = None) -> List[str]:
    """
    Returns the kubeconfig files to merge.

    ``KUBECONFIG`` holds a list separated the platform way (``:`` or ``;``); when it is
    unset the default ``config`` file in the configuration directory is used.
    """
    environ = os.environ if environ is None else environ
    value = environ.get(ENV_KUBECONFIG)
    if value:
        return [p for p in value.split(os.pathsep) if p]
    return [str(config_dir / DEFAULT_KUBECONFIG_NAME)]


class ClusterConfig:
    """Contexts defined by the merged kubeconfig files."""

    def __init__(self, paths: List[str], contexts: List[dict], current_context: Optional[str]):
        self.paths = paths
        self._contexts = {c["name"]: (c.get("context") or {}) for c in contexts}
        self.current_context = current_context

    @classmethod
    def from_files(cls, paths: List[str]) -> "ClusterConfig":
        """
        Loads and merges the given kubeconfig files.

        Raises:
            ConfigurationError: if no usable configuration could be loaded.
        """
        try:
            contexts, active = config.list_kube_config_contexts(config_file=os.pathsep.join(paths))
        except config.ConfigException as e:
            raise ConfigurationError(str(e))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"{type(e).__name__} - {e}")
        if not contexts:
            raise ConfigurationError(f"No contexts defined in {', '.join(paths)}")
        current = active.get("name") if active else None
        logger.debug(f"Loaded {len(contexts)} contexts from {paths}, current: {current}")
        return cls(paths, contexts, current)

    @property
    def merged_path(self) -> str:
        return os.pathsep.join(self.paths)

    def context_names(self) -> List[str]:
        return sorted(self._contexts)

    def has_context(self, name: str) -> bool:
        return name in self._contexts

    def default_namespace(self, context_name: str) -> str:
        """Namespace declared on the context, or ``default``."""
        return self._contexts.get(context_name, {}).get("namespace") or DEFAULT_NAMESPACE

    def cluster_of(self, context_name: str) -> Optional[str]:
        return self._contexts.get(context_name, {}).get("cluster")

    def user_of(self, context_name: str) -> Optional[str]:
        return self._contexts.get(context_name, {}).get("user")


@dataclass
class AppSettings:
    """Persisted application settings (``kubenav.config``)."""

    context: Optional[str] = None
    namespace: Optional[str] = None
    completion_timeout: float = DEFAULT_COMPLETION_TIMEOUT
    request_timeout: Optional[float] = DEFAULT_REQUEST_TIMEOUT
    table_format: str = DEFAULT_TABLE_FORMAT
    aliases: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "AppSettings":
        if not isinstance(data, dict):
            raise ConfigurationError("settings file must contain a mapping")
        settings = cls()
        for key in ("context", "namespace", "table_format"):
            if data.get(key) is not None:
                setattr(settings, key, str(data[key]))
        for key in ("completion_timeout", "request_timeout"):
            if data.get(key) is not None:
                try:
                    setattr(settings, key, float(data[key]))
                except (TypeError, ValueError):
                    raise ConfigurationError(f"'{key}' must be a number, got {data[key]!r}")
        aliases = data.get("aliases") or {}
        if not isinstance(aliases, dict):
            raise ConfigurationError("'aliases' must be a mapping of alias to expansion")
        settings.aliases = {str(k): str(v) for k, v in aliases.items()}
        return settings

    def to_dict(self) -> dict:
        return {
            "context": self.context,
            "namespace": self.namespace,
            "completion_timeout": self.completion_timeout,
            "request_timeout": self.request_timeout,
            "table_format": self.table_format,
            "aliases": dict(self.aliases),
        }

    @classmethod
    def from_file(cls, path: Path) -> "AppSettings":
        """
        Loads settings from a YAML file.

        Raises:
            ConfigurationError: if the file cannot be read or parsed.
        """
        try:
            with open(path, "r", encoding="utf-8") as f_stream:
                data = yaml.safe_load(f_stream)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"{type(e).__name__} - {e}")
        return cls.from_dict(data or {})

    @classmethod
    def load_or_default(cls, path: Path) -> "AppSettings":
        """Loads settings, falling back to defaults with a warning on any failure."""
        if not path.exists():
            logger.debug(f"No settings file at '{path}', using default values")
            return cls()
        try:
            return cls.from_file(path)
        except ConfigurationError as e:
            print(f"⚠️ Could not load settings from '{path}': {e}\n   Using default values.")
            return cls()

    def save(self, path: Path):
        """Writes the settings atomically (temporary file + rename)."""
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".kubenav-", dir=str(path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f_stream:
                yaml.safe_dump(self.to_dict(), f_stream, default_flow_style=False, sort_keys=True)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
