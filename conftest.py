"""
Shared fixtures for the KubeNav tests: an in-memory kubeconfig, an Environment whose
API clients are mocks, and factories for fake Kubernetes objects.
"""
import io
import logging
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import Mock

import pytest

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from kubeNav.core.config import AppSettings, ClusterConfig  # noqa: E402
from kubeNav.core.environment import Environment  # noqa: E402
from kubeNav.core.output import OutputWriter  # noqa: E402

# Configure logging for tests
logging.basicConfig(level=logging.WARNING)

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def cluster_config():
    return ClusterConfig(
        paths=["/nonexistent/kubeconfig"],
        contexts=[
            {"name": "dev", "context": {"cluster": "dev-cluster", "user": "dev-user", "namespace": "team"}},
            {"name": "prod", "context": {"cluster": "prod-cluster", "user": "prod-user"}},
        ],
        current_context="dev",
    )


@pytest.fixture
def client_factory():
    return Mock(side_effect=lambda context_name: Mock(name=f"api-client-{context_name}"))


@pytest.fixture
def env(cluster_config, client_factory, tmp_path):
    environment = Environment(cluster_config, AppSettings(), tmp_path, client_factory=client_factory)
    yield environment
    environment.close()


@pytest.fixture
def writer():
    return OutputWriter(io.StringIO(), io.StringIO())


@pytest.fixture
def make_item():
    """Builds a fake API object with Kubernetes-style metadata."""

    def _make(name, namespace=None, age=None, **fields):
        created = NOW - timedelta(seconds=age) if age is not None else None
        metadata = SimpleNamespace(name=name, namespace=namespace, creation_timestamp=created,
                                   labels={}, deletion_timestamp=None)
        return SimpleNamespace(metadata=metadata, **fields)

    return _make
