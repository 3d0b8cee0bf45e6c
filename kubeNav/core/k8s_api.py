# kubeNav/core/k8s_api.py
"""
Thin seam between KubeNav and the kubernetes client: building an authenticated
ApiClient for a context, and turning transport/API failures into user messages.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError

from kubeNav.core.output import OutputWriter

logger = logging.getLogger(__name__)

# Everything a cluster call may raise that is reported to the user instead of propagated.
TRANSPORT_ERRORS = (ApiException, HTTPError, OSError, config.ConfigException)


@dataclass(frozen=True)
class RequestContext:
    """Explicit execution context handed to every cluster request."""

    api_client: Any
    context: str
    namespace: str
    timeout: Optional[float] = None

    def core_v1(self) -> client.CoreV1Api:
        return client.CoreV1Api(self.api_client)

    def apps_v1(self) -> client.AppsV1Api:
        return client.AppsV1Api(self.api_client)

    @property
    def request_kwargs(self) -> dict:
        """Keyword arguments to pass to every generated API call."""
        if self.timeout:
            return {"_request_timeout": self.timeout}
        return {}


class KubeClientFactory:
    """Creates one ApiClient per context from the merged kubeconfig files."""

    def __init__(self, merged_config_path: str):
        self.merged_config_path = merged_config_path

    def __call__(self, context_name: str) -> client.ApiClient:
        logger.debug(f"Creating API client for context '{context_name}'")
        return config.new_client_from_config(
            config_file=self.merged_config_path,
            context=context_name,
            persist_config=False,
        )


def report_transport_error(e: BaseException, writer: OutputWriter, context_message: str):
    """Writes a one-shot description of a failed cluster call to the error stream."""
    if isinstance(e, ApiException):
        writer.error(f"{context_message}: {e.reason} (Status: {e.status})")
        if e.body:
            try:
                error_body_json = json.loads(e.body)
                writer.error(f"   K8S API Message: {error_body_json.get('message', 'N/A')}")
            except (json.JSONDecodeError, TypeError, AttributeError):
                writer.error(f"   K8S API Error Body (not valid JSON): {str(e.body)[:500]}")
    elif isinstance(e, config.ConfigException):
        writer.error(f"{context_message}: invalid credentials or cluster configuration - {e}")
    else:
        writer.error(f"{context_message}: {type(e).__name__} - {e}")
    logger.debug(f"{context_message}", exc_info=e)
