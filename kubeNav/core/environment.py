# kubeNav/core/environment.py
"""
Manages the process-wide state of a KubeNav session: active context and namespace,
the selected object, the rows of the last listing and one API client per context.
A single Environment is created at startup and handed to every command.
"""
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Tuple, TypeVar

from kubeNav.constants import HISTORY_FILE_NAME, SETTINGS_FILE_NAME
from kubeNav.core.config import AppSettings, ClusterConfig
from kubeNav.core.errors import (
    NoListingError,
    NoSelectionError,
    NoSuchRowError,
    UnknownContextError,
    UnknownNamespaceError,
)
from kubeNav.core.k8s_api import TRANSPORT_ERRORS, KubeClientFactory, RequestContext, report_transport_error
from kubeNav.core.kobj import ObjectHandle
from kubeNav.core.output import OutputWriter

logger = logging.getLogger(__name__)

T = TypeVar("T")
ClientFactory = Callable[[str], Any]


class Environment:
    def __init__(self, cluster_config: ClusterConfig, settings: AppSettings, config_dir: Path,
                 client_factory: Optional[ClientFactory] = None):
        self.config = cluster_config
        self.settings = settings
        self.config_dir = Path(config_dir)
        self.settings_path = self.config_dir / SETTINGS_FILE_NAME
        self.history_path = self.config_dir / HISTORY_FILE_NAME

        self._client_factory = client_factory or KubeClientFactory(cluster_config.merged_path)
        self._clients: Dict[str, Any] = {}
        self._executor = self._new_executor()
        self._command_future: Optional[Future] = None
        self._lookup_future: Optional[Future] = None

        self.active_context: str = ""
        self.active_namespace: str = ""
        self.selected_object: Optional[ObjectHandle] = None
        self.row_cache: Optional[Tuple[ObjectHandle, ...]] = None
        self.exit_requested = False

        self._activate(self._initial_context())
        if settings.namespace and settings.context == self.active_context:
            self.active_namespace = settings.namespace

    def _initial_context(self) -> str:
        if self.settings.context and self.config.has_context(self.settings.context):
            return self.settings.context
        if self.config.current_context and self.config.has_context(self.config.current_context):
            return self.config.current_context
        return self.config.context_names()[0]

    def _activate(self, context_name: str):
        self.active_context = context_name
        self.active_namespace = self.config.default_namespace(context_name)
        self.selected_object = None
        self.row_cache = None

    # --- Context / namespace ---
    def set_context(self, name: str):
        """
        Switches the active context.

        Rows and selection from the previous context are dropped so that no row index
        can resolve to an object of another cluster.

        Raises:
            UnknownContextError: if the kubeconfig does not define ``name``.
        """
        if not self.config.has_context(name):
            raise UnknownContextError(name)
        if name == self.active_context:
            return
        self._activate(name)
        logger.debug(f"Active context is now '{name}' (namespace '{self.active_namespace}')")

    def set_namespace(self, name: str, known: Optional[Iterable[str]] = None):
        """
        Switches the active namespace.

        Args:
            name: Namespace to switch to
            known: Namespaces that exist in the cluster, when they could be listed

        Raises:
            UnknownNamespaceError: if ``known`` is given and does not contain ``name``.
        """
        if known is not None and name not in set(known):
            raise UnknownNamespaceError(name)
        self.active_namespace = name
        selected = self.selected_object
        if selected is not None and selected.kind.namespaced and selected.namespace != name:
            self.selected_object = None

    # --- Rows and selection ---
    def set_row_cache(self, handles: Sequence[ObjectHandle]):
        self.row_cache = tuple(handles)

    def resolve_row(self, index: int) -> ObjectHandle:
        """
        Returns the object shown on row ``index`` (1-based) of the last listing.

        Raises:
            NoListingError: if nothing has been listed in this context yet.
            NoSuchRowError: if ``index`` is outside the last listing.
        """
        if self.row_cache is None:
            raise NoListingError()
        if index < 1 or index > len(self.row_cache):
            raise NoSuchRowError(index, len(self.row_cache))
        return self.row_cache[index - 1]

    def select(self, handle: ObjectHandle):
        self.selected_object = handle

    def select_row(self, index: int) -> ObjectHandle:
        handle = self.resolve_row(index)
        self.selected_object = handle
        return handle

    def clear_selection(self):
        self.selected_object = None

    def current_object(self, index: Optional[int] = None) -> ObjectHandle:
        """Row ``index`` if given, else the selected object."""
        if index is not None:
            return self.resolve_row(index)
        if self.selected_object is None:
            raise NoSelectionError()
        return self.selected_object

    # --- Cluster access ---
    def client_for_active_context(self) -> Any:
        """Returns the API client of the active context, creating it on first use."""
        api_client = self._clients.get(self.active_context)
        if api_client is None:
            api_client = self._client_factory(self.active_context)
            self._clients[self.active_context] = api_client
        return api_client

    def request_context(self, api_client: Any, timeout: Optional[float] = None) -> RequestContext:
        return RequestContext(
            api_client=api_client,
            context=self.active_context,
            namespace=self.active_namespace,
            timeout=self.settings.request_timeout if timeout is None else timeout,
        )

    @property
    def request_in_flight(self) -> bool:
        return any(f is not None and not f.done() for f in (self._command_future, self._lookup_future))

    @staticmethod
    def _new_executor() -> ThreadPoolExecutor:
        # One worker: cluster calls never overlap, completion lookups included.
        return ThreadPoolExecutor(max_workers=1, thread_name_prefix="kubenav-request")

    def _abandon_request(self, future: Future, context_name: str):
        """
        Gives up on a request that is still running.

        The worker thread and the client it is using are retired: the next request gets
        a fresh worker and a fresh client, so it never queues behind the abandoned call
        or shares its connection.
        """
        if not future.cancel() and not future.done():
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = self._new_executor()
            api_client = self._clients.pop(context_name, None)
            self._close_client(api_client)
        self._command_future = None
        self._lookup_future = None

    def run_on_context(self, request: Callable[[RequestContext], T],
                       writer: Optional[OutputWriter] = None,
                       description: str = "Request failed") -> Optional[T]:
        """
        Runs ``request`` against the active context.

        Transport and API errors are reported once to ``writer`` and turned into ``None``;
        command code never sees them. A KeyboardInterrupt while waiting abandons the
        request (its result is discarded, its worker and client retired) and propagates
        to the caller.

        Args:
            request: Callable receiving a RequestContext and returning the response
            writer: Where failures are reported
            description: Prefix of the failure message

        Returns:
            The response, or None if the call failed.
        """
        writer = writer or OutputWriter()
        try:
            api_client = self.client_for_active_context()
        except TRANSPORT_ERRORS as e:
            report_transport_error(e, writer, f"Could not connect to context '{self.active_context}'")
            return None

        context_name = self.active_context
        future = self._executor.submit(request, self.request_context(api_client))
        self._command_future = future
        try:
            return future.result()
        except TRANSPORT_ERRORS as e:
            report_transport_error(e, writer, description)
            return None
        except KeyboardInterrupt:
            self._abandon_request(future, context_name)
            logger.debug("Request interrupted, discarding its result")
            raise

    def lookup_for_completion(self, request: Callable[[RequestContext], T],
                              timeout: Optional[float] = None) -> Optional[T]:
        """
        Runs a completion lookup with a time bound. Never raises and never reports.

        The request itself is sent with the same bound as its ``_request_timeout``.
        Returns None when a request is still in flight, when the active context has no
        client yet, on timeout, or on any error.
        """
        if self.request_in_flight:
            return None
        api_client = self._clients.get(self.active_context)
        if api_client is None:
            return None
        timeout = self.settings.completion_timeout if timeout is None else timeout
        context_name = self.active_context
        future = self._executor.submit(request, self.request_context(api_client, timeout=timeout))
        self._lookup_future = future
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError:
            self._abandon_request(future, context_name)
            logger.debug(f"Completion lookup exceeded {timeout}s, ignoring it")
            return None
        except Exception as e:
            logger.debug(f"Completion lookup failed: {type(e).__name__} - {e}")
            return None

    # --- Persistence / lifecycle ---
    def save_settings(self, writer: Optional[OutputWriter] = None) -> bool:
        """Remembers the active context/namespace and writes the settings file."""
        self.settings.context = self.active_context
        self.settings.namespace = self.active_namespace
        try:
            self.settings.save(self.settings_path)
            return True
        except OSError as e:
            (writer or OutputWriter()).warning(f"Could not save settings to '{self.settings_path}': {e}")
            return False

    @staticmethod
    def _close_client(api_client: Any):
        close = getattr(api_client, "close", None)
        if callable(close):
            try:
                close()
            except Exception as e:
                logger.debug(f"Error closing API client: {e}")

    def close(self):
        for api_client in self._clients.values():
            self._close_client(api_client)
        self._clients.clear()
        self._executor.shutdown(wait=False, cancel_futures=True)

    def prompt(self) -> str:
        """Returns the current command prompt string."""
        selection = self.selected_object.name if self.selected_object else "none"
        return f"[{self.active_context}][{self.active_namespace}][{selection}] > "

    def __str__(self):
        lines = [
            f"Context:   {self.active_context}",
            f"Cluster:   {self.config.cluster_of(self.active_context) or 'N/A'}",
            f"User:      {self.config.user_of(self.active_context) or 'N/A'}",
            f"Namespace: {self.active_namespace}",
            f"Selected:  {self.selected_object if self.selected_object else 'none'}",
            f"Rows:      {len(self.row_cache) if self.row_cache is not None else 'no listing'}",
            f"Config:    {self.config.merged_path}",
            f"Settings:  {self.settings_path}",
            f"History:   {self.history_path}",
        ]
        return "\n".join(lines)
