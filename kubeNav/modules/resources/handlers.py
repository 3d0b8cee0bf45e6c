# kubeNav/modules/resources/handlers.py
"""
Handlers shared by the resource commands. A resource command is declared with a
ResourceSpec; listing, name completion and deletion all go through the generic code
below, never through kind-specific handlers.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence

from kubeNav.core.errors import UsageError
from kubeNav.core.k8s_api import RequestContext
from kubeNav.core.kobj import ObjectHandle, ObjectKind
from kubeNav.engine.cell import ExtractorMap
from kubeNav.engine.table import compile_filter, list_items, render_list

logger = logging.getLogger(__name__)

ListCall = Callable[[RequestContext, Any], Any]


def check_sort_column(sort: Optional[str], headers: Sequence[str]):
    """
    Raises:
        UsageError: if ``sort`` names a column that is not rendered.
    """
    if sort and sort.lower() not in (h.lower() for h in headers):
        raise UsageError(f"Cannot sort on '{sort}': column not shown (columns: {', '.join(headers)})")


@dataclass(frozen=True)
class ResourceSpec:
    kind: ObjectKind
    headers: Sequence[str]
    list_call: ListCall
    extractors: ExtractorMap
    all_namespaces_headers: Optional[Sequence[str]] = None

    def to_handle(self, obj) -> ObjectHandle:
        return ObjectHandle.from_object(self.kind, obj)

    def headers_for(self, args) -> Sequence[str]:
        if self.all_namespaces_headers and getattr(args, "all_namespaces", False):
            return self.all_namespaces_headers
        return self.headers


def make_list_handler(spec: ResourceSpec):
    """Executor listing ``spec.kind`` in the active namespace (or cluster-wide)."""

    def handle_list(args, env, writer):
        # Bad filters and sort columns are rejected before any request is made.
        regex = compile_filter(args.regex)
        headers = spec.headers_for(args)
        check_sort_column(args.sort, headers)
        outcome = env.run_on_context(
            lambda ctx: spec.list_call(ctx, args),
            writer,
            f"Error listing {spec.kind.display_name} objects in context '{env.active_context}'",
        )
        render_list(
            env,
            writer,
            headers,
            outcome,
            spec.extractors,
            regex,
            args.sort,
            args.reverse,
            spec.to_handle,
        )

    return handle_list


def make_name_completer(spec: ResourceSpec) -> Callable[[RequestContext, Any], Iterable[str]]:
    """Live object names of ``spec.kind``, honouring flags such as ``-A`` already typed."""

    def complete_names(ctx: RequestContext, args=None) -> List[str]:
        return [spec.to_handle(item).name for item in list_items(spec.list_call(ctx, args))]

    return complete_names


# --- Deletion ---
def _delete_pod(ctx, handle):
    return ctx.core_v1().delete_namespaced_pod(handle.name, handle.namespace, **ctx.request_kwargs)


def _delete_service(ctx, handle):
    return ctx.core_v1().delete_namespaced_service(handle.name, handle.namespace, **ctx.request_kwargs)


def _delete_deployment(ctx, handle):
    return ctx.apps_v1().delete_namespaced_deployment(handle.name, handle.namespace, **ctx.request_kwargs)


def _delete_claim(ctx, handle):
    return ctx.core_v1().delete_namespaced_persistent_volume_claim(handle.name, handle.namespace,
                                                                   **ctx.request_kwargs)


def _delete_volume(ctx, handle):
    return ctx.core_v1().delete_persistent_volume(handle.name, **ctx.request_kwargs)


def _delete_namespace(ctx, handle):
    return ctx.core_v1().delete_namespace(handle.name, **ctx.request_kwargs)


def _delete_node(ctx, handle):
    return ctx.core_v1().delete_node(handle.name, **ctx.request_kwargs)


DELETERS = {
    ObjectKind.POD: _delete_pod,
    ObjectKind.SERVICE: _delete_service,
    ObjectKind.DEPLOYMENT: _delete_deployment,
    ObjectKind.PERSISTENT_VOLUME_CLAIM: _delete_claim,
    ObjectKind.PERSISTENT_VOLUME: _delete_volume,
    ObjectKind.NAMESPACE: _delete_namespace,
    ObjectKind.NODE: _delete_node,
}


def _confirm(handle: ObjectHandle) -> bool:
    try:
        answer = input(f"Delete {handle} [y/N]? ").strip().lower()
    except EOFError:
        return False
    return answer in ("y", "yes")


def handle_delete(args, env, writer):
    """delete [INDEX]: delete the object on row INDEX, or the selected object."""
    handle = env.current_object(args.index)
    if not args.yes and not _confirm(handle):
        writer.info("Deletion cancelled.")
        return
    result = env.run_on_context(
        lambda ctx: DELETERS[handle.kind](ctx, handle),
        writer,
        f"Error deleting {handle}",
    )
    if result is not None:
        if env.selected_object == handle:
            env.clear_selection()
        writer.success(f"{handle} deleted.")
