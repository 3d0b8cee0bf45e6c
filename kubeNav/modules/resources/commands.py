# kubeNav/modules/resources/commands.py
"""
Registration of the resource commands. Each one is a thin declaration: kind, columns,
list request and extractors.
"""
from kubeNav.core.kobj import ObjectKind
from kubeNav.dispatch.command import Command, arg
from kubeNav.modules.resources import extractors
from kubeNav.modules.resources.handlers import (
    ResourceSpec,
    handle_delete,
    make_list_handler,
    make_name_completer,
)


def _list_pods(ctx, args):
    if getattr(args, "all_namespaces", False):
        return ctx.core_v1().list_pod_for_all_namespaces(**ctx.request_kwargs)
    return ctx.core_v1().list_namespaced_pod(ctx.namespace, **ctx.request_kwargs)


POD_SPEC = ResourceSpec(
    kind=ObjectKind.POD,
    headers=["Name", "Ready", "Status", "Restarts", "Age", "Node", "IP"],
    all_namespaces_headers=["Namespace", "Name", "Ready", "Status", "Restarts", "Age", "Node", "IP"],
    list_call=_list_pods,
    extractors=extractors.POD_EXTRACTORS,
)

SERVICE_SPEC = ResourceSpec(
    kind=ObjectKind.SERVICE,
    headers=["Name", "Type", "Cluster IP", "External IP", "Ports", "Age"],
    list_call=lambda ctx, args: ctx.core_v1().list_namespaced_service(ctx.namespace, **ctx.request_kwargs),
    extractors=extractors.SERVICE_EXTRACTORS,
)

DEPLOYMENT_SPEC = ResourceSpec(
    kind=ObjectKind.DEPLOYMENT,
    headers=["Name", "Ready", "Up-To-Date", "Available", "Age"],
    list_call=lambda ctx, args: ctx.apps_v1().list_namespaced_deployment(ctx.namespace, **ctx.request_kwargs),
    extractors=extractors.DEPLOYMENT_EXTRACTORS,
)

PV_SPEC = ResourceSpec(
    kind=ObjectKind.PERSISTENT_VOLUME,
    headers=["Name", "Age", "Capacity", "Access Modes", "Reclaim Policy", "Status", "Claim",
             "Storage Class", "Reason"],
    list_call=lambda ctx, args: ctx.core_v1().list_persistent_volume(**ctx.request_kwargs),
    extractors=extractors.PV_EXTRACTORS,
)

PVC_SPEC = ResourceSpec(
    kind=ObjectKind.PERSISTENT_VOLUME_CLAIM,
    headers=["Name", "Status", "Volume", "Capacity", "Access Modes", "Storage Class", "Age"],
    list_call=lambda ctx, args: ctx.core_v1().list_namespaced_persistent_volume_claim(ctx.namespace,
                                                                                     **ctx.request_kwargs),
    extractors=extractors.PVC_EXTRACTORS,
)

NAMESPACE_SPEC = ResourceSpec(
    kind=ObjectKind.NAMESPACE,
    headers=["Name", "Status", "Age"],
    list_call=lambda ctx, args: ctx.core_v1().list_namespace(**ctx.request_kwargs),
    extractors=extractors.NAMESPACE_EXTRACTORS,
)

NODE_SPEC = ResourceSpec(
    kind=ObjectKind.NODE,
    headers=["Name", "Status", "Roles", "Age", "Version"],
    list_call=lambda ctx, args: ctx.core_v1().list_node(**ctx.request_kwargs),
    extractors=extractors.NODE_EXTRACTORS,
)


def list_command(name, aliases, about, spec: ResourceSpec, extra_arguments=()):
    """Command listing ``spec.kind`` with the shared filter/sort/reverse flags."""
    headers = list(spec.all_namespaces_headers or spec.headers)
    return Command(
        name=name,
        aliases=aliases,
        about=about,
        arguments=[
            arg("-r", "--regex", help="Filter by name with the specified regex (case-sensitive, unanchored)"),
            arg("-s", "--sort", choices=headers, help="Sort by the specified column"),
            arg("-R", "--reverse", action="store_true", help="Reverse the order of the listing"),
            *extra_arguments,
        ],
        completers={"regex": make_name_completer(spec)},
        executor=make_list_handler(spec),
    )


COMMANDS = [
    list_command(
        "pods", ["pod"], "Get pods in the current namespace", POD_SPEC,
        extra_arguments=[arg("-A", "--all-namespaces", action="store_true", help="List pods of every namespace")],
    ),
    list_command("services", ["svc"], "Get services in the current namespace", SERVICE_SPEC),
    list_command("deployments", ["deps", "deploy"], "Get deployments in the current namespace", DEPLOYMENT_SPEC),
    list_command("pvs", ["persistentvolumes"], "Get persistent volumes in the current context", PV_SPEC),
    list_command("pvcs", ["persistentvolumeclaims"], "Get persistent volume claims in the current namespace",
                 PVC_SPEC),
    list_command("namespaces", [], "Get namespaces in the current context", NAMESPACE_SPEC),
    list_command("nodes", [], "Get nodes in the current context", NODE_SPEC),
    Command(
        name="delete",
        about="Delete the object on the given row, or the selected object",
        arguments=[
            arg("index", type=int, nargs="?", help="Row number (defaults to the selected object)"),
            arg("-y", "--yes", action="store_true", help="Do not ask for confirmation"),
        ],
        executor=handle_delete,
    ),
]
