# kubeNav/modules/resources/extractors.py
"""
Column extractors per resource kind.

Each map is built once at import time and exposed read-only; an extractor returns a
Cell or None (rendered as an empty cell).
"""
from types import MappingProxyType
from typing import Optional

from kubeNav.engine.cell import Cell

ACCESS_MODE_ABBREVIATIONS = {
    "ReadWriteOnce": "RWO",
    "ReadOnlyMany": "ROX",
    "ReadWriteMany": "RWX",
    "ReadWriteOncePod": "RWOP",
}


def _access_modes(modes) -> Cell:
    return Cell.of(", ".join(ACCESS_MODE_ABBREVIATIONS.get(m, "Unknown") for m in (modes or [])))


# --- PersistentVolume ---
def volume_capacity(volume) -> Optional[Cell]:
    capacity = volume.spec.capacity if volume.spec else None
    if not capacity or "storage" not in capacity:
        return None
    return Cell.quantity(capacity["storage"])


def volume_access_modes(volume) -> Optional[Cell]:
    return _access_modes(volume.spec.access_modes) if volume.spec else None


def volume_reclaim_policy(volume) -> Optional[Cell]:
    return Cell.of(volume.spec.persistent_volume_reclaim_policy) if volume.spec else None


def volume_status(volume) -> Optional[Cell]:
    return Cell.of(volume.status.phase) if volume.status else None


def volume_claim(volume) -> Optional[Cell]:
    if not volume.spec:
        return None
    claim_ref = volume.spec.claim_ref
    if claim_ref is None:
        return Cell.of("")
    return Cell.of(f"{claim_ref.namespace or ''}/{claim_ref.name or ''}")


def volume_storage_class(volume) -> Optional[Cell]:
    return Cell.of(volume.spec.storage_class_name) if volume.spec else None


def volume_reason(volume) -> Optional[Cell]:
    return Cell.of(volume.status.reason) if volume.status else None


PV_EXTRACTORS = MappingProxyType({
    "Capacity": volume_capacity,
    "Access Modes": volume_access_modes,
    "Reclaim Policy": volume_reclaim_policy,
    "Status": volume_status,
    "Claim": volume_claim,
    "Storage Class": volume_storage_class,
    "Reason": volume_reason,
})


# --- PersistentVolumeClaim ---
def claim_capacity(claim) -> Optional[Cell]:
    capacity = claim.status.capacity if claim.status else None
    if not capacity or "storage" not in capacity:
        return None
    return Cell.quantity(capacity["storage"])


PVC_EXTRACTORS = MappingProxyType({
    "Status": lambda claim: Cell.of(claim.status.phase) if claim.status else None,
    "Volume": lambda claim: Cell.of(claim.spec.volume_name) if claim.spec else None,
    "Capacity": claim_capacity,
    "Access Modes": lambda claim: _access_modes(claim.status.access_modes) if claim.status else None,
    "Storage Class": lambda claim: Cell.of(claim.spec.storage_class_name) if claim.spec else None,
})


# --- Pod ---
def pod_ready(pod) -> Optional[Cell]:
    statuses = (pod.status.container_statuses if pod.status else None) or []
    total = len(pod.spec.containers) if pod.spec and pod.spec.containers else len(statuses)
    ready = sum(1 for s in statuses if s.ready)
    return Cell(f"{ready}/{total}", (ready, total))


def pod_status(pod) -> Optional[Cell]:
    if getattr(pod.metadata, "deletion_timestamp", None):
        return Cell.of("Terminating")
    if not pod.status:
        return None
    for container in pod.status.container_statuses or []:
        state = container.state
        if state is not None and state.waiting is not None and state.waiting.reason:
            return Cell.of(state.waiting.reason)
        if state is not None and state.terminated is not None and state.terminated.reason:
            return Cell.of(state.terminated.reason)
    return Cell.of(pod.status.phase)


def pod_restarts(pod) -> Optional[Cell]:
    statuses = (pod.status.container_statuses if pod.status else None) or []
    return Cell.integer(sum(s.restart_count or 0 for s in statuses))


POD_EXTRACTORS = MappingProxyType({
    "Ready": pod_ready,
    "Status": pod_status,
    "Restarts": pod_restarts,
    "Node": lambda pod: Cell.of(pod.spec.node_name) if pod.spec else None,
    "IP": lambda pod: Cell.of(pod.status.pod_ip) if pod.status else None,
})


# --- Service ---
def service_external_ip(service) -> Optional[Cell]:
    ips = list((service.spec.external_i_ps if service.spec else None) or [])
    ingress = service.status.load_balancer.ingress if service.status and service.status.load_balancer else None
    for entry in ingress or []:
        ips.append(entry.ip or entry.hostname)
    return Cell.of(",".join(ip for ip in ips if ip) or "<none>")


def service_ports(service) -> Optional[Cell]:
    if not service.spec:
        return None
    ports = []
    for port in service.spec.ports or []:
        text = f"{port.port}:{port.node_port}" if port.node_port else f"{port.port}"
        ports.append(f"{text}/{port.protocol or 'TCP'}")
    return Cell.of(",".join(ports))


SERVICE_EXTRACTORS = MappingProxyType({
    "Type": lambda svc: Cell.of(svc.spec.type) if svc.spec else None,
    "Cluster IP": lambda svc: Cell.of(svc.spec.cluster_ip) if svc.spec else None,
    "External IP": service_external_ip,
    "Ports": service_ports,
})


# --- Deployment ---
def deployment_ready(deployment) -> Optional[Cell]:
    desired = (deployment.spec.replicas if deployment.spec else None) or 0
    ready = (deployment.status.ready_replicas if deployment.status else None) or 0
    return Cell(f"{ready}/{desired}", (ready, desired))


DEPLOYMENT_EXTRACTORS = MappingProxyType({
    "Ready": deployment_ready,
    "Up-To-Date": lambda d: Cell.integer((d.status.updated_replicas if d.status else None) or 0),
    "Available": lambda d: Cell.integer((d.status.available_replicas if d.status else None) or 0),
})


# --- Namespace ---
NAMESPACE_EXTRACTORS = MappingProxyType({
    "Status": lambda ns: Cell.of(ns.status.phase) if ns.status else None,
})


# --- Node ---
NODE_ROLE_LABEL_PREFIX = "node-role.kubernetes.io/"


def node_status(node) -> Optional[Cell]:
    conditions = (node.status.conditions if node.status else None) or []
    ready = next((c for c in conditions if c.type == "Ready"), None)
    status = "Unknown" if ready is None else ("Ready" if ready.status == "True" else "NotReady")
    if node.spec is not None and node.spec.unschedulable:
        status += ",SchedulingDisabled"
    return Cell.of(status)


def node_roles(node) -> Optional[Cell]:
    labels = node.metadata.labels or {}
    roles = sorted(k[len(NODE_ROLE_LABEL_PREFIX):] for k in labels if k.startswith(NODE_ROLE_LABEL_PREFIX))
    return Cell.of(",".join(roles) or "<none>")


NODE_EXTRACTORS = MappingProxyType({
    "Status": node_status,
    "Roles": node_roles,
    "Version": lambda node: Cell.of(node.status.node_info.kubelet_version)
    if node.status and node.status.node_info else None,
})
