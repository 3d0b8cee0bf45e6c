# kubeNav/core/kobj.py
"""
Uniform identity for cluster objects regardless of their resource kind.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from kubeNav.constants import UNKNOWN_NAME


class ObjectKind(Enum):
    """Resource kinds KubeNav knows how to list. Value is (display name, namespaced)."""

    POD = ("Pod", True)
    SERVICE = ("Service", True)
    DEPLOYMENT = ("Deployment", True)
    PERSISTENT_VOLUME_CLAIM = ("PersistentVolumeClaim", True)
    PERSISTENT_VOLUME = ("PersistentVolume", False)
    NAMESPACE = ("Namespace", False)
    NODE = ("Node", False)

    @property
    def display_name(self) -> str:
        return self.value[0]

    @property
    def namespaced(self) -> bool:
        return self.value[1]


@dataclass(frozen=True)
class ObjectHandle:
    """Identity of one cluster object: (kind, namespace, name)."""

    name: str
    namespace: Optional[str]
    kind: ObjectKind

    @classmethod
    def from_object(cls, kind: ObjectKind, obj: Any) -> "ObjectHandle":
        """
        Builds a handle from any object exposing Kubernetes ``metadata``.

        Cluster-scoped kinds never carry a namespace, even if the API sent one.
        """
        meta = getattr(obj, "metadata", None)
        name = getattr(meta, "name", None) or UNKNOWN_NAME
        namespace = getattr(meta, "namespace", None) if kind.namespaced else None
        return cls(name=name, namespace=namespace, kind=kind)

    def __str__(self):
        if self.namespace:
            return f"{self.kind.display_name} {self.namespace}/{self.name}"
        return f"{self.kind.display_name} {self.name}"
