#!/usr/bin/env python3
"""
KUBEDECK CORE MODELS
--------------------
Defines the fundamental data structures used across the KubeDeck engine.
All of them are transient: they live for a single user-triggered operation
and are never cached beyond it. The cluster stays the source of truth.

Author: KubeDeck Team
Date: 2026-10-18
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class ResourceIdentifier:
    """
    The identity of a single cluster object found in a document.

    `kind` is always lower-cased; `namespace` is taken verbatim from the
    document and may be missing.
    """
    kind: str
    resource_name: str
    namespace: Optional[str] = None

    @property
    def kind_name(self) -> str:
        """The `kind/name` form accepted by kubectl."""
        return f"{self.kind}/{self.resource_name}"


@dataclass(frozen=True)
class ShellResult:
    """Outcome of a process that actually ran. Code 0 is the only success."""
    code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.code == 0


@dataclass(frozen=True)
class Container:
    name: str
    image: str = ""

    def image_tag(self) -> Optional[str]:
        """
        Returns the version part of the image reference, or None unless the
        reference splits into exactly two pieces on ':'.
        """
        pieces = self.image.split(":")
        if len(pieces) != 2:
            return None
        return pieces[1]


@dataclass
class Pod:
    """
    A pod as reported by the cluster. `containers` is None when the caller
    only knows the pod by name and the list still has to be queried.
    """
    name: str
    namespace: Optional[str] = None
    containers: Optional[List[Container]] = None
    phase: Optional[str] = None

    @property
    def display_namespace(self) -> str:
        return self.namespace or "default"

    @property
    def label(self) -> str:
        return f"{self.display_namespace}/{self.name}"

    @classmethod
    def from_dict(cls, obj: Dict[str, Any]) -> "Pod":
        metadata = obj.get("metadata") or {}
        spec = obj.get("spec") or {}
        status = obj.get("status") or {}
        raw_containers = spec.get("containers")
        containers = None
        if raw_containers is not None:
            containers = [
                Container(name=c.get("name", ""), image=c.get("image", ""))
                for c in raw_containers
            ]
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace"),
            containers=containers,
            phase=status.get("phase"),
        )


@dataclass
class DebugSession:
    """
    Tracks one debug run. The deployment name is derived from the base name
    so cleanup never needs any stored state.
    """
    base_name: str
    image: str = ""
    pod_name: Optional[str] = None
    ports: List[str] = field(default_factory=list)

    @property
    def deployment_name(self) -> str:
        return debug_deployment_name(self.base_name)


def debug_deployment_name(base_name: str) -> str:
    return f"{base_name}-debug"


# --- Diff outcomes ---------------------------------------------------------

class DiffResultKind(Enum):
    SUCCEEDED = "Succeeded"
    NO_EDITOR = "NoEditor"
    NO_KIND_NAME = "NoKindName"
    NO_CLUSTER_RESOURCE = "NoClusterResource"
    GET_FAILED = "GetFailed"
    NOTHING_TO_DIFF = "NothingToDiff"


@dataclass(frozen=True)
class DiffSucceeded:
    kind = DiffResultKind.SUCCEEDED


@dataclass(frozen=True)
class DiffNoEditor:
    kind = DiffResultKind.NO_EDITOR


@dataclass(frozen=True)
class DiffNoKindName:
    reason: str
    kind = DiffResultKind.NO_KIND_NAME


@dataclass(frozen=True)
class DiffNoClusterResource:
    resource_name: str
    kind = DiffResultKind.NO_CLUSTER_RESOURCE


@dataclass(frozen=True)
class DiffGetFailed:
    stderr: str
    kind = DiffResultKind.GET_FAILED


@dataclass(frozen=True)
class DiffNothingToDiff:
    kind = DiffResultKind.NOTHING_TO_DIFF


DiffOutcome = Union[
    DiffSucceeded,
    DiffNoEditor,
    DiffNoKindName,
    DiffNoClusterResource,
    DiffGetFailed,
    DiffNothingToDiff,
]


# --- Pod selection -----------------------------------------------------------

class PodSelectionScope(Enum):
    APP = "app"
    ALL = "all"


class PodSelectionFallback(Enum):
    NONE = "none"
    ANY_POD = "any-pod"
