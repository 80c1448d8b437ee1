#!/usr/bin/env python3
"""
KUBEDECK RESOURCE KINDS
-----------------------
The catalogue of kinds offered when the user has to pick a resource type,
grouped by what each command can act on.

Author: KubeDeck Team
Date: 2026-10-18
"""

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class ResourceKind:
    display_name: str
    plural_display_name: str
    manifest_kind: str
    abbreviation: str


ALL_KINDS: Dict[str, ResourceKind] = {
    "endpoint": ResourceKind("Endpoint", "Endpoints", "Endpoint", "endpoints"),
    "namespace": ResourceKind("Namespace", "Namespaces", "Namespace", "namespace"),
    "node": ResourceKind("Node", "Nodes", "Node", "node"),
    "deployment": ResourceKind("Deployment", "Deployments", "Deployment", "deployment"),
    "daemonset": ResourceKind("DaemonSet", "DaemonSets", "DaemonSet", "daemonset"),
    "replicaset": ResourceKind("ReplicaSet", "ReplicaSets", "ReplicaSet", "rs"),
    "replicationcontroller": ResourceKind("Replication Controller", "Replication Controllers",
                                          "ReplicationController", "rc"),
    "job": ResourceKind("Job", "Jobs", "Job", "job"),
    "cronjob": ResourceKind("CronJob", "CronJobs", "CronJob", "cronjob"),
    "pod": ResourceKind("Pod", "Pods", "Pod", "pod"),
    "crd": ResourceKind("Custom Resource", "Custom Resources", "CustomResourceDefinition", "crd"),
    "service": ResourceKind("Service", "Services", "Service", "service"),
    "configmap": ResourceKind("ConfigMap", "Config Maps", "ConfigMap", "configmap"),
    "secret": ResourceKind("Secret", "Secrets", "Secret", "secret"),
    "ingress": ResourceKind("Ingress", "Ingress", "Ingress", "ingress"),
    "persistentvolume": ResourceKind("Persistent Volume", "Persistent Volumes",
                                     "PersistentVolume", "pv"),
    "persistentvolumeclaim": ResourceKind("Persistent Volume Claim", "Persistent Volume Claims",
                                          "PersistentVolumeClaim", "pvc"),
    "storageclass": ResourceKind("Storage Class", "Storage Classes", "StorageClass", "sc"),
    "statefulset": ResourceKind("StatefulSet", "StatefulSets", "StatefulSet", "statefulset"),
}

COMMON_KINDS: List[ResourceKind] = [
    ALL_KINDS["deployment"],
    ALL_KINDS["replicaset"],
    ALL_KINDS["replicationcontroller"],
    ALL_KINDS["job"],
    ALL_KINDS["cronjob"],
    ALL_KINDS["pod"],
    ALL_KINDS["service"],
]

EXPOSABLE_KINDS: List[ResourceKind] = [
    ALL_KINDS["deployment"],
    ALL_KINDS["pod"],
    ALL_KINDS["replicaset"],
    ALL_KINDS["replicationcontroller"],
    ALL_KINDS["service"],
]

SCALEABLE_KINDS: List[ResourceKind] = [
    ALL_KINDS["deployment"],
    ALL_KINDS["replicaset"],
    ALL_KINDS["replicationcontroller"],
    ALL_KINDS["job"],
    ALL_KINDS["statefulset"],
]
