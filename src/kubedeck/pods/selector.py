#!/usr/bin/env python3
"""
KUBEDECK POD SELECTOR - Pod & Container Disambiguation
------------------------------------------------------
Resolves the pod (and then the container) a command should act on.

Rules the rest of the tool relies on:
1. Exactly one candidate is returned without asking.
2. Several candidates are offered in a pick list; dismissing it yields None.
3. The APP scope (label run=<project dir name>) falls back to the whole
   cluster once, and only when asked to with ANY_POD.

Nothing here mutates the cluster.

Author: KubeDeck Team
Date: 2026-10-18
"""

import logging
from pathlib import Path
from typing import List, Optional

from kubedeck.core.errors import CommandFailedError, LaunchError, NoPodsError
from kubedeck.core.models import (
    Container,
    Pod,
    PodSelectionFallback,
    PodSelectionScope,
)
from kubedeck.shell.invoker import KubeInvoker
from kubedeck.ui.prompts import PickItem

logger = logging.getLogger("kubedeck.pods")

# kubectl expands the escaped \t and \n inside jsonpath string literals
CONTAINERS_QUERY = (
    r'{"NAME\tIMAGE\n"}'
    r'{range .spec.containers[*]}{.name}{"\t"}{.image}{"\n"}{end}'
)

SCOPE_MESSAGES = {
    PodSelectionScope.APP: "associated with this app",
    PodSelectionScope.ALL: "in the cluster",
}


class PodSelector:

    def __init__(self, kubectl: KubeInvoker, prompter, project_root: Optional[Path] = None):
        self.kubectl = kubectl
        self.prompter = prompter
        self.project_root = project_root

    @property
    def app_name(self) -> Optional[str]:
        if not self.project_root:
            return None
        return Path(self.project_root).name

    async def find_pods(self, label_query: Optional[str] = None) -> List[Pod]:
        command = ["get", "pods", "-o", "json"]
        if label_query:
            command += ["-l", label_query]
        pod_list = await self.kubectl.as_json(command)
        return [Pod.from_dict(item) for item in pod_list.get("items", [])]

    async def find_all_pods(self) -> List[Pod]:
        return await self.find_pods()

    async def find_pods_for_app(self) -> List[Pod]:
        if not self.app_name:
            return []
        return await self.find_pods(f"run={self.app_name}")

    async def find_debug_pods_for_app(self, base_name: Optional[str] = None) -> List[Pod]:
        name = base_name or self.app_name
        if not name:
            return []
        return await self.find_pods(f"run={name}-debug")

    async def select_pod(self, scope: PodSelectionScope,
                         fallback: PodSelectionFallback) -> Optional[Pod]:
        if scope == PodSelectionScope.APP:
            pods = await self.find_pods_for_app()
        else:
            pods = await self.find_all_pods()

        if not pods:
            if fallback == PodSelectionFallback.ANY_POD:
                logger.info("No pods for this app; looking cluster-wide")
                return await self.select_pod(PodSelectionScope.ALL, PodSelectionFallback.NONE)
            raise NoPodsError(f"Couldn't find any pods {SCOPE_MESSAGES[scope]}.")

        if len(pods) == 1:
            return pods[0]

        picked = await self.prompter.quick_pick(
            [PickItem(label=pod.label, value=pod) for pod in pods]
        )
        return picked.value if picked else None

    async def get_containers(self, pod: Pod) -> List[Container]:
        command = ["get", f"pod/{pod.name}", "-o", f"jsonpath={CONTAINERS_QUERY}"]
        if pod.namespace:
            command.append(f"--namespace={pod.namespace}")
        try:
            lines = await self.kubectl.as_lines(command)
        except (CommandFailedError, LaunchError) as e:
            raise CommandFailedError(f"Failed to get containers in resource: {e.message}",
                                     getattr(e, "stderr", ""))
        containers = []
        for line in lines:
            bits = line.split("\t")
            containers.append(Container(name=bits[0], image=bits[1] if len(bits) > 1 else ""))
        return containers

    async def select_container_for_pod(self, pod: Pod) -> Optional[Container]:
        containers = pod.containers if pod.containers is not None else await self.get_containers(pod)

        if not containers:
            return None

        if len(containers) == 1:
            return containers[0]

        picked = await self.prompter.quick_pick(
            [PickItem(label=c.name, detail=c.image, value=c) for c in containers],
            placeholder="Select container",
        )
        return picked.value if picked else None
