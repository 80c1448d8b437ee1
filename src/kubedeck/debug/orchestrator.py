#!/usr/bin/env python3
"""
KUBEDECK DEBUG ORCHESTRATOR
---------------------------
Runs the remote debug workflow as a strict sequence; each stage gates the
next and any failure aborts the rest:

1. Build   - docker build -t <name>:<version>
2. Push    - docker push (access-denied failures get their own advice)
3. Run     - kubectl run <name>-debug ... -- <command>
4. Poll    - wait for the pod phase to reach Running (bounded, cancellable)
5. Attach  - port-forward and hand a debug configuration to the attacher
6. Expose  - optionally publish the debug deployment as a LoadBalancer

Cleanup (remove_debug) is separate and idempotent: the debug deployment
name is always <name>-debug, so nothing has to be remembered.

Author: KubeDeck Team
Date: 2026-10-18
"""

import asyncio
import json
import logging
import shlex
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from kubedeck.core.errors import (
    BuildError,
    CommandFailedError,
    DebugError,
    LaunchError,
    NoProjectError,
    PodNotReadyError,
    PollCancelledError,
    PushError,
)
from kubedeck.core.models import DebugSession, Pod, debug_deployment_name
from kubedeck.pods.selector import PodSelector
from kubedeck.shell.docker import Docker, diagnose_push_error, sanitise_tag
from kubedeck.shell.git import Git
from kubedeck.shell.invoker import KubeInvoker, Shell
from kubedeck.ui.formatter import KubeFormatter

logger = logging.getLogger("kubedeck.debug")

EXPOSE_ACTION = "Expose Service"
DELETE_ACTION = "Delete"


@dataclass
class PollPolicy:
    """
    Bounds for the readiness poll. None disables a bound; with both None
    the poll only ends on Running, a failed query or cancellation.
    """
    interval: float = 1.0
    timeout: Optional[float] = 300.0
    max_attempts: Optional[int] = None


class ConsoleDebugAttacher:
    """
    Starts the configured attach command, or prints the attach configuration
    for an IDE when none is configured.
    """

    def __init__(self, formatter: KubeFormatter, shell: Shell, attach_command: Optional[str] = None):
        self.formatter = formatter
        self.shell = shell
        self.attach_command = attach_command

    async def attach(self, configuration: Dict[str, Any]) -> bool:
        if not self.attach_command:
            self.formatter.show_output(json.dumps(configuration, indent=2), "Debugger attach configuration")
            return True
        argv = shlex.split(self.attach_command.format(**configuration))
        return await self.shell.spawn(argv) is not None


class DebugOrchestrator:

    def __init__(self, kubectl: KubeInvoker, docker: Docker, git: Git, pods: PodSelector,
                 prompter, formatter: KubeFormatter, attacher,
                 project_root: Optional[Path] = None,
                 image_user: Optional[str] = None,
                 ports: Optional[List[str]] = None,
                 remote_root: str = "/",
                 poll_policy: Optional[PollPolicy] = None,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
                 clock: Callable[[], float] = time.monotonic):
        self.kubectl = kubectl
        self.docker = docker
        self.git = git
        self.pods = pods
        self.prompter = prompter
        self.formatter = formatter
        self.attacher = attacher
        self.project_root = project_root
        self.image_user = image_user
        self.ports = ports or ["5858:5858", "8000:8000"]
        self.remote_root = remote_root
        self.poll_policy = poll_policy or PollPolicy()
        self.sleep = sleep
        self.clock = clock

    # --- Naming -------------------------------------------------------------

    def _require_project(self) -> Path:
        if not self.project_root:
            raise NoProjectError("This command requires an open project folder.")
        return Path(self.project_root)

    def app_base_name(self) -> str:
        return sanitise_tag(self._require_project().name)

    async def find_version(self) -> str:
        """
        'latest' without git metadata, 'error' when git could not answer,
        otherwise `git describe --always --dirty`.
        """
        root = self._require_project()
        if not (root / ".git").exists():
            return "latest"

        result = await self.git.describe()
        if result is None:
            logger.error("git describe failed: unable to call git")
            return "error"
        if not result.succeeded:
            logger.error(f"git describe returned {result.code}: {result.stderr.strip()}")
            return "error"
        return result.stdout.strip()

    async def find_name_and_image(self) -> Tuple[str, str]:
        name = self.app_base_name()
        version = await self.find_version()
        image = f"{name}:{version}"
        if self.image_user:
            image = f"{self.image_user}/{image}"
        return name.strip(), image.strip()

    # --- Stages 1 & 2 -----------------------------------------------------------

    async def build_and_push(self, image: str):
        root = self._require_project()

        with self.formatter.status("Docker Building..."):
            build = await self.docker.build(image, root)
        if build is None:
            raise LaunchError("docker", "Docker Build failed; unable to call Docker.")
        if not build.succeeded:
            logger.error(build.stderr)
            raise BuildError(f"Image build failed.\n{build.stderr.strip()}", build.stderr, build.code)
        self.formatter.info(f"{image} built.")

        with self.formatter.status("Docker Pushing..."):
            push = await self.docker.push(image)
        if push is None:
            raise LaunchError("docker", "Docker Push failed; unable to call Docker.")
        if not push.succeeded:
            diagnostic = diagnose_push_error(push.code, push.stderr, self.image_user)
            raise PushError(f"{diagnostic}\n{push.stderr.strip()}", push.stderr, push.code)
        self.formatter.info(f"{image} pushed.")

    async def run_app(self):
        """Build, push and start the app as a plain deployment."""
        name, image = await self.find_name_and_image()
        await self.build_and_push(image)
        await self.kubectl.invoke_with_progress(["run", name, f"--image={image}"],
                                                "Creating a Deployment...")

    # --- Full debug workflow ------------------------------------------------------

    async def debug(self, command: Optional[str] = None,
                    cancel: Optional[asyncio.Event] = None) -> Optional[DebugSession]:
        name, image = await self.find_name_and_image()
        await self.build_and_push(image)

        if not command:
            command = await self.prompter.input_box(
                "Debug command for your container:",
                placeholder="Example: node debug server.js",
            )
        if not command:
            return None

        return await self.do_debug(name, image, command, cancel)

    async def do_debug(self, name: str, image: str, command: str,
                       cancel: Optional[asyncio.Event] = None) -> DebugSession:
        session = DebugSession(base_name=name, image=image, ports=list(self.ports))

        # Stage 3
        run_cmd = ["run", session.deployment_name, f"--image={image}", "-i", "--attach=false", "--"]
        run_cmd += shlex.split(command)
        result = await self.kubectl.invoke_async(run_cmd)
        if result is None:
            raise LaunchError("kubectl", "Failed to start debug container: Unable to run kubectl")
        if not result.succeeded:
            raise DebugError(f"Failed to start debug container: {result.stderr.strip()}")

        pods = await self.pods.find_debug_pods_for_app(name)
        if not pods:
            raise DebugError("Failed to find debug pod.")
        pod = pods[0]
        session.pod_name = pod.name
        self.formatter.info(f"Debug pod running as: {pod.name}")

        # Stages 4-6
        await self.wait_for_running_pod(pod.name, pod.namespace, cancel)
        await self.attach(session, pod)
        await self.offer_expose(session)
        return session

    async def wait_for_running_pod(self, pod_name: str, namespace: Optional[str] = None,
                                   cancel: Optional[asyncio.Event] = None) -> int:
        """
        Queries the pod phase until it is Running. Returns the number of
        queries made.
        """
        policy = self.poll_policy
        command = ["get", "pods", pod_name, "-o", "jsonpath", "--template={.status.phase}"]
        if namespace:
            command += ["--namespace", namespace]

        started = self.clock()
        attempts = 0
        while True:
            if cancel is not None and cancel.is_set():
                raise PollCancelledError(f"Stopped waiting for pod {pod_name}.")

            result = await self.kubectl.invoke_async(command)
            if result is None:
                raise LaunchError("kubectl")
            if not result.succeeded:
                raise DebugError(f"Failed to run command ({result.code}) {result.stderr.strip()}")

            attempts += 1
            phase = result.stdout.strip()
            if phase == "Running":
                return attempts

            logger.debug(f"Pod {pod_name} is {phase or 'unknown'} (attempt {attempts})")
            if policy.max_attempts is not None and attempts >= policy.max_attempts:
                raise PodNotReadyError(
                    f"Pod {pod_name} was not Running after {attempts} checks (last phase: {phase})."
                )
            if policy.timeout is not None and self.clock() - started >= policy.timeout:
                raise PodNotReadyError(
                    f"Pod {pod_name} was not Running after {policy.timeout:g}s (last phase: {phase})."
                )
            await self.sleep(policy.interval)

    async def attach(self, session: DebugSession, pod: Pod):
        forward = await self.kubectl.spawn(["port-forward", pod.name, *session.ports])
        if forward is None:
            raise LaunchError("kubectl", "Unable to start port forwarding: unable to call kubectl")

        debug_port = int(session.ports[0].split(":")[0]) if session.ports else 5858
        configuration = {
            "type": "node",
            "request": "attach",
            "name": "Attach to Process",
            "port": debug_port,
            "localRoot": str(self._require_project()),
            "remoteRoot": self.remote_root,
        }
        if not await self.attacher.attach(configuration):
            raise DebugError("Unable to start the debugger.")

    async def offer_expose(self, session: DebugSession) -> Optional[str]:
        choice = await self.prompter.confirm("Debug session established", EXPOSE_ACTION)
        if choice != EXPOSE_ACTION:
            return None

        port = await self.prompter.input_box("Expose on which port?", placeholder="80")
        if not port:
            return None

        deployment = session.deployment_name
        result = await self.kubectl.invoke_async(
            ["expose", "deployment", deployment, "--type=LoadBalancer", f"--port={port}"]
        )
        if result is None:
            raise LaunchError("kubectl")
        if not result.succeeded:
            raise CommandFailedError(f"Failed to expose deployment: {result.stderr.strip()}",
                                     result.stderr, result.code)
        self.formatter.info(
            f"Deployment exposed. Run 'kubedeck get service/{deployment}' for IP address"
        )
        return port

    # --- Cleanup ---------------------------------------------------------------

    async def _exists(self, kind: str, name: str) -> bool:
        result = await self.kubectl.invoke_async(["get", kind, name])
        if result is None:
            raise LaunchError("kubectl")
        return result.succeeded

    async def remove_debug(self, name: str) -> List[str]:
        """
        Deletes whichever of the <name>-debug deployment and service exist.
        Returns the kinds that were deleted.
        """
        deployment_name = debug_deployment_name(name)
        deployment = await self._exists("deployments", deployment_name)
        service = await self._exists("services", deployment_name)

        if not deployment and not service:
            self.formatter.info(f"{deployment_name}: nothing to clean up")
            return []

        if deployment:
            to_delete = "deployment" + (" and service" if service else "")
        else:
            to_delete = "service"
        choice = await self.prompter.confirm(
            f"This will delete {to_delete} {deployment_name}", DELETE_ACTION, level="warning"
        )
        if choice != DELETE_ACTION:
            return []

        deleted = []
        failures = []
        for kind, present in (("service", service), ("deployment", deployment)):
            if not present:
                continue
            result = await self.kubectl.invoke_async(["delete", kind, deployment_name])
            if result is not None and result.succeeded:
                deleted.append(kind)
            else:
                failures.append(f"{kind}: {result.stderr.strip() if result else 'Unable to call kubectl'}")

        if failures:
            raise CommandFailedError(f"Failed to clean up {deployment_name}: " + "; ".join(failures))
        return deleted
