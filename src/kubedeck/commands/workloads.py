#!/usr/bin/env python3
"""
KUBEDECK WORKLOAD COMMANDS
--------------------------
Operations on the running app: run, exec, terminal, sync, debug and
remove-debug. The app is the project directory; its pods carry the label
run=<directory name>.

Author: KubeDeck Team
Date: 2026-10-18
"""

import asyncio
import logging
import shlex
from typing import Optional

from kubedeck.commands.context import KubeDeckContext, presents_errors
from kubedeck.core.errors import KubeDeckError
from kubedeck.core.models import PodSelectionFallback, PodSelectionScope

logger = logging.getLogger("kubedeck.commands")

SYNC_ACTION = "OK"


@presents_errors
async def run(ctx: KubeDeckContext):
    await ctx.orchestrator.run_app()
    return True


async def _exec_target(ctx: KubeDeckContext, command: Optional[str], prompt_default: Optional[str]):
    if not command:
        command = await ctx.prompter.input_box(
            "Please provide a command to execute", placeholder="Command", value=prompt_default
        )
    if not command:
        return None

    pod = await ctx.pods.select_pod(PodSelectionScope.APP, PodSelectionFallback.ANY_POD)
    if pod is None:
        return None
    container = await ctx.pods.select_container_for_pod(pod)
    if container is None:
        return None
    return command, pod, container


def _exec_command(pod, container, command: str, interactive: bool):
    argv = ["exec"]
    if interactive:
        argv.append("-it")
    argv.append(pod.name)
    if pod.namespace:
        argv += ["--namespace", pod.namespace]
    argv += ["-c", container.name, "--"] + shlex.split(command)
    return argv


@presents_errors
async def exec_in_pod(ctx: KubeDeckContext, command: Optional[str] = None):
    """One-shot command; output is shown once it completes."""
    target = await _exec_target(ctx, command, None)
    if target is None:
        return None
    command, pod, container = target
    argv = _exec_command(pod, container, command, interactive=False)
    await ctx.kubectl.invoke_with_progress(argv, f"Running {command} in {pod.name}...")
    return argv


@presents_errors
async def terminal(ctx: KubeDeckContext, command: Optional[str] = None):
    """Interactive session attached to this terminal."""
    target = await _exec_target(ctx, command, "bash")
    if target is None:
        return None
    command, pod, container = target
    argv = _exec_command(pod, container, command, interactive=True)
    code = await ctx.kubectl.run_as_terminal(argv, f"{command} on {pod.name}/{container.name}")
    if code is None:
        raise KubeDeckError(f"Unable to call {ctx.kubectl.binary}")
    return argv


@presents_errors
async def sync(ctx: KubeDeckContext):
    """Checks out the commit the app's running image was built from."""
    pod = await ctx.pods.select_pod(PodSelectionScope.APP, PodSelectionFallback.NONE)
    if pod is None:
        return None
    container = await ctx.pods.select_container_for_pod(pod)
    if container is None:
        return None

    commit_id = container.image_tag()
    if not commit_id:
        raise KubeDeckError(f"Sync needs an image tagged <name>:<commit>; found '{container.image}'")

    age = await ctx.git.when_created(commit_id)
    age_text = f" ({age})" if age else ""
    choice = await ctx.prompter.confirm(
        f"{container.name} is running commit {commit_id}{age_text}. "
        "Check out this commit? Your working tree will change.",
        SYNC_ACTION, level="warning",
    )
    if choice != SYNC_ACTION:
        return None

    await ctx.git.checkout(commit_id)
    ctx.formatter.info(f"Checked out {commit_id}")
    return commit_id


@presents_errors
async def debug(ctx: KubeDeckContext, command: Optional[str] = None,
                cancel: Optional[asyncio.Event] = None):
    return await ctx.orchestrator.debug(command, cancel)


@presents_errors
async def remove_debug(ctx: KubeDeckContext, name: Optional[str] = None):
    base_name = name or ctx.orchestrator.app_base_name()
    return await ctx.orchestrator.remove_debug(base_name)
