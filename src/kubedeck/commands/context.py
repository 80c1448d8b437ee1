#!/usr/bin/env python3
"""
KUBEDECK COMMAND CONTEXT
------------------------
Wires the engine together once per invocation and hands every command the
same set of collaborators. This is also the only layer that turns typed
failures into user-visible messages.

Author: KubeDeck Team
Date: 2026-10-18
"""

import functools
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from kubedeck.core.config import ConfigManager
from kubedeck.core.errors import KubeDeckError
from kubedeck.core.explainer import read_swagger
from kubedeck.core.session import SessionContext
from kubedeck.debug.orchestrator import ConsoleDebugAttacher, DebugOrchestrator, PollPolicy
from kubedeck.diff.engine import DiffEngine, RichDiffPresenter
from kubedeck.editor.document import Editor
from kubedeck.pods.selector import PodSelector
from kubedeck.resolution.prompter import KindNamePrompter
from kubedeck.resolution.resolver import KubeResolver
from kubedeck.shell.docker import Docker
from kubedeck.shell.git import Git
from kubedeck.shell.invoker import KubeInvoker, Shell
from kubedeck.ui.formatter import KubeFormatter
from kubedeck.ui.prompts import ConsolePrompter

logger = logging.getLogger("kubedeck.commands")


@dataclass
class KubeDeckContext:
    config: ConfigManager
    formatter: KubeFormatter
    prompter: object
    shell: Shell
    kubectl: KubeInvoker
    resolver: KubeResolver
    kinds: KindNamePrompter
    diff_engine: DiffEngine
    pods: PodSelector
    git: Git
    docker: Docker
    orchestrator: DebugOrchestrator
    session: SessionContext
    editor: Optional[Editor] = None
    project_root: Optional[Path] = None

    @classmethod
    def build(cls, config: ConfigManager, project_root: Optional[Path] = None,
              editor: Optional[Editor] = None, formatter: Optional[KubeFormatter] = None,
              prompter=None, shell: Optional[Shell] = None, sleep=None,
              temp_dir: Optional[Path] = None) -> "KubeDeckContext":
        formatter = formatter or KubeFormatter()
        prompter = prompter or ConsolePrompter(formatter.console)
        shell = shell or Shell()

        kubectl = KubeInvoker(shell, config.kubectl_binary, config.kubeconfig, formatter)
        resolver = KubeResolver()
        pods = PodSelector(kubectl, prompter, project_root)
        git = Git(shell, config.git_binary, project_root)
        docker = Docker(shell, config.docker_binary)

        orchestrator_args = dict(
            project_root=project_root,
            image_user=config.image_user,
            ports=config.debug_ports,
            remote_root=config.remote_root,
            poll_policy=PollPolicy(
                interval=config.poll_interval,
                timeout=config.poll_timeout,
                max_attempts=config.poll_max_attempts,
            ),
        )
        if sleep is not None:
            orchestrator_args["sleep"] = sleep
        orchestrator = DebugOrchestrator(
            kubectl, docker, git, pods, prompter, formatter,
            ConsoleDebugAttacher(formatter, shell, config.attach_command),
            **orchestrator_args,
        )

        return cls(
            config=config,
            formatter=formatter,
            prompter=prompter,
            shell=shell,
            kubectl=kubectl,
            resolver=resolver,
            kinds=KindNamePrompter(kubectl, resolver, prompter),
            diff_engine=DiffEngine(kubectl, resolver, prompter, RichDiffPresenter(formatter), temp_dir),
            pods=pods,
            git=git,
            docker=docker,
            orchestrator=orchestrator,
            session=SessionContext(lambda: read_swagger(kubectl)),
            editor=editor,
            project_root=project_root,
        )


def presents_errors(command):
    """
    Command handlers raise KubeDeckError freely; this reports it through the
    formatter and ends the command with None.
    """
    @functools.wraps(command)
    async def wrapper(ctx: KubeDeckContext, *args, **kwargs):
        try:
            return await command(ctx, *args, **kwargs)
        except KubeDeckError as e:
            logger.debug(f"{command.__name__} failed: {e.message}")
            ctx.formatter.present(e)
            return None
    return wrapper
