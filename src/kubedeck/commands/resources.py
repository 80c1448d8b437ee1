#!/usr/bin/env python3
"""
KUBEDECK RESOURCE COMMANDS
--------------------------
User-facing operations on cluster resources: diff, apply, create, get,
describe, delete, expose, scale, load, use-context, cronjob-run and explain.

Each command resolves its target from the open document when it can,
prompts otherwise, and stops silently when a prompt is dismissed.

Author: KubeDeck Team
Date: 2026-10-18
"""

import logging
import os
import re
import tempfile
import time
from pathlib import Path
from typing import Optional

from kubedeck.commands.context import KubeDeckContext, presents_errors
from kubedeck.core.errors import (
    CommandFailedError,
    KubeDeckError,
    LaunchError,
    NoEditorError,
    NoResourcesError,
    ResolutionError,
)
from kubedeck.core.explainer import read_explanation
from kubedeck.core.models import (
    DiffGetFailed,
    DiffNoClusterResource,
    DiffNoEditor,
    DiffNoKindName,
    DiffNothingToDiff,
    DiffSucceeded,
    ShellResult,
)
from kubedeck.editor.active import detect_format, get_text_for_active_window
from kubedeck.resolution.kinds import ALL_KINDS, COMMON_KINDS, EXPOSABLE_KINDS, SCALEABLE_KINDS
from kubedeck.resolution.prompter import KindNameOptions, contains_name
from kubedeck.shell.invoker import to_wsl_path

logger = logging.getLogger("kubedeck.commands")

APPLY_ACTION = "Apply"
CREATE_ACTION = "Create"
DELETE_ACTION = "Delete"
CANCEL_ACTION = "Cancel"

KUBERNETES_LANGUAGES = ("json", "yaml", "helm")
EXPOSE_PATTERN = re.compile(r"^\s*EXPOSE\s+(\d+)", re.IGNORECASE | re.MULTILINE)
REPLICA_PATTERN = re.compile(r"\d+")


def _require(result: Optional[ShellResult], failure: str) -> ShellResult:
    """`failure` is prefixed to stderr when kubectl ran and exited non-zero."""
    if result is None:
        raise LaunchError("kubectl", f"{failure}: Unable to call kubectl")
    if not result.succeeded:
        raise CommandFailedError(f"{failure}: {result.stderr.strip()}", result.stderr, result.code)
    return result


def _editor_namespace(ctx: KubeDeckContext, kind_name: str) -> Optional[str]:
    """Namespace declared by the open document, if it describes `kind_name`."""
    try:
        identifier = ctx.resolver.find_identifier_in_editor(ctx.editor)
    except ResolutionError:
        return None
    return identifier.namespace if identifier.kind_name == kind_name else None


# --- Active document ------------------------------------------------------------

async def run_command_for_active_window(ctx: KubeDeckContext, verb: str) -> Optional[ShellResult]:
    """Runs `kubectl <verb> -f <source>` against whatever the editor offers."""
    if ctx.editor is None:
        raise NoEditorError(f"No active editor - the {verb.capitalize()} command requires an open document")

    text, file_path = await get_text_for_active_window(ctx.editor, ctx.prompter)
    handler = None
    if ctx.editor.document.language_id.lower() not in KUBERNETES_LANGUAGES:
        handler = _invalid_document_handler(ctx)

    if text:
        fd, name = tempfile.mkstemp(suffix=f".{detect_format(text)}", prefix="kubedeck-",
                                    dir=str(ctx.diff_engine.temp_dir))
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
        source = name
    elif file_path:
        source = str(file_path)
    else:
        return None

    if ctx.config.use_wsl:
        source = to_wsl_path(source)

    command = [verb, "-f", source]
    if ctx.config.namespace:
        command += ["--namespace", ctx.config.namespace]

    return await ctx.kubectl.invoke_with_progress(command, f"Kubernetes {verb} in progress...", handler)


def _invalid_document_handler(ctx: KubeDeckContext):
    def handler(code: int, stdout: str, stderr: str):
        if code == 0:
            ctx.formatter.info(stdout.strip())
            return
        ctx.formatter.error(
            "Kubectl command failed. The open document might not be a valid "
            f"Kubernetes resource. Details: {stderr.strip()}"
        )
    return handler


@presents_errors
async def diff(ctx: KubeDeckContext):
    outcome = await ctx.diff_engine.classify(ctx.editor)

    if isinstance(outcome, DiffNoEditor):
        ctx.formatter.error("No active editor - the Diff command requires an open document")
    elif isinstance(outcome, DiffNoKindName):
        ctx.formatter.error(f"Can't diff - {outcome.reason}")
    elif isinstance(outcome, DiffNoClusterResource):
        ctx.formatter.info(f"Can't diff - {outcome.resource_name} doesn't exist in the cluster")
    elif isinstance(outcome, DiffGetFailed):
        ctx.formatter.error(f"Can't diff - error getting existing resource: {outcome.stderr.strip()}")
    elif isinstance(outcome, DiffNothingToDiff):
        ctx.formatter.info("Nothing to diff")
    return outcome


@presents_errors
async def apply(ctx: KubeDeckContext) -> Optional[str]:
    """Shows the pending change first, then applies (or creates) on confirmation."""
    outcome = await ctx.diff_engine.classify(ctx.editor)

    if isinstance(outcome, DiffSucceeded):
        choice = await ctx.prompter.confirm("Do you wish to apply this change?", APPLY_ACTION)
        verb = "apply" if choice == APPLY_ACTION else None
    elif isinstance(outcome, DiffNoKindName):
        choice = await ctx.prompter.confirm(
            f"Can't show what changes will be applied ({outcome.reason}). Apply anyway?",
            APPLY_ACTION, level="warning",
        )
        verb = "apply" if choice == APPLY_ACTION else None
    elif isinstance(outcome, DiffNoClusterResource):
        choice = await ctx.prompter.confirm(
            f"Resource {outcome.resource_name} does not exist - this will create a new resource.",
            CREATE_ACTION,
        )
        verb = "create" if choice == CREATE_ACTION else None
    elif isinstance(outcome, DiffGetFailed):
        choice = await ctx.prompter.confirm(
            "Can't show what changes will be applied - error getting existing resource "
            f"({outcome.stderr.strip()}). Apply anyway?",
            APPLY_ACTION, level="warning",
        )
        verb = "apply" if choice == APPLY_ACTION else None
    elif isinstance(outcome, DiffNoEditor):
        ctx.formatter.error("No active editor - the Apply command requires an open document")
        return None
    else:
        ctx.formatter.info("Nothing to apply")
        return None

    if verb is None:
        return None
    await run_command_for_active_window(ctx, verb)
    return verb


@presents_errors
async def create(ctx: KubeDeckContext):
    return await run_command_for_active_window(ctx, "create")


# --- Named targets --------------------------------------------------------------

@presents_errors
async def get(ctx: KubeDeckContext, target: Optional[str] = None):
    kind_name = target or await ctx.kinds.find_kind_name_or_prompt(COMMON_KINDS, "get", editor=ctx.editor)
    if not kind_name:
        return None

    result = await ctx.kubectl.invoke_async(["get", kind_name, "-o", "wide"])
    result = _require(result, "Kubectl command failed")
    ctx.formatter.show_output(result.stdout, kind_name)
    return kind_name


@presents_errors
async def describe(ctx: KubeDeckContext, target: Optional[str] = None):
    kind_name = target or await ctx.kinds.find_kind_name_or_prompt(COMMON_KINDS, "describe", editor=ctx.editor)
    if not kind_name:
        return None

    command = ["describe", kind_name]
    namespace = _editor_namespace(ctx, kind_name)
    if namespace:
        command += ["--namespace", namespace]

    with ctx.formatter.status(f"Describing {kind_name}..."):
        result = await ctx.kubectl.invoke_async(command)
    result = _require(result, "Describe failed")
    ctx.formatter.show_output(result.stdout, f"describe {kind_name}")
    return kind_name


@presents_errors
async def delete(ctx: KubeDeckContext, target: Optional[str] = None, now: bool = False):
    kind_name = target or await ctx.kinds.prompt_kind_name(
        COMMON_KINDS, "delete", KindNameOptions(name_optional=True)
    )
    if not kind_name:
        return None

    choice = await ctx.prompter.confirm(
        f"Are you sure you want to delete {kind_name}?", DELETE_ACTION, CANCEL_ACTION, level="warning"
    )
    if choice != DELETE_ACTION:
        return None

    command = ["delete", kind_name]
    if not contains_name(kind_name):
        command.append("--all")
    namespace = _editor_namespace(ctx, kind_name)
    if namespace:
        command += ["--namespace", namespace]
    if now:
        command.append("--now")

    result = await ctx.kubectl.invoke_async(command)
    result = _require(result, f"Failed to delete resource '{kind_name}'")
    ctx.formatter.info(result.stdout.strip())
    return kind_name


def find_exposed_port(project_root: Optional[Path]) -> Optional[str]:
    """First EXPOSE port of the project's Dockerfile."""
    if not project_root:
        return None
    dockerfile = Path(project_root) / "Dockerfile"
    if not dockerfile.exists():
        return None
    try:
        text = dockerfile.read_text(encoding="utf-8-sig")
    except OSError as e:
        logger.warning(f"Could not read {dockerfile}: {e}")
        return None
    match = EXPOSE_PATTERN.search(text)
    return match.group(1) if match else None


@presents_errors
async def expose(ctx: KubeDeckContext, target: Optional[str] = None):
    kind_name = target or await ctx.kinds.find_kind_name_or_prompt(EXPOSABLE_KINDS, "expose", editor=ctx.editor)
    if not kind_name:
        return None

    command = ["expose", kind_name]
    port = find_exposed_port(ctx.project_root)
    if port:
        command.append(f"--port={port}")

    await ctx.kubectl.invoke_with_progress(command, f"Exposing {kind_name}...")
    return command


@presents_errors
async def scale(ctx: KubeDeckContext, target: Optional[str] = None, replicas: Optional[str] = None):
    kind_name = target or await ctx.kinds.find_kind_name_or_prompt(SCALEABLE_KINDS, "scale", editor=ctx.editor)
    if not kind_name:
        return None

    if replicas is None:
        replicas = await ctx.prompter.input_box("How many replicas would you like?", placeholder="3")
    if replicas is None:
        return None
    if not REPLICA_PATTERN.fullmatch(str(replicas).strip()):
        raise KubeDeckError("Replica count must be a non-negative integer")

    command = ["scale", f"--replicas={int(replicas)}", kind_name]
    await ctx.kubectl.invoke_with_progress(command, f"Scaling {kind_name}...")
    return command


@presents_errors
async def load(ctx: KubeDeckContext, target: Optional[str] = None):
    """Prints the live serialization of a resource."""
    kind_name = target or await ctx.kinds.prompt_kind_name(
        COMMON_KINDS, "load", KindNameOptions(name_optional=True)
    )
    if not kind_name:
        return None

    output_format = ctx.config.output_format
    result = await ctx.kubectl.invoke_async(["-o", output_format, "get", kind_name])
    result = _require(result, "Kubectl command failed")
    ctx.formatter.show_document(result.stdout, output_format, kind_name)
    return result.stdout


@presents_errors
async def use_context(ctx: KubeDeckContext, context_name: str):
    result = await ctx.kubectl.invoke_async(["config", "use-context", context_name])
    _require(result, f"Failed to set '{context_name}' as current cluster")
    ctx.formatter.info(f"Switched to context {context_name}")
    return context_name


async def current_namespace(ctx: KubeDeckContext) -> Optional[str]:
    result = await ctx.kubectl.invoke_async(["config", "view", "--minify", "-o", "jsonpath={..namespace}"])
    if result is None or not result.succeeded:
        return None
    return result.stdout.strip() or None


@presents_errors
async def cronjob_run(ctx: KubeDeckContext, cronjob_name: Optional[str] = None):
    """Starts a one-off job from a cronjob's template."""
    name = cronjob_name or await ctx.kinds.pick_resource_name(ALL_KINDS["cronjob"], "CronJob to run now")
    if not name:
        return None

    proposed = f"{name}-{int(time.time())}"
    job_name = await ctx.prompter.input_box("Choose a name for the job", value=proposed)
    if not job_name:
        return None

    command = ["create", "job", job_name]
    namespace = await current_namespace(ctx)
    if namespace:
        command += ["--namespace", namespace]
    command.append(f"--from=cronjob/{name}")

    result = await ctx.kubectl.invoke_async(command)
    _require(result, "Error creating job")
    ctx.formatter.info(f"Created job {job_name}")
    return job_name


@presents_errors
async def explain(ctx: KubeDeckContext, reference: Optional[str] = None):
    """
    Explains a kind or field path (Deployment.spec.replicas). Without a
    reference, the kind of the open document is explained.
    """
    if not reference:
        identifier = ctx.resolver.find_identifier_in_editor(ctx.editor)
        reference = identifier.kind

    if not ctx.session.explain_active:
        ctx.session.toggle_explain()

    with ctx.formatter.status("Reading API specification..."):
        spec = await ctx.session.get_spec()
    if spec is None:
        raise KubeDeckError("Explain failed: the cluster did not return a usable API specification")

    explanation = read_explanation(spec, reference)
    if explanation is None:
        raise NoResourcesError(f"No explanation found for {reference}")
    ctx.formatter.show_markdown(explanation)
    return explanation
