#!/usr/bin/env python3
"""
KUBEDECK KIND/NAME PROMPTER
---------------------------
The fallback used when the open document cannot tell us which resource an
operation targets. It asks for `kind/name` directly, and when the user
leaves that empty it walks them through picking a kind and then one of the
names the cluster currently has for it.

Author: KubeDeck Team
Date: 2026-10-18
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from kubedeck.core.errors import (
    CommandFailedError,
    LaunchError,
    NoResourcesError,
    ResolutionError,
)
from kubedeck.editor.document import Editor
from kubedeck.resolution.kinds import ResourceKind
from kubedeck.resolution.resolver import KubeResolver
from kubedeck.shell.invoker import KubeInvoker
from kubedeck.ui.prompts import PickItem

logger = logging.getLogger("kubedeck.prompter")

ALL_PICK = "(all)"


@dataclass
class KindNameOptions:
    prompt: Optional[str] = None
    placeholder: Optional[str] = None
    name_optional: bool = False
    filter_names: List[str] = field(default_factory=list)


def parse_names_from_kubectl_lines(text: str) -> List[str]:
    """First column of a `kubectl get` table, header excluded."""
    lines = text.split("\n")[1:]
    return [line.split(" ")[0] for line in lines if len(line) > 0]


def contains_name(kind_name: Optional[str]) -> bool:
    if kind_name:
        return kind_name.find("/") > 0
    return False


class KindNamePrompter:

    def __init__(self, kubectl: KubeInvoker, resolver: KubeResolver, prompter):
        self.kubectl = kubectl
        self.resolver = resolver
        self.prompter = prompter

    async def find_kind_name_or_prompt(self, kinds: List[ResourceKind], verb: str,
                                       opts: Optional[KindNameOptions] = None,
                                       editor: Optional[Editor] = None) -> Optional[str]:
        """
        Uses the resource in the open document when there is exactly one,
        otherwise prompts. Returns `kind/name` (or a bare kind when the user
        picked "(all)"), or None when the user cancelled.
        """
        try:
            identifier = self.resolver.find_identifier_in_editor(editor)
        except ResolutionError as e:
            logger.debug(f"Falling back to prompt: {e.message}")
            return await self.prompt_kind_name(kinds, verb, opts)
        return identifier.kind_name

    async def prompt_kind_name(self, kinds: List[ResourceKind], verb: str,
                               opts: Optional[KindNameOptions] = None) -> Optional[str]:
        opts = opts or KindNameOptions()
        placeholder = opts.placeholder or "Empty string to be prompted"
        prompt = opts.prompt or f"What resource do you want to {verb}?"

        resource = await self.prompter.input_box(prompt, placeholder=placeholder)
        if resource is None:
            return None
        if resource == "":
            return await self.quick_pick_kind_name(kinds, opts)
        return resource

    async def quick_pick_kind_name(self, kinds: List[ResourceKind],
                                   opts: KindNameOptions) -> Optional[str]:
        if len(kinds) == 1:
            return await self.quick_pick_kind_name_from_kind(kinds[0], opts)

        picked = await self.prompter.quick_pick(
            [PickItem(label=k.display_name, value=k) for k in kinds]
        )
        if picked is None:
            return None
        return await self.quick_pick_kind_name_from_kind(picked.value, opts)

    async def quick_pick_kind_name_from_kind(self, kind: ResourceKind,
                                             opts: KindNameOptions) -> Optional[str]:
        names = await self.list_names(kind)
        names = [n for n in names if n not in opts.filter_names]

        if opts.name_optional:
            names.append(ALL_PICK)

        picked = await self.prompter.quick_pick([PickItem(label=n, value=n) for n in names])
        if picked is None:
            return None
        if picked.value == ALL_PICK:
            return kind.abbreviation
        return f"{kind.abbreviation}/{picked.value}"

    async def list_names(self, kind: ResourceKind) -> List[str]:
        """Names of every resource of `kind` in the cluster; never empty."""
        result = await self.kubectl.invoke_async(["get", kind.abbreviation])
        if result is None:
            raise LaunchError("kubectl", f"Unable to list resources of type {kind.display_name}")
        if not result.succeeded:
            raise CommandFailedError(result.stderr.strip(), result.stderr, result.code)

        names = parse_names_from_kubectl_lines(result.stdout)
        if not names:
            raise NoResourcesError(f"No resources of type {kind.display_name} in cluster")
        return names

    async def pick_resource_name(self, kind: ResourceKind, prompt: str) -> Optional[str]:
        names = await self.list_names(kind)
        picked = await self.prompter.quick_pick([PickItem(label=n, value=n) for n in names],
                                                placeholder=prompt)
        return picked.value if picked else None
