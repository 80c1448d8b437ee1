#!/usr/bin/env python3
"""
KUBEDECK EXPLAINER - API Field Documentation
--------------------------------------------
Reads the cluster's OpenAPI v2 document and walks it along a dotted
reference such as `Deployment.spec.template` to find the description of
a kind or one of its fields.

Author: KubeDeck Team
Date: 2026-10-18
"""

import json
import logging
from typing import Any, Dict, List, Optional

from kubedeck.core.errors import CommandFailedError, LaunchError
from kubedeck.shell.invoker import KubeInvoker

logger = logging.getLogger("kubedeck.explainer")

REF_PREFIX = "#/definitions/"


async def read_swagger(kubectl: KubeInvoker) -> Optional[Dict[str, Any]]:
    """Fetches /openapi/v2 through kubectl. Returns None if unusable."""
    result = await kubectl.invoke_async(["get", "--raw", "/openapi/v2"])
    if result is None:
        raise LaunchError("kubectl")
    if not result.succeeded:
        raise CommandFailedError(f"Explain failed: {result.stderr}", result.stderr, result.code)
    try:
        return json.loads(result.stdout)
    except json.JSONDecodeError as e:
        logger.warning(f"Cluster returned an unreadable API spec: {e}")
        return None


def _find_kind_definition(definitions: Dict[str, Any], kind: str) -> Optional[Dict[str, Any]]:
    lowered = kind.lower()
    for name, definition in definitions.items():
        for gvk in definition.get("x-kubernetes-group-version-kind", []):
            if gvk.get("kind", "").lower() == lowered:
                return definition
    # Fall back to the definition name suffix, e.g. io.k8s.api.apps.v1.Deployment
    for name, definition in definitions.items():
        if name.lower().endswith("." + lowered):
            return definition
    return None


def _resolve(definitions: Dict[str, Any], prop: Dict[str, Any]) -> Dict[str, Any]:
    ref = prop.get("$ref")
    if not ref and prop.get("type") == "array":
        ref = (prop.get("items") or {}).get("$ref")
    if ref and ref.startswith(REF_PREFIX):
        return definitions.get(ref[len(REF_PREFIX):], {})
    return prop


def _type_name(prop: Dict[str, Any]) -> str:
    if "$ref" in prop:
        return prop["$ref"].split(".")[-1]
    if prop.get("type") == "array":
        items = prop.get("items") or {}
        return f"[]{_type_name(items)}"
    return prop.get("type", "object")


def read_explanation(spec: Dict[str, Any], ref: str) -> Optional[str]:
    """
    Returns markdown describing `ref`, or None when any segment of the
    path is unknown.
    """
    definitions = spec.get("definitions", {})
    kind, _, path = ref.partition(".")
    current = _find_kind_definition(definitions, kind)
    if current is None:
        return None

    title = kind
    described: Dict[str, Any] = current
    for segment in [p for p in path.split(".") if p]:
        properties = current.get("properties") or {}
        prop = properties.get(segment)
        if prop is None:
            return None
        title = f"{title}.{segment}"
        described = prop
        current = _resolve(definitions, prop)

    lines: List[str] = [f"**{title}** ({_type_name(described)})", ""]
    description = described.get("description") or current.get("description")
    if description:
        lines.append(description)

    fields = current.get("properties") or {}
    if fields:
        lines.append("")
        for name in sorted(fields):
            lines.append(f"* {name} ({_type_name(fields[name])})")
    return "\n".join(lines)
